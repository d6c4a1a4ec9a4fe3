''' Recovers the numeral -> mnemonic mapping of an unknown device from register samples '''

import sys
import logging as lg
import traceback
from pathlib import Path

import click

from elfcpu.common.hwconf import SAMPLE_REGISTER_COUNT
from elfcpu.runtime.decoder import Instruction, DecodeError, UnknownOpcode, build, try_all
import elfcpu.runtime.cpu as cpu
import elfcpu.runtime.emulator as emulator
import elfcpu.sasm.asm as asm
import elfcpu.sasm.grammar as grammar


EXIT_OK = 0
EXIT_AMBIGUOUS = 2


class DecipherError(Exception):
    pass


class Sample:
    before: list[int]
    raw: list[int]
    after: list[int]

    def __init__(self, before: list[int], raw: list[int], after: list[int]):
        self.before = before
        self.raw = raw
        self.after = after

    def __repr__(self) -> str:
        return f'Sample({self.before} {self.raw} {self.after})'


def parse_samples(text: str) -> tuple[list[Sample], list[list[int]]]:
    ''' Splits a sample log into samples and the raw program that follows them '''
    samples = []
    tail = 0

    for tokens, _, end in grammar.sample.scan_string(text):
        samples.append(Sample(
            list(tokens['before']),
            list(tokens['instruction']),
            list(tokens['after'])
        ))
        tail = end

    lg.info(f'Parsed {len(samples)} samples')
    return (samples, asm.parse_raw(text[tail:]))


def matching(sample: Sample) -> list[str]:
    proc = cpu.CPU(len(sample.before))
    (_, a, b, c) = sample.raw
    found = []

    for instruction in try_all(a, b, c):
        proc.set_registers(sample.before)

        try:
            proc.eval(instruction)
        except cpu.AluError:
            continue

        if proc.regs == sample.after:
            found.append(instruction.mnemonic)

    return found


def count_ambiguous(samples: list[Sample], threshold: int = 3) -> int:
    return sum(1 for s in samples if len(matching(s)) >= threshold)


def resolve(samples: list[Sample]) -> dict[int, str]:
    candidates: dict[int, set[str]] = {}

    for sample in samples:
        numeral = sample.raw[0]
        found = set(matching(sample))

        if numeral in candidates:
            candidates[numeral] &= found
        else:
            candidates[numeral] = found

    known: dict[int, str] = {}

    while candidates:
        empty = [n for n, m in candidates.items() if not m]

        if empty:
            raise DecipherError(f'No mnemonic fits the samples of numerals {empty}')

        decided = {n: next(iter(m)) for n, m in candidates.items() if len(m) == 1}

        if not decided:
            raise DecipherError(f'Samples leave numerals ambiguous: {candidates}')

        if len(set(decided.values())) != len(decided):
            raise DecipherError(f'Several numerals resolve to the same mnemonic: {decided}')

        for numeral, mnemonic in decided.items():
            lg.debug(f'Numeral {numeral} is {mnemonic}')
            known[numeral] = mnemonic
            del candidates[numeral]

        for remaining in candidates.values():
            remaining -= set(decided.values())

    return known


def translate(raw_program: list[list[int]], mapping: dict[int, str]) -> list[Instruction]:
    instructions = []

    for (numeral, a, b, c) in raw_program:
        if numeral not in mapping:
            raise UnknownOpcode(f'Numeral {numeral} never appeared in the samples')

        instructions.append(build(mapping[numeral], a, b, c))

    return instructions


@click.command()
@click.option('-v', '--verbose', is_flag=True, help='Sets logging level to debug')
@click.option('-t', '--threshold', type=int, default=3, help='Opcode count for an ambiguous sample')
@click.argument('source', type=Path)
def decipher(verbose: bool, threshold: int, source: Path):
    lg.basicConfig(level=lg.DEBUG if verbose else lg.INFO)
    lg.info('ELFCPU DECIPHER')

    try:
        (samples, raw_program) = parse_samples(source.read_text())
        print(f'Part 1: {count_ambiguous(samples, threshold)}')

        mapping = resolve(samples)
        proc = cpu.CPU(SAMPLE_REGISTER_COUNT)
        emulator.run_straight(translate(raw_program, mapping), proc)
        print(f'Part 2: {proc.regs[0]}')
        sys.exit(EXIT_OK)

    except (DecipherError, DecodeError) as e:
        lg.info(f'Unable to decipher: {e}')
        sys.exit(EXIT_AMBIGUOUS)

    except Exception as e:
        lg.info(f'Halted on general error {e}')
        traceback.print_exc()
        sys.exit(emulator.EXIT_EXEC_ERROR)


if __name__ == '__main__':
    decipher()
