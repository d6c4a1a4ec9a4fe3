import logging as lg
from pathlib import Path
from collections.abc import Sequence
from typing import Iterator

import pyparsing as pp

import elfcpu.sasm.grammar as grammar
from elfcpu.common.hwconf import IP_DIRECTIVE
from elfcpu.runtime.decoder import Instruction, DecodeError, decode, build


class SourceError(Exception):
    pass


class Program(Sequence[Instruction]):
    instructions: list[Instruction]
    ip_register: int | None  # Register bound to the instruction pointer

    def __init__(self, instructions: list[Instruction] | None = None,
                 ip_register: int | None = None):
        self.instructions = instructions if instructions is not None else []
        self.ip_register = ip_register

    def __len__(self) -> int:
        return len(self.instructions)

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.instructions)

    def __getitem__(self, ip):
        return self.instructions[ip]

    def __str__(self) -> str:
        lines = [str(i) for i in self.instructions]

        if self.ip_register is not None:
            lines.insert(0, f'{IP_DIRECTIVE} {self.ip_register}')

        return '\n'.join(lines)


def reject(lineno: int, line: str, reason: str, strict: bool):
    message = f'Line {lineno}: {reason} ({line!r})'

    if strict:
        raise SourceError(message)

    lg.warning(f'Skipping {message}')


def load_text(source: str, strict: bool = False) -> Program:
    ''' Textual assembly: optional "#ip <n>" header, then "<mnemonic> <a> <b> <c>" lines '''
    program = Program()

    for lineno, line in enumerate(source.splitlines(), start=1):
        if not line.strip():
            continue

        try:
            (ip_register,) = grammar.ip_directive.parse_string(line, parse_all=True)
            lg.debug(f'Instruction pointer bound to register {ip_register}')
            program.ip_register = ip_register
            continue
        except pp.ParseException:
            pass

        try:
            (mnemonic, a, b, c) = grammar.text_instruction.parse_string(line, parse_all=True)
        except pp.ParseException as e:
            reject(lineno, line, f'syntax error at column {e.column}', strict)
            continue

        try:
            program.instructions.append(build(mnemonic, a, b, c))
        except DecodeError as e:
            reject(lineno, line, str(e), strict)

    lg.info(f'Loaded {len(program)} instructions')
    return program


def load_raw(source: str, strict: bool = False) -> list[Instruction]:
    ''' Raw numeric program: "<numeral> <a> <b> <c>" lines '''
    return decode_raw(parse_raw(source, strict), strict)


def parse_raw(source: str, strict: bool = False) -> list[list[int]]:
    raw_program = []

    for lineno, line in enumerate(source.splitlines(), start=1):
        if not line.strip():
            continue

        try:
            (raw,) = grammar.raw_instruction.parse_string(line, parse_all=True)
        except pp.ParseException as e:
            reject(lineno, line, f'syntax error at column {e.column}', strict)
            continue

        raw_program.append(list(raw))

    return raw_program


def decode_raw(raw_program: list[list[int]], strict: bool = False) -> list[Instruction]:
    instructions = []

    for inx, raw in enumerate(raw_program):
        try:
            instructions.append(decode(raw))
        except DecodeError as e:
            if strict:
                raise

            lg.warning(f'Skipping instruction {inx}: {e}')

    return instructions


def collect_file(filepath: str | Path, raw: bool = False, strict: bool = False) -> Program:
    if isinstance(filepath, str):
        filepath = Path(filepath)

    lg.debug(f'Collecting file {filepath}')
    contents = filepath.read_text()

    if raw:
        return Program(load_raw(contents, strict))

    return load_text(contents, strict)
