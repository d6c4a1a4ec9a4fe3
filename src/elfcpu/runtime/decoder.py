''' Raw numeric instruction decoder '''

import logging as lg
from dataclasses import dataclass
from typing import Iterator, Sequence, TypeAlias

import elfcpu.common.ops as ops


class DecodeError(Exception):
    pass


class MalformedEncoding(DecodeError):
    pass


class UnknownOpcode(DecodeError):
    pass


class UnknownMnemonic(DecodeError):
    pass


@dataclass(frozen=True)
class Reg:
    index: int

    def __str__(self) -> str:
        return str(self.index)


@dataclass(frozen=True)
class Imm:
    value: int

    def __str__(self) -> str:
        return str(self.value)


Slot: TypeAlias = Reg | Imm


def make_slot(kind: str, value: int) -> Slot:
    if kind == ops.REG:
        return Reg(value)

    return Imm(value)


@dataclass(frozen=True)
class Instruction:
    mnemonic: str
    a: Slot
    b: Slot
    c: Slot

    @property
    def numeral(self) -> int:
        return ops.NUMERALS[self.mnemonic]

    @property
    def kind(self) -> str:
        return ops.OPCODES[self.numeral].kind

    def encode(self) -> tuple[int, int, int, int]:
        return (self.numeral, raw_value(self.a), raw_value(self.b), raw_value(self.c))

    def __str__(self) -> str:
        return f'{self.mnemonic} {self.a} {self.b} {self.c}'


def raw_value(slot: Slot) -> int:
    if isinstance(slot, Reg):
        return slot.index

    return slot.value


def decode(raw: Sequence[int]) -> Instruction:
    '''
    Decodes [numeral, a, b, c] into an Instruction.

    Register indices are stored as given; range checks happen on execution.
    '''
    if len(raw) != 4:
        raise MalformedEncoding(f'Expected 4 integers, got {len(raw)}')

    (numeral, a, b, c) = raw

    # bool and float numerals hash like the ints they equal
    spec = ops.OPCODES.get(numeral) if type(numeral) is int else None

    if spec is None:
        raise UnknownOpcode(f'Unknown opcode numeral {numeral}')

    return Instruction(spec.mnemonic, make_slot(spec.a, a), make_slot(spec.b, b), Reg(c))


def build(mnemonic: str, a: int, b: int, c: int) -> Instruction:
    numeral = ops.NUMERALS.get(mnemonic)

    if numeral is None:
        raise UnknownMnemonic(f'Unknown mnemonic {mnemonic}')

    return decode([numeral, a, b, c])


def try_all(a: int, b: int, c: int) -> Iterator[Instruction]:
    ''' Every instruction sharing the operands, one per numeral '''
    for numeral in range(len(ops.OPCODES)):
        instruction = decode([numeral, a, b, c])
        lg.debug(f'Trying {instruction}')
        yield instruction
