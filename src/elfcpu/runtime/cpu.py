import logging as lg
from typing import Sequence

import elfcpu.common.ops as ops
from elfcpu.common.hwconf import REGISTER_COUNT
from elfcpu.runtime.decoder import Instruction, Slot, Reg, Imm


class AluError(Exception):
    pass


class InvalidRegister(AluError):
    index: int

    def __init__(self, index: int, count: int):
        super().__init__(f'Invalid register {index} (register file has {count})')
        self.index = index


class CannotStoreToImmediate(AluError):
    pass


def load(slot: Slot, regs: Sequence[int]) -> int:
    if isinstance(slot, Imm):
        return slot.value

    index = slot.index

    if index < 0 or index >= len(regs):
        raise InvalidRegister(index, len(regs))

    return regs[index]


def check_store(slot: Slot, regs: Sequence[int]) -> int:
    if not isinstance(slot, Reg):
        raise CannotStoreToImmediate(f'Cannot store to immediate {slot}')

    index = slot.index

    if index < 0 or index >= len(regs):
        raise InvalidRegister(index, len(regs))

    return index


def execute(instruction: Instruction, regs: list[int]):
    '''
    Executes a single instruction against the register file.

    Only the destination register is written and only after every
    operand and the destination have been validated, so a failing
    instruction leaves the registers untouched.
    '''
    kind = instruction.kind
    a = load(instruction.a, regs)

    # SET passes A through; B is never read
    b = 0 if kind == ops.SET else load(instruction.b, regs)

    result = ops.OPERATIONS[kind](a, b)
    target = check_store(instruction.c, regs)
    regs[target] = result


class CPU():
    regs: list[int]  # Register file

    def __init__(self, count: int = REGISTER_COUNT):
        self.regs = [0] * count

    def eval(self, instruction: Instruction):
        execute(instruction, self.regs)

    # Samples and drivers force the whole register file
    def set_registers(self, values: Sequence[int]):
        if len(values) != len(self.regs):
            raise ValueError(f'Expected {len(self.regs)} registers, got {len(values)}')

        self.regs = list(values)

    def debug_dump(self):
        state = [f'{i}:{self.regs[i]}' for i in range(len(self.regs))]
        lg.debug(' '.join(state))
