import sys
from pathlib import Path
import logging as lg
import traceback
from typing import Callable, Sequence, TypeAlias

import click

from elfcpu.common.hwconf import REGISTER_COUNT, STEP_LIMIT
from elfcpu.runtime.decoder import Instruction, DecodeError
import elfcpu.runtime.cpu as cpu
import elfcpu.sasm.asm as asm


EXIT_HALT = 0
EXIT_DECODE_ERROR = 1
EXIT_KEYBOARD = 3
EXIT_STEP_LIMIT = 4
EXIT_EXEC_ERROR = 100


class StepLimit(Exception):
    steps: int

    def __init__(self, steps: int):
        super().__init__(f'Step limit of {steps} reached')
        self.steps = steps


# Called after an instruction has executed successfully, before the IP register advances.
# Returning True stops the run.
Breakpoint: TypeAlias = Callable[[int, cpu.CPU], bool]


def eval_logged(proc: cpu.CPU, instruction: Instruction, strict: bool) -> bool:
    try:
        proc.eval(instruction)
    except cpu.AluError as e:
        if strict:
            raise

        lg.error(f'ALU error: {e}: {instruction}')
        return False

    return True


def run_straight(program: Sequence[Instruction], proc: cpu.CPU, strict: bool = False):
    ''' Executes every instruction once, in order '''
    for instruction in program:
        eval_logged(proc, instruction, strict)

    proc.debug_dump()


def run_bound(
    program: Sequence[Instruction],
    proc: cpu.CPU,
    ip_register: int,
    breakpoint: Breakpoint | None = None,
    max_steps: int | None = None,
    strict: bool = False
) -> int:
    '''
    Executes the program with one register serving as the instruction pointer.

    The loop reads the IP register, fetches and executes the instruction it
    points at, then increments the IP register. It ends when the IP falls
    outside the program or when the breakpoint asks to stop. Returns the
    number of executed instructions.
    '''
    if ip_register < 0 or ip_register >= len(proc.regs):
        raise cpu.InvalidRegister(ip_register, len(proc.regs))

    trace = lg.getLogger().isEnabledFor(lg.DEBUG)
    steps = 0

    while 0 <= proc.regs[ip_register] < len(program):
        if max_steps is not None and steps >= max_steps:
            raise StepLimit(steps)

        ip = proc.regs[ip_register]
        instruction = program[ip]
        before = list(proc.regs) if trace else None

        ok = eval_logged(proc, instruction, strict)
        steps += 1

        if trace:
            lg.debug(f'ip={ip} {before} {instruction} {proc.regs}')

        if ok and breakpoint is not None and breakpoint(ip, proc):
            lg.info(f'Breakpoint at ip={ip} after {steps} steps')
            break

        proc.regs[ip_register] += 1

    return steps


def execute(
    program: asm.Program,
    count: int = REGISTER_COUNT,
    r0: int = 0,
    max_steps: int | None = None,
    strict: bool = False
) -> list[int]:
    proc = cpu.CPU(count)
    proc.regs[0] = r0

    if program.ip_register is None:
        run_straight(program, proc, strict)
    else:
        steps = run_bound(program, proc, program.ip_register, max_steps=max_steps, strict=strict)
        lg.info(f'Halted after {steps} steps')

    return proc.regs


@click.command()
@click.option('-v', '--verbose', is_flag=True, help='Sets logging level to debug')
@click.option('--raw', is_flag=True, help='Source is a raw numeric program')
@click.option('-r', '--registers', type=int, default=REGISTER_COUNT, help='Register file size')
@click.option('--ip', 'ip_register', type=int, default=None, help='Instruction pointer register')
@click.option('--r0', type=int, default=0, help='Initial value of register 0')
@click.option('--strict', is_flag=True, help='Stop on the first bad line or ALU error')
@click.option('--max-steps', type=int, default=STEP_LIMIT, help='Step limit for IP-bound runs')
@click.argument('source', type=Path)
def run(
    verbose: bool, raw: bool, registers: int, ip_register: int | None, r0: int,
    strict: bool, max_steps: int, source: Path
):
    lg.basicConfig(level=lg.DEBUG if verbose else lg.INFO)
    lg.info('ELFCPU')

    try:
        program = asm.collect_file(source, raw=raw, strict=strict)

        if ip_register is not None:
            program.ip_register = ip_register

        regs = execute(program, registers, r0, max_steps, strict)
        print(' '.join(str(r) for r in regs))
        sys.exit(EXIT_HALT)

    except (asm.SourceError, DecodeError) as e:
        lg.info(f'Program rejected: {e}')
        sys.exit(EXIT_DECODE_ERROR)

    except StepLimit as e:
        lg.info(f'Execution halted: {e}')
        sys.exit(EXIT_STEP_LIMIT)

    except KeyboardInterrupt:
        lg.info('Execution halted by the user')
        sys.exit(EXIT_KEYBOARD)

    except Exception as e:
        lg.info(f'Execution halted on general error {e}')
        traceback.print_exc()
        sys.exit(EXIT_EXEC_ERROR)


if __name__ == '__main__':
    run()
