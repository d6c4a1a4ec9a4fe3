''' Records the values a register takes at a breakpoint until they start repeating '''

import sys
import logging as lg
import traceback
from pathlib import Path
from typing import Sequence

import click

from elfcpu.common.hwconf import REGISTER_COUNT, STEP_LIMIT
from elfcpu.runtime.decoder import Instruction
import elfcpu.runtime.cpu as cpu
import elfcpu.runtime.emulator as emulator
import elfcpu.sasm.asm as asm


def watch(
    program: Sequence[Instruction],
    ip_register: int,
    at: int,
    register: int,
    r0: int = 0,
    count: int = REGISTER_COUNT,
    max_steps: int | None = None
) -> list[int]:
    '''
    Runs the program and collects the value of `register` each time the
    instruction at `at` has executed. Stops on the first repeated value,
    or when the program halts on its own. Values keep their first-seen order.
    '''
    proc = cpu.CPU(count)
    proc.regs[0] = r0

    if register < 0 or register >= count:
        raise cpu.InvalidRegister(register, count)

    seen: set[int] = set()
    values: list[int] = []

    def on_step(ip: int, proc: cpu.CPU) -> bool:
        if ip != at:
            return False

        value = proc.regs[register]

        if value in seen:
            lg.debug(f'Value {value} repeats after {len(values)} distinct values')
            return True

        seen.add(value)
        values.append(value)
        return False

    emulator.run_bound(program, proc, ip_register, breakpoint=on_step, max_steps=max_steps)
    return values


@click.command()
@click.option('-v', '--verbose', is_flag=True, help='Sets logging level to debug')
@click.option('--ip', 'ip_register', type=int, default=None, help='Instruction pointer register')
@click.option('--at', type=int, required=True, help='Breakpoint instruction index')
@click.option('--register', type=int, required=True, help='Register to record')
@click.option('--r0', type=int, default=0, help='Initial value of register 0')
@click.option('--max-steps', type=int, default=STEP_LIMIT, help='Step limit')
@click.argument('source', type=Path)
def watch_command(
    verbose: bool, ip_register: int | None, at: int, register: int, r0: int,
    max_steps: int, source: Path
):
    lg.basicConfig(level=lg.DEBUG if verbose else lg.INFO)
    lg.info('ELFCPU WATCH')

    try:
        program = asm.collect_file(source)

        if ip_register is not None:
            program.ip_register = ip_register

        if program.ip_register is None:
            raise click.UsageError('Program has no #ip header; pass --ip')

        values = watch(program, program.ip_register, at, register, r0, max_steps=max_steps)

        if not values:
            print('Breakpoint never reached')
        else:
            print(f'First: {values[0]}')
            print(f'Last: {values[-1]}')

        sys.exit(emulator.EXIT_HALT)

    except click.UsageError:
        raise

    except emulator.StepLimit as e:
        lg.info(f'Execution halted: {e}')
        sys.exit(emulator.EXIT_STEP_LIMIT)

    except Exception as e:
        lg.info(f'Execution halted on general error {e}')
        traceback.print_exc()
        sys.exit(emulator.EXIT_EXEC_ERROR)


if __name__ == '__main__':
    watch_command()
