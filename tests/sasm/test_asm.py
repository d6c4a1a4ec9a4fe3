import logging as lg
from collections.abc import Sequence

import pytest

import elfcpu.sasm.asm as asm
from elfcpu.runtime.decoder import UnknownOpcode, build, decode

import unit_utils


def test_load_text_with_directive():
    program = asm.load_text('#ip 2\nseti 5 0 1\naddi 1 -3 0\n')

    assert program.ip_register == 2
    assert program.instructions == [build('seti', 5, 0, 1), build('addi', 1, -3, 0)]


def test_load_text_without_directive():
    program = asm.load_text('mulr 1 2 3\n\n  eqrr 0 1 2  \n')

    assert program.ip_register is None
    assert [str(i) for i in program] == ['mulr 1 2 3', 'eqrr 0 1 2']


def test_load_text_skips_bad_lines(caplog):
    source = 'addr 0 1 2\nsubr 0 1 2\naddi 0 x 2\nmuli 0 2\naddi 0 1 2 3\nbanr 1 1 1\n'

    with caplog.at_level(lg.WARNING):
        program = asm.load_text(source)

    assert [str(i) for i in program] == ['addr 0 1 2', 'banr 1 1 1']
    assert len([r for r in caplog.records if r.levelno == lg.WARNING]) == 4


def test_load_text_strict():
    with pytest.raises(asm.SourceError) as e:
        asm.load_text('addr 0 1 2\nsubr 0 1 2\n', strict=True)

    assert 'Line 2' in str(e.value)


def test_mnemonic_prefix_is_not_accepted():
    assert len(asm.load_text('addrr 0 1 2')) == 0


def test_program_str_round_trip():
    program = unit_utils.load_program('testdata/divisors.elf')
    again = asm.load_text(str(program))

    assert again.ip_register == 3
    assert again.instructions == program.instructions
    assert str(again).splitlines() == unit_utils.load_file('testdata/divisors.elf').splitlines()


def test_load_raw():
    instructions = asm.load_raw(unit_utils.load_file('testdata/straight.txt'))

    assert instructions == [
        decode([8, 10, 0, 0]),
        decode([8, 3, 0, 1]),
        decode([6, 0, 1, 2]),
        decode([14, 2, 1, 3]),
    ]


def test_load_raw_lenient_and_strict():
    source = '6 0 1 2\n16 0 1 2\n6 0 1\n14 2 1 3\n'

    assert [str(i) for i in asm.load_raw(source)] == ['addr 0 1 2', 'mulr 2 1 3']

    with pytest.raises(UnknownOpcode):
        asm.load_raw('6 0 1 2\n16 0 1 2\n', strict=True)

    with pytest.raises(asm.SourceError):
        asm.load_raw('6 0 1\n', strict=True)


def test_collect_file_raw():
    program = asm.collect_file(str(unit_utils.find_file('testdata/straight.txt')), raw=True)

    assert program.ip_register is None
    assert len(program) == 4


def test_program_is_a_sequence():
    program = asm.load_text('#ip 1\nseti 1 0 0\naddi 0 2 0\nmulr 0 0 0\n')

    assert isinstance(program, Sequence)
    assert program[-1] == build('mulr', 0, 0, 0)
    assert program[1:] == [build('addi', 0, 2, 0), build('mulr', 0, 0, 0)]
    assert build('addi', 0, 2, 0) in program
    assert program.index(build('mulr', 0, 0, 0)) == 2
