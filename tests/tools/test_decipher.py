import pytest
from click.testing import CliRunner

import elfcpu.tools.decipher as decipher
from elfcpu.runtime.decoder import UnknownOpcode, build

import unit_utils


def load_samples():
    return decipher.parse_samples(unit_utils.load_file('testdata/samples.txt'))


def test_parse_samples():
    (samples, raw_program) = load_samples()

    assert len(samples) == 5
    assert samples[3].before == [3, 2, 1, 1]
    assert samples[3].raw == [9, 2, 1, 2]
    assert samples[3].after == [3, 2, 2, 1]
    assert raw_program[0] == [0, 6, 0, 0]
    assert len(raw_program) == 6


def test_matching_three_opcodes():
    sample = decipher.Sample([3, 2, 1, 1], [9, 2, 1, 2], [3, 2, 2, 1])

    assert sorted(decipher.matching(sample)) == ['addi', 'mulr', 'seti']


def test_matching_skips_invalid_registers():
    # Every register-reading variant of A=7 fails on four registers
    sample = decipher.Sample([0, 0, 0, 0], [0, 7, 0, 1], [0, 7, 0, 0])

    assert decipher.matching(sample) == ['seti']


def test_count_ambiguous():
    (samples, _) = load_samples()

    assert decipher.count_ambiguous(samples) == 1
    assert decipher.count_ambiguous(samples, threshold=2) == 2


def test_resolve_by_elimination():
    (samples, _) = load_samples()

    assert decipher.resolve(samples) == {5: 'addr', 9: 'mulr', 2: 'borr', 0: 'seti'}


def test_resolve_ambiguous():
    sample = decipher.Sample([3, 4, 0, 0], [5, 0, 1, 2], [3, 4, 7, 0])

    with pytest.raises(decipher.DecipherError):
        decipher.resolve([sample])


def test_translate():
    mapping = {5: 'addr', 0: 'seti'}

    assert decipher.translate([[0, 6, 0, 0], [5, 2, 0, 0]], mapping) == [
        build('seti', 6, 0, 0),
        build('addr', 2, 0, 0),
    ]

    with pytest.raises(UnknownOpcode):
        decipher.translate([[3, 0, 0, 0]], mapping)


def test_cli():
    source = str(unit_utils.find_file('testdata/samples.txt'))
    result = CliRunner().invoke(decipher.decipher, [source])

    assert result.exit_code == decipher.EXIT_OK
    assert 'Part 1: 1' in result.output
    assert 'Part 2: 103' in result.output


def test_resolve_rejects_shared_mnemonic():
    # Both numerals can only be seti
    first = decipher.Sample([0, 0, 0, 0], [1, 7, 0, 1], [0, 7, 0, 0])
    second = decipher.Sample([0, 0, 0, 0], [2, 7, 0, 1], [0, 7, 0, 0])

    with pytest.raises(decipher.DecipherError, match='same mnemonic'):
        decipher.resolve([first, second])


def test_resolve_rejects_conflicting_samples():
    # Same numeral, once seti only and once mulr only
    seti = decipher.Sample([0, 0, 0, 0], [4, 7, 0, 1], [0, 7, 0, 0])
    mulr = decipher.Sample([3, 4, 0, 0], [4, 0, 1, 2], [3, 4, 12, 0])

    with pytest.raises(decipher.DecipherError, match='No mnemonic'):
        decipher.resolve([seti, mulr])


def test_resolve_rejects_emptied_candidates():
    # Numeral 1 is addr or borr; numerals 2 and 3 claim both
    both = decipher.Sample([3, 4, 0, 0], [1, 0, 1, 2], [3, 4, 7, 0])
    addr = decipher.Sample([5, 3, 0, 0], [2, 0, 1, 3], [5, 3, 0, 8])
    borr = decipher.Sample([5, 3, 0, 0], [3, 0, 1, 3], [5, 3, 0, 7])

    assert decipher.matching(addr) == ['addr']

    with pytest.raises(decipher.DecipherError, match='No mnemonic'):
        decipher.resolve([both, addr, borr])
