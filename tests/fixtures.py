# type: ignore
import pytest

import elfcpu.runtime.cpu as cpu
from elfcpu.common.hwconf import SAMPLE_REGISTER_COUNT

import unit_utils


@pytest.fixture
def with_sample_cpu():
    proc = cpu.CPU(SAMPLE_REGISTER_COUNT)
    proc.set_registers([10, 3, 0, 0])
    yield proc


@pytest.fixture
def with_divisors():
    yield unit_utils.load_program('testdata/divisors.elf')


@pytest.fixture
def with_watch():
    yield unit_utils.load_program('testdata/watch.elf')
