import pytest

from n64bus.registers import AIStatus, DPCStatus, MIPSInterrupt, PIStatus


def test_default_value_is_zero():
    assert PIStatus().value == 0
    assert DPCStatus().dma_busy == 0


def test_field_sets_value_bit():
    status = PIStatus()
    status.dma_completed = 1
    assert status.value == 1 << 3
    status.dma_busy = 1
    assert status.value == (1 << 3) | 1


def test_value_sets_fields():
    status = DPCStatus(1 << 10)
    assert status.start_pending == 1
    assert status.freeze == 0


def test_field_truncated_to_width():
    status = MIPSInterrupt()
    status.pi_interrupt = 3
    assert status.pi_interrupt == 1
    assert status.value == 1 << 4


@pytest.mark.parametrize(
    "name, bit",
    [
        ("sp_interrupt", 0),
        ("si_interrupt", 1),
        ("ai_interrupt", 2),
        ("vi_interrupt", 3),
        ("pi_interrupt", 4),
        ("dp_interrupt", 5),
    ],
)
def test_mips_interrupt_layout(name, bit):
    reg = MIPSInterrupt()
    setattr(reg, name, 1)
    assert reg.value == 1 << bit


def test_ai_count_is_fifteen_bits():
    status = AIStatus()
    status.count = 0x7FFF
    assert status.value == 0x7FFF << 1
    assert status.dma_full1 == 0


def test_ai_dma_busy_is_top_bit():
    status = AIStatus()
    status.dma_busy = 1
    assert status.value == 0x80000000


def test_ai_dma_full2_outside_value():
    status = AIStatus()
    status.dma_full2 = 1
    assert status.value == 0
    status.value = 0
    assert status.dma_full2 == 1


def test_value_masked_to_32_bits():
    status = PIStatus(0x1_0000_000F)
    assert status.value == 0xF
    assert status.io_busy == 1


def test_equality():
    assert PIStatus(5) == PIStatus(5)
    assert PIStatus(5) != PIStatus(4)