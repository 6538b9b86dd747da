import pytest

from n64bus.cartridge import SaveType
from n64bus.memory import Rdram
from n64bus.peripheral import PeripheralInterface
from n64bus.pidma import (
    adjusted_length,
    dma_cart_write,
    dma_flash_read,
    dma_flash_write,
    dma_sram_read,
    dma_sram_write,
)
from n64bus.saves import FLASH_ID, SILICON_ID, FlashMode, SaveStorage


@pytest.fixture
def rdram():
    return Rdram(0x1000)


@pytest.mark.parametrize("length", [2, 16, 0x80, 0x200])
def test_even_aligned_length_unchanged(length):
    assert adjusted_length(length, 0, 0x7F) == length


@pytest.mark.parametrize("length", [0x7F, 0x81, 0x201])
def test_odd_long_length_rounded_up(length):
    assert adjusted_length(length, 0, 0x7F) == length + 1


def test_cart_threshold_keeps_0x7f_odd():
    assert adjusted_length(0x7F, 0, 0x80) == 0x7F


@pytest.mark.parametrize("dram", [1, 3, 7])
def test_short_length_loses_misalignment(dram):
    assert adjusted_length(16, dram, 0x7F) == 16 - dram


def test_length_never_negative():
    assert adjusted_length(1, 7, 0x7F) == 0


def test_cart_write_copies_rom(rdram):
    rom = bytes(range(64))
    pi = PeripheralInterface(cart_address=0x10000000, dram_address=0x100, wr_len=15)
    cycles = dma_cart_write(pi, rdram, rom)
    assert [rdram.read8(0x100 + i) for i in range(16)] == list(rom[:16])
    assert cycles == PeripheralInterface().calculate_cycles(1, 16)
    assert pi.status.dma_busy == 1
    assert pi.dram_address == 0x110
    assert pi.cart_address & 1 == 0
    assert pi.cart_address > 0x10000000


def test_cart_write_past_rom_reads_zero(rdram):
    rdram.write32(0x200, 0xFFFFFFFF)
    rdram.write32(0x204, 0xFFFFFFFF)
    rom = bytes([0xAB] * 4)
    pi = PeripheralInterface(cart_address=0x10000000, dram_address=0x200, wr_len=7)
    dma_cart_write(pi, rdram, rom)
    assert [rdram.read8(0x200 + i) for i in range(8)] == [0xAB] * 4 + [0] * 4


def test_sram_write_to_rdram(rdram):
    saves = SaveStorage([SaveType.SRAM])
    saves.format_sram()
    saves.sram[0x10:0x18] = bytes(range(1, 9))
    pi = PeripheralInterface(cart_address=0x08000010, dram_address=0x100, wr_len=7)
    dma_sram_write(pi, rdram, saves)
    assert [rdram.read8(0x100 + i) for i in range(8)] == list(range(1, 9))


def test_sram_read_from_rdram(rdram):
    saves = SaveStorage([SaveType.SRAM])
    for i in range(8):
        rdram.write8(0x300 + i, 0x40 + i)
    pi = PeripheralInterface(cart_address=0x08000020, dram_address=0x300, rd_len=7)
    dma_sram_read(pi, rdram, saves)
    assert list(saves.sram[0x20:0x28]) == [0x40 + i for i in range(8)]
    assert saves.time_since_save_write > 0


def test_sram_read_stops_at_end(rdram):
    saves = SaveStorage([SaveType.SRAM])
    saves.format_sram()
    size = len(saves.sram)
    pi = PeripheralInterface(
        cart_address=0x08000000 + size - 4, dram_address=0x100, rd_len=7)
    dma_sram_read(pi, rdram, saves)
    assert len(saves.sram) == size
    assert list(saves.sram[-4:]) == [0, 0, 0, 0]


def test_flash_write_silicon_id(rdram):
    saves = SaveStorage([SaveType.FLASH])
    saves.flash_mode = FlashMode.READ_SILICON_ID
    pi = PeripheralInterface(cart_address=0x08000000, dram_address=0x400, wr_len=7)
    dma_flash_write(pi, rdram, saves)
    assert rdram.read32(0x400) == FLASH_ID
    assert rdram.read32(0x404) == SILICON_ID


def test_flash_write_read_array(rdram):
    saves = SaveStorage([SaveType.FLASH])
    saves.format_flash()
    saves.flash[0x20:0x28] = bytes(range(10, 18))
    pi = PeripheralInterface(cart_address=0x08000010, dram_address=0x400, wr_len=7)
    dma_flash_write(pi, rdram, saves)
    assert [rdram.read8(0x400 + i) for i in range(8)] == list(range(10, 18))


def test_flash_write_other_mode_leaves_rdram(rdram):
    saves = SaveStorage([SaveType.FLASH])
    saves.flash_mode = FlashMode.STATUS
    pi = PeripheralInterface(cart_address=0x08000000, dram_address=0x400, wr_len=7)
    dma_flash_write(pi, rdram, saves)
    assert [rdram.read8(0x400 + i) for i in range(8)] == [0] * 8


def test_flash_read_fills_page_buffer(rdram):
    saves = SaveStorage([SaveType.FLASH])
    saves.flash_mode = FlashMode.PAGE_PROGRAM
    for i in range(128):
        rdram.write8(0x800 + i, i ^ 0x5A)
    pi = PeripheralInterface(cart_address=0x08000000, dram_address=0x800, rd_len=127)
    cycles = dma_flash_read(pi, rdram, saves)
    assert list(saves.flash_buffer) == [i ^ 0x5A for i in range(128)]
    assert cycles == PeripheralInterface().calculate_cycles(2, 128)


def test_flash_read_wrong_mode_raises(rdram):
    saves = SaveStorage([SaveType.FLASH])
    saves.flash_mode = FlashMode.READ_ARRAY
    pi = PeripheralInterface(cart_address=0x08000000, dram_address=0x800, rd_len=127)
    with pytest.raises(ValueError):
        dma_flash_read(pi, rdram, saves)


def test_flash_read_wrong_length_raises(rdram):
    saves = SaveStorage([SaveType.FLASH])
    saves.flash_mode = FlashMode.PAGE_PROGRAM
    pi = PeripheralInterface(cart_address=0x08000000, dram_address=0x800, rd_len=63)
    with pytest.raises(ValueError):
        dma_flash_read(pi, rdram, saves)