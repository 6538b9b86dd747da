"""Peripheral interface DMA between RDRAM and cartridge, SRAM and flash.

Each transfer returns the CPU cycles it takes; the caller schedules the
completion event.
"""

from __future__ import annotations

import time

from .memory import Rdram
from .peripheral import PeripheralInterface
from .saves import FLASH_ID, SILICON_ID, FlashMode, SaveStorage

_WORD = 0xFFFFFFFF
_CART_THRESHOLD = 0x80
_SAVE_THRESHOLD = 0x7F


def adjusted_length(length: int, dram_address: int, threshold: int) -> int:
    """Effective transfer length for a requested ``length``.

    Odd lengths of at least ``threshold`` are rounded up; short transfers
    lose the misaligned part of the RDRAM address. Never below zero.
    """
    if length >= threshold and length & 1:
        length += 1
    if length <= 0x80:
        length -= dram_address & 0x7
    return max(length, 0)


def dma_cart_write(pi: PeripheralInterface, rdram: Rdram, rom: bytes) -> int:
    """Copy cartridge ROM into RDRAM; bytes past the ROM read as zero."""
    dram = pi.dram_address & 0xFFFFFF
    cart = pi.cart_address & 0xFFFFFFF
    length = adjusted_length(pi.wr_len + 1, dram, _CART_THRESHOLD)

    for i in range(length):
        source = cart + i
        rdram.write8(dram + i, rom[source] if source < len(rom) else 0)

    pi.dram_address = ((pi.dram_address + length + 7) & ~0x7) & _WORD
    pi.cart_address = ((pi.cart_address + length + 1) & ~0x1) & _WORD
    pi.status.dma_busy = 1
    return pi.calculate_cycles(1, length)


def dma_sram_write(pi: PeripheralInterface, rdram: Rdram, saves: SaveStorage) -> int:
    """Copy SRAM into RDRAM."""
    cart = pi.cart_address & 0xFFFF
    dram = pi.dram_address & 0xFFFFFF
    length = adjusted_length(pi.wr_len + 1, dram, _SAVE_THRESHOLD)

    saves.format_sram()
    for i in range(length):
        if cart + i >= len(saves.sram):
            break
        rdram.write8(dram + i, saves.sram[cart + i])

    return pi.calculate_cycles(2, length)


def dma_sram_read(pi: PeripheralInterface, rdram: Rdram, saves: SaveStorage) -> int:
    """Copy RDRAM into SRAM."""
    cart = pi.cart_address & 0xFFFF
    dram = pi.dram_address & 0xFFFFFF
    length = adjusted_length(pi.rd_len + 1, dram, _SAVE_THRESHOLD)

    saves.format_sram()
    for i in range(length):
        if cart + i >= len(saves.sram):
            break
        saves.sram[cart + i] = rdram.read8(dram + i)

    saves.time_since_save_write = time.time_ns() // 1_000_000
    return pi.calculate_cycles(2, length)


def dma_flash_write(pi: PeripheralInterface, rdram: Rdram, saves: SaveStorage) -> int:
    """Copy the flash chip's ids or array contents into RDRAM."""
    dram = pi.dram_address & 0xFFFFFE
    cart = pi.cart_address
    length = adjusted_length(pi.wr_len + 1, dram, _SAVE_THRESHOLD)

    if (cart & 0x1FFFF) == 0 and length == 8 and saves.flash_mode is FlashMode.READ_SILICON_ID:
        rdram.write32(dram, FLASH_ID)
        rdram.write32(dram + 4, SILICON_ID)
    elif (cart & 0x1FFFF) < 0x10000 and saves.flash_mode is FlashMode.READ_ARRAY:
        saves.format_flash()
        source = (cart & 0xFFFF) * 2
        for i in range(length):
            rdram.write8(dram + i, saves.flash[source + i])

    return pi.calculate_cycles(2, length)


def dma_flash_read(pi: PeripheralInterface, rdram: Rdram, saves: SaveStorage) -> int:
    """Copy a 128-byte page from RDRAM into the flash page buffer."""
    dram = pi.dram_address & 0xFFFFFE
    cart = pi.cart_address
    length = adjusted_length(pi.rd_len + 1, dram, _SAVE_THRESHOLD)

    if (cart & 0x1FFFF) == 0 and length == 128 and saves.flash_mode is FlashMode.PAGE_PROGRAM:
        saves.flash_buffer[:] = bytes(rdram.read8(dram + i) for i in range(length))
    else:
        raise ValueError("invalid dma flash read option given")

    return pi.calculate_cycles(2, length)