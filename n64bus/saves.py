"""Save memory: EEPROM, SRAM and flash, with their backing files."""

from __future__ import annotations

import os
import time
from enum import Enum, auto

from .cartridge import SaveType

EEPROM_4K = 0x8000
EEPROM_16K = 0xC000

EEPROM_SIZE = 0x800
SRAM_SIZE = 0x8000
FLASH_SIZE = 0x20000
SECTOR_SIZE = 0x4000

FLASH_ID = 0x11118001
SILICON_ID = 0xC2001E
FLASHBUF_SIZE = 128


class FlashMode(Enum):
    """Modes of the flash save chip."""

    ERASE_SECTOR = auto()
    ERASE_CHIP = auto()
    STATUS = auto()
    PAGE_PROGRAM = auto()
    READ_SILICON_ID = auto()
    READ_ARRAY = auto()


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class SaveStorage:
    """Save memories of one cartridge and the file they are kept in."""

    def __init__(self, save_types: list[SaveType]) -> None:
        self.save_types = list(save_types)
        self.eeprom = bytearray()
        self.sram = bytearray()
        self.flash = bytearray()
        self.flash_buffer = bytearray(FLASHBUF_SIZE)
        self.flash_mode = FlashMode.READ_ARRAY
        self.flash_status = 0
        self.flash_sector = 0
        self.time_since_save_write = 0
        self.save_path: str | os.PathLike | None = None

    def _buffer_for(self, save_type: SaveType) -> str | None:
        if save_type in (SaveType.EEPROM_4K, SaveType.EEPROM_16K):
            return "eeprom"
        if save_type is SaveType.FLASH:
            return "flash"
        if save_type is SaveType.SRAM:
            return "sram"
        if save_type is SaveType.MEMPAK:
            raise ValueError("mempak saves are not supported")
        return None

    def _touch(self) -> None:
        self.time_since_save_write = _now_ms()

    @staticmethod
    def _formatted(buffer: bytearray, size: int) -> bytearray:
        if len(buffer) < size:
            return bytearray(b"\xff" * size)
        return buffer

    def format_eeprom(self) -> None:
        """Erase EEPROM to 0xff if it is smaller than the chip."""
        self.eeprom = self._formatted(self.eeprom, EEPROM_SIZE)

    def format_sram(self) -> None:
        """Erase SRAM to 0xff if it is smaller than the chip."""
        self.sram = self._formatted(self.sram, SRAM_SIZE)

    def format_flash(self) -> None:
        """Erase flash to 0xff if it is smaller than the chip."""
        self.flash = self._formatted(self.flash, FLASH_SIZE)

    def execute_flash_command(self, command: int) -> None:
        """Run a command written to the flash command register."""
        opcode = (command >> 24) & 0xFF
        if opcode == 0xA5:
            offset = (command & 0xFFFF) * 128
            if offset + FLASHBUF_SIZE > len(self.flash):
                raise ValueError(f"flash page out of range: {offset:#x}")
            self.flash_status |= 0x1
            self.flash[offset:offset + FLASHBUF_SIZE] = self.flash_buffer
            self.flash_status &= ~0x1
            self.flash_status |= 0x4
            self.flash_mode = FlashMode.STATUS
            self._touch()
        elif opcode == 0xB4:
            self.flash_mode = FlashMode.PAGE_PROGRAM
        elif opcode == 0xF0:
            self.flash_mode = FlashMode.READ_ARRAY
        elif opcode == 0xE1:
            self.flash_mode = FlashMode.READ_SILICON_ID
            self.flash_status |= 0x1
        elif opcode == 0xD2:
            self.flash_mode = FlashMode.STATUS
        elif opcode == 0x3C:
            self.flash_mode = FlashMode.ERASE_CHIP
        elif opcode == 0x4B:
            self.flash_mode = FlashMode.ERASE_SECTOR
            self.flash_sector = command & 0xFFFF
        elif opcode == 0x78:
            self.flash_status |= 0x2
            if self.flash_mode is FlashMode.ERASE_CHIP:
                self.flash[:] = b"\xff" * len(self.flash)
            elif self.flash_mode is FlashMode.ERASE_SECTOR:
                offset = (self.flash_sector & 0xFF80) * 128
                if offset + SECTOR_SIZE > len(self.flash):
                    raise ValueError(f"flash sector out of range: {offset:#x}")
                self.flash[offset:offset + SECTOR_SIZE] = b"\xff" * SECTOR_SIZE
            else:
                raise ValueError("invalid erase flash command given")
            self._touch()
            self.flash_status &= ~0x2
            self.flash_status |= 0x8
            self.flash_mode = FlashMode.STATUS
        else:
            raise ValueError(f"unsupported flash command: {opcode:#x}")

    def load_files(self, paths: list[str | os.PathLike]) -> None:
        """Read save memories from existing files, creating missing ones.

        Every save type is read in turn from each file; the last file named
        is the one later writes go to.
        """
        for path in paths:
            self.save_path = path
            try:
                handle = open(path, "r+b")
            except FileNotFoundError:
                open(path, "wb").close()
                continue
            with handle:
                size = os.fstat(handle.fileno()).st_size
                if size == 0:
                    continue
                for save_type in self.save_types:
                    name = self._buffer_for(save_type)
                    if name is None:
                        continue
                    buffer = bytearray(size)
                    data = handle.read(size)
                    buffer[:len(data)] = data
                    setattr(self, name, buffer)

    def write_files(self) -> None:
        """Write every save memory, in order, to the start of the save file."""
        if self.save_path is not None:
            with open(self.save_path, "r+b") as handle:
                for save_type in self.save_types:
                    name = self._buffer_for(save_type)
                    if name is not None:
                        handle.write(getattr(self, name))
        self.time_since_save_write = 0