"""RDRAM storage and the word helpers the bus uses on it."""

from __future__ import annotations

RDRAM_SIZE = 0x800000

_WORD = 0xFFFFFFFF
_DWORD = 0xFFFFFFFFFFFFFFFF
# the boot code looks for the memory size at these offsets
_SIZE_SLOTS = (0x318, 0x3F0)


def write_with_mask32(old: int, new: int, mask: int = -1) -> int:
    """Merge ``new`` into ``old`` where ``mask`` is set; -1 replaces the whole word."""
    mask &= _WORD
    if mask == _WORD:
        return new & _WORD
    return ((old & ~mask) | (new & mask)) & _WORD


def calculate_rdram_cycles(length: int) -> int:
    """Cycles an RDRAM access of ``length`` takes."""
    return 31 + length // 3


def word_bytes_be(value: int) -> bytes:
    """The four bytes of a 32-bit word, most significant first."""
    return (value & _WORD).to_bytes(4, "big")


class Rdram:
    """Main memory, kept as native little-endian 32-bit words.

    A byte at bus address ``a`` lives at offset ``a ^ 3``, so word reads and
    writes are plain little-endian accesses while byte and halfword accesses
    see big-endian order.
    """

    def __init__(self, size: int = RDRAM_SIZE) -> None:
        if size <= 0 or size % 4:
            raise ValueError(f"RDRAM size must be a positive multiple of 4: {size}")
        self.data = bytearray(size)
        for slot in _SIZE_SLOTS:
            if slot + 4 <= size:
                self.write32(slot, size)

    def __len__(self) -> int:
        return len(self.data)

    def _check(self, offset: int, size: int) -> int:
        if offset < 0 or offset + size > len(self.data):
            raise IndexError(f"RDRAM access out of range: {offset:#x}")
        return offset

    def read8(self, address: int) -> int:
        self._check(address, 1)
        return self.data[self._check(address ^ 3, 1)]

    def write8(self, address: int, value: int) -> None:
        self._check(address, 1)
        self.data[self._check(address ^ 3, 1)] = value & 0xFF

    @staticmethod
    def _half_offset(address: int) -> int:
        return address + 2 if address & 3 == 0 else address & ~3

    def read16(self, address: int) -> int:
        offset = self._check(self._half_offset(address), 2)
        return int.from_bytes(self.data[offset:offset + 2], "little")

    def write16(self, address: int, value: int) -> None:
        offset = self._check(self._half_offset(address), 2)
        self.data[offset:offset + 2] = (value & 0xFFFF).to_bytes(2, "little")

    def read32(self, address: int) -> int:
        offset = self._check(address, 4)
        return int.from_bytes(self.data[offset:offset + 4], "little")

    def write32(self, address: int, value: int, mask: int = -1) -> None:
        merged = write_with_mask32(self.read32(address), value, mask)
        self.data[address:address + 4] = merged.to_bytes(4, "little")

    def write64(self, address: int, value: int) -> None:
        """Store a doubleword as eight little-endian bytes at ``address``."""
        offset = self._check(address, 8)
        self.data[offset:offset + 8] = (value & _DWORD).to_bytes(8, "little")

    def samples(self, length: int, address: int) -> list[int]:
        """Signed 16-bit audio samples in ``length`` bytes starting at ``address``."""
        out = []
        for i in range(length // 2):
            offset = address + i * 2 + (2 if i % 2 == 0 else 0)
            self._check(offset, 2)
            out.append(int.from_bytes(self.data[offset:offset + 2], "little", signed=True))
        return out