"""Bit-field views over 32-bit hardware status registers."""

from __future__ import annotations

from typing import Any

_WORD = 0xFFFFFFFF


class _Field:
    """A bit field stored inside a BitRegister."""

    def __init__(self, offset: int, width: int = 1) -> None:
        self.offset = offset
        self.mask = (1 << width) - 1
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj: Any, objtype: type | None = None) -> Any:
        if obj is None:
            return self
        return (obj._bits >> self.offset) & self.mask

    def __set__(self, obj: Any, value: int) -> None:
        cleared = obj._bits & ~(self.mask << self.offset)
        obj._bits = cleared | ((int(value) & self.mask) << self.offset)


class BitRegister:
    """A register whose 32-bit ``value`` is shared with named bit fields.

    Fields placed past bit 31 are kept but never show up in ``value``.
    """

    def __init__(self, value: int = 0) -> None:
        self._bits = int(value) & _WORD

    @property
    def value(self) -> int:
        return self._bits & _WORD

    @value.setter
    def value(self, new: int) -> None:
        self._bits = (self._bits & ~_WORD) | (int(new) & _WORD)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(value={self.value:#010x})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BitRegister):
            return NotImplemented
        return type(self) is type(other) and self._bits == other._bits


class AIStatus(BitRegister):
    """Audio interface status register."""

    dma_full1 = _Field(0)
    count = _Field(1, 15)
    bc = _Field(16)
    wc = _Field(19)
    enabled = _Field(25)
    dma_busy = _Field(31)
    dma_full2 = _Field(32)


class MIPSInterrupt(BitRegister):
    """MIPS interface interrupt (or mask) register."""

    sp_interrupt = _Field(0)
    si_interrupt = _Field(1)
    ai_interrupt = _Field(2)
    vi_interrupt = _Field(3)
    pi_interrupt = _Field(4)
    dp_interrupt = _Field(5)


class PIStatus(BitRegister):
    """Peripheral interface status register."""

    dma_busy = _Field(0)
    io_busy = _Field(1)
    dma_error = _Field(2)
    dma_completed = _Field(3)


class DPCStatus(BitRegister):
    """RDP command interface status register."""

    xbus = _Field(0)
    freeze = _Field(1)
    flush = _Field(2)
    gclk = _Field(3)
    tmem_busy = _Field(4)
    pipe_busy = _Field(5)
    cmd_busy = _Field(6)
    cbuf_ready = _Field(7)
    dma_busy = _Field(8)
    end_pending = _Field(9)
    start_pending = _Field(10)