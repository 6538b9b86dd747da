"""Translation lookaside buffer: entries, page lookup tables and probes."""

from __future__ import annotations

from dataclasses import dataclass, field

TLB_ENTRY_COUNT = 32
PROBE_MISS = 0x80000000

_PAGE = 0x1000
_ADDRESS_SPACE = 1 << 32
_WORD = 0xFFFFFFFF
_DWORD = 0xFFFFFFFFFFFFFFFF
_UNCACHED = 2


@dataclass
class TlbEntry:
    """One TLB entry: a pair of even/odd pages sharing a virtual page number."""

    g: int = 0
    pfn_even: int = 0
    pfn_odd: int = 0
    c_even: int = 0
    c_odd: int = 0
    d_even: int = 0
    d_odd: int = 0
    v_even: int = 0
    v_odd: int = 0
    asid: int = 0
    mask: int = 0
    vpn2: int = 0
    region: int = 0
    start_even: int = 0
    end_even: int = 0
    phys_even: int = 0
    start_odd: int = 0
    end_odd: int = 0
    phys_odd: int = 0

    def _halves(self):
        yield self.start_even, self.end_even, self.phys_even, self.v_even, self.d_even, self.c_even
        yield self.start_odd, self.end_odd, self.phys_odd, self.v_odd, self.d_odd, self.c_odd


@dataclass
class TlbRegisters:
    """The COP0 registers a TLB entry is written from and read into."""

    page_mask: int = 0
    entry_hi: int = 0
    entry_lo0: int = 0
    entry_lo1: int = 0


@dataclass(frozen=True)
class _LutEntry:
    address: int
    cached: bool


def _lo_fields(lo: int) -> tuple[int, int, int, int]:
    return (lo >> 6) & 0xFFFFF, (lo >> 3) & 7, (lo >> 2) & 1, (lo >> 1) & 1


def _pages(start: int, end: int):
    return range(start, min(end, _ADDRESS_SPACE), _PAGE)


class TLB:
    """32 TLB entries and the per-page read and write lookup tables built from them."""

    def __init__(self) -> None:
        self.entries = [TlbEntry() for _ in range(TLB_ENTRY_COUNT)]
        self.read_lut: dict[int, _LutEntry] = {}
        self.write_lut: dict[int, _LutEntry] = {}

    def write(self, index: int, registers: TlbRegisters) -> None:
        """Replace entry ``index`` with the contents of the COP0 registers."""
        if not 0 <= index < TLB_ENTRY_COUNT:
            return
        self.unmap(index)

        lo0 = registers.entry_lo0 & _DWORD
        lo1 = registers.entry_lo1 & _DWORD
        hi = registers.entry_hi & _DWORD

        pfn_even, c_even, d_even, v_even = _lo_fields(lo0)
        pfn_odd, c_odd, d_odd, v_odd = _lo_fields(lo1)

        mask = ((registers.page_mask >> 13) & 0xFFF) & 0b101010101010
        mask |= mask >> 1
        vpn2 = ((hi >> 13) & 0x7FFFFFF) & ~mask

        start_even = (vpn2 << 13) & _WORD
        end_even = start_even + (mask << 12) + 0xFFF
        start_odd = end_even + 1
        end_odd = start_odd + (mask << 12) + 0xFFF

        self.entries[index] = TlbEntry(
            g=lo0 & lo1 & 1,
            pfn_even=pfn_even,
            pfn_odd=pfn_odd,
            c_even=c_even,
            c_odd=c_odd,
            d_even=d_even,
            d_odd=d_odd,
            v_even=v_even,
            v_odd=v_odd,
            asid=hi & 0xFF,
            mask=mask,
            vpn2=vpn2,
            region=(hi >> 62) & 0xFF,
            start_even=start_even,
            end_even=end_even,
            phys_even=pfn_even << 12,
            start_odd=start_odd,
            end_odd=end_odd,
            phys_odd=pfn_odd << 12,
        )
        self.map(index)

    def read(self, index: int) -> TlbRegisters | None:
        """The COP0 register values that describe entry ``index``."""
        if not 0 <= index < TLB_ENTRY_COUNT:
            return None
        entry = self.entries[index]
        return TlbRegisters(
            page_mask=entry.mask << 13,
            entry_hi=(entry.region << 62) | (entry.vpn2 << 13) | entry.asid,
            entry_lo0=(entry.pfn_even << 6) | (entry.c_even << 3) | (entry.d_even << 2)
            | (entry.v_even << 1) | entry.g,
            entry_lo1=(entry.pfn_odd << 6) | (entry.c_odd << 3) | (entry.d_odd << 2)
            | (entry.v_odd << 1) | entry.g,
        )

    def probe(self, entry_hi: int) -> int:
        """Index of the first entry matching ``entry_hi``, or ``PROBE_MISS``."""
        entry_hi &= _DWORD
        vpn2 = (entry_hi >> 13) & 0x7FFFFFF
        region = (entry_hi >> 62) & 0xFF
        asid = entry_hi & 0xFF
        for index, entry in enumerate(self.entries):
            if ((entry.vpn2 & ~entry.mask) == (vpn2 & ~entry.mask)
                    and entry.region == region
                    and (entry.g != 0 or entry.asid == asid)):
                return index
        return PROBE_MISS

    def map(self, index: int) -> None:
        """Enter the valid pages of entry ``index`` into the lookup tables."""
        for start, end, phys, valid, dirty, coherency in self.entries[index]._halves():
            if not (valid != 0
                    and start < end
                    and not (start >= 0x80000000 and end < 0xC0000000)
                    and phys < 0x20000000):
                continue
            cached = coherency != _UNCACHED
            tables = [self.read_lut, self.write_lut] if dirty != 0 else [self.read_lut]
            for page in _pages(start, end):
                lut = _LutEntry(0x80000000 | (phys + (page - start) + 0xFFF), cached)
                for table in tables:
                    table[page >> 12] = lut

    def unmap(self, index: int) -> None:
        """Remove the pages of entry ``index`` from the lookup tables."""
        for start, end, _phys, valid, dirty, _coherency in self.entries[index]._halves():
            if valid == 0:
                continue
            tables = [self.read_lut, self.write_lut] if dirty != 0 else [self.read_lut]
            for page in _pages(start, end):
                for table in tables:
                    table.pop(page >> 12, None)

    def lookup(self, address: int, is_write: bool = False) -> tuple[int, bool] | None:
        """Physical address and cacheability of a mapped address, or None on a miss."""
        address &= _WORD
        table = self.write_lut if is_write else self.read_lut
        entry = table.get(address >> 12)
        if entry is None:
            return None
        return (entry.address & 0x1FFFF000) | (address & 0xFFF), entry.cached

    def _classify(self, address: int, is_write: bool) -> tuple[bool, bool]:
        masked = address & ~0x3
        for entry in self.entries:
            for start, end, _phys, valid, dirty, _coherency in entry._halves():
                if start <= masked <= end:
                    if valid != 0 and is_write and dirty == 0:
                        return False, True
                    return valid != 0, False
        return True, False

    def miss_is_refill(self, address: int, is_write: bool = False) -> bool:
        """Whether a miss on ``address`` is a refill (no valid matching page found invalid)."""
        return self._classify(address, is_write)[0]

    def is_modification(self, address: int, is_write: bool = False) -> bool:
        """Whether a miss on ``address`` is a write to a valid page not marked dirty."""
        return self._classify(address, is_write)[1]