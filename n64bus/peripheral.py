"""Peripheral interface registers and DMA timing."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from .registers import PIStatus


@dataclass
class PeripheralInterface:
    status: PIStatus = field(default_factory=PIStatus)
    dom1_latch: int = 0
    dom2_latch: int = 0
    dom1_pwd: int = 0
    dom2_pwd: int = 0
    dom1_pgs: int = 0
    dom2_pgs: int = 0
    dom1_rls: int = 0
    dom2_rls: int = 0
    dram_address: int = 0
    cart_address: int = 0
    wr_len: int = 0
    rd_len: int = 0

    def calculate_cycles(self, domain: int, length: int) -> int:
        """CPU cycles a transfer of ``length`` bytes on ``domain`` takes."""
        if domain == 1:
            latency, pwd, rls, pgs = (
                self.dom1_latch, self.dom1_pwd, self.dom1_rls, self.dom1_pgs)
        elif domain == 2:
            latency, pwd, rls, pgs = (
                self.dom2_latch, self.dom2_pwd, self.dom2_rls, self.dom2_pgs)
        else:
            raise ValueError(f"invalid domain given: {domain}")

        page_size = 2.0 ** (pgs + 2)
        pages = math.ceil(length / page_size)

        cycles = (14.0 + latency) * pages
        cycles += ((pwd + 1) + (rls + 1)) * (length / 2.0)
        cycles += 5.0 * pages
        return int(cycles * 1.5) & 0xFFFFFFFF