"""RDP command interface registers."""

from __future__ import annotations

from typing import Callable

from .registers import DPCStatus
from .timing import Clock, EventKind


class RDPInterface:
    """DPC registers; ``process_commands`` runs the command list and returns cycles."""

    def __init__(self, clock: Clock, process_commands: Callable[[], int]) -> None:
        self.clock = clock
        self.process_commands = process_commands
        self.status = DPCStatus()
        self.start = 0
        self.end = 0
        self.current = 0
        self.pipe_busy = 0xFFFFFF
        self.clock_counter = 0
        self.is_frozen = False
        self.frame_finished = False

    def read_register(self, offset: int) -> int:
        if offset == 0:
            return self.start
        if offset == 1:
            return self.end
        if offset == 2:
            return self.current
        if offset == 3:
            self.status.dma_busy = 0
            return self.status.value
        if offset == 4:
            return 0xFFFFFF
        raise ValueError(f"RDP register offset not implemented: {offset}")

    def write_register(self, offset: int, value: int) -> None:
        if offset == 0:
            if not self.status.start_pending:
                self.start = value
                self.status.start_pending = 1
        elif offset == 1:
            self.end = value
            if self.status.start_pending:
                self.current = self.start
                self.status.start_pending = 0
            if not self.status.freeze:
                cycles = self.process_commands()
                self.pipe_busy = 0xFFFFFF
                self.status.gclk = 1
                self.status.cmd_busy = 1
                self.status.pipe_busy = 1
                if cycles > 0:
                    self.clock.add_event(EventKind.RDP, self.clock.count + cycles)
            else:
                self.is_frozen = True
        elif offset == 3:
            self.update_status(value)
        else:
            raise ValueError(f"RDP register offset not implemented: {offset}")

    def update_status(self, value: int) -> None:
        """Apply clear/set bit pairs written to the status register."""
        if value & 1:
            self.status.xbus = 0
        if (value >> 1) & 1:
            self.status.xbus = 1
        if (value >> 2) & 1:
            self.status.freeze = 0
        if (value >> 3) & 1:
            self.status.freeze = 1
        if (value >> 4) & 1:
            self.status.flush = 0
        if (value >> 5) & 1:
            self.status.flush = 1
        if (value >> 6) & 1:
            self.status.tmem_busy = 0
        if (value >> 7) & 1:
            self.status.pipe_busy = 0
            self.pipe_busy = 0
        if (value >> 8) & 1:
            self.status.cmd_busy = 0
        if (value >> 9) & 1:
            self.clock_counter = 0