"""
Throttled read-progress reporting.

    progress = ReadProgress(f, total_size=stream_size(f), name="dump.bin")
    ...
    progress.tick()     # once per read; logs at most every PROGRESS_INTERVAL s

Reporting never fails a read: if the current offset cannot be queried the
report is skipped.
"""

from __future__ import annotations

import logging
import time
from typing import BinaryIO, Callable

from .stream import try_offset

log = logging.getLogger("tsframe.progress")

PROGRESS_INTERVAL: float = 10.0     # seconds between progress lines


class ReadProgress:
    """Logs ``Read NN.NN% of the file.`` at most once per *interval* seconds."""

    def __init__(
        self,
        f: BinaryIO,
        total_size: int,
        name: str,
        interval: float = PROGRESS_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._f = f
        self.total_size = total_size
        self.name = name
        self.interval = interval
        self._clock = clock
        self._last: float | None = None

    def due(self) -> bool:
        """True (and restart the interval) if a report is due now."""
        now = self._clock()
        if self._last is not None and now - self._last <= self.interval:
            return False
        self._last = now
        return True

    def tick(self) -> float | None:
        """Emit a progress line if due; returns the reported percentage, else None."""
        if not self.due() or not self.total_size:
            return None
        offset = try_offset(self._f)
        if offset is None:
            return None
        percent = offset * 100 / self.total_size
        log.info("file %s: Read %.2f%% of the file.", self.name, percent)
        return percent
