"""
Reusable byte buffer with monotonic capacity.

    buf = GrowableBuffer(1 << 20)
    view = buf.view(n)        # writable memoryview of exactly n bytes
    buf.assign(data)          # copy data in, logical length = len(data)

Storage is only ever replaced by a larger bytearray, never shrunk, so a
steady stream of same-size (or smaller) messages allocates nothing.
"""

from __future__ import annotations

DEFAULT_BUFFER_SIZE: int = 1 << 20   # 1 MiB


class GrowableBuffer:
    def __init__(self, capacity: int = DEFAULT_BUFFER_SIZE) -> None:
        if capacity < 0:
            raise ValueError(f"negative capacity: {capacity}")
        self._storage = bytearray(capacity)
        self._length = 0

    def __len__(self) -> int:
        return self._length

    @property
    def capacity(self) -> int:
        return len(self._storage)

    def ensure_capacity(self, n: int) -> None:
        """Replace storage with a fresh allocation of *n* bytes if it is too small."""
        if n < 0:
            raise ValueError(f"negative size: {n}")
        if n > len(self._storage):
            self._storage = bytearray(n)

    def view(self, n: int) -> memoryview:
        """Resize to logical length *n* and return a writable view of exactly *n* bytes."""
        self.ensure_capacity(n)
        self._length = n
        return memoryview(self._storage)[:n]

    def assign(self, data: bytes | bytearray | memoryview) -> memoryview:
        """Copy *data* into the buffer, reusing capacity; returns the filled view."""
        n = len(data)
        self.ensure_capacity(n)
        self._storage[:n] = data
        self._length = n
        return memoryview(self._storage)[:n]

    def getvalue(self) -> bytes:
        """Copy of the logical contents."""
        return bytes(self._storage[:self._length])
