"""
Record interface and the TimeSeries record.

The codec only needs three things from a record type:

    record.size()            → exact serialized length in bytes
    record.marshal_to(buf)   → serialize into buf, return bytes written
    RecordType.unmarshal(b)  → new record; raises ValueError if malformed

TimeSeries layout (all integers big-endian):
  [label_count: 4B]
      [name_len: 4B][name: utf-8][value_len: 4B][value: utf-8]   × label_count
  [sample_count: 4B]
      [value: f64 8B][timestamp_ms: i64 8B]                      × sample_count
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Protocol

COUNT_FMT: str = "!I"
COUNT_SIZE: int = struct.calcsize(COUNT_FMT)     # = 4
SAMPLE_FMT: str = "!dq"                         # value(d) timestamp(q)
SAMPLE_SIZE: int = struct.calcsize(SAMPLE_FMT)   # = 16


class Record(Protocol):
    def size(self) -> int: ...
    def marshal_to(self, buf: bytearray | memoryview) -> int: ...


class RecordType(Protocol):
    def unmarshal(self, data: bytes | memoryview) -> Record: ...


# ---------------------------------------------------------------------------
# TimeSeries
# ---------------------------------------------------------------------------

@dataclass
class Label:
    name: str
    value: str


@dataclass
class Sample:
    value: float
    timestamp: int           # milliseconds since epoch


@dataclass
class TimeSeries:
    labels: list[Label] = field(default_factory=list)
    samples: list[Sample] = field(default_factory=list)

    def label(self, name: str) -> str | None:
        for lbl in self.labels:
            if lbl.name == name:
                return lbl.value
        return None

    def size(self) -> int:
        n = COUNT_SIZE
        for lbl in self.labels:
            n += 2 * COUNT_SIZE + len(lbl.name.encode()) + len(lbl.value.encode())
        return n + COUNT_SIZE + SAMPLE_SIZE * len(self.samples)

    def marshal_to(self, buf: bytearray | memoryview) -> int:
        """Serialize into the front of *buf*; returns the number of bytes written."""
        need = self.size()
        if len(buf) < need:
            raise ValueError(f"buffer too small: need {need}, have {len(buf)}")

        off = 0
        struct.pack_into(COUNT_FMT, buf, off, len(self.labels))
        off += COUNT_SIZE
        for lbl in self.labels:
            for s in (lbl.name.encode(), lbl.value.encode()):
                struct.pack_into(COUNT_FMT, buf, off, len(s))
                off += COUNT_SIZE
                buf[off:off + len(s)] = s
                off += len(s)

        struct.pack_into(COUNT_FMT, buf, off, len(self.samples))
        off += COUNT_SIZE
        for smp in self.samples:
            struct.pack_into(SAMPLE_FMT, buf, off, smp.value, smp.timestamp)
            off += SAMPLE_SIZE
        return off

    @classmethod
    def unmarshal(cls, data: bytes | memoryview) -> TimeSeries:
        view = memoryview(data)
        try:
            off = 0
            (label_count,) = struct.unpack_from(COUNT_FMT, view, off)
            off += COUNT_SIZE
            labels: list[Label] = []
            for _ in range(label_count):
                name, off = _read_string(view, off)
                value, off = _read_string(view, off)
                labels.append(Label(name, value))

            (sample_count,) = struct.unpack_from(COUNT_FMT, view, off)
            off += COUNT_SIZE
            if off + sample_count * SAMPLE_SIZE > len(view):
                raise ValueError(
                    f"{sample_count} samples need {sample_count * SAMPLE_SIZE} bytes, "
                    f"{len(view) - off} left")
            samples = [
                Sample(value, ts)
                for value, ts in struct.iter_unpack(
                    SAMPLE_FMT, view[off:off + sample_count * SAMPLE_SIZE])
            ]
            off += sample_count * SAMPLE_SIZE
        except struct.error as exc:
            raise ValueError(f"truncated time series: {exc}") from exc

        if off != len(view):
            raise ValueError(f"{len(view) - off} trailing bytes after time series")
        return cls(labels=labels, samples=samples)


def _read_string(view: memoryview, off: int) -> tuple[str, int]:
    (n,) = struct.unpack_from(COUNT_FMT, view, off)
    off += COUNT_SIZE
    if off + n > len(view):
        raise ValueError(f"string of {n} bytes overruns payload at offset {off}")
    return str(view[off:off + n], "utf-8"), off + n
