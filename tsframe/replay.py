"""
Record loops and synthetic load.

iter_records(codec)           → Iterator[Record]   until EndOfStream
write_records(codec, records) → int                number of records written
generate_series(count, ...)   → Iterator[TimeSeries]
    Deterministic fake series (random-walk gauges) for load generation.
"""

from __future__ import annotations

import logging
import random
from typing import Iterable, Iterator

from .codec import FramedRecordCodec
from .errors import EndOfStream
from .record import Label, Record, Sample, TimeSeries

log = logging.getLogger("tsframe.replay")

DEFAULT_STEP_MS: int = 15_000        # one scrape interval
METRIC_NAMES: tuple[str, ...] = (
    "node_cpu_seconds_total",
    "node_memory_MemAvailable_bytes",
    "node_network_receive_bytes_total",
    "node_disk_io_time_seconds_total",
)


def iter_records(codec: FramedRecordCodec) -> Iterator[Record]:
    """Yield every remaining record; any error other than EndOfStream propagates."""
    count = 0
    while True:
        try:
            record = codec.read_next()
        except EndOfStream:
            log.debug("%s: end of stream after %d record(s)", codec.name, count)
            return
        count += 1
        yield record


def write_records(codec: FramedRecordCodec, records: Iterable[Record]) -> int:
    n = 0
    for record in records:
        codec.write_next(record)
        n += 1
    log.debug("%s: wrote %d record(s)", codec.name, n)
    return n


def generate_series(
    count: int,
    samples: int = 1,
    start_ms: int = 0,
    step_ms: int = DEFAULT_STEP_MS,
    seed: int | None = None,
) -> Iterator[TimeSeries]:
    """
    Yield *count* series with *samples* points each.

    Series ``i`` is labelled ``__name__`` (cycling METRIC_NAMES),
    ``instance`` = ``host-<i // len(METRIC_NAMES)>:9100`` and ``job`` = ``node``.
    Timestamps start at *start_ms* and advance by *step_ms*.
    """
    rng = random.Random(seed)
    for i in range(count):
        labels = [
            Label("__name__", METRIC_NAMES[i % len(METRIC_NAMES)]),
            Label("instance", f"host-{i // len(METRIC_NAMES)}:9100"),
            Label("job", "node"),
        ]
        value = rng.uniform(0, 1000)
        points = []
        for j in range(samples):
            value = max(0.0, value + rng.gauss(0, 10))
            points.append(Sample(value, start_ms + j * step_ms))
        yield TimeSeries(labels=labels, samples=points)
