from __future__ import annotations

import io

import pytest

from tsframe.codec import FramedRecordCodec


class RawRecord:
    """Opaque bytes record; serialized form is the bytes themselves."""

    def __init__(self, data: bytes) -> None:
        self.data = bytes(data)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, RawRecord) and other.data == self.data

    def __repr__(self) -> str:
        return f"RawRecord({len(self.data)} bytes)"

    def size(self) -> int:
        return len(self.data)

    def marshal_to(self, buf) -> int:
        buf[:len(self.data)] = self.data
        return len(self.data)

    @classmethod
    def unmarshal(cls, data) -> RawRecord:
        return cls(bytes(data))


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def raw_codec():
    """Factory: codec over a BytesIO using RawRecord payloads."""
    def make(stream: io.BytesIO | None = None, **kwargs) -> FramedRecordCodec:
        return FramedRecordCodec(stream if stream is not None else io.BytesIO(),
                                 record_type=RawRecord, **kwargs)
    return make
