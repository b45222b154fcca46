import os

import pytest

from tsframe.buffer import GrowableBuffer
from tsframe.compress import (
    ZlibCompressor,
    ZstdCompressor,
    available,
    compress_bound,
    get_compressor,
)
from tsframe.errors import CorruptDataError


@pytest.mark.parametrize("cls", [ZstdCompressor, ZlibCompressor])
def test_encode_decode(cls):
    c = cls()
    data = b"node_cpu_seconds_total" * 200 + os.urandom(64)
    encoded = c.encode(memoryview(data))
    assert len(encoded) < len(data)
    assert c.decode(encoded) == data


@pytest.mark.parametrize("cls", [ZstdCompressor, ZlibCompressor])
def test_garbage_raises_corrupt_data(cls):
    with pytest.raises(CorruptDataError):
        cls().decode(b"definitely not compressed")


@pytest.mark.parametrize("cls", [ZstdCompressor, ZlibCompressor])
def test_truncated_raises_corrupt_data(cls):
    c = cls()
    encoded = c.encode(os.urandom(4096))
    with pytest.raises(CorruptDataError):
        c.decode(encoded[: len(encoded) // 2])


def test_zlib_rejects_trailing_bytes():
    c = ZlibCompressor()
    with pytest.raises(CorruptDataError, match="trailing"):
        c.decode(c.encode(b"abc") + b"junk")


def test_corrupt_data_is_value_error():
    assert issubclass(CorruptDataError, ValueError)


def test_get_compressor():
    assert available() == ["zlib", "zstd"]
    assert isinstance(get_compressor("zstd"), ZstdCompressor)
    assert get_compressor("zlib", level=9).level == 9
    assert get_compressor("zstd").level == 3


def test_get_compressor_unknown():
    with pytest.raises(ValueError, match="snappy"):
        get_compressor("snappy")


@pytest.mark.parametrize("cls", [ZstdCompressor, ZlibCompressor])
def test_encode_into_decode_into(cls):
    c = cls()
    data = b"node_memory_MemAvailable_bytes" * 100
    encoded = GrowableBuffer(16)
    decoded = GrowableBuffer(16)
    view = c.encode_into(memoryview(data), encoded)
    assert len(encoded) == len(view)
    assert c.decode(bytes(view)) == data
    assert bytes(c.decode_into(view, decoded)) == data
    assert len(decoded) == len(data)


def test_zstd_decode_into_writes_into_given_buffer():
    c = ZstdCompressor()
    data = os.urandom(10_000)
    buf = GrowableBuffer(1 << 16)
    storage_capacity = buf.capacity
    view = c.decode_into(c.encode(data), buf)
    assert bytes(view) == data
    assert buf.capacity == storage_capacity
    assert buf.getvalue() == data


def test_zstd_encode_into_stays_within_bound():
    c = ZstdCompressor()
    data = os.urandom(50_000)
    buf = GrowableBuffer(0)
    view = c.encode_into(data, buf)
    assert buf.capacity == compress_bound(len(data))
    assert len(view) <= compress_bound(len(data))
    assert c.decode(bytes(view)) == data


@pytest.mark.parametrize("decode", ["decode", "decode_into"])
def test_zstd_rejects_trailing_bytes(decode):
    c = ZstdCompressor()
    payload = c.encode(b"hello") + b"JUNKJUNK"
    args = (payload,) if decode == "decode" else (payload, GrowableBuffer(64))
    with pytest.raises(CorruptDataError):
        getattr(c, decode)(*args)


def test_zstd_decode_into_rejects_truncated_frame():
    c = ZstdCompressor()
    encoded = c.encode(os.urandom(4096))
    with pytest.raises(CorruptDataError):
        c.decode_into(encoded[: len(encoded) // 2], GrowableBuffer(64))
