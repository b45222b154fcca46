"""
Compression primitives used by the frame codec.

A compressor provides two forms of each operation:

    encode(data) / decode(data)               → new bytes
    encode_into(data, buf) / decode_into(data, buf)
        → memoryview over *buf* (a GrowableBuffer) holding the result

The codec only uses the ``_into`` forms, so the reusable buffer is the
real destination of the compressed/decompressed bytes.  Decoding must
raise CorruptDataError on corrupt, truncated or trailing input.

ZstdCompressor  : zstandard (default, level 3), writes straight into the buffer
ZlibCompressor  : stdlib zlib, copies its output into the buffer

Each instance keeps its own compressor/decompressor context and reuses it
across calls (avoids re-allocating the context on every message).
Contexts are not shared between instances.
"""

from __future__ import annotations

import zlib
from typing import Protocol

import zstandard as zstd

from .buffer import GrowableBuffer
from .errors import CorruptDataError

DEFAULT_LEVEL: int = 3          # good balance speed vs ratio
ZLIB_DEFAULT_LEVEL: int = 6
_BLOCK_SIZE_MAX: int = 128 * 1024


class Compressor(Protocol):
    name: str

    def encode(self, data: bytes | memoryview) -> bytes: ...
    def decode(self, data: bytes | memoryview) -> bytes: ...
    def encode_into(self, data: bytes | memoryview, buf: GrowableBuffer) -> memoryview: ...
    def decode_into(self, data: bytes | memoryview, buf: GrowableBuffer) -> memoryview: ...


def compress_bound(n: int) -> int:
    """Worst-case zstd frame size for *n* input bytes (ZSTD_COMPRESSBOUND)."""
    margin = (_BLOCK_SIZE_MAX - n) >> 11 if n < _BLOCK_SIZE_MAX else 0
    return n + (n >> 8) + margin


def _fill(reader, view: memoryview) -> int:
    filled = 0
    while filled < len(view):
        count = reader.readinto(view[filled:])
        if not count:
            break
        filled += count
    return filled


class ZstdCompressor:
    """zstd frames with the content size written, so decode knows its output size up front."""

    name = "zstd"

    def __init__(self, level: int = DEFAULT_LEVEL) -> None:
        self.level = level
        self._compressor = zstd.ZstdCompressor(level=level, write_content_size=True)
        self._decompressor = zstd.ZstdDecompressor()

    def encode(self, data: bytes | memoryview) -> bytes:
        return self._compressor.compress(data)

    def decode(self, data: bytes | memoryview) -> bytes:
        try:
            return self._decompressor.decompress(data, allow_extra_data=False)
        except zstd.ZstdError as exc:
            raise CorruptDataError(str(exc)) from exc

    def encode_into(self, data: bytes | memoryview, buf: GrowableBuffer) -> memoryview:
        n = len(data)
        out = buf.view(compress_bound(n))
        with self._compressor.stream_reader(data, size=n, closefd=False) as reader:
            written = _fill(reader, out)
            if written == len(out) and reader.read(1):
                raise RuntimeError(f"zstd output for {n} bytes exceeds {len(out)} byte bound")
        return buf.view(written)

    def decode_into(self, data: bytes | memoryview, buf: GrowableBuffer) -> memoryview:
        try:
            size = zstd.frame_content_size(data)
            if size < 0:
                raise CorruptDataError("zstd frame does not declare its content size")
            out = buf.view(size)
            with self._decompressor.stream_reader(data, read_across_frames=True, closefd=False) as reader:
                got = _fill(reader, out)
                if got < size:
                    raise CorruptDataError(f"truncated zstd frame: {got} of {size} bytes")
                # anything after the frame must fail to decode or be empty
                if reader.read(1):
                    raise CorruptDataError("trailing data after zstd frame")
        except zstd.ZstdError as exc:
            raise CorruptDataError(str(exc)) from exc
        return out


class ZlibCompressor:
    name = "zlib"

    def __init__(self, level: int = ZLIB_DEFAULT_LEVEL) -> None:
        self.level = level

    def encode(self, data: bytes | memoryview) -> bytes:
        return zlib.compress(data, self.level)

    def decode(self, data: bytes | memoryview) -> bytes:
        d = zlib.decompressobj()
        try:
            out = d.decompress(data)
        except zlib.error as exc:
            raise CorruptDataError(str(exc)) from exc
        if not d.eof:
            raise CorruptDataError("truncated zlib stream")
        if d.unused_data:
            raise CorruptDataError(f"{len(d.unused_data)} trailing bytes after zlib stream")
        return out

    # zlib has no output-buffer API; copy into the reusable buffer
    def encode_into(self, data: bytes | memoryview, buf: GrowableBuffer) -> memoryview:
        return buf.assign(self.encode(data))

    def decode_into(self, data: bytes | memoryview, buf: GrowableBuffer) -> memoryview:
        return buf.assign(self.decode(data))


_COMPRESSORS: dict[str, type] = {
    "zstd": ZstdCompressor,
    "zlib": ZlibCompressor,
}


def available() -> list[str]:
    return sorted(_COMPRESSORS)


def get_compressor(name: str, level: int | None = None) -> Compressor:
    """Return a fresh compressor for *name*; *level* None means its default."""
    try:
        cls = _COMPRESSORS[name]
    except KeyError:
        raise ValueError(
            f"unknown compression {name!r} (choose from {', '.join(available())})"
        ) from None
    return cls() if level is None else cls(level=level)
