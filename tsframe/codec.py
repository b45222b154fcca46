"""
Framed record codec: one compressed record per frame.

Frame layout:
  [length: 4B big-endian][compressed payload: length B]

No file header, no footer, no padding.  A stream may only end exactly on
a frame boundary; anything else is an error.

Read:   length → payload → decompress → unmarshal → record
Write:  record → marshal → compress → length + payload

All four intermediate byte buffers are owned by the codec and reused
across calls, so a long run of similar-size records allocates nothing.
A codec is NOT safe for concurrent use; use one instance per stream.
"""

from __future__ import annotations

import logging
import struct
import time
from pathlib import Path
from typing import BinaryIO, Callable, Iterator

from .buffer import DEFAULT_BUFFER_SIZE, GrowableBuffer
from .compress import Compressor, ZstdCompressor
from .errors import (
    CorruptDataError,
    DecodeError,
    EncodeError,
    EndOfStream,
    FramingError,
    MarshalError,
    PayloadReadError,
    SizeMismatchError,
    UnmarshalError,
    WriteError,
)
from .progress import PROGRESS_INTERVAL, ReadProgress
from .record import Record, RecordType, TimeSeries
from .stream import stream_name, stream_size

log = logging.getLogger("tsframe.codec")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

FRAME_HEADER_FMT: str = "!I"                            # payload_len(I)
FRAME_HEADER_SIZE: int = struct.calcsize(FRAME_HEADER_FMT)  # = 4
MAX_FRAME_PAYLOAD: int = 0xFFFFFFFF

# closed or detached streams raise ValueError rather than OSError
_IO_ERRORS = (OSError, ValueError)


def _read_into(f: BinaryIO, view: memoryview) -> int:
    """Fill *view* from *f*; returns the number of bytes read (short only at EOF)."""
    n = len(view)
    received = 0
    while received < n:
        count = f.readinto(view[received:])
        if count is None:
            raise BlockingIOError(f"stream would block after {received} of {n} bytes")
        if not count:
            break
        received += count
    return received


class FramedRecordCodec:
    """
    Read and write length-prefixed, compressed records on one open stream.

    *total_size* overrides the size probe used for progress reporting
    (0 disables it).  *record_type* provides ``unmarshal``; it defaults to
    TimeSeries.
    """

    def __init__(
        self,
        f: BinaryIO,
        compressor: Compressor | None = None,
        record_type: RecordType = TimeSeries,
        total_size: int | None = None,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        progress_interval: float = PROGRESS_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        owns_stream: bool = False,
    ) -> None:
        self._f = f
        self._compressor = compressor or ZstdCompressor()
        self._record_type = record_type
        self._owns_stream = owns_stream
        self._name = stream_name(f)
        self._total_size = stream_size(f) if total_size is None else total_size
        self._progress = ReadProgress(
            f, self._total_size, self._name,
            interval=progress_interval, clock=clock,
        )

        self._hdr = bytearray(FRAME_HEADER_SIZE)
        self.b_read = GrowableBuffer(buffer_size)
        self.b_decoded = GrowableBuffer(buffer_size)
        self.b_marshaled = GrowableBuffer(buffer_size)
        self.b_encoded = GrowableBuffer(buffer_size)

        log.debug("Opened %s (%d bytes, %s)", self._name, self._total_size,
                  getattr(self._compressor, "name", type(self._compressor).__name__))

    # ------------------------------------------------------------------
    # Public
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def total_size(self) -> int:
        return self._total_size

    def read_next(self) -> Record:
        """
        Read one frame and return the decoded record.

        Raises EndOfStream when the stream is exhausted exactly at a frame
        boundary; every other failure is a CodecError subclass.
        """
        self._progress.tick()

        # read message size
        hdr = memoryview(self._hdr)
        try:
            got = _read_into(self._f, hdr)
        except _IO_ERRORS as exc:
            raise FramingError(str(exc)) from exc
        if got == 0:
            raise EndOfStream(f"end of {self._name}")
        if got < FRAME_HEADER_SIZE:
            raise FramingError(f"truncated length prefix: {got} of {FRAME_HEADER_SIZE} bytes")
        (size,) = struct.unpack(FRAME_HEADER_FMT, hdr)

        # read message reusing b_read
        view = self.b_read.view(size)
        try:
            got = _read_into(self._f, view)
        except _IO_ERRORS as exc:
            raise PayloadReadError(str(exc)) from exc
        if got < size:
            raise PayloadReadError(f"unexpected EOF: {got} of {size} bytes")

        # decode message reusing b_decoded
        try:
            decoded = self._compressor.decode_into(view, self.b_decoded)
        except CorruptDataError as exc:
            raise DecodeError(str(exc)) from exc

        # unmarshal message
        try:
            return self._record_type.unmarshal(decoded)
        except ValueError as exc:
            raise UnmarshalError(str(exc)) from exc

    def write_next(self, record: Record) -> None:
        """Serialize, compress and append one frame.  Nothing is written on a marshal or encode failure."""
        # marshal message reusing b_marshaled
        size = record.size()
        view = self.b_marshaled.view(size)
        try:
            written = record.marshal_to(view)
        except IndexError as exc:
            raise SizeMismatchError(size, None) from exc
        except (ValueError, struct.error) as exc:
            raise MarshalError(str(exc)) from exc
        if written != size:
            raise SizeMismatchError(size, written)

        # encode message reusing b_encoded
        try:
            encoded = self._compressor.encode_into(view, self.b_encoded)
        except Exception as exc:
            raise EncodeError(str(exc)) from exc
        if len(encoded) > MAX_FRAME_PAYLOAD:
            raise WriteError("length", f"{len(encoded)} bytes does not fit a 32-bit length")

        # write message
        self._write("length", struct.pack(FRAME_HEADER_FMT, len(encoded)))
        self._write("payload", encoded)

    def close(self) -> None:
        """Close the stream if this codec opened it."""
        if self._owns_stream:
            self._f.close()

    def __enter__(self) -> FramedRecordCodec:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __iter__(self) -> Iterator[Record]:
        while True:
            try:
                yield self.read_next()
            except EndOfStream:
                return

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    def _write(self, step: str, data: bytes | memoryview) -> None:
        try:
            n = self._f.write(data)
        except _IO_ERRORS as exc:
            raise WriteError(step, str(exc)) from exc
        if n is not None and n != len(data):
            raise WriteError(step, f"short write: {n} of {len(data)} bytes")


def open_file(
    path: str | Path,
    mode: str = "rb",
    compressor: Compressor | None = None,
    record_type: RecordType = TimeSeries,
    **kwargs,
) -> FramedRecordCodec:
    """Open *path* in binary *mode* and return a codec that closes it on close()."""
    if "b" not in mode:
        mode += "b"
    f = open(path, mode)
    try:
        return FramedRecordCodec(
            f, compressor=compressor, record_type=record_type, owns_stream=True, **kwargs
        )
    except BaseException:
        f.close()
        raise
