"""
tsframe — length-prefixed, compressed time-series record files.

    with open_file("dump.bin", "wb") as codec:
        codec.write_next(series)

    with open_file("dump.bin") as codec:
        for series in codec:
            ...
"""

from .buffer import GrowableBuffer
from .codec import FramedRecordCodec, open_file
from .compress import ZlibCompressor, ZstdCompressor, get_compressor
from .errors import (
    CodecError,
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
from .record import Label, Sample, TimeSeries
from .replay import generate_series, iter_records, write_records

__version__ = "0.1.0"

__all__ = [
    "CodecError",
    "CorruptDataError",
    "DecodeError",
    "EncodeError",
    "EndOfStream",
    "FramedRecordCodec",
    "FramingError",
    "GrowableBuffer",
    "Label",
    "MarshalError",
    "PayloadReadError",
    "Sample",
    "SizeMismatchError",
    "TimeSeries",
    "UnmarshalError",
    "WriteError",
    "ZlibCompressor",
    "ZstdCompressor",
    "generate_series",
    "get_compressor",
    "iter_records",
    "open_file",
    "write_records",
]
