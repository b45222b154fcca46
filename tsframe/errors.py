"""
Error taxonomy for framed record files.

EndOfStream is the clean terminal condition of a read loop and is NOT a
CodecError.  Every CodecError carries the *phase* that failed; the
underlying exception (if any) is chained as ``__cause__``.
"""

from __future__ import annotations


class EndOfStream(EOFError):
    """No more frames: the stream ended exactly on a frame boundary."""


class CorruptDataError(ValueError):
    """Compressed data could not be decoded (corrupt or truncated)."""


class CodecError(Exception):
    phase: str = ""

    def __init__(self, message: str) -> None:
        super().__init__(f"failed to {self.phase}: {message}" if self.phase else message)


class FramingError(CodecError):
    phase = "read message size"


class PayloadReadError(CodecError):
    phase = "read message"


class DecodeError(CodecError):
    phase = "decode message"


class UnmarshalError(CodecError):
    phase = "unmarshal message"


class MarshalError(CodecError):
    phase = "marshal message"


class SizeMismatchError(CodecError):
    """*actual* is None when the record wrote past the end of its buffer."""

    phase = "marshal message"

    def __init__(self, expected: int, actual: int | None) -> None:
        self.expected = expected
        self.actual = actual
        if actual is None:
            super().__init__(f"unexpected size: expected {expected}, record wrote past the end")
        else:
            super().__init__(f"unexpected size: expected {expected}, got {actual}")


class EncodeError(CodecError):
    phase = "encode message"


class WriteError(CodecError):
    """I/O failure while appending a frame; *step* is "length" or "payload"."""

    def __init__(self, step: str, message: str) -> None:
        self.step = step
        self.phase = "write message length" if step == "length" else "write message"
        super().__init__(message)
