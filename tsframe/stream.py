"""
Queries against the underlying binary stream (usually an open file).

stream_size(f)   → total size in bytes, 0 when unknown
try_offset(f)    → current offset, or None when it cannot be queried
stream_name(f)   → printable name for log lines
"""

from __future__ import annotations

import io
import logging
import os
from typing import BinaryIO

log = logging.getLogger("tsframe.stream")

_QUERY_ERRORS = (OSError, ValueError, AttributeError, io.UnsupportedOperation)


def stream_size(f: BinaryIO) -> int:
    """
    Total size of *f* in bytes.

    * Real files → ``os.fstat``.
    * Other seekable streams → seek to the end and back.
    * Anything else, or any failure → 0 (unknown).
    """
    try:
        return os.fstat(f.fileno()).st_size
    except _QUERY_ERRORS:
        pass
    try:
        if not f.seekable():
            return 0
        here = f.tell()
        end = f.seek(0, io.SEEK_END)
        f.seek(here, io.SEEK_SET)
        return end
    except _QUERY_ERRORS as exc:
        log.debug("Cannot determine stream size: %s", exc)
        return 0


def try_offset(f: BinaryIO) -> int | None:
    """Best-effort current offset of *f*; None if the query fails."""
    try:
        return f.tell()
    except _QUERY_ERRORS as exc:
        log.debug("Cannot query stream offset: %s", exc)
        return None


def stream_name(f: BinaryIO) -> str:
    name = getattr(f, "name", None)
    if isinstance(name, (str, bytes, os.PathLike)):
        return os.fsdecode(name)
    return f"<{type(f).__name__}>"
