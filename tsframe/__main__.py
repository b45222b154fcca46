"""
tsframe — framed time-series record files  CLI entry point.

Usage:
    python -m tsframe write <file> [--series N] [--samples N] [--compression zstd|zlib] [--level N]
    python -m tsframe read <file> [--compression zstd|zlib]
"""

from __future__ import annotations

import argparse
import logging
import sys
import time

from rich.console import Console
from rich.table import Table

from .codec import open_file
from .compress import available, get_compressor
from .errors import CodecError
from .replay import DEFAULT_STEP_MS, generate_series, iter_records, write_records

log = logging.getLogger("tsframe")


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

def _setup_logging(verbose: bool, quiet: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        level=level,
    )


# ---------------------------------------------------------------------------
# Sub-commands
# ---------------------------------------------------------------------------

def cmd_write(args: argparse.Namespace) -> int:
    """Generate synthetic series and write them to a file."""
    compressor = get_compressor(args.compression, args.level)
    start_ms = args.start_ms if args.start_ms is not None else int(time.time() * 1000)
    series = generate_series(
        args.series, samples=args.samples, start_ms=start_ms,
        step_ms=args.step_ms, seed=args.seed,
    )

    t0 = time.perf_counter()
    try:
        with open_file(args.file, "wb", compressor=compressor) as codec:
            n = write_records(codec, series)
    except (CodecError, OSError) as exc:
        print(f"[tsframe] Write failed: {exc}", file=sys.stderr)
        return 1
    dt = time.perf_counter() - t0
    log.info("Wrote %d series to %s in %.3fs", n, args.file, dt)
    return 0


def cmd_read(args: argparse.Namespace) -> int:
    """Read every record and print a summary."""
    compressor = get_compressor(args.compression)
    records = samples = labels = 0
    t0 = time.perf_counter()
    try:
        with open_file(args.file, "rb", compressor=compressor) as codec:
            total_size = codec.total_size
            for ts in iter_records(codec):
                records += 1
                samples += len(ts.samples)
                labels += len(ts.labels)
    except (CodecError, OSError) as exc:
        print(f"[tsframe] Read failed after {records} record(s): {exc}", file=sys.stderr)
        return 1
    dt = time.perf_counter() - t0

    table = Table(title=str(args.file))
    table.add_column("records", justify="right")
    table.add_column("samples", justify="right")
    table.add_column("labels", justify="right")
    table.add_column("size", justify="right")
    table.add_column("time", justify="right")
    table.add_row(str(records), str(samples), str(labels), _fmt_size(total_size), f"{dt:.3f}s")
    Console().print(table)
    return 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _fmt_size(n: float) -> str:
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if n < 1024:
            return f"{n:.1f} {unit}"
        n /= 1024
    return f"{n:.1f} PB"


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tsframe",
        description="tsframe — length-prefixed, compressed time-series record files")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="Only log warnings and errors")

    sub = parser.add_subparsers(dest="command", required=True)

    # --- write ---
    p_write = sub.add_parser("write", help="Write synthetic time series to a file")
    p_write.add_argument("file", help="Output file (truncated)")
    p_write.add_argument("--series", type=int, default=1000,
                         help="Number of series to write (default 1000)")
    p_write.add_argument("--samples", type=int, default=1,
                         help="Samples per series (default 1)")
    p_write.add_argument("--start-ms", type=int, default=None,
                         help="First sample timestamp in ms (default: now)")
    p_write.add_argument("--step-ms", type=int, default=DEFAULT_STEP_MS,
                         help=f"Sample interval in ms (default {DEFAULT_STEP_MS})")
    p_write.add_argument("--seed", type=int, default=None,
                         help="Random seed for sample values")
    p_write.add_argument("--compression", choices=available(), default="zstd",
                         help="Compression algorithm (default zstd)")
    p_write.add_argument("--level", type=int, default=None,
                         help="Compression level (default: algorithm default)")

    # --- read ---
    p_read = sub.add_parser("read", help="Read a file and summarize its records")
    p_read.add_argument("file", help="Input file")
    p_read.add_argument("--compression", choices=available(), default="zstd",
                        help="Compression algorithm the file was written with (default zstd)")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose, args.quiet)

    handlers = {
        "write": cmd_write,
        "read":  cmd_read,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
