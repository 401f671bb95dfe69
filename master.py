#!/usr/bin/env python3
"""
csvjson: streaming CSV to JSON converter CLI

Converts a comma- or semicolon-separated file into a JSON array of
objects written next to it (``data/people.csv`` → ``data/people.json``).
Rows whose field count differs from the header are reported and skipped.

Usage:
    python master.py [--separator {comma,semicolon}] [--pretty] [-v] <csvFile>

Examples:
    python master.py data/people.csv
    python master.py --separator semicolon --pretty data/export.csv

Environment variables (loaded from .env via python-dotenv):
    CSVJSON_SEPARATOR   Default separator when --separator is not given
    CSVJSON_PRETTY      Set to 'true' to pretty-print by default
    CSVJSON_QUEUE_SIZE  Records buffered between reader and writer (default 1)
    CSVJSON_ENCODING    Input encoding (default utf-8-sig)

Exit codes:
    0  Success (skipped rows do not fail the run)
    1  Conversion failed: unreadable input, malformed CSV or write error
    2  Configuration / argument error
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from dotenv import load_dotenv

from csvjson.configs.config import SEPARATORS, ConverterConfig
from csvjson.configs.exceptions import ConfigurationError, ConversionError
from csvjson.pipeline import ConversionResult, run


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        level=level,
        stream=sys.stdout,
    )


# ---------------------------------------------------------------------------
# Config: env vars (.env) + CLI overrides
# ---------------------------------------------------------------------------

def _build_config(args: argparse.Namespace) -> ConverterConfig:
    """
    Priority order for each setting:
      1. CLI flag (--separator, --pretty, --queue-size)
      2. Environment variable
      3. ConverterConfig default
    """
    kwargs: dict = {}
    if args.separator:
        kwargs["separator"] = args.separator
    if args.pretty:
        kwargs["pretty"] = True
    if args.queue_size is not None:
        kwargs["queue_size"] = args.queue_size
    return ConverterConfig(args.source, **kwargs)


# ---------------------------------------------------------------------------
# Result printer
# ---------------------------------------------------------------------------

def _print_result(result: ConversionResult) -> None:
    print(f"\n✓ SUCCESS: {result.source_path.name}")
    print(f"  Output   : {result.output_path}")
    print(f"  Records  : {result.records_written}")
    if result.rows_skipped:
        print(f"  Skipped  : {result.rows_skipped} row(s) did not match the header")


def _fail(message: str, code: int) -> int:
    print(f"error: {message}", file=sys.stderr, flush=True)
    return code


# ---------------------------------------------------------------------------
# Command handler
# ---------------------------------------------------------------------------

def _cmd_convert(args: argparse.Namespace) -> int:
    try:
        config = _build_config(args)
        result = run(config)
    except ConfigurationError as e:
        return _fail(str(e), 2)
    except ConversionError as e:
        return _fail(str(e), 1)
    _print_result(result)
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="csvjson",
        description="Stream a CSV file into a JSON array next to it",
        usage="%(prog)s [options] <csvFile>",
    )
    parser.add_argument("source", help="Path to the .csv file to convert")
    parser.add_argument(
        "--separator",
        choices=sorted(SEPARATORS),
        default=None,
        help="Column separator (default: comma, or CSVJSON_SEPARATOR)",
    )
    parser.add_argument("--pretty", action="store_true", help="Generate pretty JSON")
    parser.add_argument(
        "--queue-size",
        type=int,
        default=None,
        dest="queue_size",
        help="Records buffered between reader and writer",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: Sequence[str] | None = None) -> None:
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)
    sys.exit(_cmd_convert(args))


if __name__ == "__main__":
    main()
