"""
The record stream.

Streams rows from a ``CSVReader`` and yields one
``dict[field_name, value]`` per row, ready for the JSON writer.

Key properties:
  - **Lazy**: only one row is in memory at a time.
  - **Header-ordered**: dict keys follow the header, so serialized objects
    are reproducible field for field.
  - **Text only**: values are passed through untouched; ``"42"`` stays a string.
  - **Skipping**: a row whose field count differs from the header is logged,
    counted in ``RecordStats.rows_skipped`` and left out of the stream.
    Anything else the source raises propagates.

Usage::

    stats = RecordStats()
    with CSVReader(path) as source:
        for record in generate_records(source, stats):
            # record == {"name": "Alice", "age": "30"}
            pass
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

from csvjson.configs.exceptions import AlignmentError
from csvjson.readers.csv_reader import CSVReader
from csvjson.utils.validation import validate_row_alignment

logger = logging.getLogger(__name__)


@dataclass
class RecordStats:
    """Counters updated while the stream is consumed."""

    records_read: int = 0
    rows_skipped: int = 0


def generate_records(
    source: CSVReader,
    stats: RecordStats | None = None,
) -> Iterator[dict[str, str]]:
    """
    Stream rows from ``source`` as header-keyed dicts.

    Args:
        source: An already-opened ``CSVReader``.
        stats:  Optional counters to update as rows are read or skipped.

    Yields:
        One ``dict`` per well-formed data row, in source order.
    """
    if stats is None:
        stats = RecordStats()

    headers = source.headers()
    field_count = len(headers)
    source_path = str(source.path)

    for row_number, row in source.rows():
        try:
            validate_row_alignment(row, field_count, row_number, source_path)
        except AlignmentError as e:
            stats.rows_skipped += 1
            logger.warning("Line: %s Error: %s", row, e)
            continue

        stats.records_read += 1
        yield dict(zip(headers, row))
