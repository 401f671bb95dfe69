"""
Validation helpers for CSV structure integrity.

Called by the reader for the header and by the record generator for every
data row.  All functions raise the appropriate exception on failure rather
than returning a boolean; the caller decides whether the error is fatal
(header) or skippable (row).
"""

from __future__ import annotations

from csvjson.configs.exceptions import AlignmentError, HeaderError


def validate_row_alignment(
    row: list[str],
    expected_field_count: int,
    row_number: int,
    source_path: str | None = None,
) -> None:
    """
    Assert that a CSV row has exactly the expected number of fields.

    Too many and too few fields are the same failure.

    Args:
        row:                  The parsed row as a list of strings.
        expected_field_count: Number of fields in the header row.
        row_number:           1-based row number for error reporting.
        source_path:          Path of the CSV file being processed.

    Raises:
        AlignmentError: If ``len(row) != expected_field_count``.
    """
    actual = len(row)
    if actual != expected_field_count:
        raise AlignmentError(
            "Line doesn't match headers format. Skipping",
            source_path=source_path,
            row_number=row_number,
            expected=expected_field_count,
            got=actual,
            row=row,
        )


def validate_headers(
    headers: list[str],
    source_path: str | None = None,
) -> None:
    """
    Assert that the header row can key a JSON object.

    Args:
        headers:     List of header strings from the CSV.
        source_path: Path of the CSV file being processed.

    Raises:
        HeaderError: If the list is empty or a name appears more than once.
            Blank names are kept and key the object with ``""``.
    """
    if not headers:
        raise HeaderError("CSV file has no headers.", source_path=source_path)

    seen: set[str] = set()
    for i, h in enumerate(headers):
        if h in seen:
            raise HeaderError(
                f"Duplicate header {h!r} at position {i}.", source_path=source_path
            )
        seen.add(h)
