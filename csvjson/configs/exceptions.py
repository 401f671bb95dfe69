"""
Custom exceptions for the CSV → JSON conversion pipeline.

Hierarchy:
    ConversionError
    ├── ConfigurationError    Bad input path, extension, separator or queue size.
    ├── SourceError           Input cannot be opened, read or parsed; run halts.
    │   └── HeaderError       Header row is empty or repeats a name.
    ├── AlignmentError        Row field count doesn't match header count; row skipped.
    ├── SinkError             Output cannot be written; run halts.
    └── PipelineAborted       The other side of the pipeline failed first.
"""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for all conversion errors."""


class ConfigurationError(ConversionError):
    """Raised before the pipeline starts when the configuration is unusable."""


class SourceError(ConversionError):
    """
    Raised when the input file cannot be opened, read or parsed.

    Args:
        message: Human-readable description of the failure.
        source_path: Path of the file being read when the error occurred.
    """

    def __init__(self, message: str, source_path: str | None = None) -> None:
        super().__init__(message)
        self.source_path = source_path

    def __str__(self) -> str:
        base = super().__str__()
        if self.source_path:
            return f"{base} | source={self.source_path}"
        return base


class HeaderError(SourceError):
    """Raised when the header row cannot be used as a field-name list."""


class AlignmentError(ConversionError):
    """
    Raised when a CSV row has a different number of fields than the header row.

    The reader catches this, logs it and moves on to the next row.

    Args:
        message: Human-readable description.
        source_path: Path of the CSV file.
        row_number: 1-based row number (header is row 1).
        expected: Number of fields expected (from header).
        got: Number of fields actually found in the row.
        row: The offending row as parsed.
    """

    def __init__(
        self,
        message: str,
        source_path: str | None = None,
        row_number: int | None = None,
        expected: int | None = None,
        got: int | None = None,
        row: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.source_path = source_path
        self.row_number = row_number
        self.expected = expected
        self.got = got
        self.row = row

    def __str__(self) -> str:
        base = super().__str__()
        parts = []
        if self.row_number is not None:
            parts.append(f"row={self.row_number}")
        if self.expected is not None:
            parts.append(f"expected={self.expected}")
        if self.got is not None:
            parts.append(f"got={self.got}")
        if parts:
            return f"{base} | {' '.join(parts)}"
        return base


class SinkError(ConversionError):
    """
    Raised when the JSON output cannot be written.

    Args:
        message: Human-readable description.
        output_path: Path of the output file, if known.
    """

    def __init__(self, message: str, output_path: str | None = None) -> None:
        super().__init__(message)
        self.output_path = output_path

    def __str__(self) -> str:
        base = super().__str__()
        if self.output_path:
            return f"{base} | output={self.output_path}"
        return base


class PipelineAborted(ConversionError):
    """Raised inside one pipeline thread when the other one has failed."""
