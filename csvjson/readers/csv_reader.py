"""
Single-pass CSV source for the reader thread.

Usage:
    with CSVReader(path, separator="semicolon") as source:
        headers = source.headers()
        for line_number, row in source.rows():
            process(row)

Handles:
- UTF-8 with or without BOM (``utf-8-sig``).
- Windows CRLF and Unix LF line endings (``newline=''``).
- Comma or semicolon separators through the strict dialects.
- Strict dialect: raises on malformed quoting, which is fatal for the run.
- Blank lines are skipped, including any before the header.
- Header names are kept exactly as written (a blank name keys ``""``).
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Iterator

from csvjson.configs.config import DEFAULT_SEPARATOR
from csvjson.configs.csv_dialect import dialect_name, register_dialects
from csvjson.configs.exceptions import HeaderError, SourceError
from csvjson.utils.validation import validate_headers

logger = logging.getLogger(__name__)


class CSVReader:
    """
    Single-pass CSV file reader.

    Args:
        path: Path to the CSV file.
        separator: ``"comma"`` or ``"semicolon"``.
        encoding: Text encoding of the file.
    """

    def __init__(
        self,
        path: Path | str,
        separator: str = DEFAULT_SEPARATOR,
        encoding: str = "utf-8-sig",
    ) -> None:
        self.path = Path(path)
        self.separator = separator
        self.encoding = encoding
        self._dialect = dialect_name(separator)
        self._file = None
        self._reader = None
        self._headers: list[str] | None = None

    def open(self) -> None:
        """
        Open the file and read the header row.

        Raises:
            SourceError: If the file cannot be opened or read.
            HeaderError: If the file is empty or the header is unusable.
        """
        register_dialects()
        try:
            self._file = open(  # noqa: WPS515
                self.path,
                encoding=self.encoding,
                newline="",
            )
        except OSError as e:
            raise SourceError(
                f"Cannot open {self.path}: {e}",
                source_path=str(self.path),
            ) from e

        try:
            self._headers = self._read_headers()
        except Exception:
            self.close()
            raise

        logger.debug(
            "Opened %s (%s-separated), headers=%s",
            self.path, self.separator, self._headers,
        )

    def headers(self) -> list[str]:
        """Return the cached header list.  ``open()`` must be called first."""
        if self._headers is None:
            raise RuntimeError("CSVReader.open() must be called before headers().")
        return self._headers

    def rows(self) -> Iterator[tuple[int, list[str]]]:
        """
        Yield ``(line_number, fields)`` for each data row.

        ``line_number`` is the source line on which the row ends, so the
        first data row of a file without multi-line fields is 2.

        Raises:
            SourceError: If the file cannot be read or a row is malformed.
        """
        if self._reader is None:
            raise RuntimeError("CSVReader.open() must be called before rows().")

        try:
            for row in self._reader:
                if not row:
                    logger.debug("Skipping blank line %d", self._reader.line_num)
                    continue
                yield self._reader.line_num, row
        except csv.Error as e:
            raise SourceError(
                f"Malformed row near line {self._reader.line_num} in {self.path}: {e}",
                source_path=str(self.path),
            ) from e
        except (OSError, UnicodeDecodeError) as e:
            raise SourceError(
                f"Cannot read {self.path}: {e}",
                source_path=str(self.path),
            ) from e

    def close(self) -> None:
        """Close the underlying file handle."""
        if self._file is not None:
            self._file.close()
            self._file = None
            self._reader = None

    def __enter__(self) -> "CSVReader":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
        return None

    # ── internals ────────────────────────────────────────────────────────

    def _read_headers(self) -> list[str]:
        self._reader = csv.reader(self._file, dialect=self._dialect)
        try:
            raw_headers = next(row for row in self._reader if row)
        except StopIteration:
            raise HeaderError(
                f"CSV file is empty: {self.path}",
                source_path=str(self.path),
            ) from None
        except csv.Error as e:
            raise HeaderError(
                f"Malformed CSV header in {self.path}: {e}",
                source_path=str(self.path),
            ) from e
        except (OSError, UnicodeDecodeError) as e:
            raise SourceError(
                f"Cannot read {self.path}: {e}",
                source_path=str(self.path),
            ) from e

        validate_headers(raw_headers, source_path=str(self.path))
        return raw_headers
