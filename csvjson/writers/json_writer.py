"""
Streaming JSON array writer.

Writes records to a text sink as one JSON array without ever holding the
whole array in memory.  ``JSONArrayWriter`` is a small state machine::

    AWAITING_FIRST ──first record──▶ STREAMING ──close()──▶ CLOSED
          │                                                  ▲
          └──────────────close() (zero records)──────────────┘

Output layout:

- compact: ``[{"a":"1","b":"2"},{"a":"3","b":"4"}]`` on a single line.
- pretty::

      [
         {
            "a": "1",
            "b": "2"
         },
         {
            "a": "3",
            "b": "4"
         }
      ]

``write_json_array`` is the writer thread body: it owns the output file,
drains a ``RecordChannel`` into a ``JSONArrayWriter`` and sets the
completion event on the way out.
"""

from __future__ import annotations

import enum
import json
import logging
import textwrap
import threading
from pathlib import Path
from typing import Iterable, TextIO

from csvjson.configs.config import DEFAULT_INDENT
from csvjson.configs.exceptions import SinkError
from csvjson.utils.files import remove_partial_output

logger = logging.getLogger(__name__)


class WriterState(enum.Enum):
    AWAITING_FIRST = "awaiting_first"
    STREAMING = "streaming"
    CLOSED = "closed"


class JSONArrayWriter:
    """
    Incrementally write a JSON array of string-valued objects.

    The opening bracket is written on construction.  The sink is not
    closed by ``close()``; whoever opened it closes it.

    Args:
        sink:   Writable text stream.
        pretty: Indent objects and break lines between elements.
        indent: Indent unit for pretty mode.
    """

    def __init__(self, sink: TextIO, pretty: bool = False, indent: str = DEFAULT_INDENT) -> None:
        self.sink = sink
        self.pretty = pretty
        self.indent = indent
        self.state = WriterState.AWAITING_FIRST
        self.records_written = 0
        self._break_line = "\n" if pretty else ""
        self._write("[" + self._break_line)

    def write(self, record: dict[str, str]) -> None:
        """
        Append one record to the array.

        Raises:
            RuntimeError: If the writer is already closed.
            SinkError: If the sink rejects the write.
        """
        if self.state is WriterState.CLOSED:
            raise RuntimeError("write() on a closed JSONArrayWriter")

        if self.state is WriterState.STREAMING:
            self._write("," + self._break_line)
        else:
            self.state = WriterState.STREAMING

        self._write(self._encode(record))
        self.records_written += 1

    def close(self) -> None:
        """Write the closing bracket and flush.  Closing twice is a no-op."""
        if self.state is WriterState.CLOSED:
            return
        self._write(self._break_line + "]")
        try:
            self.sink.flush()
        except OSError as e:
            raise SinkError(f"Cannot flush JSON output: {e}", self._sink_name()) from e
        self.state = WriterState.CLOSED

    def _encode(self, record: dict[str, str]) -> str:
        if not self.pretty:
            return json.dumps(record, ensure_ascii=False, separators=(",", ":"))
        text = json.dumps(record, ensure_ascii=False, indent=self.indent)
        return textwrap.indent(text, self.indent)

    def _write(self, data: str) -> None:
        try:
            self.sink.write(data)
        except OSError as e:
            raise SinkError(f"Cannot write JSON output: {e}", self._sink_name()) from e

    def _sink_name(self) -> str | None:
        name = getattr(self.sink, "name", None)
        return str(name) if name is not None else None


def write_records(
    records: Iterable[dict[str, str]],
    sink: TextIO,
    pretty: bool = False,
    indent: str = DEFAULT_INDENT,
) -> int:
    """
    Write ``records`` to ``sink`` as a complete JSON array.

    Returns:
        Number of records written.
    """
    writer = JSONArrayWriter(sink, pretty=pretty, indent=indent)
    for record in records:
        writer.write(record)
    writer.close()
    return writer.records_written


def write_json_array(
    records: Iterable[dict[str, str]],
    output_path: Path | str,
    done: threading.Event,
    pretty: bool = False,
    indent: str = DEFAULT_INDENT,
) -> int:
    """
    Writer thread body: stream ``records`` into ``output_path``.

    The output file is opened here and closed here on every path.
    ``done`` is set after the file is closed, whether or not the write
    succeeded.

    Args:
        records:     Usually a ``RecordChannel``; iteration ends on close.
        output_path: Destination ``.json`` file (created or truncated).
        done:        Completion signal for the coordinator.
        pretty:      Indented output.
        indent:      Indent unit for pretty output.

    Returns:
        Number of records written.

    Raises:
        SinkError: If the output cannot be created or written.
        ConversionError: Whatever the record source raised.
    """
    output_path = Path(output_path)
    try:
        try:
            sink = open(output_path, "w", encoding="utf-8", newline="")
        except OSError as e:
            raise SinkError(f"Cannot create {output_path}: {e}", str(output_path)) from e

        logger.info("Writing JSON file %s", output_path)
        try:
            with sink:
                count = write_records(records, sink, pretty=pretty, indent=indent)
        except OSError as e:
            _discard(output_path)
            raise SinkError(f"Cannot close {output_path}: {e}", str(output_path)) from e
        except BaseException:
            _discard(output_path)
            raise
        logger.info("Completed! %d record(s) written to %s", count, output_path)
        return count
    finally:
        done.set()


def _discard(output_path: Path) -> None:
    """Remove an incomplete output file; a failure here is logged, not raised."""
    try:
        remove_partial_output(output_path)
    except SinkError as e:
        logger.error("Failed to remove partial output: %s", e)
