"""
JSON writing: test_json_writing.py

json_writer.py:
  - "[" is written before any record arrives
  - compact output is a single line with no spaces
  - pretty output indents each object one level inside the array
  - first record has no separator, later ones are comma-separated
  - zero records → "[]" (compact) / "[\n\n]" (pretty)
  - state machine: AWAITING_FIRST → STREAMING → CLOSED, no way back
  - numeric-looking values stay strings; non-ASCII written as-is
  - sink failures become SinkError
  - write_json_array owns the file, sets done on success and failure,
    and removes the partial file when the record source fails
"""

from __future__ import annotations

import io
import json
import threading

import pytest

from csvjson.configs.exceptions import SinkError, SourceError
from csvjson.writers.json_writer import (
    JSONArrayWriter,
    WriterState,
    write_json_array,
    write_records,
)


RECORDS = [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]

PRETTY_A = (
    "[\n"
    "   {\n"
    '      "a": "1",\n'
    '      "b": "2"\n'
    "   },\n"
    "   {\n"
    '      "a": "3",\n'
    '      "b": "4"\n'
    "   }\n"
    "]"
)


class FailingSink(io.StringIO):
    """StringIO that starts failing after ``ok_writes`` writes."""

    def __init__(self, ok_writes: int = 0) -> None:
        super().__init__()
        self.ok_writes = ok_writes

    def write(self, data: str) -> int:
        if self.ok_writes <= 0:
            raise OSError("disk full")
        self.ok_writes -= 1
        return super().write(data)


def failing_records():
    yield {"a": "1"}
    raise SourceError("boom")


# ============================================================================
# JSONArrayWriter
# ============================================================================

class TestJSONArrayWriter:
    def test_open_bracket_written_immediately(self):
        sink = io.StringIO()
        JSONArrayWriter(sink)
        assert sink.getvalue() == "["

    def test_open_bracket_pretty(self):
        sink = io.StringIO()
        JSONArrayWriter(sink, pretty=True)
        assert sink.getvalue() == "[\n"

    def test_compact_output(self):
        sink = io.StringIO()
        write_records(RECORDS, sink)
        assert sink.getvalue() == '[{"a":"1","b":"2"},{"a":"3","b":"4"}]'

    def test_pretty_output(self):
        sink = io.StringIO()
        write_records(RECORDS, sink, pretty=True)
        assert sink.getvalue() == PRETTY_A

    def test_pretty_and_compact_are_equivalent(self):
        compact, pretty = io.StringIO(), io.StringIO()
        write_records(RECORDS, compact)
        write_records(RECORDS, pretty, pretty=True)
        assert json.loads(compact.getvalue()) == json.loads(pretty.getvalue()) == RECORDS

    def test_single_record_has_no_separator(self):
        sink = io.StringIO()
        write_records([{"a": "1", "b": "2"}], sink)
        assert sink.getvalue() == '[{"a":"1","b":"2"}]'

    def test_zero_records_compact(self):
        sink = io.StringIO()
        assert write_records([], sink) == 0
        assert sink.getvalue() == "[]"

    def test_zero_records_pretty(self):
        sink = io.StringIO()
        write_records([], sink, pretty=True)
        assert sink.getvalue() == "[\n\n]"
        assert json.loads(sink.getvalue()) == []

    def test_custom_indent(self):
        sink = io.StringIO()
        write_records([{"a": "1"}], sink, pretty=True, indent="\t")
        assert sink.getvalue() == '[\n\t{\n\t\t"a": "1"\n\t}\n]'

    def test_values_stay_strings(self):
        sink = io.StringIO()
        write_records([{"n": "42", "f": "1.5", "b": "true", "e": ""}], sink)
        assert json.loads(sink.getvalue()) == [{"n": "42", "f": "1.5", "b": "true", "e": ""}]

    def test_non_ascii_written_verbatim(self):
        sink = io.StringIO()
        write_records([{"city": "Zürich"}], sink)
        assert sink.getvalue() == '[{"city":"Zürich"}]'

    def test_special_characters_escaped(self):
        sink = io.StringIO()
        write_records([{"q": 'say "hi"\n'}], sink)
        assert json.loads(sink.getvalue()) == [{"q": 'say "hi"\n'}]

    def test_state_transitions(self):
        writer = JSONArrayWriter(io.StringIO())
        assert writer.state is WriterState.AWAITING_FIRST
        writer.write({"a": "1"})
        assert writer.state is WriterState.STREAMING
        writer.write({"a": "2"})
        assert writer.state is WriterState.STREAMING
        writer.close()
        assert writer.state is WriterState.CLOSED
        assert writer.records_written == 2

    def test_close_without_records(self):
        writer = JSONArrayWriter(io.StringIO())
        writer.close()
        assert writer.state is WriterState.CLOSED

    def test_close_twice_is_noop(self):
        sink = io.StringIO()
        writer = JSONArrayWriter(sink)
        writer.close()
        writer.close()
        assert sink.getvalue() == "[]"

    def test_write_after_close_raises(self):
        writer = JSONArrayWriter(io.StringIO())
        writer.close()
        with pytest.raises(RuntimeError):
            writer.write({"a": "1"})

    def test_sink_failure_on_open_raises(self):
        with pytest.raises(SinkError, match="disk full"):
            JSONArrayWriter(FailingSink(ok_writes=0))

    def test_sink_failure_mid_stream_raises(self):
        writer = JSONArrayWriter(FailingSink(ok_writes=2))
        writer.write({"a": "1"})
        with pytest.raises(SinkError):
            writer.write({"a": "2"})


# ============================================================================
# write_json_array
# ============================================================================

class TestWriteJsonArray:
    def test_writes_file_and_sets_done(self, tmp_path):
        out = tmp_path / "out.json"
        done = threading.Event()
        count = write_json_array(iter(RECORDS), out, done)
        assert count == 2
        assert done.is_set()
        assert out.read_text(encoding="utf-8") == '[{"a":"1","b":"2"},{"a":"3","b":"4"}]'

    def test_pretty_file(self, tmp_path):
        out = tmp_path / "out.json"
        write_json_array(iter(RECORDS), out, threading.Event(), pretty=True)
        assert out.read_text(encoding="utf-8") == PRETTY_A

    def test_truncates_existing_file(self, tmp_path):
        out = tmp_path / "out.json"
        out.write_text("x" * 500, encoding="utf-8")
        write_json_array(iter([]), out, threading.Event())
        assert out.read_text(encoding="utf-8") == "[]"

    def test_source_failure_removes_partial_output(self, tmp_path):
        out = tmp_path / "out.json"
        done = threading.Event()
        with pytest.raises(SourceError):
            write_json_array(failing_records(), out, done)
        assert done.is_set()
        assert not out.exists()

    def test_unwritable_destination_raises_sink_error(self, tmp_path):
        out = tmp_path / "out.json"
        out.mkdir()
        done = threading.Event()
        with pytest.raises(SinkError):
            write_json_array(iter(RECORDS), out, done)
        assert done.is_set()
        assert out.is_dir()
