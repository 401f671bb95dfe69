"""
Pipeline coordinator for the CSV → JSON converter.

Wires the reader and writer threads together and is the single callable
that ``master.py`` invokes.

Thread layout:
  reader  Open CSV → read header → generate records → ``channel.put`` each
          → ``channel.close()`` (with the error attached on failure).
  writer  Open output → ``[`` → drain channel → ``]`` → close output
          → set ``done``.

The coordinator validates the configuration, starts both threads, waits
for ``done`` and joins them.

Error policy:
  - ``ConfigurationError`` is raised before any thread starts or any
    output file is created.
  - Row-shape mismatches are absorbed by the reader (logged, counted).
  - ``SourceError`` in the reader closes the channel with the error; the
    writer re-raises it, stops writing and removes the partial output.
  - ``SinkError`` in the writer sets the abort event; a reader blocked on
    a full channel gives up with ``PipelineAborted``.
  - ``run`` raises the root-cause ``ConversionError``; it never exits the
    process.  Exit codes are the CLI's business.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path

from csvjson.channel import RecordChannel
from csvjson.configs.config import ConverterConfig
from csvjson.configs.exceptions import (
    ConversionError,
    PipelineAborted,
    SinkError,
    SourceError,
)
from csvjson.readers.csv_reader import CSVReader
from csvjson.transformers.record_generator import RecordStats, generate_records
from csvjson.writers.json_writer import write_json_array

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result object
# ---------------------------------------------------------------------------

@dataclass
class ConversionResult:
    """
    Summary of a single conversion.

    Attributes:
        source_path:     CSV that was read.
        output_path:     JSON file that was (or would have been) written.
        pretty:          Whether pretty output was requested.
        records_read:    Well-formed data rows handed to the writer.
        records_written: Objects that made it into the JSON array.
        rows_skipped:    Rows rejected for a field-count mismatch.
        error:           Fatal error that stopped the run, if any.
    """
    source_path: Path
    output_path: Path
    pretty: bool = False
    records_read: int = 0
    records_written: int = 0
    rows_skipped: int = 0
    error: ConversionError | None = None

    @property
    def success(self) -> bool:
        return self.error is None


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run(config: ConverterConfig) -> ConversionResult:
    """
    Convert ``config.source_path`` into a JSON array next to it.

    Args:
        config: Converter configuration.

    Returns:
        ``ConversionResult`` with the counters filled in.

    Raises:
        ConfigurationError: Before anything is written, on a bad config.
        ConversionError:    The first fatal reader or writer error.  The
                            result built so far is available as ``e.result``.
    """
    config.validate()

    result = ConversionResult(
        source_path=config.source_path,
        output_path=config.output_path,
        pretty=config.pretty,
    )
    stats = RecordStats()
    errors: dict[str, ConversionError] = {}

    abort = threading.Event()
    done = threading.Event()
    channel = RecordChannel(maxsize=config.queue_size, abort=abort)

    reader_thread = threading.Thread(
        target=_reader_task,
        args=(config, channel, stats, errors),
        name="csvjson-reader",
        daemon=True,
    )
    writer_thread = threading.Thread(
        target=_writer_task,
        args=(config, channel, done, abort, result, errors),
        name="csvjson-writer",
        daemon=True,
    )

    logger.info(
        "Converting %s → %s (separator=%s, pretty=%s)",
        result.source_path, result.output_path, config.separator, config.pretty,
    )

    reader_thread.start()
    writer_thread.start()

    done.wait()
    writer_thread.join()
    reader_thread.join()

    result.records_read = stats.records_read
    result.rows_skipped = stats.rows_skipped

    error = _root_cause(errors)
    if error is not None:
        result.error = error
        logger.error("Conversion of %s failed: %s", result.source_path.name, error)
        error.result = result
        raise error

    if result.rows_skipped:
        logger.warning(
            "%d row(s) skipped in %s: field count did not match the header",
            result.rows_skipped, result.source_path.name,
        )
    return result


# ---------------------------------------------------------------------------
# Thread bodies
# ---------------------------------------------------------------------------

def _reader_task(
    config: ConverterConfig,
    channel: RecordChannel,
    stats: RecordStats,
    errors: dict[str, ConversionError],
) -> None:
    """Push every record onto ``channel`` and close it, passing on any failure."""
    failure: ConversionError | None = None
    try:
        with CSVReader(config.source_path, config.separator, config.encoding) as source:
            for record in generate_records(source, stats):
                channel.put(record)
    except PipelineAborted:
        logger.debug("Reader stopped: writer is gone")
    except ConversionError as e:
        errors["reader"] = failure = e
    except Exception as e:
        errors["reader"] = failure = SourceError(
            f"Unexpected reader failure: {e}", source_path=str(config.source_path)
        )
    finally:
        channel.close(error=failure)


def _writer_task(
    config: ConverterConfig,
    channel: RecordChannel,
    done: threading.Event,
    abort: threading.Event,
    result: ConversionResult,
    errors: dict[str, ConversionError],
) -> None:
    try:
        result.records_written = write_json_array(
            channel,
            config.output_path,
            done,
            pretty=config.pretty,
            indent=config.indent,
        )
    except ConversionError as e:
        errors["writer"] = e
    except Exception as e:
        errors["writer"] = SinkError(
            f"Unexpected writer failure: {e}", output_path=str(config.output_path)
        )
    finally:
        # The reader may still be blocked on a full channel.
        abort.set()
        done.set()


def _root_cause(errors: dict[str, ConversionError]) -> ConversionError | None:
    """A reader failure surfaces through the writer too; report the reader's."""
    return errors.get("reader") or errors.get("writer")
