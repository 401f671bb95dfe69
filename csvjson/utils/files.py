"""
File helpers for the converter.

Input validation and output-path derivation happen here, before the
pipeline starts, so a bad path never leaves a stray ``.json`` behind.
Failures raise rather than returning booleans.
"""

from __future__ import annotations

import logging
from pathlib import Path

from csvjson.configs.exceptions import ConfigurationError, SinkError

logger = logging.getLogger(__name__)

INPUT_SUFFIX = ".csv"
OUTPUT_SUFFIX = ".json"


def check_input_file(source_path: Path | str) -> Path:
    """
    Assert that ``source_path`` names an existing CSV file.

    Args:
        source_path: Path supplied by the caller.

    Returns:
        The path as a ``Path``.

    Raises:
        ConfigurationError: If the extension is not ``.csv`` (case-insensitive),
            the file does not exist, or the path is a directory.
    """
    source = Path(source_path)
    if source.suffix.lower() != INPUT_SUFFIX:
        raise ConfigurationError(f"File {source} is not CSV")
    if not source.exists():
        raise ConfigurationError(f"File {source} does not exist")
    if not source.is_file():
        raise ConfigurationError(f"File {source} is not a regular file")
    return source


def derive_output_path(source_path: Path | str) -> Path:
    """
    Return the JSON path next to ``source_path``.

    ``data/people.csv`` → ``data/people.json``.
    """
    return Path(source_path).with_suffix(OUTPUT_SUFFIX)


def remove_partial_output(output_path: Path | str) -> None:
    """
    Delete an incomplete output file after a failed run.

    A file that is already gone is fine.

    Raises:
        SinkError: If the file exists but cannot be removed.
    """
    path = Path(output_path)
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        raise SinkError(
            f"Failed to remove partial output: {e}", output_path=str(path)
        ) from e
    logger.debug("Removed partial output %s", path)
