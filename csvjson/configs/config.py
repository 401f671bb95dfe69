"""
Converter configuration.

All tuneable constants live here.  Import from this module everywhere;
never hardcode separators, queue sizes or indentation inline.

Usage:
    from csvjson.configs.config import ConverterConfig
    cfg = ConverterConfig("data/people.csv")                  # env / defaults
    cfg = ConverterConfig("data/people.csv", separator="semicolon", pretty=True)

Environment overrides (optional) can be loaded via .env / os.environ before
constructing the config object; this module does not load .env itself.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from csvjson.configs.exceptions import ConfigurationError
from csvjson.utils.files import check_input_file, derive_output_path


# Supported separators.  No auto-detection; anything else is a config error.
SEPARATORS: dict[str, str] = {
    "comma": ",",
    "semicolon": ";",
}

DEFAULT_SEPARATOR: str = "comma"

DEFAULT_INDENT: str = "   "
"""Indent unit for pretty output; objects sit one unit inside the array."""


def _env_flag(key: str, default: str = "false") -> bool:
    return os.environ.get(key, default).strip().lower() in ("1", "true", "yes", "on")


def _env_int(key: str, default: str) -> int:
    raw = os.environ.get(key, default)
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from None


@dataclass(slots=True)
class ConverterConfig:
    """
    Runtime configuration for one conversion.

    Attributes:
        source_path: Path of the CSV file to convert.  Required.
        separator: ``"comma"`` or ``"semicolon"``.
        pretty: If True, write indented JSON with one element per block.
        queue_size: Capacity of the reader → writer handoff channel.  Keep it
            small; it bounds how many records are held in memory at once.
        encoding: Text encoding of the input.  ``utf-8-sig`` tolerates a BOM.
        indent: Indent unit used in pretty mode.
    """

    source_path: Path
    separator: str = field(
        default_factory=lambda: os.environ.get("CSVJSON_SEPARATOR", DEFAULT_SEPARATOR)
    )
    pretty: bool = field(default_factory=lambda: _env_flag("CSVJSON_PRETTY"))
    queue_size: int = field(
        default_factory=lambda: _env_int("CSVJSON_QUEUE_SIZE", "1")
    )
    encoding: str = field(
        default_factory=lambda: os.environ.get("CSVJSON_ENCODING", "utf-8-sig")
    )
    indent: str = DEFAULT_INDENT

    def __post_init__(self) -> None:
        if self.source_path is None or str(self.source_path) == "":
            raise ConfigurationError("A filepath argument is required")
        self.source_path = Path(self.source_path)

    @property
    def output_path(self) -> Path:
        """Where the JSON document is written: same directory and stem, ``.json``."""
        return derive_output_path(self.source_path)

    def validate(self) -> None:
        """
        Check everything that must hold before any output is created.

        Raises:
            ConfigurationError: On an unsupported separator, a queue size
                below 1, or an input path that is not an existing ``.csv`` file.
        """
        if self.separator not in SEPARATORS:
            raise ConfigurationError(
                f"Only comma or semicolon separators are allowed, got {self.separator!r}"
            )
        if self.queue_size < 1:
            raise ConfigurationError(
                f"queue_size must be at least 1, got {self.queue_size}"
            )
        check_input_file(self.source_path)
