"""
CSV dialect configuration for the converter.

Registers one strict dialect per supported separator:

- ``csvjson_comma``      comma-delimited, double-quote quoting.
- ``csvjson_semicolon``  same, semicolon-delimited.

Both raise ``csv.Error`` on malformed quoting rather than silently
accepting it.  Leading whitespace in a field is kept; values are text.

Usage:
    import csv
    from csvjson.configs.csv_dialect import dialect_name, register_dialects

    register_dialects()
    reader = csv.reader(f, dialect=dialect_name("semicolon"))

BOM Handling:
    Open files with ``encoding='utf-8-sig'`` to strip a UTF-8 BOM.  The
    dialect does not handle this; it is an encoding concern.
"""

from __future__ import annotations

import csv

from csvjson.configs.config import SEPARATORS
from csvjson.configs.exceptions import ConfigurationError

DIALECT_PREFIX: str = "csvjson_"

# Largest value every platform's C long accepts (the stdlib default is 131072).
FIELD_SIZE_LIMIT: int = 2**31 - 1


class CommaStrictDialect(csv.excel):
    """
    Strict comma dialect.

    Inherits from ``csv.excel`` (comma-delimited, double-quote) and enables
    strict mode so malformed rows raise ``csv.Error`` immediately.
    """

    strict: bool = True
    skipinitialspace: bool = False


class SemicolonStrictDialect(CommaStrictDialect):
    """Strict dialect for semicolon-separated exports."""

    delimiter: str = SEPARATORS["semicolon"]


_DIALECTS: dict[str, type[csv.Dialect]] = {
    "comma": CommaStrictDialect,
    "semicolon": SemicolonStrictDialect,
}


def dialect_name(separator: str) -> str:
    """
    Return the registered dialect name for a separator choice.

    Raises:
        ConfigurationError: If ``separator`` is not ``comma`` or ``semicolon``.
    """
    if separator not in _DIALECTS:
        raise ConfigurationError(
            f"Only comma or semicolon separators are allowed, got {separator!r}"
        )
    return f"{DIALECT_PREFIX}{separator}"


def register_dialects() -> None:
    """
    Register every converter dialect with the ``csv`` module.

    Safe to call multiple times; already-registered dialects are left alone.
    Also lifts the ``csv`` module's per-field size limit so very long
    values are read like any other.
    """
    if csv.field_size_limit() < FIELD_SIZE_LIMIT:
        csv.field_size_limit(FIELD_SIZE_LIMIT)
    existing = csv.list_dialects()
    for separator, dialect in _DIALECTS.items():
        name = dialect_name(separator)
        if name not in existing:
            csv.register_dialect(name, dialect)