from __future__ import annotations

import pytest

_ENV_KEYS = (
    "CSVJSON_SEPARATOR",
    "CSVJSON_PRETTY",
    "CSVJSON_QUEUE_SIZE",
    "CSVJSON_ENCODING",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's shell settings out of config defaults."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
