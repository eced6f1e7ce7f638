"""Shared fixtures: quiet logging, fresh settings and transaction files on disk."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from txn_insights.core.config import get_settings
from txn_insights.core.logger import init_logging, shutdown_logging


@pytest.fixture(autouse=True)
def quiet_environment(monkeypatch: pytest.MonkeyPatch):
    """Keep log output off the console and settings free of the caller's env."""

    for name in (
        "TXN_INSIGHTS_DATA_FILE",
        "TXN_INSIGHTS_CURRENCY_SYMBOL",
        "TXN_INSIGHTS_LOG_LEVEL",
        "TXN_INSIGHTS_RICH_TRACEBACKS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TXN_INSIGHTS_LOG_CONSOLE", "false")
    monkeypatch.setenv("TXN_INSIGHTS_LOG_DIR", "")
    get_settings.cache_clear()
    init_logging(console=False, log_dir=None, queue=False)
    yield
    shutdown_logging()
    get_settings.cache_clear()


@pytest.fixture()
def write_transactions(tmp_path: Path) -> Callable[..., Path]:
    """Write ``payload`` as JSON into a temporary file and return its path."""

    def _write(payload: Any, name: str = "transactions.json") -> Path:
        path = tmp_path / name
        text = payload if isinstance(payload, str) else json.dumps(payload)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
