"""Application configuration primitives."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_DATA_FILE = Path("data/transactions.json")


def _load_env(dotenv_path: Optional[Path] = None) -> None:
    """Load the .env file once for the process."""

    if getattr(_load_env, "_loaded", False):  # type: ignore[attr-defined]
        return

    load_dotenv(dotenv_path)
    setattr(_load_env, "_loaded", True)  # type: ignore[attr-defined]


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class DataSettings:
    """Where the transaction file lives and how amounts are displayed."""

    path: Path = DEFAULT_DATA_FILE
    currency_symbol: str = "$"

    @classmethod
    def from_env(cls) -> "DataSettings":
        defaults = cls()
        return cls(
            path=Path(os.getenv("TXN_INSIGHTS_DATA_FILE", str(defaults.path))),
            currency_symbol=os.getenv("TXN_INSIGHTS_CURRENCY_SYMBOL", defaults.currency_symbol),
        )


@dataclass(frozen=True)
class LoggingSettings:
    """Options forwarded to :func:`txn_insights.core.log.init_logging`."""

    level: str = "INFO"
    log_dir: Path | None = None
    console: bool = True
    rich_tracebacks: bool = False

    @classmethod
    def from_env(cls) -> "LoggingSettings":
        defaults = cls()
        # an empty TXN_INSIGHTS_LOG_DIR disables the file log
        log_dir = os.getenv("TXN_INSIGHTS_LOG_DIR") or None
        return cls(
            level=os.getenv("TXN_INSIGHTS_LOG_LEVEL", defaults.level).upper(),
            log_dir=Path(log_dir) if log_dir else None,
            console=_env_flag("TXN_INSIGHTS_LOG_CONSOLE", defaults.console),
            rich_tracebacks=_env_flag("TXN_INSIGHTS_RICH_TRACEBACKS", defaults.rich_tracebacks),
        )

    def as_kwargs(self) -> dict[str, object]:
        return {
            "level": self.level,
            "log_dir": self.log_dir,
            "console": self.console,
            "rich_tracebacks": self.rich_tracebacks,
        }


@dataclass(frozen=True)
class Settings:
    """Container for application configuration."""

    data: DataSettings
    logging: LoggingSettings

    @classmethod
    def from_env(cls, dotenv_path: Optional[Path] = None) -> "Settings":
        """Build ``Settings`` using environment variables (optionally from ``.env``)."""

        _load_env(dotenv_path)
        return cls(data=DataSettings.from_env(), logging=LoggingSettings.from_env())


@lru_cache()
def get_settings(dotenv_path: Optional[Path] = None) -> Settings:
    """Return a cached settings instance."""

    return Settings.from_env(dotenv_path=dotenv_path)
