"""Timing helper that logs the duration and throughput of an operation."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from time import perf_counter
from typing import Iterator, Optional


@dataclass
class _Timer:
    label: str
    logger: logging.Logger
    level: int
    unit: str
    expected_total: Optional[int]
    start: float = field(default_factory=perf_counter)

    def set_total(self, total: int) -> None:
        self.expected_total = total

    def finish(self, success: bool = True) -> None:
        elapsed = perf_counter() - self.start
        total = self.expected_total or 0
        if not success:
            self.logger.error("%s failed after %.2fs", self.label, elapsed)
            return
        message = f"{self.label} completed in {elapsed:.2f}s ({total:,} {self.unit}"
        if elapsed > 0 and total:
            message += f" @ {total / elapsed:,.0f} {self.unit}/s"
        self.logger.log(self.level, message + ")")


@contextmanager
def timeit(
    label: str,
    *,
    logger: Optional[logging.Logger] = None,
    level: int = logging.INFO,
    unit: str = "items",
    total: Optional[int] = None,
) -> Iterator[_Timer]:
    log = logger or logging.getLogger("txn_insights.timer")
    timer = _Timer(label=label, logger=log, level=level, unit=unit, expected_total=total)
    try:
        yield timer
    except Exception:
        timer.finish(success=False)
        raise
    else:
        timer.finish(success=True)
