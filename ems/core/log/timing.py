"""Stopwatch for database units of work."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from time import perf_counter
from typing import Iterator, Optional


@dataclass
class _Stopwatch:
    label: str
    statements: int = 0
    started: float = field(default_factory=perf_counter)

    def add(self, statements: int = 1) -> None:
        self.statements += statements

    def summary(self) -> str:
        elapsed_ms = (perf_counter() - self.started) * 1000
        if self.statements:
            return f"{self.label}: {self.statements} statements in {elapsed_ms:.1f} ms"
        return f"{self.label}: {elapsed_ms:.1f} ms"


@contextmanager
def timeit(
    label: str,
    *,
    logger: Optional[logging.Logger] = None,
    level: int = logging.INFO,
) -> Iterator[_Stopwatch]:
    """Log how long the block took; failures are logged at ERROR and re-raised.

    Callers ``add`` to the stopwatch to report how many statements ran.
    """

    log = logger or logging.getLogger("ems.timing")
    watch = _Stopwatch(label)
    try:
        yield watch
    except Exception:
        log.error("%s (failed)", watch.summary())
        raise
    log.log(level, watch.summary())
