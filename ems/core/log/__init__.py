"""Service logging: rich console output plus an optional rotating file.

Records are put on a queue by the thread that logs them and written by a
``QueueListener`` thread, so request handlers never block on console or disk
I/O. ``init_logging`` reads ``LOG_LEVEL`` and ``LOG_DIR`` from
:class:`~ems.core.config.Settings`. Modules call ``get_logger(__name__)`` at
import time; until the app configures logging they get console output at INFO.
"""
from __future__ import annotations

import logging
from logging.handlers import QueueHandler, QueueListener, TimedRotatingFileHandler
from pathlib import Path
from queue import SimpleQueue
from threading import RLock
from typing import TYPE_CHECKING, NamedTuple

from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install as install_rich_traceback

from .context import RequestFieldsFilter, current_fields, request_scope
from .timing import timeit

if TYPE_CHECKING:
    from ems.core.config import Settings

__all__ = [
    "current_fields",
    "get_logger",
    "init_logging",
    "request_scope",
    "shutdown_logging",
    "timeit",
]

LOG_FILE_NAME = "ems.log"
LOG_FILE_BACKUPS = 14
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s %(request_tag)s%(message)s"


class _Pipeline(NamedTuple):
    level: int
    log_dir: Path | None
    queue_handler: QueueHandler
    listener: QueueListener


_lock = RLock()
_pipeline: _Pipeline | None = None


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _console_handler() -> logging.Handler:
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
        markup=False,
        log_time_format="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(logging.Formatter("%(request_tag)s%(message)s"))
    return handler


def _file_handler(log_dir: Path) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        when="midnight",
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def _stop_locked() -> None:
    global _pipeline
    if _pipeline is None:
        return
    logging.getLogger().removeHandler(_pipeline.queue_handler)
    _pipeline.listener.stop()
    for handler in _pipeline.listener.handlers:
        handler.close()
    _pipeline = None


def init_logging(settings: Settings | None = None) -> None:
    """Route the root logger through the queue pipeline.

    Calling it again with the same level and directory is a no-op; anything
    else replaces the running pipeline.
    """

    level = _resolve_level(settings.log_level) if settings else logging.INFO
    log_dir = Path(settings.log_dir) if settings and settings.log_dir else None

    global _pipeline
    with _lock:
        if _pipeline is not None:
            if (_pipeline.level, _pipeline.log_dir) == (level, log_dir):
                return
            _stop_locked()

        handlers = [_console_handler()]
        if log_dir is not None:
            handlers.append(_file_handler(log_dir))

        records: SimpleQueue = SimpleQueue()
        queue_handler = QueueHandler(records)
        queue_handler.addFilter(RequestFieldsFilter())
        listener = QueueListener(records, *handlers)

        root = logging.getLogger()
        root.setLevel(level)
        root.addHandler(queue_handler)
        install_rich_traceback(show_locals=False)
        listener.start()
        _pipeline = _Pipeline(level, log_dir, queue_handler, listener)


def shutdown_logging() -> None:
    """Flush queued records and detach the pipeline."""

    with _lock:
        _stop_locked()


def get_logger(name: str | None = None) -> logging.Logger:
    if _pipeline is None:
        init_logging()
    return logging.getLogger(name or "ems")
