"""Operator fields attached to records logged while a request is served."""
from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import Iterator

_request_fields: contextvars.ContextVar[tuple[tuple[str, object], ...]] = contextvars.ContextVar(
    "ems_request_fields", default=()
)


@contextmanager
def request_scope(**fields: object) -> Iterator[None]:
    """Tag every record logged inside the block with ``fields``.

    Scopes nest: an inner scope extends the outer one and leaving it restores
    the outer fields exactly. ``None`` values are skipped.
    """

    merged = dict(_request_fields.get())
    merged.update((key, value) for key, value in fields.items() if value is not None)
    token = _request_fields.set(tuple(merged.items()))
    try:
        yield
    finally:
        _request_fields.reset(token)


def current_fields() -> dict[str, object]:
    return dict(_request_fields.get())


class RequestFieldsFilter(logging.Filter):
    """Render the active fields into ``record.request_tag``.

    Runs on the queue handler, i.e. on the thread that logged, because the
    listener thread never sees the request's context.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_tag = "".join(f"[{key}={value}] " for key, value in _request_fields.get())
        return True
