"""Opinionated SQLAlchemy session helpers."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from ems.core.config import Settings

from .engine import create_sync_engine


def get_sessionmaker(
    url: str | None = None,
    *,
    engine: Engine | None = None,
    settings: Settings | None = None,
    **kwargs,
) -> sessionmaker:
    """Return a ``sessionmaker`` bound to an engine.

    Pass ``engine`` to share one already built (tests bind an in-memory SQLite
    engine this way); otherwise a new engine is created from settings.
    """

    bound = engine or create_sync_engine(url, settings=settings, **kwargs)
    return sessionmaker(bind=bound, autoflush=False, expire_on_commit=False)


@contextmanager
def session_scope(url: str | None = None, **kwargs) -> Iterator[Session]:
    """Provide a transactional scope for imperative scripts."""

    factory = get_sessionmaker(url, **kwargs)
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:  # pragma: no cover - re-raise for callers
        session.rollback()
        raise
    finally:
        session.close()
