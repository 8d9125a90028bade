"""Shared helpers for repositories."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy.engine import Result
from sqlalchemy.orm import Session
from sqlalchemy.sql import Executable


class BaseRepository:
    """Base repository wrapping a session with value coercion helpers.

    SQLite hands dates and decimals back as strings or floats while MySQL and
    PostgreSQL return native types, so rows are normalised here.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _scalar(self, statement: Executable, params: dict[str, Any] | None = None) -> int:
        """Execute ``statement`` and return the scalar integer result."""

        result: Result[Any] = self._session.execute(statement, params or {})
        value = result.scalar() or 0
        return int(value)

    @staticmethod
    def _to_decimal(value: Any) -> Decimal:
        if isinstance(value, Decimal):
            return value
        if value is None:
            return Decimal(0)
        return Decimal(str(value))

    @staticmethod
    def _coerce_date(value: Any) -> date:
        if isinstance(value, date) and not isinstance(value, datetime):
            return value
        if isinstance(value, datetime):
            return value.date()
        if value is None:
            raise ValueError("Cannot convert None to date")
        text_value = str(value)
        if len(text_value) >= 10:
            text_value = text_value[:10]
        return date.fromisoformat(text_value)

    @classmethod
    def _coerce_optional_date(cls, value: Any) -> date | None:
        if value is None or value == "":
            return None
        return cls._coerce_date(value)

    @staticmethod
    def _coerce_optional_datetime(value: Any) -> datetime | None:
        if value is None:
            return None
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime(value.year, value.month, value.day)
        text_value = str(value)
        try:
            return datetime.fromisoformat(text_value)
        except ValueError:
            if len(text_value) >= 19:
                return datetime.fromisoformat(text_value[:19])
            raise

    @staticmethod
    def _search_pattern(value: str | None) -> str | None:
        if not value:
            return None
        escaped = value.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        return f"%{escaped}%"
