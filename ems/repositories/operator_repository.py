"""Credential store lookups."""
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import select

from ems.models import HrLogin

from .base import BaseRepository


@dataclass(frozen=True)
class OperatorRow:
    hr_id: int
    hr_name: str
    username: str
    password_hash: str
    region_id: int
    country_id: int
    is_active: bool


class OperatorRepository(BaseRepository):
    """Read access to ``hr_login``."""

    def get_by_username(self, username: str) -> OperatorRow | None:
        row = self._session.execute(
            select(
                HrLogin.hr_id,
                HrLogin.hr_name,
                HrLogin.username,
                HrLogin.password_hash,
                HrLogin.region_id,
                HrLogin.country_id,
                HrLogin.is_active,
            ).where(HrLogin.username == username)
        ).mappings().one_or_none()
        if row is None:
            return None
        return OperatorRow(
            hr_id=int(row["hr_id"]),
            hr_name=str(row["hr_name"]),
            username=str(row["username"]),
            password_hash=str(row["password_hash"]),
            region_id=int(row["region_id"]),
            country_id=int(row["country_id"]),
            is_active=bool(row["is_active"]),
        )

    def add(
        self,
        *,
        hr_name: str,
        username: str,
        password_hash: str,
        region_id: int,
        country_id: int,
        is_active: bool = True,
    ) -> int:
        operator = HrLogin(
            hr_name=hr_name,
            username=username,
            password_hash=password_hash,
            region_id=region_id,
            country_id=country_id,
            is_active=is_active,
        )
        self._session.add(operator)
        self._session.flush()
        return int(operator.hr_id)
