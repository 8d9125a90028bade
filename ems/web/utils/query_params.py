from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from starlette.datastructures import QueryParams

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 6
MAX_LIMIT = 100

ParamsMapping = Mapping[str, str] | QueryParams


@dataclass(frozen=True)
class PaginationParams:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def parse_positive_int(value: str | None, *, default: int) -> int:
    try:
        parsed = int(value) if value is not None else default
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def extract_pagination(
    params: ParamsMapping,
    *,
    page_param: str = "page",
    limit_param: str = "limit",
    default_page: int = DEFAULT_PAGE,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int = MAX_LIMIT,
) -> PaginationParams:
    page = parse_positive_int(params.get(page_param), default=default_page)
    limit = parse_positive_int(params.get(limit_param), default=default_limit)
    return PaginationParams(page=page, limit=min(limit, max_limit))


def extract_search_term(
    params: ParamsMapping,
    *,
    key: str = "q",
) -> str | None:
    value = params.get(key)
    if not value:
        return None
    stripped = value.strip()
    return stripped or None
