"""Reference data and operator provisioning for fresh databases."""
from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.orm import Session

from ems.core.log import get_logger
from ems.core.security import hash_password
from ems.models import Company, Country, Department, Designation, Location, Region
from ems.repositories import OperatorRepository

LOGGER = get_logger(__name__)

DEFAULT_COUNTRY = ("India", "IND")
DEFAULT_REGIONS: dict[str, tuple[tuple[str, str], ...]] = {
    "North": (("Delhi", "Delhi"), ("Chandigarh", "Punjab")),
    "South": (("Bengaluru", "Karnataka"), ("Chennai", "Tamil Nadu")),
}
DEFAULT_COMPANIES = ("Acme Technologies", "Globex Services")
DEFAULT_DEPARTMENTS = ("Engineering", "Finance", "Human Resources", "Sales")
DEFAULT_DESIGNATIONS = ("Analyst", "Engineer", "Manager", "Senior Engineer")


@dataclass
class SeedSummary:
    country_id: int
    region_ids: dict[str, int] = field(default_factory=dict)
    location_ids: dict[str, int] = field(default_factory=dict)
    company_ids: dict[str, int] = field(default_factory=dict)
    department_ids: dict[str, int] = field(default_factory=dict)
    designation_ids: dict[str, int] = field(default_factory=dict)


def _get_or_add(session: Session, model, lookup: dict, **extra):
    instance = session.execute(select(model).filter_by(**lookup)).scalar_one_or_none()
    if instance is None:
        instance = model(**lookup, **extra)
        session.add(instance)
        session.flush()
    return instance


def seed_reference_data(session: Session) -> SeedSummary:
    """Insert the default country, regions, locations and org lookups.

    Rows are matched by name, so running the seed twice is harmless.
    """

    country_name, country_code = DEFAULT_COUNTRY
    country = _get_or_add(session, Country, {"country_name": country_name}, country_code=country_code)
    summary = SeedSummary(country_id=int(country.country_id))

    for region_name, cities in DEFAULT_REGIONS.items():
        region = _get_or_add(
            session, Region, {"region_name": region_name, "country_id": country.country_id}
        )
        summary.region_ids[region_name] = int(region.region_id)
        for city, state in cities:
            location = _get_or_add(
                session, Location, {"city": city, "region_id": region.region_id}, state=state
            )
            summary.location_ids[city] = int(location.location_id)

    for name in DEFAULT_COMPANIES:
        summary.company_ids[name] = int(_get_or_add(session, Company, {"company_name": name}).company_id)
    for name in DEFAULT_DEPARTMENTS:
        summary.department_ids[name] = int(
            _get_or_add(session, Department, {"department_name": name}).department_id
        )
    for name in DEFAULT_DESIGNATIONS:
        summary.designation_ids[name] = int(
            _get_or_add(session, Designation, {"designation_name": name}).designation_id
        )

    LOGGER.info(
        "Reference data ready: %d regions, %d locations, %d companies",
        len(summary.region_ids),
        len(summary.location_ids),
        len(summary.company_ids),
    )
    return summary


def provision_operator(
    session: Session,
    *,
    hr_name: str,
    username: str,
    password: str,
    region_id: int,
    country_id: int,
    is_active: bool = True,
) -> int:
    """Create an HR operator with a bcrypt hash, or return the existing id."""

    repository = OperatorRepository(session)
    existing = repository.get_by_username(username)
    if existing is not None:
        LOGGER.info("Operator %s already exists (hr_id=%s)", username, existing.hr_id)
        return existing.hr_id
    hr_id = repository.add(
        hr_name=hr_name,
        username=username,
        password_hash=hash_password(password),
        region_id=region_id,
        country_id=country_id,
        is_active=is_active,
    )
    LOGGER.info("Provisioned operator %s (hr_id=%s)", username, hr_id)
    return hr_id
