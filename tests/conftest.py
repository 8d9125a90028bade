from __future__ import annotations

import os
import tempfile
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from datetime import date
from pathlib import Path

# Settings are cached on first use; point them at throwaway resources before
# anything from ``ems`` is imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="ems-uploads-"))
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from ems.core.config import AuthSettings, DatabaseSettings, Settings, StorageSettings  # noqa: E402
from ems.core.log import shutdown_logging  # noqa: E402
from ems.core.security import hash_password  # noqa: E402
from ems.db.engine import create_sync_engine  # noqa: E402
from ems.db.seed import SeedSummary, seed_reference_data  # noqa: E402
from ems.db.session import get_sessionmaker  # noqa: E402
from ems.models import Base  # noqa: E402
from ems.repositories import OperatorRepository  # noqa: E402
from ems.services import (  # noqa: E402
    DocumentService,
    EmployeeDirectoryService,
    EmployeeInput,
    EmployeeLifecycleService,
    LocalBlobStore,
)

OPERATOR_PASSWORD = "s3cret-pass"


@dataclass(frozen=True)
class SeededWorld:
    reference: SeedSummary
    north_region_id: int
    south_region_id: int
    north_hr_id: int
    south_hr_id: int
    inactive_hr_id: int

    @property
    def delhi(self) -> int:
        return self.reference.location_ids["Delhi"]

    @property
    def bengaluru(self) -> int:
        return self.reference.location_ids["Bengaluru"]


@pytest.fixture(scope="session", autouse=True)
def _stop_log_listener() -> Iterator[None]:
    yield
    shutdown_logging()


@pytest.fixture(scope="session")
def password_hash() -> str:
    return hash_password(OPERATOR_PASSWORD)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        database=DatabaseSettings(
            driver="sqlite",
            host="",
            port=0,
            user="",
            password="",
            name="",
            url="sqlite://",
        ),
        auth=AuthSettings(secret_key="test-secret"),
        storage=StorageSettings(
            upload_dir=tmp_path / "uploads",
            public_base_url="http://testserver",
            max_upload_bytes=1024,
        ),
    )


@pytest.fixture
def engine(settings: Settings) -> Iterator[Engine]:
    engine = create_sync_engine(
        "sqlite://",
        settings=settings,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return get_sessionmaker(engine=engine)


@pytest.fixture
def world(session_factory: sessionmaker, password_hash: str) -> SeededWorld:
    with session_factory.begin() as session:
        reference = seed_reference_data(session)
        operators = OperatorRepository(session)
        north = reference.region_ids["North"]
        south = reference.region_ids["South"]
        north_hr = operators.add(
            hr_name="Nora North",
            username="north_hr",
            password_hash=password_hash,
            region_id=north,
            country_id=reference.country_id,
        )
        south_hr = operators.add(
            hr_name="Sam South",
            username="south_hr",
            password_hash=password_hash,
            region_id=south,
            country_id=reference.country_id,
        )
        inactive_hr = operators.add(
            hr_name="Ian Inactive",
            username="inactive_hr",
            password_hash=password_hash,
            region_id=north,
            country_id=reference.country_id,
            is_active=False,
        )
    return SeededWorld(
        reference=reference,
        north_region_id=north,
        south_region_id=south,
        north_hr_id=north_hr,
        south_hr_id=south_hr,
        inactive_hr_id=inactive_hr,
    )


@pytest.fixture
def make_input(world: SeededWorld) -> Callable[..., EmployeeInput]:
    """Build a valid North-region employee payload; keyword overrides win."""

    counter = iter(range(1, 10_000))

    def _factory(**overrides) -> EmployeeInput:
        number = next(counter)
        values = {
            "first_name": f"Asha{number}",
            "last_name": "Rao",
            "email": f"asha{number}@example.com",
            "phone": "9999999999",
            "gender": "FEMALE",
            "dob": date(1990, 5, 17),
            "company_id": world.reference.company_ids["Acme Technologies"],
            "location_id": world.delhi,
            "department_id": world.reference.department_ids["Engineering"],
            "designation_id": world.reference.designation_ids["Engineer"],
            "joining_date": date(2023, 4, 1),
            "employment_type": "FULL_TIME",
        }
        values.update(overrides)
        return EmployeeInput(**values)

    return _factory


@pytest.fixture
def blob_store(settings: Settings) -> LocalBlobStore:
    return LocalBlobStore(settings.storage)


@pytest.fixture
def lifecycle(session_factory: sessionmaker, blob_store: LocalBlobStore) -> EmployeeLifecycleService:
    return EmployeeLifecycleService(session_factory, blob_store=blob_store)


@pytest.fixture
def directory(session_factory: sessionmaker) -> EmployeeDirectoryService:
    return EmployeeDirectoryService(session_factory)


@pytest.fixture
def documents(session_factory: sessionmaker, blob_store: LocalBlobStore) -> DocumentService:
    return DocumentService(session_factory, blob_store)


@pytest.fixture
def client(settings: Settings, session_factory: sessionmaker, world: SeededWorld) -> Iterator[TestClient]:
    from ems.main import create_app

    app = create_app(settings=settings, session_factory=session_factory)
    with TestClient(app) as test_client:
        yield test_client


def login_headers(client: TestClient, username: str = "north_hr") -> dict[str, str]:
    response = client.post("/login", json={"username": username, "password": OPERATOR_PASSWORD})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def north_headers(client: TestClient) -> dict[str, str]:
    return login_headers(client, "north_hr")


@pytest.fixture
def south_headers(client: TestClient) -> dict[str, str]:
    return login_headers(client, "south_hr")


@pytest.fixture
def operator_password() -> str:
    return OPERATOR_PASSWORD
