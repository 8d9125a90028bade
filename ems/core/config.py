"""Configuration for the employee records service."""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

_FALSE_VALUES = {"0", "false", "False", "no"}


@dataclass(slots=True)
class DatabaseSettings:
    """Connection details for the transactional database."""

    driver: str
    host: str
    port: int
    user: str
    password: str
    name: str
    url: str | None = None

    @property
    def sqlalchemy_url(self) -> str:
        """Build a SQLAlchemy compatible URL."""

        if self.url:
            return self.url
        if self.password:
            credentials = f"{self.user}:{self.password}"
        else:
            credentials = self.user
        return f"{self.driver}://{credentials}@{self.host}:{self.port}/{self.name}"


@dataclass(slots=True)
class AuthSettings:
    """JWT settings for HR operator sessions."""

    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60


@dataclass(slots=True)
class StorageSettings:
    """Where uploaded files live and how they are exposed."""

    upload_dir: Path
    public_base_url: str
    url_prefix: str = "/uploads"
    max_upload_bytes: int = 5 * 1024 * 1024


@dataclass(slots=True)
class Settings:
    """Top-level application configuration container."""

    database: DatabaseSettings
    auth: AuthSettings
    storage: StorageSettings
    sqlalchemy_echo: bool = False
    log_level: str = "INFO"
    log_dir: Path | None = None
    cors_origins: tuple[str, ...] = ("*",)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load configuration values from environment variables."""

        def _get_env(name: str, default: str) -> str:
            return os.getenv(name, default)

        db = DatabaseSettings(
            driver=_get_env("DB_DRIVER", "mysql+pymysql"),
            host=_get_env("DB_HOST", "127.0.0.1"),
            port=int(_get_env("DB_PORT", "3306")),
            user=_get_env("DB_USER", "ems"),
            password=_get_env("DB_PASSWORD", "ems"),
            name=_get_env("DB_NAME", "ems"),
            url=os.getenv("DATABASE_URL") or None,
        )
        auth = AuthSettings(
            secret_key=_get_env("JWT_SECRET_KEY", "change-me"),
            algorithm=_get_env("JWT_ALGORITHM", "HS256"),
            access_token_expire_minutes=int(_get_env("JWT_EXPIRE_MINUTES", "60")),
        )
        storage = StorageSettings(
            upload_dir=Path(_get_env("UPLOAD_DIR", "uploads")),
            public_base_url=_get_env("PUBLIC_BASE_URL", "http://localhost:3001").rstrip("/"),
            max_upload_bytes=int(_get_env("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024))),
        )
        log_dir = os.getenv("LOG_DIR")
        origins = tuple(
            origin.strip()
            for origin in _get_env("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        )
        return cls(
            database=db,
            auth=auth,
            storage=storage,
            sqlalchemy_echo=_get_env("SQLALCHEMY_ECHO", "0") not in _FALSE_VALUES,
            log_level=_get_env("LOG_LEVEL", "INFO"),
            log_dir=Path(log_dir) if log_dir else None,
            cors_origins=origins or ("*",),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    settings = Settings.from_env()

    # Import locally to avoid circular dependencies during module import time.
    from .log import get_logger

    logger = get_logger(__name__)
    logger.debug(
        "Settings initialised",
        extra={
            "sqlalchemy_echo": settings.sqlalchemy_echo,
            "database": {
                "driver": settings.database.driver,
                "host": settings.database.host,
                "port": settings.database.port,
                "name": settings.database.name,
                "user": settings.database.user,
            },
            "auth": {
                "token_ttl": settings.auth.access_token_expire_minutes,
            },
            "upload_dir": str(settings.storage.upload_dir),
        },
    )
    return settings
