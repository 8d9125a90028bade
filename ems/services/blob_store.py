"""Filesystem blob sink for uploaded documents and images."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import re
import uuid

from ems.core.config import StorageSettings
from ems.core.errors import StorageFailure
from ems.core.log import get_logger

LOGGER = get_logger(__name__)

_UNSAFE_SUFFIX = re.compile(r"[^A-Za-z0-9.]")


@dataclass(frozen=True)
class BlobDeletion:
    """Outcome of a best-effort blob removal."""

    url: str
    removed: bool
    reason: str | None = None


class LocalBlobStore:
    """Store files under ``upload_dir`` and expose them below ``url_prefix``."""

    def __init__(self, settings: StorageSettings) -> None:
        self._directory = Path(settings.upload_dir)
        self._url_base = f"{settings.public_base_url}{settings.url_prefix}/"
        self._max_bytes = settings.max_upload_bytes

    @property
    def directory(self) -> Path:
        return self._directory

    def store(self, content: bytes, filename: str | None = None) -> str:
        """Persist ``content`` under a generated name and return its public URL."""

        if len(content) > self._max_bytes:
            raise StorageFailure(f"File exceeds the {self._max_bytes} byte upload limit")

        suffix = _UNSAFE_SUFFIX.sub("", Path(filename or "").suffix.lower())[:16]
        name = f"{uuid.uuid4().hex}{suffix}"
        target = self._directory / name
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as exc:
            LOGGER.error("Failed to write upload", extra={"path": str(target), "reason": str(exc)})
            raise StorageFailure("Failed to store uploaded file", detail=str(exc)) from exc

        LOGGER.debug("Stored upload %s (%d bytes)", name, len(content))
        return f"{self._url_base}{name}"

    def path_for(self, url: str) -> Path | None:
        """Map a URL issued by ``store`` back to its file, or ``None``."""

        if not url.startswith(self._url_base):
            return None
        name = url[len(self._url_base):]
        if not name or "/" in name or "\\" in name or name in {".", ".."}:
            return None
        return self._directory / name

    def delete(self, url: str) -> BlobDeletion:
        """Remove the file behind ``url``; never raises."""

        path = self.path_for(url)
        if path is None:
            return BlobDeletion(url=url, removed=False, reason="not a managed upload URL")
        try:
            path.unlink()
        except FileNotFoundError:
            return BlobDeletion(url=url, removed=False, reason="file not found on disk")
        except OSError as exc:
            return BlobDeletion(url=url, removed=False, reason=str(exc))
        return BlobDeletion(url=url, removed=True)


def log_blob_deletion(result: BlobDeletion) -> None:
    if result.removed:
        LOGGER.info("Removed stored file %s", result.url)
    else:
        LOGGER.warning("Stored file %s was not removed: %s", result.url, result.reason)
