"""Object storage for event flyers.

Design Pattern: Strategy pattern for pluggable storage backends
"""
import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

FLYER_BUCKET = "event_flyers"


class StorageError(Exception):
    """Raised when an object cannot be stored."""


class ObjectStorage(ABC):
    """Named-blob storage that can issue durable public URLs."""

    @abstractmethod
    def upload(self, name: str, data: bytes, upsert: bool = False) -> str:
        """Store ``data`` under ``name`` and return an opaque handle."""

    @abstractmethod
    def public_url(self, handle: str) -> str:
        """Return the public URL for a stored object."""


class LocalObjectStorage(ObjectStorage):
    """Stores objects as files under ``root_dir/<bucket>/``."""

    def __init__(self, root_dir: str, public_base_url: str, bucket: str = FLYER_BUCKET):
        self._dir = Path(root_dir) / bucket
        self._base_url = public_base_url.rstrip("/")
        self._bucket = bucket

    def upload(self, name: str, data: bytes, upsert: bool = False) -> str:
        if "/" in name or "\\" in name or name in ("", ".", ".."):
            raise StorageError(f"Invalid object name '{name}'")
        target = self._dir / name
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            if target.exists() and not upsert:
                raise StorageError(f"Object '{name}' already exists")
            target.write_bytes(data)
        except OSError as e:
            raise StorageError(str(e)) from e
        return name

    def public_url(self, handle: str) -> str:
        return f"{self._base_url}/{self._bucket}/{handle}"


def upload_flyer(storage: ObjectStorage, filename: str, data: bytes, upsert: bool = False) -> Optional[str]:
    """Upload a flyer and return its public URL, or None when the upload fails.

    Failures are logged and swallowed: the event is then saved without a flyer.
    """
    name = f"{int(time.time() * 1000)}_{filename}"
    try:
        handle = storage.upload(name, data, upsert=upsert)
    except StorageError as e:
        logger.warning("Flyer upload of %s failed: %s", filename, e)
        return None
    return storage.public_url(handle)
