"""Local file bucket for generated documents (invoices).

Files live under ``<storage_root>/<bucket>/<key>`` and are served back through
the ``/files`` router, so ``public_url`` is what gets stored on tracking rows.
"""

from __future__ import annotations

import logging
from pathlib import Path

import aiofiles

from app.core.config import settings
from app.core.exceptions import NotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)


class LocalBucketStorage:
    def __init__(self, root: str | Path, bucket: str, public_base_url: str):
        self.bucket = bucket
        self._dir = Path(root).resolve() / bucket
        self._public_base_url = public_base_url.rstrip("/")

    def _path(self, key: str) -> Path:
        path = (self._dir / key).resolve()
        if self._dir not in path.parents:
            raise ValidationError(f"Invalid file key '{key}'")
        return path

    def public_url(self, key: str) -> str:
        return f"{self._public_base_url}/{self.bucket}/{key}"

    async def upload(self, key: str, data: bytes) -> str:
        """Write *data* under *key* (overwriting) and return its public URL."""
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, mode="wb") as f:
                await f.write(data)
        except OSError as exc:
            logger.error("Failed to write %s/%s: %s", self.bucket, key, exc)
            raise StorageError(f"Could not store file '{key}'") from exc
        logger.info("Stored %s/%s (%d bytes)", self.bucket, key, len(data))
        return self.public_url(key)

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()

    def list(self, folder: str) -> list[str]:
        """File names directly inside *folder*, sorted; empty when the folder is missing."""
        path = self._path(folder)
        if not path.is_dir():
            return []
        return sorted(p.name for p in path.iterdir() if p.is_file())

    def file_path(self, key: str) -> Path:
        """On-disk path of a stored file, for streaming it back."""
        path = self._path(key)
        if not path.is_file():
            raise NotFoundError("File", key)
        return path


def get_storage() -> LocalBucketStorage:
    """Invoices bucket as currently configured."""
    return LocalBucketStorage(
        settings.storage_root, settings.invoices_bucket, settings.public_files_url,
    )
