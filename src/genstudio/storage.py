"""In-memory blob store for uploaded previews and materialized artifacts."""

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

import aiofiles

from .logging import get_logger

logger = get_logger(__name__)

BLOB_SCHEME = "blob:"


class StorageException(Exception):
    """Base exception for blob store operations."""

    pass


@dataclass
class Blob:
    """Bytes held by the store together with their content type."""

    data: bytes
    content_type: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def size(self) -> int:
        return len(self.data)


class BlobStore:
    """Locally addressable blob handles, the process-side stand-in for object URLs."""

    def __init__(self, namespace: str = "genstudio"):
        self.namespace = namespace
        self._blobs: dict[str, Blob] = {}

    def put(self, data: bytes, content_type: str) -> str:
        """Store bytes and return a reference that can be read back with get()."""
        ref = f"{BLOB_SCHEME}{self.namespace}/{uuid.uuid4().hex}"
        self._blobs[ref] = Blob(data=data, content_type=content_type)
        logger.debug("Stored blob", ref=ref, content_type=content_type, size_bytes=len(data))
        return ref

    def get(self, ref: str) -> Blob:
        try:
            return self._blobs[ref]
        except KeyError as e:
            raise StorageException(f"Unknown blob reference: {ref}") from e

    def revoke(self, ref: str) -> bool:
        """Release a blob. Returns False if the reference was not held."""
        return self._blobs.pop(ref, None) is not None

    def __contains__(self, ref: object) -> bool:
        return ref in self._blobs

    def __len__(self) -> int:
        return len(self._blobs)

    async def save(self, ref: str, path: Path | str) -> Path:
        """Write a blob to disk and return the resolved path."""
        blob = self.get(ref)
        target = Path(path).resolve()
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(target, "wb") as f:
                await f.write(blob.data)
        except OSError as e:
            logger.error("File system error saving blob", ref=ref, path=str(target), error=str(e))
            raise StorageException(f"Failed to write file: {e}") from e

        logger.info("Saved blob", ref=ref, path=str(target), size_bytes=blob.size)
        return target
