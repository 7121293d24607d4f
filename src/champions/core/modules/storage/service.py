from pathlib import Path

import structlog

from champions.core.core import Service
from champions.core.modules.storage.files import delete_blob, resolve_blob_path, write_blob
from champions.errors import NotFoundError, ValidationError
from champions.utils import format_size

logger = structlog.get_logger(__name__)


class StorageService(Service):
    """Blob store on the local filesystem rooted at `config.storage_path`."""

    @property
    def root(self) -> str:
        return self.core.config.storage_path

    async def on_start(self) -> None:
        Path(self.root).mkdir(parents=True, exist_ok=True)

    def ensure_size(self, content: bytes) -> None:
        """Reject payloads over the configured upload ceiling."""
        max_size = self.core.config.max_upload_size
        if len(content) > max_size:
            raise ValidationError(f"File is too large ({format_size(len(content))}). Maximum size is {format_size(max_size)}.")

    def save(self, storage_path: str, content: bytes) -> Path:
        try:
            path = write_blob(self.root, storage_path, content)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        logger.debug("blob_saved", storage_path=storage_path, size=len(content))
        return path

    def delete(self, storage_path: str) -> None:
        """Remove a blob. Missing blobs and invalid paths raise OSError/ValueError for the caller to handle."""
        delete_blob(self.root, storage_path)
        logger.debug("blob_deleted", storage_path=storage_path)

    def get_path(self, storage_path: str) -> Path:
        """Absolute path of an existing blob."""
        try:
            path = resolve_blob_path(self.root, storage_path)
        except ValueError as e:
            raise NotFoundError("File not found") from e
        if not path.is_file():
            raise NotFoundError("File not found")
        return path
