"""
Local filesystem storage for invoice attachments.

Each user gets a directory under the uploads root; filenames are
generated on write and keep the original extension.
"""

import time
import uuid
from pathlib import Path

from facturacion.config import get_logger, get_settings
from facturacion.core.entities import AttachmentUpload
from facturacion.core.exceptions import (
    AttachmentNotFoundError,
    AttachmentStorageError,
)
from facturacion.core.interfaces import IAttachmentStore

logger = get_logger(__name__)


def generate_filename(extension: str) -> str:
    """Unique, sortable filename: millisecond timestamp plus a random suffix."""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{extension}"


class LocalAttachmentStore(IAttachmentStore):
    """Stores attachments as ``<root>/<user_id>/<filename>``."""

    def __init__(self, root: Path, base_url: str):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def path_for(self, user_id: int, filename: str) -> Path:
        """Resolve a stored filename, refusing anything outside the user's directory."""
        if not filename or Path(filename).name != filename or filename in (".", ".."):
            raise AttachmentStorageError(filename, "invalid filename")
        return self.root / str(user_id) / filename

    async def store(self, user_id: int, upload: AttachmentUpload) -> str:
        """Write a new file and return its generated filename."""
        filename = generate_filename(upload.extension)
        path = self.path_for(user_id, filename)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(upload.content)
        except OSError as e:
            logger.error(
                "attachment_write_failed",
                user_id=user_id,
                filename=filename,
                error=str(e),
            )
            raise AttachmentStorageError(filename, str(e)) from e

        logger.info(
            "attachment_stored",
            user_id=user_id,
            filename=filename,
            original_filename=upload.filename,
            size=upload.size,
        )
        return filename

    async def replace(
        self, user_id: int, old_filename: str | None, upload: AttachmentUpload
    ) -> str:
        """Write a new file, then best-effort delete the old one."""
        filename = await self.store(user_id, upload)
        if old_filename:
            try:
                await self.delete(user_id, old_filename)
            except AttachmentStorageError as e:
                logger.warning(
                    "attachment_replace_cleanup_failed",
                    user_id=user_id,
                    filename=old_filename,
                    error=e.message,
                )
        return filename

    async def delete(self, user_id: int, filename: str) -> None:
        """Delete a stored file."""
        path = self.path_for(user_id, filename)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise AttachmentNotFoundError(filename) from e
        except OSError as e:
            raise AttachmentStorageError(filename, str(e)) from e

        logger.info("attachment_deleted", user_id=user_id, filename=filename)

    def url_for(self, user_id: int, filename: str | None) -> str | None:
        """Public URL of a file, or None without a filename."""
        if not filename:
            return None
        return f"{self.base_url}/{user_id}/{filename}"


# Singleton instance
_attachment_store: LocalAttachmentStore | None = None


def get_attachment_store() -> LocalAttachmentStore:
    """Get singleton attachment store configured from settings."""
    global _attachment_store
    if _attachment_store is None:
        settings = get_settings()
        _attachment_store = LocalAttachmentStore(
            root=settings.uploads.dir,
            base_url=settings.uploads.base_url,
        )
    return _attachment_store


def reset_attachment_store() -> None:
    """Reset singleton (for testing)."""
    global _attachment_store
    _attachment_store = None
