"""Attachment file storage."""

from facturacion.infrastructure.files.attachment_store import (
    LocalAttachmentStore,
    generate_filename,
    get_attachment_store,
    reset_attachment_store,
)

__all__ = [
    "LocalAttachmentStore",
    "generate_filename",
    "get_attachment_store",
    "reset_attachment_store",
]
