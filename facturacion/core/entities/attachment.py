"""
Uploaded attachment payload.
"""

from dataclasses import dataclass
from pathlib import PurePath


@dataclass
class AttachmentUpload:
    """File content received with an invoice request."""

    filename: str
    content: bytes
    content_type: str | None = None

    @property
    def extension(self) -> str:
        return PurePath(self.filename).suffix.lower()

    @property
    def size(self) -> int:
        return len(self.content)
