"""Infrastructure layer implementations."""

from facturacion.infrastructure import files, storage

__all__ = ["storage", "files"]
