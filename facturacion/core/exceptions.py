"""
Domain exceptions for the Facturacion application.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class FacturacionError(Exception):
    """Base exception for all Facturacion errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(FacturacionError):
    """Base exception for storage operations."""

    pass


class InvoiceNotFoundError(StorageError):
    """Invoice not found, or not owned by the requesting user."""

    def __init__(self, invoice_id: int):
        super().__init__(
            "Invoice not found",
            code="INVOICE_NOT_FOUND",
            details={"invoice_id": invoice_id},
        )


class ClientNotFoundError(StorageError):
    """Client not found, or not owned by the requesting user."""

    def __init__(self, client_id: int):
        super().__init__(
            "Client not found",
            code="CLIENT_NOT_FOUND",
            details={"client_id": client_id},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Conflict Exceptions
class ConflictError(FacturacionError):
    """A uniqueness constraint was violated."""

    pass


class DuplicateInvoiceNumberError(ConflictError):
    """Another invoice already uses this number."""

    def __init__(self, numero: str | None):
        super().__init__(
            "An invoice with that number already exists.",
            code="DUPLICATE_INVOICE_NUMBER",
            details={"numero": numero},
        )


class DuplicateClientEmailError(ConflictError):
    """Another client already uses this email."""

    def __init__(self, email: str):
        super().__init__(
            "That email address is already in use.",
            code="DUPLICATE_CLIENT_EMAIL",
            details={"email": email},
        )


# Attachment Exceptions
class AttachmentError(FacturacionError):
    """Base exception for attachment file operations."""

    pass


class AttachmentStorageError(AttachmentError):
    """Filesystem operation on an attachment failed."""

    def __init__(self, filename: str, reason: str):
        super().__init__(
            f"Attachment operation failed for '{filename}': {reason}",
            code="ATTACHMENT_STORAGE_ERROR",
            details={"filename": filename, "reason": reason},
        )


class AttachmentNotFoundError(AttachmentStorageError):
    """Attachment file does not exist on disk."""

    def __init__(self, filename: str):
        super().__init__(filename, "file does not exist")
        self.code = "ATTACHMENT_NOT_FOUND"


# Auth Exceptions
class AuthenticationError(FacturacionError):
    """No credentials were supplied."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(message, code="AUTHENTICATION_REQUIRED")


class InvalidTokenError(FacturacionError):
    """Supplied bearer token could not be verified."""

    def __init__(self, reason: str | None = None):
        super().__init__(
            "Invalid token",
            code="INVALID_TOKEN",
            details={"reason": reason},
        )


# Validation Exceptions
class ValidationError(FacturacionError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            message,
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "value": str(value)[:100] if value is not None else None,
            },
        )
        self.field = field


class FileTooLargeError(ValidationError):
    """Uploaded file exceeds size limit."""

    def __init__(self, filename: str, size: int, max_size: int):
        super().__init__(
            field="archivo",
            message=f"File '{filename}' is too large ({size} bytes, max {max_size})",
        )
        self.details.update(
            {
                "filename": filename,
                "size": size,
                "max_size": max_size,
            }
        )


class EmptyFileError(ValidationError):
    """Uploaded file has no content."""

    def __init__(self, filename: str):
        super().__init__(
            field="archivo",
            message=f"File '{filename}' is empty",
        )
        self.details["filename"] = filename


class UnsupportedFileTypeError(ValidationError):
    """File type is not supported."""

    def __init__(self, filename: str, extension: str, allowed: list[str]):
        super().__init__(
            field="archivo",
            message=f"Unsupported file type '{extension}'. Allowed: {', '.join(allowed)}",
        )
        self.details.update(
            {
                "filename": filename,
                "extension": extension,
                "allowed": allowed,
            }
        )

