"""
Error Handling Module

Defines the error categories and exception hierarchy of the service.
Every error that reaches a client is reported as a structured code
string, never as raw internal error text.
"""

from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ErrorCategory(Enum):
    """Error codes exposed to clients in ``{"error": "<code>"}`` bodies."""

    # Upload
    INVALID_MULTIPART = "invalid_multipart"
    CHUNK_READ_FAILED = "chunk_read_failed"
    MISSING_FILE = "missing_file"
    FILE_TOO_LARGE = "file_too_large"
    FILE_CREATE_FAILED = "file_create_failed"
    WRITE_FAILED = "write_failed"
    FLUSH_FAILED = "flush_failed"

    # Capability parameters
    MISSING_VERSION = "missing_sz-version"
    MISSING_OWNER = "missing_sz-owner"
    MISSING_DATE = "missing_sz-date"
    MISSING_EXPIRES = "missing_sz-expires"
    MISSING_REGION = "missing_sz-region"
    MISSING_MODE = "missing_sz-mode"
    MISSING_TYPE = "missing_sz-type"
    MISSING_ID = "missing_sz-id"
    MISSING_NONCE = "missing_sz-nonce"
    MISSING_SIGNATURE = "missing_sz-signature"
    INVALID_EXPIRES = "invalid_expires"

    # Authorization
    INVALID_SIGNATURE = "invalid_signature"
    LINK_EXPIRED = "link_expired"
    ID_MISMATCH = "id_mismatch"

    # Lookup / storage
    FILE_NOT_FOUND = "file_not_found"
    READ_FAILED = "read_failed"
    INTERNAL_ERROR = "internal_error"

    @classmethod
    def missing(cls, param: str) -> "ErrorCategory":
        """Return the ``missing_<param>`` category for a capability parameter."""
        return cls(f"missing_{param}")


class SharingError(Exception):
    """
    Base exception for all errors surfaced to clients.

    Carries a category (the public error code) and the HTTP status the
    API layer answers with. The technical message is for logs only.
    """

    http_status_code = 500

    def __init__(
        self,
        category: ErrorCategory,
        technical_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.category = category
        self.technical_message = technical_message or ""
        self.context = context or {}
        super().__init__(self.technical_message or category.value)

    @property
    def code(self) -> str:
        return self.category.value

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for API response."""
        return {"error": self.code}


class ValidationError(SharingError):
    """Malformed multipart body or missing/unparseable capability fields."""

    http_status_code = 400


class AuthorizationError(SharingError):
    """Bad signature, expired capability or id mismatch."""

    http_status_code = 403


class NotFoundError(SharingError):
    """Unknown object id after authorization passed."""

    http_status_code = 404


class CapacityError(SharingError):
    """Upload exceeded the configured maximum size."""

    http_status_code = 413


class ResourceError(SharingError):
    """Storage create/write/flush/read fault. Never retried automatically."""

    http_status_code = 500


def create_error_response(error: SharingError) -> Tuple[Dict[str, Any], int]:
    """
    Create a structured error response for API endpoints.

    Args:
        error: The error to report

    Returns:
        Tuple of (error_dict, status_code)
    """
    return error.to_dict(), error.http_status_code


def internal_error_response() -> Tuple[Dict[str, Any], int]:
    """Response for failures that have no dedicated category."""
    return {"error": ErrorCategory.INTERNAL_ERROR.value}, 500
