"""
File Storage Value Objects

Small immutable helpers shared by the ingest and access paths.
"""

import mimetypes
import uuid
from enum import Enum

MAX_NAME_LENGTH = 255
DEFAULT_NAME = "unknown"
DEFAULT_MIME_TYPE = "application/octet-stream"
VIEWABLE_MIME_PREFIXES = ("image/", "video/", "audio/")

_ALLOWED_NAME_PUNCTUATION = ".-_"


class AccessMode(Enum):
    """How a capability asks the file to be presented."""

    INLINE = "inline"
    ATTACHMENT = "attachment"


def generate_object_id() -> str:
    """Generate a new 128-bit random object identifier."""
    return str(uuid.uuid4())


def sanitize_filename(filename: str) -> str:
    """
    Reduce a client-supplied file name to a safe display name.

    Only alphanumeric characters, ``.``, ``-`` and ``_`` are kept and the
    result is truncated to 255 characters. The result is never used to
    build a filesystem path.

    Args:
        filename: Name as sent by the client

    Returns:
        Sanitized name, or ``"unknown"`` when nothing survives
    """
    kept = [c for c in filename if c.isalnum() or c in _ALLOWED_NAME_PUNCTUATION]
    sanitized = "".join(kept[:MAX_NAME_LENGTH])
    return sanitized or DEFAULT_NAME


def infer_mime_type(filename: str) -> str:
    """Guess a mime type from the name's extension, defaulting to binary."""
    mime_type, _ = mimetypes.guess_type(filename, strict=False)
    return mime_type or DEFAULT_MIME_TYPE


def is_viewable_mime(mime_type: str) -> bool:
    """True for image, video and audio types, which may be shown inline."""
    return mime_type.startswith(VIEWABLE_MIME_PREFIXES)
