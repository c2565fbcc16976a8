"""
File Storage Entities

Domain entity describing one stored upload.
"""

import time
from dataclasses import dataclass
from typing import Optional

from .value_objects import infer_mime_type

DEFAULT_OWNER = "default"


@dataclass(frozen=True)
class ObjectMetadata:
    """
    Metadata of an uploaded object.

    Created once, when the upload completes and is published to the
    registry, and never mutated afterwards.

    Attributes:
        id: Random object identifier
        original_name: Sanitized display name (never a filesystem path)
        storage_path: Server-chosen path derived from ``id`` only
        mime_type: Type inferred from the name's extension
        size_bytes: Number of bytes written
        created_at: Unix timestamp of publication
        owner: Opaque tenant tag carried in capabilities
    """

    id: str
    original_name: str
    storage_path: str
    mime_type: str
    size_bytes: int
    created_at: int
    owner: str = DEFAULT_OWNER

    @classmethod
    def create(
        cls,
        object_id: str,
        original_name: str,
        storage_path: str,
        size_bytes: int,
        owner: str = DEFAULT_OWNER,
        created_at: Optional[int] = None,
    ) -> "ObjectMetadata":
        """
        Factory method used at publish time.

        The mime type is inferred from ``original_name`` and the creation
        timestamp defaults to now.
        """
        return cls(
            id=object_id,
            original_name=original_name,
            storage_path=storage_path,
            mime_type=infer_mime_type(original_name),
            size_bytes=size_bytes,
            created_at=int(time.time()) if created_at is None else created_at,
            owner=owner,
        )

    def age_seconds(self, now: Optional[float] = None) -> int:
        """Seconds elapsed since publication."""
        if now is None:
            now = time.time()
        return int(now) - self.created_at

    def is_expired(self, ttl_seconds: int, now: Optional[float] = None) -> bool:
        """True once the object's age exceeds the TTL."""
        return self.age_seconds(now) > ttl_seconds
