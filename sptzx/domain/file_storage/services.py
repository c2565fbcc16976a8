"""
File Storage Services

Domain service tying the registry to the backing storage. Owns the one
and only deletion path.
"""

import logging
import time
from typing import BinaryIO, List, Optional

from ..errors import ErrorCategory, NotFoundError, ResourceError
from .entities import ObjectMetadata
from .registry import ObjectRegistry
from .storage_repository import IFileStorageRepository

logger = logging.getLogger(__name__)


class FileManager:
    """
    Domain service for managing ephemeral objects.

    Coordinates publication, lookup and deletion across the registry and
    the storage repository.
    """

    def __init__(self, registry: ObjectRegistry, storage: IFileStorageRepository):
        """
        Initialize FileManager.

        Args:
            registry: Registry shared with the rest of the application
            storage: Backing store for object bytes
        """
        self.registry = registry
        self.storage = storage

    def publish(self, metadata: ObjectMetadata) -> None:
        """Make a fully written object visible."""
        self.registry.insert(metadata)
        logger.info(
            f"Published {metadata.original_name} | {metadata.size_bytes} | "
            f"{metadata.mime_type} | {metadata.id}"
        )

    def get_metadata(self, object_id: str) -> ObjectMetadata:
        """
        Look up a published object.

        Raises:
            NotFoundError: If the object does not exist (or no longer exists)
        """
        metadata = self.registry.get(object_id)
        if metadata is None:
            raise NotFoundError(
                ErrorCategory.FILE_NOT_FOUND, f"Object not found: {object_id}"
            )
        return metadata

    def open_content(self, metadata: ObjectMetadata) -> BinaryIO:
        """
        Open an object's bytes for reading.

        Raises:
            ResourceError: If the stored file cannot be opened
        """
        try:
            return self.storage.open(metadata.storage_path)
        except OSError as e:
            logger.error(f"Read failed | {metadata.id} | {e}")
            raise ResourceError(ErrorCategory.READ_FAILED, str(e)) from e

    def delete_file(self, object_id: str) -> bool:
        """
        Delete an object from the registry and from storage.

        Idempotent and safe to call concurrently: only the caller that
        removes the registry entry deletes the file; every other call is a
        silent no-op. Storage failures are logged, never raised.

        Returns:
            True if this call removed the object
        """
        metadata = self.registry.remove(object_id)
        if metadata is None:
            return False

        try:
            if self.storage.delete(metadata.storage_path):
                logger.info(f"Deleted {metadata.original_name} | {object_id}")
            else:
                logger.error(f"Delete failed | {object_id} | file already missing")
        except OSError as e:
            logger.error(f"Delete failed | {object_id} | {e}")
        return True

    def find_expired(self, ttl_seconds: int, now: Optional[float] = None) -> List[str]:
        if now is None:
            now = time.time()
        return self.registry.find_expired(ttl_seconds, now)
