"""
File Storage Repository Interface

Abstract interface for physical storage of uploaded bytes. Keeps the
domain and application layers independent of the filesystem.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO


class IFileStorageRepository(ABC):
    """
    Contract for the backing store of uploaded objects.

    Contract Guarantees:
    - Storage paths are chosen by ``path_for`` from the object id only
    - ``create``, ``flush`` and ``open`` raise ``OSError`` on failure
    - ``delete`` is idempotent: deleting a missing file returns False
      without raising
    """

    @abstractmethod
    def path_for(self, object_id: str) -> str:
        """Return the storage path for an object id."""
        pass

    @abstractmethod
    def create(self, storage_path: str) -> BinaryIO:
        """
        Create (or truncate) the storage target and open it for writing.

        Args:
            storage_path: Path returned by ``path_for``

        Returns:
            Writable binary handle
        """
        pass

    @abstractmethod
    def flush(self, handle: BinaryIO) -> None:
        """Flush buffered writes of a handle returned by ``create`` durably."""
        pass

    @abstractmethod
    def open(self, storage_path: str) -> BinaryIO:
        """Open stored content for reading."""
        pass

    @abstractmethod
    def delete(self, storage_path: str) -> bool:
        """
        Delete stored content.

        Returns:
            True if a file was removed, False if it did not exist

        Raises:
            OSError: If the file exists but cannot be removed
        """
        pass
