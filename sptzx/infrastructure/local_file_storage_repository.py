"""
Local File Storage Repository Implementation

Concrete implementation of IFileStorageRepository for the local
filesystem. Every object is stored as ``<base_path>/<object id>.bin``.
"""

import os
from pathlib import Path
from typing import BinaryIO, List

from sptzx.domain.file_storage.storage_repository import IFileStorageRepository

STORAGE_SUFFIX = ".bin"


class LocalFileStorageRepository(IFileStorageRepository):
    """
    Local filesystem implementation of IFileStorageRepository.

    Attributes:
        base_path: Directory holding stored objects
        buffer_size: Write buffer size used for new files
    """

    def __init__(self, base_path: str = "./uploads", buffer_size: int = 2 * 1024 * 1024):
        """
        Initialize the local file storage repository.

        Args:
            base_path: Storage directory, created if missing
            buffer_size: Buffer size in bytes for write handles
        """
        self.base_path = Path(base_path)
        self.buffer_size = buffer_size
        self._ensure_base_directory()

    def _ensure_base_directory(self) -> None:
        """
        Ensure the base storage directory exists.

        Raises:
            PermissionError: If insufficient permissions to create directory
            OSError: If directory creation fails for other reasons
        """
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except PermissionError as e:
            raise PermissionError(
                f"Insufficient permissions to create storage directory: {self.base_path}"
            ) from e
        except OSError as e:
            raise OSError(
                f"Failed to create storage directory: {self.base_path}"
            ) from e

    def path_for(self, object_id: str) -> str:
        return str(self.base_path / f"{object_id}{STORAGE_SUFFIX}")

    def create(self, storage_path: str) -> BinaryIO:
        return open(storage_path, "wb", buffering=self.buffer_size)

    def flush(self, handle: BinaryIO) -> None:
        handle.flush()
        os.fsync(handle.fileno())

    def open(self, storage_path: str) -> BinaryIO:
        return open(storage_path, "rb")

    def delete(self, storage_path: str) -> bool:
        try:
            Path(storage_path).unlink()
        except FileNotFoundError:
            return False
        return True

    def list_stored_ids(self) -> List[str]:
        """Object ids of every stored file, used to report orphans at startup."""
        return [
            path.name[: -len(STORAGE_SUFFIX)]
            for path in self.base_path.glob(f"*{STORAGE_SUFFIX}")
            if path.is_file()
        ]
