"""Infrastructure adapters."""

from .local_file_storage_repository import LocalFileStorageRepository

__all__ = ["LocalFileStorageRepository"]
