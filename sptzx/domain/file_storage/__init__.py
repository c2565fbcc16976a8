"""
File Storage Domain

Ephemeral object metadata, the in-memory registry, capability URLs and
the deletion path.
"""

from .entities import ObjectMetadata
from .registry import DuplicateObjectError, ObjectRegistry, ReadWriteLock
from .services import FileManager
from .signed_url_service import CapabilityToken, SignedUrlService
from .storage_repository import IFileStorageRepository
from .value_objects import AccessMode, sanitize_filename

__all__ = [
    "AccessMode",
    "CapabilityToken",
    "DuplicateObjectError",
    "FileManager",
    "IFileStorageRepository",
    "ObjectMetadata",
    "ObjectRegistry",
    "ReadWriteLock",
    "SignedUrlService",
    "sanitize_filename",
]
