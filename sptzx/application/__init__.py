"""Application services orchestrating upload and access workflows."""

from .access_service import AccessService, AuthorizedAccess
from .upload_service import UploadService
from .upload_result import UploadResult

__all__ = [
    "AccessService",
    "AuthorizedAccess",
    "UploadService",
    "UploadResult",
]
