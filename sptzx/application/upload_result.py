"""
Upload Result Value Object

Encapsulates the outcome of a successful upload.
"""

from dataclasses import dataclass
from typing import Any, Dict

from sptzx.domain.file_storage.entities import ObjectMetadata


@dataclass(frozen=True)
class UploadResult:
    """
    Value object returned to the client after publish.

    Holds the published metadata and the two capability URLs minted for it.
    """

    metadata: ObjectMetadata
    view_url: str
    download_url: str
    ttl_seconds: int

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert result to the upload response body.

        Returns:
            ``{id, name, size, mime, view, download, ttl}``
        """
        return {
            "id": self.metadata.id,
            "name": self.metadata.original_name,
            "size": self.metadata.size_bytes,
            "mime": self.metadata.mime_type,
            "view": self.view_url,
            "download": self.download_url,
            "ttl": self.ttl_seconds,
        }
