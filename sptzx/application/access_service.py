"""
Access Service

Validates a capability presented for an object and resolves what should
be served: metadata, content handle and presentation.
"""

import logging
from dataclasses import dataclass
from typing import BinaryIO, Mapping, Optional

from sptzx.domain.errors import AuthorizationError
from sptzx.domain.file_storage.entities import ObjectMetadata
from sptzx.domain.file_storage.services import FileManager
from sptzx.domain.file_storage.signed_url_service import (
    CapabilityToken,
    SignedUrlService,
)
from sptzx.domain.file_storage.value_objects import AccessMode, is_viewable_mime

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthorizedAccess:
    """An object that passed every access check, ready to be served."""

    metadata: ObjectMetadata
    mode: str

    @property
    def as_attachment(self) -> bool:
        """
        Inline only when the capability asks for it and the type is viewable.
        """
        return not (
            self.mode == AccessMode.INLINE.value
            and is_viewable_mime(self.metadata.mime_type)
        )

    @property
    def disposition(self) -> str:
        return "attachment" if self.as_attachment else "inline"


class AccessService:
    """
    Application service for serving objects through capability URLs.

    Checks, in order: all capability fields present, signature, expiry,
    id binding, registry lookup. Missing objects are reported separately
    from forbidden requests.
    """

    def __init__(self, file_manager: FileManager, signed_url_service: SignedUrlService):
        self.file_manager = file_manager
        self.signed_url_service = signed_url_service

    def authorize(
        self, object_id: str, params: Mapping[str, str], now: Optional[float] = None
    ) -> AuthorizedAccess:
        """
        Validate a capability for ``object_id``.

        Args:
            object_id: Identifier from the request path
            params: Query parameters of the request
            now: Current time override

        Returns:
            AuthorizedAccess for the object

        Raises:
            ValidationError: Missing parameter or unparseable expiry
            AuthorizationError: Bad signature, expired or id mismatch
            NotFoundError: Object no longer exists
        """
        token = CapabilityToken.from_query(params)

        try:
            self.signed_url_service.authorize(token, object_id, now=now)
        except AuthorizationError as e:
            logger.warning(f"Access denied | {e.code} | {object_id}")
            raise

        metadata = self.file_manager.get_metadata(object_id)
        return AuthorizedAccess(metadata=metadata, mode=token.mode)

    def open_content(self, access: AuthorizedAccess) -> BinaryIO:
        """
        Open the stored bytes of an authorized object.

        Raises:
            ResourceError: If storage cannot be read
        """
        return self.file_manager.open_content(access.metadata)
