"""
Signed URL Service

Generates and verifies capability URLs: self-describing, HMAC-signed
query strings granting view or download access to one object until a
stated expiry. No server-side state is needed to verify a capability.
"""

import hashlib
import hmac
import time
import uuid
from dataclasses import dataclass, fields, replace
from datetime import datetime, timezone
from typing import Dict, Mapping, Optional, Tuple
from urllib.parse import urlencode

from ..errors import AuthorizationError, ErrorCategory, ValidationError
from .entities import ObjectMetadata
from .value_objects import AccessMode

PROTOCOL_VERSION = "v1"
DEFAULT_REGION = "global"
DATE_FORMAT = "%Y%m%d"
PARAM_PREFIX = "sz-"


@dataclass(frozen=True)
class CapabilityToken:
    """
    The signed fields of a capability URL.

    Field order is the canonical signing order; ``signature`` is last and
    is not part of the signed string.
    """

    version: str
    owner: str
    date: str
    expires: str
    region: str
    mode: str
    file_type: str
    id: str
    nonce: str
    signature: str = ""

    # Query parameter name for each field
    QUERY_NAMES = {
        "version": "sz-version",
        "owner": "sz-owner",
        "date": "sz-date",
        "expires": "sz-expires",
        "region": "sz-region",
        "mode": "sz-mode",
        "file_type": "sz-type",
        "id": "sz-id",
        "nonce": "sz-nonce",
        "signature": "sz-signature",
    }

    @classmethod
    def from_query(cls, params: Mapping[str, str]) -> "CapabilityToken":
        """
        Rebuild a token from URL query parameters.

        Raises:
            ValidationError: ``missing_<param>`` for the first absent field
        """
        values = {}
        for field in fields(cls):
            param = cls.QUERY_NAMES[field.name]
            value = params.get(param)
            if value is None:
                raise ValidationError(
                    ErrorCategory.missing(param), f"Missing query parameter {param}"
                )
            values[field.name] = value
        return cls(**values)

    def to_query(self) -> Dict[str, str]:
        return {
            self.QUERY_NAMES[field.name]: getattr(self, field.name)
            for field in fields(self)
        }

    def string_to_sign(self) -> str:
        """Newline-joined canonical string of the nine signed fields."""
        return "\n".join(
            [
                self.version,
                self.owner,
                self.date,
                self.expires,
                self.region,
                self.mode,
                self.file_type,
                self.id,
                self.nonce,
            ]
        )

    def expires_at(self) -> int:
        """
        Parse the expiry timestamp.

        Raises:
            ValidationError: If ``expires`` is not an integer
        """
        try:
            return int(self.expires)
        except ValueError as e:
            raise ValidationError(
                ErrorCategory.INVALID_EXPIRES, f"Unparseable expires: {self.expires!r}"
            ) from e


class SignedUrlService:
    """
    Service for generating and validating capability URLs.

    Provides secure, time-limited access to stored objects using HMAC-SHA256
    signatures over the capability fields.
    """

    def __init__(
        self,
        secret_key: str,
        base_url: str,
        ttl_seconds: int,
        region: str = DEFAULT_REGION,
    ):
        """
        Initialize SignedUrlService.

        Args:
            secret_key: Secret key for HMAC signing
            base_url: Externally visible base URL, e.g. ``https://share.example``
            ttl_seconds: Lifetime of issued capabilities
            region: Opaque region tag carried in every capability
        """
        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")
        self.ttl_seconds = ttl_seconds
        self.region = region

    def issue_token(
        self,
        metadata: ObjectMetadata,
        mode: AccessMode,
        expires: Optional[int] = None,
        now: Optional[float] = None,
    ) -> CapabilityToken:
        """
        Build and sign a capability for one object.

        Args:
            metadata: Published object metadata
            mode: Requested presentation
            expires: Absolute expiry timestamp (default: now + ttl)
            now: Current time override

        Returns:
            Signed CapabilityToken with a fresh nonce
        """
        if now is None:
            now = time.time()
        if expires is None:
            expires = int(now) + self.ttl_seconds

        token = CapabilityToken(
            version=PROTOCOL_VERSION,
            owner=metadata.owner,
            date=datetime.fromtimestamp(now, tz=timezone.utc).strftime(DATE_FORMAT),
            expires=str(expires),
            region=self.region,
            mode=mode.value,
            file_type=metadata.mime_type,
            id=metadata.id,
            nonce=str(uuid.uuid4()),
        )
        return replace(token, signature=self._generate_signature(token))

    def generate_signed_url(
        self,
        metadata: ObjectMetadata,
        mode: AccessMode,
        expires: Optional[int] = None,
        now: Optional[float] = None,
    ) -> str:
        """Generate an absolute capability URL for one object and mode."""
        token = self.issue_token(metadata, mode, expires=expires, now=now)
        return self.build_url(token)

    def generate_url_pair(
        self, metadata: ObjectMetadata, now: Optional[float] = None
    ) -> Tuple[str, str]:
        """
        Mint the view and download URLs of a fresh upload.

        Both share one expiry and differ in mode and nonce.

        Returns:
            Tuple of (view_url, download_url)
        """
        if now is None:
            now = time.time()
        expires = int(now) + self.ttl_seconds
        view_url = self.generate_signed_url(metadata, AccessMode.INLINE, expires, now)
        download_url = self.generate_signed_url(
            metadata, AccessMode.ATTACHMENT, expires, now
        )
        return view_url, download_url

    def build_url(self, token: CapabilityToken) -> str:
        return f"{self.base_url}/file/{token.id}?{urlencode(token.to_query())}"

    def _generate_signature(self, token: CapabilityToken) -> str:
        """
        Generate HMAC signature over the token's canonical string.

        Returns:
            HMAC-SHA256 signature as hex string
        """
        return hmac.new(
            self.secret_key.encode("utf-8"),
            token.string_to_sign().encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()

    def verify_signature(self, token: CapabilityToken) -> bool:
        """
        Check that a token was issued with our secret and not altered.

        Says nothing about expiry, id binding or object existence.
        """
        expected_signature = self._generate_signature(token)

        # Use constant-time comparison to prevent timing attacks
        return hmac.compare_digest(
            token.signature.encode("utf-8"), expected_signature.encode("utf-8")
        )

    def authorize(
        self, token: CapabilityToken, object_id: str, now: Optional[float] = None
    ) -> None:
        """
        Enforce every authorization condition of a capability.

        Order: signature, expiry, id binding.

        Raises:
            AuthorizationError: ``invalid_signature``, ``link_expired`` or ``id_mismatch``
            ValidationError: ``invalid_expires`` if the expiry is unparseable
        """
        if not self.verify_signature(token):
            raise AuthorizationError(
                ErrorCategory.INVALID_SIGNATURE, context={"object_id": object_id}
            )

        if now is None:
            now = time.time()
        if not token.expires_at() > int(now):
            raise AuthorizationError(
                ErrorCategory.LINK_EXPIRED, context={"object_id": object_id}
            )

        if token.id != object_id:
            raise AuthorizationError(
                ErrorCategory.ID_MISMATCH,
                f"Capability for {token.id} used on {object_id}",
                context={"object_id": object_id},
            )
