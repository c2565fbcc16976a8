"""
Upload Service

Application service that ingests a streamed multipart upload, enforces
the size ceiling, writes the bytes to storage and publishes the object.
"""

import itertools
import logging
from typing import BinaryIO, Callable, Iterable, Optional, Tuple

from werkzeug.sansio.multipart import (
    Data,
    Epilogue,
    Field,
    File,
    MultipartDecoder,
    NeedData,
)

from sptzx.domain.errors import (
    CapacityError,
    ErrorCategory,
    ResourceError,
    ValidationError,
)
from sptzx.domain.file_storage.entities import ObjectMetadata
from sptzx.domain.file_storage.services import FileManager
from sptzx.domain.file_storage.signed_url_service import SignedUrlService
from sptzx.domain.file_storage.value_objects import (
    generate_object_id,
    sanitize_filename,
)

from .upload_result import UploadResult

logger = logging.getLogger(__name__)


class UploadService:
    """
    Orchestrates the upload workflow.

    Workflow:
    1. Open the storage target for a fresh object id
    2. Stream the first file part into it, keeping a running total
    3. Flush durably, build metadata and publish it to the registry
    4. Mint the view and download capability URLs
    5. Schedule the deferred deletion

    A failed upload removes its partial file before the error propagates,
    and nothing is ever published for it.
    """

    def __init__(
        self,
        file_manager: FileManager,
        signed_url_service: SignedUrlService,
        max_file_size: int,
        schedule_expiry: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize UploadService.

        Args:
            file_manager: Registry/storage coordinator
            signed_url_service: Capability URL codec
            max_file_size: Maximum accepted file size in bytes
            schedule_expiry: Called with the object id after publish
        """
        self.file_manager = file_manager
        self.storage = file_manager.storage
        self.signed_url_service = signed_url_service
        self.max_file_size = max_file_size
        self.schedule_expiry = schedule_expiry

    def ingest(self, chunks: Iterable[bytes], boundary: bytes) -> UploadResult:
        """
        Consume a multipart body and publish the uploaded file.

        Args:
            chunks: Raw request body chunks
            boundary: Multipart boundary from the Content-Type header

        Returns:
            UploadResult with the metadata and both capability URLs

        Raises:
            ValidationError: Malformed multipart, unreadable chunk or no file part
            CapacityError: File larger than the configured maximum
            ResourceError: Storage create/write/flush failure
        """
        object_id = generate_object_id()
        storage_path = self.storage.path_for(object_id)

        try:
            handle = self.storage.create(storage_path)
        except OSError as e:
            logger.error(f"File create failed | {object_id} | {e}")
            raise ResourceError(ErrorCategory.FILE_CREATE_FAILED, str(e)) from e

        try:
            with handle:
                original_name, total_size = self._receive(chunks, boundary, handle)
                self._flush(handle, object_id)

            metadata = ObjectMetadata.create(
                object_id=object_id,
                original_name=original_name,
                storage_path=storage_path,
                size_bytes=total_size,
            )
            self.file_manager.publish(metadata)
        except Exception:
            self._discard(storage_path, object_id)
            raise

        view_url, download_url = self.signed_url_service.generate_url_pair(metadata)

        if self.schedule_expiry is not None:
            self.schedule_expiry(object_id)

        return UploadResult(
            metadata=metadata,
            view_url=view_url,
            download_url=download_url,
            ttl_seconds=self.signed_url_service.ttl_seconds,
        )

    def _receive(
        self, chunks: Iterable[bytes], boundary: bytes, handle: BinaryIO
    ) -> Tuple[str, int]:
        """
        Drive the multipart decoder and stream the first file part to disk.

        Returns:
            Tuple of (sanitized original name, bytes written)
        """
        decoder = MultipartDecoder(boundary)
        original_name: Optional[str] = None
        in_file_part = False
        finished = False
        total_size = 0

        # None tells the decoder the body is complete
        for chunk in itertools.chain(chunks, [None]):
            decoder.receive_data(chunk)
            try:
                event = decoder.next_event()
                while not isinstance(event, (Epilogue, NeedData)):
                    if isinstance(event, File) and original_name is None:
                        original_name = sanitize_filename(event.filename or "")
                        in_file_part = True
                    elif isinstance(event, (File, Field)):
                        in_file_part = False
                    elif isinstance(event, Data) and in_file_part:
                        total_size += len(event.data)
                        if total_size > self.max_file_size:
                            logger.warning(
                                f"Upload rejected | over {self.max_file_size} bytes"
                            )
                            raise CapacityError(ErrorCategory.FILE_TOO_LARGE)
                        self._write(handle, event.data)
                        if not event.more_data:
                            in_file_part = False
                    event = decoder.next_event()
            except ValueError as e:
                raise ValidationError(ErrorCategory.INVALID_MULTIPART, str(e)) from e

            if isinstance(event, Epilogue):
                finished = True

        if not finished:
            raise ValidationError(
                ErrorCategory.INVALID_MULTIPART, "Body ended before closing boundary"
            )
        if original_name is None:
            raise ValidationError(ErrorCategory.MISSING_FILE, "No file part in form")

        return original_name, total_size

    def _write(self, handle: BinaryIO, data: bytes) -> None:
        try:
            handle.write(data)
        except OSError as e:
            logger.error(f"Write failed | {handle.name} | {e}")
            raise ResourceError(ErrorCategory.WRITE_FAILED, str(e)) from e

    def _flush(self, handle: BinaryIO, object_id: str) -> None:
        try:
            self.storage.flush(handle)
        except OSError as e:
            logger.error(f"Flush failed | {object_id} | {e}")
            raise ResourceError(ErrorCategory.FLUSH_FAILED, str(e)) from e

    def _discard(self, storage_path: str, object_id: str) -> None:
        """Remove the partial file of a failed upload."""
        try:
            self.storage.delete(storage_path)
        except OSError as e:
            logger.error(f"Partial file cleanup failed | {object_id} | {e}")
