"""
API Namespaces - Organized endpoint groups
"""

from typing import Iterator

from flask import current_app, request, send_file
from flask_restx import Namespace, Resource
from werkzeug.exceptions import BadRequest, RequestEntityTooLarge

from sptzx.api.models import error_response, upload_response
from sptzx.domain.errors import (
    CapacityError,
    ErrorCategory,
    SharingError,
    ValidationError,
    create_error_response,
    internal_error_response,
)

CACHE_MAX_AGE_SECONDS = 300

# =============================================================================
# Upload Namespace - Streamed multipart ingestion
# =============================================================================

upload_ns = Namespace("upload", description="File upload operations")


def _iter_request_body(chunk_size: int) -> Iterator[bytes]:
    """
    Yield the raw request body in chunks, translating transport errors.

    The body is read lazily so the upload service decides when to stop.
    """
    try:
        stream = request.stream
        while True:
            chunk = stream.read(chunk_size)
            if not chunk:
                break
            yield chunk
    except RequestEntityTooLarge as e:
        raise CapacityError(ErrorCategory.FILE_TOO_LARGE, "Transport body limit") from e
    except (BadRequest, OSError) as e:
        raise ValidationError(ErrorCategory.CHUNK_READ_FAILED, str(e)) from e


@upload_ns.route("")
class Upload(Resource):
    """Upload a file"""

    @upload_ns.doc("upload_file")
    @upload_ns.response(200, "Success", upload_response)
    @upload_ns.response(400, "Bad Request", error_response)
    @upload_ns.response(413, "Payload Too Large", error_response)
    @upload_ns.response(500, "Internal Server Error", error_response)
    def post(self):
        """
        Upload a file as multipart/form-data

        The first part carrying a file name is stored. Returns a view URL
        and a download URL, both valid until the file expires.
        """
        boundary = request.mimetype_params.get("boundary")
        if request.mimetype != "multipart/form-data" or not boundary:
            return create_error_response(
                ValidationError(ErrorCategory.INVALID_MULTIPART, "Not a multipart body")
            )

        upload_service = current_app.upload_service
        chunks = _iter_request_body(current_app.config["SPTZX_BUFFER_SIZE"])

        try:
            result = upload_service.ingest(chunks, boundary.encode("latin-1"))
        except SharingError as e:
            return create_error_response(e)
        except Exception as e:
            current_app.logger.exception(f"Unexpected error in /upload: {e}")
            return internal_error_response()

        return result.to_dict(), 200


# =============================================================================
# File Namespace - Capability-protected access
# =============================================================================

file_ns = Namespace("file", description="Capability URL access")


@file_ns.route("/<string:object_id>")
@file_ns.param("object_id", "The object identifier")
class FileContent(Resource):
    """Serve a stored file"""

    @file_ns.doc("get_file")
    @file_ns.response(200, "File content")
    @file_ns.response(400, "Bad Request", error_response)
    @file_ns.response(403, "Forbidden", error_response)
    @file_ns.response(404, "File Not Found", error_response)
    @file_ns.response(500, "Internal Server Error", error_response)
    def get(self, object_id):
        """
        Fetch a file through a capability URL

        All ``sz-*`` query parameters issued at upload time are required.
        Byte ranges are advertised but not honoured.
        """
        access_service = current_app.access_service

        try:
            access = access_service.authorize(object_id, request.args.to_dict())
            content = access_service.open_content(access)
        except SharingError as e:
            return create_error_response(e)
        except Exception as e:
            current_app.logger.exception(f"Unexpected error serving {object_id}: {e}")
            return internal_error_response()

        metadata = access.metadata
        response = send_file(
            content,
            mimetype=metadata.mime_type,
            as_attachment=access.as_attachment,
            download_name=metadata.original_name,
            conditional=False,
            etag=False,
            max_age=CACHE_MAX_AGE_SECONDS,
        )
        # send_file appends a charset to text/* types
        response.headers["Content-Type"] = metadata.mime_type
        response.headers["Content-Length"] = str(metadata.size_bytes)
        response.headers["Accept-Ranges"] = "bytes"

        current_app.logger.info(
            f"Serving {metadata.original_name} | {metadata.mime_type} | {access.disposition}"
        )
        return response
