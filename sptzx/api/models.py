"""
API Models for response documentation
"""

from flask_restx import fields

from sptzx.api import api

upload_response = api.model(
    "UploadResponse",
    {
        "id": fields.String(description="Object identifier"),
        "name": fields.String(description="Sanitized original file name"),
        "size": fields.Integer(description="Stored size in bytes"),
        "mime": fields.String(description="Inferred mime type"),
        "view": fields.String(description="Capability URL for inline viewing"),
        "download": fields.String(description="Capability URL for download"),
        "ttl": fields.Integer(description="Seconds until the object is deleted"),
    },
)

error_response = api.model(
    "ErrorResponse",
    {
        "error": fields.String(
            description="Error code", example="invalid_signature"
        ),
    },
)
