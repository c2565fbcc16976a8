"""
API - sptzx REST API

Upload and capability-URL endpoints with OpenAPI/Swagger documentation.
"""

from flask import Blueprint
from flask_restx import Api

# Routes live at the site root: /, /upload, /file/<id>
sharing_bp = Blueprint("sharing", __name__)


class SharingApi(Api):
    """Flask-RESTX API whose root URL answers the liveness probe."""

    def render_root(self):
        return {"status": "ok"}


api = SharingApi(
    sharing_bp,
    version="1.0",
    title="sptzx API",
    description="Ephemeral file sharing through signed, self-expiring URLs",
    doc="/docs",  # Swagger UI will be available at /docs
    license="MIT",
    # No authentication required: capability URLs carry the authorization
)

# Import namespaces after api is created to avoid circular imports
from .namespaces import file_ns, upload_ns  # noqa: E402

# Register namespaces
api.add_namespace(upload_ns, path="/upload")
api.add_namespace(file_ns, path="/file")
