"""
Application Factory

Creates and configures the Flask application with all dependencies.
The registry, storage and services are built here and attached to the
app; nothing is held in module-level globals.
"""

import logging
from typing import Optional

from flask import Flask
from flask_cors import CORS

from sptzx.application.access_service import AccessService
from sptzx.application.upload_service import UploadService
from sptzx.config.settings import AppConfig
from sptzx.domain.file_storage import FileManager, ObjectRegistry, SignedUrlService
from sptzx.infrastructure.local_file_storage_repository import LocalFileStorageRepository
from sptzx.tasks.cleanup_task import ExpirySweeper

logger = logging.getLogger(__name__)


def create_app(config: Optional[AppConfig] = None) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config: Application configuration, uses default if None

    Returns:
        Configured Flask application
    """
    if config is None:
        config = AppConfig()

    # Create Flask app
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = config.max_content_length
    app.config["SPTZX_BUFFER_SIZE"] = config.buffer_size
    app.sptzx_config = config

    # Configure CORS
    CORS(
        app,
        resources={
            r"/*": {
                "origins": "*",
                "methods": ["GET", "POST", "OPTIONS"],
                "allow_headers": ["Content-Type"],
                "expose_headers": ["Content-Disposition", "Content-Length"],
                "max_age": 3600,
            }
        },
    )

    _initialize_services(app, config)

    _register_blueprints(app)

    return app


def _initialize_services(app: Flask, config: AppConfig) -> None:
    """
    Build the object graph and attach it to the app.

    Args:
        app: Flask application
        config: Application configuration
    """
    registry = ObjectRegistry()
    storage_repository = LocalFileStorageRepository(
        config.upload_dir, buffer_size=config.buffer_size
    )

    orphaned = storage_repository.list_stored_ids()
    if orphaned:
        # Left behind by a previous process; the registry does not know them
        logger.warning(
            f"{len(orphaned)} orphaned files in {config.upload_dir} are not tracked"
        )

    file_manager = FileManager(registry, storage_repository)
    signed_url_service = SignedUrlService(
        secret_key=config.secret_key,
        base_url=config.base_url,
        ttl_seconds=config.file_lifetime,
    )
    expiry_sweeper = ExpirySweeper(
        file_manager,
        ttl_seconds=config.file_lifetime,
        sweep_interval_seconds=config.sweep_interval,
    )
    upload_service = UploadService(
        file_manager,
        signed_url_service,
        max_file_size=config.max_file_size,
        schedule_expiry=expiry_sweeper.schedule_expiry,
    )
    access_service = AccessService(file_manager, signed_url_service)

    if config.start_sweeper:
        expiry_sweeper.start()

    # Attach services directly to app for access in API routes
    app.registry = registry
    app.file_manager = file_manager
    app.signed_url_service = signed_url_service
    app.expiry_sweeper = expiry_sweeper
    app.upload_service = upload_service
    app.access_service = access_service


def _register_blueprints(app: Flask) -> None:
    """
    Register API blueprints.

    Args:
        app: Flask application
    """
    from sptzx.api import sharing_bp

    app.register_blueprint(sharing_bp)
