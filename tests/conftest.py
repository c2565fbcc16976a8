"""
Shared pytest fixtures and configuration for the sptzx test suite.

This module provides:
- Hypothesis configuration for property-based testing
- Service fixtures wired against a temporary upload directory
- A Flask application and test client
"""

import uuid

import pytest

# Hypothesis configuration
from hypothesis import settings, HealthCheck, Phase

from sptzx.app_factory import create_app
from sptzx.config.settings import AppConfig
from sptzx.domain.file_storage import (
    FileManager,
    ObjectMetadata,
    ObjectRegistry,
    SignedUrlService,
)
from sptzx.infrastructure.local_file_storage_repository import LocalFileStorageRepository

# Register Hypothesis profiles
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile("default")

TEST_SECRET = "test-secret-key"
TEST_BASE_URL = "http://share.test"
TEST_TTL = 300
TEST_MAX_FILE_SIZE = 1024


# =============================================================================
# Domain Fixtures
# =============================================================================

@pytest.fixture
def upload_dir(tmp_path):
    """Provide an empty upload directory."""
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def storage_repository(upload_dir):
    return LocalFileStorageRepository(str(upload_dir), buffer_size=64)


@pytest.fixture
def registry():
    return ObjectRegistry()


@pytest.fixture
def file_manager(registry, storage_repository):
    return FileManager(registry, storage_repository)


@pytest.fixture
def signed_url_service():
    return SignedUrlService(
        secret_key=TEST_SECRET, base_url=TEST_BASE_URL, ttl_seconds=TEST_TTL
    )


@pytest.fixture
def make_stored_object(file_manager, storage_repository):
    """
    Factory writing bytes to storage and publishing their metadata.

    Returns the published ObjectMetadata.
    """

    def _make(name: str = "report.txt", content: bytes = b"hello", created_at=None):
        object_id = str(uuid.uuid4())
        path = storage_repository.path_for(object_id)
        with open(path, "wb") as f:
            f.write(content)
        metadata = ObjectMetadata.create(
            object_id=object_id,
            original_name=name,
            storage_path=path,
            size_bytes=len(content),
            created_at=created_at,
        )
        file_manager.publish(metadata)
        return metadata

    return _make


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def app_config(upload_dir):
    """Configuration isolated from the environment."""
    return AppConfig(
        secret_key=TEST_SECRET,
        upload_dir=str(upload_dir),
        max_file_size=TEST_MAX_FILE_SIZE,
        file_lifetime=TEST_TTL,
        buffer_size=4096,
        base_url=TEST_BASE_URL,
        start_sweeper=False,
    )


@pytest.fixture
def app(app_config):
    """Create Flask app for testing. The expiry scheduler is never started."""
    app = create_app(app_config)
    app.config["TESTING"] = True
    yield app
    app.expiry_sweeper.shutdown()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


# =============================================================================
# Pytest Configuration Hooks
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (real filesystem, real scheduler)"
    )
    config.addinivalue_line(
        "markers", "property: Property-based tests using Hypothesis"
    )


def pytest_collection_modifyitems(config, items):
    """
    Automatically mark tests based on their location.

    - tests/unit/* -> @pytest.mark.unit
    - tests/integration/* -> @pytest.mark.integration
    - tests/property/* -> @pytest.mark.property
    """
    for item in items:
        test_path = str(item.fspath)

        if "/unit/" in test_path or "\\unit\\" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path or "\\integration\\" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/property/" in test_path or "\\property\\" in test_path:
            item.add_marker(pytest.mark.property)
