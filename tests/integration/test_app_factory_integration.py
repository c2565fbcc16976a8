import logging
import os
import time

import pytest

from sptzx.app_factory import create_app
from sptzx.config.settings import AppConfig
from sptzx.application import AccessService, UploadService
from sptzx.domain.file_storage import FileManager, ObjectRegistry
from sptzx.tasks import ExpirySweeper
from sptzx.tasks.cleanup_task import SWEEP_JOB_ID
from tests.fixtures import build_multipart, multipart_content_type


@pytest.mark.integration
class TestAppFactory:
    def test_services_are_attached(self, app):
        assert isinstance(app.registry, ObjectRegistry)
        assert isinstance(app.file_manager, FileManager)
        assert isinstance(app.upload_service, UploadService)
        assert isinstance(app.access_service, AccessService)
        assert isinstance(app.expiry_sweeper, ExpirySweeper)
        assert app.file_manager.registry is app.registry

    def test_scheduler_not_started_when_disabled(self, app):
        assert app.expiry_sweeper.scheduler.running is False

    def test_apps_do_not_share_state(self, app_config):
        first = create_app(app_config)
        second = create_app(app_config)
        assert first.registry is not second.registry

    def test_transport_limit(self, app, app_config):
        assert app.config["MAX_CONTENT_LENGTH"] == app_config.max_content_length

    def test_orphaned_files_are_reported_not_deleted(self, app_config, upload_dir, caplog):
        orphan = upload_dir / "0f8fad5b-d9cb-469f-a165-70867728950e.bin"
        orphan.write_bytes(b"left over")

        with caplog.at_level(logging.WARNING, logger="sptzx.app_factory"):
            app = create_app(app_config)

        assert "1 orphaned files" in caplog.text
        assert orphan.exists()
        assert len(app.registry) == 0

    def test_default_config_starts_expiry(self, upload_dir, monkeypatch):
        monkeypatch.delenv("SPTZX_START_SWEEPER", raising=False)
        app = create_app(AppConfig(upload_dir=str(upload_dir), file_lifetime=0))
        try:
            assert app.expiry_sweeper.scheduler.running is True
            assert app.expiry_sweeper.scheduler.get_job(SWEEP_JOB_ID) is not None
        finally:
            app.expiry_sweeper.shutdown()

    def test_default_config_expires_uploads(self, upload_dir, monkeypatch):
        monkeypatch.delenv("SPTZX_START_SWEEPER", raising=False)
        app = create_app(AppConfig(upload_dir=str(upload_dir), file_lifetime=0))
        body = build_multipart([("file", "a.txt", b"short lived")])
        try:
            data = app.test_client().post(
                "/upload", data=body, content_type=multipart_content_type()
            ).get_json()
            deadline = time.monotonic() + 5
            while data["id"] in app.registry and time.monotonic() < deadline:
                time.sleep(0.05)
            assert data["id"] not in app.registry
            assert os.listdir(upload_dir) == []
        finally:
            app.expiry_sweeper.shutdown()

    def test_sweeper_started_when_configured(self, app_config):
        app_config.start_sweeper = True
        app = create_app(app_config)
        try:
            assert app.expiry_sweeper.scheduler.running is True
        finally:
            app.expiry_sweeper.shutdown()
