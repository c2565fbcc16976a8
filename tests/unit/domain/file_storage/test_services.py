import os
from unittest.mock import Mock

import pytest

from sptzx.domain.errors import ErrorCategory, NotFoundError, ResourceError
from sptzx.domain.file_storage.entities import ObjectMetadata
from sptzx.domain.file_storage.registry import DuplicateObjectError, ObjectRegistry
from sptzx.domain.file_storage.services import FileManager


class TestFileManager:
    def test_get_metadata_of_published_object(self, file_manager, make_stored_object):
        metadata = make_stored_object()
        assert file_manager.get_metadata(metadata.id) is metadata

    def test_get_metadata_unknown_raises_not_found(self, file_manager):
        with pytest.raises(NotFoundError) as exc:
            file_manager.get_metadata("nope")
        assert exc.value.category is ErrorCategory.FILE_NOT_FOUND

    def test_publish_twice_is_rejected(self, file_manager, make_stored_object):
        metadata = make_stored_object()
        with pytest.raises(DuplicateObjectError):
            file_manager.publish(metadata)

    def test_open_content(self, file_manager, make_stored_object):
        metadata = make_stored_object(content=b"payload")
        with file_manager.open_content(metadata) as f:
            assert f.read() == b"payload"

    def test_open_content_of_vanished_file_raises_read_failed(
        self, file_manager, make_stored_object
    ):
        metadata = make_stored_object()
        os.remove(metadata.storage_path)
        with pytest.raises(ResourceError) as exc:
            file_manager.open_content(metadata)
        assert exc.value.code == "read_failed"

    def test_delete_removes_entry_and_file(self, file_manager, make_stored_object):
        metadata = make_stored_object()
        assert file_manager.delete_file(metadata.id) is True
        assert file_manager.registry.get(metadata.id) is None
        assert not os.path.exists(metadata.storage_path)

    def test_delete_is_idempotent(self, file_manager, make_stored_object):
        metadata = make_stored_object()
        assert file_manager.delete_file(metadata.id) is True
        assert file_manager.delete_file(metadata.id) is False
        assert file_manager.delete_file("never-existed") is False

    def test_delete_with_missing_file_still_removes_entry(
        self, file_manager, make_stored_object
    ):
        metadata = make_stored_object()
        os.remove(metadata.storage_path)
        assert file_manager.delete_file(metadata.id) is True
        assert metadata.id not in file_manager.registry

    def test_storage_error_on_delete_is_logged_not_raised(self):
        registry = ObjectRegistry()
        storage = Mock()
        storage.delete.side_effect = PermissionError("denied")
        manager = FileManager(registry, storage)
        metadata = ObjectMetadata.create("x", "a.txt", "/tmp/x.bin", 1)
        registry.insert(metadata)

        assert manager.delete_file("x") is True
        assert "x" not in registry
        storage.delete.assert_called_once_with("/tmp/x.bin")

    def test_find_expired(self, file_manager, make_stored_object):
        old = make_stored_object(created_at=1_000)
        make_stored_object(created_at=2_000)
        assert file_manager.find_expired(300, now=2_100) == [old.id]
