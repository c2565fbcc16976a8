import time

import pytest

from sptzx.application.access_service import AccessService, AuthorizedAccess
from sptzx.domain.errors import (
    AuthorizationError,
    ErrorCategory,
    NotFoundError,
    ValidationError,
)
from sptzx.domain.file_storage.value_objects import AccessMode
from tests.fixtures import url_path_and_query


@pytest.fixture
def access_service(file_manager, signed_url_service):
    return AccessService(file_manager, signed_url_service)


def _params(signed_url_service, metadata, mode):
    url = signed_url_service.generate_signed_url(metadata, mode)
    return url_path_and_query(url)[1]


class TestAccessService:
    def test_authorize_valid_capability(
        self, access_service, signed_url_service, make_stored_object
    ):
        metadata = make_stored_object("photo.jpg", b"jpeg")
        params = _params(signed_url_service, metadata, AccessMode.INLINE)

        access = access_service.authorize(metadata.id, params)

        assert access.metadata is metadata
        assert access.mode == "inline"
        with access_service.open_content(access) as f:
            assert f.read() == b"jpeg"

    def test_missing_parameter(self, access_service, signed_url_service, make_stored_object):
        metadata = make_stored_object()
        params = _params(signed_url_service, metadata, AccessMode.INLINE)
        del params["sz-signature"]

        with pytest.raises(ValidationError) as exc:
            access_service.authorize(metadata.id, params)
        assert exc.value.code == "missing_sz-signature"

    def test_expired_capability(self, access_service, signed_url_service, make_stored_object):
        metadata = make_stored_object()
        params = _params(signed_url_service, metadata, AccessMode.INLINE)

        with pytest.raises(AuthorizationError) as exc:
            access_service.authorize(
                metadata.id, params, now=time.time() + signed_url_service.ttl_seconds + 1
            )
        assert exc.value.category is ErrorCategory.LINK_EXPIRED

    def test_capability_for_other_object(
        self, access_service, signed_url_service, make_stored_object
    ):
        first = make_stored_object()
        second = make_stored_object()
        params = _params(signed_url_service, first, AccessMode.INLINE)

        with pytest.raises(AuthorizationError) as exc:
            access_service.authorize(second.id, params)
        assert exc.value.category is ErrorCategory.ID_MISMATCH

    def test_deleted_object_is_not_found(
        self, access_service, signed_url_service, file_manager, make_stored_object
    ):
        metadata = make_stored_object()
        params = _params(signed_url_service, metadata, AccessMode.ATTACHMENT)
        file_manager.delete_file(metadata.id)

        with pytest.raises(NotFoundError) as exc:
            access_service.authorize(metadata.id, params)
        assert exc.value.code == "file_not_found"


class TestAuthorizedAccess:
    @pytest.mark.parametrize(
        "name, mode, disposition",
        [
            ("photo.png", "inline", "inline"),
            ("movie.mp4", "inline", "inline"),
            ("song.mp3", "inline", "inline"),
            ("page.html", "inline", "attachment"),
            ("notes.txt", "inline", "attachment"),
            ("photo.png", "attachment", "attachment"),
        ],
    )
    def test_disposition(self, make_stored_object, name, mode, disposition):
        access = AuthorizedAccess(metadata=make_stored_object(name), mode=mode)
        assert access.disposition == disposition
        assert access.as_attachment is (disposition == "attachment")
