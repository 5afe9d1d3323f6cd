"""Tests for signed document URLs."""

import pytest
from unittest.mock import MagicMock

from modules.events.storage import DocumentStorage
from shared.exceptions import ExternalServiceError


@pytest.fixture
def db():
    return MagicMock()


def bucket(db: MagicMock) -> MagicMock:
    return db.storage.from_.return_value


class TestObjectPath:
    def test_strips_bucket_prefix(self, db):
        storage = DocumentStorage(db, "event-documents")
        assert storage.object_path("event-documents/e1/plan.pdf") == "e1/plan.pdf"

    def test_leaves_plain_paths(self, db):
        storage = DocumentStorage(db, "event-documents")
        assert storage.object_path("/e1/plan.pdf") == "e1/plan.pdf"


class TestCreateSignedUrl:
    def test_signed_url(self, db):
        bucket(db).create_signed_url.return_value = {"signedURL": "https://cdn/signed"}

        url = DocumentStorage(db, "event-documents").create_signed_url("event-documents/a.pdf", 60)

        assert url == "https://cdn/signed"
        db.storage.from_.assert_called_once_with("event-documents")
        bucket(db).create_signed_url.assert_called_once_with("a.pdf", 60)

    def test_camel_case_key(self, db):
        bucket(db).create_signed_url.return_value = {"signedUrl": "https://cdn/signed"}
        assert DocumentStorage(db, "docs").create_signed_url("a.pdf", 60) == "https://cdn/signed"

    def test_storage_error(self, db):
        bucket(db).create_signed_url.side_effect = RuntimeError("Object not found")
        with pytest.raises(ExternalServiceError) as exc_info:
            DocumentStorage(db, "docs").create_signed_url("a.pdf", 60)
        assert exc_info.value.code == "STORAGE_ERROR"

    def test_missing_url(self, db):
        bucket(db).create_signed_url.return_value = {}
        with pytest.raises(ExternalServiceError):
            DocumentStorage(db, "docs").create_signed_url("a.pdf", 60)
