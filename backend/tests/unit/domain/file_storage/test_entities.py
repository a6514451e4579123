"""
Unit tests for the StoredFile entity.
"""

from datetime import timedelta

import pytest

from tests.fixtures.mock_repositories import aware
from watermark_backend.domain.file_storage import StoredFile, StoredName


@pytest.fixture
def stored_file():
    name = StoredName("1704067200000_" + "0" * 32 + ".pdf")
    return StoredFile.create(
        stored_name=name,
        original_name="report.pdf",
        size_bytes=1024,
        mime_type="application/pdf",
        storage_path="/uploads/" + str(name),
        retention=timedelta(hours=24),
        created_at=aware(2024, 1, 1),
    )


class TestStoredFile:
    def test_create_derives_id_and_expiry(self, stored_file):
        assert stored_file.id == "1704067200000_" + "0" * 32
        assert stored_file.expires_at == aware(2024, 1, 2)

    def test_expiry_must_follow_creation(self):
        with pytest.raises(ValueError):
            StoredFile(
                id="x",
                original_name="a",
                stored_name="x",
                size_bytes=0,
                mime_type="text/plain",
                storage_path="/x",
                created_at=aware(2024, 1, 1),
                expires_at=aware(2024, 1, 1),
            )

    def test_is_expired(self, stored_file):
        assert not stored_file.is_expired(aware(2024, 1, 1, 23, 59))
        assert stored_file.is_expired(aware(2024, 1, 2))

    def test_public_url(self, stored_file):
        url = stored_file.public_url("http://localhost:3001/")

        assert url == f"http://localhost:3001/files/{stored_file.stored_name}"

    def test_dict_round_trip(self, stored_file):
        assert StoredFile.from_dict(stored_file.to_dict()) == stored_file
