"""
Property-based tests for upload validation and stored names.
"""

import io
import re
from datetime import timedelta

import pytest
from hypothesis import given
from hypothesis import strategies as st

from tests.fixtures.mock_repositories import MockFileRepository, MockStorageRepository
from tests.property.strategies import allowed_mime_types, disallowed_mime_types, filenames
from watermark_backend.domain.errors import FileTooLargeError, UnsupportedFileTypeError
from watermark_backend.domain.file_storage import FileManager, StoredName

SMALL_LIMIT = 256


def make_manager():
    files, storage = MockFileRepository(), MockStorageRepository()
    return FileManager(files, storage, retention=timedelta(hours=24), max_upload_bytes=SMALL_LIMIT), files, storage


@given(mime_type=allowed_mime_types, data=st.binary(max_size=SMALL_LIMIT), name=filenames)
def test_allowed_uploads_are_retrievable(mime_type, data, name):
    manager, _, storage = make_manager()

    file = manager.upload(io.BytesIO(data), name, mime_type)

    found = manager.get_file(file.id)
    assert found == file
    assert found.size_bytes == len(data)
    assert storage.read(file.stored_name) == data


@given(mime_type=disallowed_mime_types, name=filenames)
def test_disallowed_types_persist_nothing(mime_type, name):
    manager, files, storage = make_manager()

    with pytest.raises(UnsupportedFileTypeError):
        manager.upload(io.BytesIO(b"x"), name, mime_type)

    assert files.count() == 0
    assert storage.count() == 0


@given(extra=st.integers(min_value=1, max_value=1024), mime_type=allowed_mime_types)
def test_oversized_uploads_persist_nothing(extra, mime_type):
    manager, files, storage = make_manager()

    with pytest.raises(FileTooLargeError):
        manager.upload(io.BytesIO(b"x" * (SMALL_LIMIT + extra)), "f.bin", mime_type)

    assert files.count() == 0
    assert storage.count() == 0


@given(name=filenames, millis=st.integers(min_value=0, max_value=2**45))
def test_generated_names_are_valid_and_flat(name, millis):
    stored = StoredName.generate(name, now_millis=millis)

    assert re.fullmatch(r"\d+_[0-9a-f]{32}(\.[A-Za-z0-9]+)?", str(stored))
    assert "/" not in str(stored)
    assert str(stored).startswith(stored.file_id)
    assert StoredName(str(stored)) == stored
