"""
Unit Tests for upload storage.
"""

import io
import re
from unittest.mock import patch

import pytest
from starlette.datastructures import UploadFile

from studyshare.backend.core.exceptions import NotFoundError, ValidationError
from studyshare.backend.core.storage import discard_uploads, resolve_upload, save_upload, stored_name


class TestStoredName:
    def test_prefixes_epoch_millis(self):
        assert re.fullmatch(r"\d{13}-notes\.pdf", stored_name("notes.pdf"))

    def test_strips_directories(self):
        assert stored_name("../../etc/passwd").endswith("-passwd")

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            stored_name("")


class TestSaveAndResolve:
    @pytest.fixture
    def uploads(self, tmp_path):
        with patch("studyshare.backend.core.storage.get_uploads_dir", return_value=tmp_path):
            yield tmp_path

    @pytest.mark.asyncio
    async def test_save_writes_file(self, uploads):
        upload = UploadFile(file=io.BytesIO(b"content"), filename="graphs.pdf")

        name = await save_upload(upload)

        assert (uploads / name).read_bytes() == b"content"
        assert resolve_upload(name) == (uploads / name).resolve()

    def test_missing_file(self, uploads):
        with pytest.raises(NotFoundError):
            resolve_upload("nope.pdf")

    def test_escape_rejected(self, uploads, tmp_path_factory):
        outside = tmp_path_factory.mktemp("outside") / "secret.txt"
        outside.write_text("x")

        with pytest.raises(NotFoundError):
            resolve_upload(f"../{outside.parent.name}/secret.txt")

    def test_discard_removes_files(self, uploads):
        (uploads / "1-a.pdf").write_bytes(b"a")

        discard_uploads(["1-a.pdf", "2-gone.png"])

        assert list(uploads.iterdir()) == []
