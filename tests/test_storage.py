"""
Tests for the file storage backends and upload validation.
"""

import io
import os
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from starlette.datastructures import UploadFile

from app.core.exceptions import ServerError, ValidationError
from app.core.storage import LocalStorage, RESUME, PROFILE_PICTURE, S3Storage, random_filename, store_upload


def client_error(operation):
    return ClientError({"Error": {"Code": "500", "Message": "boom"}}, operation)


def make_upload(filename, data):
    return UploadFile(file=io.BytesIO(data), filename=filename)


class TestLocalStorage:

    def test_upload_and_delete(self, tmp_path):
        backend = LocalStorage(str(tmp_path))

        path = backend.upload_file(io.BytesIO(b"hello"), "file.pdf", "resumes")

        assert path == os.path.join(str(tmp_path), "resumes", "file.pdf")
        with open(path, "rb") as stored:
            assert stored.read() == b"hello"
        assert backend.delete_file(path) is True
        assert not os.path.exists(path)
        assert backend.delete_file(path) is False
        assert backend.is_available()


class TestS3Storage:

    @pytest.fixture
    def s3_client(self):
        return MagicMock()

    @pytest.fixture
    def backend(self, s3_client):
        backend = S3Storage(s3_client=s3_client)
        backend.bucket_name = "uploads-bucket"
        return backend

    def test_upload_uses_folder_key(self, backend, s3_client):
        path = backend.upload_file(io.BytesIO(b"data"), "resume-abc.pdf", "resumes")

        assert path == "s3://uploads-bucket/resumes/resume-abc.pdf"
        args, kwargs = s3_client.upload_fileobj.call_args
        assert args[1:] == ("uploads-bucket", "resumes/resume-abc.pdf")
        assert kwargs["ExtraArgs"]["ContentType"] == "application/pdf"

    def test_upload_failure_raises_server_error(self, backend, s3_client):
        s3_client.upload_fileobj.side_effect = client_error("PutObject")

        with pytest.raises(ServerError):
            backend.upload_file(io.BytesIO(b"data"), "resume.pdf", "resumes")

    def test_delete_parses_uri(self, backend, s3_client):
        assert backend.delete_file("s3://uploads-bucket/logos/logo.png") is True

        s3_client.delete_object.assert_called_once_with(Bucket="uploads-bucket", Key="logos/logo.png")

    def test_availability_follows_head_bucket(self, backend, s3_client):
        assert backend.is_available() is True

        s3_client.head_bucket.side_effect = client_error("HeadBucket")
        assert backend.is_available() is False


class TestStoreUpload:

    def test_random_filename_keeps_extension_only(self):
        name = random_filename("resume", "My CV.PDF")

        assert name.startswith("resume-")
        assert name.endswith(".pdf")
        assert "My CV" not in name

    def test_store_valid_resume(self, upload_dir):
        path = store_upload(make_upload("cv.docx", b"content"), RESUME)

        assert os.path.dirname(path) == os.path.join(str(upload_dir), "resumes")
        with open(path, "rb") as stored:
            assert stored.read() == b"content"

    def test_rejects_wrong_extension(self):
        with pytest.raises(ValidationError) as exc_info:
            store_upload(make_upload("cv.exe", b"content"), RESUME)

        assert "Invalid file type" in exc_info.value.message

    def test_rejects_document_as_picture(self):
        with pytest.raises(ValidationError):
            store_upload(make_upload("me.pdf", b"content"), PROFILE_PICTURE)

    def test_rejects_empty_file(self):
        with pytest.raises(ValidationError) as exc_info:
            store_upload(make_upload("cv.pdf", b""), RESUME)

        assert exc_info.value.message == "Uploaded file is empty"
