"""
File storage abstraction layer supporting both local filesystem and AWS S3.

Uploaded files are partitioned by kind into resumes/, profiles/ and logos/
and saved under randomized names. The upload is validated (size, type)
before anything is written.
"""

import logging
import os
import uuid
from dataclasses import dataclass
from io import BytesIO
from typing import BinaryIO, FrozenSet
import boto3
from botocore.exceptions import ClientError
from fastapi import UploadFile
from app.core.config import settings
from app.core.exceptions import ServerError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadKind:
    """Where an upload field is stored and which files it accepts."""
    field: str
    folder: str
    extensions: FrozenSet[str]


DOCUMENT_EXTENSIONS = frozenset({".pdf", ".doc", ".docx"})
IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp"})

RESUME = UploadKind(field="resume", folder="resumes", extensions=DOCUMENT_EXTENSIONS)
PROFILE_PICTURE = UploadKind(field="profilePicture", folder="profiles", extensions=IMAGE_EXTENSIONS)
COMPANY_LOGO = UploadKind(field="companyLogo", folder="logos", extensions=IMAGE_EXTENSIONS)

CONTENT_TYPES = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
}


def random_filename(prefix: str, original_filename: str) -> str:
    """Build "<prefix>-<uuid><ext>" so client filenames never reach the disk."""
    extension = os.path.splitext(original_filename or "")[1].lower()
    return f"{prefix}-{uuid.uuid4().hex}{extension}"


class StorageBackend:
    """Abstract base class for storage backends"""

    def upload_file(self, file: BinaryIO, filename: str, folder: str) -> str:
        """Upload file and return storage path/URL"""
        raise NotImplementedError

    def delete_file(self, file_path: str) -> bool:
        """Delete file from storage"""
        raise NotImplementedError

    def is_available(self) -> bool:
        """Whether the backend can currently accept writes"""
        raise NotImplementedError


class LocalStorage(StorageBackend):
    """Local filesystem storage backend"""

    def __init__(self, base_dir: str = "uploads"):
        self.base_dir = base_dir
        os.makedirs(self.base_dir, exist_ok=True)

    def upload_file(self, file: BinaryIO, filename: str, folder: str) -> str:
        """Save file to <base_dir>/<folder>/"""
        directory = os.path.join(self.base_dir, folder)
        os.makedirs(directory, exist_ok=True)
        file_path = os.path.join(directory, filename)

        with open(file_path, "wb") as buffer:
            buffer.write(file.read())

        return file_path

    def delete_file(self, file_path: str) -> bool:
        """Delete file from local filesystem"""
        try:
            if os.path.exists(file_path):
                os.remove(file_path)
                return True
            return False
        except OSError as e:
            logger.error(f"Error deleting file {file_path}: {e}")
            return False

    def is_available(self) -> bool:
        return os.path.isdir(self.base_dir) and os.access(self.base_dir, os.W_OK)


class S3Storage(StorageBackend):
    """AWS S3 storage backend"""

    def __init__(self, s3_client=None):
        self.bucket_name = settings.S3_BUCKET_NAME

        if s3_client is not None:
            self.s3_client = s3_client
        # If AWS_ACCESS_KEY_ID is not set, boto3 will use IAM roles (for EC2/ECS)
        elif settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
            self.s3_client = boto3.client(
                's3',
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                region_name=settings.AWS_REGION
            )
        else:
            self.s3_client = boto3.client('s3', region_name=settings.AWS_REGION)

    def upload_file(self, file: BinaryIO, filename: str, folder: str) -> str:
        """Upload file to S3 under <folder>/ and return its s3:// URI"""
        s3_key = f"{folder}/{filename}"

        try:
            self.s3_client.upload_fileobj(
                file,
                self.bucket_name,
                s3_key,
                ExtraArgs={
                    'ContentType': self._get_content_type(filename),
                    'ServerSideEncryption': 'AES256'
                }
            )
            return f"s3://{self.bucket_name}/{s3_key}"

        except ClientError as e:
            logger.error(f"Error uploading to S3: {e}")
            raise ServerError("Failed to store uploaded file")

    def delete_file(self, file_path: str) -> bool:
        """Delete file from S3"""
        s3_key = self._parse_s3_uri(file_path)

        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=s3_key)
            return True
        except ClientError as e:
            logger.error(f"Error deleting from S3: {e}")
            return False

    def is_available(self) -> bool:
        try:
            self.s3_client.head_bucket(Bucket=self.bucket_name)
            return True
        except ClientError:
            return False

    def _parse_s3_uri(self, s3_uri: str) -> str:
        """Parse S3 URI and extract key

        Supports formats:
        - s3://bucket-name/key/path
        - resumes/resume-<uuid>.pdf (assumes default bucket)
        """
        if s3_uri.startswith("s3://"):
            parts = s3_uri.replace("s3://", "").split("/", 1)
            if len(parts) == 2:
                return parts[1]
            raise ValueError(f"Invalid S3 URI format: {s3_uri}")
        return s3_uri

    def _get_content_type(self, filename: str) -> str:
        """Determine content type based on file extension"""
        extension = os.path.splitext(filename)[1].lower()
        return CONTENT_TYPES.get(extension, 'application/octet-stream')


def get_storage() -> StorageBackend:
    """Get storage backend based on USE_S3 setting"""
    if settings.USE_S3:
        if not settings.S3_BUCKET_NAME:
            raise ValueError("S3_BUCKET_NAME must be set when USE_S3=True")
        return S3Storage()
    return LocalStorage(settings.UPLOAD_DIR)


# Singleton instance
storage = get_storage()


def store_upload(upload: UploadFile, kind: UploadKind) -> str:
    """
    Validate an uploaded file and persist it.

    Args:
        upload: The multipart file
        kind: Upload field rules (folder and accepted extensions)

    Returns:
        Storage path of the saved file

    Raises:
        ValidationError: If the file is empty, too large, or of the wrong type
    """
    extension = os.path.splitext(upload.filename or "")[1].lower()
    if extension not in kind.extensions:
        allowed = ", ".join(sorted(kind.extensions))
        raise ValidationError(f"Invalid file type for {kind.field}. Allowed: {allowed}")

    max_bytes = settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024
    data = upload.file.read(max_bytes + 1)
    if not data:
        raise ValidationError("Uploaded file is empty")
    if len(data) > max_bytes:
        raise ValidationError(f"File too large. Maximum size is {settings.MAX_UPLOAD_SIZE_MB} MB")

    filename = random_filename(kind.field, upload.filename)
    path = storage.upload_file(BytesIO(data), filename, kind.folder)
    logger.info(f"Stored {kind.field} upload at {path}")
    return path
