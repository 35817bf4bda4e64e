"""S3 upload of single build artifacts.

Derives each object's key from its path relative to the build output
directory and its content type from a fixed extension table.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePath
from typing import Any

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError

from cmsbridge.config import DeploymentSettings
from cmsbridge.shared.errors import ConfigError, UploadError

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES: dict[str, str] = {
    ".html": "text/html",
    ".css": "text/css",
    ".xml": "text/xml",

    ".js": "application/javascript",
    ".pdf": "application/pdf",

    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".webp": "image/webp",

    ".webm": "video/webm",
    ".mp4": "video/mp4",
    ".ogv": "video/ogg",
    ".avi": "video/x-msvideo",

    ".ogg": "audio/ogg",
    ".mp3": "audio/mpeg",
    ".mpeg": "audio/mpeg",
}


def content_type_for(file_name: str | PurePath) -> str:
    """Content type for a file name, by exact extension match."""
    extension = os.path.splitext(str(file_name))[1]
    return CONTENT_TYPES.get(extension, DEFAULT_CONTENT_TYPE)


def object_key(relative_path: str | PurePath, prefix: str = "") -> str:
    """S3 key for a path relative to the build output directory.

    Separators are always ``/``, whatever the local convention.

    >>> object_key("img/a.png", "assets")
    'assets/img/a.png'
    >>> object_key("img\\\\a.png")
    'img/a.png'
    """
    key = str(relative_path)
    if prefix:
        key = f"{prefix}/{key}"
    return key.replace("\\", "/")


def create_s3_client(settings: DeploymentSettings) -> Any:
    """S3 client using only the configured static key pair."""
    if not (settings.access_key and settings.secret_key):
        raise ConfigError(
            "deployment needs both access_key and secret_key",
            identifier=settings.bucket_name,
        )
    session = boto3.Session(
        aws_access_key_id=settings.access_key,
        aws_secret_access_key=settings.secret_key,
        region_name=settings.region,
    )
    return session.client("s3")


class S3Uploader:
    """Streams files to one S3 bucket."""

    def __init__(self, settings: DeploymentSettings, client: Any | None = None) -> None:
        self.settings = settings
        self.client = client if client is not None else create_s3_client(settings)

    @property
    def bucket(self) -> str:
        return self.settings.bucket_name

    def upload(self, path: Path, relative_path: str | PurePath) -> str:
        """Upload ``path`` and return the key it was stored under.

        Raises:
            UploadError: If the file cannot be read or S3 rejects it.
        """
        key = object_key(relative_path, self.settings.s3_prefix)
        content_type = content_type_for(path.name)

        logger.debug("Uploading %s to s3://%s/%s (%s)", path, self.bucket, key, content_type)

        try:
            with open(path, "rb") as fh:
                self.client.upload_fileobj(
                    fh,
                    self.bucket,
                    key,
                    ExtraArgs={"ContentType": content_type},
                )
        except (OSError, BotoCoreError, ClientError, S3UploadFailedError) as exc:
            raise UploadError(
                f"uploading {path} to s3://{self.bucket}/{key} failed: {exc}",
                bucket=self.bucket,
                key=key,
            ) from exc

        return key
