"""Tests for S3 key/content-type derivation and S3Uploader."""

from pathlib import Path, PurePosixPath, PureWindowsPath
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from cmsbridge.config import DeploymentSettings
from cmsbridge.deploy.uploader import (
    DEFAULT_CONTENT_TYPE,
    S3Uploader,
    content_type_for,
    create_s3_client,
    object_key,
)
from cmsbridge.shared.errors import ConfigError, UploadError

EXPECTED_TYPES = {
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

_SETTINGS = DeploymentSettings(
    bucket_name="my-site",
    region="eu-central-1",
    access_key="AKIAEXAMPLE",
    secret_key="secret",
)


class TestContentType:
    @pytest.mark.parametrize(("extension", "expected"), sorted(EXPECTED_TYPES.items()))
    def test_table(self, extension: str, expected: str):
        assert content_type_for(f"file{extension}") == expected

    def test_unknown_extension(self):
        assert content_type_for("data.unknown") == DEFAULT_CONTENT_TYPE == "application/octet-stream"

    def test_no_extension(self):
        assert content_type_for("CNAME") == "application/octet-stream"

    def test_uses_last_extension(self):
        assert content_type_for("bundle.min.js") == "application/javascript"
        assert content_type_for("archive.html.gz") == "application/octet-stream"


class TestObjectKey:
    def test_with_prefix(self):
        assert object_key(PurePosixPath("img/a.png"), "assets") == "assets/img/a.png"

    def test_without_prefix(self):
        assert object_key(PurePosixPath("img/a.png")) == "img/a.png"

    def test_windows_separators(self):
        assert object_key(PureWindowsPath("img\\a.png"), "assets") == "assets/img/a.png"
        assert object_key("img\\a.png") == "img/a.png"


class TestCreateClient:
    @patch("cmsbridge.deploy.uploader.boto3.Session")
    def test_static_credentials(self, mock_session: MagicMock):
        create_s3_client(_SETTINGS)
        mock_session.assert_called_once_with(
            aws_access_key_id="AKIAEXAMPLE",
            aws_secret_access_key="secret",
            region_name="eu-central-1",
        )
        mock_session.return_value.client.assert_called_once_with("s3")

    def test_requires_key_pair(self):
        with pytest.raises(ConfigError):
            create_s3_client(DeploymentSettings(bucket_name="b", region="r"))


class TestUpload:
    def test_streams_file_with_key_and_type(self, tmp_path: Path):
        path = tmp_path / "img" / "a.png"
        path.parent.mkdir()
        path.write_bytes(b"\x89PNG")
        client = MagicMock()
        settings = _SETTINGS.model_copy(update={"s3_prefix": "assets"})

        key = S3Uploader(settings, client=client).upload(path, Path("img/a.png"))

        assert key == "assets/img/a.png"
        args, kwargs = client.upload_fileobj.call_args
        fileobj, bucket, sent_key = args
        assert str(fileobj.name) == str(path)
        assert bucket == "my-site"
        assert sent_key == "assets/img/a.png"
        assert kwargs["ExtraArgs"] == {"ContentType": "image/png"}

    def test_s3_error_wrapped(self, tmp_path: Path):
        path = tmp_path / "index.html"
        path.write_text("<html/>")
        client = MagicMock()
        client.upload_fileobj.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
        )

        with pytest.raises(UploadError) as exc_info:
            S3Uploader(_SETTINGS, client=client).upload(path, "index.html")

        assert exc_info.value.bucket == "my-site"
        assert exc_info.value.key == "index.html"

    def test_missing_file_wrapped(self, tmp_path: Path):
        client = MagicMock()
        with pytest.raises(UploadError):
            S3Uploader(_SETTINGS, client=client).upload(tmp_path / "gone.css", "gone.css")
        client.upload_fileobj.assert_not_called()
