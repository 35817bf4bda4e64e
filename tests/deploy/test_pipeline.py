"""Tests for Deployment — walk + sequential upload."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from cmsbridge.config import DeploymentSettings, SiteConfig
from cmsbridge.deploy.pipeline import Deployment
from cmsbridge.deploy.uploader import S3Uploader
from cmsbridge.shared.errors import UploadError, WalkError

_SETTINGS = DeploymentSettings(
    bucket_name="my-site",
    region="eu-central-1",
    access_key="AKIAEXAMPLE",
    secret_key="secret",
)


def _build(root: Path, files: list[str]) -> None:
    for rel in files:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(rel)


class TestPublicPath:
    def test_default_public(self, tmp_path: Path):
        deployment = Deployment(SiteConfig(root_dir=str(tmp_path)), _SETTINGS, uploader=MagicMock())
        assert deployment.public_path == tmp_path / "public"

    def test_relative_build(self, tmp_path: Path):
        site = SiteConfig(root_dir=str(tmp_path), build="dist/site")
        deployment = Deployment(site, _SETTINGS, uploader=MagicMock())
        assert deployment.public_path == tmp_path / "dist" / "site"

    def test_absolute_build(self, tmp_path: Path):
        site = SiteConfig(root_dir=str(tmp_path / "root"), build=str(tmp_path / "out"))
        deployment = Deployment(site, _SETTINGS, uploader=MagicMock())
        assert deployment.public_path == tmp_path / "out"


class TestDeploy:
    def test_uploads_every_file(self, tmp_path: Path):
        _build(tmp_path / "public", ["index.html", "img/a.png", "css/site.css"])
        client = MagicMock()
        settings = _SETTINGS.model_copy(update={"s3_prefix": "assets"})
        uploader = S3Uploader(settings, client=client)

        result = Deployment(SiteConfig(root_dir=str(tmp_path)), settings, uploader=uploader).deploy()

        assert sorted(result.keys) == ["assets/css/site.css", "assets/img/a.png", "assets/index.html"]
        assert result.uploaded == 3
        assert result.bucket == "my-site"
        sent = {c.args[2]: c.kwargs["ExtraArgs"]["ContentType"] for c in client.upload_fileobj.call_args_list}
        assert sent == {
            "assets/css/site.css": "text/css",
            "assets/img/a.png": "image/png",
            "assets/index.html": "text/html",
        }

    def test_stops_at_first_failure(self, tmp_path: Path):
        _build(tmp_path / "public", [f"page{i}.html" for i in range(10)])
        uploader = MagicMock(spec=S3Uploader)
        calls: list[Path] = []

        def _upload(path: Path, relative: Path) -> str:
            calls.append(path)
            if len(calls) == 3:
                raise UploadError("boom", bucket="my-site", key=str(relative))
            return str(relative)

        uploader.upload.side_effect = _upload
        deployment = Deployment(SiteConfig(root_dir=str(tmp_path)), _SETTINGS, uploader=uploader)

        with pytest.raises(UploadError):
            deployment.deploy()

        assert len(calls) == 3

    def test_missing_build_dir(self, tmp_path: Path):
        deployment = Deployment(SiteConfig(root_dir=str(tmp_path)), _SETTINGS, uploader=MagicMock())
        with pytest.raises(WalkError):
            deployment.deploy()

    def test_does_not_touch_registry(self, tmp_path: Path):
        _build(tmp_path / "public", ["index.html"])
        registry_file = tmp_path / ".cmsbridge" / "registry.json"
        uploader = MagicMock(spec=S3Uploader)
        uploader.upload.return_value = "index.html"

        Deployment(SiteConfig(root_dir=str(tmp_path)), _SETTINGS, uploader=uploader).deploy()

        assert not registry_file.exists()
        uploader.upload.assert_called_once_with(tmp_path / "public" / "index.html", Path("index.html"))
