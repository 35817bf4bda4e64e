"""Publish a whole Hugo build to S3.

Files are discovered concurrently by an ArtifactWalker and uploaded one
at a time.  The first failed upload stops the deployment; objects that
were already uploaded stay in the bucket.

Not handled here: deleting bucket objects that no longer exist locally,
and CDN invalidation after publishing.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field

from cmsbridge.config import DeploymentSettings, SiteConfig
from cmsbridge.deploy.uploader import S3Uploader
from cmsbridge.deploy.walker import ArtifactWalker
from cmsbridge.shared.errors import DeploymentError

logger = logging.getLogger(__name__)


class DeploymentResult(BaseModel):
    """Outcome of a successful deployment."""

    bucket: str
    public_path: Path
    keys: list[str] = Field(default_factory=list)

    @property
    def uploaded(self) -> int:
        return len(self.keys)


class Deployment:
    """Uploads everything under a site's build output directory."""

    def __init__(
        self,
        site: SiteConfig,
        settings: DeploymentSettings,
        *,
        uploader: S3Uploader | None = None,
    ) -> None:
        self.site = site
        self.settings = settings
        self.public_path = site.public_path
        self._uploader = uploader

    @property
    def uploader(self) -> S3Uploader:
        if self._uploader is None:
            self._uploader = S3Uploader(self.settings)
        return self._uploader

    def deploy(self) -> DeploymentResult:
        """Upload every file of the build.

        Raises:
            WalkError: The build directory could not be walked.
            UploadError: An upload failed; later files were not attempted.
            DeploymentError: A walked path was outside the build directory.
        """
        uploader = self.uploader
        result = DeploymentResult(bucket=self.settings.bucket_name, public_path=self.public_path)

        logger.info("Deploying %s to s3://%s", self.public_path, result.bucket)

        with ArtifactWalker(self.public_path) as walker:
            for path in walker:
                try:
                    relative = path.relative_to(self.public_path)
                except ValueError as exc:
                    raise DeploymentError(
                        f"{path} is not inside {self.public_path}", identifier=str(path)
                    ) from exc
                result.keys.append(uploader.upload(path, relative))

        logger.info("Uploaded %d file(s) to s3://%s", result.uploaded, result.bucket)
        return result
