"""Deployment — walk a Hugo build and publish it to S3."""

from cmsbridge.deploy.pipeline import Deployment, DeploymentResult
from cmsbridge.deploy.uploader import (
    CONTENT_TYPES,
    DEFAULT_CONTENT_TYPE,
    S3Uploader,
    content_type_for,
    object_key,
)
from cmsbridge.deploy.walker import ArtifactWalker

__all__ = [
    "CONTENT_TYPES",
    "DEFAULT_CONTENT_TYPE",
    "ArtifactWalker",
    "Deployment",
    "DeploymentResult",
    "S3Uploader",
    "content_type_for",
    "object_key",
]
