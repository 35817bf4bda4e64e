"""Site domain — CMS payloads in, rendered Hugo content files out."""

from cmsbridge.site.models import EntryData, Payload, PayloadMetadata, ResolvedModel
from cmsbridge.site.renderer import TemplateRenderer
from cmsbridge.site.resolver import ModelResolver
from cmsbridge.site.services import SiteService

__all__ = [
    "EntryData",
    "ModelResolver",
    "Payload",
    "PayloadMetadata",
    "ResolvedModel",
    "SiteService",
    "TemplateRenderer",
]
