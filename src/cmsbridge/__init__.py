"""cmsbridge — headless-CMS entries to Hugo content, Hugo builds to S3.

Keeps a registry of which file each CMS entry was rendered to, so that
updates rename and rewrite the right file, and publishes the generated
site to an S3 bucket.
"""

__version__ = "0.1.0"
