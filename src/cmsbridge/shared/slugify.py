"""Slugify entry titles into output file stems."""

from unicodedata import normalize

from pymdownx.slugs import slugify as _md_slugify

_slugify_lower = _md_slugify(case="lower")

FALLBACK_SLUG = "untitled"


def slugify(text: str, max_len: int = 100) -> str:
    """Convert a title to a lowercase, URL-safe slug.

    Pure and deterministic: the same title always gives the same slug,
    which is what lets an update find its way back to the same file.

    Args:
        text: Entry title.
        max_len: Maximum slug length.

    Returns:
        ASCII slug, never empty.

    Examples:
        >>> slugify("Hello World!")
        'hello-world'
        >>> slugify("Café à Paris")
        'cafe-a-paris'
        >>> slugify("../../etc/passwd")
        'etcpasswd'
    """
    normalized = normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = _slugify_lower(normalized, sep="-")

    if len(slug) > max_len:
        slug = slug[:max_len].rstrip("-")

    return slug or FALLBACK_SLUG
