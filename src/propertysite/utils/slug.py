"""
Slug Builder

Derives the URL-safe identifier that names a published site.
"""

import re
from unicodedata import normalize

DEFAULT_SLUG = "property"


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated, ASCII-only slug.

    Examples:
        >>> slugify("123 Main St.")
        '123-main-st'
        >>> slugify("Café du Nord")
        'cafe-du-nord'
    """
    if not text:
        return ""

    # NFKD splits accented letters so the ascii encode drops only the marks
    normalized = normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    normalized = normalized.lower()

    # Apostrophes vanish rather than split words ("O'Brien" -> "obrien")
    normalized = re.sub(r"['’]", "", normalized)
    slug = re.sub(r"[^a-z0-9]+", "-", normalized)
    return slug.strip("-")


def build_slug(address: str, city: str) -> str:
    """Build the site slug from street address and city.

    No uniqueness check is made: the same address and city always map to the
    same slug, so a second publish replaces the first site.

    Example:
        >>> build_slug("123 Main St", "Springfield")
        '123-main-st-springfield'
    """
    slug = slugify(f"{address or ''}-{city or ''}")
    return slug or DEFAULT_SLUG


_SLUG_PATTERN = re.compile(r"[a-z0-9]+(?:-[a-z0-9]+)*")


def is_valid_slug(slug: str) -> bool:
    """Whether ``slug`` is a bare slug that names one site directory.

    Rejects anything ``slugify`` would change, including ``.``, ``..`` and
    path separators, so a slug can never point outside ``properties/``.
    """
    return bool(slug) and _SLUG_PATTERN.fullmatch(slug) is not None
