"""
Utility modules for the property site generator.

Provides slug building and form value parsing/formatting.
"""

from propertysite.utils.formatting import (
    parse_number,
    format_price,
    format_count,
    format_area,
)
from propertysite.utils.slug import build_slug, is_valid_slug, slugify

__all__ = [
    "parse_number",
    "format_price",
    "format_count",
    "format_area",
    "build_slug",
    "is_valid_slug",
    "slugify",
]
