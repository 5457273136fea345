"""
Core modules for the property site generator.

Contains data models, submission validation, and shared constants.
"""

from propertysite.core.constants import (
    MAX_UPLOAD_FILES,
    MAX_UPLOAD_SIZE,
    PROPERTIES_DIR,
    REQUIRED_FIELDS,
)
from propertysite.core.models import (
    ContactProfile,
    PhotoAsset,
    PropertyRecord,
    PublishedSite,
    SiteFile,
    SiteSubmission,
    Testimonial,
)
from propertysite.core.validation import find_missing_fields, validate_submission

__all__ = [
    "MAX_UPLOAD_FILES",
    "MAX_UPLOAD_SIZE",
    "PROPERTIES_DIR",
    "REQUIRED_FIELDS",
    "ContactProfile",
    "PhotoAsset",
    "PropertyRecord",
    "PublishedSite",
    "SiteFile",
    "SiteSubmission",
    "Testimonial",
    "find_missing_fields",
    "validate_submission",
]
