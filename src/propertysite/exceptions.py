"""
Custom Exceptions for the Property Site Generator

Provides a hierarchy of exceptions for standardized error handling across all modules.

Exception Hierarchy:
    PropertySiteError (base)
    ├── ConfigurationError
    ├── ValidationError
    ├── UploadError
    ├── TemplateError
    └── PublishError
        └── NotFoundError
"""

from typing import List, Optional


class PropertySiteError(Exception):
    """Base exception for all property site errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


# Configuration Errors
class ConfigurationError(PropertySiteError):
    """Raised when there's a configuration problem."""

    pass


# Validation Errors
class ValidationError(PropertySiteError):
    """Raised when a submission is missing required fields."""

    def __init__(self, message: str, missing_fields: Optional[List[str]] = None):
        self.missing_fields = list(missing_fields or [])
        super().__init__(message)


# Upload Errors
class UploadError(PropertySiteError):
    """Raised when an upload is rejected (type, size, or count)."""

    def __init__(self, message: str, filename: str = None):
        self.filename = filename
        super().__init__(message)


# Rendering Errors
class TemplateError(PropertySiteError):
    """Raised when the site template cannot be rendered."""

    pass


# Hosting Errors
class PublishError(PropertySiteError):
    """Raised when a hosting API call fails.

    Attributes:
        step: Name of the publish step that failed (e.g. "create_tree").
        status_code: HTTP status returned by the hosting API, if any.
    """

    def __init__(self, message: str, step: str = None, status_code: int = None):
        self.step = step
        self.status_code = status_code
        super().__init__(message)


class NotFoundError(PublishError):
    """Raised when the hosting API reports a missing path or ref."""

    pass
