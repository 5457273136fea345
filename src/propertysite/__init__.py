"""
Property Site Generator

Turns a web form describing a property, its realtor and its loan officer into
a static HTML page published to a GitHub Pages repository.

Main components:
- site: HTML rendering
- uploads: transient photo storage
- github: REST client and site publisher
- api: Flask REST API server
- cli: Command-line interfaces

Usage:
    from propertysite import config
    from propertysite.site import render_property_site
    from propertysite.github import SitePublisher
"""

__version__ = "1.0.0"

from propertysite.config import get_config
from propertysite.logging_config import setup_logging

__all__ = [
    "__version__",
    "get_config",
    "setup_logging",
]
