"""
Flask REST API for the property site generator.

Provides endpoints for:
- Photo uploads
- Site generation, preview and publishing
- Listing and deleting published sites
"""

from propertysite.api.server import create_app
from propertysite.api.routes import register_routes

__all__ = [
    "create_app",
    "register_routes",
]
