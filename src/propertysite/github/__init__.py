"""
GitHub hosting integration.

Provides the REST client and the publisher that commits property sites to the
GitHub Pages repository.
"""

from propertysite.github.client import GitHubClient
from propertysite.github.publisher import SitePublisher

__all__ = [
    "GitHubClient",
    "SitePublisher",
]
