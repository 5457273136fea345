"""
Static site rendering.

Turns a submission into the single-page HTML document that gets published.
"""

from propertysite.site.renderer import render_property_site, render_submission

__all__ = [
    "render_property_site",
    "render_submission",
]
