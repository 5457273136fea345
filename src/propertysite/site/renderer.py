"""
Template Renderer

Fills the property site template with a submission. Rendering has no side
effects, so the same call serves live publishes and throwaway previews.
"""

from typing import Iterable, Optional, Sequence
from urllib.parse import urlencode

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape
from jinja2 import TemplateError as JinjaTemplateError

from propertysite.core.constants import QR_CODE_URL
from propertysite.core.models import (
    ContactProfile,
    PhotoAsset,
    PropertyRecord,
    SiteSubmission,
    Testimonial,
)
from propertysite.exceptions import TemplateError
from propertysite.logging_config import get_logger
from propertysite.utils.formatting import format_area, format_count, format_price

logger = get_logger(__name__)

SITE_TEMPLATE = "property.html.j2"

_env: Optional[Environment] = None


def qr_code_url(target: str, size: int = 180) -> str:
    """URL of a QR-code image that encodes ``target``."""
    return f"{QR_CODE_URL}?{urlencode({'size': f'{size}x{size}', 'data': target})}"


def get_environment() -> Environment:
    """Lazy-load the Jinja2 environment for the packaged templates."""
    global _env
    if _env is None:
        _env = Environment(
            loader=PackageLoader("propertysite.site", "templates"),
            autoescape=select_autoescape(["html", "j2"]),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        _env.filters["price"] = format_price
        _env.filters["count"] = format_count
        _env.filters["area"] = format_area
        _env.filters["qr_code"] = qr_code_url
    return _env


def render_property_site(
    property: PropertyRecord,
    realtor: ContactProfile,
    loan_officer: ContactProfile,
    photos: Sequence[PhotoAsset] = (),
    testimonials: Optional[Iterable[Testimonial]] = None,
    show_neighborhood: bool = False,
    site_url: Optional[str] = None,
) -> str:
    """Render a complete HTML document for one property.

    Optional sections (testimonials, neighborhood, gallery, share block) are
    left out of the document when they have nothing to show.

    Args:
        property: The property record.
        realtor: Listing realtor.
        loan_officer: Partner loan officer.
        photos: Gallery photos in display order.
        testimonials: Client quotes, if any.
        show_neighborhood: Include the neighborhood section when it has content.
        site_url: Public URL of the site; enables the share/QR block.

    Returns:
        The HTML document.

    Raises:
        TemplateError: If the template fails to render.
    """
    try:
        template = get_environment().get_template(SITE_TEMPLATE)
        return template.render(
            property=property,
            realtor=realtor,
            loan_officer=loan_officer,
            contacts=[realtor, loan_officer],
            photos=list(photos),
            testimonials=list(testimonials or []),
            show_neighborhood=show_neighborhood and property.has_neighborhood_info,
            site_url=site_url,
        )
    except JinjaTemplateError as e:
        logger.error("Failed to render site for %s: %s", property.address, e)
        raise TemplateError(f"Failed to render property site: {e}") from e


def render_submission(submission: SiteSubmission, site_url: Optional[str] = None) -> str:
    """Convenience wrapper over ``render_property_site`` for a parsed submission."""
    return render_property_site(
        submission.property,
        submission.realtor,
        submission.loan_officer,
        photos=submission.photos,
        testimonials=submission.testimonials,
        show_neighborhood=submission.show_neighborhood,
        site_url=site_url,
    )
