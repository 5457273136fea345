"""
API Routes for the Property Site Generator

Provides REST API endpoints for:
- Configuration and health checks
- Photo uploads
- Site generation, publishing and preview
- Listing and deleting published sites
"""

import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from propertysite.config import get_config
from propertysite.core.constants import (
    MAX_UPLOAD_SIZE,
    PREVIEW_LOAN_OFFICER,
    PREVIEW_PHOTOS,
    PREVIEW_PROPERTY,
    PREVIEW_REALTOR,
    SITE_IMAGES_DIR,
    UPLOAD_FIELD,
    UPLOAD_URL_PREFIX,
)
from propertysite.core.models import ContactProfile, PhotoAsset, SiteFile, SiteSubmission
from propertysite.core.validation import validate_submission
from propertysite.exceptions import (
    NotFoundError,
    PropertySiteError,
    PublishError,
    UploadError,
    ValidationError,
)
from propertysite.github.publisher import SitePublisher
from propertysite.logging_config import get_logger
from propertysite.site.renderer import render_submission
from propertysite.uploads.store import UploadStore
from propertysite.utils.slug import build_slug, is_valid_slug

logger = get_logger(__name__)

# Create blueprint
api = Blueprint("api", __name__, url_prefix="/api")

EXTENSION_KEY = "propertysite"


def get_publisher() -> Optional[SitePublisher]:
    """Hosting publisher created at startup; None when GitHub is not configured."""
    return current_app.extensions[EXTENSION_KEY]["publisher"]


def get_upload_store() -> UploadStore:
    return current_app.extensions[EXTENSION_KEY]["uploads"]


def _error(message: str, status: int, **extra):
    payload = {"success": False, "error": message}
    payload.update(extra)
    return jsonify(payload), status


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be JSON")
    return data


# Error handlers
@api.errorhandler(ValidationError)
def handle_validation_error(e: ValidationError):
    extra = {"missingFields": e.missing_fields} if e.missing_fields else {}
    return _error(e.message, 400, **extra)


@api.errorhandler(UploadError)
def handle_upload_error(e: UploadError):
    logger.warning("Upload rejected: %s", e.message)
    return _error(e.message, 400)


@api.errorhandler(RequestEntityTooLarge)
def handle_too_large(e: RequestEntityTooLarge):
    logger.warning("Upload rejected: request body too large")
    return _error(f"File too large (max {MAX_UPLOAD_SIZE // (1024 * 1024)}MB)", 413)


@api.errorhandler(NotFoundError)
def handle_not_found(e: NotFoundError):
    logger.error("Hosting resource not found: %s", e.message)
    return _error(e.message, 404)


@api.errorhandler(PublishError)
def handle_publish_error(e: PublishError):
    logger.error("Hosting API error at %s (status %s): %s", e.step, e.status_code, e.message)
    return _error(e.message, 502)


@api.errorhandler(PropertySiteError)
def handle_app_error(e: PropertySiteError):
    logger.error("Request failed: %s", e.message)
    return _error(e.message, 500)


@api.errorhandler(Exception)
def handle_unexpected_error(e: Exception):
    if isinstance(e, HTTPException):
        return _error(e.description or e.name, e.code or 500)
    logger.error("Unhandled error on %s: %s", request.path, e, exc_info=True)
    return _error(str(e) or "Internal server error", 500)


# Health & Config Endpoints
@api.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint."""
    return jsonify({
        "status": "ok",
        "githubConfigured": get_publisher() is not None,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })


@api.route("/config", methods=["GET"])
def get_github_config():
    """Report whether publishing is configured and where sites go."""
    github = get_config().github
    configured = get_publisher() is not None
    return jsonify({
        "configured": configured,
        "githubConfigured": configured,
        "owner": github.owner,
        "repo": github.repo,
        "branch": github.branch,
        "pagesUrl": github.pages_base_url,
    })


@api.route("/pages", methods=["GET"])
def get_pages_status():
    """Report whether GitHub Pages is serving the hosted repository."""
    publisher = get_publisher()
    if publisher is None:
        return jsonify({"success": True, "configured": False, "enabled": False})

    status = publisher.check_pages_status()
    return jsonify({"success": True, "configured": True, **status})


# Upload Endpoint
@api.route("/upload", methods=["POST"])
def upload_photos():
    """Stage uploaded photos for a later publish."""
    files = request.files.getlist(UPLOAD_FIELD)
    saved = get_upload_store().save_all(files)
    return jsonify({
        "success": True,
        "files": [item.to_dict() for item in saved],
    })


# Generation Endpoints
def _extension(path: str) -> str:
    return os.path.splitext(path)[1].lower()


def _stage_contact_photo(
    contact: ContactProfile,
    name: str,
    store: UploadStore,
    images: List[SiteFile],
) -> ContactProfile:
    """Move an uploaded contact photo into the site's images folder."""
    if not contact.photo or not contact.photo.startswith(UPLOAD_URL_PREFIX):
        return contact
    try:
        content = store.read(contact.photo)
    except (UploadError, OSError) as e:
        logger.error("Error reading contact photo %s: %s", contact.photo, e)
        return contact.with_photo(None)

    filename = f"{name}{_extension(contact.photo)}"
    images.append(SiteFile(filename, content))
    return contact.with_photo(f"./{SITE_IMAGES_DIR}/{filename}")


def _stage_images(
    submission: SiteSubmission,
    store: UploadStore,
) -> Tuple[SiteSubmission, List[SiteFile], List[str]]:
    """Read uploaded photos so they can be committed alongside the page.

    Returns:
        The submission with photo references rewritten to ``./images/...``,
        the image files to commit, and the upload paths to discard afterwards.
    """
    images: List[SiteFile] = []
    photos: List[PhotoAsset] = []
    for photo in submission.photos:
        if not photo.is_upload:
            photos.append(photo)
            continue
        try:
            content = store.read(photo.path)
        except (UploadError, OSError) as e:
            logger.error("Error reading photo %s: %s", photo.path, e)
            continue
        filename = f"photo-{len(photos) + 1}{_extension(photo.path)}"
        images.append(SiteFile(filename, content))
        photos.append(PhotoAsset(url=f"./{SITE_IMAGES_DIR}/{filename}", label=photo.label))

    realtor = _stage_contact_photo(submission.realtor, "realtor", store, images)
    loan_officer = _stage_contact_photo(submission.loan_officer, "loan-officer", store, images)

    uploads = [p.path for p in submission.photos if p.is_upload]
    uploads.extend(
        c.photo for c in (submission.realtor, submission.loan_officer)
        if c.photo and c.photo.startswith(UPLOAD_URL_PREFIX)
    )

    staged = SiteSubmission(
        property=submission.property,
        realtor=realtor,
        loan_officer=loan_officer,
        photos=tuple(photos),
        testimonials=submission.testimonials,
        show_neighborhood=submission.show_neighborhood,
    )
    return staged, images, uploads


@api.route("/generate", methods=["POST"])
def generate_site():
    """Generate a property site and publish it when GitHub is configured."""
    data = _json_body()
    validate_submission(data)

    submission = SiteSubmission.from_dict(data)
    slug = build_slug(submission.property.address, submission.property.city)
    publisher = get_publisher()

    if publisher is None:
        html = render_submission(submission)
        logger.info("Generated HTML for %s (publishing not configured)", slug)
        return jsonify({
            "success": True,
            "published": False,
            "html": html,
            "slug": slug,
            "propertySlug": slug,
            "message": "HTML generated successfully. Configure GitHub to auto-publish.",
        })

    store = get_upload_store()
    staged, images, uploads = _stage_images(submission, store)
    html = render_submission(staged, site_url=publisher.site_url(slug))

    site = publisher.publish_property_site(slug, html, images)
    store.discard(uploads)

    logger.info("Published %s to %s", slug, site.url)
    return jsonify({
        "success": True,
        "published": True,
        "url": site.url,
        "slug": slug,
        "propertySlug": slug,
        "message": (
            "Property site published successfully! "
            "It may take 1-2 minutes to appear on GitHub Pages."
        ),
    })


def _with_defaults(defaults: Dict[str, Any], values: Any) -> Dict[str, Any]:
    """Overlay non-blank submitted values on placeholder defaults."""
    merged = dict(defaults)
    if isinstance(values, dict):
        merged.update({
            k: v for k, v in values.items()
            if v is not None and not (isinstance(v, str) and not v.strip())
        })
    return merged


@api.route("/preview", methods=["POST"])
def preview_site():
    """Render a site without publishing; placeholders fill missing fields."""
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be JSON")

    preview = {
        "property": _with_defaults(PREVIEW_PROPERTY, data.get("property")),
        "realtor": _with_defaults(PREVIEW_REALTOR, data.get("realtor")),
        "loanOfficer": _with_defaults(PREVIEW_LOAN_OFFICER, data.get("loanOfficer")),
        "photos": data.get("photos") or PREVIEW_PHOTOS,
        "testimonials": data.get("testimonials") or [],
        "showNeighborhood": data.get("showNeighborhood", False),
    }
    html = render_submission(SiteSubmission.from_dict(preview))
    return jsonify({"success": True, "html": html})


# Published Site Endpoints
@api.route("/properties", methods=["GET"])
def list_properties():
    """List published property sites."""
    publisher = get_publisher()
    if publisher is None:
        return jsonify({"success": True, "properties": []})

    sites = publisher.list_property_sites()
    return jsonify({
        "success": True,
        "properties": [{"slug": s.slug, "url": s.url} for s in sites],
    })


@api.route("/properties/<slug>", methods=["DELETE"])
def delete_property(slug: str):
    """Delete a published property site."""
    if not is_valid_slug(slug):
        raise ValidationError("Invalid property slug")

    publisher = get_publisher()
    if publisher is None:
        return _error("GitHub not configured", 400)

    deleted = publisher.delete_property_site(slug)
    return jsonify({
        "success": True,
        "message": "Property site deleted",
        "deletedFiles": deleted,
    })


def register_routes(app):
    """Register API routes with Flask app."""
    app.register_blueprint(api)
    logger.info("API routes registered")
