"""
Flask Application Factory

Creates and configures the Flask application.
"""

from pathlib import Path
from typing import Optional

from flask import Flask, send_from_directory
from flask_cors import CORS

from propertysite.config import get_config
from propertysite.core.constants import (
    CONTENT_SECURITY_POLICY,
    MAX_UPLOAD_FILES,
    MAX_UPLOAD_SIZE,
)
from propertysite.api.routes import EXTENSION_KEY, register_routes
from propertysite.exceptions import ConfigurationError
from propertysite.github.publisher import SitePublisher
from propertysite.logging_config import setup_logging, get_logger
from propertysite.uploads.store import UploadStore

logger = get_logger(__name__)

# Headroom for multipart boundaries and form fields
_MULTIPART_OVERHEAD = 1024 * 1024


def _build_publisher() -> Optional[SitePublisher]:
    """Create the hosting publisher, or None when GitHub is not configured."""
    github = get_config().github
    if not github.configured:
        logger.warning("GITHUB_TOKEN not set. GitHub publishing will be disabled.")
        return None
    try:
        return SitePublisher(github)
    except ConfigurationError as e:
        logger.warning("GitHub publishing disabled: %s", e)
        return None


def create_app(
    test_config=None,
    publisher: Optional[SitePublisher] = None,
    upload_store: Optional[UploadStore] = None,
) -> Flask:
    """Create and configure the Flask application.

    Args:
        test_config: Optional test configuration dict.
        publisher: Hosting publisher to use instead of one built from config.
        upload_store: Upload store to use instead of one built from config.

    Returns:
        Configured Flask application.
    """
    config = get_config()

    setup_logging()

    # Serve the form page when a static folder is present
    static_dir = Path(config.api.static_dir)
    if static_dir.exists():
        app = Flask(__name__, static_folder=str(static_dir), static_url_path="")
    else:
        app = Flask(__name__, static_folder=None)

    app.config["DEBUG"] = config.api.debug
    app.config["MAX_CONTENT_LENGTH"] = MAX_UPLOAD_FILES * MAX_UPLOAD_SIZE + _MULTIPART_OVERHEAD
    app.json.sort_keys = False

    if test_config:
        app.config.update(test_config)

    CORS(app)

    store = upload_store or UploadStore(config.uploads.directory)
    store.ensure_directory()

    app.extensions[EXTENSION_KEY] = {
        "publisher": publisher if publisher is not None else _build_publisher(),
        "uploads": store,
    }

    register_routes(app)

    @app.route("/uploads/<path:filename>")
    def serve_upload(filename):
        """Serve a staged upload back to the form."""
        return send_from_directory(str(store.directory), filename)

    if app.static_folder:
        @app.route("/")
        def serve_frontend():
            """Serve the form page."""
            return send_from_directory(app.static_folder, "index.html")

    @app.after_request
    def set_security_headers(response):
        response.headers["Content-Security-Policy"] = CONTENT_SECURITY_POLICY
        return response

    logger.info("Flask app created")
    return app


def run_server(host: str = None, port: int = None, debug: bool = None):
    """Run the Flask development server.

    Args:
        host: Host to bind to.
        port: Port to bind to.
        debug: Enable debug mode.
    """
    config = get_config()

    host = host or config.api.host
    port = port or config.api.port
    debug = debug if debug is not None else config.api.debug

    app = create_app()

    publisher = app.extensions[EXTENSION_KEY]["publisher"]
    logger.info("Starting server on %s:%d", host, port)
    logger.info(
        "GitHub: %s | Owner: %s | Repo: %s",
        "configured" if publisher else "not configured (set GITHUB_TOKEN)",
        config.github.owner or "not set",
        config.github.repo,
    )
    app.run(host=host, port=port, debug=debug, threaded=True)
