#!/usr/bin/env python
"""
CLI for running the Property Site Generator server.

Usage:
    propertysite-server
    propertysite-server --port 8080 --branch gh-pages
    propertysite-server --upload-dir /var/tmp/uploads --static-dir ./public
    propertysite-server --check
"""

import argparse
import os
import sys
from typing import List, Optional

from propertysite.config import Config, get_config
from propertysite.exceptions import ConfigurationError, PublishError
from propertysite.github.publisher import SitePublisher
from propertysite.logging_config import setup_logging, get_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="propertysite-server",
        description="Serve the property site form and publish sites to GitHub Pages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
    GITHUB_TOKEN, GITHUB_OWNER, GITHUB_REPO, GITHUB_BRANCH enable publishing.
    Command-line options override the matching variables for this run.
        """,
    )
    server = parser.add_argument_group("server")
    server.add_argument("--host", default=None, help="Host to bind to (default: 127.0.0.1)")
    server.add_argument("--port", type=int, default=None, help="Port to bind to (default: PORT or 3000)")
    server.add_argument("--debug", action="store_true", help="Run Flask in debug mode")
    server.add_argument(
        "--static-dir",
        default=None,
        help="Directory holding the form page (default: PROPERTYSITE_STATIC_DIR or ./public)",
    )
    server.add_argument(
        "--upload-dir",
        default=None,
        help="Where staged photo uploads are kept (default: PROPERTYSITE_UPLOAD_DIR or ./uploads)",
    )

    publishing = parser.add_argument_group("publishing")
    publishing.add_argument("--branch", default=None, help="Branch that GitHub Pages serves (default: main)")
    publishing.add_argument(
        "--check",
        action="store_true",
        help="Verify GitHub access and Pages status, then exit",
    )

    logs = parser.add_argument_group("logging")
    logs.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level (default: PROPERTYSITE_LOG_LEVEL or INFO)",
    )
    logs.add_argument("--log-file", default=None, help="Also write logs to this file")
    return parser


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Copy command-line options onto the process configuration."""
    if args.host:
        config.api.host = args.host
    if args.port:
        config.api.port = args.port
    if args.debug:
        config.api.debug = True
    if args.static_dir:
        config.api.static_dir = os.path.abspath(args.static_dir)
    if args.upload_dir:
        config.uploads.directory = os.path.abspath(args.upload_dir)
    if args.branch:
        config.github.branch = args.branch
    if args.log_level:
        config.logging.level = args.log_level
    if args.log_file:
        config.logging.log_file = args.log_file
    return config


def check_github(config: Config, publisher: Optional[SitePublisher] = None) -> int:
    """Confirm the token can read the branch and report Pages status.

    Returns:
        Process exit code: 0 when the branch is reachable, 1 otherwise.
    """
    logger = get_logger(__name__)
    github = config.github
    try:
        publisher = publisher or SitePublisher(github)
        publisher.client.get_ref(github.branch)
        pages = publisher.check_pages_status()
    except ConfigurationError as e:
        logger.error("GitHub not configured: %s", e.message)
        return 1
    except PublishError as e:
        logger.error("GitHub check failed at %s: %s", e.step, e.message)
        return 1

    logger.info("Branch %s/%s@%s is reachable", github.owner, github.repo, github.branch)
    if pages["enabled"]:
        logger.info("GitHub Pages %s at %s", pages.get("status") or "enabled", pages.get("url"))
    else:
        logger.warning("GitHub Pages is not enabled; published sites will not be served")
    return 0


def main(argv: Optional[List[str]] = None):
    """Main entry point for the server CLI."""
    args = build_parser().parse_args(argv)

    config = apply_overrides(get_config(), args)
    setup_logging(force=True)
    logger = get_logger(__name__)

    if args.check:
        sys.exit(check_github(config))

    logger.info("Starting Property Site Generator")
    logger.info("Uploads: %s | Branch: %s", config.uploads.directory, config.github.branch)

    try:
        from propertysite.api.server import run_server
        run_server(host=config.api.host, port=config.api.port, debug=config.api.debug)
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        sys.exit(0)
    except Exception as e:
        logger.error("Server error: %s", e, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
