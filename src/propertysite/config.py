"""
Centralized Configuration Module

Provides configuration classes and environment variable loading for all components.

Usage:
    from propertysite.config import get_config

    config = get_config()
    token = config.github.token
    api_port = config.api.port
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


def _get_project_root() -> Path:
    """Get the project root directory."""
    # Navigate up from src/propertysite/config.py to project root
    current = Path(__file__).resolve()
    # Go up: config.py -> propertysite -> src -> project_root
    return current.parent.parent.parent


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    return float(value)


@dataclass
class GitHubConfig:
    """GitHub hosting configuration.

    Publishing is enabled only when a token is present.
    """

    token: Optional[str] = field(default_factory=lambda: os.getenv("GITHUB_TOKEN") or None)
    owner: Optional[str] = field(default_factory=lambda: os.getenv("GITHUB_OWNER") or None)
    repo: str = field(default_factory=lambda: os.getenv("GITHUB_REPO") or "LuminateSPS")
    branch: str = field(default_factory=lambda: os.getenv("GITHUB_BRANCH") or "main")
    pages_base_url: Optional[str] = field(default_factory=lambda: os.getenv(
        "GITHUB_PAGES_BASE_URL"
    ) or None)
    api_url: str = field(default_factory=lambda: os.getenv(
        "GITHUB_API_URL", "https://api.github.com"
    ))
    timeout: Optional[float] = field(default_factory=lambda: _optional_float(
        os.getenv("GITHUB_TIMEOUT")
    ))

    def __post_init__(self):
        self.api_url = self.api_url.rstrip("/")
        if self.pages_base_url:
            self.pages_base_url = self.pages_base_url.rstrip("/")
        elif self.owner:
            self.pages_base_url = f"https://{self.owner}.github.io/{self.repo}"

    @property
    def configured(self) -> bool:
        """True when a hosting token is available."""
        return bool(self.token)


@dataclass
class APIConfig:
    """API server configuration."""

    host: str = field(default_factory=lambda: os.getenv(
        "PROPERTYSITE_API_HOST", "127.0.0.1"
    ))
    port: int = field(default_factory=lambda: int(
        os.getenv("PORT") or os.getenv("PROPERTYSITE_API_PORT", "3000")
    ))
    debug: bool = field(default_factory=lambda: os.getenv(
        "PROPERTYSITE_DEBUG", "false"
    ).lower() in ("true", "1", "yes"))
    static_dir: str = field(default_factory=lambda: os.getenv(
        "PROPERTYSITE_STATIC_DIR",
        str(_get_project_root() / "public")
    ))


@dataclass
class UploadConfig:
    """Transient upload storage configuration."""

    directory: str = field(default_factory=lambda: os.getenv(
        "PROPERTYSITE_UPLOAD_DIR",
        str(_get_project_root() / "uploads")
    ))

    def __post_init__(self):
        # Resolve relative paths
        if not os.path.isabs(self.directory):
            self.directory = str(_get_project_root() / self.directory)


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv(
        "PROPERTYSITE_LOG_LEVEL", "INFO"
    ).upper())
    log_file: Optional[str] = field(default_factory=lambda: os.getenv(
        "PROPERTYSITE_LOG_FILE"
    ))

    def __post_init__(self):
        # Validate log level
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.level not in valid_levels:
            self.level = "INFO"


@dataclass
class Config:
    """Main configuration container."""

    github: GitHubConfig = field(default_factory=GitHubConfig)
    api: APIConfig = field(default_factory=APIConfig)
    uploads: UploadConfig = field(default_factory=UploadConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Singleton instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance.

    Returns:
        Config: The application configuration.
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Reset the configuration (useful for testing)."""
    global _config
    _config = None
