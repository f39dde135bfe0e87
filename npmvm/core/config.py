"""YAML settings for npmvm.

This module loads the optional ``config.yaml`` from the configuration
directory and maps it onto a Settings dataclass with defaults for
every key.
"""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from npmvm.core.exceptions import ConfigError
from npmvm.core.versions import clean_version

logger = logging.getLogger(__name__)

DEFAULT_DOWNLOAD_URL = "https://codeload.github.com/npm/cli/tar.gz/vVERSION"
DEFAULT_RELEASE_FEEDS = ["npm/npm", "npm/cli"]
ENV_VERSION_VAR = "NPMVM_NPM_VERSION"


@dataclass
class Settings:
    """npmvm settings."""

    github_token: Optional[str] = None
    http_timeout: int = 30
    per_page: int = 100  # full catalog listing
    latest_page_size: int = 50  # "latest" lookup
    download_url: str = DEFAULT_DOWNLOAD_URL
    release_feeds: List[str] = field(default_factory=lambda: list(DEFAULT_RELEASE_FEEDS))
    symlink_fix_threshold: str = "8.0.0"

    @property
    def feeds(self) -> List[tuple]:
        """Release feeds as ``(owner, repo)`` pairs."""
        return [tuple(feed.split("/", 1)) for feed in self.release_feeds]

    @property
    def primary_feed(self) -> tuple:
        """The feed npm releases are published to today (the last one)."""
        return self.feeds[-1]


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        FileNotFoundError: If required=True and file doesn't exist
        ConfigError: If YAML parsing fails or the document is not a mapping
    """
    if not config_file.exists():
        if required:
            raise FileNotFoundError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}")

    config = config or {}
    if not isinstance(config, dict):
        raise ConfigError(f"Configuration in {config_file} must be a mapping")
    return config


def _parse_and_validate(data: Dict[str, Any]) -> Settings:
    """Validate raw settings and build a Settings object."""
    known = {f.name for f in fields(Settings)}
    for key in data:
        if key not in known:
            logger.warning(f"Ignoring unknown setting: {key}")

    settings = Settings()

    if data.get("github_token") is not None:
        if not isinstance(data["github_token"], str):
            raise ConfigError("'github_token' must be a string")
        settings.github_token = data["github_token"]

    for key, upper in (("http_timeout", None), ("per_page", 100), ("latest_page_size", 100)):
        if key not in data:
            continue
        value = data[key]
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            raise ConfigError(f"'{key}' must be a positive integer")
        if upper is not None and value > upper:
            raise ConfigError(f"'{key}' must be at most {upper}")
        setattr(settings, key, value)

    if "download_url" in data:
        url = data["download_url"]
        if not isinstance(url, str) or "VERSION" not in url:
            raise ConfigError("'download_url' must be a string containing VERSION")
        settings.download_url = url

    if "release_feeds" in data:
        feeds = data["release_feeds"]
        if (
            not isinstance(feeds, list)
            or not feeds
            or not all(isinstance(f, str) and f.count("/") == 1 for f in feeds)
        ):
            raise ConfigError("'release_feeds' must be a non-empty list of 'owner/repo'")
        settings.release_feeds = feeds

    if "symlink_fix_threshold" in data:
        threshold = clean_version(str(data["symlink_fix_threshold"]))
        if threshold is None:
            raise ConfigError("'symlink_fix_threshold' must be a semantic version")
        settings.symlink_fix_threshold = threshold

    return settings


def load_settings(config_file: Optional[Path] = None) -> Settings:
    """
    Load settings from ``config.yaml``, falling back to defaults.

    ``$GITHUB_TOKEN`` fills in ``github_token`` when the file has none.

    Args:
        config_file: Settings file (default: config directory's config.yaml)

    Returns:
        Settings instance

    Raises:
        ConfigError: If the settings file is invalid
    """
    if config_file is None:
        from npmvm.core.directory import get_config_file

        config_file = get_config_file()

    settings = _parse_and_validate(load_yaml_config(config_file))

    if settings.github_token is None:
        settings.github_token = os.environ.get("GITHUB_TOKEN") or None

    return settings
