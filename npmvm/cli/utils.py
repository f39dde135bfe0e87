"""
Shared utilities for CLI commands.

Provides common functionality used across multiple CLI commands to
eliminate duplication and ensure consistent behavior.
"""

import logging
from typing import Iterable, Optional

from npmvm.npm.manager import NpmVersionManager

logger = logging.getLogger(__name__)


def create_manager(args) -> NpmVersionManager:
    """
    Create a version manager for the parsed arguments.

    Args:
        args: Parsed arguments (uses ``home`` if present)

    Returns:
        NpmVersionManager for the selected configuration directory
    """
    home = getattr(args, "home", None)
    logger.debug(f"Using configuration directory: {home or 'default'}")
    return NpmVersionManager(config_dir=home)


def print_versions(versions: Iterable[str], current: Optional[str] = None) -> None:
    """
    Print one version per line, marking the current one.

    Args:
        versions: Versions to print
        current: Version to mark with ``>``
    """
    for version in versions:
        marker = ">" if current is not None and version == current else " "
        print(f"{marker} {version}")
