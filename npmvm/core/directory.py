"""
Directory layout for npmvm.

This module resolves the configuration directory and the fixed paths
inside it. Every other module asks this one where things live so the
layout stays consistent across commands.

Directory Structure:
    Config directory ($NPMVM_HOME, ~/.npmvm/ or %USERPROFILE%\\.npmvm\\):
        - npmv/                : One subdirectory per installed npm version
        - .npm-version-global  : Global active version specifier
        - config.yaml          : Optional settings

    Any project directory:
        - .npm-version         : Local active version specifier
"""

import os
from pathlib import Path
from typing import Optional

from npmvm.core.filesystem import FilesystemError

HOME_ENV_VAR = "NPMVM_HOME"
REPOSITORY_DIRNAME = "npmv"
GLOBAL_VERSION_FILENAME = ".npm-version-global"
LOCAL_VERSION_FILENAME = ".npm-version"
CONFIG_FILENAME = "config.yaml"


class DirectoryError(FilesystemError):
    """Raised when the configuration directory cannot be determined."""

    pass


def get_config_dir() -> Path:
    """
    Get the npmvm configuration directory path.

    Returns:
        Path: The configuration directory path.
            - $NPMVM_HOME when set
            - Windows: %USERPROFILE%\\.npmvm
            - Linux/macOS: ~/.npmvm/

    Example:
        >>> config_dir = get_config_dir()
        >>> print(config_dir)
        /home/user/.npmvm  # on Linux
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override)

    if os.name == "nt":  # Windows
        user_profile = os.environ.get("USERPROFILE")
        if not user_profile:
            raise DirectoryError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine npmvm configuration directory."
            )
        return Path(user_profile) / ".npmvm"
    else:  # Linux/macOS
        return Path.home() / ".npmvm"


def get_repository_dir(config_dir: Optional[Path] = None) -> Path:
    """Get the install repository holding one directory per npm version."""
    return (config_dir or get_config_dir()) / REPOSITORY_DIRNAME


def get_global_version_file(config_dir: Optional[Path] = None) -> Path:
    """Get the path of the global active-version file."""
    return (config_dir or get_config_dir()) / GLOBAL_VERSION_FILENAME


def get_config_file(config_dir: Optional[Path] = None) -> Path:
    """Get the path of the optional YAML settings file."""
    return (config_dir or get_config_dir()) / CONFIG_FILENAME


def get_local_version_file(directory: Path) -> Path:
    """Get the path of the local active-version file inside ``directory``."""
    return Path(directory) / LOCAL_VERSION_FILENAME
