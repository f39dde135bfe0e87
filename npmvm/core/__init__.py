"""
Core functionality for npmvm.

This package contains the foundational modules that the version engine
depends on.
"""

from .directory import (
    get_config_dir,
    get_repository_dir,
    get_global_version_file,
    get_local_version_file,
    get_config_file,
    DirectoryError,
)

from .config import (
    Settings,
    load_settings,
)

from .exceptions import (
    NpmvmError,
    ConfigError,
    VersionError,
    InvalidVersionError,
    InvalidSpecifierError,
    NoMatchingVersionError,
    UpstreamUnavailableError,
    RuntimeQueryError,
    InstallError,
    DownloadError,
    ExtractionError,
    VersionStoreError,
)

from .filesystem import (
    FilesystemError,
    LinkCreationError,
    ArchiveExtractionError,
)

__all__ = [
    "get_config_dir",
    "get_repository_dir",
    "get_global_version_file",
    "get_local_version_file",
    "get_config_file",
    "DirectoryError",
    "Settings",
    "load_settings",
    "NpmvmError",
    "ConfigError",
    "VersionError",
    "InvalidVersionError",
    "InvalidSpecifierError",
    "NoMatchingVersionError",
    "UpstreamUnavailableError",
    "RuntimeQueryError",
    "InstallError",
    "DownloadError",
    "ExtractionError",
    "VersionStoreError",
    "FilesystemError",
    "LinkCreationError",
    "ArchiveExtractionError",
]
