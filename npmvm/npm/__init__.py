"""
npm version engine.

This package resolves npm version specifiers, installs and removes npm
releases, and records the active version at global, local and env scope.
"""

from .catalog import GitHubReleaseCatalog
from .installed import InstalledVersions
from .installer import InstallResult, NpmInstaller, download_url
from .manager import NpmVersionManager
from .repair import LinkEntry, LinkFilesystem, NativeLinkFilesystem, repair_links
from .resolver import VersionResolver, resolve_in_pool
from .runtime import HostRuntime, NodeRuntime, StaticRuntime
from .store import ActiveVersion, LocalVersion, VersionStore

__all__ = [
    "GitHubReleaseCatalog",
    "InstalledVersions",
    "InstallResult",
    "NpmInstaller",
    "download_url",
    "NpmVersionManager",
    "LinkEntry",
    "LinkFilesystem",
    "NativeLinkFilesystem",
    "repair_links",
    "VersionResolver",
    "resolve_in_pool",
    "HostRuntime",
    "NodeRuntime",
    "StaticRuntime",
    "ActiveVersion",
    "LocalVersion",
    "VersionStore",
]
