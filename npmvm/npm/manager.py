"""
npm version manager facade.

Wires the catalog, installed set, installer, store and resolver for one
configuration directory and exposes the operations the CLI needs.
"""

import logging
from pathlib import Path
from typing import List, Optional

import requests

from npmvm.core.config import Settings, load_settings
from npmvm.core.directory import get_config_dir, get_config_file, get_repository_dir
from npmvm.npm.catalog import GitHubReleaseCatalog
from npmvm.npm.installed import InstalledVersions
from npmvm.npm.installer import InstallResult, NpmInstaller
from npmvm.npm.repair import LinkFilesystem
from npmvm.npm.resolver import VersionResolver
from npmvm.npm.runtime import HostRuntime, NodeRuntime
from npmvm.npm.store import ActiveVersion, LocalVersion, VersionStore

logger = logging.getLogger(__name__)

SCOPES = ("global", "local")


class NpmVersionManager:
    """
    Manages npm versions for one configuration directory.

    Example:
        >>> manager = NpmVersionManager()
        >>> result = manager.use("^10", scope="local")
        >>> manager.current()
        '10.9.2'
    """

    def __init__(
        self,
        config_dir: Optional[Path] = None,
        settings: Optional[Settings] = None,
        runtime: Optional[HostRuntime] = None,
        session: Optional[requests.Session] = None,
        link_fs: Optional[LinkFilesystem] = None,
        env_version: Optional[str] = None,
    ):
        """
        Initialize the manager.

        Args:
            config_dir: Configuration directory (default: get_config_dir())
            settings: Settings (default: loaded from config_dir/config.yaml)
            runtime: Host runtime for ``match`` (default: node on PATH)
            session: Optional requests session shared by all HTTP calls
            link_fs: Optional filesystem for symlink repair
            env_version: Env-scope specifier override
        """
        self.config_dir = Path(config_dir) if config_dir else get_config_dir()
        self.settings = settings or load_settings(get_config_file(self.config_dir))
        self.repo_path = get_repository_dir(self.config_dir)
        self.repo_path.mkdir(parents=True, exist_ok=True)

        self.catalog = GitHubReleaseCatalog(self.settings, session=session)
        self.installed = InstalledVersions(self.repo_path)
        self.installer = NpmInstaller(
            self.installed, self.settings, session=session, link_fs=link_fs
        )
        self.runtime = runtime or NodeRuntime(
            timeout=self.settings.http_timeout, session=session
        )
        self.resolver = VersionResolver(self.catalog, self.installed, self.runtime)
        self.store = VersionStore(self.config_dir, env_version=env_version)

        logger.debug(f"Initialized npm version manager in {self.config_dir}")

    # Lifecycle

    def install(self, spec: str) -> InstallResult:
        """Resolve ``spec`` against published versions and install it."""
        return self.installer.install(self.resolver.resolve(spec))

    def remove(self, spec: str) -> str:
        """Remove an installed version (exact version only)."""
        return self.installer.remove(spec)

    def list_installed(self) -> List[str]:
        return self.installed.list()

    def list_available(self) -> List[str]:
        return self.catalog.list_all_versions()

    # Resolution

    def resolve(self, spec: Optional[str]) -> str:
        return self.resolver.resolve(spec)

    def resolve_locally(self, spec: Optional[str]) -> Optional[str]:
        return self.resolver.resolve_locally(spec)

    # Active version records

    def set_global(self, spec: str) -> Path:
        return self.store.set_global(spec)

    def get_global(self) -> str:
        return self.store.get_global()

    def set_local(self, spec: str, directory: Optional[Path] = None) -> Path:
        return self.store.set_local(spec, directory)

    def get_local(self, start: Optional[Path] = None) -> Optional[LocalVersion]:
        return self.store.get_local(start)

    def get_env(self) -> Optional[str]:
        return self.store.get_env()

    def active(self, start: Optional[Path] = None) -> Optional[ActiveVersion]:
        return self.store.get_active(start)

    def current(self, start: Optional[Path] = None) -> Optional[str]:
        """
        Get the installed version the active record points at.

        Returns:
            Installed version, or None if no record is set or nothing
            installed satisfies it
        """
        record = self.active(start)
        if record is None:
            return None
        return self.resolve_locally(record.spec)

    def use(
        self, spec: str, scope: str = "global", directory: Optional[Path] = None
    ) -> InstallResult:
        """
        Install the version ``spec`` resolves to and record ``spec`` at a scope.

        The raw specifier is recorded, not the resolved version.

        Raises:
            ValueError: If ``scope`` is not 'global' or 'local'
        """
        if scope not in SCOPES:
            raise ValueError(f"Unknown scope: {scope}")

        result = self.install(spec)
        if scope == "global":
            self.set_global(spec)
        else:
            self.set_local(spec, directory)
        return result
