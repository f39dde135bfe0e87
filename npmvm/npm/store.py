"""
Active npm version records.

The active npm version is stored as raw specifier text at three scopes:

- env:    ``$NPMVM_NPM_VERSION``
- local:  ``.npm-version`` in the working directory or any ancestor
- global: ``.npm-version-global`` in the configuration directory

Values are stored unresolved (``latest``, ``^10`` and ``10.2.0`` are all
valid records). Env shadows local, and local shadows global.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from npmvm.core.config import ENV_VERSION_VAR
from npmvm.core.directory import (
    get_local_version_file,
    get_config_dir,
    get_global_version_file,
)
from npmvm.core.exceptions import VersionStoreError
from npmvm.core.filesystem import atomic_write

logger = logging.getLogger(__name__)


@dataclass
class LocalVersion:
    """A local record found by the upward search."""

    spec: str
    path: Path


@dataclass
class ActiveVersion:
    """The record currently in effect."""

    spec: str
    scope: str  # 'env', 'local', 'global'
    path: Optional[Path] = None


class VersionStore:
    """
    Reads and writes active-version records.

    Example:
        >>> store = VersionStore()
        >>> store.set_global("10.2.0")
        >>> store.get_global()
        '10.2.0'
    """

    def __init__(self, config_dir: Optional[Path] = None, env_version: Optional[str] = None):
        """
        Initialize the store.

        Args:
            config_dir: Configuration directory (default: get_config_dir())
            env_version: Env-scope specifier (default: $NPMVM_NPM_VERSION)
        """
        self.config_dir = Path(config_dir) if config_dir else get_config_dir()
        self.env_version = env_version

    @property
    def global_file(self) -> Path:
        return get_global_version_file(self.config_dir)

    # ------------------------------------------------------------------
    # Global scope
    # ------------------------------------------------------------------

    def set_global(self, spec: str) -> Path:
        """
        Record the global npm version.

        Raises:
            VersionStoreError: If the file cannot be written
        """
        try:
            atomic_write(self.global_file, spec)
        except OSError as e:
            raise VersionStoreError(spec, str(e)) from e
        logger.debug(f"Set global npm version to {spec}")
        return self.global_file

    def get_global(self) -> str:
        """
        Read the global npm version.

        Raises:
            FileNotFoundError: If no global version was ever set
            OSError: If the file cannot be read
        """
        return self.global_file.read_text(encoding="utf-8").strip()

    # ------------------------------------------------------------------
    # Local scope
    # ------------------------------------------------------------------

    def set_local(self, spec: str, directory: Optional[Path] = None) -> Path:
        """
        Record the npm version for a directory.

        Only the given directory (default: the working directory) is
        written; ancestors are never touched.

        Returns:
            Path of the written file

        Raises:
            VersionStoreError: If the file cannot be written
        """
        version_file = get_local_version_file(Path(directory or Path.cwd()).absolute())
        try:
            version_file.write_text(spec, encoding="utf-8")
        except OSError as e:
            raise VersionStoreError(spec, str(e)) from e
        logger.debug(f"Set local npm version to {spec} in {version_file}")
        return version_file

    def get_local(self, start: Optional[Path] = None) -> Optional[LocalVersion]:
        """
        Find the nearest local npm version.

        Checks ``start`` (default: the working directory), then each parent
        up to the filesystem root. The walk follows the path lexically, so
        it always ends at the root; directories that resolve to one
        already searched (through symlinks) are skipped.

        Returns:
            The nearest record, or None if no directory has one
        """
        directory = Path(start or Path.cwd()).absolute()
        visited = set()

        for candidate in [directory, *directory.parents]:
            real = os.path.realpath(candidate)
            if real in visited:
                logger.debug(f"Skipping {candidate}: already searched as {real}")
                continue
            visited.add(real)

            version_file = get_local_version_file(candidate)
            try:
                spec = version_file.read_text(encoding="utf-8").strip()
            except OSError:
                continue
            logger.debug(f"Found local npm version {spec} in {version_file}")
            return LocalVersion(spec=spec, path=version_file)

        return None

    # ------------------------------------------------------------------
    # Env scope
    # ------------------------------------------------------------------

    def get_env(self) -> Optional[str]:
        """Get the env-scope npm version, if any."""
        if self.env_version:
            return self.env_version
        return os.environ.get(ENV_VERSION_VAR) or None

    def get_active(self, start: Optional[Path] = None) -> Optional[ActiveVersion]:
        """
        Get the record in effect: env, then local, then global.

        Returns:
            The active record, or None if no scope has one
        """
        env = self.get_env()
        if env:
            return ActiveVersion(spec=env, scope="env")

        local = self.get_local(start)
        if local:
            return ActiveVersion(spec=local.spec, scope="local", path=local.path)

        try:
            return ActiveVersion(
                spec=self.get_global(), scope="global", path=self.global_file
            )
        except FileNotFoundError:
            return None
