"""
Installed npm versions.

The install repository holds one directory per installed version, named
exactly after the version. Listing it is cached; the cache is dropped
explicitly whenever this process installs or removes a version.
"""

import logging
from pathlib import Path
from typing import List, Optional

from npmvm.core.filesystem import FilesystemError
from npmvm.core.versions import is_canonical_version, sort_versions

logger = logging.getLogger(__name__)


class InstalledVersions:
    """
    Versions present in the install repository.

    Example:
        >>> installed = InstalledVersions(Path("~/.npmvm/npmv").expanduser())
        >>> installed.list()
        ['6.14.18', '9.8.1', '10.2.0']
    """

    def __init__(self, repo_path: Path):
        self.repo_path = Path(repo_path)
        self._cache: Optional[List[str]] = None

    def list(self) -> List[str]:
        """
        List installed versions in ascending semantic order.

        Only entries named exactly after a canonical version count, so
        every listed version is reachable through path_for(). The
        first call reads the repository; later calls return the cached
        list until invalidate() is called.

        Raises:
            FilesystemError: If the repository cannot be read
        """
        if self._cache is not None:
            return list(self._cache)

        try:
            entries = [p.name for p in self.repo_path.iterdir()]
        except OSError as e:
            raise FilesystemError(
                f"Reading the version directory {self.repo_path} failed: {e}"
            ) from e

        versions = sort_versions(e for e in entries if is_canonical_version(e))
        logger.debug(f"Found {len(versions)} installed versions in {self.repo_path}")
        self._cache = versions
        return list(versions)

    def invalidate(self) -> None:
        """Drop the cached listing."""
        self._cache = None

    def path_for(self, version: str) -> Path:
        """Get the install directory of a version."""
        return self.repo_path / version

    def is_installed(self, version: str) -> bool:
        """Check whether a version's directory exists (bypasses the cache)."""
        return self.path_for(version).is_dir()
