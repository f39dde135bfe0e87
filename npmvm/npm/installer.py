"""
npm install and removal.

This module orchestrates installing an npm release into the install
repository:
1. Normalize the requested version
2. Return early if the version directory already exists
3. Stream the release tarball straight into extraction
4. Repair workspace symlinks for npm releases that use them

A directory's existence is the only completeness check. A failed
install leaves its partial directory behind, and later installs of the
same version will treat it as installed.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import requests

from npmvm.core.config import DEFAULT_DOWNLOAD_URL, Settings
from npmvm.core.download import open_download_stream
from npmvm.core.exceptions import ExtractionError, InvalidVersionError
from npmvm.core.filesystem import ArchiveExtractionError, extract_tar_stream, safe_rmtree
from npmvm.core.versions import clean_version, version_gte
from npmvm.npm.installed import InstalledVersions
from npmvm.npm.repair import LinkFilesystem, repair_links

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """Result of an install operation."""

    version: str
    """Installed version"""

    path: Path
    """Path to the version's install directory"""

    was_cached: bool
    """Whether the version was already installed (no download needed)"""

    repaired_links: int = 0
    """Number of symlinks replaced after extraction"""

    install_time: float = 0.0
    """Time spent downloading and extracting in seconds"""


def download_url(version: str, template: str = DEFAULT_DOWNLOAD_URL) -> str:
    """
    Get the tarball URL of an npm version.

    Example:
        >>> download_url("v10.2.0")
        'https://codeload.github.com/npm/cli/tar.gz/v10.2.0'
    """
    return template.replace("VERSION", version.replace("v", "", 1))


class NpmInstaller:
    """
    Installs and removes npm versions in the install repository.

    Example:
        >>> installer = NpmInstaller(InstalledVersions(repo), Settings())
        >>> result = installer.install("10.2.0")
        >>> print(f"Installed at: {result.path}")
    """

    def __init__(
        self,
        installed: InstalledVersions,
        settings: Settings,
        session: Optional[requests.Session] = None,
        link_fs: Optional[LinkFilesystem] = None,
    ):
        """
        Initialize the installer.

        Args:
            installed: Installed-version set; its cache is invalidated on change
            settings: npmvm settings (download URL, timeout, repair threshold)
            session: Optional requests session for downloads
            link_fs: Optional filesystem for symlink repair
        """
        self.installed = installed
        self.settings = settings
        self.session = session
        self.link_fs = link_fs

    @property
    def repo_path(self) -> Path:
        return self.installed.repo_path

    def download_url(self, version: str) -> str:
        return download_url(version, self.settings.download_url)

    def install(self, spec: str) -> InstallResult:
        """
        Install an npm version.

        Args:
            spec: Exact version, optionally ``v``-prefixed

        Returns:
            InstallResult with installation details

        Raises:
            InvalidVersionError: If ``spec`` is not a valid version
            DownloadError: If the tarball cannot be downloaded
            ExtractionError: If the tarball cannot be extracted
        """
        logger.debug(f"install {spec}")
        version = clean_version(spec)
        if version is None:
            raise InvalidVersionError(spec)

        archive_path = self.installed.path_for(version)

        if archive_path.exists():
            logger.debug(f"npm {version} is already installed")
            return InstallResult(version=version, path=archive_path, was_cached=True)

        start = time.time()
        archive_path.mkdir(parents=True, exist_ok=True)

        url = self.download_url(version)
        logger.info(f"Downloading and extracting npm {version} from {url}")
        with open_download_stream(
            url, timeout=self.settings.http_timeout, session=self.session
        ) as stream:
            try:
                members = extract_tar_stream(stream, archive_path, strip_components=1)
            except ArchiveExtractionError as e:
                raise ExtractionError(f"Extracting npm {version} failed: {e}") from e
        logger.debug(f"Extracted {members} entries into {archive_path}")

        repaired = 0
        if version_gte(version, self.settings.symlink_fix_threshold):
            logger.debug(
                f"Fix symlinks for npm version >= {self.settings.symlink_fix_threshold}"
            )
            modules_dir = archive_path / "node_modules"
            if modules_dir.is_dir():
                repaired = repair_links(modules_dir, fs=self.link_fs)
            logger.debug(f"Fixed {repaired} symlinks for npm node_modules")

        self.installed.invalidate()
        logger.info(f"Installed npm {version}")
        return InstallResult(
            version=version,
            path=archive_path,
            was_cached=False,
            repaired_links=repaired,
            install_time=time.time() - start,
        )

    def remove(self, spec: str) -> str:
        """
        Remove an installed npm version.

        Removing a version that is not installed succeeds.

        Args:
            spec: Exact version, optionally ``v``-prefixed

        Returns:
            The removed version

        Raises:
            InvalidVersionError: If ``spec`` is not a valid version
            FilesystemError: If the directory cannot be deleted
        """
        version = clean_version(spec)
        if version is None:
            raise InvalidVersionError(spec)

        archive_path = self.installed.path_for(version)
        if not archive_path.exists():
            logger.debug(f"npm {version} is not installed, nothing to remove")
            return version

        safe_rmtree(archive_path, require_prefix=self.repo_path)
        self.installed.invalidate()
        logger.info(f"Removed npm {version}")
        return version
