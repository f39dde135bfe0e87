"""
Version specifier resolution.

Turns a specifier into one concrete npm version. Specifiers are
classified in order:

1. empty or ``latest``: the newest release
2. ``match``: the npm version bundled with the active node
3. anything else: an exact version or an npm range, matched against a
   candidate pool

Install-time resolution matches against the remote catalog and fails
loudly. Local resolution matches against installed versions and returns
None when nothing fits, so half-written version files do not break
commands that only ask what is usable.
"""

import logging
from typing import Iterable, Optional

from npmvm.core.exceptions import InvalidSpecifierError, NoMatchingVersionError
from npmvm.core.versions import clean_version, max_satisfying, parse_range
from npmvm.npm.catalog import GitHubReleaseCatalog
from npmvm.npm.installed import InstalledVersions
from npmvm.npm.runtime import HostRuntime

logger = logging.getLogger(__name__)

LATEST = "latest"
MATCH = "match"


def resolve_in_pool(spec: str, pool: Iterable[str]) -> Optional[str]:
    """
    Match an exact version or range against a candidate pool.

    Returns:
        The greatest pool entry satisfying ``spec`` (cleaned), or None
    """
    if parse_range(spec) is not None:
        return max_satisfying(pool, spec)
    return None


class VersionResolver:
    """
    Resolves specifiers against the catalog, the installed set or the runtime.

    Example:
        >>> resolver = VersionResolver(catalog, installed, NodeRuntime())
        >>> resolver.resolve("^9")
        '9.9.2'
    """

    def __init__(
        self,
        catalog: GitHubReleaseCatalog,
        installed: InstalledVersions,
        runtime: HostRuntime,
    ):
        self.catalog = catalog
        self.installed = installed
        self.runtime = runtime

    def matching_version(self) -> str:
        """
        Get the npm version bundled with the active runtime.

        Raises:
            RuntimeQueryError: If the runtime cannot answer
        """
        runtime_version = self.runtime.get_current_version()
        npm_version = self.runtime.get_matching_npm_version(runtime_version)
        logger.debug(f"Runtime {runtime_version} matches npm {npm_version}")
        return clean_version(npm_version) or npm_version

    def resolve(self, spec: Optional[str]) -> str:
        """
        Resolve a specifier to an installable version.

        Args:
            spec: Specifier (empty, ``latest``, ``match``, version or range)

        Returns:
            Concrete version string

        Raises:
            NoMatchingVersionError: If no published version satisfies ``spec``
            InvalidSpecifierError: If ``spec`` is neither a version nor a range
            UpstreamUnavailableError: If the release feed cannot be queried
            RuntimeQueryError: If ``match`` cannot be answered
        """
        spec = (spec or "").strip()

        if not spec or spec == LATEST:
            return self.catalog.latest_version()

        if spec == MATCH:
            return self.matching_version()

        if parse_range(spec) is None:
            raise InvalidSpecifierError(spec)

        version = resolve_in_pool(spec, self.catalog.list_all_versions())
        if version is None:
            raise NoMatchingVersionError(spec)
        logger.debug(f"Resolved {spec} to {version}")
        return version

    def resolve_locally(self, spec: Optional[str]) -> Optional[str]:
        """
        Resolve a specifier against the installed versions.

        Args:
            spec: Specifier (empty, ``latest``, ``match``, version or range)

        Returns:
            Installed version satisfying ``spec``, or None

        Raises:
            RuntimeQueryError: If ``match`` cannot be answered
            FilesystemError: If the install repository cannot be read
        """
        spec = (spec or "").strip()
        if not spec:
            return None

        installed = self.installed.list()

        if spec == LATEST:
            return installed[-1] if installed else None

        if spec == MATCH:
            spec = self.matching_version()

        return resolve_in_pool(spec, installed)
