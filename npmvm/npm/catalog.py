"""
Remote release catalog.

Lists npm versions published as GitHub releases. Two upstream feeds are
merged: the historical ``npm/npm`` repository and the current
``npm/cli`` repository. The ``npm/cli`` repository also publishes
releases of its workspace libraries, named ``<package>: <version>``;
those are not npm releases and are filtered out.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

import requests
from requests.exceptions import RequestException

from npmvm.core.config import Settings
from npmvm.core.exceptions import NoMatchingVersionError, UpstreamUnavailableError
from npmvm.core.versions import clean_version, version_key

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
RELEASE_TAG_PATTERN = re.compile(r"^v\d+\.\d+\.\d+$")
LIBRARY_RELEASE_SEPARATOR = ":"


def is_npm_release(release: Dict[str, Any]) -> bool:
    """Check that a release entry is an npm release, not a library release."""
    return LIBRARY_RELEASE_SEPARATOR not in (release.get("name") or "")


class GitHubReleaseCatalog:
    """
    npm versions published as GitHub releases.

    Example:
        >>> catalog = GitHubReleaseCatalog(Settings())
        >>> catalog.latest_version()
        '10.2.0'
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        """
        Initialize the catalog.

        Args:
            settings: npmvm settings (feeds, page sizes, token, timeout)
            session: Optional requests session (default: new session)
        """
        self.settings = settings
        self.session = session or requests.Session()
        self.headers = {"Accept": "application/vnd.github+json"}
        if settings.github_token:
            self.headers["Authorization"] = f"Bearer {settings.github_token}"

    def list_releases(
        self, owner: str, repo: str, page: int = 1, per_page: int = 100
    ) -> List[Dict[str, Any]]:
        """
        Fetch one page of releases from a repository.

        Returns:
            Release entries (dicts with at least ``tag_name`` and ``name``)

        Raises:
            UpstreamUnavailableError: If the request fails
        """
        url = f"{GITHUB_API_URL}/repos/{owner}/{repo}/releases"
        logger.debug(f"Listing releases {owner}/{repo} page {page}")

        try:
            response = self.session.get(
                url,
                params={"per_page": per_page, "page": page},
                headers=self.headers,
                timeout=self.settings.http_timeout,
            )
            response.raise_for_status()
            return response.json()
        except (RequestException, ValueError) as e:
            raise UpstreamUnavailableError(
                f"Listing releases of {owner}/{repo} failed: {e}"
            ) from e

    def _paginate(self, owner: str, repo: str) -> List[Dict[str, Any]]:
        """Fetch every release of a repository."""
        per_page = self.settings.per_page
        releases: List[Dict[str, Any]] = []
        page = 1
        while True:
            batch = self.list_releases(owner, repo, page=page, per_page=per_page)
            releases.extend(batch)
            if len(batch) < per_page:
                return releases
            page += 1

    def list_all_versions(self) -> List[str]:
        """
        List every npm release tag across all feeds.

        Returns:
            De-duplicated tag names, feeds concatenated in configured order
        """
        tags: List[str] = []
        seen = set()
        for owner, repo in self.settings.feeds:
            releases = self._paginate(owner, repo)
            kept = [r["tag_name"] for r in releases if is_npm_release(r)]
            logger.debug(
                f"{owner}/{repo}: {len(kept)} of {len(releases)} releases are npm releases"
            )
            for tag in kept:
                if tag not in seen:
                    seen.add(tag)
                    tags.append(tag)
        return tags

    def _versions_page(self, page: int) -> Tuple[int, List[str]]:
        """Fetch a page of the primary feed: raw entry count and qualifying tags."""
        owner, repo = self.settings.primary_feed
        releases = self.list_releases(
            owner, repo, page=page, per_page=self.settings.latest_page_size
        )
        tags = [
            r["tag_name"] for r in releases if RELEASE_TAG_PATTERN.match(r["tag_name"])
        ]
        return len(releases), sorted(tags, key=version_key)

    def list_versions_page(self, page: int) -> List[str]:
        """
        List one page of the primary feed.

        Returns:
            Tags of strict ``vMAJOR.MINOR.PATCH`` shape, ascending
        """
        return self._versions_page(page)[1]

    def latest_version(self) -> str:
        """
        Get the most recently published npm version.

        Pages made up only of library releases are skipped.

        Returns:
            Cleaned version string (no leading ``v``)

        Raises:
            NoMatchingVersionError: If the feed runs out of pages
            UpstreamUnavailableError: If the feed cannot be queried
        """
        page = 1
        while True:
            raw_count, tags = self._versions_page(page)
            if tags:
                return clean_version(tags[-1])
            if raw_count == 0:
                raise NoMatchingVersionError("latest")
            logger.debug(f"No npm releases on page {page}, trying next page")
            page += 1
