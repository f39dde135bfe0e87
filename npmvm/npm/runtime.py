"""
Host runtime collaborator.

The ``match`` specifier selects the npm version that ships with the
active Node.js version. This module answers the two questions that
needs: which runtime version is active, and which npm version belongs
to it.
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from typing import Dict, Optional

import requests
from requests.exceptions import RequestException

from npmvm.core.exceptions import RuntimeQueryError
from npmvm.core.versions import clean_version

logger = logging.getLogger(__name__)

NODE_DIST_INDEX_URL = "https://nodejs.org/dist/index.json"


class HostRuntime(ABC):
    """Runtime whose version decides what ``match`` means."""

    @abstractmethod
    def get_current_version(self) -> str:
        """Get the active runtime version."""
        pass

    @abstractmethod
    def get_matching_npm_version(self, runtime_version: str) -> str:
        """Get the npm version bundled with ``runtime_version``."""
        pass


class StaticRuntime(HostRuntime):
    """Runtime with fixed answers, for pinned setups and tests."""

    def __init__(self, node_version: str, npm_versions: Dict[str, str]):
        self.node_version = node_version
        self.npm_versions = npm_versions

    def get_current_version(self) -> str:
        return self.node_version

    def get_matching_npm_version(self, runtime_version: str) -> str:
        key = clean_version(runtime_version) or runtime_version
        try:
            return self.npm_versions[key]
        except KeyError:
            raise RuntimeQueryError(f"No npm version known for node {runtime_version}")


class NodeRuntime(HostRuntime):
    """
    The Node.js found on PATH.

    The current version comes from ``node --version``; the matching npm
    version from the official release index.
    """

    def __init__(
        self,
        node_executable: str = "node",
        index_url: str = NODE_DIST_INDEX_URL,
        timeout: Optional[int] = 30,
        session: Optional[requests.Session] = None,
    ):
        self.node_executable = node_executable
        self.index_url = index_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self._index: Optional[list] = None

    def get_current_version(self) -> str:
        """
        Run ``node --version``.

        Raises:
            RuntimeQueryError: If node cannot be run or prints no version
        """
        try:
            result = subprocess.run(
                [self.node_executable, "--version"],
                capture_output=True,
                text=True,
                timeout=10,
                check=True,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise RuntimeQueryError(f"Could not determine node version: {e}") from e

        version = clean_version(result.stdout.strip())
        if version is None:
            raise RuntimeQueryError(
                f"Unexpected output from {self.node_executable} --version: "
                f"{result.stdout.strip()!r}"
            )
        logger.debug(f"Current node version: {version}")
        return version

    def _load_index(self) -> list:
        if self._index is None:
            try:
                response = self.session.get(self.index_url, timeout=self.timeout)
                response.raise_for_status()
                self._index = response.json()
            except (RequestException, ValueError) as e:
                raise RuntimeQueryError(
                    f"Could not read node release index {self.index_url}: {e}"
                ) from e
        return self._index

    def get_matching_npm_version(self, runtime_version: str) -> str:
        """
        Look up the npm version bundled with a node release.

        Raises:
            RuntimeQueryError: If the index cannot be read or has no entry
        """
        wanted = clean_version(runtime_version)
        for entry in self._load_index():
            if clean_version(entry.get("version")) == wanted and entry.get("npm"):
                logger.debug(f"node {wanted} ships npm {entry['npm']}")
                return entry["npm"]
        raise RuntimeQueryError(f"No npm version known for node {runtime_version}")
