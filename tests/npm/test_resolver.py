"""
Unit tests for version specifier resolution.
"""

from unittest.mock import Mock

import pytest

from npmvm.core.exceptions import (
    InvalidSpecifierError,
    NoMatchingVersionError,
    RuntimeQueryError,
)
from npmvm.npm.catalog import GitHubReleaseCatalog
from npmvm.npm.installed import InstalledVersions
from npmvm.npm.resolver import VersionResolver, resolve_in_pool
from npmvm.npm.runtime import StaticRuntime


@pytest.fixture
def catalog():
    catalog = Mock(spec=GitHubReleaseCatalog)
    catalog.list_all_versions.return_value = ["v1.0.0", "v2.0.0", "v2.5.3", "v10.1.0"]
    catalog.latest_version.return_value = "10.2.0"
    return catalog


@pytest.fixture
def installed(repo_path):
    for version in ("6.14.18", "9.8.1", "10.1.0"):
        (repo_path / version).mkdir()
    return InstalledVersions(repo_path)


@pytest.fixture
def resolver(catalog, installed, static_runtime):
    return VersionResolver(catalog, installed, static_runtime)


class TestResolveInPool:
    """Tests for resolve_in_pool function."""

    def test_range(self):
        assert resolve_in_pool("^2.0.0", ["1.0.0", "2.0.0", "2.5.3"]) == "2.5.3"

    def test_exact(self):
        assert resolve_in_pool("2.0.0", ["1.0.0", "2.0.0", "2.5.3"]) == "2.0.0"

    def test_not_a_range(self):
        """Test unparseable specifiers give None."""
        assert resolve_in_pool("garbage", ["1.0.0"]) is None


class TestResolve:
    """Tests for install-time VersionResolver.resolve."""

    @pytest.mark.parametrize("spec", [None, "", "  ", "latest"])
    def test_latest(self, resolver, catalog, spec):
        """Test empty and 'latest' ask the catalog for the newest release."""
        assert resolver.resolve(spec) == "10.2.0"
        catalog.list_all_versions.assert_not_called()

    def test_match(self, resolver, catalog):
        """Test 'match' returns the npm bundled with the runtime."""
        assert resolver.resolve("match") == "10.1.0"
        catalog.latest_version.assert_not_called()

    def test_range(self, resolver):
        assert resolver.resolve("^2.0.0") == "2.5.3"

    def test_exact_with_prefix(self, resolver):
        """Test an exact version resolves cleaned."""
        assert resolver.resolve("v2.0.0") == "2.0.0"

    def test_no_match_names_spec(self, resolver):
        """Test an unsatisfied range raises naming the specifier."""
        with pytest.raises(NoMatchingVersionError) as exc_info:
            resolver.resolve("^3.0.0")
        assert exc_info.value.spec == "^3.0.0"
        assert str(exc_info.value) == 'Version spec, "^3.0.0", didn\'t match any version'

    def test_garbage(self, resolver, catalog):
        """Test a specifier that is neither version nor range is rejected."""
        with pytest.raises(InvalidSpecifierError):
            resolver.resolve("not-a-version")
        catalog.list_all_versions.assert_not_called()

    def test_match_without_runtime_answer(self, catalog, installed):
        """Test runtime failures propagate."""
        resolver = VersionResolver(catalog, installed, StaticRuntime("21.0.0", {}))
        with pytest.raises(RuntimeQueryError):
            resolver.resolve("match")


class TestResolveLocally:
    """Tests for VersionResolver.resolve_locally."""

    @pytest.mark.parametrize("spec", [None, ""])
    def test_empty(self, resolver, spec):
        assert resolver.resolve_locally(spec) is None

    def test_latest_is_highest_installed(self, resolver, catalog):
        """Test 'latest' picks the highest installed version, not the remote one."""
        assert resolver.resolve_locally("latest") == "10.1.0"
        catalog.latest_version.assert_not_called()

    def test_latest_with_nothing_installed(self, catalog, repo_path, static_runtime):
        resolver = VersionResolver(catalog, InstalledVersions(repo_path), static_runtime)
        assert resolver.resolve_locally("latest") is None

    def test_range(self, resolver):
        assert resolver.resolve_locally("^9") == "9.8.1"

    def test_exact(self, resolver):
        assert resolver.resolve_locally("6.14.18") == "6.14.18"

    def test_match(self, resolver):
        """Test 'match' resolves the runtime's npm against installed versions."""
        assert resolver.resolve_locally("match") == "10.1.0"

    def test_uninstalled_version(self, resolver):
        assert resolver.resolve_locally("8.0.0") is None

    def test_garbage_is_lenient(self, resolver):
        """Test unparseable input gives None instead of raising."""
        assert resolver.resolve_locally("not-a-version") is None

    def test_prefixed_directory_not_resolved(self, resolver, repo_path):
        """Test a stray v-prefixed directory never resolves to a missing path."""
        (repo_path / "v11.0.0").mkdir()
        resolver.installed.invalidate()

        assert resolver.resolve_locally("^11") is None
