"""
Pytest configuration and shared fixtures for npmvm tests.
"""

import logging
from pathlib import Path

import pytest

from npmvm.core.config import Settings
from npmvm.npm.runtime import StaticRuntime


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's npmvm environment out of the tests."""
    for var in ("NPMVM_HOME", "NPMVM_NPM_VERSION", "GITHUB_TOKEN"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Empty npmvm configuration directory."""
    path = tmp_path / "npmvm-home"
    path.mkdir()
    return path


@pytest.fixture
def repo_path(config_dir: Path) -> Path:
    """Empty install repository."""
    path = config_dir / "npmv"
    path.mkdir()
    return path


@pytest.fixture
def settings() -> Settings:
    """Default settings without a token."""
    return Settings()


@pytest.fixture
def static_runtime() -> StaticRuntime:
    """Runtime reporting node 20.9.0 bundled with npm 10.1.0."""
    return StaticRuntime("v20.9.0", {"20.9.0": "10.1.0"})


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo the root logger changes CLI.run makes."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
