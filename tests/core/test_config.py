"""
Unit tests for settings loading.
"""

import logging

import pytest

from npmvm.core.config import (
    DEFAULT_DOWNLOAD_URL,
    Settings,
    load_settings,
    load_yaml_config,
)
from npmvm.core.exceptions import ConfigError


class TestSettingsDefaults:
    """Test Settings defaults."""

    def test_defaults(self):
        """Test every key has its default."""
        settings = Settings()
        assert settings.github_token is None
        assert settings.http_timeout == 30
        assert settings.per_page == 100
        assert settings.latest_page_size == 50
        assert settings.download_url == DEFAULT_DOWNLOAD_URL
        assert settings.symlink_fix_threshold == "8.0.0"

    def test_feeds(self):
        """Test feeds split into owner/repo pairs, primary is the last."""
        settings = Settings()
        assert settings.feeds == [("npm", "npm"), ("npm", "cli")]
        assert settings.primary_feed == ("npm", "cli")


class TestLoadYamlConfig:
    """Test load_yaml_config function."""

    def test_missing_optional(self, tmp_path):
        """Test missing optional file returns empty dict."""
        assert load_yaml_config(tmp_path / "config.yaml") == {}

    def test_missing_required(self, tmp_path):
        """Test missing required file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_yaml_config(tmp_path / "config.yaml", required=True)

    def test_invalid_yaml(self, tmp_path):
        """Test YAML syntax errors raise ConfigError."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("per_page: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_yaml_config(config_file)

    def test_non_mapping(self, tmp_path):
        """Test a top-level list raises ConfigError."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="must be a mapping"):
            load_yaml_config(config_file)


class TestLoadSettings:
    """Test load_settings function."""

    def test_overrides(self, tmp_path):
        """Test values from the file override defaults."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "github_token: abc\n"
            "http_timeout: 5\n"
            "per_page: 20\n"
            "release_feeds: [npm/cli]\n"
            "symlink_fix_threshold: v9.0.0\n"
            "download_url: https://mirror.example.com/npm-VERSION.tgz\n"
        )

        settings = load_settings(config_file)

        assert settings.github_token == "abc"
        assert settings.http_timeout == 5
        assert settings.per_page == 20
        assert settings.feeds == [("npm", "cli")]
        assert settings.symlink_fix_threshold == "9.0.0"
        assert settings.download_url == "https://mirror.example.com/npm-VERSION.tgz"

    def test_token_from_environment(self, tmp_path, monkeypatch):
        """Test $GITHUB_TOKEN fills in a missing token."""
        monkeypatch.setenv("GITHUB_TOKEN", "from-env")
        assert load_settings(tmp_path / "config.yaml").github_token == "from-env"

    def test_unknown_key_warns(self, tmp_path, caplog):
        """Test unknown keys are ignored with a warning."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("colour: blue\n")

        with caplog.at_level(logging.WARNING):
            settings = load_settings(config_file)

        assert settings == Settings()
        assert "Ignoring unknown setting: colour" in caplog.text

    @pytest.mark.parametrize(
        "content, message",
        [
            ("http_timeout: soon\n", "http_timeout"),
            ("per_page: 0\n", "per_page"),
            ("per_page: 500\n", "at most 100"),
            ("download_url: https://example.com/npm.tgz\n", "VERSION"),
            ("release_feeds: [npm]\n", "release_feeds"),
            ("symlink_fix_threshold: eight\n", "symlink_fix_threshold"),
            ("github_token: 42\n", "github_token"),
        ],
    )
    def test_invalid_values(self, tmp_path, content, message):
        """Test wrongly typed values raise ConfigError."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(content)
        with pytest.raises(ConfigError, match=message):
            load_settings(config_file)
