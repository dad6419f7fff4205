"""
Tests for service configuration.
"""

import pytest

from fileops.config import ConfigurationError, Settings, get_settings
from fileops.filesystem.file_manager import DEFAULT_CHUNK_SIZE
from fileops.run import load_settings, parse_args


class TestSettings:
    """Test cases for Settings."""

    def test_defaults(self):
        """Test unset variables fall back to defaults."""
        settings = Settings.from_env({})

        assert settings.download_path == "path/to/file.zip"
        assert settings.folder_path == "path/to/folder"
        assert settings.chunk_size == DEFAULT_CHUNK_SIZE
        assert settings.host == "0.0.0.0"
        assert settings.port == 3000
        assert settings.log_level == "INFO"

    def test_from_env(self):
        """Test variables override defaults."""
        settings = Settings.from_env({
            "FILEOPS_DOWNLOAD_PATH": "/srv/export.zip",
            "FILEOPS_FOLDER_PATH": "/srv/cache",
            "FILEOPS_CHUNK_SIZE": "1024",
            "FILEOPS_HOST": "127.0.0.1",
            "FILEOPS_PORT": "8080",
            "FILEOPS_LOG_LEVEL": "debug",
        })

        assert settings.download_path == "/srv/export.zip"
        assert settings.folder_path == "/srv/cache"
        assert settings.chunk_size == 1024
        assert settings.host == "127.0.0.1"
        assert settings.port == 8080
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize("env", [
        {"FILEOPS_PORT": "http"},
        {"FILEOPS_PORT": "70000"},
        {"FILEOPS_CHUNK_SIZE": "0"},
        {"FILEOPS_CHUNK_SIZE": "lots"},
    ])
    def test_invalid_values(self, env):
        """Test invalid values raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            Settings.from_env(env)

    def test_get_settings_is_cached(self, monkeypatch):
        """Test the global settings are loaded once."""
        monkeypatch.setattr("fileops.config._global_settings", None)
        monkeypatch.setenv("FILEOPS_FOLDER_PATH", "/tmp/cached")

        first = get_settings()
        monkeypatch.setenv("FILEOPS_FOLDER_PATH", "/tmp/changed")

        assert get_settings() is first
        assert first.folder_path == "/tmp/cached"


class TestCommandLine:
    """Test cases for command line overrides."""

    def test_overrides(self, monkeypatch):
        """Test command line options take precedence over the environment."""
        monkeypatch.setenv("FILEOPS_PORT", "9000")
        monkeypatch.setenv("FILEOPS_FOLDER_PATH", "/data/folder")

        settings = load_settings(parse_args(["--port", "8001", "--log-level", "warning"]))

        assert settings.port == 8001
        assert settings.log_level == "WARNING"
        assert settings.folder_path == "/data/folder"

    def test_environment_used_without_options(self, monkeypatch):
        """Test the environment applies when no options are given."""
        monkeypatch.setenv("FILEOPS_HOST", "127.0.0.1")

        settings = load_settings(parse_args([]))

        assert settings.host == "127.0.0.1"
