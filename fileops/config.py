"""
Service configuration loaded from environment variables.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .filesystem.file_manager import DEFAULT_CHUNK_SIZE

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when the service configuration is invalid."""
    pass


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


@dataclass
class Settings:
    """Configuration for the file operations service."""
    download_path: str = "path/to/file.zip"
    folder_path: str = "path/to/folder"
    chunk_size: int = DEFAULT_CHUNK_SIZE
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.chunk_size <= 0:
            raise ConfigurationError("FILEOPS_CHUNK_SIZE must be positive")
        if not 0 < self.port < 65536:
            raise ConfigurationError("FILEOPS_PORT must be between 1 and 65535")
        self.log_level = self.log_level.upper()

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Load settings from environment variables.

        Args:
            env: Mapping to read instead of ``os.environ``

        Returns:
            Settings with defaults for unset variables
        """
        env = os.environ if env is None else env
        return cls(
            download_path=env.get("FILEOPS_DOWNLOAD_PATH", cls.download_path),
            folder_path=env.get("FILEOPS_FOLDER_PATH", cls.folder_path),
            chunk_size=_int_setting(env, "FILEOPS_CHUNK_SIZE", DEFAULT_CHUNK_SIZE),
            host=env.get("FILEOPS_HOST", cls.host),
            port=_int_setting(env, "FILEOPS_PORT", cls.port),
            log_level=env.get("FILEOPS_LOG_LEVEL", cls.log_level),
        )


_global_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _global_settings
    if _global_settings is None:
        _global_settings = Settings.from_env()
        logger.debug(f"Loaded settings: {_global_settings}")
    return _global_settings
