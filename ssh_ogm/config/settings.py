"""Application settings from environment variables.

Centralized environment variable parsing and validation.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

DIR_NAME = ".ssh-ogm"
LOG_FILE_NAME = "ssh-ogm.log"


@dataclass
class Settings:
    """Application settings from environment.

    Handles parsing, validation, and defaults for all env vars.
    """

    # Config directory holding config, proxies.conf and the log file
    home: Path = field(default_factory=lambda: Path.home() / DIR_NAME)

    # Probe stage timeouts (seconds)
    handshake_timeout: float = field(default=4.0)
    tcp_timeout: float = field(default=2.0)
    ping_timeout: float = field(default=2.0)

    # Logging
    log_level: str = field(default="INFO")
    log_file: str | None = field(default=None)  # "-" means stderr
    log_colors: bool = field(default=True)

    @property
    def log_path(self) -> Path | None:
        """Resolved log destination, or None to log to stderr."""
        if self.log_file == "-":
            return None
        if self.log_file:
            return Path(self.log_file).expanduser()
        return self.home / LOG_FILE_NAME

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables.

        Returns:
            Settings instance with values from environment
        """
        home = os.getenv("SSH_OGM_HOME")
        return cls(
            home=Path(home).expanduser() if home else Path.home() / DIR_NAME,
            handshake_timeout=cls._get_float("SSH_OGM_HANDSHAKE_TIMEOUT", 4.0),
            tcp_timeout=cls._get_float("SSH_OGM_TCP_TIMEOUT", 2.0),
            ping_timeout=cls._get_float("SSH_OGM_PING_TIMEOUT", 2.0),
            log_level=os.getenv("SSH_OGM_LOG_LEVEL", "INFO").upper(),
            log_file=os.getenv("SSH_OGM_LOG_FILE") or None,
            log_colors=cls._get_bool("SSH_OGM_LOG_COLORS", True),
        )

    @staticmethod
    def _get_float(key: str, default: float) -> float:
        """Get a positive float from environment.

        Args:
            key: Environment variable key
            default: Default value if not set or invalid

        Returns:
            Float value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default

        try:
            parsed = float(value)
        except ValueError:
            logger.warning("Invalid float for %s: %s, using default %s", key, value, default)
            return default

        if parsed <= 0:
            logger.warning("%s must be > 0, got %s. Using default: %s", key, value, default)
            return default
        return parsed

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        """Get boolean from environment.

        Args:
            key: Environment variable key
            default: Default value if not set

        Returns:
            Boolean value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() in ("1", "true", "yes", "on")
