"""
Configuration management for keystretch.

Default derivation parameters are kept in a JSON settings file inside the
configuration directory. Callers (the CLI in particular) start from these
settings and override individual values.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional

from .crypto.algorithms import HashAlgorithm
from .crypto.exceptions import UnsupportedAlgorithm

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "KEYSTRETCH_CONFIG_DIR"
SETTINGS_FILENAME = "settings.json"


class ConfigError(Exception):
    """Raised when configuration operations fail."""
    pass


@dataclass
class DerivationSettings:
    """Default parameters for a derivation."""
    algorithm: str = "SHA256"
    iterations: int = 10000
    key_length: int = 0
    raw_output: bool = False
    check_interval: int = 1024
    max_workers: int = 1

    def validate(self) -> None:
        """
        Check every field.

        Raises:
            ConfigError: If any value is out of range or of the wrong type
        """
        try:
            HashAlgorithm.from_name(self.algorithm)
        except UnsupportedAlgorithm as e:
            raise ConfigError(str(e))

        for name, minimum in (("iterations", 1), ("key_length", 0),
                              ("check_interval", 1), ("max_workers", 1)):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
            if value < minimum:
                raise ConfigError(f"{name} must be at least {minimum}, got {value}")

        if not isinstance(self.raw_output, bool):
            raise ConfigError(f"raw_output must be true or false, got {self.raw_output!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DerivationSettings":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown settings: {', '.join(unknown)}")
        settings = cls(**data)
        settings.validate()
        return settings

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class KeystretchConfig:
    """
    Simple configuration manager for keystretch.

    Handles loading and saving the default derivation settings.
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_dir: Directory for configuration files. Defaults to
                $KEYSTRETCH_CONFIG_DIR, then ~/.keystretch/
        """
        if config_dir is None:
            config_dir = os.environ.get(CONFIG_DIR_ENV) or os.path.expanduser("~/.keystretch")

        self.config_dir = config_dir
        self.settings_path = os.path.join(config_dir, SETTINGS_FILENAME)

    def settings_exist(self) -> bool:
        """Check if a settings file exists."""
        return os.path.exists(self.settings_path)

    def load_settings(self) -> DerivationSettings:
        """
        Load derivation settings.

        Returns:
            DerivationSettings from the settings file, or defaults when the
            file does not exist

        Raises:
            ConfigError: If the file cannot be read or holds invalid settings
        """
        if not self.settings_exist():
            logger.debug(f"No settings file at {self.settings_path}, using defaults")
            return DerivationSettings()

        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid settings file {self.settings_path}: {e}")
        except OSError as e:
            raise ConfigError(f"Failed to read settings: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Settings file {self.settings_path} must contain a JSON object")

        return DerivationSettings.from_dict(data)

    def save_settings(self, settings: DerivationSettings) -> None:
        """
        Validate and save derivation settings.

        Raises:
            ConfigError: If the settings are invalid or cannot be written
        """
        settings.validate()
        try:
            os.makedirs(self.config_dir, exist_ok=True)
            with open(self.settings_path, 'w', encoding='utf-8') as f:
                json.dump(settings.to_dict(), f, indent=2)
        except OSError as e:
            raise ConfigError(f"Failed to save settings: {e}")
        logger.info(f"Settings saved to: {self.settings_path}")
