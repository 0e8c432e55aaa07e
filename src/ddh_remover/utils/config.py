"""Configuration management for ddh-remover."""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ddh_remover.core.errors import ConfigError

logger = logging.getLogger(__name__)


class Config:
    """Manages user defaults for the remover."""

    DEFAULT_CONFIG_DIR = Path.home() / ".ddh-remover"
    DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.json"

    DEFAULT_SETTINGS: Dict[str, Any] = {
        "keep_count": 1,  # duplicates to keep when no preferred path is given
        "workers": 4,  # groups processed in parallel
        "use_trash": False,
        "show_progress": True,
    }

    def __init__(self, config_file: Optional[Path] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to config file (default: ~/.ddh-remover/config.json)
        """
        self.config_file = config_file or self.DEFAULT_CONFIG_FILE
        self.settings: Dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        """Load configuration from file, falling back to defaults."""
        self.settings = copy.deepcopy(self.DEFAULT_SETTINGS)
        if not self.config_file.exists():
            logger.debug(f"No config file at {self.config_file}. Using defaults.")
            return

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                loaded = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Invalid config file: {e}. Using defaults.")
            return

        if not isinstance(loaded, dict):
            logger.warning(
                f"Config file {self.config_file} is not a JSON object. Using defaults."
            )
            return

        self.settings.update(loaded)
        logger.debug(f"Loaded configuration from {self.config_file}")

    def save(self) -> None:
        """Save configuration to file."""
        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(self.settings, f, indent=2)
        logger.debug(f"Saved configuration to {self.config_file}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a setting, or `default` when it is missing or null."""
        value = self.settings.get(key)
        return default if value is None else value

    def set(self, key: str, value: Any) -> None:
        """
        Set a known setting and persist it.

        Args:
            key: One of DEFAULT_SETTINGS
            value: New value, of the same type as the default

        Raises:
            ConfigError: If the key is unknown or the value has the wrong type
        """
        if key not in self.DEFAULT_SETTINGS:
            known = ", ".join(sorted(self.DEFAULT_SETTINGS))
            raise ConfigError(f"unknown setting {key!r} (known: {known})")

        expected = type(self.DEFAULT_SETTINGS[key])
        # bool is an int subclass, so compare exact types
        if type(value) is not expected:
            raise ConfigError(
                f"{key} must be a {expected.__name__} (got {value!r})"
            )

        self.settings[key] = value
        self.save()
