"""
Storage Configuration Handler

Manages YAML configuration file for storage settings.
Provides defaults and validation.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from config.settings import (
    DB_TIMEOUT_SECONDS,
    METADATA_DB_NAME,
    MIN_CLIP_DURATION_SECONDS,
    STORAGE_BASE_PATH,
    STORAGE_CONFIG_FILE,
)


class StorageConfig:
    """
    Storage configuration with YAML file support.

    Reads from config/storage.yaml if it exists,
    otherwise uses defaults from config/settings.py.

    Usage:
        config = StorageConfig()
        base_path = config.storage_base_path
        db_path = config.db_path
    """

    # Default config file location
    DEFAULT_CONFIG_PATH = STORAGE_CONFIG_FILE

    def __init__(self, config_path: Optional[Path] = None, save_defaults: bool = False):
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML config file (None = use default)
            save_defaults: Write a default config file when none exists
        """
        self.logger = logging.getLogger(__name__)
        self.config_path = Path(config_path or self.DEFAULT_CONFIG_PATH)
        self._save_defaults = save_defaults

        # Load configuration (defaults + file overrides)
        self._config = self._load_config()

        self.logger.info(f"Storage config loaded from {self.config_path}")

    def _get_defaults(self) -> Dict[str, Any]:
        """Get default configuration values from settings"""
        return {
            # Paths
            "storage_base_path": str(STORAGE_BASE_PATH),
            "db_name": METADATA_DB_NAME,

            # Database
            "db_timeout_seconds": DB_TIMEOUT_SECONDS,

            # Capture
            "min_clip_duration_seconds": MIN_CLIP_DURATION_SECONDS,
        }

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file or use defaults"""
        # Start with defaults
        config = self._get_defaults()

        # Try to load from file
        if self.config_path.exists():
            try:
                with open(self.config_path, "r") as f:
                    file_config = yaml.safe_load(f) or {}

                # Merge file config with defaults (file overrides defaults)
                config.update(file_config)

                self.logger.info(f"Loaded config from {self.config_path}")

            except (OSError, yaml.YAMLError) as e:
                self.logger.warning(
                    f"Failed to load config from {self.config_path}: {e}. "
                    f"Using defaults."
                )
        elif self._save_defaults:
            self.logger.info(
                f"Config file not found at {self.config_path}. "
                f"Creating default config file..."
            )
            self._save_config(config)

        # Validate configuration
        self._validate_config(config)

        return config

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """Validate configuration values"""
        if not str(config["db_name"]).strip():
            raise ValueError("db_name cannot be empty")

        if config["db_timeout_seconds"] <= 0:
            raise ValueError("db_timeout_seconds must be positive")

        if config["min_clip_duration_seconds"] < 0:
            raise ValueError("min_clip_duration_seconds cannot be negative")

    def _save_config(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Save configuration to YAML file"""
        if config is None:
            config = self._config

        try:
            # Create config directory if it doesn't exist
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

            # Write YAML file with nice formatting
            with open(self.config_path, "w") as f:
                yaml.dump(
                    config,
                    f,
                    default_flow_style=False,
                    sort_keys=False,
                    indent=2,
                )

            self.logger.info(f"Config saved to {self.config_path}")

        except OSError as e:
            self.logger.error(f"Failed to save config: {e}")

    # =========================================================================
    # PROPERTY ACCESSORS
    # =========================================================================
    # These provide type-safe access to config values

    @property
    def storage_base_path(self) -> Path:
        """Get storage base directory as Path object"""
        return Path(self._config["storage_base_path"])

    @property
    def db_path(self) -> Path:
        """Full path of the SQLite database"""
        return self.storage_base_path / self._config["db_name"]

    @property
    def db_timeout_seconds(self) -> float:
        """How long SQLite waits on a locked database"""
        return float(self._config["db_timeout_seconds"])

    @property
    def min_clip_duration_seconds(self) -> float:
        """Recordings shorter than this are discarded"""
        return float(self._config["min_clip_duration_seconds"])

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value
        """
        return self._config.get(key, default)

    def set(self, key: str, value: Any, save: bool = True) -> None:
        """
        Set configuration value.

        Args:
            key: Configuration key
            value: New value
            save: If True, save to file immediately
        """
        self._config[key] = value

        if save:
            self._save_config()

    def reload(self) -> None:
        """Reload configuration from file"""
        self._config = self._load_config()
        self.logger.info("Configuration reloaded")

    def to_dict(self) -> Dict[str, Any]:
        """Get configuration as dictionary"""
        return self._config.copy()

    def __repr__(self) -> str:
        """Human-readable representation"""
        return f"StorageConfig(path={self.config_path})"
