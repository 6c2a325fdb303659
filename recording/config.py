"""
Recorder Configuration Handler

Manages the YAML preferences file (save path, limits, thresholds).
Provides defaults from config/settings.py and validation.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

import config.settings as settings


class RecorderConfig:
    """
    Recorder configuration with YAML file support.

    Reads from config/recorder.yaml if it exists, otherwise uses defaults
    from config/settings.py. The save path is the one value the UI changes
    at runtime (change_save_path), and set(..., save=True) persists it.

    Usage:
        config = RecorderConfig()
        save_root = config.save_root
        config.set("save_root", "/home/me/Movies")
    """

    # Default config file location
    DEFAULT_CONFIG_PATH = settings.RECORDER_CONFIG_FILE

    def __init__(self, config_path: Optional[Path] = None, persist: bool = True):
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML config file (None = use default)
            persist: If False, never read or write the file (tests)
        """
        self.logger = logging.getLogger(__name__)
        self.config_path = Path(config_path or self.DEFAULT_CONFIG_PATH)
        self.persist = persist

        # Load configuration (defaults + file overrides)
        self._config = self._load_config()

        self.logger.info(f"Recorder config loaded (file: {self.config_path if persist else 'none'})")

    def _get_defaults(self) -> Dict[str, Any]:
        """Get default configuration values from settings"""
        return {
            # Paths
            'save_root': str(settings.DEFAULT_SAVE_ROOT),
            'temp_root': str(settings.TEMP_ROOT),
            'output_label': settings.OUTPUT_LABEL,

            # Session limits
            'max_recording_duration': settings.MAX_RECORDING_DURATION,
            'flush_grace_seconds': settings.FLUSH_GRACE_SECONDS,

            # Disk space
            'disk_critical_bytes': settings.DISK_CRITICAL_BYTES,
            'disk_low_bytes': settings.DISK_LOW_BYTES,
            'disk_poll_interval': settings.DISK_POLL_INTERVAL,

            # Join
            'join_timeout_seconds': settings.JOIN_TIMEOUT_SECONDS,
        }

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file or use defaults"""
        # Start with defaults
        config = self._get_defaults()

        if self.persist and self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}

                # Merge file config with defaults (file overrides defaults)
                config.update(file_config)

                self.logger.info(f"Loaded config from {self.config_path}")

            except (OSError, yaml.YAMLError) as e:
                self.logger.warning(
                    f"Failed to load config from {self.config_path}: {e}. "
                    f"Using defaults."
                )

        # Validate configuration
        self._validate_config(config)

        return config

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """Validate configuration values"""
        if not config['output_label'] or '/' in config['output_label']:
            raise ValueError(f"Invalid output_label: {config['output_label']!r}")

        if config['max_recording_duration'] <= 0:
            raise ValueError("max_recording_duration must be positive")

        if config['disk_critical_bytes'] < 0:
            raise ValueError("disk_critical_bytes cannot be negative")

        if config['disk_poll_interval'] <= 0:
            raise ValueError("disk_poll_interval must be positive")

        if config['flush_grace_seconds'] < 0:
            raise ValueError("flush_grace_seconds cannot be negative")

        # Warning thresholds should be higher than minimums
        if config['disk_low_bytes'] < config['disk_critical_bytes']:
            self.logger.warning(
                "disk_low_bytes is less than disk_critical_bytes. "
                "This may cause unexpected behavior."
            )

    def _save_config(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Save configuration to YAML file"""
        if not self.persist:
            return

        if config is None:
            config = self._config

        try:
            # Create config directory if it doesn't exist
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

            # Write YAML file with nice formatting
            with open(self.config_path, 'w') as f:
                yaml.dump(
                    config,
                    f,
                    default_flow_style=False,
                    sort_keys=False,
                    indent=2
                )

            self.logger.info(f"Config saved to {self.config_path}")

        except OSError as e:
            self.logger.error(f"Failed to save config: {e}")

    # =========================================================================
    # PROPERTY ACCESSORS
    # =========================================================================
    # These provide type-safe access to config values

    @property
    def save_root(self) -> Path:
        """Folder recordings are saved under"""
        return Path(self._config['save_root']).expanduser()

    @property
    def temp_root(self) -> Path:
        """Parent of session working directories"""
        return Path(self._config['temp_root']).expanduser()

    @property
    def output_label(self) -> str:
        return self._config['output_label']

    @property
    def max_recording_duration(self) -> int:
        """Active seconds before a recording is stopped automatically"""
        return int(self._config['max_recording_duration'])

    @property
    def flush_grace_seconds(self) -> float:
        return float(self._config['flush_grace_seconds'])

    @property
    def disk_critical_bytes(self) -> int:
        return int(self._config['disk_critical_bytes'])

    @property
    def disk_low_bytes(self) -> int:
        return int(self._config['disk_low_bytes'])

    @property
    def disk_poll_interval(self) -> float:
        return float(self._config['disk_poll_interval'])

    @property
    def join_timeout_seconds(self) -> float:
        return float(self._config['join_timeout_seconds'])

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key.
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
        return f"RecorderConfig(path={self.config_path})"
