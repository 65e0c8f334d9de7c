"""
Settings Manager for TidyDock
Manages application settings stored in JSON file
"""

import json
import os
import logging
from typing import Any, Dict, Optional

from .docker_api.transport import DEFAULT_TIMEOUT, default_socket_path

logger = logging.getLogger(__name__)


class SettingsManager:
    """Manager for application settings"""

    DEFAULTS: Dict[str, Any] = {
        'docker_socket_path': '',  # empty: auto-detect
        'request_timeout': DEFAULT_TIMEOUT,
        'log_level': 'INFO',
    }

    # User settings file location
    @staticmethod
    def get_user_settings_path() -> str:
        """Get path to user settings file"""
        if os.name == 'nt':  # Windows
            base_dir = os.environ.get('APPDATA', os.path.expanduser('~'))
            config_dir = os.path.join(base_dir, 'tidydock')
        else:  # macOS, Linux
            config_dir = os.path.join(
                os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config')),
                'tidydock'
            )
        return os.path.join(config_dir, 'settings.json')

    def __init__(self, settings_file: Optional[str] = None):
        """
        Initialize settings manager

        Args:
            settings_file: Settings file path (default: per-user config dir)
        """
        self.settings_file = settings_file or self.get_user_settings_path()
        self.settings: Dict[str, Any] = {}

        # Load settings
        self.load()

    def load(self):
        """Load settings from user file"""
        self.settings = self.DEFAULTS.copy()
        if not os.path.exists(self.settings_file):
            logger.debug(f"No settings file at {self.settings_file}, using defaults")
            return

        try:
            with open(self.settings_file, 'r', encoding='utf-8') as f:
                loaded_settings = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error loading settings from {self.settings_file}: {e}")
            return

        if not isinstance(loaded_settings, dict):
            logger.error(f"Ignoring settings file {self.settings_file}: expected a JSON object")
            return

        # Merge with defaults (user settings override defaults)
        self.settings.update(loaded_settings)
        logger.info(f"Settings loaded from {self.settings_file}")

    def save(self) -> bool:
        """Save settings to file"""
        try:
            os.makedirs(os.path.dirname(self.settings_file) or '.', exist_ok=True)
            with open(self.settings_file, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, indent=4, ensure_ascii=False)

            logger.info(f"Settings saved to {self.settings_file}")
            return True

        except OSError as e:
            logger.error(f"Error saving settings: {e}")
            return False

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get setting value

        Args:
            key: Setting key
            default: Default value if key not found

        Returns:
            Setting value
        """
        return self.settings.get(key, default)

    def set(self, key: str, value: Any, save: bool = True):
        """
        Set setting value

        Args:
            key: Setting key
            value: Setting value
            save: Save to file immediately
        """
        self.settings[key] = value

        if save:
            self.save()

    def socket_path(self) -> str:
        """Configured socket path, or the auto-detected default"""
        return self.get('docker_socket_path') or default_socket_path()

    def request_timeout(self) -> float:
        """Per-request deadline in seconds"""
        try:
            timeout = float(self.get('request_timeout', DEFAULT_TIMEOUT))
        except (TypeError, ValueError):
            logger.warning(f"Invalid request_timeout {self.get('request_timeout')!r}, using {DEFAULT_TIMEOUT}")
            return DEFAULT_TIMEOUT
        return timeout if timeout > 0 else DEFAULT_TIMEOUT

    def get_all(self) -> Dict[str, Any]:
        """Get all settings"""
        return self.settings.copy()
