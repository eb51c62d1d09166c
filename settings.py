"""
Bloxify Settings Manager
Handles optional configuration overrides from settings.json
"""

import json
import shutil
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass
from logging_config import get_logger

logger = get_logger(__name__)

# Allow overriding the settings file location via environment variable
if getattr(sys, 'frozen', False):
    ROOT_DIR = Path(sys.executable).parent
else:
    ROOT_DIR = Path(__file__).parent

SETTINGS_FILE = Path(os.getenv("BLOXIFY_SETTINGS_FILE", str(ROOT_DIR / "settings.json")))

@dataclass
class Setting:
    """Represents a single configurable setting"""
    name: str
    type: type
    default: Any
    category: Optional[str] = None
    description: Optional[str] = None

    def validate_and_convert(self, value: Any) -> Any:
        if value is None:
            return self.default
        try:
            if self.type == bool and isinstance(value, str):
                return value.lower() in ('true', '1', 'yes', 'on')
            return self.type(value)
        except (ValueError, TypeError):
            return self.default

class SettingsManager:
    def __init__(self, settings_file: Path = SETTINGS_FILE):
        self._settings_file = Path(settings_file)
        self._settings: Dict[str, Any] = {}

        # Define all available settings
        self._definitions = {
            # Debug
            "debug.log_file": Setting("Log File", str, "bloxify.log", "Debug", "Log file name"),
            "debug.log_level": Setting("Log Level", str, "INFO", "Debug", "Console logging verbosity"),
            "debug.log_to_console": Setting("Log to Console", bool, True, "Debug", "Print logs to terminal"),
            "debug.log_detailed": Setting("Detailed Logging", bool, False, "Debug", "DEBUG level in the log file"),
            "debug.log_rotation.max_bytes": Setting("Max Log Size", int, 1048576, "Debug", "Max log file size (bytes)"),
            "debug.log_rotation.backup_count": Setting("Log Backups", int, 10, "Debug", "Number of backups to keep"),

            # Server
            "server.port": Setting("Port", int, 52100, "Server", "Server port"),
            "server.host": Setting("Host", str, "127.0.0.1", "Server", "Bind address"),

            # Spotify API
            "spotify.redirect_uri": Setting("Redirect URI", str, "http://127.0.0.1:52100/callback", "Spotify API", "Redirect URI registered for the client"),
            "spotify.token_url": Setting("Token URL", str, "https://accounts.spotify.com/api/token", "Spotify API", "Authorization server token endpoint"),
            "spotify.ensure_token_on_controls": Setting("Ensure Token On Controls", bool, False, "Spotify API", "Refresh a missing token before playback commands"),

            # Album Art
            "album_art.resolution": Setting("Resolution", int, 1080, "Album Art", "Side of the square pixel grid"),
            "album_art.download_timeout": Setting("Timeout", float, None, "Album Art", "Cover download timeout (s), blank = none"),
        }

        self.load_settings()

    def load_settings(self) -> None:
        """Load settings from JSON, fall back to defaults"""
        self._settings = {}

        # 1. Load defaults first
        for key, definition in self._definitions.items():
            self._settings[key] = definition.default

        # 2. Load from JSON if exists
        if not self._settings_file.exists():
            return

        try:
            with open(self._settings_file, 'r') as f:
                saved = json.load(f)
            for key, val in saved.items():
                if key in self._definitions:
                    self._settings[key] = self._definitions[key].validate_and_convert(val)
                else:
                    logger.debug(f"Ignoring unknown setting '{key}'")
        except (OSError, ValueError, AttributeError) as e:
            logger.error(f"Failed to load {self._settings_file.name}: {e} - using defaults")
            backup_path = self._settings_file.with_suffix('.json.corrupted')
            try:
                shutil.copy2(self._settings_file, backup_path)
                logger.info(f"Backed up corrupted settings to {backup_path}")
            except OSError as copy_error:
                logger.warning(f"Could not back up corrupted settings: {copy_error}")
            for key, definition in self._definitions.items():
                self._settings[key] = definition.default

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a setting value.
        Priority:
        1. Loaded value (from JSON or Schema Default)
        2. Provided 'default' argument (if key unknown)
        """
        if key in self._settings:
            return self._settings[key]
        return default

    def get_all(self) -> Dict[str, Any]:
        return dict(self._settings)

settings = SettingsManager()
