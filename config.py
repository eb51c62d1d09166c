"""
Bloxify Server Configuration Loader
Loads values from the environment (.env) and settings.json via the settings manager.
"""
import os
import sys
from pathlib import Path
from dotenv import load_dotenv

from settings import settings

# ==========================================
# Path Configuration
# ==========================================
if getattr(sys, 'frozen', False):
    ROOT_DIR = Path(sys.executable).parent
else:
    ROOT_DIR = Path(__file__).parent

# ==========================================
# Version
# ==========================================
VERSION = "0.1.0"
SERVER_NAME = f"bloxify-server v{VERSION}"

env_file = ROOT_DIR / '.env'
if env_file.exists():
    load_dotenv(env_file)

# Helper to prefer Env Var > Settings JSON > Default
def conf(key, default=None):
    # 1. Check Env Var (Highest Priority)
    env_val = os.getenv(key.upper().replace('.', '_'))
    if env_val is not None:
        return env_val

    # 2. Check Settings JSON (or schema default)
    json_val = settings.get(key)
    if json_val is not None:
        return json_val

    # 3. Default
    return default

def as_bool(value) -> bool:
    """Env vars arrive as strings, settings.json values as real booleans."""
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes', 'on')
    return bool(value)

def as_optional_float(value):
    if value in (None, ""):
        return None
    return float(value)

# ==========================================
# EXPORTED CONFIG DICTS
# ==========================================

DEBUG = {
    "log_file": conf("debug.log_file", "bloxify.log"),
    "log_level": conf("debug.log_level", "INFO"),
    "log_to_console": as_bool(conf("debug.log_to_console", True)),
    "log_detailed": as_bool(conf("debug.log_detailed", False)),
    "log_rotation": {
        "max_bytes": int(conf("debug.log_rotation.max_bytes", 1048576)),
        "backup_count": int(conf("debug.log_rotation.backup_count", 10))
    }
}

SERVER = {
    "name": SERVER_NAME,
    "port": int(conf("server.port", 52100)),
    "host": conf("server.host", "127.0.0.1"),
}

# Secrets are read from the environment only and are not validated here;
# a missing value surfaces as an AuthRefreshError on the first token refresh.
SPOTIFY = {
    "client_id": os.getenv("SPOTIFY_CLIENT_ID", ""),
    "client_secret": os.getenv("SPOTIFY_CLIENT_SECRET", ""),
    "refresh_token": os.getenv("SPOTIFY_REFRESH_TOKEN", ""),
    "redirect_uri": conf("spotify.redirect_uri", "http://127.0.0.1:52100/callback"),
    "token_url": conf("spotify.token_url", "https://accounts.spotify.com/api/token"),
    "scope": [
        "user-read-private",
        "user-read-playback-state",
        "user-modify-playback-state",
    ],
    "ensure_token_on_controls": as_bool(conf("spotify.ensure_token_on_controls", False)),
}

ALBUM_ART = {
    "resolution": int(conf("album_art.resolution", 1080)),
    "download_timeout": as_optional_float(conf("album_art.download_timeout", None)),
}
