"""Constants used across the pi-remote package."""

from __future__ import annotations

from pathlib import Path

APP_NAME = "pi-remote"
DEFAULT_CONFIG_FILENAME = f"{APP_NAME}.cfg"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / APP_NAME / DEFAULT_CONFIG_FILENAME

DEFAULT_SERVER_HOST = "192.168.29.17"
DEFAULT_SERVER_PORT = 5000
DEFAULT_SERVER_URL = f"http://{DEFAULT_SERVER_HOST}:{DEFAULT_SERVER_PORT}"

DEFAULT_REQUEST_TIMEOUT_SECONDS = 10.0
DEFAULT_POLL_INTERVAL_SECONDS = 5.0

SYSTEM_INFO_PATH = "/system_info"

DEFAULT_SHARE_LINKS = {
    "dropbox": "https://www.dropbox.com",
    "github": "https://github.com",
}
