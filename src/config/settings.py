# src/config/settings.py

"""Central configuration for the watch_signal engine."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the watch_signal engine."""

    # --- changedetection.io ---
    CHANGEDETECTION_URL: str = os.getenv(
        "CHANGEDETECTION_URL", ""
    ).strip().rstrip("/")
    CHANGEDETECTION_API_KEY: str = os.getenv(
        "CHANGEDETECTION_API_KEY", ""
    ).strip()

    # --- HTTP ---
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    MAX_RETRIES: int = 3                # Retry count on transient failures
    REQUEST_DELAY: float = 1.0          # Base back-off between retries (secs)
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"

    # --- Extraction ---
    HISTORY_LIMIT: int = 10             # History entries fed to the engine
    NOTIFICATION_BODY_MAX: int = 1000   # Truncation for notification text
    ERROR_MESSAGE_MAX: int = 200        # Truncation for surfaced errors

    # --- Presentation ---
    SITE_ICON_SIZE: int = 128
    SITE_ICON_ENDPOINT: str = "https://www.google.com/s2/favicons"

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
