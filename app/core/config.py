"""Application configuration. Load from environment."""

import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_TOUCH_DROP_THRESHOLD = 20.0


def get_database_url() -> str:
    """Return DATABASE_URL from environment. Raises if missing."""
    url = os.environ.get("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL environment variable is required")
    return url


def get_formation_api_url() -> str:
    """Return FORMATION_API_URL for the editor client. Raises if missing."""
    url = os.environ.get("FORMATION_API_URL")
    if not url:
        raise RuntimeError("FORMATION_API_URL environment variable is required for the formation editor")
    return url.rstrip("/")


def get_log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").upper()


def get_touch_drop_threshold() -> float:
    """Max distance (0-100 field units) between a touch release and a position."""
    raw = os.environ.get("TOUCH_DROP_THRESHOLD")
    if not raw:
        return DEFAULT_TOUCH_DROP_THRESHOLD
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"TOUCH_DROP_THRESHOLD must be a number, got {raw!r}")
