import os
from typing import Optional

import yaml
from dotenv import load_dotenv

from ops_calendar.calendars.fetch_calendars import DEFAULT_TIMEOUT

load_dotenv()

DEFAULT_MAX_WORKERS = 8


def load_config(path: Optional[str] = None) -> dict:
    """
    Loads YAML configuration file and returns a dictionary.

    Lookup order: explicit path, then $OPS_CALENDAR_CONFIG,
    then config.yaml next to the package.
    """

    path = path or os.getenv("OPS_CALENDAR_CONFIG")

    if not path:
        # Find directory containing THIS file (utils.py)
        base_dir = os.path.dirname(os.path.abspath(__file__))

        # Config file is one level above: ops_calendar/config.yaml
        path = os.path.abspath(os.path.join(base_dir, "..", "config.yaml"))

    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def spreadsheet_id(config: dict) -> Optional[str]:
    return config.get("spreadsheet_id") or os.getenv("GOOGLE_SPREADSHEET_ID")


def feed_settings(config: dict) -> dict:
    """
    Returns the feed fetching knobs with defaults filled in:
    {"timeout": float, "max_workers": int, "headers": dict}
    """

    feeds = config.get("feeds") or {}

    return {
        "timeout": float(feeds.get("timeout", DEFAULT_TIMEOUT)),
        "max_workers": int(feeds.get("max_workers", DEFAULT_MAX_WORKERS)),
        "headers": dict(feeds.get("headers") or {}),
    }
