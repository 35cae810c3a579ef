from functools import partial

from ops_calendar.calendars.availability import build_feed_report
from ops_calendar.calendars.fetch_calendars import fetch_calendar
from ops_calendar.config.utils import feed_settings
from ops_calendar.sheets.rooms import load_rooms


def report_for_config(config: dict, fetch=fetch_calendar, service=None, allow_files: bool = False) -> dict:
    """
    Availability report for every room the config points at.
    allow_files lets feeds be local paths; only the CLI turns it on.
    """
    settings = feed_settings(config)

    if allow_files:
        fetch = partial(fetch, allow_files=True)

    return build_feed_report(
        lambda: load_rooms(config, service=service),
        timeout=settings["timeout"],
        headers=settings["headers"],
        max_workers=settings["max_workers"],
        fetch=fetch,
    )
