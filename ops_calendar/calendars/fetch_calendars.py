import os
import threading
from typing import Optional

import requests

from ops_calendar.calendars.errors import FeedError, FeedHTTPError, FeedTimeoutError

DEFAULT_TIMEOUT = 10

# Some channels refuse requests that do not look like a browser
DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    "Accept": "text/calendar, text/plain, */*",
    "Cache-Control": "no-cache",
}


def _download(url: str, timeout: float, headers: dict) -> str:
    response = requests.get(url, headers=headers, timeout=timeout)
    if not 200 <= response.status_code < 300:
        raise FeedHTTPError(response.status_code)
    return response.text


def download_with_deadline(url: str, timeout: float, headers: dict) -> str:
    """
    Downloads a feed, giving up once `timeout` seconds of wall-clock time
    have passed. requests' own timeout only bounds each socket wait, so a
    feed trickling in byte by byte would otherwise never time out.

    The download runs on a daemon thread; past the deadline it is abandoned
    and FeedTimeoutError is raised.
    """

    outcome = {}

    def worker():
        try:
            outcome["text"] = _download(url, timeout, headers)
        except Exception as e:
            outcome["error"] = e

    thread = threading.Thread(target=worker, name=f"feed-download:{url}", daemon=True)
    thread.start()
    thread.join(timeout)

    if thread.is_alive():
        raise FeedTimeoutError(timeout)
    if "error" in outcome:
        raise outcome["error"]
    return outcome["text"]


def fetch_calendar(source: str, timeout: float = DEFAULT_TIMEOUT, headers: Optional[dict] = None,
                   allow_files: bool = False) -> str:
    """
    Fetches iCal data.
    - If 'source' is a URL (starts with http), download it.
    - If it's a file path and allow_files is set, read it from disk.
    Returns raw ICS text.

    Raises FeedHTTPError for a non-2xx status, FeedTimeoutError once the
    whole download takes longer than `timeout`, and lets requests'
    connection errors through.
    """

    # Case 1: URL mode
    if source.startswith("http://") or source.startswith("https://"):
        request_headers = dict(DEFAULT_HEADERS)
        if headers:
            request_headers.update(headers)

        return download_with_deadline(source, timeout, request_headers)

    # Sources typed into the spreadsheet must never reach the filesystem
    if not allow_files:
        raise FeedError("Unsupported iCal URL")

    # Case 2: Local file mode
    if os.path.exists(source):
        with open(source, "r", encoding="utf-8") as f:
            return f.read()

    raise FileNotFoundError(f"Could not fetch calendar from: {source}")
