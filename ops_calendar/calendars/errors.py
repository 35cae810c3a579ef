class FeedError(Exception):
    """Base error for a single room's calendar feed."""


class FeedHTTPError(FeedError):
    """
    The feed URL answered with a non-success status code.
    The message is the short form shown to staff, e.g. "HTTP 404".
    """

    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"HTTP {status_code}")


class FeedTimeoutError(FeedError):
    """The whole download took longer than the allowed time."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Timed out after {timeout:g}s")


class InvalidCalendarError(FeedError):
    """The fetched body is not an iCal document."""

    def __init__(self, message: str = "Invalid iCal format"):
        super().__init__(message)
