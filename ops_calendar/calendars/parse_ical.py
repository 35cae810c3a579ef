import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List

from ops_calendar.calendars.errors import InvalidCalendarError

CALENDAR_MARKER = "BEGIN:VCALENDAR"
BEGIN_EVENT = "BEGIN:VEVENT"
END_EVENT = "END:VEVENT"

_DATE_DIGITS = re.compile(r"(\d{4})(\d{2})(\d{2})")


@dataclass
class CalendarEvent:
    start: str = ""
    end: str = ""
    summary: str = ""


@dataclass
class BookedRange:
    start: str
    end: str
    summary: str = ""

    def to_dict(self) -> dict:
        return {"start": self.start, "end": self.end, "summary": self.summary}


def unfold_lines(ical_text: str) -> List[str]:
    """
    Joins folded lines back into logical lines.
    A physical line starting with a space or tab continues the line before it:
    that one whitespace character is dropped and the rest is appended as-is.
    """

    physical = re.split(r"\r?\n", ical_text)
    logical = []

    i = 0
    while i < len(physical):
        line = physical[i].strip()

        # Swallow every continuation that follows
        while i + 1 < len(physical) and physical[i + 1][:1] in (" ", "\t"):
            i += 1
            line += physical[i][1:].rstrip("\r")

        logical.append(line)
        i += 1

    return logical


def _split_property(line: str):
    """
    Splits "NAME;PARAM=x:value" into ("NAME", "value").
    Colons inside double-quoted parameter values (ALTREP="http://...")
    are not separators. A line without a separator has an empty value.

    Names are upper-cased: iCal property names are case-insensitive, so
    "dtstart:" matches like "DTSTART:". Begin/end markers stay exact.
    """
    in_quotes = False
    for i, ch in enumerate(line):
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == ":" and not in_quotes:
            head, value = line[:i], line[i + 1:]
            break
    else:
        head, value = line, ""

    name = head.split(";", 1)[0].upper()
    return name, value


def _extract_date(value: str) -> str:
    """
    First run of 8 digits read as YYYYMMDD, returned as YYYY-MM-DD.
    Works for both "20250610" and "20250610T140000Z".
    """
    match = _DATE_DIGITS.search(value)
    if not match:
        return ""
    return f"{match.group(1)}-{match.group(2)}-{match.group(3)}"


def extract_events(lines: Iterable[str]) -> List[CalendarEvent]:
    """
    Walks logical lines and collects the VEVENT blocks that have a start date.
    Blocks closed without a DTSTART are dropped.
    """

    events = []
    in_event = False
    current = CalendarEvent()

    for line in lines:
        if line == BEGIN_EVENT:
            in_event = True
            current = CalendarEvent()
            continue

        if line == END_EVENT:
            if in_event and current.start:
                events.append(current)
            in_event = False
            continue

        if not in_event:
            continue

        name, value = _split_property(line)

        if name == "DTSTART":
            current.start = _extract_date(value)
        elif name == "DTEND":
            current.end = _extract_date(value)
        elif name == "SUMMARY":
            current.summary = value.strip()

    return events


def next_day(iso_date: str) -> str:
    """'2025-02-28' -> '2025-03-01'. Raises ValueError on an impossible date."""
    return (date.fromisoformat(iso_date) + timedelta(days=1)).isoformat()


def normalize_ranges(events: Iterable[CalendarEvent]) -> List[BookedRange]:
    """
    Turns extracted events into booked ranges, in document order.
    An event with no end blocks a single night (end = start + 1 day).
    Duplicates and overlaps are kept.
    """

    ranges = []
    for event in events:
        if not event.start:
            continue
        end = event.end or next_day(event.start)
        ranges.append(BookedRange(start=event.start, end=end, summary=event.summary))
    return ranges


def parse_ical(ical_text: str) -> List[BookedRange]:
    """
    Parses raw iCal text and extracts the booked date ranges.
    Raises InvalidCalendarError if the text is not a calendar at all.
    """

    if CALENDAR_MARKER not in ical_text:
        raise InvalidCalendarError()

    return normalize_ranges(extract_events(unfold_lines(ical_text)))
