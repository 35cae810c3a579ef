import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ops_calendar.calendars.fetch_calendars import DEFAULT_TIMEOUT, fetch_calendar
from ops_calendar.calendars.parse_ical import BookedRange, parse_ical

logger = logging.getLogger(__name__)


@dataclass
class RoomAvailability:
    room_id: str
    room_name: str
    property: str
    ical_url: Optional[str]
    blocked_dates: List[BookedRange] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "roomId": self.room_id,
            "roomName": self.room_name,
            "property": self.property,
            "icalUrl": self.ical_url,
            "blockedDates": [r.to_dict() for r in self.blocked_dates],
        }
        if self.error is not None:
            data["error"] = self.error
        return data


def fetch_room_availability(room, timeout: float = DEFAULT_TIMEOUT, headers: Optional[dict] = None,
                            fetch: Callable = fetch_calendar) -> RoomAvailability:
    """
    Fetches and parses one room's feed.
    Never raises: whatever goes wrong ends up in the result's error field.
    """

    result = RoomAvailability(
        room_id=room.room_id,
        room_name=room.name,
        property=room.property,
        ical_url=room.ical_url or None,
    )

    if not room.ical_url:
        return result

    try:
        raw_ical = fetch(room.ical_url, timeout=timeout, headers=headers)
        result.blocked_dates = parse_ical(raw_ical)
    except Exception as e:
        result.error = str(e) or type(e).__name__
        logger.warning("Feed failed for %s (%s): %s", room.name, room.property, result.error)

    return result


def fetch_all_rooms(rooms, timeout: float = DEFAULT_TIMEOUT, headers: Optional[dict] = None,
                    max_workers: int = 8, fetch: Callable = fetch_calendar) -> List[RoomAvailability]:
    """
    Fetches every room's feed in parallel and waits for all of them.

    Rooms with a feed URL come first, then rooms without one, each group in
    the order given. One slow or broken feed never affects another room.
    """

    with_feed = [r for r in rooms if r.ical_url]
    without_feed = [r for r in rooms if not r.ical_url]

    results = []
    if with_feed:
        workers = max(1, min(max_workers, len(with_feed)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(fetch_room_availability, room, timeout, headers, fetch)
                for room in with_feed
            ]
            results = [f.result() for f in futures]

    results.extend(fetch_room_availability(room) for room in without_feed)
    return results


def build_feed_report(load_rooms: Callable[[], list], timeout: float = DEFAULT_TIMEOUT,
                      headers: Optional[dict] = None, max_workers: int = 8,
                      fetch: Callable = fetch_calendar) -> dict:
    """
    Builds the availability report for every room.

    Only a failure to load the room list fails the whole report;
    feed problems are reported per room.
    """

    try:
        rooms = load_rooms()
    except Exception as e:
        logger.error("Error loading rooms: %s", e)
        return {"success": False, "error": str(e) or type(e).__name__, "rooms": []}

    results = fetch_all_rooms(rooms, timeout=timeout, headers=headers, max_workers=max_workers, fetch=fetch)
    rooms_with_ical = sum(1 for r in rooms if r.ical_url)
    failed = sum(1 for r in results if r.error)

    logger.info("Fetched %d feeds for %d rooms (%d failed)", rooms_with_ical, len(results), failed)

    return {
        "success": True,
        "rooms": [r.to_dict() for r in results],
        "totalRooms": len(results),
        "roomsWithIcal": rooms_with_ical,
        "fetchedAt": datetime.now(timezone.utc).isoformat(),
    }
