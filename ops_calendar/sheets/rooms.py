import logging
from dataclasses import dataclass
from typing import Dict, List

from googleapiclient.errors import HttpError

from ops_calendar.config.utils import spreadsheet_id
from ops_calendar.sheets.sheet_client import build_sheets_service, get_sheet_data, rows_to_objects

logger = logging.getLogger(__name__)


@dataclass
class Room:
    room_id: str
    name: str
    property: str
    ical_url: str = ""


def room_from_record(record: Dict[str, str], property_name: str) -> Room:
    """Builds a Room from a header-keyed row (room_id, name, ical_url columns)."""
    return Room(
        room_id=str(record.get("room_id") or "").strip(),
        name=str(record.get("name") or "").strip(),
        property=property_name,
        ical_url=str(record.get("ical_url") or "").strip(),
    )


def load_rooms(config: dict, service=None) -> List[Room]:
    """
    Reads the rooms of every configured property, in config order.

    A property lists its rooms either in a spreadsheet tab ("rooms_tab")
    or inline ("rooms"). A tab that can't be read (usually because it
    hasn't been created yet) contributes no rooms.
    Raises SheetsConfigError if a tab is needed but the sheet isn't configured.
    """

    rooms = []
    sheet_id = spreadsheet_id(config)

    for prop in config.get("properties") or []:
        name = prop["name"]

        if "rooms" in prop:
            records = prop.get("rooms") or []
        else:
            tab = prop.get("rooms_tab")
            if not tab:
                logger.warning("Property %s has neither rooms nor rooms_tab", name)
                continue

            if service is None and sheet_id:
                service = build_sheets_service()

            try:
                records = rows_to_objects(get_sheet_data(tab, sheet_id, service=service))
            except HttpError as e:
                logger.warning("Could not read tab %s for %s: %s", tab, name, e)
                continue

        rooms.extend(room_from_record(r, name) for r in records)

    return rooms
