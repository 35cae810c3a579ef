import json
import logging
import os
from datetime import date

from google.cloud import storage
from icalendar import Calendar, Event

logger = logging.getLogger(__name__)


def upload_to_gcs(local_path, bucket_name, object_name):
    client = storage.Client()
    bucket = client.bucket(bucket_name)
    blob = bucket.blob(object_name)
    blob.upload_from_filename(local_path)
    return f"https://storage.googleapis.com/{bucket_name}/{object_name}"


def save_report_json(report: dict, path: str) -> str:
    """
    Writes the availability report to disk as pretty-printed JSON.
    """
    with open(path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2, ensure_ascii=False)
    return path


def build_blocked_calendar(property_name: str, rooms: list) -> Calendar:
    """
    One calendar for a property: an all-day event per blocked range,
    titled with the room name. DTEND stays exclusive, as in the source feeds.
    """

    cal = Calendar()
    cal.add("prodid", "-//Riad Ops//Room Availability//EN")
    cal.add("version", "2.0")

    # This sets the calendar name users see in Google/Apple Calendar
    cal.add("X-WR-CALNAME", f"{property_name} – Blocked Dates")

    for room in rooms:
        for i, booked in enumerate(room["blockedDates"]):
            try:
                start = date.fromisoformat(booked["start"])
                end = date.fromisoformat(booked["end"])
            except ValueError:
                logger.warning("Skipping unreadable range %s → %s for %s",
                               booked["start"], booked["end"], room["roomName"])
                continue

            event = Event()

            event.add("uid", f"{room['roomId']}-{booked['start']}-{i}@{property_name}")

            title = room["roomName"]
            if booked.get("summary"):
                title = f"{title} – {booked['summary']}"
            event.add("summary", title)

            event.add("dtstart", start)
            event.add("dtend", end)

            cal.add_component(event)

    return cal


def save_blocked_ics(report: dict, ics_dir: str) -> list:
    """
    Writes one <property>.ics per property found in the report.
    Rooms whose feed failed are skipped. Returns the written paths.
    """

    os.makedirs(ics_dir, exist_ok=True)

    by_property = {}
    for room in report.get("rooms", []):
        if room.get("error"):
            continue
        by_property.setdefault(room["property"], []).append(room)

    paths = []
    for property_name, rooms in by_property.items():
        cal = build_blocked_calendar(property_name, rooms)
        path = os.path.join(ics_dir, f"{property_name.replace(' ', '')}.ics")
        with open(path, "wb") as f:
            f.write(cal.to_ical())
        paths.append(path)

    return paths
