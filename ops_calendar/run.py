import logging
import os
import sys

from ops_calendar.config.utils import load_config
from ops_calendar.publish.publish_report import save_blocked_ics, save_report_json, upload_to_gcs
from ops_calendar.report import report_for_config


def print_room_line(room: dict):
    ranges = len(room["blockedDates"])
    if room.get("error"):
        print(f"  ✗ {room['roomName']} ({room['property']}): {room['error']}")
    elif room["icalUrl"] is None:
        print(f"  – {room['roomName']} ({room['property']}): no iCal URL")
    else:
        print(f"  ✓ {room['roomName']} ({room['property']}): {ranges} blocked ranges")


def main():
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config()
    report_cfg = config.get("report") or {}

    print(f"\n{'='*60}")
    print("Fetching room calendars")
    print(f"{'='*60}")

    report = report_for_config(config, allow_files=True)

    if not report["success"]:
        print(f"❌ Could not load rooms: {report['error']}")
        return 1

    for room in report["rooms"]:
        print_room_line(room)

    print(f"  → {report['roomsWithIcal']} of {report['totalRooms']} rooms have a feed")

    # -----------------------------------------------------------
    # OUTPUTS
    # -----------------------------------------------------------

    outputs = []

    output_path = report_cfg.get("output_path")
    if output_path:
        outputs.append(save_report_json(report, output_path))
        print(f"  → Saved JSON: {output_path}")

    ics_dir = report_cfg.get("ics_dir")
    if ics_dir:
        for path in save_blocked_ics(report, ics_dir):
            outputs.append(path)
            print(f"  → Saved ICS: {path}")

    bucket = report_cfg.get("bucket")
    if bucket:
        for path in outputs:
            public_url = upload_to_gcs(path, bucket, os.path.basename(path))
            print(f"  → Uploaded to: {public_url}")

    print(f"\n{'='*60}")
    print("All rooms processed.")
    print(f"{'='*60}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
