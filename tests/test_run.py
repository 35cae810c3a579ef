import json
from unittest.mock import patch

from ops_calendar import run


def test_main_writes_outputs_and_uploads(tmp_path, monkeypatch, airbnb_feed):
    feed = tmp_path / "hidden-gem.ics"
    feed.write_text(airbnb_feed, encoding="utf-8")
    output = tmp_path / "availability.json"

    config = {
        "properties": [{"name": "riad", "rooms": [{"room_id": "R1", "name": "Hidden Gem", "ical_url": str(feed)}]}],
        "report": {"output_path": str(output), "ics_dir": str(tmp_path / "ics"), "bucket": "riad-ops-bucket"},
    }
    monkeypatch.setattr(run, "load_config", lambda: config)

    with patch.object(run, "upload_to_gcs", return_value="https://storage.googleapis.com/x") as upload:
        assert run.main() == 0

    report = json.loads(output.read_text(encoding="utf-8"))
    assert report["rooms"][0]["blockedDates"][0]["start"] == "2025-06-10"
    assert (tmp_path / "ics" / "riad.ics").exists()
    assert [c.args[1] for c in upload.call_args_list] == ["riad-ops-bucket", "riad-ops-bucket"]


def test_main_fails_without_rooms(monkeypatch, capsys):
    monkeypatch.delenv("GOOGLE_SPREADSHEET_ID", raising=False)
    monkeypatch.setattr(run, "load_config", lambda: {"properties": [{"name": "riad", "rooms_tab": "Rooms"}]})

    assert run.main() == 1
    assert "Could not load rooms" in capsys.readouterr().out
