import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from ops_calendar.sheets.rooms import Room

AIRBNB_FEED = (
    "BEGIN:VCALENDAR\r\n"
    "PRODID:-//Airbnb Inc//Hosting Calendar 1.0//EN\r\n"
    "VERSION:2.0\r\n"
    "BEGIN:VEVENT\r\n"
    "DTSTART;VALUE=DATE:20250610\r\n"
    "DTEND;VALUE=DATE:20250614\r\n"
    "SUMMARY:Reserved\r\n"
    "UID:1418fb94e984-f8d1a2b8f0c3@airbnb.com\r\n"
    "END:VEVENT\r\n"
    "BEGIN:VEVENT\r\n"
    "DTSTART;VALUE=DATE:20250701\r\n"
    "SUMMARY:Airbnb (Not available)\r\n"
    "END:VEVENT\r\n"
    "END:VCALENDAR\r\n"
)


@pytest.fixture
def airbnb_feed():
    return AIRBNB_FEED


@pytest.fixture
def make_room():
    def _make(room_id="R1", name="Hidden Gem", prop="riad", url="https://feeds.example.com/r1.ics"):
        return Room(room_id=room_id, name=name, property=prop, ical_url=url)
    return _make


class FeedHandler(BaseHTTPRequestHandler):
    """
    /ok      a complete feed
    /slow    the feed, one byte every 0.2 s
    /multi   300 with an empty body
    """

    def do_GET(self):
        body = AIRBNB_FEED.encode("utf-8")

        if self.path == "/multi":
            self.send_response(300)
            self.send_header("Content-Length", "0")
            self.end_headers()
            return

        self.send_response(200)
        self.send_header("Content-Type", "text/calendar; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()

        if self.path != "/slow":
            self.wfile.write(body)
            return

        try:
            for i in range(len(body)):
                self.wfile.write(body[i:i + 1])
                self.wfile.flush()
                time.sleep(0.2)
        except (BrokenPipeError, ConnectionResetError):
            return

    def log_message(self, format, *args):
        pass


@pytest.fixture
def feed_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), FeedHandler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    server.server_close()
