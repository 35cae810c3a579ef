"""Flask app serving the room availability report."""

from typing import Optional

from flask import Flask, jsonify

from ops_calendar.calendars.fetch_calendars import fetch_calendar
from ops_calendar.config.utils import load_config
from ops_calendar.report import report_for_config


def create_app(config: Optional[dict] = None, fetch=fetch_calendar, sheets_service=None) -> Flask:
    """Create and configure the Flask application."""

    app = Flask(__name__)
    app_config = config if config is not None else load_config()

    @app.get("/api/health")
    def health():
        return jsonify({"status": "ok"})

    @app.get("/api/ical-feeds")
    def ical_feeds():
        report = report_for_config(app_config, fetch=fetch, service=sheets_service)
        response = jsonify(report)
        response.status_code = 200 if report["success"] else 500
        response.headers["Cache-Control"] = "no-store"
        return response

    return app
