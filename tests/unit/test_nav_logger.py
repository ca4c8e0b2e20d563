"""
Unit tests for the drive session JSONL log.
"""

import asyncio
import json

import pytest

from gpx_navigator.models import LiveFix, NavigationMode
from gpx_navigator.nav_config import NavConfig
from gpx_navigator.nav_logger import NavLogger
from gpx_navigator.navigator import NavigationController


def _read(path):
    with open(path, encoding="utf-8") as f:
        return [json.loads(line) for line in f]


class TestNavLogger:

    @pytest.mark.unit
    def test_creates_log_dir(self, tmp_path):
        config = NavConfig(log_dir=str(tmp_path / "logs"))
        NavLogger(config)
        assert (tmp_path / "logs").is_dir()

    @pytest.mark.unit
    def test_appends_events(self, tmp_path):
        log = NavLogger(NavConfig(log_dir=str(tmp_path)))
        log.log_event("start", NavigationMode.DRIVE)
        log.log_event("fix", NavigationMode.DRIVE, fix=LiveFix(1.5, 2.5, 90.0, 3.0))

        entries = _read(log.filepath)
        assert [e["event"] for e in entries] == ["start", "fix"]
        assert entries[1]["lat"] == 1.5
        assert entries[1]["speed_ms"] == 3.0
        assert "lat" not in entries[0]

    @pytest.mark.unit
    def test_write_failure_is_logged_not_raised(self, tmp_path, caplog):
        log = NavLogger(NavConfig(log_dir=str(tmp_path)))
        log.config.log_dir = str(tmp_path / "missing" / "dir")
        log.log_event("stop", NavigationMode.BROWSE)
        assert "Failed to write event log" in caplog.text

    @pytest.mark.unit
    def test_controller_records_session(self, tmp_path, location, track_and_route_gpx):
        session = NavLogger(NavConfig(log_dir=str(tmp_path)))
        nav = NavigationController(location, session_log=session)
        nav.load_route_text(track_and_route_gpx)

        asyncio.run(nav.start_navigation())
        location.latest.on_fix(LiveFix(51.5, -0.1, speed_meters_per_second=4.0))
        nav.stop_navigation()

        entries = _read(session.filepath)
        assert [e["event"] for e in entries] == ["start", "fix", "stop"]
        assert entries[0]["mode"] == "drive"
        assert entries[-1]["mode"] == "browse"
