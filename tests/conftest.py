"""
Shared pytest fixtures for gpx_navigator tests.
"""

import sys
from pathlib import Path
from typing import List

import pytest

# Add src/ to path so tests run without an install
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from gpx_navigator.models import PermissionState  # noqa: E402


# ---------------------------------------------------------------------------
# GPX documents
# ---------------------------------------------------------------------------

TRACK_AND_ROUTE_GPX = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">
  <metadata><name>Morning loop</name></metadata>
  <trk>
    <name>Track name</name>
    <trkseg>
      <trkpt lat="51.5074" lon="-0.1278"><ele>11</ele></trkpt>
      <trkpt lat="51.5080" lon="-0.1270"><ele>12</ele></trkpt>
      <trkpt lat="51.5090" lon="-0.1260"><ele>13</ele></trkpt>
    </trkseg>
    <trkseg>
      <trkpt lat="10.0" lon="10.0"/>
    </trkseg>
  </trk>
  <rte>
    <name>Route name</name>
    <rtept lat="48.8566" lon="2.3522"/>
    <rtept lat="48.8600" lon="2.3600"/>
  </rte>
</gpx>
"""

ROUTE_ONLY_GPX = """<?xml version="1.0"?>
<gpx version="1.1" creator="test">
  <rte>
    <name>Planned</name>
    <rtept lat="48.8566" lon="2.3522"/>
    <rtept lat="48.8600" lon="2.3600"/>
    <rtept lat="48.8650" lon="2.3700"/>
  </rte>
</gpx>
"""

EMPTY_GPX = """<?xml version="1.0"?>
<gpx version="1.1" creator="test"><metadata><name>Nothing</name></metadata></gpx>
"""


@pytest.fixture
def track_and_route_gpx() -> str:
    return TRACK_AND_ROUTE_GPX


@pytest.fixture
def route_only_gpx() -> str:
    return ROUTE_ONLY_GPX


@pytest.fixture
def empty_gpx() -> str:
    return EMPTY_GPX


# ---------------------------------------------------------------------------
# Collaborator fakes
# ---------------------------------------------------------------------------

class FakeSubscription:
    def __init__(self, options, on_fix, on_error) -> None:
        self.options = options
        self.on_fix = on_fix
        self.on_error = on_error
        self.remove_calls = 0

    @property
    def removed(self) -> bool:
        return self.remove_calls > 0

    def remove(self) -> None:
        self.remove_calls += 1


class FakeLocation:
    """LocationProvider whose answers and fixes are driven by the test."""

    def __init__(self, services_on: bool = True, permission: PermissionState = PermissionState.GRANTED) -> None:
        self.services_on = services_on
        self.permission = permission
        self.watch_error = None
        self.calls: List[str] = []
        self.subscriptions: List[FakeSubscription] = []

    async def services_enabled(self) -> bool:
        self.calls.append("services")
        return self.services_on

    async def get_permission(self) -> PermissionState:
        self.calls.append("get_permission")
        return self.permission

    async def request_permission(self) -> PermissionState:
        self.calls.append("request_permission")
        return self.permission

    async def watch_position(self, options, on_fix, on_error) -> FakeSubscription:
        self.calls.append("watch")
        if self.watch_error is not None:
            raise self.watch_error
        sub = FakeSubscription(options, on_fix, on_error)
        self.subscriptions.append(sub)
        return sub

    @property
    def latest(self) -> FakeSubscription:
        return self.subscriptions[-1]


class RecordingMap:
    def __init__(self) -> None:
        self.cameras = []
        self.regions = []

    def animate_camera(self, command) -> None:
        self.cameras.append(command)

    def animate_to_region(self, region, duration_ms) -> None:
        self.regions.append((region, duration_ms))


class FakePicker:
    def __init__(self, path=None, error=None) -> None:
        self.path = path
        self.error = error

    async def pick_document(self):
        if self.error is not None:
            raise self.error
        return self.path


@pytest.fixture
def make_picker():
    return FakePicker


@pytest.fixture
def location() -> FakeLocation:
    return FakeLocation()


@pytest.fixture
def map_surface() -> RecordingMap:
    return RecordingMap()
