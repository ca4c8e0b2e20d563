"""
Unit tests for the replay location source, alone and driving the controller.
"""

import asyncio

import pytest

from gpx_navigator.location import ReplayLocationSource, WatchOptions, calculate_bearing
from gpx_navigator.models import GeoPoint, LiveFix, NavigationMode, ParsedRoute, PermissionState
from gpx_navigator.navigator import NavigationController


@pytest.fixture
def square_route():
    return ParsedRoute(name="square", points=[
        GeoPoint(51.5074, -0.1278),
        GeoPoint(51.5174, -0.1278),   # north
        GeoPoint(51.5174, -0.1178),   # east
    ])


class TestBearing:

    @pytest.mark.unit
    def test_cardinal_directions(self):
        origin = GeoPoint(51.5074, -0.1278)
        assert calculate_bearing(origin, GeoPoint(51.5174, -0.1278)) == pytest.approx(0.0, abs=0.5)
        assert calculate_bearing(origin, GeoPoint(51.5074, -0.1178)) == pytest.approx(90.0, abs=0.5)
        assert calculate_bearing(origin, GeoPoint(51.4974, -0.1278)) == pytest.approx(180.0, abs=0.5)
        assert calculate_bearing(origin, GeoPoint(51.5074, -0.1378)) == pytest.approx(270.0, abs=0.5)


class TestReplayLocationSource:

    @pytest.mark.unit
    def test_from_route_derives_heading_and_speed(self, square_route):
        source = ReplayLocationSource.from_route(square_route, speed_ms=10.0)
        assert len(source.fixes) == 3
        assert source.fixes[0].heading_degrees == pytest.approx(0.0, abs=0.5)
        assert source.fixes[1].heading_degrees == pytest.approx(90.0, abs=0.5)
        assert source.fixes[2].heading_degrees is None
        assert all(f.speed_meters_per_second == 10.0 for f in source.fixes)

    @pytest.mark.unit
    def test_delivers_fixes_in_order(self, square_route):
        source = ReplayLocationSource.from_route(square_route, interval_s=0)
        fixes, errors = [], []

        async def scenario():
            await source.watch_position(WatchOptions(), fixes.append, errors.append)
            await asyncio.sleep(0.05)

        asyncio.run(scenario())

        assert [f.point for f in fixes] == square_route.points
        assert all(f.timestamp is not None for f in fixes)
        assert errors == []

    @pytest.mark.unit
    def test_remove_stops_delivery(self, square_route):
        source = ReplayLocationSource.from_route(square_route, interval_s=0)
        fixes = []

        async def scenario():
            handle = await source.watch_position(WatchOptions(), fixes.append, lambda e: None)
            handle.remove()
            handle.remove()
            await asyncio.sleep(0.05)

        asyncio.run(scenario())
        assert fixes == []

    @pytest.mark.unit
    def test_callback_failure_reported_as_error(self):
        source = ReplayLocationSource([LiveFix(1.0, 2.0)], interval_s=0)
        errors = []

        def explode(fix):
            raise ValueError("bad fix")

        async def scenario():
            await source.watch_position(WatchOptions(), explode, errors.append)
            await asyncio.sleep(0.05)

        asyncio.run(scenario())
        assert len(errors) == 1
        assert isinstance(errors[0], ValueError)


class TestReplayDrive:

    @pytest.mark.unit
    def test_full_drive_session(self, square_route, map_surface, route_only_gpx):
        source = ReplayLocationSource.from_route(square_route, speed_ms=5.0, interval_s=0)
        nav = NavigationController(source, map_surface=map_surface)
        nav.load_route_text(route_only_gpx)

        async def scenario():
            await nav.refresh_environment()
            ok, _ = await nav.start_navigation()
            assert ok
            await asyncio.sleep(0.05)
            nav.stop_navigation()

        asyncio.run(scenario())

        assert nav.mode == NavigationMode.BROWSE
        assert nav.permission == PermissionState.GRANTED
        assert nav.last_fix.point == square_route.points[-1]
        assert nav.speed_text == "18"
        # one start move plus one per fix
        assert len(map_surface.cameras) == 1 + len(square_route.points)

    @pytest.mark.unit
    def test_services_off_never_subscribes(self, square_route, route_only_gpx):
        source = ReplayLocationSource.from_route(square_route, interval_s=0, services_on=False)
        nav = NavigationController(source)
        nav.load_route_text(route_only_gpx)

        async def scenario():
            ok, _ = await nav.start_navigation()
            await asyncio.sleep(0.05)
            return ok

        assert asyncio.run(scenario()) is False
        assert nav.mode == NavigationMode.BROWSE
        assert nav.last_fix is None
