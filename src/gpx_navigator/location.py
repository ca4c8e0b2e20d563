# location.py
# Collaborator boundary: location source, map surface and file picker.
# The controller only talks to these interfaces; a real UI, the replay
# simulator and the tests each provide their own implementation.

import asyncio
import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Sequence

from .models import CameraCommand, GeoPoint, LiveFix, MapRegion, PermissionState, ParsedRoute

logger = logging.getLogger(__name__)

FixCallback = Callable[[LiveFix], None]
ErrorCallback = Callable[[BaseException], None]


@dataclass(frozen=True)
class WatchOptions:
    """Cadence requested from the location source."""
    accuracy: str = "highest"
    time_interval_ms: int = 1000
    distance_interval_m: float = 1.0


# ---------------------------------------------------------------------------
# Interfaces
# ---------------------------------------------------------------------------

class PositionSubscription(Protocol):
    def remove(self) -> None:
        """Stop delivery. Safe to call more than once."""


class LocationProvider(Protocol):
    async def services_enabled(self) -> bool: ...

    async def get_permission(self) -> PermissionState:
        """Current foreground permission, without prompting the user."""

    async def request_permission(self) -> PermissionState:
        """Prompt for foreground permission if needed."""

    async def watch_position(
        self,
        options: WatchOptions,
        on_fix: FixCallback,
        on_error: ErrorCallback,
    ) -> PositionSubscription: ...


class MapSurface(Protocol):
    def animate_camera(self, command: CameraCommand) -> None: ...

    def animate_to_region(self, region: MapRegion, duration_ms: int) -> None: ...


class FilePicker(Protocol):
    async def pick_document(self) -> Optional[str]:
        """Path of the chosen document, or None if the user cancelled."""


# ---------------------------------------------------------------------------
# Replay source, feeds a fixed list of fixes on the event loop
# ---------------------------------------------------------------------------

def calculate_bearing(a: GeoPoint, b: GeoPoint) -> float:
    """Forward azimuth from a to b in degrees [0, 360)."""
    rlat1, rlon1 = math.radians(a.latitude), math.radians(a.longitude)
    rlat2, rlon2 = math.radians(b.latitude), math.radians(b.longitude)
    d_lon = rlon2 - rlon1
    y = math.sin(d_lon) * math.cos(rlat2)
    x = math.cos(rlat1) * math.sin(rlat2) - math.sin(rlat1) * math.cos(rlat2) * math.cos(d_lon)
    return (math.degrees(math.atan2(y, x)) + 360) % 360


class _ReplayHandle:
    def __init__(self, task: "asyncio.Task") -> None:
        self._task = task

    def remove(self) -> None:
        if not self._task.done():
            self._task.cancel()


class ReplayLocationSource:
    """
    LocationProvider that plays back a list of fixes.

    Usage:
        source = ReplayLocationSource.from_route(route, speed_ms=13.9)
        controller = NavigationController(source)

    Args:
        fixes:            Fixes delivered in order, one per interval.
        interval_s:       Seconds between fixes; overrides the watch options.
        services_on:      Value reported by services_enabled().
        permission:       Value reported by get/request_permission().
    """

    def __init__(
        self,
        fixes: Sequence[LiveFix],
        interval_s: Optional[float] = None,
        services_on: bool = True,
        permission: PermissionState = PermissionState.GRANTED,
    ) -> None:
        self.fixes: List[LiveFix] = list(fixes)
        self.interval_s = interval_s
        self.services_on = services_on
        self.permission = permission

    @classmethod
    def from_route(
        cls,
        route: ParsedRoute,
        speed_ms: float = 13.9,
        **kwargs,
    ) -> "ReplayLocationSource":
        """Drive along the route points, heading towards the next point."""
        fixes: List[LiveFix] = []
        pts = route.points
        for i, p in enumerate(pts):
            heading = calculate_bearing(p, pts[i + 1]) if i + 1 < len(pts) else None
            fixes.append(LiveFix(p.latitude, p.longitude, heading, speed_ms))
        return cls(fixes, **kwargs)

    async def services_enabled(self) -> bool:
        return self.services_on

    async def get_permission(self) -> PermissionState:
        return self.permission

    async def request_permission(self) -> PermissionState:
        return self.permission

    async def watch_position(
        self,
        options: WatchOptions,
        on_fix: FixCallback,
        on_error: ErrorCallback,
    ) -> _ReplayHandle:
        interval = self.interval_s
        if interval is None:
            interval = options.time_interval_ms / 1000.0
        task = asyncio.ensure_future(self._run(interval, on_fix, on_error))
        return _ReplayHandle(task)

    async def _run(self, interval: float, on_fix: FixCallback, on_error: ErrorCallback) -> None:
        try:
            for fix in self.fixes:
                await asyncio.sleep(interval)
                on_fix(LiveFix(
                    fix.latitude,
                    fix.longitude,
                    fix.heading_degrees,
                    fix.speed_meters_per_second,
                    fix.timestamp if fix.timestamp is not None else time.time(),
                ))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Replay source failed: {e}")
            on_error(e)
