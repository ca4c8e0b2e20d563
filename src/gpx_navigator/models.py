# models.py
# Shared data structures and enums used across all modules.

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


# ---------------------------------------------------------------------------
# Coordinates and routes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GeoPoint:
    """Immutable geographic coordinate in decimal degrees."""
    latitude: float
    longitude: float


@dataclass
class ParsedRoute:
    """Result of parsing one GPX document. Point order defines the drawn path."""
    name: Optional[str] = None
    points: List[GeoPoint] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.points

    @property
    def start(self) -> Optional[GeoPoint]:
        """First point of the route, used for the start marker."""
        return self.points[0] if self.points else None


@dataclass(frozen=True)
class MapRegion:
    """Map viewport: center plus span on each axis, in degrees."""
    center_latitude: float
    center_longitude: float
    latitude_span: float
    longitude_span: float

    @property
    def center(self) -> GeoPoint:
        return GeoPoint(self.center_latitude, self.center_longitude)


# ---------------------------------------------------------------------------
# Navigation state
# ---------------------------------------------------------------------------

class NavigationMode(Enum):
    BROWSE = "browse"
    DRIVE  = "drive"


class PermissionState(Enum):
    UNKNOWN = "unknown"
    GRANTED = "granted"
    DENIED  = "denied"


@dataclass(frozen=True)
class LiveFix:
    """A single position report from the location source."""
    latitude: float
    longitude: float
    heading_degrees: Optional[float] = None
    speed_meters_per_second: Optional[float] = None
    timestamp: Optional[float] = None

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.latitude, self.longitude)


@dataclass(frozen=True)
class CameraCommand:
    """Fire-and-forget camera animation request sent to the map."""
    center: GeoPoint
    pitch: float
    heading: float
    zoom: float
    duration_ms: int


@dataclass(frozen=True)
class NavigatorSnapshot:
    """Everything the presentation layer reads from the controller."""
    mode: NavigationMode
    route_name: Optional[str]
    point_count: int
    region: Optional[MapRegion]
    last_fix: Optional[LiveFix]
    speed_text: str
    permission: PermissionState
    services_enabled: Optional[bool]
    load_error: Optional[str] = None
    gps_error: Optional[str] = None
    loading: bool = False

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "route_name": self.route_name,
            "point_count": self.point_count,
            "speed": self.speed_text,
            "permission": self.permission.value,
            "services_enabled": self.services_enabled,
            "fix": (
                {"lat": self.last_fix.latitude, "lon": self.last_fix.longitude}
                if self.last_fix else None
            ),
            "load_error": self.load_error,
            "gps_error": self.gps_error,
        }
