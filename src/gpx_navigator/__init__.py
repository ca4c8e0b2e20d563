"""Load a GPX track, frame it on a map, and follow live GPS fixes in drive mode."""

from .errors import (
    DocumentDecodeFailure,
    FileSelectionCancelled,
    GPSError,
    LiveUpdateFailure,
    NavigatorError,
    NoPointsFound,
    NoRouteLoaded,
    PermissionDenied,
    RouteLoadError,
    ServicesDisabled,
)
from .geo_utils import bounding_region, format_speed
from .gpx_parser import decode_document, load_gpx, parse_gpx
from .models import GeoPoint, LiveFix, MapRegion, NavigationMode, ParsedRoute, PermissionState
from .nav_config import NavConfig
from .navigator import NavigationController

__version__ = "0.1.0"
