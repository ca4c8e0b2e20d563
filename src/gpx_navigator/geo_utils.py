# geo_utils.py
# Pure mathematical / geographic helper functions.
# No side effects, no imports from other project modules except models/config.

import math
from typing import Optional, Sequence

import numpy as np

from .models import GeoPoint, MapRegion
from .nav_config import MIN_REGION_SPAN_DEG, REGION_PADDING_FACTOR, UNKNOWN_SPEED_MARKER


MS_TO_KMH = 3.6


def bounding_region(
    points: Sequence[GeoPoint],
    padding_factor: float = REGION_PADDING_FACTOR,
    min_span: float = MIN_REGION_SPAN_DEG,
) -> Optional[MapRegion]:
    """
    Smallest padded region that frames every point.

    Args:
        points:         Route points in any order.
        padding_factor: Multiplier applied to the raw extent on each axis.
        min_span:       Lower bound for each span, in degrees.

    Returns:
        MapRegion centred on the extent midpoint, or None for an empty input.
    """
    if not points:
        return None

    lats = np.fromiter((p.latitude for p in points), dtype=float, count=len(points))
    lons = np.fromiter((p.longitude for p in points), dtype=float, count=len(points))
    min_lat, max_lat = float(lats.min()), float(lats.max())
    min_lon, max_lon = float(lons.min()), float(lons.max())

    return MapRegion(
        center_latitude=(min_lat + max_lat) / 2,
        center_longitude=(min_lon + max_lon) / 2,
        latitude_span=max(min_span, (max_lat - min_lat) * padding_factor),
        longitude_span=max(min_span, (max_lon - min_lon) * padding_factor),
    )


def ms_to_kmh(ms: float) -> float:
    """Metres per second to kilometres per hour."""
    return ms * MS_TO_KMH


def format_speed(ms: Optional[float]) -> str:
    """
    Speed readout text for the HUD.

    Args:
        ms: Instantaneous speed in m/s, or None when the source has none.

    Returns:
        Rounded km/h as a string, "0" for negative speeds, or the unknown
        marker for missing and non-finite values.
    """
    if ms is None or not math.isfinite(ms):
        return UNKNOWN_SPEED_MARKER
    kmh = ms_to_kmh(ms)
    if not math.isfinite(kmh):
        return UNKNOWN_SPEED_MARKER
    if kmh < 0:
        return "0"
    # half rounds up, round() would round half to even
    return str(int(math.floor(kmh + 0.5)))
