# nav_config.py
# All tuneable constants in one place.
# Pass a NavConfig instance to every module that needs settings.

import os
from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Region fitting constants (used by geo_utils)
# ---------------------------------------------------------------------------

REGION_PADDING_FACTOR: float = 1.4
MIN_REGION_SPAN_DEG: float = 0.01

# Shown before any route is loaded (central London)
DEFAULT_CENTER_LAT: float = 51.5072
DEFAULT_CENTER_LON: float = -0.1276
DEFAULT_SPAN_DEG: float = 0.2

UNKNOWN_SPEED_MARKER: str = "—"


# ---------------------------------------------------------------------------
# Main config
# ---------------------------------------------------------------------------

@dataclass
class NavConfig:
    # Region fitting
    padding_factor: float = REGION_PADDING_FACTOR
    min_span_deg: float = MIN_REGION_SPAN_DEG
    fit_duration_ms: int = 600             # map fit after a route is loaded

    # Drive camera, applied on every live fix
    drive_pitch: float = 60.0
    drive_zoom: float = 17.0
    drive_duration_ms: int = 450

    # Camera move issued once when drive mode is entered
    start_duration_ms: int = 500
    fallback_pitch: float = 55.0           # used when no fix is known yet
    fallback_zoom: float = 15.0

    # Live position subscription
    watch_accuracy: str = "highest"
    watch_time_interval_ms: int = 1000
    watch_distance_interval_m: float = 1.0

    # Logging
    log_dir: str = "."                     # directory for the drive session log
    session_filename: str = "drive_session.jsonl"

    @property
    def session_filepath(self) -> str:
        return os.path.join(self.log_dir, self.session_filename)
