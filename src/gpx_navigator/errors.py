# errors.py
# Failure kinds surfaced to the user. The controller converts collaborator
# exceptions into one of these at its boundary; none of them is fatal.

from typing import Optional


class NavigatorError(Exception):
    """Base exception for all navigator failures."""

    code: str = "NAVIGATOR_ERROR"
    default_message: str = "Navigator error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# Route loading
# ---------------------------------------------------------------------------

class RouteLoadError(NavigatorError):
    code = "ROUTE_LOAD_ERROR"
    default_message = "Failed to load GPX"


class DocumentDecodeFailure(RouteLoadError):
    code = "DOCUMENT_DECODE_FAILURE"
    default_message = "File is not valid XML"


class NoPointsFound(RouteLoadError):
    code = "NO_POINTS_FOUND"
    default_message = "No route points found in GPX"


class FileSelectionCancelled(RouteLoadError):
    """Raised by pickers that signal cancellation by exception. Not shown."""
    code = "FILE_SELECTION_CANCELLED"
    default_message = "File selection cancelled"


# ---------------------------------------------------------------------------
# GPS / drive mode
# ---------------------------------------------------------------------------

class GPSError(NavigatorError):
    code = "GPS_ERROR"
    default_message = "GPS error"


class ServicesDisabled(GPSError):
    code = "SERVICES_DISABLED"
    default_message = "Location services are OFF. Enable GPS/location services and try again."


class PermissionDenied(GPSError):
    code = "PERMISSION_DENIED"
    default_message = "Location permission denied"


class LiveUpdateFailure(GPSError):
    code = "LIVE_UPDATE_FAILURE"
    default_message = "GPS error"


class NoRouteLoaded(GPSError):
    code = "NO_ROUTE_LOADED"
    default_message = "Load a GPX route before starting navigation"
