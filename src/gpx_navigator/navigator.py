# navigator.py
# Public entry point for the navigator.
# Owns the browse/drive mode and routes events to the specialist modules.

import inspect
import logging
from typing import Callable, Optional, Tuple

from .errors import (
    FileSelectionCancelled,
    GPSError,
    LiveUpdateFailure,
    NavigatorError,
    NoRouteLoaded,
    PermissionDenied,
    RouteLoadError,
    ServicesDisabled,
)
from .geo_utils import bounding_region, format_speed
from .gpx_parser import load_gpx, read_text_file
from .live_tracker import LiveTracker
from .location import FilePicker, LocationProvider, MapSurface, WatchOptions
from .models import (
    CameraCommand,
    LiveFix,
    MapRegion,
    NavigationMode,
    NavigatorSnapshot,
    ParsedRoute,
    PermissionState,
)
from .nav_config import DEFAULT_CENTER_LAT, DEFAULT_CENTER_LON, DEFAULT_SPAN_DEG, NavConfig
from .nav_logger import NavLogger

logger = logging.getLogger(__name__)

DEFAULT_REGION = MapRegion(DEFAULT_CENTER_LAT, DEFAULT_CENTER_LON, DEFAULT_SPAN_DEG, DEFAULT_SPAN_DEG)


class NavigationController:
    """
    Browse/drive state machine around a loaded GPX route.

    Typical lifecycle:
        nav = NavigationController(location_source, map_surface, picker)
        await nav.refresh_environment()
        await nav.load_route_file()
        ok, msg = await nav.start_navigation()
        # fixes now arrive from the location source
        nav.stop_navigation()

    Args:
        location:    Location source (services, permission, live fixes).
        map_surface: Map to animate; may be attached later with attach_map().
        picker:      File picker used by load_route_file().
        reader:      Raw text reader for a picked path, sync or async.
        config:      Optional NavConfig; defaults to NavConfig().
        session_log: Optional NavLogger receiving drive session events.
    """

    def __init__(
        self,
        location: LocationProvider,
        map_surface: Optional[MapSurface] = None,
        picker: Optional[FilePicker] = None,
        reader: Optional[Callable[[str], object]] = None,
        config: Optional[NavConfig] = None,
        session_log: Optional[NavLogger] = None,
    ) -> None:
        self.config = config or NavConfig()
        self._location = location
        self._map = map_surface
        self._picker = picker
        self._reader = reader or read_text_file
        self._session_log = session_log

        self._tracker = LiveTracker()

        self._mode = NavigationMode.BROWSE
        self._route = ParsedRoute()
        self._region: Optional[MapRegion] = None
        self._permission = PermissionState.UNKNOWN
        self._services_enabled: Optional[bool] = None
        self._speed_ms: Optional[float] = None
        self._load_error: Optional[RouteLoadError] = None
        self._gps_error: Optional[GPSError] = None
        self._loading = False

    # ------------------------------------------------------------------
    # Map mounting
    # ------------------------------------------------------------------

    def attach_map(self, map_surface: MapSurface) -> None:
        self._map = map_surface

    def detach_map(self) -> None:
        self._map = None

    # ------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------

    async def refresh_environment(self) -> None:
        """Read permission and service state for display, without prompting."""
        try:
            self._permission = await self._location.get_permission()
            self._services_enabled = await self._location.services_enabled()
        except Exception as e:
            logger.warning(f"Could not query location state: {e}")

    async def _check_location_access(self) -> bool:
        """
        Query services and request permission. Runs on every start attempt.

        Returns:
            True only if services are on and permission is granted.
        """
        enabled = bool(await self._location.services_enabled())
        self._services_enabled = enabled
        if not enabled:
            self._gps_error = ServicesDisabled()

        status = await self._location.request_permission()
        granted = status == PermissionState.GRANTED
        self._permission = PermissionState.GRANTED if granted else PermissionState.DENIED
        return granted and enabled

    # ------------------------------------------------------------------
    # Route loading
    # ------------------------------------------------------------------

    async def load_route_file(self) -> Tuple[bool, str]:
        """
        Let the user pick a GPX file and load it.

        Returns:
            (success, message). A cancelled pick is not an error and leaves
            everything as it was.
        """
        if self._picker is None:
            return False, "No file picker available."

        self._load_error = None
        self._loading = True
        try:
            try:
                path = await self._picker.pick_document()
            except FileSelectionCancelled:
                path = None
            if path is None:
                logger.info("File selection cancelled.")
                return False, FileSelectionCancelled.default_message
            if not path:
                raise RouteLoadError("No file URI returned")

            text = self._reader(path)
            if inspect.isawaitable(text):
                text = await text
            return self.load_route_text(text, source=path)
        except RouteLoadError as e:
            return self._fail_load(e)
        except (OSError, UnicodeDecodeError) as e:
            return self._fail_load(RouteLoadError(f"Could not read file: {e}"))
        finally:
            self._loading = False

    def load_route_text(self, xml_text: str, source: Optional[str] = None) -> Tuple[bool, str]:
        """
        Parse GPX text and make it the current route.

        On failure the previous route stays in place and load_error is set.

        Returns:
            (success, message)
        """
        self._load_error = None
        try:
            route = load_gpx(xml_text)
        except RouteLoadError as e:
            return self._fail_load(e)

        if self._mode == NavigationMode.DRIVE:
            self.stop_navigation()

        self._route = route
        self._region = bounding_region(
            route.points, self.config.padding_factor, self.config.min_span_deg,
        )
        logger.info(
            f"Route loaded from {source or 'text'}: "
            f"{route.name or 'unnamed'} ({len(route.points)} points)."
        )
        if self._map is not None and self._region is not None:
            self._map.animate_to_region(self._region, self.config.fit_duration_ms)
        return True, f"Route ready. {len(route.points)} points."

    def _fail_load(self, error: RouteLoadError) -> Tuple[bool, str]:
        self._load_error = error
        logger.warning(f"GPX load failed: {error.message}")
        return False, error.message

    # ------------------------------------------------------------------
    # Navigation control
    # ------------------------------------------------------------------

    async def start_navigation(self) -> Tuple[bool, str]:
        """
        Enter drive mode if a route is loaded and location access is available.

        Returns:
            (success, message)
        """
        if self._mode == NavigationMode.DRIVE:
            return True, "Already driving."
        self._gps_error = None
        if self._route.is_empty:
            return self._fail_start(NoRouteLoaded())

        try:
            ok = await self._check_location_access()
        except Exception as e:
            return self._fail_start(GPSError(str(e) or GPSError.default_message))

        if not ok:
            return self._fail_start(self._gps_error or PermissionDenied())

        if self._mode == NavigationMode.DRIVE:
            # another start won the race while we were waiting
            return True, "Already driving."

        self._mode = NavigationMode.DRIVE
        logger.info("Drive mode started.")
        self._record("start")
        self._issue_start_camera()

        try:
            opened = await self._tracker.open(
                self._location,
                self._watch_options(),
                self._on_fix,
                self._on_live_error,
            )
        except Exception as e:
            if self._mode != NavigationMode.DRIVE:
                return False, "Navigation stopped."
            self._on_live_error(e)
            return True, "Navigation started."

        if not opened or self._mode != NavigationMode.DRIVE:
            # stopped while the subscription was being opened
            logger.info("Navigation stopped before the position feed opened.")
            return False, "Navigation stopped."
        return True, "Navigation started."

    def stop_navigation(self) -> None:
        """Leave drive mode and close the position subscription."""
        self._tracker.close()
        if self._mode == NavigationMode.DRIVE:
            self._mode = NavigationMode.BROWSE
            logger.info("Navigation stopped by user.")
            self._record("stop")

    def close(self) -> None:
        """Tear down the controller. No fix is delivered after this returns."""
        self.stop_navigation()

    def _fail_start(self, error: GPSError) -> Tuple[bool, str]:
        self._gps_error = error
        logger.warning(f"Cannot start navigation: {error.message}")
        self._record("error", message=error.message)
        return False, error.message

    def _watch_options(self) -> WatchOptions:
        return WatchOptions(
            accuracy=self.config.watch_accuracy,
            time_interval_ms=self.config.watch_time_interval_ms,
            distance_interval_m=self.config.watch_distance_interval_m,
        )

    # ------------------------------------------------------------------
    # Live updates, called for every fix while in drive mode
    # ------------------------------------------------------------------

    def _on_fix(self, fix: LiveFix) -> None:
        """Update the speed readout and re-centre the camera on the fix."""
        if self._mode != NavigationMode.DRIVE:
            return
        self._speed_ms = fix.speed_meters_per_second
        logger.debug(f"Fix {fix.latitude:.5f}, {fix.longitude:.5f} @ {self.speed_text} km/h")
        self._animate(CameraCommand(
            center=fix.point,
            pitch=self.config.drive_pitch,
            heading=fix.heading_degrees if fix.heading_degrees is not None else 0.0,
            zoom=self.config.drive_zoom,
            duration_ms=self.config.drive_duration_ms,
        ))
        self._record("fix", fix=fix)

    def _on_live_error(self, exc: BaseException) -> None:
        # Drive mode is kept; the user stops explicitly.
        if isinstance(exc, NavigatorError):
            message = exc.message
        else:
            message = str(exc) or LiveUpdateFailure.default_message
        self._gps_error = LiveUpdateFailure(message)
        logger.warning(f"Live position update failed: {message}")
        self._record("error", message=message)

    def _issue_start_camera(self) -> None:
        fix = self._tracker.last_fix
        if fix is not None:
            command = CameraCommand(
                center=fix.point,
                pitch=self.config.drive_pitch,
                heading=fix.heading_degrees if fix.heading_degrees is not None else 0.0,
                zoom=self.config.drive_zoom,
                duration_ms=self.config.start_duration_ms,
            )
        elif self._region is not None:
            command = CameraCommand(
                center=self._region.center,
                pitch=self.config.fallback_pitch,
                heading=0.0,
                zoom=self.config.fallback_zoom,
                duration_ms=self.config.start_duration_ms,
            )
        else:
            return
        self._animate(command)

    def _animate(self, command: CameraCommand) -> None:
        if self._map is not None:
            self._map.animate_camera(command)

    def _record(self, event: str, fix: Optional[LiveFix] = None, message: Optional[str] = None) -> None:
        if self._session_log is not None:
            self._session_log.log_event(event, self._mode, fix=fix, message=message)

    # ------------------------------------------------------------------
    # Convenience read-only properties
    # ------------------------------------------------------------------

    @property
    def mode(self) -> NavigationMode:
        return self._mode

    @property
    def is_driving(self) -> bool:
        return self._mode == NavigationMode.DRIVE

    @property
    def route(self) -> ParsedRoute:
        return self._route

    @property
    def region(self) -> Optional[MapRegion]:
        return self._region

    @property
    def initial_region(self) -> MapRegion:
        """Region to frame the map with; the default area before any load."""
        return self._region or DEFAULT_REGION

    @property
    def last_fix(self) -> Optional[LiveFix]:
        return self._tracker.last_fix

    @property
    def speed_text(self) -> str:
        return format_speed(self._speed_ms)

    @property
    def permission(self) -> PermissionState:
        return self._permission

    @property
    def services_enabled(self) -> Optional[bool]:
        return self._services_enabled

    @property
    def load_error(self) -> Optional[RouteLoadError]:
        return self._load_error

    @property
    def gps_error(self) -> Optional[GPSError]:
        return self._gps_error

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def subscription_open(self) -> bool:
        return self._tracker.is_open

    def snapshot(self) -> NavigatorSnapshot:
        return NavigatorSnapshot(
            mode=self._mode,
            route_name=self._route.name,
            point_count=len(self._route.points),
            region=self._region,
            last_fix=self.last_fix,
            speed_text=self.speed_text,
            permission=self._permission,
            services_enabled=self._services_enabled,
            load_error=self._load_error.message if self._load_error else None,
            gps_error=self._gps_error.message if self._gps_error else None,
            loading=self._loading,
        )
