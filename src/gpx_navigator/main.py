# main.py
# Entry point, simulates a drive along a GPX track.
# In production, replace ReplayLocationSource and ConsoleMap with the real
# location service and map widget.
#
# Usage: python -m gpx_navigator.main [track.gpx]

import asyncio
import logging
import sys
from typing import Optional

from .location import ReplayLocationSource
from .models import CameraCommand, MapRegion
from .nav_config import NavConfig
from .nav_logger import NavLogger
from .navigator import NavigationController

# ------------------------------------------------------------------
# Logging setup: configure once here, all modules inherit
# ------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)

# ------------------------------------------------------------------
# Config: tweak camera or paths here, not inside the modules
# ------------------------------------------------------------------
config = NavConfig(
    log_dir="logs",
    session_filename="drive_session.jsonl",
)

# ------------------------------------------------------------------
# Simulation track (Sıhhiye → Kurtuluş, Ankara)
# ------------------------------------------------------------------
DEMO_GPX = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="gpx_navigator" xmlns="http://www.topografix.com/GPX/1/1">
  <metadata><name>Sıhhiye to Kurtuluş</name></metadata>
  <trk>
    <trkseg>
      <trkpt lat="39.92409" lon="32.845382"/>
      <trkpt lat="39.9240467" lon="32.8451522"/>
      <trkpt lat="39.9232599" lon="32.8441792"/>
      <trkpt lat="39.9240102" lon="32.8452347"/>
      <trkpt lat="39.9249406" lon="32.8462865"/>
      <trkpt lat="39.9254588" lon="32.8477125"/>
      <trkpt lat="39.9208164" lon="32.8533392"/>
      <trkpt lat="39.920927" lon="32.8533893"/>
      <trkpt lat="39.9210086" lon="32.8529793"/>
    </trkseg>
  </trk>
</gpx>
"""

REPLAY_INTERVAL_S = 0.2


class ConsoleMap:
    """Map stand-in that prints every command it receives."""

    def animate_camera(self, command: CameraCommand) -> None:
        c = command.center
        print(
            f"  camera → {c.latitude:.5f}, {c.longitude:.5f} "
            f"pitch={command.pitch:.0f} heading={command.heading:.0f} zoom={command.zoom:.0f}"
        )

    def animate_to_region(self, region: MapRegion, duration_ms: int) -> None:
        print(
            f"  fit → {region.center_latitude:.5f}, {region.center_longitude:.5f} "
            f"span {region.latitude_span:.4f} x {region.longitude_span:.4f}"
        )


class ArgvPicker:
    """Picks the path given on the command line; None means cancelled."""

    def __init__(self, path: Optional[str]) -> None:
        self.path = path

    async def pick_document(self) -> Optional[str]:
        return self.path


async def run(path: Optional[str]) -> None:
    source = ReplayLocationSource([], interval_s=REPLAY_INTERVAL_S)

    nav = NavigationController(
        source,
        map_surface=ConsoleMap(),
        picker=ArgvPicker(path),
        config=config,
        session_log=NavLogger(config),
    )
    await nav.refresh_environment()

    # 1. Load the route
    if path:
        success, msg = await nav.load_route_file()
    else:
        success, msg = nav.load_route_text(DEMO_GPX, source="demo")
    print(f"[Main] {msg}")
    if not success:
        return
    # replay the loaded track as if we were driving it
    source.fixes = ReplayLocationSource.from_route(nav.route).fixes

    # 2. Enter drive mode
    success, msg = await nav.start_navigation()
    print(f"[Main] {msg}")
    if not success:
        return

    print("\n--- GPS Loop Active ---")
    for _ in source.fixes:
        await asyncio.sleep(REPLAY_INTERVAL_S)
        snap = nav.snapshot()
        print(f"  [{snap.mode.name}] speed {snap.speed_text} km/h")

    # let the replay deliver its last fix before closing the feed
    await asyncio.sleep(REPLAY_INTERVAL_S)

    # 3. Back to browse mode
    nav.stop_navigation()
    print("\n--- Session complete ---")
    print(f"    Session log written to: {config.session_filepath}")


def main() -> None:
    asyncio.run(run(sys.argv[1] if len(sys.argv) > 1 else None))


if __name__ == "__main__":
    main()
