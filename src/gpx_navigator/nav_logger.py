# nav_logger.py
# Appends drive session events (start, stop, fixes, errors) to a JSONL file.
# Loaded routes themselves are never written to disk.

import json
import logging
import os
from datetime import datetime
from typing import Optional

from .models import LiveFix, NavigationMode
from .nav_config import NavConfig

# Standard Python logger, configured at the app entry point
logger = logging.getLogger(__name__)


class NavLogger:
    """
    Persists drive session events to a JSON lines file.

    Args:
        config: NavConfig instance for file paths and directories.
    """

    def __init__(self, config: Optional[NavConfig] = None) -> None:
        self.config = config or NavConfig()
        os.makedirs(self.config.log_dir, exist_ok=True)

    @property
    def filepath(self) -> str:
        return self.config.session_filepath

    def log_event(
        self,
        event: str,
        mode: NavigationMode,
        fix: Optional[LiveFix] = None,
        message: Optional[str] = None,
    ) -> None:
        """
        Append a single event to the session log.

        Args:
            event:   Short event name ("start", "stop", "fix", "error").
            mode:    Navigation mode after the event.
            fix:     Position attached to the event, if any.
            message: Free text, e.g. the surfaced error.
        """
        entry = {
            "timestamp": datetime.now().isoformat(),
            "event": event,
            "mode": mode.value,
            "message": message,
        }
        if fix is not None:
            entry.update({
                "lat": fix.latitude,
                "lon": fix.longitude,
                "heading": fix.heading_degrees,
                "speed_ms": fix.speed_meters_per_second,
            })
        try:
            with open(self.filepath, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry, ensure_ascii=False) + "\n")
        except IOError as e:
            logger.error(f"Failed to write event log: {e}")
