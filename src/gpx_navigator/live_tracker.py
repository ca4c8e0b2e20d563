# live_tracker.py
# Owns the single live-position subscription used in drive mode.
# Call open() when entering drive mode and close() when leaving it.

import logging
from typing import Optional

from .location import ErrorCallback, FixCallback, LocationProvider, PositionSubscription, WatchOptions
from .models import LiveFix

logger = logging.getLogger(__name__)


class LiveTracker:
    """
    Holds at most one open position subscription and the latest fix.

    Every open() starts a new generation. Callbacks carry the generation they
    were registered under and are dropped once it is stale, so nothing from a
    closed subscription reaches the caller, even if the source still fires.

    Usage:
        tracker = LiveTracker()
        await tracker.open(provider, options, on_fix, on_error)
        ...
        tracker.close()
    """

    def __init__(self) -> None:
        self._handle: Optional[PositionSubscription] = None
        self._generation: int = 0
        self._open: bool = False
        self._last_fix: Optional[LiveFix] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def open(
        self,
        provider: LocationProvider,
        options: WatchOptions,
        on_fix: FixCallback,
        on_error: ErrorCallback,
    ) -> bool:
        """
        Open a fresh subscription, closing any previous one first.

        Returns:
            False if close() was called while the source was still opening.

        Raises:
            Whatever the provider raises while opening; the tracker is left
            closed in that case.
        """
        self.close()
        self._generation += 1
        generation = self._generation
        self._open = True

        def deliver(fix: LiveFix) -> None:
            if not self._is_current(generation):
                logger.debug("Dropped fix from a closed subscription.")
                return
            self._last_fix = fix
            on_fix(fix)

        def fail(exc: BaseException) -> None:
            if not self._is_current(generation):
                return
            on_error(exc)

        try:
            handle = await provider.watch_position(options, deliver, fail)
        except Exception:
            if generation == self._generation:
                self._open = False
            raise

        if not self._is_current(generation):
            handle.remove()
            return False

        self._handle = handle
        logger.debug(f"Position subscription #{generation} open.")
        return True

    def close(self) -> None:
        """Stop delivery immediately. Safe to call at any time."""
        self._generation += 1
        self._open = False
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.remove()
            logger.debug("Position subscription closed.")

    def _is_current(self, generation: int) -> bool:
        return self._open and generation == self._generation

    # ------------------------------------------------------------------
    # Read-only properties
    # ------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def last_fix(self) -> Optional[LiveFix]:
        return self._last_fix
