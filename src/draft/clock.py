"""Countdown clock that feeds elapsed time into a draft session."""

import logging
import time
from typing import Callable, Optional

from .sequencer import DraftSession, DraftState, Tick


logger = logging.getLogger(__name__)


class PickClock:
    """
    Pick clock bound to a ``DraftSession``.

    The clock holds no countdown of its own: the remaining seconds live in
    the draft state. ``poll`` measures whole seconds elapsed since the last
    anchor and submits them as a ``Tick``. The anchor is reset whenever a
    pick is made, and the clock stops itself once the draft is no longer in
    progress.
    """

    def __init__(
        self,
        session: DraftSession,
        time_source: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the clock and attach it to the session.

        Args:
            session: Draft session to drive.
            time_source: Monotonic time in seconds; injectable for tests.
        """
        self._session = session
        self._now = time_source
        self._anchor: Optional[float] = None
        session.add_listener(self._on_change)

    @property
    def running(self) -> bool:
        """Check if the clock is counting down."""
        return self._anchor is not None

    def start(self) -> None:
        """Start counting from now, replacing any earlier anchor."""
        if not self._session.state.is_active:
            self.stop()
            return
        self._anchor = self._now()

    def reset(self) -> None:
        """Restart the current second count from now."""
        if self._anchor is not None:
            self._anchor = self._now()

    def stop(self) -> None:
        """Stop counting; later polls do nothing until ``start``."""
        self._anchor = None

    def poll(self) -> int:
        """
        Submit the whole seconds elapsed since the last poll.

        Returns:
            Number of seconds submitted.
        """
        if self._anchor is None:
            return 0
        if not self._session.state.is_active:
            self.stop()
            return 0

        elapsed = int(self._now() - self._anchor)
        if elapsed <= 0:
            return 0

        self._anchor += elapsed
        logger.debug("Pick clock: %d second(s) elapsed", elapsed)
        self._session.dispatch(Tick(seconds=elapsed))
        return elapsed

    def _on_change(self, old: DraftState, new: DraftState) -> None:
        if not new.is_active:
            self.stop()
        elif new.pick_number != old.pick_number:
            self.reset()
