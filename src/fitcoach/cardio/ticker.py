"""Wall-clock driver for a live cardio session."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from fitcoach.cardio.session import CardioSession, SessionState
from fitcoach.exceptions import SessionClosedError

logger = logging.getLogger(__name__)


class SessionTicker:
    """
    Background thread that calls ``session.tick()`` once per interval.

    The session serializes ticks against user actions on its own lock, so
    the ticker holds no session state of its own. It exits when stopped or
    when the session is finished or cancelled.

    Usage:
        ticker = SessionTicker(session)
        ticker.start()
        # ... user presses buttons ...
        summary = session.finish()
        ticker.stop()
    """

    def __init__(
        self,
        session: CardioSession,
        tick_seconds: float = 1.0,
        on_tick: Optional[Callable[[CardioSession], None]] = None,
    ):
        self.session = session
        self.tick_seconds = tick_seconds
        self.on_tick = on_tick
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            logger.warning("Session ticker is already running")
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="cardio-session-ticker", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)
        self._thread = None

    def _run(self) -> None:
        while not self._stop.wait(self.tick_seconds):
            if self.session.state in (SessionState.FINISHED, SessionState.CANCELLED):
                break
            try:
                self.session.tick()
            except SessionClosedError:
                break
            if self.on_tick is not None:
                self.on_tick(self.session)
        logger.debug("Session ticker stopped")
