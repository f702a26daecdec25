from __future__ import annotations

import time
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from powerplant.session import GameSession


class Scheduler:
    """Cooperative single-threaded driver: frame ticks plus periodic autosave.

    Each ``pump`` measures real elapsed time since the previous one, so the
    frame rate is never assumed.
    """

    def __init__(
        self,
        session: GameSession,
        clock: Callable[[], float] = time.monotonic,
        autosave_interval: float | None = None,
    ) -> None:
        self.session = session
        self.clock = clock
        self.autosave_interval = (
            autosave_interval
            if autosave_interval is not None
            else session.engine.config.autosave_interval
        )
        self._last_frame: float | None = None
        self._last_save: float | None = None
        self.frames = 0
        self.autosaves = 0

    def pump(self, now: float | None = None) -> float:
        """Run one frame. Returns the amount earned during it."""
        if now is None:
            now = self.clock()
        if self._last_frame is None:
            self._last_frame = now
            self._last_save = now

        earned = self.session.frame((now - self._last_frame) * 1000.0)
        self._last_frame = now
        self.frames += 1

        if now - self._last_save >= self.autosave_interval:
            self.session.autosave()
            self._last_save = now
            self.autosaves += 1

        return earned

    def run(
        self,
        duration: float,
        frame_interval: float = 1 / 60,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Pump frames for *duration* seconds of clock time."""
        start = self.clock()
        self.pump(start)
        while True:
            sleep(frame_interval)
            now = self.clock()
            self.pump(now)
            if now - start >= duration:
                break
