"""60 Hz delay/sound timer driver."""

from __future__ import annotations

from typing import Protocol

from pychip8.utils import debug_enabled, debug_log

TIMER_RATE = 60


class TimerTarget(Protocol):  # pragma: no cover - protocol
    @property
    def dt(self) -> int: ...

    @property
    def st(self) -> int: ...

    def set_dt(self, value: int) -> None: ...

    def set_st(self, value: int) -> None: ...


class TimerDriver:
    """Count DT and ST down once per frame, stopping at zero."""

    def __init__(self, target: TimerTarget) -> None:
        self._target = target

    def tick(self, frames: int = 1) -> bool:
        """Advance ``frames`` timer periods; return True while ST is non-zero."""

        if frames < 0:
            raise ValueError("frames must not be negative")
        target = self._target
        if frames:
            target.set_dt(max(0, target.dt - frames))
            target.set_st(max(0, target.st - frames))
            if debug_enabled("timer"):
                debug_log("timer", "frames=%d dt=%02x st=%02x", frames, target.dt, target.st)
        return target.st > 0

    @property
    def sound_active(self) -> bool:
        return self._target.st > 0
