"""Frame timing primitives: bounded frame clock and fixed-budget pacer."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TimeContext:
    """Per-frame timing context."""

    frame_index: int
    delta_seconds: float
    elapsed_seconds: float


class FrameClock:
    """Monotonic frame clock with bounded frame deltas."""

    def __init__(
        self,
        *,
        time_source: Callable[[], float] | None = None,
        max_delta_seconds: float = 0.25,
    ) -> None:
        self._time_source = time_source or time.monotonic
        self._max_delta_seconds = max_delta_seconds
        self._last_seconds: float | None = None
        self._elapsed_seconds = 0.0

    def next(self, frame_index: int) -> TimeContext:
        """Advance the clock and return the next frame context."""
        now = self._time_source()
        if self._last_seconds is None:
            delta = 0.0
        else:
            delta = min(max(0.0, now - self._last_seconds), self._max_delta_seconds)
        self._last_seconds = now
        self._elapsed_seconds += delta
        return TimeContext(
            frame_index=frame_index,
            delta_seconds=delta,
            elapsed_seconds=self._elapsed_seconds,
        )


class FramePacer:
    """Sleeps off whatever is left of a fixed per-frame budget."""

    def __init__(
        self,
        budget_seconds: float,
        *,
        sleep: Callable[[float], None] = time.sleep,
        time_source: Callable[[], float] = time.perf_counter,
    ) -> None:
        if budget_seconds <= 0.0:
            raise ValueError("budget_seconds must be > 0")
        self._budget_seconds = budget_seconds
        self._sleep = sleep
        self._time_source = time_source
        self._frame_started: float | None = None

    @property
    def budget_seconds(self) -> float:
        return self._budget_seconds

    def begin_frame(self) -> None:
        self._frame_started = self._time_source()

    def wait(self) -> float:
        """Sleep for the unused part of the budget and return the slept seconds."""
        if self._frame_started is None:
            return 0.0
        elapsed = self._time_source() - self._frame_started
        self._frame_started = None
        remaining = max(0.0, self._budget_seconds - elapsed)
        if remaining > 0.0:
            self._sleep(remaining)
        return remaining


__all__ = ["FrameClock", "FramePacer", "TimeContext"]
