"""Per-frame canvas counters with a rolling frame-time window."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FrameMetrics:
    """Counters captured for a single frame."""

    frame_index: int
    dt_ms: float
    fps_rolling: float
    regrows: int = 0
    swapped_in: int = 0
    swapped_out: int = 0
    allocated: int = 0
    composited: int = 0
    recovered: int = 0
    render_failures: int = 0


@dataclass(frozen=True, slots=True)
class MetricsSnapshot:
    """Read-only snapshot consumable by the HUD and loggers."""

    last_frame: FrameMetrics | None
    rolling_dt_ms: float
    rolling_fps: float
    total_regrows: int
    total_swapped_in: int
    total_swapped_out: int
    total_recovered: int


class MetricsCollector:
    """Small in-memory rolling metrics collector."""

    def __init__(self, *, window_size: int = 60) -> None:
        self._window_size = max(1, int(window_size))
        self._dt_window: deque[float] = deque(maxlen=self._window_size)
        self._frame_index = 0
        self._counts: dict[str, int] = {}
        self._totals: dict[str, int] = {}
        self._last_frame: FrameMetrics | None = None

    def begin_frame(self, frame_index: int) -> None:
        self._frame_index = frame_index
        self._counts = {}

    def increment(self, name: str, count: int = 1) -> None:
        if count == 0:
            return
        self._counts[name] = self._counts.get(name, 0) + int(count)
        self._totals[name] = self._totals.get(name, 0) + int(count)

    def total(self, name: str) -> int:
        return self._totals.get(name, 0)

    def end_frame(self, dt_ms: float) -> FrameMetrics:
        dt = float(dt_ms)
        self._dt_window.append(dt)
        rolling_dt, rolling_fps = self._rolling()
        counts = self._counts
        self._last_frame = FrameMetrics(
            frame_index=self._frame_index,
            dt_ms=dt,
            fps_rolling=rolling_fps,
            regrows=counts.get("regrows", 0),
            swapped_in=counts.get("swapped_in", 0),
            swapped_out=counts.get("swapped_out", 0),
            allocated=counts.get("allocated", 0),
            composited=counts.get("composited", 0),
            recovered=counts.get("recovered", 0),
            render_failures=counts.get("render_failures", 0),
        )
        return self._last_frame

    def snapshot(self) -> MetricsSnapshot:
        rolling_dt, rolling_fps = self._rolling()
        return MetricsSnapshot(
            last_frame=self._last_frame,
            rolling_dt_ms=rolling_dt,
            rolling_fps=rolling_fps,
            total_regrows=self.total("regrows"),
            total_swapped_in=self.total("swapped_in"),
            total_swapped_out=self.total("swapped_out"),
            total_recovered=self.total("recovered"),
        )

    def _rolling(self) -> tuple[float, float]:
        rolling_dt = (sum(self._dt_window) / len(self._dt_window)) if self._dt_window else 0.0
        rolling_fps = (1000.0 / rolling_dt) if rolling_dt > 0.0 else 0.0
        return rolling_dt, rolling_fps


__all__ = ["FrameMetrics", "MetricsCollector", "MetricsSnapshot"]
