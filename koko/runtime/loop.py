"""Frame loop: poll the window, step the canvas, present, pace."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Protocol

from koko.api.input_snapshot import InputSnapshot
from koko.api.window import WindowCloseEvent, WindowPort
from koko.canvas.units import Vector2
from koko.input.input_controller import InputController
from koko.rendering.compositor import OverlayBatch
from koko.rendering.memory_surface import MemorySurfaceBackend
from koko.runtime.errors import (
    RECOVERABLE_RUNTIME_ERRORS,
    is_recoverable_frame_error,
    log_recoverable,
)
from koko.runtime.frame import FrameReport, step_frame
from koko.runtime.hud import status_lines
from koko.runtime.metrics import FrameMetrics, MetricsCollector
from koko.runtime.state import EngineState
from koko.runtime.time import FrameClock, FramePacer

_LOG = logging.getLogger("koko.runtime.loop")


class FramePresenter(Protocol):
    """What the loop needs from whatever puts the frame on screen."""

    def update_overlay(self, batch: OverlayBatch) -> None: ...

    def update_hud(self, lines: tuple[str, ...], cursor: Vector2) -> None: ...

    def render(self) -> None: ...


class FrameLoop:
    """Drives ``step_frame`` once per window frame until the canvas stops running."""

    def __init__(
        self,
        *,
        window: WindowPort,
        backend: MemorySurfaceBackend,
        state: EngineState,
        controller: InputController | None = None,
        presenter: FramePresenter | None = None,
        metrics: MetricsCollector | None = None,
        clock: FrameClock | None = None,
        pacer: FramePacer | None = None,
    ) -> None:
        self._window = window
        self._backend = backend
        self._state = state
        self._controller = controller or InputController()
        self._presenter = presenter
        self._metrics = metrics or MetricsCollector()
        self._clock = clock or FrameClock()
        self._pacer = pacer
        self._last_frame_ms = 0.0

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def metrics(self) -> MetricsCollector:
        return self._metrics

    def run(self) -> None:
        _LOG.info("loop_start")
        self._window.run_loop(self.run_frame)
        _LOG.info(
            "loop_exit frames=%d paths=%d pitch=%d",
            self._state.frame_index,
            self._state.path_count,
            self._state.grid.pitch,
        )

    def run_frame(self) -> bool:
        """Run one frame; returns False once the canvas should stop."""
        if self._pacer is not None:
            self._pacer.begin_frame()
        frame_index = self._state.frame_index
        self._metrics.begin_frame(frame_index)
        timing = self._clock.next(frame_index)

        close_requested = any(
            isinstance(event, WindowCloseEvent) for event in self._window.poll_events()
        )
        self._controller.consume_window_input_events(self._window.poll_input_events())
        snapshot = self._controller.build_input_snapshot(
            frame_index=frame_index,
            close_requested=close_requested,
        )
        report = step_frame(self._state, snapshot, self._backend)
        self._record(report)
        self._present(report, snapshot)

        frame = self._metrics.end_frame(timing.delta_seconds * 1000.0)
        self._last_frame_ms = frame.dt_ms
        self._log_frame(frame)
        if self._pacer is not None:
            self._pacer.wait()
        return self._state.running

    def _record(self, report: FrameReport) -> None:
        metrics = self._metrics
        metrics.increment("regrows", len(report.growth))
        metrics.increment("allocated", report.paging.allocated)
        metrics.increment("swapped_in", report.paging.swapped_in)
        metrics.increment("swapped_out", report.paging.swapped_out)
        metrics.increment("recovered", report.paging.recovered)
        metrics.increment("composited", report.composite.composited)

    def _present(self, report: FrameReport, snapshot: InputSnapshot) -> None:
        try:
            self._backend.present()
            if self._presenter is None:
                return
            self._presenter.update_overlay(report.overlay)
            cursor = Vector2(snapshot.pointer.x, snapshot.pointer.y)
            self._presenter.update_hud(status_lines(self._state, self._last_frame_ms), cursor)
            self._presenter.render()
        except RECOVERABLE_RUNTIME_ERRORS as exc:
            if not is_recoverable_frame_error(exc):
                raise
            self._metrics.increment("render_failures")
            log_recoverable(
                _LOG,
                f"frame_present_failed frame={report.frame_index} action=skip",
                level=logging.WARNING,
            )

    @staticmethod
    def _log_frame(frame: FrameMetrics) -> None:
        if not _LOG.isEnabledFor(logging.DEBUG):
            return
        if not (frame.regrows or frame.swapped_in or frame.swapped_out or frame.recovered):
            return
        _LOG.debug(
            "frame_metrics frame=%d dt_ms=%.2f regrows=%d allocated=%d swapped_in=%d "
            "swapped_out=%d composited=%d recovered=%d",
            frame.frame_index,
            frame.dt_ms,
            frame.regrows,
            frame.allocated,
            frame.swapped_in,
            frame.swapped_out,
            frame.composited,
            frame.recovered,
            extra={"frame": asdict(frame)},
        )


__all__ = ["FrameLoop", "FramePresenter"]
