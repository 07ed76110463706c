"""Runtime-owned public entrypoint: build the canvas, window and presenter, then loop."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence

from koko.api.window import WindowPort
from koko.input.input_controller import InputController
from koko.rendering.memory_surface import MemorySurfaceBackend
from koko.runtime.config import (
    WINDOW_BACKENDS,
    RuntimeConfig,
    get_runtime_config,
    load_runtime_config,
    set_runtime_config,
)
from koko.runtime.logging import configure_logging, shutdown_logging
from koko.runtime.loop import FrameLoop, FramePresenter
from koko.runtime.state import create_engine_state
from koko.runtime.time import FramePacer

_LOG = logging.getLogger("koko.runtime.entrypoint")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="koko",
        description="Infinite-canvas paint toy with a growable, paged tile grid.",
    )
    parser.add_argument("--log-level", help="override KOKO_LOG_LEVEL (DEBUG, INFO, ...)")
    parser.add_argument(
        "--backend",
        choices=WINDOW_BACKENDS,
        help="override KOKO_WINDOW_BACKEND",
    )
    parser.add_argument(
        "--frames",
        type=int,
        help="stop a headless run after this many frames (0 = until exit)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    config = load_runtime_config().with_overrides(
        log_level=args.log_level,
        backend=args.backend,
        headless_frames=args.frames,
    )
    return run(config=config)


def create_frame_loop(config: RuntimeConfig, *, window: WindowPort | None = None) -> FrameLoop:
    """Wire window, surface backend, presenter and state for one run.

    Raises RuntimeError when the window or GPU presenter cannot be created.
    """
    if window is None:
        from koko.window.factory import create_window_layer

        window = create_window_layer(config)
    backend = MemorySurfaceBackend(config.window.width, config.window.height)
    presenter: FramePresenter | None = None
    pacer: FramePacer | None = None
    if window.canvas is not None:
        from koko.rendering.presenter import PygfxPresenter

        pygfx_presenter = PygfxPresenter(
            window.canvas,
            width=config.window.width,
            height=config.window.height,
        )
        backend.set_present_sink(pygfx_presenter.show_frame)
        presenter = pygfx_presenter
    else:
        pacer = FramePacer(config.loop.frame_budget_seconds)
    window.set_title(config.window.title)
    return FrameLoop(
        window=window,
        backend=backend,
        state=create_engine_state(config),
        controller=InputController(trace_enabled=config.input.trace_enabled),
        presenter=presenter,
        pacer=pacer,
    )


def run(*, config: RuntimeConfig | None = None, window: WindowPort | None = None) -> int:
    """Run until exit is requested; returns the process exit status."""
    config = set_runtime_config(config) if config is not None else get_runtime_config()
    configure_logging(config.logging)
    _LOG.info(
        "startup backend=%s pitch=%d target_fps=%.1f",
        config.window.backend,
        config.canvas.initial_pitch,
        config.loop.target_fps,
    )
    try:
        loop = create_frame_loop(config, window=window)
    except RuntimeError:
        _LOG.critical("startup_failed backend=%s", config.window.backend, exc_info=True)
        shutdown_logging()
        return 1
    try:
        loop.run()
    finally:
        shutdown_logging()
    return 0


__all__ = ["build_arg_parser", "create_frame_loop", "main", "run"]
