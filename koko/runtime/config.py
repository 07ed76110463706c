"""Centralized runtime configuration sourced from ``KOKO_*`` environment variables."""

from __future__ import annotations

import os
from contextvars import ContextVar
from dataclasses import dataclass, replace
from typing import Mapping

from koko.api.logging import LoggingConfig
from koko.canvas.units import TILE_HEIGHT, TILE_WIDTH

WINDOW_TITLE = "koko gl"
WINDOW_BACKENDS: tuple[str, ...] = ("rendercanvas_glfw", "headless")


@dataclass(frozen=True, slots=True)
class RuntimeCanvasConfig:
    initial_pitch: int
    pan_step: int


@dataclass(frozen=True, slots=True)
class RuntimeWindowConfig:
    backend: str
    title: str
    width: int
    height: int
    headless_frames: int


@dataclass(frozen=True, slots=True)
class RuntimeLoopConfig:
    target_fps: float

    @property
    def frame_budget_seconds(self) -> float:
        return 1.0 / self.target_fps


@dataclass(frozen=True, slots=True)
class RuntimeInputConfig:
    trace_enabled: bool


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    logging: LoggingConfig
    canvas: RuntimeCanvasConfig
    window: RuntimeWindowConfig
    loop: RuntimeLoopConfig
    input: RuntimeInputConfig

    def with_overrides(
        self,
        *,
        log_level: str | None = None,
        backend: str | None = None,
        headless_frames: int | None = None,
    ) -> RuntimeConfig:
        """Return a copy with CLI-level overrides applied."""
        config = self
        if log_level is not None:
            config = replace(config, logging=replace(config.logging, level_name=log_level.upper()))
        window = config.window
        if backend is not None:
            window = replace(window, backend=_normalize_window_backend(backend))
        if headless_frames is not None:
            window = replace(window, headless_frames=max(0, int(headless_frames)))
        return replace(config, window=window)


_RUNTIME_CONFIG: ContextVar[RuntimeConfig | None] = ContextVar("koko_runtime_config", default=None)


def _raw(name: str, *, env: Mapping[str, str] | None = None) -> str | None:
    value = os.getenv(name) if env is None else env.get(name)
    return None if value is None else str(value)


def _flag(name: str, default: bool, *, env: Mapping[str, str] | None = None) -> bool:
    raw = _raw(name, env=env)
    if raw is None:
        return bool(default)
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return bool(default)


def _int(
    name: str,
    default: int,
    *,
    minimum: int | None = None,
    env: Mapping[str, str] | None = None,
) -> int:
    raw = _raw(name, env=env)
    if raw is None:
        value = int(default)
    else:
        try:
            value = int(raw.strip())
        except ValueError:
            value = int(default)
    if minimum is None:
        return value
    return max(int(minimum), value)


def _float(
    name: str,
    default: float,
    *,
    minimum: float | None = None,
    env: Mapping[str, str] | None = None,
) -> float:
    raw = _raw(name, env=env)
    if raw is None:
        value = float(default)
    else:
        try:
            value = float(raw.strip())
        except ValueError:
            value = float(default)
    if minimum is None:
        return value
    return max(float(minimum), value)


def _text(name: str, default: str, *, env: Mapping[str, str] | None = None) -> str:
    raw = _raw(name, env=env)
    if raw is None:
        return str(default)
    value = raw.strip()
    return value if value else str(default)


def _normalize_window_backend(raw: str) -> str:
    value = str(raw).strip().lower()
    if value in {"rendercanvas", "rendercanvas_glfw", "glfw"}:
        return "rendercanvas_glfw"
    if value in {"headless", "none", "offscreen"}:
        return "headless"
    return value


def _normalize_log_format(raw: str) -> str:
    value = str(raw).strip().lower()
    return value if value in {"text", "json"} else "text"


def resolve_log_level_name(default: str = "INFO", *, env: Mapping[str, str] | None = None) -> str:
    """Resolve log level with the ``KOKO_`` prefixed override winning over ``LOG_LEVEL``."""
    value = _raw("KOKO_LOG_LEVEL", env=env)
    if value is None:
        value = _raw("LOG_LEVEL", env=env) or default
    return value.strip().upper() or default


def load_runtime_config(*, env: Mapping[str, str] | None = None) -> RuntimeConfig:
    scope_env = env
    log_file = _text("KOKO_LOG_FILE", "", env=scope_env)
    return RuntimeConfig(
        logging=LoggingConfig(
            level_name=resolve_log_level_name(env=scope_env),
            console_format=_normalize_log_format(_text("KOKO_LOG_FORMAT", "text", env=scope_env)),
            file_path=log_file or None,
            file_format="json",
        ),
        canvas=RuntimeCanvasConfig(
            initial_pitch=_int("KOKO_INITIAL_PITCH", 3, minimum=1, env=scope_env),
            pan_step=_int("KOKO_PAN_STEP", 5, minimum=1, env=scope_env),
        ),
        window=RuntimeWindowConfig(
            backend=_normalize_window_backend(
                _text("KOKO_WINDOW_BACKEND", "rendercanvas_glfw", env=scope_env)
            ),
            title=WINDOW_TITLE,
            width=TILE_WIDTH,
            height=TILE_HEIGHT,
            headless_frames=_int("KOKO_HEADLESS_FRAMES", 0, minimum=0, env=scope_env),
        ),
        loop=RuntimeLoopConfig(
            target_fps=_float("KOKO_TARGET_FPS", 120.0, minimum=1.0, env=scope_env),
        ),
        input=RuntimeInputConfig(
            trace_enabled=_flag("KOKO_DEBUG_INPUT", False, env=scope_env),
        ),
    )


def initialize_runtime_config(*, env: Mapping[str, str] | None = None) -> RuntimeConfig:
    config = load_runtime_config(env=env)
    _RUNTIME_CONFIG.set(config)
    return config


def set_runtime_config(config: RuntimeConfig) -> RuntimeConfig:
    _RUNTIME_CONFIG.set(config)
    return config


def get_runtime_config() -> RuntimeConfig:
    config = _RUNTIME_CONFIG.get()
    if config is not None:
        return config
    return initialize_runtime_config()


__all__ = [
    "RuntimeCanvasConfig",
    "RuntimeConfig",
    "RuntimeInputConfig",
    "RuntimeLoopConfig",
    "RuntimeWindowConfig",
    "WINDOW_BACKENDS",
    "WINDOW_TITLE",
    "get_runtime_config",
    "initialize_runtime_config",
    "load_runtime_config",
    "resolve_log_level_name",
    "set_runtime_config",
]
