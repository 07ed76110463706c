from __future__ import annotations

import pytest

from koko.runtime.config import (
    WINDOW_TITLE,
    get_runtime_config,
    load_runtime_config,
    resolve_log_level_name,
    set_runtime_config,
)


def test_defaults_match_the_paint_toy() -> None:
    config = load_runtime_config(env={})
    assert config.canvas.initial_pitch == 3
    assert config.canvas.pan_step == 5
    assert config.window.backend == "rendercanvas_glfw"
    assert (config.window.width, config.window.height) == (1280, 720)
    assert config.window.title == WINDOW_TITLE
    assert config.loop.target_fps == 120.0
    assert config.loop.frame_budget_seconds == pytest.approx(1 / 120)
    assert config.logging.level_name == "INFO"
    assert config.logging.file_path is None
    assert not config.input.trace_enabled


def test_env_overrides_are_parsed_and_clamped() -> None:
    config = load_runtime_config(
        env={
            "KOKO_INITIAL_PITCH": "0",
            "KOKO_PAN_STEP": "12",
            "KOKO_WINDOW_BACKEND": "Offscreen",
            "KOKO_HEADLESS_FRAMES": "-4",
            "KOKO_TARGET_FPS": "not-a-number",
            "KOKO_DEBUG_INPUT": "yes",
            "KOKO_LOG_FORMAT": "JSON",
            "KOKO_LOG_FILE": "logs/koko.jsonl",
        }
    )
    assert config.canvas.initial_pitch == 1
    assert config.canvas.pan_step == 12
    assert config.window.backend == "headless"
    assert config.window.headless_frames == 0
    assert config.loop.target_fps == 120.0
    assert config.input.trace_enabled
    assert config.logging.console_format == "json"
    assert config.logging.file_path == "logs/koko.jsonl"


def test_unknown_log_format_falls_back_to_text() -> None:
    assert load_runtime_config(env={"KOKO_LOG_FORMAT": "xml"}).logging.console_format == "text"


def test_prefixed_log_level_wins() -> None:
    assert resolve_log_level_name(env={"LOG_LEVEL": "warning"}) == "WARNING"
    env = {"LOG_LEVEL": "warning", "KOKO_LOG_LEVEL": "debug"}
    assert resolve_log_level_name(env=env) == "DEBUG"
    assert resolve_log_level_name(env={}) == "INFO"


def test_cli_overrides_replace_only_what_is_given() -> None:
    base = load_runtime_config(env={"KOKO_HEADLESS_FRAMES": "7"})
    changed = base.with_overrides(log_level="debug", backend="glfw")
    assert changed.logging.level_name == "DEBUG"
    assert changed.window.backend == "rendercanvas_glfw"
    assert changed.window.headless_frames == 7
    assert base.with_overrides(headless_frames=3).window.headless_frames == 3
    assert base.with_overrides() == base


def test_context_config_can_be_replaced() -> None:
    config = load_runtime_config(env={"KOKO_PAN_STEP": "9"})
    set_runtime_config(config)
    assert get_runtime_config() is config
