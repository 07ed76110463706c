"""Runtime: configuration, logging, timing, frame stepping and the loop."""

from koko.runtime.config import RuntimeConfig, get_runtime_config, load_runtime_config
from koko.runtime.frame import FrameReport, step_frame
from koko.runtime.loop import FrameLoop
from koko.runtime.state import EngineState, create_engine_state

__all__ = [
    "EngineState",
    "FrameLoop",
    "FrameReport",
    "RuntimeConfig",
    "create_engine_state",
    "get_runtime_config",
    "load_runtime_config",
    "step_frame",
]
