"""koko: infinite-canvas paint toy with paged region tiles."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from koko.runtime.config import RuntimeConfig


def run(*, config: "RuntimeConfig | None" = None) -> int:
    """Run the paint loop with runtime-owned composition."""
    from koko.runtime.entrypoint import run as runtime_run

    return runtime_run(config=config)


__all__ = ["run"]
