"""Run-length codec for swapped-out tile pixels.

A stream is a sequence of ``(value, count)`` pairs stored as two parallel numpy
arrays. Encoding is a single left-to-right pass that flushes a pair whenever the
byte value changes (the final run is always flushed), so every run costs exactly
two entries regardless of its length: a uniform tile collapses to one pair and a
fully noisy one grows to one pair per byte.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


class RunLengthError(ValueError):
    """Compressed stream is empty or does not expand to the expected size."""


@dataclass(frozen=True, slots=True, eq=False)
class RunLengthStream:
    """Immutable run-length encoded byte stream."""

    values: np.ndarray
    counts: np.ndarray

    def __len__(self) -> int:
        return int(self.values.shape[0])

    @property
    def expanded_size(self) -> int:
        return int(self.counts.sum()) if len(self) else 0

    @property
    def pairs(self) -> list[tuple[int, int]]:
        return [(int(v), int(c)) for v, c in zip(self.values, self.counts)]

    @property
    def encoded_size(self) -> int:
        """Size in pair units (two per run)."""
        return 2 * len(self)


def compress(data: bytes | bytearray | memoryview | np.ndarray) -> RunLengthStream:
    """Encode ``data`` into value/count runs."""
    if isinstance(data, np.ndarray):
        flat = np.ascontiguousarray(data, dtype=np.uint8).reshape(-1)
    else:
        flat = np.frombuffer(bytes(data), dtype=np.uint8)
    if flat.size == 0:
        return RunLengthStream(
            values=np.empty(0, dtype=np.uint8), counts=np.empty(0, dtype=np.int64)
        )
    # run starts: index 0 plus every index whose byte differs from its predecessor
    starts = np.concatenate(([0], np.flatnonzero(flat[1:] != flat[:-1]) + 1))
    counts = np.diff(np.append(starts, flat.size)).astype(np.int64)
    return RunLengthStream(values=flat[starts].copy(), counts=counts)


def expand(stream: RunLengthStream, *, expected_size: int | None = None) -> np.ndarray:
    """Decode ``stream`` back into a flat uint8 array.

    Raises ``RunLengthError`` when the stream is empty, holds non-positive run
    lengths, or does not add up to ``expected_size``.
    """
    if len(stream) == 0:
        raise RunLengthError("run-length stream is empty")
    if stream.values.shape != stream.counts.shape:
        raise RunLengthError(
            f"run-length stream is malformed: {stream.values.shape} values, "
            f"{stream.counts.shape} counts"
        )
    if np.any(stream.counts <= 0):
        raise RunLengthError("run-length stream holds a non-positive run length")
    size = stream.expanded_size
    if expected_size is not None and size != expected_size:
        raise RunLengthError(f"run-length stream expands to {size} bytes, expected {expected_size}")
    return np.repeat(stream.values, stream.counts)


def expand_into(stream: RunLengthStream, scratch: np.ndarray) -> np.ndarray:
    """Decode ``stream`` into the preallocated ``scratch`` buffer and return it."""
    np.copyto(scratch, expand(stream, expected_size=int(scratch.size)))
    return scratch


__all__ = ["RunLengthError", "RunLengthStream", "compress", "expand", "expand_into"]
