from __future__ import annotations

import numpy as np
import pytest

from koko.canvas.rle import RunLengthError, RunLengthStream, compress, expand, expand_into


def test_empty_input_compresses_to_empty_stream_which_does_not_expand() -> None:
    stream = compress(b"")
    assert len(stream) == 0
    assert stream.expanded_size == 0
    with pytest.raises(RunLengthError, match="empty"):
        expand(stream)


def test_single_byte_flushes_final_run() -> None:
    stream = compress(b"\x07")
    assert stream.pairs == [(7, 1)]
    assert expand(stream).tolist() == [7]


def test_runs_flush_on_every_value_change() -> None:
    stream = compress(b"aaab")
    assert stream.pairs == [(97, 3), (98, 1)]
    assert stream.encoded_size == 4


def test_uniform_tile_collapses_to_one_pair() -> None:
    data = np.full(1280 * 720 * 4, 13, dtype=np.uint8)
    stream = compress(data)
    assert stream.pairs == [(13, data.size)]
    assert np.array_equal(expand(stream), data)


def test_alternating_bytes_cost_one_pair_per_byte() -> None:
    data = b"\x00\x01" * 4
    stream = compress(data)
    assert len(stream) == 8
    assert stream.encoded_size == 2 * len(data)
    assert expand(stream).tobytes() == data


def test_round_trip_reproduces_noisy_bytes() -> None:
    data = np.random.default_rng(7).integers(0, 4, size=5000, dtype=np.uint8)
    assert np.array_equal(expand(compress(data)), data)


def test_compress_accepts_multidimensional_arrays() -> None:
    pixels = np.zeros((2, 3, 4), dtype=np.uint8)
    pixels[1, 2] = (1, 2, 3, 4)
    assert np.array_equal(expand(compress(pixels)), pixels.reshape(-1))


def test_expand_rejects_inconsistent_streams() -> None:
    with pytest.raises(RunLengthError, match="expected 4"):
        expand(compress(b"abc"), expected_size=4)
    with pytest.raises(RunLengthError, match="non-positive"):
        expand(RunLengthStream(values=np.array([1], dtype=np.uint8), counts=np.array([0])))
    with pytest.raises(RunLengthError, match="malformed"):
        expand(RunLengthStream(values=np.array([1, 2], dtype=np.uint8), counts=np.array([3])))


def test_expand_into_fills_scratch_in_place() -> None:
    scratch = np.zeros(6, dtype=np.uint8)
    out = expand_into(compress(b"\x05\x05\x05\x09\x09\x09"), scratch)
    assert out is scratch
    assert scratch.tolist() == [5, 5, 5, 9, 9, 9]
    with pytest.raises(RunLengthError):
        expand_into(compress(b"\x05"), scratch)
