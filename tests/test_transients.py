"""
Tests for glitchkit/dsp/transients: chunk energies and threshold crossings.
"""
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest
import torch

from glitchkit.core.types import SampleBuffer
from glitchkit.dsp.transients import CHUNK_SIZE, chunk_energies, detect_transients

SR = 44100


def _bursts(num_chunks: int, loud_chunks, level: float = 0.5, channels: int = 1) -> SampleBuffer:
    data = torch.zeros(channels, num_chunks * CHUNK_SIZE)
    for c in loud_chunks:
        data[0, c * CHUNK_SIZE:(c + 1) * CHUNK_SIZE] = level
    return SampleBuffer(data, SR)


def test_chunk_energies_partial_last_chunk():
    x = torch.ones(CHUNK_SIZE * 2 + 10)
    energies = chunk_energies(x)
    assert energies.tolist() == [512.0, 512.0, 10.0]


def test_chunk_energies_empty():
    assert chunk_energies(torch.zeros(0)).shape[0] == 0


@pytest.mark.parametrize("threshold", [0.0, 0.1, 0.5, 1.0])
def test_silence_has_no_transients(threshold):
    buf = SampleBuffer.zeros(1, SR, SR)
    assert detect_transients(buf, threshold) == []


def test_isolated_bursts_reported_at_chunk_start():
    buf = _bursts(8, [2, 5])
    assert detect_transients(buf, 0.5) == [2 * CHUNK_SIZE, 5 * CHUNK_SIZE]


def test_sustained_burst_reported_once():
    buf = _bursts(8, [2, 3, 4])
    assert detect_transients(buf, 0.5) == [2 * CHUNK_SIZE]


def test_first_chunk_never_reported():
    buf = _bursts(6, [0])
    assert detect_transients(buf, 0.5) == []


def test_threshold_one_reports_nothing():
    buf = _bursts(8, [2, 5])
    assert detect_transients(buf, 1.0) == []


def test_threshold_scales_with_max_energy():
    data = torch.zeros(1, 8 * CHUNK_SIZE)
    data[0, 2 * CHUNK_SIZE:3 * CHUNK_SIZE] = 1.0   # energy 512
    data[0, 5 * CHUNK_SIZE:6 * CHUNK_SIZE] = 0.5   # energy 128
    buf = SampleBuffer(data, SR)
    assert detect_transients(buf, 0.2) == [2 * CHUNK_SIZE, 5 * CHUNK_SIZE]
    assert detect_transients(buf, 0.3) == [2 * CHUNK_SIZE]


def test_partial_last_chunk_can_trigger():
    data = torch.zeros(1, 2 * CHUNK_SIZE + 100)
    data[0, 2 * CHUNK_SIZE:] = 0.9
    buf = SampleBuffer(data, SR)
    assert detect_transients(buf, 0.5) == [2 * CHUNK_SIZE]


def test_only_channel_zero_is_used():
    data = torch.zeros(2, 8 * CHUNK_SIZE)
    data[1, 3 * CHUNK_SIZE:4 * CHUNK_SIZE] = 0.8
    buf = SampleBuffer(data, SR)
    assert detect_transients(buf, 0.1) == []


def test_offsets_strictly_increasing_and_deterministic(drum_loop):
    first = detect_transients(drum_loop, 0.2)
    second = detect_transients(drum_loop, 0.2)
    assert first == second
    assert len(first) > 0
    assert all(b > a for a, b in zip(first, first[1:]))
    assert all(o % CHUNK_SIZE == 0 for o in first)
