import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest
import torch

from glitchkit.core.types import SampleBuffer

SR = 44100


class ScriptedRandom:
    """RandomSource that replays a fixed list of draws and fails when it runs dry."""

    def __init__(self, values):
        self._values = list(values)
        self.calls = 0

    def random(self) -> float:
        if self.calls >= len(self._values):
            raise AssertionError(f"unexpected draw #{self.calls + 1}")
        value = self._values[self.calls]
        self.calls += 1
        return value

    @property
    def exhausted(self) -> bool:
        return self.calls == len(self._values)


def make_drum_loop(seconds: float = 2.0, hits_per_second: int = 4, channels: int = 1, seed: int = 7) -> SampleBuffer:
    """Decaying noise bursts on a regular grid, separated by near-silence."""
    gen = torch.Generator().manual_seed(seed)
    n = int(seconds * SR)
    data = torch.randn(channels, n, generator=gen) * 1e-4
    hit_len = int(0.08 * SR)
    decay = torch.exp(-torch.arange(hit_len, dtype=torch.float32) / (0.015 * SR))
    step = SR // hits_per_second
    for start in range(step // 2, n - hit_len, step):
        burst = torch.randn(channels, hit_len, generator=gen) * 0.5 * decay
        data[:, start:start + hit_len] += burst
    return SampleBuffer(torch.clamp(data, -1.0, 1.0), SR)


@pytest.fixture
def scripted():
    return ScriptedRandom


@pytest.fixture
def drum_loop():
    return make_drum_loop()
