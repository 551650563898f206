"""
Energy-threshold onset detection.
Channel 0 is split into 512-sample chunks; an onset is reported at the start
of every chunk whose energy rises above max_energy * threshold_ratio.
"""
from typing import List

import torch

from glitchkit.core.types import SampleBuffer

CHUNK_SIZE = 512


def chunk_energies(samples: torch.Tensor, chunk_size: int = CHUNK_SIZE) -> torch.Tensor:
    """Sum of squares per chunk. The last chunk may be shorter."""
    x = samples.view(-1).to(torch.float64)
    n = x.shape[0]
    if n == 0:
        return torch.zeros(0, dtype=torch.float64)
    n_chunks = -(-n // chunk_size)
    padded = torch.nn.functional.pad(x, (0, n_chunks * chunk_size - n))
    return (padded.view(n_chunks, chunk_size) ** 2).sum(dim=1)


def detect_transients(buffer: SampleBuffer, threshold_ratio: float) -> List[int]:
    """
    Sample offsets (strictly increasing) where chunk energy crosses the threshold.
    The first chunk is never reported since it has no predecessor.
    """
    energies = chunk_energies(buffer.read(0))
    if energies.shape[0] < 2:
        return []

    threshold = float(energies.max()) * float(threshold_ratio)
    above = energies > threshold
    rising = above[1:] & ~above[:-1]
    indices = torch.nonzero(rising).view(-1) + 1
    return [int(i) * CHUNK_SIZE for i in indices]
