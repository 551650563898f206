"""
Varispeed resampling: read the input at `playback_rate` samples per output
sample, like a tape or sampler playing faster or slower. Pitch and duration
change together.
"""
import math

import torch


def semitones_to_rate(semitones: float) -> float:
    return 2.0 ** (semitones / 12.0)


def resampled_length(length: int, playback_rate: float) -> int:
    return int(math.floor(length / playback_rate))


def varispeed(samples: torch.Tensor, playback_rate: float) -> torch.Tensor:
    """
    Linear-interpolation resampler over the last dimension.
    Output length is floor(length / playback_rate); reads past the final input
    sample interpolate toward silence.
    """
    if playback_rate <= 0:
        raise ValueError(f"playback_rate must be positive, got {playback_rate}")
    n_in = samples.shape[-1]
    n_out = resampled_length(n_in, playback_rate)
    if n_out <= 0 or n_in == 0:
        return samples.new_zeros(samples.shape[:-1] + (max(n_out, 0),))

    # One trailing zero so index_ceil of the last sample stays valid
    padded = torch.nn.functional.pad(samples.to(torch.float64), (0, 1))
    read_pos = torch.arange(n_out, dtype=torch.float64) * playback_rate
    index_floor = torch.floor(read_pos).long().clamp(max=n_in)
    index_ceil = (index_floor + 1).clamp(max=n_in)
    frac = read_pos - index_floor.to(torch.float64)

    out = padded[..., index_floor] * (1.0 - frac) + padded[..., index_ceil] * frac
    return out.to(samples.dtype)
