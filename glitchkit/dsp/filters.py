"""
Time-varying low-pass filter for cutoff sweeps.
RBJ biquad (minimum-phase IIR) with coefficients recomputed every sample,
run in transposed direct form II so state carries across coefficient changes.
"""
import math

import numpy as np
import torch


def lowpass_coefficients(cutoff_hz: torch.Tensor, sample_rate: int, q: float = 0.707):
    """Per-sample normalized (b0, b1, b2, a1, a2) for an RBJ low-pass."""
    # Keep cutoff below Nyquist
    cutoff = torch.clamp(cutoff_hz.to(torch.float64), 1.0, sample_rate / 2.0 - 1.0)
    w0 = 2.0 * math.pi * cutoff / sample_rate
    cos_w0 = torch.cos(w0)
    alpha = torch.sin(w0) / (2.0 * q)
    a0 = 1.0 + alpha

    b0 = ((1.0 - cos_w0) / 2.0) / a0
    b1 = (1.0 - cos_w0) / a0
    a1 = (-2.0 * cos_w0) / a0
    a2 = (1.0 - alpha) / a0
    return b0, b1, b0.clone(), a1, a2


def swept_lowpass(
    waveform: torch.Tensor,
    sample_rate: int,
    cutoff_hz: torch.Tensor,
    q: float = 0.707,
) -> torch.Tensor:
    """
    Low-pass each channel of `waveform` (channels, length) with a cutoff that
    follows `cutoff_hz` (length,) sample by sample.
    """
    n = waveform.shape[-1]
    if cutoff_hz.shape[-1] != n:
        raise ValueError(f"cutoff curve length {cutoff_hz.shape[-1]} != signal length {n}")
    if n == 0:
        return waveform.clone()

    coeffs = [c.tolist() for c in lowpass_coefficients(cutoff_hz, sample_rate, q)]
    b0, b1, b2, a1, a2 = coeffs

    x = waveform.detach().to(torch.float64).reshape(-1, n).numpy()
    out = np.empty_like(x)
    for ch in range(x.shape[0]):
        z1 = 0.0
        z2 = 0.0
        row = out[ch]
        for i, xi in enumerate(x[ch].tolist()):
            yi = b0[i] * xi + z1
            z1 = b1[i] * xi - a1[i] * yi + z2
            z2 = b2[i] * xi - a2[i] * yi
            row[i] = yi

    return torch.from_numpy(out).reshape(waveform.shape).to(waveform.dtype)
