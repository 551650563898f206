"""
Canonical 16-bit PCM WAV encoder.
Fixed 44-byte header (RIFF / fmt / data), little-endian, interleaved frames.
Output is byte-exact so exported shots compare identically across runs.
"""
import struct

import numpy as np
import torch

from glitchkit.core.types import SampleBuffer

HEADER_SIZE = 44
BITS_PER_SAMPLE = 16
PCM_FORMAT_TAG = 1

_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


def float_to_pcm16(samples: torch.Tensor) -> np.ndarray:
    """
    Clamp to [-1, 1], scale negatives by 32768 and the rest by 32767,
    truncate toward zero.
    """
    x = np.clip(samples.detach().cpu().numpy().astype(np.float64), -1.0, 1.0)
    scaled = np.where(x < 0, x * 32768.0, x * 32767.0)
    return np.trunc(scaled).astype("<i2")


def wav_header(num_channels: int, sample_rate: int, num_frames: int) -> bytes:
    block_align = num_channels * 2
    data_length = num_frames * block_align
    return _HEADER.pack(
        b"RIFF",
        HEADER_SIZE + data_length - 8,
        b"WAVE",
        b"fmt ",
        16,
        PCM_FORMAT_TAG,
        num_channels,
        sample_rate,
        sample_rate * block_align,
        block_align,
        BITS_PER_SAMPLE,
        b"data",
        data_length,
    )


def encode_wav(buffer: SampleBuffer) -> bytes:
    """Serialize a buffer to WAV bytes. An empty buffer yields a header-only file."""
    header = wav_header(buffer.num_channels, buffer.sample_rate, buffer.length)
    # (channels, frames) -> frames of interleaved channels
    pcm = float_to_pcm16(buffer.samples).T
    return header + np.ascontiguousarray(pcm).tobytes()
