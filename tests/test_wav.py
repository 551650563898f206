"""
Tests for glitchkit/export/wav: byte-exact header, sample conversion, decode round-trip.
"""
import sys
import os
import io
import struct

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import numpy as np
import soundfile as sf
import torch

from glitchkit.core.types import SampleBuffer
from glitchkit.export.wav import HEADER_SIZE, encode_wav, float_to_pcm16, wav_header

SR = 44100


def _stereo_fixture() -> SampleBuffer:
    values = [0.5, -1.0, 1.0, 0.0]
    return SampleBuffer.from_channels([values, values], SR)


def _parse_header(data: bytes) -> dict:
    fields = struct.unpack("<4sI4s4sIHHIIHH4sI", data[:HEADER_SIZE])
    keys = [
        "riff", "chunk_size", "wave", "fmt", "fmt_size", "format_tag", "channels",
        "sample_rate", "byte_rate", "block_align", "bits", "data", "data_length",
    ]
    return dict(zip(keys, fields))


def test_header_fields_stereo():
    data = encode_wav(_stereo_fixture())
    assert len(data) == 44 + 16
    h = _parse_header(data)
    assert h["riff"] == b"RIFF"
    assert h["chunk_size"] == len(data) - 8 == 52
    assert h["wave"] == b"WAVE"
    assert h["fmt"] == b"fmt "
    assert h["fmt_size"] == 16
    assert h["format_tag"] == 1
    assert h["channels"] == 2
    assert h["sample_rate"] == SR
    assert h["byte_rate"] == SR * 2 * 2
    assert h["block_align"] == 4
    assert h["bits"] == 16
    assert h["data"] == b"data"
    assert h["data_length"] == 16


def test_header_bytes_exact():
    expected = (
        b"RIFF" + (36 + 8).to_bytes(4, "little") + b"WAVE"
        + b"fmt " + (16).to_bytes(4, "little") + (1).to_bytes(2, "little")
        + (1).to_bytes(2, "little") + (8000).to_bytes(4, "little")
        + (16000).to_bytes(4, "little") + (2).to_bytes(2, "little")
        + (16).to_bytes(2, "little") + b"data" + (8).to_bytes(4, "little")
    )
    assert wav_header(1, 8000, 4) == expected


def test_samples_interleaved_and_scaled():
    data = encode_wav(_stereo_fixture())
    pcm = np.frombuffer(data[HEADER_SIZE:], dtype="<i2")
    assert pcm.tolist() == [16383, 16383, -32768, -32768, 32767, 32767, 0, 0]


def test_round_trip_within_one_lsb():
    data = encode_wav(_stereo_fixture())
    pcm = np.frombuffer(data[HEADER_SIZE:], dtype="<i2").reshape(-1, 2).T
    decoded = np.where(pcm < 0, pcm / 32768.0, pcm / 32767.0)
    original = _stereo_fixture().samples.numpy()
    assert np.max(np.abs(decoded - original)) <= 1.0 / 32767.0


def test_channel_order_in_frames():
    buf = SampleBuffer.from_channels([[0.25, 0.25], [-0.25, -0.25]], SR)
    pcm = np.frombuffer(encode_wav(buf)[HEADER_SIZE:], dtype="<i2")
    assert pcm.tolist() == [8191, -8192, 8191, -8192]


def test_clamp_and_truncation():
    x = torch.tensor([1.5, -2.0, 0.00001, -0.00001, -0.5, 0.999999])
    assert float_to_pcm16(x).tolist() == [32767, -32768, 0, 0, -16384, 32766]


def test_empty_buffer_is_header_only():
    data = encode_wav(SampleBuffer.zeros(2, 0, SR))
    assert len(data) == HEADER_SIZE
    h = _parse_header(data)
    assert h["data_length"] == 0
    assert h["chunk_size"] == 36


def test_readable_by_libsndfile():
    buf = SampleBuffer.from_channels([np.linspace(-1, 1, 100), np.linspace(1, -1, 100)], 22050)
    data, sr = sf.read(io.BytesIO(encode_wav(buf)), dtype="int16", always_2d=True)
    assert sr == 22050
    assert data.shape == (100, 2)
    expected = float_to_pcm16(buf.samples).T
    assert np.array_equal(data, expected)


def test_encoding_is_deterministic():
    buf = SampleBuffer(torch.rand(2, 1000) * 2 - 1, SR)
    assert encode_wav(buf) == encode_wav(buf)
