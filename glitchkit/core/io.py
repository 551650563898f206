import io
import logging
from pathlib import Path
from typing import Union

import numpy as np
import soundfile as sf
import torch

from glitchkit.core.errors import DecodeError
from glitchkit.core.types import SampleBuffer
from glitchkit.export.wav import encode_wav

logger = logging.getLogger(__name__)


class AudioIO:
    @staticmethod
    def load(path: Union[str, Path]) -> SampleBuffer:
        """Decodes an audio file into a channel-major SampleBuffer."""
        try:
            data, sample_rate = sf.read(str(path), dtype="float32", always_2d=True)
        except (sf.LibsndfileError, RuntimeError, OSError) as e:
            raise DecodeError(f"could not decode {path}: {e}") from e
        return AudioIO._to_buffer(data, sample_rate, str(path))

    @staticmethod
    def from_bytes(payload: bytes) -> SampleBuffer:
        """Decodes an in-memory audio container (for API requests)."""
        if not payload:
            raise DecodeError("empty audio payload")
        try:
            data, sample_rate = sf.read(io.BytesIO(payload), dtype="float32", always_2d=True)
        except (sf.LibsndfileError, RuntimeError) as e:
            raise DecodeError(f"could not decode audio payload: {e}") from e
        return AudioIO._to_buffer(data, sample_rate, "<bytes>")

    @staticmethod
    def _to_buffer(data: np.ndarray, sample_rate: int, label: str) -> SampleBuffer:
        # soundfile returns (frames, channels)
        if data.shape[1] == 0:
            raise DecodeError(f"{label}: no audio channels")
        samples = torch.from_numpy(np.ascontiguousarray(data.T))
        buffer = SampleBuffer(samples, sample_rate)
        logger.info("Decoded %s: %d ch, %d samples @ %d Hz", label, buffer.num_channels, buffer.length, sample_rate)
        return buffer

    @staticmethod
    def save_wav(buffer: SampleBuffer, path: Union[str, Path]) -> Path:
        """Writes the buffer as a 16-bit PCM WAV file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(encode_wav(buffer))
        return path
