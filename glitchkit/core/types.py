from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Union

import numpy as np
import torch

from glitchkit.core.errors import IndexOutOfRange, InvalidRange

ArrayLike = Union[torch.Tensor, np.ndarray, Sequence[float]]


class SampleBuffer:
    """
    Immutable multi-channel float buffer, shape (channels, length).
    Every transformation returns a new buffer; the backing tensor is never
    handed out without a copy.
    """

    __slots__ = ("_data", "_sample_rate")

    def __init__(self, data: torch.Tensor, sample_rate: int):
        if data.dim() != 2:
            raise ValueError(f"expected (channels, length) tensor, got shape {tuple(data.shape)}")
        if data.shape[0] < 1:
            raise ValueError("buffer needs at least one channel")
        if int(sample_rate) <= 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}")
        self._data = data.detach().to(torch.float32).clone()
        self._sample_rate = int(sample_rate)

    @classmethod
    def zeros(cls, num_channels: int, length: int, sample_rate: int) -> "SampleBuffer":
        if length < 0:
            raise ValueError(f"length must be >= 0, got {length}")
        return cls(torch.zeros(num_channels, length), sample_rate)

    @classmethod
    def from_channels(cls, channels: Sequence[ArrayLike], sample_rate: int) -> "SampleBuffer":
        """Build from per-channel arrays; all channels must share one length."""
        if len(channels) == 0:
            raise ValueError("buffer needs at least one channel")
        rows = [torch.as_tensor(np.asarray(ch, dtype=np.float32)).view(-1) for ch in channels]
        lengths = {r.shape[0] for r in rows}
        if len(lengths) != 1:
            raise ValueError(f"channels differ in length: {sorted(lengths)}")
        return cls(torch.stack(rows), sample_rate)

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def num_channels(self) -> int:
        return self._data.shape[0]

    @property
    def length(self) -> int:
        return self._data.shape[1]

    @property
    def duration(self) -> float:
        return self.length / self._sample_rate

    @property
    def samples(self) -> torch.Tensor:
        """Copy of the sample data, shape (channels, length)."""
        return self._data.clone()

    def __len__(self) -> int:
        return self.length

    def __repr__(self) -> str:
        return (
            f"SampleBuffer(channels={self.num_channels}, length={self.length}, "
            f"sample_rate={self._sample_rate})"
        )

    # ------------------------------------------------------------------
    # Bounds-checked access
    # ------------------------------------------------------------------

    def _check_channel(self, channel: int) -> None:
        if not 0 <= channel < self.num_channels:
            raise IndexOutOfRange(f"channel {channel} outside [0, {self.num_channels})")

    def read(self, channel: int, start: int = 0, stop: Optional[int] = None) -> torch.Tensor:
        """Copy of samples [start, stop) of one channel."""
        self._check_channel(channel)
        stop = self.length if stop is None else stop
        if start < 0 or stop > self.length or start > stop:
            raise IndexOutOfRange(f"read [{start}, {stop}) outside [0, {self.length})")
        return self._data[channel, start:stop].clone()

    def sample(self, channel: int, index: int) -> float:
        self._check_channel(channel)
        if not 0 <= index < self.length:
            raise IndexOutOfRange(f"sample {index} outside [0, {self.length})")
        return float(self._data[channel, index])

    def write(self, channel: int, offset: int, values: ArrayLike) -> "SampleBuffer":
        """Return a new buffer with `values` written into one channel at `offset`."""
        self._check_channel(channel)
        values = torch.as_tensor(np.asarray(values, dtype=np.float32)).view(-1)
        end = offset + values.shape[0]
        if offset < 0 or end > self.length:
            raise IndexOutOfRange(f"write [{offset}, {end}) outside [0, {self.length})")
        data = self._data.clone()
        data[channel, offset:end] = values
        return SampleBuffer(data, self._sample_rate)

    def copy_slice(self, start: int, length: int) -> "SampleBuffer":
        """New buffer holding [start, start + length) of every channel."""
        if start < 0 or length < 0 or start + length > self.length:
            raise InvalidRange(
                f"slice [{start}, {start + length}) outside source of length {self.length}"
            )
        return SampleBuffer(self._data[:, start:start + length], self._sample_rate)

    def with_samples(self, data: torch.Tensor) -> "SampleBuffer":
        """Derived buffer at the same sample rate."""
        return SampleBuffer(data, self._sample_rate)


@dataclass(frozen=True)
class Shot:
    id: int
    buffer: SampleBuffer


@dataclass(frozen=True)
class SkippedSlice:
    """A kit index that produced no shot, with the reason (too_long, short_source, empty)."""
    index: int
    reason: str


@dataclass
class Kit:
    """Ordered shots from one generation run plus the skip record."""
    shots: List[Shot] = field(default_factory=list)
    requested: int = 0
    skipped: List[SkippedSlice] = field(default_factory=list)

    @property
    def produced(self) -> int:
        return len(self.shots)

    def __len__(self) -> int:
        return len(self.shots)

    def __iter__(self) -> Iterator[Shot]:
        return iter(self.shots)

    def __getitem__(self, index: int) -> Shot:
        return self.shots[index]
