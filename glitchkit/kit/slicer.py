"""
Randomized slice selection anchored to detected transients.
"""
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from glitchkit.core.rng import RandomSource
from glitchkit.core.types import SampleBuffer

TRANSIENT_PROBABILITY = 0.7
# One second at 44.1 kHz; intentionally not scaled by the source sample rate
FALLBACK_WINDOW = 22050
MIN_LENGTH_S = 0.02

REJECT_TOO_LONG = "too_long"
REJECT_SHORT_SOURCE = "short_source"
REJECT_EMPTY = "empty"


@dataclass(frozen=True)
class SliceChoice:
    """Outcome of one selection attempt. `buffer` is None when rejected."""
    start: int
    length: int
    from_transient: bool
    buffer: Optional[SampleBuffer] = None
    reject_reason: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.buffer is not None


def select_slice(
    source: SampleBuffer,
    transients: Sequence[int],
    max_length_s: float,
    rng: RandomSource,
) -> SliceChoice:
    """
    Pick a start (a random transient 70% of the time, else anywhere in the
    fallback window) and a length in [0.02, max_length_s), then copy it out.
    Slices running past the end of the source are rejected, never clamped.
    """
    use_transient = rng.random() < TRANSIENT_PROBABILITY and len(transients) > 0
    if use_transient:
        start = int(transients[int(rng.random() * len(transients))])
    else:
        span = source.length - FALLBACK_WINDOW
        if span < 0:
            # Still consume the start draw so later draws line up
            rng.random()
            start = 0
        else:
            start = int(math.floor(rng.random() * span))

    length_s = MIN_LENGTH_S + rng.random() * (max(MIN_LENGTH_S, max_length_s) - MIN_LENGTH_S)
    length = int(math.floor(length_s * source.sample_rate))

    if not use_transient and source.length < FALLBACK_WINDOW:
        return SliceChoice(start, length, use_transient, reject_reason=REJECT_SHORT_SOURCE)
    if length <= 0:
        return SliceChoice(start, length, use_transient, reject_reason=REJECT_EMPTY)
    if start + length > source.length:
        return SliceChoice(start, length, use_transient, reject_reason=REJECT_TOO_LONG)

    return SliceChoice(start, length, use_transient, buffer=source.copy_slice(start, length))
