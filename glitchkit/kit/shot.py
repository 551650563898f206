"""
Shot processing: varispeed pitch shift, low-pass sweep, then attack/decay gain.
Each call draws its random choices from the supplied RandomSource in a fixed
order: semitones, sweep start cutoff, sweep end cutoff, sweep end time.
"""
import logging
from dataclasses import dataclass

from glitchkit.core.rng import RandomSource, uniform
from glitchkit.core.types import SampleBuffer
from glitchkit.dsp.envelopes import attack_decay, exponential_sweep
from glitchkit.dsp.filters import swept_lowpass
from glitchkit.dsp.resample import semitones_to_rate, varispeed

logger = logging.getLogger(__name__)

SWEEP_START_HZ = (2000.0, 12000.0)
SWEEP_END_HZ = (100.0, 500.0)


@dataclass(frozen=True)
class ShotSettings:
    """Random choices made for one shot; kept for tracing and tests."""
    semitones: float
    playback_rate: float
    cutoff_start_hz: float
    cutoff_end_hz: float
    sweep_end_s: float
    duration_s: float


def draw_settings(rng: RandomSource, slice_duration_s: float, pitch_variation: int) -> ShotSettings:
    semitones = (rng.random() * 2.0 - 1.0) * pitch_variation
    playback_rate = semitones_to_rate(semitones)
    duration_s = slice_duration_s / playback_rate
    cutoff_start = uniform(rng, *SWEEP_START_HZ)
    cutoff_end = uniform(rng, *SWEEP_END_HZ)
    sweep_end = duration_s * (0.5 + rng.random() * 0.5)
    return ShotSettings(semitones, playback_rate, cutoff_start, cutoff_end, sweep_end, duration_s)


def render_shot(buffer: SampleBuffer, attack_s: float, settings: ShotSettings) -> SampleBuffer:
    """Deterministic part of the processor: apply fixed settings to a slice."""
    sr = buffer.sample_rate
    pitched = varispeed(buffer.samples, settings.playback_rate)
    n = pitched.shape[-1]

    cutoff = exponential_sweep(n, sr, settings.cutoff_start_hz, settings.cutoff_end_hz, settings.sweep_end_s)
    filtered = swept_lowpass(pitched, sr, cutoff)

    gain = attack_decay(n, sr, attack_s, settings.duration_s)
    return buffer.with_samples(filtered * gain.unsqueeze(0))


def process_shot(
    buffer: SampleBuffer,
    attack_s: float,
    pitch_variation: int,
    rng: RandomSource,
) -> SampleBuffer:
    """Turn a raw slice into a finished shot."""
    if buffer.length == 0:
        raise ValueError("cannot process an empty slice")
    settings = draw_settings(rng, buffer.duration, pitch_variation)
    logger.debug(
        "shot: %+.2f st (rate %.4f), cutoff %.0f -> %.0f Hz by %.3fs",
        settings.semitones,
        settings.playback_rate,
        settings.cutoff_start_hz,
        settings.cutoff_end_hz,
        settings.sweep_end_s,
    )
    return render_shot(buffer, attack_s, settings)
