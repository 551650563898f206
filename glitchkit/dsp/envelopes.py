import torch


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

DECAY_FLOOR = 0.001


def _time_axis(num_samples: int, sample_rate: int) -> torch.Tensor:
    return torch.arange(num_samples, dtype=torch.float64) / float(sample_rate)


# -----------------------------------------------------------------------------
# Shot envelopes
# -----------------------------------------------------------------------------

def attack_decay(
    num_samples: int,
    sample_rate: int,
    attack_s: float,
    duration_s: float,
    floor: float = DECAY_FLOOR,
) -> torch.Tensor:
    """
    Gain envelope: 0 at t=0, linear ramp to 1 at t=attack_s, then an
    exponential ramp from 1 reaching `floor` at t=duration_s.
    attack_s is clamped to duration_s; when the attack covers the whole
    duration there is no decay segment.
    """
    t = _time_axis(num_samples, sample_rate)
    if num_samples == 0:
        return t.float()

    attack = min(max(float(attack_s), 0.0), float(duration_s))
    env = torch.ones_like(t)

    if attack > 0:
        rising = t < attack
        env[rising] = t[rising] / attack

    decay_len = float(duration_s) - attack
    if decay_len > 0:
        falling = t >= attack
        progress = (t[falling] - attack) / decay_len
        env[falling] = floor ** progress

    return env.float()


def exponential_sweep(
    num_samples: int,
    sample_rate: int,
    start_value: float,
    end_value: float,
    end_time_s: float,
) -> torch.Tensor:
    """
    Exponential ramp from start_value at t=0 to end_value at t=end_time_s,
    holding end_value afterwards. Both values must be positive.
    """
    if start_value <= 0 or end_value <= 0:
        raise ValueError("exponential sweep needs positive endpoints")
    t = _time_axis(num_samples, sample_rate)
    if end_time_s <= 0:
        return torch.full_like(t, end_value)
    progress = torch.clamp(t / end_time_s, max=1.0)
    return start_value * (end_value / start_value) ** progress
