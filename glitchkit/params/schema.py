from dataclasses import asdict, dataclass
from typing import Any, Dict

from glitchkit.params.defaults import SHOT_DEFAULTS


@dataclass(frozen=True)
class ShotParameters:
    """Per-run generation controls. Immutable for the duration of a run."""
    threshold: float = SHOT_DEFAULTS["threshold"]
    attack_s: float = SHOT_DEFAULTS["attack_s"]
    max_length_s: float = SHOT_DEFAULTS["max_length_s"]
    pitch_variation: int = SHOT_DEFAULTS["pitch_variation"]

    def __post_init__(self):
        if not 0.0 <= self.threshold <= 1.0:
            raise ValueError(f"threshold must be in [0, 1], got {self.threshold}")
        if self.attack_s < 0:
            raise ValueError(f"attack_s must be >= 0, got {self.attack_s}")
        if self.max_length_s <= 0.02:
            raise ValueError(f"max_length_s must be > 0.02, got {self.max_length_s}")
        if isinstance(self.pitch_variation, bool) or int(self.pitch_variation) != self.pitch_variation:
            raise ValueError(f"pitch_variation must be an integer, got {self.pitch_variation!r}")
        if self.pitch_variation < 0:
            raise ValueError(f"pitch_variation must be >= 0, got {self.pitch_variation}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
