"""
Canonical shot defaults and control ranges.
Ranges mirror the generator UI sliders; resolve_params clamps into them.
"""
from typing import Any, Dict, Tuple

KIT_SIZE = 8

SHOT_DEFAULTS: Dict[str, Any] = {
    "threshold": 0.3,
    "attack_s": 0.005,
    "max_length_s": 0.5,
    "pitch_variation": 5,
}

PARAM_RANGES: Dict[str, Tuple[float, float]] = {
    "threshold": (0.0, 1.0),
    "attack_s": (0.0, 0.1),
    "max_length_s": (0.05, 2.0),
    "pitch_variation": (0, 24),
}

# UI field names -> engine names
PARAM_ALIASES: Dict[str, str] = {
    "attack": "attack_s",
    "maxLength": "max_length_s",
    "max_length": "max_length_s",
    "pitchVariation": "pitch_variation",
}
