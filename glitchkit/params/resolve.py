"""
Parameter resolution: map UI names onto engine names, merge over SHOT_DEFAULTS,
coerce types, clamp to control ranges, and build ShotParameters.
"""
import logging
from typing import Any, Dict, Optional

from glitchkit.params.clamp import clamp_params
from glitchkit.params.defaults import PARAM_ALIASES, SHOT_DEFAULTS
from glitchkit.params.schema import ShotParameters

logger = logging.getLogger(__name__)

_COERCE = {
    "threshold": float,
    "attack_s": float,
    "max_length_s": float,
    "pitch_variation": lambda v: int(round(float(v))),
}


def normalize_keys(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Rename UI aliases and drop keys the engine does not know."""
    out: Dict[str, Any] = {}
    unknown = []
    for key, value in raw.items():
        name = PARAM_ALIASES.get(key, key)
        if name in SHOT_DEFAULTS:
            out[name] = value
        else:
            unknown.append(key)
    if unknown:
        logger.warning("Ignoring unknown shot params: %s", sorted(unknown))
    return out


def resolve_params(raw: Optional[Dict[str, Any]] = None) -> ShotParameters:
    """
    Build ShotParameters from a partial dict. Missing keys take SHOT_DEFAULTS;
    values that cannot be converted raise ValueError.
    """
    merged = dict(SHOT_DEFAULTS)
    merged.update(normalize_keys(raw or {}))

    coerced = {}
    for key, value in merged.items():
        try:
            coerced[key] = _COERCE[key](value)
        except (TypeError, ValueError, OverflowError) as e:
            raise ValueError(f"invalid value for {key}: {value!r}") from e

    return ShotParameters(**clamp_params(coerced))
