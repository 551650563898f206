"""
Clamp raw control values into their UI ranges.
"""
from typing import Any, Dict

from glitchkit.params.defaults import PARAM_RANGES


def clamp_params(params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return a new dict with every known key clamped to PARAM_RANGES.
    Unknown keys pass through untouched.
    """
    result = params.copy()
    for key, (lo, hi) in PARAM_RANGES.items():
        if key in result:
            result[key] = min(max(result[key], lo), hi)
    return result
