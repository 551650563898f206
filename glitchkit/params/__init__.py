"""
Shot parameter schema, defaults and resolution.
Use resolve_params({}) for the resolved defaults.
"""
from glitchkit.params.schema import ShotParameters
from glitchkit.params.defaults import KIT_SIZE, SHOT_DEFAULTS, PARAM_RANGES
from glitchkit.params.resolve import resolve_params
from glitchkit.params.clamp import clamp_params

__all__ = ["ShotParameters", "KIT_SIZE", "SHOT_DEFAULTS", "PARAM_RANGES", "resolve_params", "clamp_params"]
