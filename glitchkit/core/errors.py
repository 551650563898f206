"""
Error taxonomy for kit generation.
Source-level errors abort a run; range errors are programming errors in slicing.
Per-shot rejections are not exceptions (see core.types.SkippedSlice).
"""


class GlitchKitError(Exception):
    """Base class for all engine errors."""


class DecodeError(GlitchKitError):
    """Source audio could not be decoded into samples."""


class MissingSource(GlitchKitError):
    """Generation was requested without a usable source buffer."""


class InvalidRange(GlitchKitError, ValueError):
    """A slice range falls outside the source buffer."""


class IndexOutOfRange(GlitchKitError, IndexError):
    """A sample read or write falls outside [0, length)."""
