"""Error taxonomy for the emotion analysis core.

These exceptions are raised where a fault is detected and converted into
explicit fallback values at the component boundaries (extraction failure,
neutral classification, zero brightness). Callers of the public entry
points never see them raised; they travel inside ``ExtractionFailure`` or
show up in the logs.
"""

from __future__ import annotations


class EmotionAnalysisError(Exception):
    """Base class for all analysis faults."""

    code = "ANALYSIS_ERROR"


class InputError(EmotionAnalysisError):
    """Missing, empty or malformed sample buffer / frequency snapshot."""

    code = "INVALID_INPUT"


class DegenerateSignalError(EmotionAnalysisError):
    """Signal with no usable content for a feature, e.g. zero spectral energy."""

    code = "DEGENERATE_SIGNAL"


class ClassificationInputError(EmotionAnalysisError):
    """Feature vector missing, incomplete or out of range."""

    code = "INVALID_FEATURES"
