"""Emotion analysis of captured voice clips.

Extracts six coarse signal features (energy, pitch proxy, tempo proxy,
amplitude variance, spectral brightness, rhythm stability) from a
decoded mono clip and matches them against a fixed catalog of emotion
profiles. The HTTP service lives in ``voice_emotion.main``.
"""

from .analysis.features import extract_features, normalize_features
from .analysis.loudness import ClipStats, measure_clip_stats
from .analysis.spectrum import compute_frequency_snapshot
from .classification import (
    EMOTION_LABELS,
    EMOTION_PROFILES,
    FEATURE_WEIGHTS,
    classify,
    profile_for,
    weighted_similarity,
)
from .config import AnalysisSettings, get_settings, load_settings
from .errors import (
    ClassificationInputError,
    DegenerateSignalError,
    EmotionAnalysisError,
    InputError,
)
from .pipeline import EmotionAnalysis, analyze_batch, analyze_clip
from .types import (
    FEATURE_KEYS,
    ClassificationResult,
    EmotionProfile,
    ExtractionFailure,
    FeatureVector,
    FeatureWeights,
    FrequencySnapshot,
    SampleBuffer,
)

__all__ = [
    "extract_features",
    "normalize_features",
    "compute_frequency_snapshot",
    "measure_clip_stats",
    "ClipStats",
    "classify",
    "weighted_similarity",
    "profile_for",
    "EMOTION_LABELS",
    "EMOTION_PROFILES",
    "FEATURE_WEIGHTS",
    "AnalysisSettings",
    "get_settings",
    "load_settings",
    "EmotionAnalysisError",
    "InputError",
    "DegenerateSignalError",
    "ClassificationInputError",
    "EmotionAnalysis",
    "analyze_clip",
    "analyze_batch",
    "FEATURE_KEYS",
    "ClassificationResult",
    "EmotionProfile",
    "ExtractionFailure",
    "FeatureVector",
    "FeatureWeights",
    "FrequencySnapshot",
    "SampleBuffer",
]
