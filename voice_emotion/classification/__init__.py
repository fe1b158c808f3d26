"""Profile catalog, similarity scoring and the emotion classifier."""
from .classifier import classify
from .profiles import EMOTION_LABELS, EMOTION_PROFILES, FEATURE_WEIGHTS, profile_for
from .similarity import weighted_similarity

__all__ = [
  "classify",
  "EMOTION_LABELS",
  "EMOTION_PROFILES",
  "FEATURE_WEIGHTS",
  "profile_for",
  "weighted_similarity",
]
