"""Nearest-profile emotion classification.

Scores a feature vector against every catalog profile and keeps the
best. The walk follows catalog order and only a strictly greater score
replaces the current best, so ties resolve to the earlier profile and
repeated calls are bit-for-bit reproducible.

Unusable input never raises: it degrades to the neutral fallback
(``ClassificationResult.fallback()``) with a warning in the log.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Sequence, Union

from ..errors import ClassificationInputError
from ..types import (
    NEUTRAL_LABEL,
    ClassificationResult,
    EmotionLabel,
    EmotionProfile,
    FeatureVector,
    FeatureWeights,
)
from .profiles import EMOTION_PROFILES, FEATURE_WEIGHTS
from .similarity import weighted_similarity

logger = logging.getLogger("voice_emotion.classification.classifier")

FeatureInput = Union[FeatureVector, Mapping[str, Any], None]


def _coerce_features(features: FeatureInput) -> FeatureVector:
    if features is None:
        raise ClassificationInputError("no feature vector supplied")
    if isinstance(features, FeatureVector):
        return features
    if isinstance(features, Mapping):
        try:
            return FeatureVector.from_mapping(features)
        except (TypeError, ValueError) as exc:
            raise ClassificationInputError(f"invalid feature mapping: {exc}") from exc
    raise ClassificationInputError(f"unsupported feature type {type(features).__name__}")


def classify(
    features: FeatureInput,
    profiles: Sequence[EmotionProfile] = EMOTION_PROFILES,
    weights: FeatureWeights = FEATURE_WEIGHTS,
) -> ClassificationResult:
    """Return the best-matching emotion, its confidence and all similarities."""

    try:
        observed = _coerce_features(features)

        best_label: EmotionLabel = NEUTRAL_LABEL
        best_score = 0.0
        similarities: Dict[str, float] = {}
        for profile in profiles:
            score = weighted_similarity(observed, profile.features, weights)
            similarities[profile.label] = score
            if score > best_score:
                best_label = profile.label
                best_score = score
    except ClassificationInputError as exc:
        logger.warning("[CLASSIFY] Falling back to neutral: %s", exc)
        return ClassificationResult.fallback()
    except Exception as exc:  # pragma: no cover - defensive
        logger.exception("[CLASSIFY] Classification failed, falling back to neutral: %s", exc)
        return ClassificationResult.fallback()

    logger.info(
        "[CLASSIFY] label=%s confidence=%.3f (%s)",
        best_label,
        best_score,
        " ".join(f"{label}={score:.3f}" for label, score in similarities.items()),
    )
    return ClassificationResult(label=best_label, confidence=best_score, similarities=similarities)
