"""Reference emotion profiles and feature weights.

The catalog order is significant: the classifier walks it front to back
and keeps the first profile on ties. Never reorder it casually.
"""

from __future__ import annotations

from typing import Dict, Tuple

from ..types import EmotionLabel, EmotionProfile, FeatureVector, FeatureWeights

EMOTION_PROFILES: Tuple[EmotionProfile, ...] = (
    EmotionProfile(
        label="happy",
        features=FeatureVector(
            energy=0.7, pitch=0.8, tempo=0.7, variance=0.6, brightness=0.8, rhythm_stability=0.7
        ),
    ),
    EmotionProfile(
        label="sad",
        features=FeatureVector(
            energy=0.3, pitch=0.3, tempo=0.4, variance=0.3, brightness=0.3, rhythm_stability=0.5
        ),
    ),
    EmotionProfile(
        label="angry",
        features=FeatureVector(
            energy=0.9, pitch=0.8, tempo=0.9, variance=0.8, brightness=0.7, rhythm_stability=0.3
        ),
    ),
    EmotionProfile(
        label="neutral",
        features=FeatureVector(
            energy=0.5, pitch=0.5, tempo=0.5, variance=0.4, brightness=0.5, rhythm_stability=0.6
        ),
    ),
    EmotionProfile(
        label="excited",
        features=FeatureVector(
            energy=0.8, pitch=0.9, tempo=0.8, variance=0.7, brightness=0.9, rhythm_stability=0.4
        ),
    ),
    EmotionProfile(
        label="anxious",
        features=FeatureVector(
            energy=0.6, pitch=0.7, tempo=0.9, variance=0.8, brightness=0.6, rhythm_stability=0.3
        ),
    ),
)

# Energy and pitch are the strongest cues, rhythm stability the weakest.
FEATURE_WEIGHTS = FeatureWeights(
    energy=0.25,
    pitch=0.2,
    tempo=0.15,
    variance=0.15,
    brightness=0.15,
    rhythm_stability=0.1,
)

EMOTION_LABELS: Tuple[EmotionLabel, ...] = tuple(p.label for p in EMOTION_PROFILES)

_PROFILE_INDEX: Dict[str, EmotionProfile] = {p.label: p for p in EMOTION_PROFILES}


def profile_for(label: str) -> EmotionProfile:
    try:
        return _PROFILE_INDEX[label]
    except KeyError:
        raise KeyError(f"Unknown emotion label: {label!r}") from None
