"""Core data types shared by extraction and classification.

Every type here is immutable once built. Buffers and snapshots freeze
their numpy arrays; feature and weight records are total six-field
records, so a missing or extraneous feature key cannot exist at runtime.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Dict, List, Literal, Mapping, Tuple, Union

import numpy as np

from .errors import EmotionAnalysisError

EmotionLabel = Literal["happy", "sad", "angry", "neutral", "excited", "anxious"]

NEUTRAL_LABEL: EmotionLabel = "neutral"

FEATURE_KEYS: Tuple[str, ...] = (
    "energy",
    "pitch",
    "tempo",
    "variance",
    "brightness",
    "rhythm_stability",
)


def _frozen_array(values: Any) -> np.ndarray:
    arr = np.array(values, dtype=np.float64, copy=True)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class SampleBuffer:
    """Decoded mono clip: amplitudes nominally in [-1, 1] plus sample rate."""

    samples: np.ndarray
    sample_rate: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "samples", _frozen_array(self.samples))

    @property
    def size(self) -> int:
        return int(self.samples.size)

    @property
    def duration_sec(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return self.size / float(self.sample_rate)


@dataclass(frozen=True, eq=False)
class FrequencySnapshot:
    """Magnitude per frequency bin in dB; ``-inf`` marks an exactly silent bin."""

    magnitudes_db: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "magnitudes_db", _frozen_array(self.magnitudes_db))

    @property
    def bin_count(self) -> int:
        return int(self.magnitudes_db.size)


@dataclass(frozen=True)
class _AxisRecord:
    """Six named axes, each a finite float in [0, 1]."""

    energy: float
    pitch: float
    tempo: float
    variance: float
    brightness: float
    rhythm_stability: float

    def __post_init__(self) -> None:
        for f in fields(self):
            value = float(getattr(self, f.name))
            if not math.isfinite(value) or not 0.0 <= value <= 1.0:
                raise ValueError(f"{type(self).__name__}.{f.name} must be within [0, 1], got {value!r}")
            object.__setattr__(self, f.name, value)

    @classmethod
    def from_mapping(cls, values: Mapping[str, float]):
        """Strict constructor: exactly the six feature keys, nothing else."""

        keys = set(values)
        missing = [k for k in FEATURE_KEYS if k not in keys]
        extra = sorted(keys.difference(FEATURE_KEYS))
        if missing or extra:
            raise ValueError(f"expected keys {FEATURE_KEYS}, missing={missing} extra={extra}")
        return cls(**{k: values[k] for k in FEATURE_KEYS})

    def as_dict(self) -> Dict[str, float]:
        return {k: getattr(self, k) for k in FEATURE_KEYS}

    def as_array(self) -> np.ndarray:
        return np.array([getattr(self, k) for k in FEATURE_KEYS], dtype=np.float64)


@dataclass(frozen=True)
class FeatureVector(_AxisRecord):
    """Normalised six-dimensional descriptor of one clip."""


@dataclass(frozen=True)
class FeatureWeights(_AxisRecord):
    """Diagnostic importance of each axis; need not sum to 1."""


@dataclass(frozen=True)
class EmotionProfile:
    label: EmotionLabel
    features: FeatureVector


@dataclass(frozen=True)
class ClassificationResult:
    """Best catalog match for a feature vector.

    A successful result has one similarity per catalog profile. The
    neutral / zero-confidence / empty-similarities result is the fallback
    returned for unusable input (see ``is_fallback``).
    """

    label: EmotionLabel = NEUTRAL_LABEL
    confidence: float = 0.0
    similarities: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "similarities", MappingProxyType(dict(self.similarities)))

    @classmethod
    def fallback(cls) -> "ClassificationResult":
        return cls()

    @property
    def is_fallback(self) -> bool:
        return not self.similarities

    def alternatives(self, limit: int = 4) -> List[Tuple[str, float]]:
        """Other labels ranked by similarity, highest first.

        ``sorted`` is stable, so equal scores keep catalog order.
        """

        others = [(label, score) for label, score in self.similarities.items() if label != self.label]
        others.sort(key=lambda item: item[1], reverse=True)
        return others[: max(limit, 0)]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "confidence": self.confidence,
            "similarities": dict(self.similarities),
        }


@dataclass(frozen=True)
class ExtractionFailure:
    """Failure arm of feature extraction.

    Falsy, so ``if not outcome`` reads naturally at call sites; a
    ``FeatureVector`` is always truthy.
    """

    error: EmotionAnalysisError

    def __bool__(self) -> bool:
        return False

    @property
    def reason(self) -> str:
        return type(self.error).__name__

    @property
    def code(self) -> str:
        return self.error.code

    @property
    def message(self) -> str:
        return str(self.error)


ExtractionResult = Union[FeatureVector, ExtractionFailure]
