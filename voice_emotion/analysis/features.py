"""Feature extraction for emotion classification.

Derives six coarse scalar descriptors from a complete, already-decoded
mono clip:

- energy:           mean absolute amplitude
- pitch:            zero-crossing rate (a pitch *proxy*, unreliable on
                    noisy or polyphonic material)
- tempo:            threshold onsets per second
- variance:         population variance of the amplitude
- brightness:       spectral-centroid bin ratio of a frequency snapshot
- rhythm_stability: 1 - scaled variance of a max-amplitude envelope

Everything here is a pure function of its inputs plus the immutable
``AnalysisSettings``; independent clips can be processed in parallel.
``extract_features`` is the only entry point that swallows faults: bad
input comes back as an ``ExtractionFailure`` and a warning in the log.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Mapping, Optional

import numpy as np

from ..config import AnalysisSettings, get_settings
from ..errors import DegenerateSignalError, EmotionAnalysisError, InputError
from ..types import (
    FEATURE_KEYS,
    ExtractionFailure,
    ExtractionResult,
    FeatureVector,
    FrequencySnapshot,
    SampleBuffer,
)
from .spectrum import compute_frequency_snapshot

logger = logging.getLogger("voice_emotion.analysis.features")


def compute_energy(samples: np.ndarray) -> float:
    return float(np.mean(np.abs(samples)))


def count_zero_crossings(samples: np.ndarray) -> int:
    """Sign changes between consecutive samples; zero counts as positive."""

    non_negative = samples >= 0.0
    return int(np.count_nonzero(non_negative[1:] != non_negative[:-1]))


def estimate_pitch(samples: np.ndarray, sample_rate: int) -> float:
    crossings = count_zero_crossings(samples)
    return crossings * float(sample_rate) / (2.0 * samples.size)


def count_onsets(samples: np.ndarray, threshold: float) -> int:
    """Rising crossings of ``|x|`` over a fixed, non-adaptive threshold."""

    above = np.abs(samples) > threshold
    return int(np.count_nonzero(above[1:] & ~above[:-1]))


def estimate_tempo(samples: np.ndarray, sample_rate: int, threshold: float) -> float:
    duration_sec = samples.size / float(sample_rate)
    return count_onsets(samples, threshold) / duration_sec


def compute_variance(samples: np.ndarray) -> float:
    return float(np.var(samples))


def _spectral_centroid_ratio(snapshot: FrequencySnapshot) -> float:
    magnitudes = np.power(10.0, snapshot.magnitudes_db / 20.0)
    total = float(np.sum(magnitudes))
    if not math.isfinite(total) or total <= 0.0:
        raise DegenerateSignalError(f"spectral magnitude sum is {total!r}")

    bins = snapshot.bin_count
    weighted = float(np.dot(magnitudes, np.arange(bins, dtype=np.float64)))
    return weighted / total / bins


def compute_brightness(snapshot: FrequencySnapshot) -> float:
    """Magnitude-weighted mean bin index divided by the bin count.

    A snapshot without usable energy (silence, all ``-inf`` dB) yields 0.
    """

    try:
        return _spectral_centroid_ratio(snapshot)
    except DegenerateSignalError as exc:
        logger.debug("[FEATURES] Degenerate spectrum, brightness=0: %s", exc)
        return 0.0


def amplitude_envelope(samples: np.ndarray, bins: int) -> np.ndarray:
    """Max absolute amplitude of ``bins`` contiguous, equal-length ranges.

    Trailing samples that do not fill a whole range are ignored. With
    fewer samples than bins every range is empty and the envelope is 0.
    """

    per_bin = samples.size // bins
    if per_bin == 0:
        return np.zeros(bins, dtype=np.float64)
    frames = np.abs(samples[: per_bin * bins]).reshape(bins, per_bin)
    return frames.max(axis=1)


def compute_rhythm_stability(samples: np.ndarray, bins: int, scale: float) -> float:
    envelope_variance = float(np.var(amplitude_envelope(samples, bins)))
    return 1.0 - min(envelope_variance * scale, 1.0)


def _validate_buffer(buffer: Optional[SampleBuffer]) -> SampleBuffer:
    if buffer is None:
        raise InputError("no sample buffer supplied")
    if not isinstance(buffer, SampleBuffer):
        raise InputError(f"expected SampleBuffer, got {type(buffer).__name__}")
    if buffer.samples.ndim != 1:
        raise InputError(f"sample buffer must be 1-D mono, got shape {buffer.samples.shape}")
    if buffer.size == 0:
        raise InputError("sample buffer is empty")
    if not isinstance(buffer.sample_rate, (int, float, np.integer, np.floating)) or buffer.sample_rate <= 0:
        raise InputError(f"sample rate must be positive, got {buffer.sample_rate!r}")
    if not np.all(np.isfinite(buffer.samples)):
        raise InputError("sample buffer contains non-finite values")
    return buffer


def _validate_snapshot(snapshot: FrequencySnapshot) -> FrequencySnapshot:
    if not isinstance(snapshot, FrequencySnapshot):
        raise InputError(f"expected FrequencySnapshot, got {type(snapshot).__name__}")
    if snapshot.magnitudes_db.ndim != 1 or snapshot.bin_count == 0:
        raise InputError("frequency snapshot is empty")
    return snapshot


def extract_raw_features(
    buffer: SampleBuffer,
    snapshot: FrequencySnapshot,
    settings: AnalysisSettings,
) -> Dict[str, float]:
    """Un-normalised features; assumes validated inputs."""

    samples = buffer.samples
    sr = buffer.sample_rate
    return {
        "energy": compute_energy(samples),
        "pitch": estimate_pitch(samples, sr),
        "tempo": estimate_tempo(samples, sr, settings.onset_threshold),
        "variance": compute_variance(samples),
        "brightness": compute_brightness(snapshot),
        "rhythm_stability": compute_rhythm_stability(
            samples, settings.envelope_bins, settings.stability_scale
        ),
    }


def normalize_features(raw: Mapping[str, Any]) -> FeatureVector:
    """Clamp raw features into a total [0, 1] ``FeatureVector``.

    Missing or non-numeric values count as 0; unknown keys are dropped.
    """

    extra = sorted(set(raw).difference(FEATURE_KEYS))
    if extra:
        logger.debug("[FEATURES] Ignoring unknown feature keys: %s", extra)

    values: Dict[str, float] = {}
    for key in FEATURE_KEYS:
        try:
            value = float(raw.get(key) or 0.0)
        except (TypeError, ValueError):
            value = 0.0
        if not math.isfinite(value):
            value = 0.0
        values[key] = min(max(value, 0.0), 1.0)
    return FeatureVector(**values)


def extract_features(
    buffer: Optional[SampleBuffer],
    snapshot: Optional[FrequencySnapshot] = None,
    settings: Optional[AnalysisSettings] = None,
) -> ExtractionResult:
    """Extract the normalised feature vector of one clip.

    When ``snapshot`` is omitted it is computed from ``buffer`` itself so
    brightness describes the same audio as the other features. Returns an
    ``ExtractionFailure`` instead of raising for any bad input.
    """

    settings = settings or get_settings()
    try:
        buffer = _validate_buffer(buffer)
        if snapshot is None:
            snapshot = compute_frequency_snapshot(buffer, settings)
        else:
            snapshot = _validate_snapshot(snapshot)
        raw = extract_raw_features(buffer, snapshot, settings)
    except InputError as exc:
        logger.warning("[FEATURES] Extraction rejected input: %s", exc)
        return ExtractionFailure(exc)
    except Exception as exc:  # pragma: no cover - defensive
        logger.exception("[FEATURES] Extraction failed unexpectedly: %s", exc)
        error = EmotionAnalysisError(f"feature extraction failed: {exc}")
        error.__cause__ = exc
        return ExtractionFailure(error)

    features = normalize_features(raw)
    logger.info(
        "[FEATURES] n=%d sr=%d raw_pitch=%.1f raw_tempo=%.2f -> energy=%.3f pitch=%.3f tempo=%.3f "
        "variance=%.4f brightness=%.3f rhythm=%.3f",
        buffer.size,
        buffer.sample_rate,
        raw["pitch"],
        raw["tempo"],
        features.energy,
        features.pitch,
        features.tempo,
        features.variance,
        features.brightness,
        features.rhythm_stability,
    )
    return features
