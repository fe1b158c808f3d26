"""End-to-end analysis of decoded clips.

This module does *not* decode audio. It takes samples that a capture or
decode layer already produced and runs, in order:
- feature extraction (with a spectrum snapshot of the same clip)
- nearest-profile classification
- a descriptive loudness summary

A clip that cannot be analysed comes back as an ``EmotionAnalysis``
carrying the ``ExtractionFailure``; nothing here raises for bad audio.
Clips share only immutable configuration, so ``analyze_batch`` can fan
them out to a thread pool.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple

from .analysis.features import extract_features
from .analysis.loudness import ClipStats, measure_clip_stats
from .classification.classifier import classify
from .config import AnalysisSettings, get_settings
from .errors import InputError
from .types import (
    ClassificationResult,
    ExtractionFailure,
    FeatureVector,
    FrequencySnapshot,
    SampleBuffer,
)

logger = logging.getLogger("voice_emotion.pipeline")


@dataclass(frozen=True)
class EmotionAnalysis:
    features: Optional[FeatureVector] = None
    classification: Optional[ClassificationResult] = None
    stats: Optional[ClipStats] = None
    failure: Optional[ExtractionFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def analyze_clip(
    samples: Any,
    sample_rate: int,
    snapshot: Optional[FrequencySnapshot] = None,
    settings: Optional[AnalysisSettings] = None,
) -> EmotionAnalysis:
    """Analyse one decoded mono clip.

    ``samples`` may be a ``SampleBuffer`` (its own rate wins) or anything
    numpy can turn into a float array.
    """

    if isinstance(samples, SampleBuffer):
        buffer = samples
    else:
        try:
            buffer = SampleBuffer(samples, sample_rate)
        except (TypeError, ValueError) as exc:
            logger.warning("[PIPELINE] Could not build sample buffer: %s", exc)
            return EmotionAnalysis(failure=ExtractionFailure(InputError(f"unusable samples: {exc}")))

    outcome = extract_features(buffer, snapshot, settings)
    if isinstance(outcome, ExtractionFailure):
        logger.info("[PIPELINE] Extraction failed (%s): %s", outcome.reason, outcome.message)
        return EmotionAnalysis(failure=outcome)

    result = classify(outcome)
    stats = measure_clip_stats(buffer)

    logger.info(
        "[PIPELINE] %.2fs clip -> %s (%.0f%%), lufs=%.1f",
        stats.duration_sec,
        result.label,
        result.confidence * 100.0,
        stats.lufs,
    )
    return EmotionAnalysis(features=outcome, classification=result, stats=stats)


def analyze_batch(
    clips: Iterable[Tuple[Any, int]],
    max_workers: Optional[int] = None,
    settings: Optional[AnalysisSettings] = None,
) -> List[EmotionAnalysis]:
    """Analyse independent ``(samples, sample_rate)`` clips in parallel.

    Results come back in input order.
    """

    settings = settings or get_settings()
    clip_list = list(clips)
    if not clip_list:
        return []

    def _run(clip: Tuple[Any, int]) -> EmotionAnalysis:
        samples, sample_rate = clip
        return analyze_clip(samples, sample_rate, settings=settings)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        results = list(executor.map(_run, clip_list))

    failed = sum(1 for r in results if not r.ok)
    logger.info("[PIPELINE] Batch of %d clips analysed (%d failed)", len(results), failed)
    return results
