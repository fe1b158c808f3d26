"""Descriptive loudness summary of a clip.

Reported alongside the emotion result for presentation; none of these
numbers feed the classifier.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from functools import lru_cache

import numpy as np
import pyloudnorm as pyln

from ..types import SampleBuffer

logger = logging.getLogger("voice_emotion.analysis.loudness")


@dataclass(frozen=True)
class ClipStats:
    duration_sec: float
    peak_dbfs: float
    rms_dbfs: float
    lufs: float


@lru_cache(maxsize=16)
def _meter_for_sr(sr: int) -> pyln.Meter:
    return pyln.Meter(sr)  # EBU R128


def _safe_db(x: float, eps: float = 1e-12) -> float:
    return float(20.0 * np.log10(max(abs(x), eps)))


def measure_clip_stats(buffer: SampleBuffer) -> ClipStats:
    """Return duration, peak / RMS in dBFS and integrated loudness.

    Integrated loudness needs at least one 400 ms gating block of
    non-silent audio; otherwise it falls back to the RMS level.
    """

    mono = buffer.samples
    if mono.size == 0:
        return ClipStats(duration_sec=0.0, peak_dbfs=_safe_db(0.0), rms_dbfs=_safe_db(0.0), lufs=_safe_db(0.0))

    peak_dbfs = _safe_db(float(np.max(np.abs(mono))))
    rms_dbfs = _safe_db(float(np.sqrt(np.mean(mono ** 2))))

    try:
        lufs = float(_meter_for_sr(int(buffer.sample_rate)).integrated_loudness(mono))
    except ValueError as exc:
        logger.warning("[LOUDNESS] LUFS measurement failed: %s", exc)
        lufs = rms_dbfs
    if not math.isfinite(lufs):
        logger.warning("[LOUDNESS] LUFS not finite (%s), using RMS level", lufs)
        lufs = rms_dbfs

    return ClipStats(
        duration_sec=buffer.duration_sec,
        peak_dbfs=peak_dbfs,
        rms_dbfs=rms_dbfs,
        lufs=lufs,
    )
