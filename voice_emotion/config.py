"""Calibration constants and environment-driven settings.

The numeric constants below are heuristic calibration values for the
feature extractor. They are uncalibrated against any dataset and are kept
at their historical values; tune them through the environment rather than
editing the defaults:

- ``EMOTION_ONSET_THRESHOLD``  absolute amplitude an onset must cross
- ``EMOTION_ENVELOPE_BINS``    number of envelope bins for rhythm stability
- ``EMOTION_STABILITY_SCALE``  envelope-variance multiplier for rhythm stability
- ``EMOTION_FFT_SIZE``         analysis window for the spectrum snapshot
- ``EMOTION_HOP_SIZE``         hop between spectrum frames
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, List, TypeVar

logger = logging.getLogger("voice_emotion.config")

ONSET_THRESHOLD = 0.1
ENVELOPE_BINS = 100
STABILITY_SCALE = 10.0
FFT_SIZE = 2048
HOP_SIZE = 1024

DEFAULT_CORS_ORIGINS = ["http://localhost:3000"]

T = TypeVar("T", int, float)


@dataclass(frozen=True)
class AnalysisSettings:
    """Immutable bundle of extractor calibration values.

    Shared by every extraction call, so it must never be mutated.
    """

    onset_threshold: float = ONSET_THRESHOLD
    envelope_bins: int = ENVELOPE_BINS
    stability_scale: float = STABILITY_SCALE
    fft_size: int = FFT_SIZE
    hop_size: int = HOP_SIZE

    @property
    def snapshot_bins(self) -> int:
        """Bin count of a spectrum snapshot (half the analysis window)."""

        return self.fft_size // 2


def _env_number(name: str, default: T, cast: Callable[[str], T], minimum: T) -> T:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        logger.warning("[CONFIG] %s=%r is not a valid number, using %s", name, raw, default)
        return default
    if value < minimum:
        logger.warning("[CONFIG] %s=%r is below %s, using %s", name, raw, minimum, default)
        return default
    return value


def load_settings() -> AnalysisSettings:
    """Build settings from the environment, falling back to the defaults."""

    fft_size = _env_number("EMOTION_FFT_SIZE", FFT_SIZE, int, 2)
    hop_size = _env_number("EMOTION_HOP_SIZE", HOP_SIZE, int, 1)
    if hop_size > fft_size:
        logger.warning("[CONFIG] hop size %d exceeds fft size %d, using %d", hop_size, fft_size, fft_size // 2)
        hop_size = fft_size // 2

    settings = AnalysisSettings(
        onset_threshold=_env_number("EMOTION_ONSET_THRESHOLD", ONSET_THRESHOLD, float, 0.0),
        envelope_bins=_env_number("EMOTION_ENVELOPE_BINS", ENVELOPE_BINS, int, 1),
        stability_scale=_env_number("EMOTION_STABILITY_SCALE", STABILITY_SCALE, float, 0.0),
        fft_size=fft_size,
        hop_size=hop_size,
    )
    logger.debug("[CONFIG] Loaded analysis settings: %s", settings)
    return settings


@lru_cache(maxsize=1)
def get_settings() -> AnalysisSettings:
    return load_settings()


def cors_origins() -> List[str]:
    raw = os.getenv("EMOTION_CORS_ORIGINS")
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
