"""Frequency snapshot of a clip.

Brightness is measured on the same buffer as the other five features:
this module turns a ``SampleBuffer`` into a ``FrequencySnapshot`` of
``fft_size / 2`` dB bins, matching what a browser analyser node reports
for a 2048-sample window (Blackman window, magnitude scaled by 1/N).
"""

from __future__ import annotations

import logging
from typing import Optional

import librosa
import numpy as np

from ..config import AnalysisSettings, get_settings
from ..errors import InputError
from ..types import FrequencySnapshot, SampleBuffer

logger = logging.getLogger("voice_emotion.analysis.spectrum")


def magnitudes_to_db(magnitudes: np.ndarray) -> np.ndarray:
    """Linear magnitude to dB; exact zeros map to ``-inf``."""

    with np.errstate(divide="ignore"):
        return 20.0 * np.log10(np.abs(magnitudes))


def compute_frequency_snapshot(
    buffer: SampleBuffer,
    settings: Optional[AnalysisSettings] = None,
) -> FrequencySnapshot:
    """Average STFT magnitude spectrum of the whole buffer, in dB.

    Clips shorter than one window are zero-padded to a single frame.
    Raises ``InputError`` for an empty buffer.
    """

    settings = settings or get_settings()
    if buffer.size == 0:
        raise InputError("cannot compute a spectrum of an empty buffer")

    n_fft = settings.fft_size
    y = buffer.samples
    if y.size < n_fft:
        y = np.pad(y, (0, n_fft - y.size))

    stft = librosa.stft(
        y,
        n_fft=n_fft,
        hop_length=settings.hop_size,
        window="blackman",
        center=False,
    )
    mean_mag = np.abs(stft).mean(axis=1)[: settings.snapshot_bins] / float(n_fft)

    logger.debug(
        "[SPECTRUM] %d frames -> %d bins (n_fft=%d hop=%d)",
        stft.shape[1],
        mean_mag.size,
        n_fft,
        settings.hop_size,
    )
    return FrequencySnapshot(magnitudes_to_db(mean_mag))
