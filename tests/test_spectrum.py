"""
Unit tests for the spectrum snapshot.
"""

import numpy as np
import pytest

from voice_emotion.analysis.features import compute_brightness
from voice_emotion.analysis.spectrum import compute_frequency_snapshot, magnitudes_to_db
from voice_emotion.config import AnalysisSettings
from voice_emotion.errors import InputError
from voice_emotion.types import SampleBuffer

from tests.conftest import SAMPLE_RATE, make_sine


def test_snapshot_has_half_window_bins(sine_440, settings):
    snapshot = compute_frequency_snapshot(sine_440, settings)

    assert snapshot.bin_count == 1024


def test_short_clip_is_padded_to_one_window(settings):
    snapshot = compute_frequency_snapshot(SampleBuffer(make_sine(440.0, duration_sec=0.01), SAMPLE_RATE), settings)

    assert snapshot.bin_count == 1024


def test_window_size_is_configurable(sine_440):
    snapshot = compute_frequency_snapshot(sine_440, AnalysisSettings(fft_size=512, hop_size=256))

    assert snapshot.bin_count == 256


def test_peak_bin_matches_tone(settings):
    buffer = SampleBuffer(make_sine(1000.0), SAMPLE_RATE)

    snapshot = compute_frequency_snapshot(buffer, settings)

    expected_bin = 1000.0 / (SAMPLE_RATE / 2048.0)
    assert int(np.argmax(snapshot.magnitudes_db)) == pytest.approx(expected_bin, abs=1)


def test_higher_tone_is_brighter(settings):
    low = compute_frequency_snapshot(SampleBuffer(make_sine(500.0), SAMPLE_RATE), settings)
    high = compute_frequency_snapshot(SampleBuffer(make_sine(4000.0), SAMPLE_RATE), settings)

    assert compute_brightness(high) > compute_brightness(low)


def test_silence_maps_to_negative_infinity(silence, settings):
    snapshot = compute_frequency_snapshot(silence, settings)

    assert np.all(np.isneginf(snapshot.magnitudes_db))


def test_empty_buffer_raises(settings):
    with pytest.raises(InputError):
        compute_frequency_snapshot(SampleBuffer([], SAMPLE_RATE), settings)


def test_magnitudes_to_db():
    np.testing.assert_allclose(magnitudes_to_db(np.array([1.0, 0.1, 10.0])), [0.0, -20.0, 20.0])
    assert np.isneginf(magnitudes_to_db(np.array([0.0]))[0])
