"""
Unit tests for feature extraction and normalisation.
"""

import math

import numpy as np
import pytest

from voice_emotion.analysis.features import (
    amplitude_envelope,
    compute_brightness,
    compute_energy,
    compute_rhythm_stability,
    compute_variance,
    count_onsets,
    count_zero_crossings,
    estimate_pitch,
    estimate_tempo,
    extract_features,
    normalize_features,
)
from voice_emotion.config import AnalysisSettings
from voice_emotion.errors import InputError
from voice_emotion.types import (
    FEATURE_KEYS,
    ExtractionFailure,
    FeatureVector,
    FrequencySnapshot,
    SampleBuffer,
)

from tests.conftest import SAMPLE_RATE


class TestExtractFeatures:

    @pytest.mark.parametrize("fixture_name", ["silence", "sine_440", "noise", "bursts"])
    def test_returns_six_bounded_features(self, request, fixture_name, settings):
        buffer = request.getfixturevalue(fixture_name)

        features = extract_features(buffer, settings=settings)

        assert isinstance(features, FeatureVector)
        values = features.as_dict()
        assert tuple(values) == FEATURE_KEYS
        for value in values.values():
            assert 0.0 <= value <= 1.0

    def test_silence(self, silence, settings):
        features = extract_features(silence, settings=settings)

        assert features.energy == 0.0
        assert features.variance == 0.0
        assert features.pitch == 0.0
        assert features.tempo == 0.0
        assert features.rhythm_stability == 1.0
        assert features.brightness == 0.0

    def test_bursts_are_rhythmically_unstable(self, bursts, settings):
        features = extract_features(bursts, settings=settings)

        assert features.rhythm_stability == 0.0
        assert features.tempo == 1.0

    def test_empty_buffer_fails(self, settings):
        outcome = extract_features(SampleBuffer([], SAMPLE_RATE), settings=settings)

        assert isinstance(outcome, ExtractionFailure)
        assert not outcome
        assert isinstance(outcome.error, InputError)
        assert outcome.reason == "InputError"

    def test_missing_buffer_fails(self, settings):
        outcome = extract_features(None, settings=settings)

        assert isinstance(outcome, ExtractionFailure)
        assert outcome.code == "INVALID_INPUT"

    def test_non_finite_samples_fail(self, settings):
        outcome = extract_features(SampleBuffer([0.1, float("nan"), 0.2], SAMPLE_RATE), settings=settings)

        assert isinstance(outcome, ExtractionFailure)
        assert "non-finite" in outcome.message

    def test_non_positive_sample_rate_fails(self, settings):
        outcome = extract_features(SampleBuffer([0.1, -0.1], 0), settings=settings)

        assert isinstance(outcome, ExtractionFailure)

    def test_empty_snapshot_fails(self, sine_440, settings):
        outcome = extract_features(sine_440, FrequencySnapshot([]), settings=settings)

        assert isinstance(outcome, ExtractionFailure)

    def test_external_snapshot_drives_brightness(self, sine_440, settings):
        snapshot = FrequencySnapshot([-np.inf, -np.inf, -np.inf, 0.0])

        features = extract_features(sine_440, snapshot, settings=settings)

        assert features.brightness == pytest.approx(0.75)

    def test_repeatable(self, noise, settings):
        assert extract_features(noise, settings=settings) == extract_features(noise, settings=settings)

    def test_buffer_is_not_mutated(self, noise, settings):
        before = noise.samples.copy()

        extract_features(noise, settings=settings)

        np.testing.assert_array_equal(noise.samples, before)
        assert not noise.samples.flags.writeable

    def test_onset_threshold_is_configurable(self, settings):
        samples = np.tile([0.0, 0.3, 0.0, 0.05], 100)
        buffer = SampleBuffer(samples, 400)

        default = extract_features(buffer, settings=settings)
        strict = extract_features(buffer, settings=AnalysisSettings(onset_threshold=0.5))

        assert default.tempo > 0.0
        assert strict.tempo == 0.0


class TestTimeDomainFeatures:

    def test_energy_is_mean_absolute_amplitude(self):
        assert compute_energy(np.array([0.5, -0.5, 0.25, -0.25])) == pytest.approx(0.375)

    def test_variance_is_population_variance(self):
        assert compute_variance(np.array([1.0, -1.0, 1.0, -1.0])) == pytest.approx(1.0)

    def test_energy_and_variance_ignore_order(self, noise):
        shuffled = np.random.default_rng(7).permutation(noise.samples)

        assert compute_energy(shuffled) == pytest.approx(compute_energy(noise.samples))
        assert compute_variance(shuffled) == pytest.approx(compute_variance(noise.samples))

    def test_zero_crossings_treat_zero_as_positive(self):
        assert count_zero_crossings(np.array([1.0, -1.0, 1.0, -1.0])) == 3
        assert count_zero_crossings(np.array([0.0, -0.5])) == 1
        assert count_zero_crossings(np.array([0.0, 0.5, 0.0])) == 0

    def test_pitch_proxy_of_sine(self, sine_440):
        assert estimate_pitch(sine_440.samples, SAMPLE_RATE) == pytest.approx(440.0, abs=1.0)

    def test_pitch_and_tempo_depend_on_order(self):
        grouped = np.array([0.5, 0.5, -0.5, -0.5, 0.0, 0.0])
        shuffled = np.array([0.0, 0.5, 0.0, -0.5, 0.5, -0.5])

        assert estimate_pitch(grouped, 6) != estimate_pitch(shuffled, 6)
        assert estimate_tempo(grouped, 6, 0.1) != estimate_tempo(shuffled, 6, 0.1)

    def test_onsets_need_a_rising_crossing(self):
        assert count_onsets(np.array([0.0, 0.2, 0.05, 0.3, 0.3]), 0.1) == 2
        assert count_onsets(np.array([0.0, 0.1, 0.2]), 0.1) == 1
        assert count_onsets(np.array([0.5, 0.5, 0.5]), 0.1) == 0

    def test_tempo_is_onsets_per_second(self):
        samples = np.array([0.0, 0.5, 0.0, 0.0, 0.0, 0.5, 0.0, 0.0])

        assert estimate_tempo(samples, 4, 0.1) == pytest.approx(1.0)


class TestRhythmStability:

    def test_envelope_takes_bin_maxima(self):
        samples = np.array([0.1, -0.4, 0.2, 0.3, -0.9, 0.0, 0.7])

        np.testing.assert_allclose(amplitude_envelope(samples, 3), [0.4, 0.3, 0.9])

    def test_short_buffer_gives_flat_envelope(self):
        envelope = amplitude_envelope(np.full(50, 0.8), 100)

        assert envelope.shape == (100,)
        assert not envelope.any()
        assert compute_rhythm_stability(np.full(50, 0.8), 100, 10.0) == 1.0

    def test_constant_envelope_is_stable(self):
        assert compute_rhythm_stability(np.tile([0.5, -0.5], 500), 100, 10.0) == 1.0

    def test_alternating_envelope_is_unstable(self):
        samples = np.tile([1.0, 1.0, 0.0, 0.0], 50)

        assert compute_rhythm_stability(samples, 100, 10.0) == 0.0

    def test_scale_controls_sensitivity(self):
        samples = np.tile([1.0, 1.0, 0.0, 0.0], 50)

        assert compute_rhythm_stability(samples, 100, 2.0) == pytest.approx(0.5)


class TestBrightness:

    def test_uniform_spectrum(self):
        assert compute_brightness(FrequencySnapshot([0.0, 0.0, 0.0, 0.0])) == pytest.approx(0.375)

    def test_single_bin(self):
        snapshot = FrequencySnapshot([-np.inf, -np.inf, 0.0, -np.inf])

        assert compute_brightness(snapshot) == pytest.approx(0.5)

    def test_silent_spectrum_is_zero(self):
        assert compute_brightness(FrequencySnapshot(np.full(1024, -np.inf))) == 0.0

    def test_non_finite_spectrum_is_zero(self):
        assert compute_brightness(FrequencySnapshot([0.0, np.nan, 0.0])) == 0.0


class TestNormalizeFeatures:

    def test_missing_keys_default_to_zero(self):
        assert normalize_features({}) == FeatureVector(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)

    def test_values_are_clamped(self):
        features = normalize_features({
            "energy": -0.2,
            "pitch": 440.0,
            "tempo": float("nan"),
            "variance": 0.04,
            "brightness": None,
            "rhythm_stability": 1.0,
            "loudness": 3.0,
        })

        assert features.energy == 0.0
        assert features.pitch == 1.0
        assert features.tempo == 0.0
        assert features.variance == pytest.approx(0.04)
        assert features.brightness == 0.0
        assert features.rhythm_stability == 1.0
        assert not hasattr(features, "loudness")

    def test_result_is_always_valid(self):
        features = normalize_features({"energy": math.inf, "pitch": "high"})

        assert features.energy == 0.0
        assert features.pitch == 0.0
