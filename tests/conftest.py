"""
Shared pytest fixtures for the emotion analysis tests.
"""

import io

import numpy as np
import pytest
import soundfile as sf

from voice_emotion.config import AnalysisSettings
from voice_emotion.types import SampleBuffer

SAMPLE_RATE = 16000


def make_sine(freq_hz, duration_sec=1.0, amplitude=0.5, sample_rate=SAMPLE_RATE):
    t = np.arange(int(sample_rate * duration_sec)) / float(sample_rate)
    return amplitude * np.sin(2.0 * np.pi * freq_hz * t)


def wav_bytes(samples, sample_rate=SAMPLE_RATE):
    """Encode samples as an in-memory 16-bit WAV file."""
    buf = io.BytesIO()
    sf.write(buf, samples, sample_rate, format="WAV", subtype="PCM_16")
    return buf.getvalue()


@pytest.fixture
def settings():
    """Default calibration values, independent of the environment."""
    return AnalysisSettings()


@pytest.fixture
def silence():
    return SampleBuffer(np.zeros(SAMPLE_RATE), SAMPLE_RATE)


@pytest.fixture
def sine_440():
    return SampleBuffer(make_sine(440.0), SAMPLE_RATE)


@pytest.fixture
def noise():
    rng = np.random.default_rng(1234)
    return SampleBuffer(rng.uniform(-0.8, 0.8, SAMPLE_RATE), SAMPLE_RATE)


@pytest.fixture
def bursts():
    """Four 0.125 s bursts separated by silence: strong onsets, unstable envelope."""
    samples = np.zeros(SAMPLE_RATE)
    burst = make_sine(220.0, duration_sec=0.125, amplitude=0.9)
    for start in (0, 4000, 8000, 12000):
        samples[start:start + burst.size] = burst
    return SampleBuffer(samples, SAMPLE_RATE)
