"""Tests for pitch_estimator.py.

Covers:
- Pure sine recovery across the musical range (80-1000 Hz) within 2%
- Silence and low-level noise gate
- Malformed buffers degrade to NO_PITCH
- Similarity curve shape (lag 0 scores 1.0)
"""

from __future__ import annotations

import numpy as np
import pytest

from audio_models import NO_PITCH, AudioBuffer
from pitch_estimator import RMS_THRESHOLD, PitchEstimator, rms

SAMPLE_RATE = 44100.0
BUFFER_LENGTH = 2048


def _sine(frequency_hz: float, *, amplitude: float = 0.5, phase: float = 0.0, sample_rate: float = SAMPLE_RATE) -> AudioBuffer:
    t = np.arange(BUFFER_LENGTH) / sample_rate
    return AudioBuffer.from_samples(amplitude * np.sin(2.0 * np.pi * frequency_hz * t + phase), sample_rate)


@pytest.fixture
def estimator() -> PitchEstimator:
    return PitchEstimator()


@pytest.mark.parametrize(
    "frequency_hz",
    [80.0, 98.0, 110.0, 146.83, 196.0, 220.0, 261.63, 329.63, 440.0, 523.25, 659.25, 783.99, 880.0, 1000.0],
)
def test_recovers_pure_sine_within_two_percent(estimator: PitchEstimator, frequency_hz: float) -> None:
    result = estimator.estimate(_sine(frequency_hz))
    assert result.is_pitched
    assert result.frequency_hz == pytest.approx(frequency_hz, rel=0.02)


@pytest.mark.parametrize("phase", [0.0, 0.7, 2.1])
def test_recovery_does_not_depend_on_phase(estimator: PitchEstimator, phase: float) -> None:
    result = estimator.estimate(_sine(330.0, phase=phase))
    assert result.frequency_hz == pytest.approx(330.0, rel=0.02)


def test_quiet_sine_above_gate_is_detected(estimator: PitchEstimator) -> None:
    # amplitude 0.02 -> RMS ~0.014, just above the gate
    result = estimator.estimate(_sine(440.0, amplitude=0.02))
    assert result.frequency_hz == pytest.approx(440.0, rel=0.02)


def test_other_sample_rate(estimator: PitchEstimator) -> None:
    result = estimator.estimate(_sine(440.0, sample_rate=48000.0))
    assert result.frequency_hz == pytest.approx(440.0, rel=0.02)


def test_silence_is_no_pitch(estimator: PitchEstimator) -> None:
    assert estimator.estimate(AudioBuffer.from_samples(np.zeros(BUFFER_LENGTH), SAMPLE_RATE)) == NO_PITCH


def test_signal_below_rms_gate_is_no_pitch(estimator: PitchEstimator) -> None:
    buffer = _sine(440.0, amplitude=0.005)
    assert rms(buffer.samples) < RMS_THRESHOLD
    assert estimator.estimate(buffer) == NO_PITCH


def test_none_and_empty_buffers_are_no_pitch(estimator: PitchEstimator) -> None:
    assert estimator.estimate(None) == NO_PITCH
    assert estimator.estimate(AudioBuffer.from_samples([], SAMPLE_RATE)) == NO_PITCH


def test_nan_samples_are_no_pitch(estimator: PitchEstimator) -> None:
    samples = np.array(_sine(440.0).samples)
    samples[100] = np.nan
    assert estimator.estimate(AudioBuffer.from_samples(samples, SAMPLE_RATE)) == NO_PITCH


def test_non_power_of_two_length_is_no_pitch(estimator: PitchEstimator) -> None:
    samples = _sine(440.0).samples[:2000]
    assert estimator.estimate(AudioBuffer.from_samples(samples, SAMPLE_RATE)) == NO_PITCH


def test_bad_sample_rate_is_no_pitch(estimator: PitchEstimator) -> None:
    buffer = AudioBuffer.from_samples(_sine(440.0).samples, 0.0)
    assert estimator.estimate(buffer) == NO_PITCH


def test_similarity_curve_starts_at_one(estimator: PitchEstimator) -> None:
    curve = estimator.similarity_curve(np.asarray(_sine(440.0).samples))
    assert curve.shape == (BUFFER_LENGTH // 2,)
    assert curve[0] == pytest.approx(1.0)
    assert curve.max() <= 1.0 + 1e-12


def test_buffer_is_read_only() -> None:
    buffer = _sine(440.0)
    with pytest.raises(ValueError):
        buffer.samples[0] = 1.0


def test_module_self_checks() -> None:
    import pitch_estimator

    pitch_estimator._run_unit_tests()
