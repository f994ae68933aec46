# -*- coding: utf-8 -*-
########################
# pitch_estimator.py
########################
# Purpose:
# - Convert one AudioBuffer into a fundamental frequency estimate, or NO_PITCH.
#
# Key Logic:
# - Silence gate: RMS over the whole buffer below 0.01 is treated as no signal.
# - Time-domain autocorrelation over lags [1, N/2):
#     similarity(lag) = 1 - sum(|x[i] - x[i + lag]| for i in [0, N/2)) / (N/2)
# - The best lag must score above 0.5, otherwise there is no stable period.
# - Period guard: the earliest local similarity peak scoring within PEAK_TOLERANCE of the best
#   (relative to the curve range) is taken as the period. Whole-sample rounding can make
#   2x or 4x the period score marginally higher than the period itself on a clean tone.
#
# Design notes:
# - No Qt usage. Pure numpy, deterministic.
# - Malformed buffers (bad length, NaN/inf samples, bad sample rate) degrade to NO_PITCH.
# - Known limitation: period detection is weaker on buzzy or inharmonic timbres. It is not a
#   spectral method and is not meant to be one.
#
########################
# Interfaces:
# Public constants:
# - RMS_THRESHOLD = 0.01
# - CORRELATION_THRESHOLD = 0.5
#
# Public classes:
# - class PitchEstimator
#   - estimate(buffer: Optional[AudioBuffer]) -> PitchEstimate
#   - similarity_curve(samples: numpy.ndarray) -> numpy.ndarray
#
# Public functions:
# - rms(samples: numpy.ndarray) -> float
#
########################

from __future__ import annotations

import logging
from typing import Optional

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from audio_models import NO_PITCH, AudioBuffer, PitchEstimate


logger = logging.getLogger(__name__)

RMS_THRESHOLD = 0.01
CORRELATION_THRESHOLD = 0.5
PEAK_TOLERANCE = 0.1
MIN_BUFFER_LENGTH = 4


def rms(samples: np.ndarray) -> float:
    if samples.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(np.square(samples))))


def _is_power_of_two(value: int) -> bool:
    return value > 0 and (value & (value - 1)) == 0


class PitchEstimator:
    def __init__(
        self,
        *,
        rms_threshold: float = RMS_THRESHOLD,
        correlation_threshold: float = CORRELATION_THRESHOLD,
    ) -> None:
        self._rms_threshold = float(rms_threshold)
        self._correlation_threshold = float(correlation_threshold)

    def estimate(self, buffer: Optional[AudioBuffer]) -> PitchEstimate:
        if buffer is None:
            return NO_PITCH

        samples = np.asarray(buffer.samples, dtype=np.float64).reshape(-1)
        if samples.size == 0:
            return NO_PITCH

        malformed_reason = self._malformed_reason(samples, float(buffer.sample_rate))
        if malformed_reason:
            logger.debug("Ignoring malformed audio buffer: %s", malformed_reason)
            return NO_PITCH

        if rms(samples) < self._rms_threshold:
            return NO_PITCH

        correlations = self.similarity_curve(samples)

        # Lag 0 always scores 1.0; the search starts at lag 1.
        best_offset = 1 + int(np.argmax(correlations[1:]))
        best_correlation = float(correlations[best_offset])
        if best_correlation <= self._correlation_threshold:
            return NO_PITCH

        period = self._earliest_matching_peak(correlations, best_offset)
        return PitchEstimate(frequency_hz=float(buffer.sample_rate) / float(period))

    def similarity_curve(self, samples: np.ndarray) -> np.ndarray:
        """Return the similarity score for every lag in [0, N/2)."""
        half = int(samples.shape[0]) // 2
        reference = samples[:half]
        shifted = sliding_window_view(samples, half)[:half]
        differences = np.abs(shifted - reference).sum(axis=1)
        return 1.0 - differences / float(half)

    def _earliest_matching_peak(self, correlations: np.ndarray, best_offset: int) -> int:
        best_correlation = float(correlations[best_offset])
        floor_value = float(np.min(correlations[1:]))
        acceptance = best_correlation - PEAK_TOLERANCE * (best_correlation - floor_value)

        middle = correlations[1:-1]
        is_peak = (middle >= correlations[:-2]) & (middle > correlations[2:])
        peak_offsets = np.flatnonzero(is_peak) + 1

        for offset in peak_offsets:
            if offset > best_offset:
                break
            if float(correlations[offset]) >= acceptance:
                return int(offset)
        return int(best_offset)

    def _malformed_reason(self, samples: np.ndarray, sample_rate: float) -> str:
        length = int(samples.shape[0])
        if length < MIN_BUFFER_LENGTH:
            return f"buffer too short ({length} samples)"
        if not _is_power_of_two(length):
            return f"buffer length {length} is not a power of two"
        if not np.all(np.isfinite(samples)):
            return "buffer contains non-finite samples"
        if not np.isfinite(sample_rate) or sample_rate <= 0.0:
            return f"invalid sample rate {sample_rate!r}"
        return ""


def _sine_buffer(frequency_hz: float, *, sample_rate: float = 44100.0, length: int = 2048, amplitude: float = 0.5) -> AudioBuffer:
    t = np.arange(length) / sample_rate
    return AudioBuffer.from_samples(amplitude * np.sin(2.0 * np.pi * frequency_hz * t), sample_rate)


def _run_unit_tests() -> None:
    estimator = PitchEstimator()

    assert estimator.estimate(None) == NO_PITCH
    assert estimator.estimate(AudioBuffer.from_samples(np.zeros(2048), 44100.0)) == NO_PITCH

    for frequency_hz in (82.41, 110.0, 220.0, 440.0, 659.25, 987.77):
        result = estimator.estimate(_sine_buffer(frequency_hz))
        assert result.is_pitched
        assert abs(result.frequency_hz - frequency_hz) / frequency_hz < 0.02, (frequency_hz, result)

    bad = np.zeros(2048)
    bad[3] = np.nan
    assert estimator.estimate(AudioBuffer.from_samples(bad, 44100.0)) == NO_PITCH


if __name__ == "__main__":
    _run_unit_tests()
    print("pitch_estimator.py: ok")
