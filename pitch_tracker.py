# -*- coding: utf-8 -*-
########################
# pitch_tracker.py
########################
# Purpose:
# - Per-tick pitch read: latest audio buffer -> PitchEstimator -> NoteMapper -> NoteReading.
# - Remembers the most recent frequency and reading for display.
#
# Design notes:
# - No Qt usage. Runs synchronously inside the tick handler.
# - Estimation and mapping never raise on bad input; a missing or malformed buffer reads as None.
# - A None reading does not clear last_reading(), so the on-screen note does not flicker.
#
########################
# Interfaces:
# Public classes:
# - class PitchTracker
#   - __init__(audio_source: AudioSource, estimator: Optional[PitchEstimator], mapper: Optional[NoteMapper])
#   - read() -> Optional[NoteReading]
#   - last_reading() -> Optional[NoteReading]
#   - last_frequency_hz() -> Optional[float]
#   - reset() -> None
#
########################

from __future__ import annotations

from typing import Optional

from audio_models import AudioSource, NoteReading
from note_mapper import NoteMapper
from pitch_estimator import PitchEstimator


class PitchTracker:
    def __init__(
        self,
        audio_source: AudioSource,
        estimator: Optional[PitchEstimator] = None,
        mapper: Optional[NoteMapper] = None,
    ) -> None:
        self._audio_source = audio_source
        self._estimator = estimator or PitchEstimator()
        self._mapper = mapper or NoteMapper()
        self._last_reading: Optional[NoteReading] = None
        self._last_frequency_hz: Optional[float] = None

    @property
    def audio_source(self) -> AudioSource:
        return self._audio_source

    def read(self) -> Optional[NoteReading]:
        if not self._audio_source.is_capturing():
            return None

        estimate = self._estimator.estimate(self._audio_source.latest_buffer())
        reading = self._mapper.to_note(estimate)
        if reading is not None:
            self._last_reading = reading
            self._last_frequency_hz = estimate.frequency_hz
        return reading

    def last_reading(self) -> Optional[NoteReading]:
        return self._last_reading

    def last_frequency_hz(self) -> Optional[float]:
        return self._last_frequency_hz

    def reset(self) -> None:
        self._last_reading = None
        self._last_frequency_hz = None
