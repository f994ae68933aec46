# -*- coding: utf-8 -*-
########################
# note_mapper.py
########################
# Purpose:
# - Map a frequency estimate to the nearest equal-tempered note and a signed cents deviation.
#
# Design notes:
# - Reference pitch is A4 = 440 Hz, scientific pitch notation (A4 -> "A4", middle C -> "C4").
# - Semitone distance is snapped to 9 decimals before rounding so float noise cannot flip a note.
# - An exact half-semitone tie resolves toward A4, so +50 and -50 both stay on the same note.
# - Cents round half away from zero and always land in [-50, 50].
# - No Qt usage. Pure math.
#
########################
# Interfaces:
# Public classes:
# - class NoteMapper
#   - to_note(estimate: PitchEstimate) -> Optional[NoteReading]
#   - frequency_for_note(name: str, octave: int) -> float
#
########################

from __future__ import annotations

import math
from typing import Optional

from audio_models import NOTE_NAMES, NO_PITCH, NoteReading, PitchEstimate


A4_FREQUENCY_HZ = 440.0
A4_OCTAVE = 4
A_INDEX_FROM_C = 9
SEMITONE_PRECISION_DIGITS = 9


def _round_half_toward_zero(value: float) -> int:
    if value >= 0.0:
        return int(math.ceil(value - 0.5))
    return -int(math.ceil(-value - 0.5))


def _round_half_away_from_zero(value: float) -> int:
    if value >= 0.0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


class NoteMapper:
    def __init__(self, *, reference_hz: float = A4_FREQUENCY_HZ) -> None:
        self._reference_hz = float(reference_hz)

    def to_note(self, estimate: PitchEstimate) -> Optional[NoteReading]:
        if estimate is None or not estimate.is_pitched:
            return None

        frequency_hz = float(estimate.frequency_hz)
        if not math.isfinite(frequency_hz) or frequency_hz <= 0.0:
            return None

        semitones = round(12.0 * math.log2(frequency_hz / self._reference_hz), SEMITONE_PRECISION_DIGITS)
        nearest = _round_half_toward_zero(semitones)

        note_index = nearest + A_INDEX_FROM_C
        name = NOTE_NAMES[note_index % 12]
        octave = A4_OCTAVE + note_index // 12
        cents = _round_half_away_from_zero((semitones - nearest) * 100.0)
        cents = max(-50, min(50, cents))

        return NoteReading(name=name, octave=int(octave), cents=int(cents))

    def frequency_for_note(self, name: str, octave: int) -> float:
        normalized = str(name).strip().upper()
        if normalized not in NOTE_NAMES:
            raise ValueError(f"Unknown note name: {name!r}")
        semitones = (NOTE_NAMES.index(normalized) - A_INDEX_FROM_C) + 12 * (int(octave) - A4_OCTAVE)
        return self._reference_hz * (2.0 ** (semitones / 12.0))


def _run_unit_tests() -> None:
    mapper = NoteMapper()

    a4 = mapper.to_note(PitchEstimate(frequency_hz=440.0))
    assert a4 == NoteReading(name="A", octave=4, cents=0)
    assert a4.label == "A4"

    sharp = mapper.to_note(PitchEstimate(frequency_hz=440.0 * 2.0 ** (1.0 / 24.0)))
    assert sharp is not None and sharp.label == "A4" and sharp.cents == 50

    flat = mapper.to_note(PitchEstimate(frequency_hz=440.0 * 2.0 ** (-1.0 / 24.0)))
    assert flat is not None and flat.label == "A4" and flat.cents == -50

    middle_c = mapper.to_note(PitchEstimate(frequency_hz=261.6256))
    assert middle_c is not None and middle_c.label == "C4" and middle_c.cents == 0

    assert mapper.to_note(NO_PITCH) is None
    assert abs(mapper.frequency_for_note("C", 5) - 523.2511) < 1e-3


if __name__ == "__main__":
    _run_unit_tests()
    print("note_mapper.py: ok")
