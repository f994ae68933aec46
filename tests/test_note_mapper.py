"""Tests for note_mapper.py."""

from __future__ import annotations

import pytest

from audio_models import NO_PITCH, NoteReading, PitchEstimate
from note_mapper import NoteMapper


@pytest.fixture
def mapper() -> NoteMapper:
    return NoteMapper()


def _note(mapper: NoteMapper, frequency_hz: float) -> NoteReading:
    reading = mapper.to_note(PitchEstimate(frequency_hz=frequency_hz))
    assert reading is not None
    return reading


def test_a4_is_in_tune(mapper: NoteMapper) -> None:
    assert _note(mapper, 440.0) == NoteReading(name="A", octave=4, cents=0)


def test_quarter_tone_sharp_boundary(mapper: NoteMapper) -> None:
    reading = _note(mapper, 440.0 * 2.0 ** (1.0 / 24.0))
    assert reading.label == "A4"
    assert reading.cents == 50


def test_quarter_tone_flat_boundary(mapper: NoteMapper) -> None:
    reading = _note(mapper, 440.0 * 2.0 ** (-1.0 / 24.0))
    assert reading.label == "A4"
    assert reading.cents == -50


@pytest.mark.parametrize(
    ("frequency_hz", "label"),
    [
        (261.6256, "C4"),
        (277.1826, "C#4"),
        (493.8833, "B4"),
        (523.2511, "C5"),
        (82.4069, "E2"),
        (1046.502, "C6"),
        (27.5, "A0"),
    ],
)
def test_scientific_pitch_notation(mapper: NoteMapper, frequency_hz: float, label: str) -> None:
    reading = _note(mapper, frequency_hz)
    assert reading.label == label
    assert reading.cents == 0


def test_signed_cents(mapper: NoteMapper) -> None:
    sharp = _note(mapper, 440.0 * 2.0 ** (20.0 / 1200.0))
    flat = _note(mapper, 440.0 * 2.0 ** (-20.0 / 1200.0))
    assert (sharp.label, sharp.cents) == ("A4", 20)
    assert (flat.label, flat.cents) == ("A4", -20)


def test_cents_always_within_range(mapper: NoteMapper) -> None:
    frequency_hz = 80.0
    while frequency_hz < 1000.0:
        reading = _note(mapper, frequency_hz)
        assert -50 <= reading.cents <= 50
        frequency_hz *= 1.0137


def test_no_pitch_maps_to_none(mapper: NoteMapper) -> None:
    assert mapper.to_note(NO_PITCH) is None


@pytest.mark.parametrize("bad", [0.0, -10.0, float("nan"), float("inf")])
def test_invalid_frequency_maps_to_none(mapper: NoteMapper, bad: float) -> None:
    assert mapper.to_note(PitchEstimate(frequency_hz=bad)) is None


def test_frequency_for_note_round_trip(mapper: NoteMapper) -> None:
    assert mapper.frequency_for_note("A", 4) == pytest.approx(440.0)
    assert _note(mapper, mapper.frequency_for_note("F#", 3)).label == "F#3"


def test_frequency_for_unknown_note_raises(mapper: NoteMapper) -> None:
    with pytest.raises(ValueError):
        mapper.frequency_for_note("H", 4)


def test_describe() -> None:
    assert NoteReading(name="A", octave=4, cents=12).describe() == "A4 (+12 cents)"
    assert NoteReading(name="A", octave=4, cents=-3).describe() == "A4 (-3 cents)"


def test_module_self_checks() -> None:
    import note_mapper

    note_mapper._run_unit_tests()
