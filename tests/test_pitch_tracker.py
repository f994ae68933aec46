from __future__ import annotations

import numpy as np

from audio_models import AudioBuffer
from conftest import FakeAudioSource
from pitch_tracker import PitchTracker


def _sine_buffer(frequency_hz: float, sample_rate: float = 44100.0, length: int = 2048) -> AudioBuffer:
    t = np.arange(length) / sample_rate
    return AudioBuffer.from_samples(0.5 * np.sin(2.0 * np.pi * frequency_hz * t), sample_rate)


def test_reads_note_from_latest_buffer() -> None:
    source = FakeAudioSource()
    source.start_capture()
    source.buffer = _sine_buffer(440.0)
    tracker = PitchTracker(source)

    reading = tracker.read()
    assert reading is not None
    assert reading.label == "A4"
    assert abs(reading.cents) <= 50
    assert tracker.last_reading() == reading
    assert abs(tracker.last_frequency_hz() - 440.0) < 440.0 * 0.02


def test_not_capturing_reads_none() -> None:
    source = FakeAudioSource()
    source.buffer = _sine_buffer(440.0)
    tracker = PitchTracker(source)
    assert tracker.read() is None
    assert tracker.last_reading() is None


def test_silence_keeps_last_reading() -> None:
    source = FakeAudioSource()
    source.start_capture()
    tracker = PitchTracker(source)

    source.buffer = _sine_buffer(261.63)
    first = tracker.read()
    assert first is not None and first.label == "C4"

    source.buffer = AudioBuffer.from_samples(np.zeros(2048), 44100.0)
    assert tracker.read() is None
    assert tracker.last_reading() == first

    source.buffer = None
    assert tracker.read() is None

    tracker.reset()
    assert tracker.last_reading() is None
    assert tracker.last_frequency_hz() is None
