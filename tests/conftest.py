"""
Shared fixtures for the test suite.

Fakes for the audio collaborator, a scripted pitch tracker and a manual time source,
so session tests run without Qt, PortAudio or wall-clock time.
"""

from __future__ import annotations

import random
import types
from typing import Iterable, List, Optional

import pytest

from audio_models import AudioBuffer, AudioUnavailable, NoteReading
from config import AppConfig
from game_clock import SimulationClock
from game_session import GameSession
from high_score_store import MemoryHighScoreStore


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class ManualTimeSource:
    """Time source advanced explicitly by the test."""

    def __init__(self, start_seconds: float = 100.0) -> None:
        self.now = float(start_seconds)

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += float(seconds)


class FakeAudioSource:
    def __init__(self, *, fail_with: Optional[str] = None) -> None:
        self.fail_with = fail_with
        self.capturing = False
        self.start_calls = 0
        self.stop_calls = 0
        self.buffer: Optional[AudioBuffer] = None

    def start_capture(self) -> None:
        self.start_calls += 1
        if self.fail_with is not None:
            raise AudioUnavailable(self.fail_with)
        self.capturing = True

    def stop_capture(self) -> None:
        self.stop_calls += 1
        self.capturing = False

    def is_capturing(self) -> bool:
        return self.capturing

    def latest_buffer(self) -> Optional[AudioBuffer]:
        return self.buffer

    def error(self) -> Optional[str]:
        return self.fail_with


class ScriptedTracker:
    """Stands in for PitchTracker: hands out queued readings, then None."""

    def __init__(self, audio_source: FakeAudioSource) -> None:
        self.audio_source = audio_source
        self._queue: List[Optional[NoteReading]] = []
        self._last: Optional[NoteReading] = None

    def queue(self, readings: Iterable[Optional[NoteReading]]) -> None:
        self._queue.extend(readings)

    def queue_cents(self, cents_values: Iterable[Optional[int]]) -> None:
        self.queue(
            None if cents is None else NoteReading(name="A", octave=4, cents=int(cents))
            for cents in cents_values
        )

    def read(self) -> Optional[NoteReading]:
        if not self.audio_source.is_capturing() or not self._queue:
            return None
        reading = self._queue.pop(0)
        if reading is not None:
            self._last = reading
        return reading

    def last_reading(self) -> Optional[NoteReading]:
        return self._last

    def last_frequency_hz(self) -> Optional[float]:
        return None if self._last is None else 440.0

    def reset(self) -> None:
        self._last = None


class FakeStream:
    """Stands in for sounddevice.InputStream; `active` can be flipped to simulate a lost device."""

    instances: List["FakeStream"] = []

    def __init__(self, *, fail_on_start: bool = False, **kwargs) -> None:
        self.kwargs = kwargs
        self.fail_on_start = fail_on_start
        self.active = False
        self.stopped = False
        self.closed = False
        FakeStream.instances.append(self)

    def start(self) -> None:
        if self.fail_on_start:
            raise RuntimeError("device busy")
        self.active = True

    def stop(self) -> None:
        self.active = False
        self.stopped = True

    def close(self) -> None:
        self.closed = True


def fake_sounddevice(*, fail_on_start: bool = False) -> types.SimpleNamespace:
    FakeStream.instances = []
    return types.SimpleNamespace(
        InputStream=lambda **kwargs: FakeStream(fail_on_start=fail_on_start, **kwargs),
    )


def make_reading(cents: int = 0, name: str = "A", octave: int = 4) -> NoteReading:
    return NoteReading(name=name, octave=octave, cents=cents)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig()


@pytest.fixture
def time_source() -> ManualTimeSource:
    return ManualTimeSource()


@pytest.fixture
def audio_source() -> FakeAudioSource:
    return FakeAudioSource()


@pytest.fixture
def tracker(audio_source: FakeAudioSource) -> ScriptedTracker:
    return ScriptedTracker(audio_source)


@pytest.fixture
def score_store() -> MemoryHighScoreStore:
    return MemoryHighScoreStore()


@pytest.fixture
def session(app_config, tracker, score_store, time_source) -> GameSession:
    return GameSession(
        config=app_config,
        pitch_tracker=tracker,  # type: ignore[arg-type]
        high_score_store=score_store,
        clock=SimulationClock(time_source),
        rng=random.Random(1234),
    )


def start_playing(session: GameSession, tracker: ScriptedTracker) -> None:
    """Drive START -> CALIBRATION -> PLAYING with an A4 reference note."""
    session.begin_calibration()
    tracker.queue([make_reading(0)])
    session.tick()
    session.start_game()
