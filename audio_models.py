# -*- coding: utf-8 -*-
########################
# audio_models.py
########################
# Purpose:
# - Value types exchanged along the pitch pipeline (audio capture -> estimator -> note mapper -> session).
#
# Design notes:
# - No Qt usage and no audio device access. Plain dataclasses and numpy arrays.
# - AudioBuffer samples are read-only snapshots; the capture thread never mutates a published buffer.
#
########################
# Interfaces:
# Public exceptions:
# - AudioUnavailable(RuntimeError): permission denied, missing device, or PortAudio failure.
#
# Public dataclasses:
# - AudioBuffer(samples: numpy.ndarray, sample_rate: float)
# - PitchEstimate(frequency_hz: Optional[float])
# - NoteReading(name: str, octave: int, cents: int)
#
# Public constants:
# - NO_PITCH: PitchEstimate
# - NOTE_NAMES: tuple of the 12 pitch classes starting at C
#
# Public protocols:
# - AudioSource: start_capture, stop_capture, is_capturing, latest_buffer, error
#
########################

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

import numpy as np


NOTE_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")


class AudioUnavailable(RuntimeError):
    pass


@dataclass(frozen=True)
class AudioBuffer:
    samples: np.ndarray
    sample_rate: float

    @classmethod
    def from_samples(cls, samples, sample_rate: float) -> "AudioBuffer":
        array = np.array(samples, dtype=np.float64, copy=True).reshape(-1)
        array.setflags(write=False)
        return cls(samples=array, sample_rate=float(sample_rate))

    def __len__(self) -> int:
        return int(self.samples.shape[0])


@dataclass(frozen=True)
class PitchEstimate:
    frequency_hz: Optional[float] = None

    @property
    def is_pitched(self) -> bool:
        return self.frequency_hz is not None


NO_PITCH = PitchEstimate(frequency_hz=None)


@dataclass(frozen=True)
class NoteReading:
    name: str
    octave: int
    cents: int

    @property
    def label(self) -> str:
        return f"{self.name}{self.octave}"

    def describe(self) -> str:
        sign = "+" if self.cents > 0 else ""
        return f"{self.label} ({sign}{self.cents} cents)"


@runtime_checkable
class AudioSource(Protocol):
    """Audio capture collaborator.

    latest_buffer() must never block: it returns the most recent window of samples,
    or None when nothing has been captured yet.
    """

    def start_capture(self) -> None: ...

    def stop_capture(self) -> None: ...

    def is_capturing(self) -> bool: ...

    def latest_buffer(self) -> Optional[AudioBuffer]: ...

    def error(self) -> Optional[str]: ...
