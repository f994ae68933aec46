# -*- coding: utf-8 -*-
########################
# audio_input.py
########################
# Purpose:
# - Microphone capture collaborator backed by sounddevice.InputStream.
# - Keeps a rolling window of the most recent buffer_size mono samples.
#
# Design notes:
# - The PortAudio callback runs on its own thread. It only writes into a single slot (the rolling
#   window) under a lock. Most recent samples win; nothing is queued.
# - latest_buffer() never blocks on new data. It copies the window as a read-only AudioBuffer.
# - sounddevice is imported on start_capture(), so the rest of the game (and its tests) does not
#   need PortAudio installed.
# - Device failures raise AudioUnavailable and are also kept as a human readable error() string.
#   They are reported to Sentry (a no-op when error reporting is not configured).
# - A stream that PortAudio stops on its own (device unplugged, driver reset) no longer counts as
#   capturing and sets error(), so the session can show it.
# - AudioInput is a context manager: the device is released on every exit path.
#
########################
# Interfaces:
# Public dataclasses:
# - InputDevice(index: int, name: str, input_channels: int, sample_rate: float, is_default: bool)
#
# Public functions:
# - query_input_devices() -> list[InputDevice]
#
# Public classes:
# - class AudioInput(AudioSource)
#   - __init__(*, sample_rate: int, buffer_size: int, device: Optional[int | str])
#   - start_capture() -> None
#   - stop_capture() -> None
#   - is_capturing() -> bool
#   - latest_buffer() -> Optional[AudioBuffer]
#   - error() -> Optional[str]
#
########################

from __future__ import annotations

from dataclasses import dataclass
import logging
import threading
from typing import Any, List, Optional, Union

import numpy as np
import sentry_sdk

from audio_models import AudioBuffer, AudioUnavailable
from config import AudioConfig


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InputDevice:
    index: int
    name: str
    input_channels: int
    sample_rate: float
    is_default: bool


def _import_sounddevice():
    try:
        import sounddevice
    except (ImportError, OSError) as exception:
        raise AudioUnavailable(f"Audio backend is not available: {exception}") from exception
    return sounddevice


def query_input_devices() -> List[InputDevice]:
    sounddevice = _import_sounddevice()
    devices = sounddevice.query_devices()
    default_input = sounddevice.default.device[0]
    default_index = int(default_input) if default_input is not None else -1

    result: List[InputDevice] = []
    for index in range(len(devices)):
        device = devices[index]
        if int(device["max_input_channels"]) > 0:
            result.append(
                InputDevice(
                    index=index,
                    name=str(device["name"]),
                    input_channels=int(device["max_input_channels"]),
                    sample_rate=float(device["default_samplerate"]),
                    is_default=(index == default_index),
                )
            )
    return result


class AudioInput:
    def __init__(
        self,
        *,
        sample_rate: int = 44100,
        buffer_size: int = 2048,
        device: Optional[Union[int, str]] = None,
    ) -> None:
        self._sample_rate = int(sample_rate)
        self._buffer_size = int(buffer_size)
        self._device = device

        self._lock = threading.Lock()
        self._window = np.zeros(self._buffer_size, dtype=np.float32)
        self._received_frames = 0

        self._stream: Any = None
        self._error: Optional[str] = None

    @classmethod
    def from_config(cls, audio_config: AudioConfig) -> "AudioInput":
        return cls(
            sample_rate=int(audio_config.sample_rate),
            buffer_size=int(audio_config.buffer_size),
            device=audio_config.device,
        )

    def __enter__(self) -> "AudioInput":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.stop_capture()

    def error(self) -> Optional[str]:
        self._check_stream_alive()
        return self._error

    def is_capturing(self) -> bool:
        return self._check_stream_alive()

    def start_capture(self) -> None:
        if self._stream is not None:
            if self._check_stream_alive():
                return
            self.stop_capture()

        self._reset_window()
        sounddevice = self._load_backend()

        stream = None
        try:
            stream = sounddevice.InputStream(
                samplerate=self._sample_rate,
                channels=1,
                dtype="float32",
                device=self._device,
                callback=self._on_audio_block,
                finished_callback=self._on_stream_finished,
            )
            stream.start()
        except Exception as exception:
            if stream is not None:
                try:
                    stream.close()
                except Exception:
                    logger.debug("Ignoring close failure on a stream that never started", exc_info=True)
            self._error = f"Microphone error: {exception}"
            logger.warning("Audio capture failed to start: %s", exception)
            sentry_sdk.capture_exception(exception)
            raise AudioUnavailable(self._error) from exception

        self._stream = stream
        self._error = None
        logger.info(
            "Audio capture started (device=%s, %d Hz, window=%d)",
            self._device if self._device is not None else "default",
            self._sample_rate,
            self._buffer_size,
        )

    def stop_capture(self) -> None:
        stream = self._stream
        self._stream = None
        if stream is None:
            return
        try:
            stream.stop()
        finally:
            stream.close()
            self._reset_window()
            logger.info("Audio capture stopped")

    def latest_buffer(self) -> Optional[AudioBuffer]:
        with self._lock:
            if self._received_frames < self._buffer_size:
                return None
            snapshot = self._window.copy()
        return AudioBuffer.from_samples(snapshot, float(self._sample_rate))

    def _load_backend(self):
        try:
            return _import_sounddevice()
        except AudioUnavailable as exception:
            self._error = str(exception)
            logger.warning("%s", exception)
            raise

    def _check_stream_alive(self) -> bool:
        stream = self._stream
        if stream is None:
            return False
        if bool(stream.active):
            return True
        if self._error is None:
            self._error = "Microphone error: audio input stopped unexpectedly"
            logger.warning("Audio stream is no longer active")
        return False

    def _on_stream_finished(self) -> None:
        # stop_capture() clears _stream first, so only unexpected endings get here with a stream set.
        if self._stream is None:
            return
        self._error = "Microphone error: audio input stopped unexpectedly"
        logger.warning("Audio stream finished while capturing")

    def _reset_window(self) -> None:
        with self._lock:
            self._window[:] = 0.0
            self._received_frames = 0

    def _on_audio_block(self, indata, frames, time_info, status) -> None:
        if status:
            logger.debug("Audio input status: %s", status)

        block = np.asarray(indata, dtype=np.float32)
        if block.ndim > 1:
            block = block[:, 0]
        block = block[-self._buffer_size:]
        count = int(block.shape[0])
        if count == 0:
            return

        with self._lock:
            if count < self._buffer_size:
                self._window[:-count] = self._window[count:]
            self._window[-count:] = block
            self._received_frames += count
