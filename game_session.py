# -*- coding: utf-8 -*-
########################
# game_session.py
########################
# Purpose:
# - Session orchestrator and the authoritative game state machine.
# - Owns the clock, the obstacle field, the avatar, score, difficulty and the calibration reference note.
#
# State machine:
#   START -(begin_calibration)-> CALIBRATION -(reference latched, start_game)-> PLAYING
#   PLAYING -(collision or simulation fault)-> GAME_OVER
#   GAME_OVER -(restart)-> PLAYING
#   GAME_OVER -(new_session)-> START
#
# Design notes:
# - No Qt usage. The host calls tick() once per display refresh; each tick is one synchronous transition.
# - Playing tick order is fixed: score, difficulty, spawn, advance and prune, avatar, collision.
# - Score and difficulty are pure functions of elapsed time, recomputed every tick.
# - A missing pitch reading leaves the avatar where it is.
# - Audio failures are surfaced as audio_error text and never end the session. The source error is
#   re-read every active tick, so a microphone lost mid-game shows up while the avatar stays frozen.
# - Any exception inside a Playing tick is logged, reported to Sentry and forces GAME_OVER.
# - The avatar starts on the in-tune line, the same position a 0 cents reading maps to.
# - Audio capture runs in CALIBRATION and PLAYING only.
#
########################
# Interfaces:
# Public exceptions:
# - InvalidTransition(RuntimeError)
#
# Public functions:
# - difficulty_for_elapsed(elapsed_seconds: float, config: DifficultyConfig) -> float
# - score_for_elapsed(elapsed_seconds: float, config: DifficultyConfig) -> int
# - avatar_y_for_cents(cents: float, playfield: PlayfieldConfig) -> float
#
# Public classes:
# - class GameSession
#   - phase() -> SessionPhase
#   - is_ticking() -> bool
#   - begin_calibration() -> None
#   - latch_reference(reading: Optional[NoteReading]) -> Optional[NoteReading]
#   - start_game() -> None
#   - restart() -> None
#   - new_session() -> None
#   - tick() -> RenderFrame
#   - render_frame() -> RenderFrame
#   - close() -> None
#
# Inputs:
# - PitchTracker readings, SimulationClock ticks, HighScoreStore.
#
# Outputs:
# - RenderFrame per tick for the render collaborator.
#
########################

from __future__ import annotations

import logging
import math
import random
from typing import Optional

import sentry_sdk

from audio_models import AudioUnavailable, NoteReading
from collision import first_collision
from config import AppConfig, DifficultyConfig, PlayfieldConfig
from game_clock import SimulationClock
from gameplay_models import Avatar, RenderFrame, SessionPhase, pitch_line_y
from high_score_store import HighScoreStore
from note_mapper import NoteMapper
from obstacle_field import ObstacleField
from pitch_tracker import PitchTracker


logger = logging.getLogger(__name__)


class InvalidTransition(RuntimeError):
    pass


def difficulty_for_elapsed(elapsed_seconds: float, config: DifficultyConfig) -> float:
    return max(0.0, min(1.0, float(elapsed_seconds) * float(config.ramp_per_second)))


def score_for_elapsed(elapsed_seconds: float, config: DifficultyConfig) -> int:
    return int(math.floor(max(0.0, float(elapsed_seconds)) * float(config.points_per_second)))


def avatar_y_for_cents(cents: float, playfield: PlayfieldConfig) -> float:
    target_y = pitch_line_y(cents, playfield.height)
    return max(0.0, min(float(playfield.height) - float(playfield.avatar_height), target_y))


class GameSession:
    def __init__(
        self,
        *,
        config: AppConfig,
        pitch_tracker: PitchTracker,
        high_score_store: HighScoreStore,
        clock: Optional[SimulationClock] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._config = config
        self._pitch_tracker = pitch_tracker
        self._audio_source = pitch_tracker.audio_source
        self._high_score_store = high_score_store
        self._clock = clock or SimulationClock()
        self._field = ObstacleField(config.playfield, config.difficulty, rng)
        self._note_mapper = NoteMapper()

        self._phase = SessionPhase.START
        self._avatar = Avatar(
            x=float(config.playfield.avatar_x),
            y=self._in_tune_y(),
            width=float(config.playfield.avatar_width),
            height=float(config.playfield.avatar_height),
        )
        self._reference_note: Optional[NoteReading] = None
        self._cents: Optional[int] = None
        self._score = 0
        self._difficulty = 0.0
        self._is_new_high_score = False
        self._audio_error: Optional[str] = None
        self._high_score = self._load_high_score()

    # -----------------
    # Queries
    # -----------------

    def phase(self) -> SessionPhase:
        return self._phase

    def is_ticking(self) -> bool:
        return self._phase in (SessionPhase.CALIBRATION, SessionPhase.PLAYING)

    def reference_note(self) -> Optional[NoteReading]:
        return self._reference_note

    def score(self) -> int:
        return self._score

    def high_score(self) -> int:
        return self._high_score

    def difficulty(self) -> float:
        return self._difficulty

    def avatar(self) -> Avatar:
        return self._avatar

    def audio_error(self) -> Optional[str]:
        return self._audio_error

    @property
    def obstacle_field(self) -> ObstacleField:
        return self._field

    @property
    def clock(self) -> SimulationClock:
        return self._clock

    # -----------------
    # Transitions
    # -----------------

    def begin_calibration(self) -> None:
        self._require_phase(SessionPhase.START, "begin_calibration")
        self._reference_note = None
        self._pitch_tracker.reset()
        self._phase = SessionPhase.CALIBRATION
        logger.info("Calibration started")
        self._start_audio()

    def latch_reference(self, reading: Optional[NoteReading]) -> Optional[NoteReading]:
        if reading is not None and self._reference_note is None:
            self._reference_note = reading
            logger.info("Calibration note detected: %s", reading.label)
        return self._reference_note

    def start_game(self) -> None:
        self._require_phase(SessionPhase.CALIBRATION, "start_game")
        if self._reference_note is None:
            raise InvalidTransition("start_game requires a calibration reference note")
        self._begin_playing()

    def restart(self) -> None:
        self._require_phase(SessionPhase.GAME_OVER, "restart")
        self._begin_playing()

    def new_session(self) -> None:
        self._require_phase(SessionPhase.GAME_OVER, "new_session")
        self._stop_audio()
        self._field.reset()
        self._reference_note = None
        self._cents = None
        self._score = 0
        self._difficulty = 0.0
        self._is_new_high_score = False
        self._avatar.y = self._in_tune_y()
        self._pitch_tracker.reset()
        self._high_score = self._load_high_score()
        self._phase = SessionPhase.START
        logger.info("Back to start screen")

    def close(self) -> None:
        self._clock.stop()
        self._stop_audio()

    # -----------------
    # Tick
    # -----------------

    def tick(self) -> RenderFrame:
        if self._phase == SessionPhase.CALIBRATION:
            self._refresh_audio_error()
            self.latch_reference(self._pitch_tracker.read())
        elif self._phase == SessionPhase.PLAYING:
            try:
                self._tick_playing()
            except Exception as exception:
                logger.exception("Simulation fault during tick; ending the session")
                sentry_sdk.capture_exception(exception)
                self._end_game()
        return self.render_frame()

    def _tick_playing(self) -> None:
        clock_tick = self._clock.tick()
        elapsed_seconds = clock_tick.elapsed_seconds

        self._score = score_for_elapsed(elapsed_seconds, self._config.difficulty)
        self._difficulty = difficulty_for_elapsed(elapsed_seconds, self._config.difficulty)

        self._field.spawn(elapsed_seconds, self._difficulty)
        self._field.advance(clock_tick.delta_seconds)
        self._field.prune()

        self._refresh_audio_error()
        reading = self._pitch_tracker.read()
        if reading is not None:
            self._cents = int(reading.cents)
            self._avatar.y = avatar_y_for_cents(reading.cents, self._config.playfield)

        hit = first_collision(self._avatar.bounding_box(), self._field.obstacles())
        if hit is not None:
            logger.info("Collision with %s #%d at t=%.2fs", hit.kind.value, hit.obstacle_id, elapsed_seconds)
            self._end_game()

    def render_frame(self) -> RenderFrame:
        last_reading = self._pitch_tracker.last_reading()
        return RenderFrame(
            phase=self._phase,
            avatar=self._avatar.bounding_box(),
            obstacles=tuple(obstacle.view() for obstacle in self._field.obstacles()),
            cents=self._cents,
            note=last_reading,
            reference_label=self._reference_note.label if self._reference_note is not None else None,
            score=self._score,
            high_score=self._high_score,
            difficulty=self._difficulty,
            elapsed_seconds=self._clock.elapsed_seconds(),
            is_new_high_score=self._is_new_high_score,
            audio_error=self._audio_error,
            frequency_hz=self._pitch_tracker.last_frequency_hz(),
            reference_frequency_hz=self._reference_frequency_hz(),
        )

    # -----------------
    # Internals
    # -----------------

    def _begin_playing(self) -> None:
        self._field.reset()
        self._avatar.y = self._in_tune_y()
        self._cents = None
        self._score = 0
        self._difficulty = 0.0
        self._is_new_high_score = False
        self._clock.start()
        self._phase = SessionPhase.PLAYING
        logger.info("Game started")
        if not self._audio_source.is_capturing():
            self._start_audio()

    def _end_game(self) -> None:
        if self._phase != SessionPhase.PLAYING:
            return

        self._clock.stop()
        self._phase = SessionPhase.GAME_OVER
        self._is_new_high_score = self._score >= self._high_score and self._score > 0

        if self._score > self._high_score:
            self._high_score = self._score
            try:
                self._high_score_store.save_high_score(self._high_score)
            except OSError as exception:
                logger.exception("Could not save high score %d", self._high_score)
                sentry_sdk.capture_exception(exception)

        logger.info("Game over. Score: %d (high score %d)", self._score, self._high_score)
        self._stop_audio()

    def _refresh_audio_error(self) -> None:
        source_error = self._audio_source.error()
        if source_error and source_error != self._audio_error:
            self._audio_error = source_error
            logger.warning("Audio input error: %s", source_error)

    def _reference_frequency_hz(self) -> Optional[float]:
        reference = self._reference_note
        if reference is None:
            return None
        return self._note_mapper.frequency_for_note(reference.name, reference.octave)

    def _start_audio(self) -> None:
        try:
            self._audio_source.start_capture()
        except AudioUnavailable as exception:
            self._audio_error = str(exception) or "Microphone unavailable"
            logger.warning("Audio unavailable: %s", self._audio_error)
            return
        self._audio_error = None

    def _stop_audio(self) -> None:
        try:
            self._audio_source.stop_capture()
        except Exception:
            logger.exception("Error while stopping audio capture")

    def _load_high_score(self) -> int:
        return max(0, int(self._high_score_store.load_high_score()))

    def _in_tune_y(self) -> float:
        return avatar_y_for_cents(0, self._config.playfield)

    def _require_phase(self, expected: SessionPhase, action: str) -> None:
        if self._phase != expected:
            raise InvalidTransition(f"{action} is not allowed in phase {self._phase.value}")
