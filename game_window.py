# -*- coding: utf-8 -*-
########################
# game_window.py
########################
# Purpose:
# - Main window and presentational flow: start screen, calibration screen, playfield with game over actions.
# - Drives GameSession.tick() from a QTimer on the Qt event loop.
#
# Design notes:
# - GameSession is the single owner of game state. This window only calls transitions and paints frames.
# - The tick timer runs only while the session is in CALIBRATION or PLAYING. It is re-synced
#   synchronously after every transition and after every tick, so no tick fires after teardown.
# - Space / Return triggers the primary action of the current screen.
#
########################
# Interfaces:
# Public classes:
# - class GameWindow(PyQt6.QtWidgets.QMainWindow)
#   - __init__(*, session: GameSession, config: AppConfig)
#   - session() -> GameSession
#   - is_ticking() -> bool
#
# Inputs:
# - Button clicks and key presses (Space / Return to confirm).
#
# Outputs:
# - RenderFrame pushed to PlayfieldWidget; labels updated per tick.
#
########################

from __future__ import annotations

import logging
from typing import Optional

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QCloseEvent, QKeyEvent
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from config import AppConfig
from game_session import GameSession
from gameplay_models import RenderFrame, SessionPhase
from playfield_widget import PlayfieldWidget


logger = logging.getLogger(__name__)


_HOW_TO_PLAY = (
    "Control the spaceship with your voice or instrument!\n\n"
    "Play in tune = center\n"
    "Play sharp = move up\n"
    "Play flat = move down"
)


def _reference_text(frame: RenderFrame) -> str:
    if frame.reference_frequency_hz is None:
        return str(frame.reference_label)
    return f"{frame.reference_label} ({frame.reference_frequency_hz:.1f} Hz)"


class _StartPage(QWidget):
    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        title = QLabel("Pitch Perfect Space", self)
        title.setStyleSheet("font-size: 28px; font-weight: bold;")
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)

        instructions = QLabel(_HOW_TO_PLAY, self)
        instructions.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.high_score_label = QLabel("", self)
        self.high_score_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.calibrate_button = QPushButton("Start Calibration", self)
        hint = QLabel("Calibration helps you understand how to control the ship before playing.", self)
        hint.setAlignment(Qt.AlignmentFlag.AlignCenter)

        layout.addWidget(title)
        layout.addWidget(instructions)
        layout.addWidget(self.high_score_label)
        layout.addWidget(self.calibrate_button)
        layout.addWidget(hint)


class _CalibrationPage(QWidget):
    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        title = QLabel("Calibration", self)
        title.setStyleSheet("font-size: 22px; font-weight: bold;")
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.status_label = QLabel("", self)
        self.status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.error_label = QLabel("", self)
        self.error_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.error_label.setStyleSheet("color: #c0392b;")
        self.error_label.setWordWrap(True)

        self.start_button = QPushButton("Start Game", self)
        self.start_button.setEnabled(False)

        layout.addWidget(title)
        layout.addWidget(self.status_label)
        layout.addWidget(self.error_label)
        layout.addWidget(self.start_button)


class _PlayPage(QWidget):
    def __init__(self, config: AppConfig, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)

        stats = QWidget(self)
        stats_layout = QHBoxLayout(stats)
        self.score_label = QLabel("Score: 0", stats)
        self.high_score_label = QLabel("High Score: 0", stats)
        self.note_label = QLabel("", stats)
        stats_layout.addWidget(self.score_label)
        stats_layout.addStretch(1)
        stats_layout.addWidget(self.high_score_label)
        stats_layout.addStretch(1)
        stats_layout.addWidget(self.note_label)

        self.playfield = PlayfieldWidget(config.playfield, parent=self)

        actions = QWidget(self)
        actions_layout = QHBoxLayout(actions)
        self.play_again_button = QPushButton("Play Again", actions)
        self.menu_button = QPushButton("Main Menu", actions)
        actions_layout.addStretch(1)
        actions_layout.addWidget(self.play_again_button)
        actions_layout.addWidget(self.menu_button)
        actions_layout.addStretch(1)

        self.error_label = QLabel("", self)
        self.error_label.setStyleSheet("color: #c0392b;")

        layout.addWidget(stats)
        layout.addWidget(self.playfield, stretch=1)
        layout.addWidget(self.error_label)
        layout.addWidget(actions)


class GameWindow(QMainWindow):
    def __init__(self, *, session: GameSession, config: AppConfig, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Pitch Perfect Space")

        self._session = session
        self._config = config

        self._stack = QStackedWidget(self)
        self._start_page = _StartPage(self._stack)
        self._calibration_page = _CalibrationPage(self._stack)
        self._play_page = _PlayPage(config, self._stack)
        self._stack.addWidget(self._start_page)
        self._stack.addWidget(self._calibration_page)
        self._stack.addWidget(self._play_page)
        self.setCentralWidget(self._stack)

        self._start_page.calibrate_button.clicked.connect(self._on_calibrate_clicked)
        self._calibration_page.start_button.clicked.connect(self._on_start_clicked)
        self._play_page.play_again_button.clicked.connect(self._on_play_again_clicked)
        self._play_page.menu_button.clicked.connect(self._on_menu_clicked)

        self._tick_timer = QTimer(self)
        self._tick_timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._tick_timer.setInterval(int(config.display.tick_interval_ms))
        self._tick_timer.timeout.connect(self._on_tick)

        self._apply_frame(self._session.render_frame())

    def session(self) -> GameSession:
        return self._session

    def is_ticking(self) -> bool:
        return bool(self._tick_timer.isActive())

    # -----------------
    # Tick loop
    # -----------------

    def _on_tick(self) -> None:
        frame = self._session.tick()
        self._apply_frame(frame)

    def _sync_tick_timer(self) -> None:
        should_tick = self._session.is_ticking()
        if should_tick and not self._tick_timer.isActive():
            self._tick_timer.start()
        elif not should_tick and self._tick_timer.isActive():
            self._tick_timer.stop()

    # -----------------
    # Transitions
    # -----------------

    def _on_calibrate_clicked(self) -> None:
        self._session.begin_calibration()
        self._apply_frame(self._session.render_frame())

    def _on_start_clicked(self) -> None:
        if self._session.reference_note() is None:
            return
        self._session.start_game()
        self._apply_frame(self._session.render_frame())

    def _on_play_again_clicked(self) -> None:
        self._session.restart()
        self._apply_frame(self._session.render_frame())

    def _on_menu_clicked(self) -> None:
        self._session.new_session()
        self._apply_frame(self._session.render_frame())

    # -----------------
    # Rendering
    # -----------------

    def _apply_frame(self, frame: RenderFrame) -> None:
        if frame.phase == SessionPhase.START:
            self._start_page.high_score_label.setText(f"High Score: {frame.high_score}")
            self._stack.setCurrentWidget(self._start_page)
        elif frame.phase == SessionPhase.CALIBRATION:
            self._update_calibration_page(frame)
            self._stack.setCurrentWidget(self._calibration_page)
        else:
            self._update_play_page(frame)
            self._stack.setCurrentWidget(self._play_page)
        self._sync_tick_timer()

    def _update_calibration_page(self, frame: RenderFrame) -> None:
        page = self._calibration_page
        if frame.reference_label is None:
            page.status_label.setText("Play a note on your instrument or sing a steady tone...")
            page.start_button.setEnabled(False)
        else:
            page.status_label.setText(
                f"Reference note detected: {_reference_text(frame)}\n\n"
                "Play this note to stay in the center.\n"
                "Play slightly sharp to move up.\n"
                "Play slightly flat to move down."
            )
            page.start_button.setEnabled(True)

        if frame.audio_error:
            page.error_label.setText(
                f"Microphone Error:\n{frame.audio_error}\n"
                "Please make sure your microphone is connected and you've given permission to use it."
            )
        else:
            page.error_label.setText("")

    def _update_play_page(self, frame: RenderFrame) -> None:
        page = self._play_page
        page.score_label.setText(f"Score: {frame.score}")
        page.high_score_label.setText(f"High Score: {frame.high_score}")
        if frame.note is not None:
            note_text = f"Note: {frame.note.describe()}"
            if frame.frequency_hz is not None:
                note_text += f"  {frame.frequency_hz:.1f} Hz"
            page.note_label.setText(note_text)
        else:
            page.note_label.setText("")
        page.error_label.setText(f"Microphone Error: {frame.audio_error}" if frame.audio_error else "")

        is_game_over = frame.phase == SessionPhase.GAME_OVER
        page.play_again_button.setVisible(is_game_over)
        page.menu_button.setVisible(is_game_over)
        page.playfield.set_frame(frame)

    # -----------------
    # Qt events
    # -----------------

    def keyPressEvent(self, event: QKeyEvent) -> None:  # noqa: N802
        if event.isAutoRepeat():
            return
        if event.key() not in (Qt.Key.Key_Space, Qt.Key.Key_Return, Qt.Key.Key_Enter):
            super().keyPressEvent(event)
            return

        phase = self._session.phase()
        if phase == SessionPhase.START:
            self._on_calibrate_clicked()
        elif phase == SessionPhase.CALIBRATION:
            self._on_start_clicked()
        elif phase == SessionPhase.GAME_OVER:
            self._on_play_again_clicked()

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802
        self._tick_timer.stop()
        self._session.close()
        logger.info("Window closed")
        super().closeEvent(event)
