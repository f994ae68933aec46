# -*- coding: utf-8 -*-
########################
# playfield_widget.py
########################
# Purpose:
# - Playfield Qt widget (render collaborator).
# - Paints the pitch guide lines, the cents indicator, the spaceship, meteors and enemy ships,
#   and the game over banner from the latest RenderFrame.
#
########################
# Key Logic:
# - Game space is PlayfieldConfig.width x PlayfieldConfig.height. The painter is scaled so the
#   playfield keeps its aspect ratio inside the widget (letterboxed).
# - Pitch indicator: cents -50..+50 map linearly from the bottom edge to the top edge, the same
#   pitch_line_y mapping GameSession uses for the avatar (unclamped here, it is only a marker).
# - Strict boundaries:
#   - The widget reads RenderFrame only. It has no reference to GameSession and never writes back.
#
########################
# Interfaces:
# Public classes:
# - class PlayfieldWidget(PyQt6.QtWidgets.QWidget)
#   - set_frame(frame: Optional[RenderFrame]) -> None
#   - frame() -> Optional[RenderFrame]
#
# Inputs:
# - RenderFrame from GameSession.tick(), pushed by GameWindow once per tick.
#
# Outputs:
# - Painted playfield on the widget surface.
#
########################

from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import QPointF, QRectF, Qt
from PyQt6.QtGui import QBrush, QColor, QFont, QPainter, QPen, QPolygonF
from PyQt6.QtWidgets import QSizePolicy, QWidget

from config import PlayfieldConfig
from gameplay_models import BoundingBox, ObstacleKind, ObstacleView, RenderFrame, SessionPhase, pitch_line_y


_CRATERS = ((0.3, 0.3, 0.15), (0.7, 0.5, 0.10), (0.4, 0.7, 0.12))


def _bold_font(point_size: int) -> QFont:
    font = QFont("Arial", point_size)
    font.setBold(True)
    return font


class PlayfieldWidget(QWidget):
    def __init__(self, playfield: PlayfieldConfig, *, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._playfield = playfield
        self._frame: Optional[RenderFrame] = None
        self.setMinimumSize(int(playfield.width) // 2, int(playfield.height) // 2)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)

    def set_frame(self, frame: Optional[RenderFrame]) -> None:
        self._frame = frame
        self.update()

    def frame(self) -> Optional[RenderFrame]:
        return self._frame

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        painter.fillRect(self.rect(), QBrush(QColor(10, 10, 12)))

        game_width = float(self._playfield.width)
        game_height = float(self._playfield.height)
        scale = min(float(self.width()) / game_width, float(self.height()) / game_height)
        offset_x = (float(self.width()) - game_width * scale) / 2.0
        offset_y = (float(self.height()) - game_height * scale) / 2.0

        painter.save()
        painter.translate(offset_x, offset_y)
        painter.scale(scale, scale)
        painter.setClipRect(QRectF(0.0, 0.0, game_width, game_height))
        painter.fillRect(QRectF(0.0, 0.0, game_width, game_height), QBrush(QColor(17, 24, 39)))

        frame = self._frame
        self._paint_pitch_guides(painter, frame.cents if frame is not None else None)
        if frame is not None:
            self._paint_spaceship(painter, frame.avatar)
            for obstacle in frame.obstacles:
                if obstacle.kind == ObstacleKind.METEOR:
                    self._paint_meteor(painter, obstacle)
                else:
                    self._paint_enemy_ship(painter, obstacle)
            if frame.phase == SessionPhase.GAME_OVER:
                self._paint_game_over(painter, frame)

        painter.restore()
        painter.end()

    def _paint_pitch_guides(self, painter: QPainter, cents: Optional[int]) -> None:
        width = float(self._playfield.width)
        height = float(self._playfield.height)
        center_y = height / 2.0

        painter.save()
        painter.setFont(QFont("Arial", 9))

        painter.setPen(QPen(QColor(46, 204, 113), 1.0))
        painter.drawLine(QPointF(0.0, center_y), QPointF(width, center_y))
        painter.drawText(QPointF(10.0, center_y - 5.0), "In Tune")

        painter.setPen(QPen(QColor(243, 156, 18), 1.0))
        painter.drawLine(QPointF(0.0, 0.5), QPointF(width, 0.5))
        painter.drawLine(QPointF(0.0, height - 0.5), QPointF(width, height - 0.5))
        painter.drawText(QPointF(10.0, 15.0), "Quarter Tone Sharp")
        painter.drawText(QPointF(10.0, height - 5.0), "Quarter Tone Flat")

        if cents is not None:
            target_y = pitch_line_y(cents, height)
            marker_center = QPointF(width - 20.0, target_y)
            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(QBrush(QColor(155, 89, 182)))
            painter.drawEllipse(marker_center, 10.0, 10.0)

            painter.setPen(QPen(QColor(255, 255, 255)))
            label = f"+{cents}" if cents > 0 else str(cents)
            painter.drawText(
                QRectF(width - 40.0, target_y - 8.0, 40.0, 16.0),
                int(Qt.AlignmentFlag.AlignCenter),
                label,
            )
        painter.restore()

    def _paint_spaceship(self, painter: QPainter, box: BoundingBox) -> None:
        x, y, w, h = float(box.x), float(box.y), float(box.width), float(box.height)
        painter.save()
        painter.setPen(Qt.PenStyle.NoPen)

        painter.setBrush(QBrush(QColor(52, 152, 219)))
        painter.drawPolygon(QPolygonF([QPointF(x + w, y + h / 2.0), QPointF(x, y), QPointF(x, y + h)]))

        painter.setBrush(QBrush(QColor(231, 76, 60)))
        painter.drawRect(QRectF(x, y + h * 0.2, w * 0.1, h * 0.2))
        painter.drawRect(QRectF(x, y + h * 0.6, w * 0.1, h * 0.2))

        painter.setBrush(QBrush(QColor(243, 156, 18)))
        painter.drawEllipse(QPointF(x + w * 0.7, y + h * 0.5), w * 0.1, w * 0.1)
        painter.restore()

    def _paint_meteor(self, painter: QPainter, obstacle: ObstacleView) -> None:
        size = float(obstacle.width)
        x, y = float(obstacle.x), float(obstacle.y)
        painter.save()
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(QColor(127, 140, 141)))
        painter.drawEllipse(QPointF(x + size / 2.0, y + size / 2.0), size / 2.0, size / 2.0)

        painter.setBrush(QBrush(QColor(149, 165, 166)))
        for crater_x, crater_y, crater_size in _CRATERS:
            radius = size * crater_size
            painter.drawEllipse(QPointF(x + size * crater_x, y + size * crater_y), radius, radius)
        painter.restore()

    def _paint_enemy_ship(self, painter: QPainter, obstacle: ObstacleView) -> None:
        x, y = float(obstacle.x), float(obstacle.y)
        w, h = float(obstacle.width), float(obstacle.height)
        painter.save()
        painter.setPen(Qt.PenStyle.NoPen)

        painter.setBrush(QBrush(QColor(231, 76, 60)))
        painter.drawPolygon(QPolygonF([QPointF(x, y + h / 2.0), QPointF(x + w, y), QPointF(x + w, y + h)]))

        painter.setBrush(QBrush(QColor(192, 57, 43)))
        painter.drawRect(QRectF(x + w * 0.6, y, w * 0.2, h))

        painter.setBrush(QBrush(QColor(46, 204, 113)))
        painter.drawEllipse(QPointF(x + w * 0.3, y + h * 0.5), w * 0.15, w * 0.15)
        painter.restore()

    def _paint_game_over(self, painter: QPainter, frame: RenderFrame) -> None:
        width = float(self._playfield.width)
        height = float(self._playfield.height)

        painter.save()
        painter.fillRect(QRectF(0.0, 0.0, width, height), QBrush(QColor(0, 0, 0, 178)))

        painter.setPen(QPen(QColor(231, 76, 60)))
        painter.setFont(_bold_font(28))
        painter.drawText(QRectF(0.0, height / 2.0 - 80.0, width, 40.0), int(Qt.AlignmentFlag.AlignHCenter), "Game Over!")

        painter.setPen(QPen(QColor(240, 240, 240)))
        painter.setFont(QFont("Arial", 16))
        painter.drawText(
            QRectF(0.0, height / 2.0 - 30.0, width, 28.0),
            int(Qt.AlignmentFlag.AlignHCenter),
            f"Your score: {frame.score}",
        )

        if frame.is_new_high_score:
            painter.setPen(QPen(QColor(241, 196, 15)))
            painter.setFont(_bold_font(16))
            painter.drawText(
                QRectF(0.0, height / 2.0 + 6.0, width, 28.0),
                int(Qt.AlignmentFlag.AlignHCenter),
                "New High Score!",
            )
        painter.restore()
