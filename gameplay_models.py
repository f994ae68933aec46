# -*- coding: utf-8 -*-
########################
# gameplay_models.py
########################
# Purpose:
# - Core gameplay data models for the runtime simulation pipeline.
# - Defines obstacles, the avatar, bounding boxes and the per-tick render snapshot.
#
# Design notes:
# - Keep these models stable. Prefer extending with new optional fields rather than breaking changes.
# - No Qt usage. These are plain dataclasses.
# - Obstacle is mutable (ObstacleField moves it every tick). RenderFrame holds frozen copies only.
#
########################
# Interfaces:
# Public exceptions:
# - SimulationFault(RuntimeError): internal invariant violation (negative dt, clock going backwards).
#
# Public enums:
# - class ObstacleKind(enum.Enum): METEOR | ENEMY_SHIP
# - class SessionPhase(enum.Enum): START | CALIBRATION | PLAYING | GAME_OVER
#
# Public dataclasses:
# - BoundingBox(x: float, y: float, width: float, height: float)
# - Obstacle(obstacle_id: int, x: float, y: float, width: float, height: float, kind: ObstacleKind, speed: float)
# - Avatar(x: float, y: float, width: float, height: float)
# - ObstacleView(obstacle_id, x, y, width, height, kind)
# - RenderFrame(phase, avatar, obstacles, cents, note, reference_label, score, high_score, ...)
#
# Public functions:
# - pitch_line_y(cents: float, height: float) -> float
#
# Inputs/Outputs:
# - These types are exchanged between ObstacleField, collision, GameSession and PlayfieldWidget.
#
########################

from __future__ import annotations

from dataclasses import dataclass
import enum
from typing import Optional, Tuple

from audio_models import NoteReading


class SimulationFault(RuntimeError):
    pass


def pitch_line_y(cents: float, height: float) -> float:
    """Vertical position for a cents value: +50 at the top edge, -50 at the bottom edge (unclamped)."""
    return float(height) * (1.0 - ((float(cents) + 50.0) / 100.0))


class ObstacleKind(enum.Enum):
    METEOR = "meteor"
    ENEMY_SHIP = "enemy_ship"


class SessionPhase(enum.Enum):
    START = "start"
    CALIBRATION = "calibration"
    PLAYING = "playing"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class BoundingBox:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return float(self.x) + float(self.width)

    @property
    def bottom(self) -> float:
        return float(self.y) + float(self.height)


@dataclass
class Obstacle:
    obstacle_id: int
    x: float
    y: float
    width: float
    height: float
    kind: ObstacleKind
    speed: float

    def bounding_box(self) -> BoundingBox:
        return BoundingBox(x=float(self.x), y=float(self.y), width=float(self.width), height=float(self.height))

    def view(self) -> "ObstacleView":
        return ObstacleView(
            obstacle_id=int(self.obstacle_id),
            x=float(self.x),
            y=float(self.y),
            width=float(self.width),
            height=float(self.height),
            kind=self.kind,
        )


@dataclass
class Avatar:
    x: float
    y: float
    width: float
    height: float

    def bounding_box(self) -> BoundingBox:
        return BoundingBox(x=float(self.x), y=float(self.y), width=float(self.width), height=float(self.height))


@dataclass(frozen=True)
class ObstacleView:
    obstacle_id: int
    x: float
    y: float
    width: float
    height: float
    kind: ObstacleKind


@dataclass(frozen=True)
class RenderFrame:
    phase: SessionPhase
    avatar: BoundingBox
    obstacles: Tuple[ObstacleView, ...]
    cents: Optional[int]
    note: Optional[NoteReading]
    reference_label: Optional[str]
    score: int
    high_score: int
    difficulty: float
    elapsed_seconds: float
    is_new_high_score: bool = False
    audio_error: Optional[str] = None
    frequency_hz: Optional[float] = None
    reference_frequency_hz: Optional[float] = None
