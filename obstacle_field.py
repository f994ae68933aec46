# -*- coding: utf-8 -*-
########################
# obstacle_field.py
########################
# Purpose:
# - Own the set of live obstacles.
# - Spawn new obstacles on a difficulty-scaled schedule, advance them right-to-left, prune off-screen ones.
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - Randomness comes from an injected random.Random so tests can script the draws.
# - Draw order per spawn is fixed: kind, vertical position, speed variation.
# - Obstacle ids are unique and monotonic for the lifetime of the field (reset() does not reuse ids).
# - Insertion order is kept for rendering; nothing depends on it.
#
########################
# Interfaces:
# Public functions:
# - spawn_interval_seconds(difficulty: float, config: DifficultyConfig) -> float
# - base_speed(difficulty: float, config: DifficultyConfig) -> float
#
# Public classes:
# - class ObstacleField
#   - __init__(playfield: PlayfieldConfig, difficulty: DifficultyConfig, rng: random.Random)
#   - obstacles() -> list[Obstacle]
#   - reset() -> None
#   - add(obstacle: Obstacle) -> None
#   - spawn(current_elapsed_seconds: float, difficulty: float) -> Optional[Obstacle]
#   - advance(delta_seconds: float) -> None
#   - prune() -> list[Obstacle]
#
# Inputs:
# - Elapsed session time and difficulty (from GameSession), per-tick dt (from SimulationClock).
#
# Outputs:
# - Live Obstacle list for collision checks and rendering.
#
########################

from __future__ import annotations

import itertools
import logging
import random
from typing import List, Optional

from config import DifficultyConfig, PlayfieldConfig
from gameplay_models import Obstacle, ObstacleKind, SimulationFault


logger = logging.getLogger(__name__)


def spawn_interval_seconds(difficulty: float, config: DifficultyConfig) -> float:
    interval_max = float(config.interval_max_seconds)
    interval_min = float(config.interval_min_seconds)
    return interval_max - (interval_max - interval_min) * float(difficulty)


def base_speed(difficulty: float, config: DifficultyConfig) -> float:
    speed_min = float(config.speed_min)
    speed_max = float(config.speed_max)
    return speed_min + (speed_max - speed_min) * float(difficulty)


class ObstacleField:
    def __init__(
        self,
        playfield: PlayfieldConfig,
        difficulty: DifficultyConfig,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._playfield = playfield
        self._difficulty = difficulty
        self._rng = rng if rng is not None else random.Random()
        self._ids = itertools.count(1)
        self._obstacles: List[Obstacle] = []
        self._last_spawn_seconds: float = 0.0

    def obstacles(self) -> List[Obstacle]:
        return list(self._obstacles)

    def reset(self) -> None:
        self._obstacles.clear()
        self._last_spawn_seconds = 0.0

    def next_id(self) -> int:
        return next(self._ids)

    def add(self, obstacle: Obstacle) -> None:
        if any(existing.obstacle_id == obstacle.obstacle_id for existing in self._obstacles):
            raise SimulationFault(f"Duplicate obstacle id {obstacle.obstacle_id}")
        self._obstacles.append(obstacle)

    def spawn(self, current_elapsed_seconds: float, difficulty: float) -> Optional[Obstacle]:
        interval = spawn_interval_seconds(difficulty, self._difficulty)
        if float(current_elapsed_seconds) - self._last_spawn_seconds <= interval:
            return None

        self._last_spawn_seconds = float(current_elapsed_seconds)

        is_enemy_ship = self._rng.random() > float(self._difficulty.enemy_ship_threshold)
        obstacle_width = float(self._playfield.obstacle_width)
        obstacle_height = float(self._playfield.obstacle_height)
        y = self._rng.random() * (float(self._playfield.height) - obstacle_height)
        speed = base_speed(difficulty, self._difficulty) * (0.8 + 0.4 * self._rng.random())

        obstacle = Obstacle(
            obstacle_id=self.next_id(),
            x=float(self._playfield.width),
            y=y,
            width=obstacle_width,
            height=obstacle_height,
            kind=ObstacleKind.ENEMY_SHIP if is_enemy_ship else ObstacleKind.METEOR,
            speed=speed,
        )
        self._obstacles.append(obstacle)
        logger.debug(
            "Spawned %s #%d at t=%.2fs y=%.1f speed=%.1f",
            obstacle.kind.value,
            obstacle.obstacle_id,
            float(current_elapsed_seconds),
            obstacle.y,
            obstacle.speed,
        )
        return obstacle

    def advance(self, delta_seconds: float) -> None:
        dt = float(delta_seconds)
        if dt < 0.0:
            raise SimulationFault(f"Negative dt: {dt}")
        for obstacle in self._obstacles:
            obstacle.x -= float(obstacle.speed) * dt

    def prune(self) -> List[Obstacle]:
        removed = [obstacle for obstacle in self._obstacles if obstacle.x <= -float(obstacle.width)]
        if removed:
            self._obstacles = [obstacle for obstacle in self._obstacles if obstacle.x > -float(obstacle.width)]
        return removed


class _ScriptedRandom(random.Random):
    def __init__(self, values: List[float]) -> None:
        super().__init__(0)
        self._values = list(values)

    def random(self) -> float:
        return self._values.pop(0)


def _run_unit_tests() -> None:
    playfield = PlayfieldConfig()
    difficulty = DifficultyConfig()

    assert spawn_interval_seconds(0.0, difficulty) == 2.5
    assert spawn_interval_seconds(1.0, difficulty) == 1.0
    assert base_speed(0.5, difficulty) == 250.0

    field = ObstacleField(playfield, difficulty, _ScriptedRandom([0.9, 0.5, 0.5]))
    assert field.spawn(2.5, 0.0) is None
    spawned = field.spawn(2.6, 0.0)
    assert spawned is not None
    assert spawned.kind == ObstacleKind.ENEMY_SHIP
    assert spawned.x == 800.0
    assert spawned.y == 0.5 * (500.0 - 40.0)
    assert abs(spawned.speed - 150.0) < 1e-9

    field.advance(1.0)
    assert abs(spawned.x - 650.0) < 1e-9
    field.advance(5.0)
    removed = field.prune()
    assert [item.obstacle_id for item in removed] == [spawned.obstacle_id]
    assert field.obstacles() == []


if __name__ == "__main__":
    _run_unit_tests()
    print("obstacle_field.py: ok")
