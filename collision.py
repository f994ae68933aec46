# -*- coding: utf-8 -*-
########################
# collision.py
########################
# Purpose:
# - Axis-aligned bounding box overlap test between the avatar and obstacles.
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - Strict inequalities: boxes that only share an edge do not collide.
# - Any single hit ends the session, so first_collision stops at the first overlap it finds.
#
########################
# Interfaces:
# Public functions:
# - collides(first: BoundingBox, second: BoundingBox) -> bool
# - first_collision(avatar: BoundingBox, obstacles: Iterable[Obstacle]) -> Optional[Obstacle]
#
########################

from __future__ import annotations

from typing import Iterable, Optional

from gameplay_models import BoundingBox, Obstacle


def collides(first: BoundingBox, second: BoundingBox) -> bool:
    return (
        float(first.x) < second.right
        and first.right > float(second.x)
        and float(first.y) < second.bottom
        and first.bottom > float(second.y)
    )


def first_collision(avatar: BoundingBox, obstacles: Iterable[Obstacle]) -> Optional[Obstacle]:
    for obstacle in obstacles:
        if collides(avatar, obstacle.bounding_box()):
            return obstacle
    return None


def _run_unit_tests() -> None:
    avatar = BoundingBox(x=50.0, y=100.0, width=60.0, height=30.0)

    overlapping = BoundingBox(x=100.0, y=110.0, width=40.0, height=40.0)
    assert collides(avatar, overlapping)
    assert collides(overlapping, avatar)

    touching_right = BoundingBox(x=110.0, y=100.0, width=40.0, height=40.0)
    assert not collides(avatar, touching_right)
    assert not collides(touching_right, avatar)

    touching_below = BoundingBox(x=50.0, y=130.0, width=40.0, height=40.0)
    assert not collides(avatar, touching_below)


if __name__ == "__main__":
    _run_unit_tests()
    print("collision.py: ok")
