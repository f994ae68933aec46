from __future__ import annotations

import pytest

from collision import collides, first_collision
from gameplay_models import BoundingBox, Obstacle, ObstacleKind

AVATAR = BoundingBox(x=50.0, y=100.0, width=60.0, height=30.0)


@pytest.mark.parametrize(
    ("other", "expected"),
    [
        (BoundingBox(x=100.0, y=110.0, width=40.0, height=40.0), True),
        (BoundingBox(x=60.0, y=105.0, width=10.0, height=10.0), True),
        (BoundingBox(x=0.0, y=0.0, width=500.0, height=500.0), True),
        (BoundingBox(x=110.0, y=100.0, width=40.0, height=40.0), False),
        (BoundingBox(x=10.0, y=100.0, width=40.0, height=40.0), False),
        (BoundingBox(x=50.0, y=130.0, width=40.0, height=40.0), False),
        (BoundingBox(x=50.0, y=60.0, width=40.0, height=40.0), False),
        (BoundingBox(x=300.0, y=300.0, width=40.0, height=40.0), False),
    ],
)
def test_collides_is_symmetric(other: BoundingBox, expected: bool) -> None:
    assert collides(AVATAR, other) is expected
    assert collides(other, AVATAR) is expected


def test_first_collision_returns_first_hit_in_order() -> None:
    miss = Obstacle(obstacle_id=1, x=400.0, y=0.0, width=40.0, height=40.0, kind=ObstacleKind.METEOR, speed=0.0)
    hit_a = Obstacle(obstacle_id=2, x=60.0, y=100.0, width=40.0, height=40.0, kind=ObstacleKind.ENEMY_SHIP, speed=0.0)
    hit_b = Obstacle(obstacle_id=3, x=70.0, y=100.0, width=40.0, height=40.0, kind=ObstacleKind.METEOR, speed=0.0)

    assert first_collision(AVATAR, [miss, hit_a, hit_b]) is hit_a
    assert first_collision(AVATAR, [miss]) is None
    assert first_collision(AVATAR, []) is None


def test_module_self_checks() -> None:
    import collision

    collision._run_unit_tests()
