from __future__ import annotations

import pytest

from crawlspace.game.body import Body
from crawlspace.types import Degrees, DeltaTime


def test_forward_follows_yaw() -> None:
    body = Body()
    assert body.forward == pytest.approx((0.0, 0.0, 1.0))

    body.yaw = Degrees(90.0)
    assert body.forward == pytest.approx((1.0, 0.0, 0.0))


def test_move_steps_at_speed() -> None:
    body = Body(position=(0.0, 1.0, 0.0))

    moved = body.move_towards((10.0, 1.0, 0.0), 5.0, DeltaTime(0.1), turn_rate=6.0)

    assert moved
    assert body.position == pytest.approx((0.5, 1.0, 0.0))


def test_move_stops_on_target() -> None:
    body = Body(position=(0.0, 1.0, 0.0))

    body.move_towards((0.3, 1.0, 0.0), 5.0, DeltaTime(1.0), turn_rate=6.0)

    assert body.position == pytest.approx((0.3, 1.0, 0.0))


def test_move_keeps_height() -> None:
    body = Body(position=(0.0, 1.0, 0.0))

    body.move_towards((0.0, 7.0, 4.0), 2.0, DeltaTime(0.5), turn_rate=6.0)

    assert body.position == pytest.approx((0.0, 1.0, 1.0))


def test_no_move_when_already_there() -> None:
    body = Body(position=(2.0, 1.0, 2.0), yaw=Degrees(30.0))

    moved = body.move_towards((2.001, 5.0, 2.0), 5.0, DeltaTime(0.1), turn_rate=6.0)

    assert not moved
    assert body.position == (2.0, 1.0, 2.0)
    assert body.yaw == 30.0


def test_turn_snaps_when_rate_covers_the_gap() -> None:
    body = Body()

    body.turn_towards((1.0, 0.0, 0.0), 10.0, DeltaTime(0.1))

    assert body.yaw == pytest.approx(90.0)


def test_turn_eases_part_of_the_way() -> None:
    body = Body()

    body.turn_towards((1.0, 0.0, 0.0), 5.0, DeltaTime(0.1))

    assert body.yaw == pytest.approx(45.0)


def test_turn_takes_the_short_way_round() -> None:
    body = Body(yaw=Degrees(170.0))
    target = Body(yaw=Degrees(-170.0))

    body.turn_towards(target.forward, 5.0, DeltaTime(0.1))

    assert abs(body.yaw) == pytest.approx(180.0)


def test_face_snaps_heading() -> None:
    body = Body()

    body.face((0.0, 0.0, -1.0))

    assert abs(body.yaw) == pytest.approx(180.0)


def test_zero_direction_leaves_heading() -> None:
    body = Body(yaw=Degrees(12.0))

    body.turn_towards((0.0, 3.0, 0.0), 10.0, DeltaTime(0.1))
    body.face((0.0, 0.0, 0.0))

    assert body.yaw == 12.0
