import math

import pytest

from trenchtools.util import (
    Aabb,
    Quat,
    Vec2,
    Vec3,
    angle_to_quat,
    angles_to_quat,
    convert_zero_to_one,
    mangle_to_quat,
    quake_light_to_lux,
)

MARGIN = 0.0001


def test_coordinate_conversions():
    assert Vec3.X.trenchbroom_to_bevy() == Vec3.NEG_Z
    assert Vec3.Y.trenchbroom_to_bevy() == Vec3.NEG_X
    assert Vec3.Z.trenchbroom_to_bevy() == Vec3.Y

    assert Vec3.X.bevy_to_trenchbroom() == Vec3.NEG_Y
    assert Vec3.Y.bevy_to_trenchbroom() == Vec3.Z
    assert Vec3.Z.bevy_to_trenchbroom() == Vec3.NEG_X

    assert Vec3.X.trenchbroom_to_bevy().bevy_to_trenchbroom() == Vec3.X
    assert Vec3.Y.trenchbroom_to_bevy().bevy_to_trenchbroom() == Vec3.Y
    assert Vec3.Z.trenchbroom_to_bevy().bevy_to_trenchbroom() == Vec3.Z


@pytest.mark.parametrize(
    "quat, vec, expected",
    [
        (angle_to_quat(0.0), Vec3.NEG_Z, Vec3.NEG_Z),
        (angle_to_quat(90.0), Vec3.NEG_Z, Vec3.NEG_X),
        (angle_to_quat(0.0), Vec3.Y, Vec3.Y),
        (angle_to_quat(-1.0), Vec3.NEG_Z, Vec3.Y),
        (angle_to_quat(-2.0), Vec3.NEG_Z, Vec3.NEG_Y),
        (angle_to_quat(-2.0), Vec3.Y, Vec3.NEG_Z),
        (mangle_to_quat(Vec3(0.0, 0.0, 0.0)), Vec3.NEG_Z, Vec3.NEG_Z),
        (mangle_to_quat(Vec3(0.0, 0.0, 0.0)), Vec3.Y, Vec3.Y),
        (mangle_to_quat(Vec3(90.0, 0.0, 0.0)), Vec3.NEG_Z, Vec3.NEG_X),
        (mangle_to_quat(Vec3(0.0, -90.0, 0.0)), Vec3.NEG_Z, Vec3.NEG_Y),
        (mangle_to_quat(Vec3(0.0, 90.0, 0.0)), Vec3.NEG_Z, Vec3.Y),
        (mangle_to_quat(Vec3(0.0, 0.0, 90.0)), Vec3.Y, Vec3.NEG_X),
        (angles_to_quat(Vec3(0.0, 0.0, 0.0)), Vec3.NEG_Z, Vec3.NEG_Z),
        (angles_to_quat(Vec3(0.0, 0.0, 0.0)), Vec3.Y, Vec3.Y),
        (angles_to_quat(Vec3(90.0, 0.0, 0.0)), Vec3.NEG_Z, Vec3.NEG_Y),
        (angles_to_quat(Vec3(0.0, 90.0, 0.0)), Vec3.NEG_Z, Vec3.NEG_X),
        (angles_to_quat(Vec3(0.0, 0.0, 90.0)), Vec3.Y, Vec3.X),
    ],
)
def test_rotation_property_to_quat(quat, vec, expected):
    result = quat * vec
    assert result.almost_eq(expected, MARGIN), f"{result} != {expected}"


def test_rotate_matches_multiplication():
    quat = Quat.from_rotation_y(math.pi / 2)
    assert quat.rotate(Vec3.X).almost_eq(quat * Vec3.X, MARGIN)
    assert quat.rotate(Vec3.X).almost_eq(Vec3.NEG_Z, MARGIN)


def test_quat_identity_and_composition():
    q = Quat.from_rotation_x(0.3)
    assert (Quat.IDENTITY * q).almost_eq(q, MARGIN)
    full = Quat.from_rotation_y(math.pi / 2) * Quat.from_rotation_y(math.pi / 2)
    assert full.almost_eq(Quat.from_rotation_y(math.pi), MARGIN)


def test_almost_eq_is_strict():
    assert not Vec3(0.0, 0.0, 0.0).almost_eq(Vec3(1.0, 0.0, 0.0), 1.0)
    assert Vec3(0.0, 0.0, 0.0).almost_eq(Vec3(0.5, 0.0, 0.0), 1.0)
    assert not Quat(0.0, 0.0, 0.0, 1.0).almost_eq(Quat(0.0, 0.0, 0.0, 0.0), 0.5)


def test_angle_between():
    assert math.isclose(Vec3.X.angle_between(Vec3.Y), math.pi / 2)
    assert math.isclose(Vec3.X.angle_between(Vec3.NEG_X), math.pi)
    assert Vec3.X.angle_between(Vec3(2.0, 0.0, 0.0)) == pytest.approx(0.0)


def test_aabb_round_trip():
    minimum = Vec3(-1.0, 2.0, -3.0)
    maximum = Vec3(5.0, 4.0, 3.0)
    aabb = Aabb.from_min_max(minimum, maximum)
    assert aabb.center == Vec3(2.0, 3.0, 0.0)
    assert aabb.half_extents == Vec3(3.0, 1.0, 3.0)
    assert aabb.min() == minimum
    assert aabb.max() == maximum


def test_convert_zero_to_one():
    assert convert_zero_to_one(0.0) == 1.0
    assert convert_zero_to_one(2.5) == 2.5
    assert convert_zero_to_one(Vec2(0.0, 3.0)) == Vec2(1.0, 3.0)


def test_quake_light_to_lux():
    assert quake_light_to_lux(50_000.0) == 1.0
    assert quake_light_to_lux(300.0) == pytest.approx(0.006)