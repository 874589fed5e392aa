"""Vector, quaternion and bounding-box helpers plus TrenchBroom rotation conversions."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Union

QUAKE_LIGHT_TO_LUX_DIVISOR = 50_000.0


def _float_almost_eq(a: float, b: float, margin: float) -> bool:
    return abs(b - a) < margin


@dataclass(frozen=True)
class Vec2:
    """A two-component vector."""

    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def __mul__(self, scalar: float) -> Vec2:
        return Vec2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vec2:
        return Vec2(self.x / scalar, self.y / scalar)


@dataclass(frozen=True)
class Vec3:
    """A three-component vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def __mul__(self, scalar: float) -> Vec3:
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vec3:
        return Vec3(self.x / scalar, self.y / scalar, self.z / scalar)

    def dot(self, other: Vec3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vec3) -> Vec3:
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def trenchbroom_to_bevy(self) -> Vec3:
        """Convert from TrenchBroom space (X forward, -Y right, Z up) to Bevy space (-Z forward, X right, Y up)."""
        return Vec3(-self.y, self.z, -self.x)

    def bevy_to_trenchbroom(self) -> Vec3:
        """Convert from Bevy space (-Z forward, X right, Y up) to TrenchBroom space (X forward, -Y right, Z up)."""
        return Vec3(-self.z, -self.x, self.y)

    def almost_eq(self, other: Vec3, margin: float) -> bool:
        """True if every component differs from ``other``'s by less than ``margin``."""
        return all(_float_almost_eq(a, b, margin) for a, b in zip(self, other))

    def angle_between(self, other: Vec3) -> float:
        """Angle in radians between this vector and ``other``."""
        denominator = math.sqrt(self.dot(self) * other.dot(other))
        if denominator == 0.0:
            return 0.0
        cosine = max(-1.0, min(1.0, self.dot(other) / denominator))
        return math.acos(cosine)


Vec3.ZERO = Vec3(0.0, 0.0, 0.0)
Vec3.ONE = Vec3(1.0, 1.0, 1.0)
Vec3.X = Vec3(1.0, 0.0, 0.0)
Vec3.Y = Vec3(0.0, 1.0, 0.0)
Vec3.Z = Vec3(0.0, 0.0, 1.0)
Vec3.NEG_X = Vec3(-1.0, 0.0, 0.0)
Vec3.NEG_Y = Vec3(0.0, -1.0, 0.0)
Vec3.NEG_Z = Vec3(0.0, 0.0, -1.0)


@dataclass(frozen=True)
class Quat:
    """A rotation quaternion stored as (x, y, z, w)."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z
        yield self.w

    @classmethod
    def from_rotation_x(cls, angle: float) -> Quat:
        half = angle * 0.5
        return cls(math.sin(half), 0.0, 0.0, math.cos(half))

    @classmethod
    def from_rotation_y(cls, angle: float) -> Quat:
        half = angle * 0.5
        return cls(0.0, math.sin(half), 0.0, math.cos(half))

    @classmethod
    def from_rotation_z(cls, angle: float) -> Quat:
        half = angle * 0.5
        return cls(0.0, 0.0, math.sin(half), math.cos(half))

    @classmethod
    def from_euler_yxz(cls, yaw: float, pitch: float, roll: float) -> Quat:
        """Intrinsic rotation: around Y, then the new X, then the new Z."""
        return cls.from_rotation_y(yaw) * cls.from_rotation_x(pitch) * cls.from_rotation_z(roll)

    @classmethod
    def from_euler_yxz_extrinsic(cls, yaw: float, pitch: float, roll: float) -> Quat:
        """Extrinsic rotation: around the fixed Y, then the fixed X, then the fixed Z axis."""
        return cls.from_rotation_z(roll) * cls.from_rotation_x(pitch) * cls.from_rotation_y(yaw)

    def __mul__(self, other: Union[Quat, Vec3]) -> Union[Quat, Vec3]:
        if isinstance(other, Vec3):
            return self.rotate(other)
        if isinstance(other, Quat):
            return Quat(
                self.w * other.x + self.x * other.w + self.y * other.z - self.z * other.y,
                self.w * other.y - self.x * other.z + self.y * other.w + self.z * other.x,
                self.w * other.z + self.x * other.y - self.y * other.x + self.z * other.w,
                self.w * other.w - self.x * other.x - self.y * other.y - self.z * other.z,
            )
        return NotImplemented

    def rotate(self, vec: Vec3) -> Vec3:
        """Rotate ``vec`` by this quaternion."""
        axis = Vec3(self.x, self.y, self.z)
        t = axis.cross(vec) * 2.0
        return vec + t * self.w + axis.cross(t)

    def almost_eq(self, other: Quat, margin: float) -> bool:
        """True if every component differs from ``other``'s by less than ``margin``."""
        return all(_float_almost_eq(a, b, margin) for a, b in zip(self, other))


Quat.IDENTITY = Quat(0.0, 0.0, 0.0, 1.0)


@dataclass(frozen=True)
class Aabb:
    """Axis-aligned bounding box stored as a center and half extents."""

    center: Vec3 = Vec3()
    half_extents: Vec3 = Vec3()

    @classmethod
    def from_min_max(cls, minimum: Vec3, maximum: Vec3) -> Aabb:
        center = (maximum + minimum) * 0.5
        half_extents = (maximum - minimum) * 0.5
        return cls(center, half_extents)

    def min(self) -> Vec3:
        return self.center - self.half_extents

    def max(self) -> Vec3:
        return self.center + self.half_extents


def convert_zero_to_one(value):
    """Replace zero (or zero components of a Vec2) with one, for safe division."""
    if isinstance(value, Vec2):
        return Vec2(convert_zero_to_one(value.x), convert_zero_to_one(value.y))
    return 1.0 if value == 0 else value


def angles_to_quat(angles: Vec3) -> Quat:
    """``angles`` is negative pitch, yaw, negative roll in degrees, in Bevy space."""
    pitch = -math.radians(angles.x)
    yaw = math.radians(angles.y)
    roll = -math.radians(angles.z)
    return Quat.from_euler_yxz(yaw, pitch, roll)


def mangle_to_quat(mangle: Vec3) -> Quat:
    """``mangle`` is yaw, pitch, roll in degrees, in Bevy space."""
    yaw = math.radians(mangle.x)
    pitch = math.radians(mangle.y)
    roll = math.radians(mangle.z)
    return Quat.from_euler_yxz_extrinsic(yaw, pitch, roll)


def angle_to_quat(angle: float) -> Quat:
    """Rotation around Y in degrees; -1 means up and -2 means down."""
    if angle == -1.0:
        return Quat.from_rotation_x(math.pi / 2)
    if angle == -2.0:
        return Quat.from_rotation_x(-math.pi / 2)
    return Quat.from_rotation_y(math.radians(angle))


def quake_light_to_lux(light: float) -> float:
    """Rough conversion of a Quake light value to lux."""
    return light / QUAKE_LIGHT_TO_LUX_DIVISOR