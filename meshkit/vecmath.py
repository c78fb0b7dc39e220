"""
Small vector / quaternion helpers used by the generators.

Vectors and quaternions are plain tuples so meshes stay cheap to build and
easy to compare in tests. Quaternions are stored as (x, y, z, w).
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

Vec2 = Tuple[float, float]
Vec3 = Tuple[float, float, float]
Vec4 = Tuple[float, float, float, float]
Quat = Tuple[float, float, float, float]

ZERO: Vec3 = (0.0, 0.0, 0.0)
ONE: Vec3 = (1.0, 1.0, 1.0)

# -----------------------------
# Vector utilities
# -----------------------------

def v_add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def v_sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def v_scale(a: Vec3, s: float) -> Vec3:
    return (a[0] * s, a[1] * s, a[2] * s)


def v_mul(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] * b[0], a[1] * b[1], a[2] * b[2])


def v_dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def v_cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def v_len(a: Vec3) -> float:
    return math.sqrt(v_dot(a, a))


def v_norm(a: Vec3) -> Vec3:
    # zero-length input normalises to the zero vector
    l = v_len(a)
    if l == 0:
        return (0.0, 0.0, 0.0)
    return (a[0] / l, a[1] / l, a[2] / l)


# -----------------------------
# Quaternions
# -----------------------------

def quat_identity() -> Quat:
    return (0.0, 0.0, 0.0, 1.0)


def quat_from_axis_angle(axis: Vec3, angle: float) -> Quat:
    """Rotation of `angle` radians about `axis` (normalised here)."""
    ax, ay, az = v_norm(axis)
    h = angle * 0.5
    s = math.sin(h)
    return (ax * s, ay * s, az * s, math.cos(h))


def quat_mul(a: Quat, b: Quat) -> Quat:
    ax, ay, az, aw = a
    bx, by, bz, bw = b
    return (
        aw * bx + ax * bw + ay * bz - az * by,
        aw * by - ax * bz + ay * bw + az * bx,
        aw * bz + ax * by - ay * bx + az * bw,
        aw * bw - ax * bx - ay * by - az * bz,
    )


def quat_rotate(q: Quat, v: Vec3) -> Vec3:
    # v' = v + 2w(u x v) + 2(u x (u x v)), u = vector part of q
    u = (q[0], q[1], q[2])
    w = q[3]
    t = v_scale(v_cross(u, v), 2.0)
    return v_add(v_add(v, v_scale(t, w)), v_cross(u, t))


# -----------------------------
# Transform
# -----------------------------

@dataclass(frozen=True)
class Transform:
    position: Vec3 = ZERO
    rotation: Quat = (0.0, 0.0, 0.0, 1.0)
    scale: Vec3 = ONE

    def apply_point(self, v: Vec3) -> Vec3:
        # scale, then rotate, then translate
        return v_add(quat_rotate(self.rotation, v_mul(v, self.scale)), self.position)

    def apply_direction(self, v: Vec3) -> Vec3:
        return quat_rotate(self.rotation, v)
