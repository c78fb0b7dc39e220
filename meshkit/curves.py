"""Bezier curve evaluation and sampling, used to build extrusion paths."""
from __future__ import annotations

from typing import List, Sequence

from .errors import InvalidParameterError
from .vecmath import Vec2, Vec3


def _check_t(t: float) -> None:
    if t < 0.0 or t > 1.0:
        raise InvalidParameterError(f"t must be in [0, 1] (got {t})")


def _combine(points: Sequence[Sequence[float]], weights: Sequence[float]) -> tuple:
    dim = len(points[0])
    return tuple(sum(w * p[k] for p, w in zip(points, weights)) for k in range(dim))


def _quadratic_weights(t: float) -> List[float]:
    mt = 1.0 - t
    return [mt * mt, 2.0 * mt * t, t * t]


def _cubic_weights(t: float) -> List[float]:
    mt = 1.0 - t
    return [mt * mt * mt, 3.0 * mt * mt * t, 3.0 * mt * t * t, t * t * t]


def quadratic_bezier(t: float, p0: Vec3, p1: Vec3, p2: Vec3) -> Vec3:
    _check_t(t)
    return _combine((p0, p1, p2), _quadratic_weights(t))


def cubic_bezier(t: float, p0: Vec3, p1: Vec3, p2: Vec3, p3: Vec3) -> Vec3:
    _check_t(t)
    return _combine((p0, p1, p2, p3), _cubic_weights(t))


def quadratic_bezier_2d(t: float, p0: Vec2, p1: Vec2, p2: Vec2) -> Vec2:
    _check_t(t)
    return _combine((p0, p1, p2), _quadratic_weights(t))


def cubic_bezier_2d(t: float, p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2) -> Vec2:
    _check_t(t)
    return _combine((p0, p1, p2, p3), _cubic_weights(t))


def _sample_ts(count: int) -> List[float]:
    if count < 2:
        raise InvalidParameterError(f"count must be >= 2 (got {count})")
    return [i / (count - 1) for i in range(count)]


def quadratic_bezier_points(p0: Vec3, p1: Vec3, p2: Vec3, count: int) -> List[Vec3]:
    """`count` points evenly spaced in t, from p0 to p2 inclusive."""
    return [quadratic_bezier(t, p0, p1, p2) for t in _sample_ts(count)]


def cubic_bezier_points(p0: Vec3, p1: Vec3, p2: Vec3, p3: Vec3, count: int) -> List[Vec3]:
    """`count` points evenly spaced in t, from p0 to p3 inclusive."""
    return [cubic_bezier(t, p0, p1, p2, p3) for t in _sample_ts(count)]
