"""
Tube meshes swept along a polyline.

Each path point gets its own frame, seeded from a fixed world axis rather than
carried over from the previous point. Frames therefore never drift over long
paths, but the profile can visibly rotate where the tangent crosses the
axis-switch threshold (|tangent.x| >= 0.9).
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Sequence

from .errors import InvalidParameterError
from .mesh import Mesh
from .vecmath import Vec3, v_add, v_cross, v_norm, v_scale, v_sub

logger = logging.getLogger(__name__)

AXIS_SWITCH_THRESHOLD = 0.9

_WORLD_X: Vec3 = (1.0, 0.0, 0.0)
_WORLD_Y: Vec3 = (0.0, 1.0, 0.0)


@dataclass(frozen=True)
class Frame:
    tangent: Vec3
    normal: Vec3
    binormal: Vec3


def _tangent(points: Sequence[Vec3], i: int) -> Vec3:
    if i == 0:
        return v_norm(v_sub(points[1], points[0]))
    if i == len(points) - 1:
        return v_norm(v_sub(points[i], points[i - 1]))
    return v_norm(v_sub(points[i + 1], points[i - 1]))


def frame_at(tangent: Vec3) -> Frame:
    seed = _WORLD_X if abs(tangent[0]) < AXIS_SWITCH_THRESHOLD else _WORLD_Y
    binormal = v_norm(v_cross(tangent, seed))
    normal = v_norm(v_cross(binormal, tangent))
    return Frame(tangent, normal, binormal)


def curve_frames(points: Sequence[Vec3]) -> List[Frame]:
    """One orthonormal frame per path point."""
    if len(points) < 2:
        raise InvalidParameterError(f"a curve needs at least 2 points (got {len(points)})")
    return [frame_at(_tangent(points, i)) for i in range(len(points))]


def extrude_tube(points: Sequence[Vec3], profile_radius: float, profile_segments: int,
                 name: str = "tube") -> Mesh:
    """
    Sweep a circular profile along `points`.

    Rings have `profile_segments` vertices each (no seam duplicate), and every
    pair of neighbouring rings is joined by two triangles per quad.
    """
    if len(points) < 2:
        raise InvalidParameterError(f"a curve needs at least 2 points (got {len(points)})")
    if profile_segments < 3:
        raise InvalidParameterError(f"profile_segments must be >= 3 (got {profile_segments})")
    if not profile_radius > 0:
        raise InvalidParameterError(f"profile_radius must be > 0 (got {profile_radius})")

    profile = [
        (math.cos(2.0 * math.pi * j / profile_segments) * profile_radius,
         math.sin(2.0 * math.pi * j / profile_segments) * profile_radius)
        for j in range(profile_segments)
    ]

    verts: List[Vec3] = []
    for p, fr in zip(points, curve_frames(points)):
        for x, y in profile:
            verts.append(v_add(p, v_add(v_scale(fr.normal, x), v_scale(fr.binormal, y))))

    tris: List[int] = []
    for i in range(len(points) - 1):
        base = i * profile_segments
        nxt = base + profile_segments
        for j in range(profile_segments):
            jn = (j + 1) % profile_segments
            tris += [base + j, nxt + j, base + jn]
            tris += [base + jn, nxt + j, nxt + jn]

    mesh = Mesh(verts, tris, name=name)
    logger.debug("%s: %d rings, %d vertices, %d triangles",
                 name, len(points), mesh.vertex_count, mesh.triangle_count)
    return mesh
