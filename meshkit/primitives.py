"""
Procedural primitives.

Every factory is a pure function of its parameters: vertex and index counts
are closed-form in the segment counts, so callers (and tests) can predict the
exact size of the result. Only `grass_blade` fills normals and UV0; the other
shapes carry positions and triangles.

Closed shapes wind every triangle clockwise seen from outside, so they face
outward under a left-handed convention (the right-handed cross product
(b-a) x (c-a) points into the solid). Round shapes and the pyramid are built
with their axis along Y; rotate them at instancing time for a Z-up scene.
"""
from __future__ import annotations

import logging
import math
from typing import List

from .errors import InvalidParameterError
from .mesh import Mesh
from .vecmath import Vec2, Vec3

logger = logging.getLogger(__name__)

TAU = 2.0 * math.pi


# -------------------------
# Parameter checks
# -------------------------

def _require_segments(name: str, n: int, minimum: int) -> None:
    if n < minimum:
        raise InvalidParameterError(f"{name} must be >= {minimum} (got {n})")


def _require_positive(name: str, x: float) -> None:
    if not x > 0:
        raise InvalidParameterError(f"{name} must be > 0 (got {x})")


def _built(mesh: Mesh) -> Mesh:
    logger.debug("%s: %d vertices, %d triangles", mesh.name, mesh.vertex_count, mesh.triangle_count)
    return mesh


def _grid_triangles(triangles: List[int], rows: int, cols: int) -> None:
    """Two triangles per cell of a (rows+1) x (cols+1) vertex grid."""
    for y in range(rows):
        for x in range(cols):
            a = y * (cols + 1) + x
            b = a + 1
            c = a + (cols + 1)
            d = c + 1
            triangles += [a, c, b]
            triangles += [b, c, d]


# -----------------------
# Primitive constructors
# -----------------------

def grass_blade(segment_count: int, width: float, use_up_normal: bool = False,
                name: str = "grass_blade") -> Mesh:
    """
    Single grass blade of unit length along +Z.

    Two vertices per segment row plus a tip vertex (2s+1 vertices) and
    2(s-1)+1 triangles. Normals face +Y, or +Z when `use_up_normal` is set.
    """
    _require_segments("segment_count", segment_count, 1)
    _require_positive("width", width)

    segment_length = 1.0 / segment_count
    half_width = width * 0.5

    verts: List[Vec3] = []
    uvs: List[Vec2] = []
    for i in range(segment_count):
        z = segment_length * i
        verts += [(-half_width, 0.0, z), (half_width, 0.0, z)]
        uvs += [(0.5 - half_width, z), (0.5 + half_width, z)]
    verts.append((0.0, 0.0, 1.0))
    uvs.append((0.5, 1.0))

    up: Vec3 = (0.0, 0.0, 1.0) if use_up_normal else (0.0, 1.0, 0.0)
    normals = [up] * len(verts)

    tris: List[int] = []
    for i in range(segment_count - 1):
        tris += [i * 2, i * 2 + 1, (i + 1) * 2]
        tris += [i * 2 + 1, (i + 1) * 2 + 1, (i + 1) * 2]
    # tip
    tris += [(segment_count - 1) * 2, (segment_count - 1) * 2 + 1, segment_count * 2]

    return _built(Mesh(verts, tris, normals=normals, uvs0=uvs, name=name))


def sphere(radius: float = 1.0, width_segments: int = 32, height_segments: int = 16,
           name: str = "sphere") -> Mesh:
    """UV sphere sampled in spherical coordinates, poles on the Y axis."""
    _require_positive("radius", radius)
    _require_segments("width_segments", width_segments, 3)
    _require_segments("height_segments", height_segments, 2)

    verts: List[Vec3] = []
    for y in range(height_segments + 1):
        theta = math.pi * (y / height_segments)
        st, ct = math.sin(theta), math.cos(theta)
        for x in range(width_segments + 1):
            phi = TAU * (x / width_segments)
            verts.append((radius * st * math.cos(phi), radius * ct, radius * st * math.sin(phi)))

    tris: List[int] = []
    _grid_triangles(tris, height_segments, width_segments)
    return _built(Mesh(verts, tris, name=name))


def cylinder(radius: float = 1.0, height: float = 2.0, segments: int = 32,
             name: str = "cylinder") -> Mesh:
    """Capped cylinder along Y: 2(s+1)+2 vertices, 12s indices."""
    _require_positive("radius", radius)
    _require_positive("height", height)
    _require_segments("segments", segments, 3)

    h = height * 0.5
    ring = [(radius * math.cos(TAU * i / segments), radius * math.sin(TAU * i / segments))
            for i in range(segments + 1)]

    verts: List[Vec3] = [(x, h, z) for x, z in ring] + [(x, -h, z) for x, z in ring]
    top_center = len(verts)
    verts.append((0.0, h, 0.0))
    bottom_center = len(verts)
    verts.append((0.0, -h, 0.0))

    tris: List[int] = []
    # side
    for i in range(segments):
        top_a, top_b = i, i + 1
        bot_a, bot_b = segments + 1 + i, segments + 2 + i
        tris += [top_a, bot_a, top_b]
        tris += [top_b, bot_a, bot_b]
    # caps
    for i in range(segments):
        tris += [top_center, i, i + 1]
    for i in range(segments):
        tris += [bottom_center, segments + 2 + i, segments + 1 + i]

    return _built(Mesh(verts, tris, name=name))


def cone(radius: float = 1.0, height: float = 2.0, segments: int = 32, name: str = "cone") -> Mesh:
    """Cone with apex at +Y and a capped base: s+3 vertices, 6s indices."""
    _require_positive("radius", radius)
    _require_positive("height", height)
    _require_segments("segments", segments, 3)

    h = height * 0.5
    apex = 0
    verts: List[Vec3] = [(0.0, h, 0.0)]
    for i in range(segments + 1):
        ang = TAU * i / segments
        verts.append((radius * math.cos(ang), -h, radius * math.sin(ang)))
    base_center = len(verts)
    verts.append((0.0, -h, 0.0))

    tris: List[int] = []
    for i in range(segments):
        tris += [apex, i + 1, i + 2]
    for i in range(segments):
        tris += [base_center, i + 2, i + 1]

    return _built(Mesh(verts, tris, name=name))


def plane(width: float = 2.0, height: float = 2.0, width_segments: int = 1, height_segments: int = 1,
          name: str = "plane") -> Mesh:
    """Flat grid in the XZ plane centred on the origin."""
    _require_positive("width", width)
    _require_positive("height", height)
    _require_segments("width_segments", width_segments, 1)
    _require_segments("height_segments", height_segments, 1)

    hw, hh = width * 0.5, height * 0.5
    verts: List[Vec3] = []
    for y in range(height_segments + 1):
        z = hh - (y / height_segments) * height
        for x in range(width_segments + 1):
            verts.append((-hw + (x / width_segments) * width, 0.0, z))

    tris: List[int] = []
    _grid_triangles(tris, height_segments, width_segments)
    return _built(Mesh(verts, tris, name=name))


def pyramid(base_size: float = 2.0, height: float = 2.0, name: str = "pyramid") -> Mesh:
    """Square pyramid: four base corners and an apex on +Y."""
    _require_positive("base_size", base_size)
    _require_positive("height", height)

    s, h = base_size * 0.5, height * 0.5
    verts: List[Vec3] = [
        (-s, -h, -s),
        (s, -h, -s),
        (s, -h, s),
        (-s, -h, s),
        (0.0, h, 0.0),
    ]
    tris = [
        0, 2, 1, 0, 3, 2,  # base
        0, 1, 4,  # front
        1, 2, 4,  # right
        2, 3, 4,  # back
        3, 0, 4,  # left
    ]
    return _built(Mesh(verts, tris, name=name))


def cube(size: float = 2.0, name: str = "cube") -> Mesh:
    """Axis-aligned cube with 4 unshared vertices per face (24 total)."""
    _require_positive("size", size)

    s = size * 0.5
    verts: List[Vec3] = [
        # front (+Z)
        (-s, -s, s), (s, -s, s), (s, s, s), (-s, s, s),
        # back (-Z)
        (-s, -s, -s), (-s, s, -s), (s, s, -s), (s, -s, -s),
        # top (+Y)
        (-s, s, -s), (-s, s, s), (s, s, s), (s, s, -s),
        # bottom (-Y)
        (-s, -s, -s), (s, -s, -s), (s, -s, s), (-s, -s, s),
        # right (+X)
        (s, -s, -s), (s, s, -s), (s, s, s), (s, -s, s),
        # left (-X)
        (-s, -s, -s), (-s, -s, s), (-s, s, s), (-s, s, -s),
    ]
    tris: List[int] = []
    for face in range(6):
        b = face * 4
        tris += [b, b + 2, b + 1, b, b + 3, b + 2]
    return _built(Mesh(verts, tris, name=name))


def torus(major_radius: float = 1.0, minor_radius: float = 0.3, major_segments: int = 32,
          minor_segments: int = 16, name: str = "torus") -> Mesh:
    """
    Torus lying in the XZ plane.

    Both rings wrap, so there are no seam duplicates: M*m vertices, 6*M*m indices.
    """
    _require_positive("major_radius", major_radius)
    _require_positive("minor_radius", minor_radius)
    _require_segments("major_segments", major_segments, 3)
    _require_segments("minor_segments", minor_segments, 3)

    verts: List[Vec3] = []
    for i in range(major_segments):
        u = TAU * i / major_segments
        cu, su = math.cos(u), math.sin(u)
        for j in range(minor_segments):
            v = TAU * j / minor_segments
            r = major_radius + minor_radius * math.cos(v)
            verts.append((r * cu, minor_radius * math.sin(v), r * su))

    tris: List[int] = []
    for i in range(major_segments):
        ni = (i + 1) % major_segments
        for j in range(minor_segments):
            nj = (j + 1) % minor_segments
            a = i * minor_segments + j
            b = i * minor_segments + nj
            c = ni * minor_segments + j
            d = ni * minor_segments + nj
            tris += [a, c, b]
            tris += [b, c, d]

    return _built(Mesh(verts, tris, name=name))
