"""
Merge many copies of one mesh into a single mesh.

Instance i occupies vertices [i*N, (i+1)*N) of the output and its triangles
are the source triangles offset by i*N. Output arrays are sized up front, so
a channel exists in the result iff it exists on the source.

Normals and tangents are rotated only. With non-uniform scale they will not
match the scaled surface; recompute them if that matters.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from .errors import InvalidOperationError, InvalidParameterError
from .mesh import Mesh
from .vecmath import Quat, Transform, Vec3, quat_identity

logger = logging.getLogger(__name__)


def _alloc(src: Optional[list], count: int) -> Optional[list]:
    return None if src is None else [None] * (len(src) * count)


def _fill(dst: Optional[list], src: Optional[list], offset: int,
          fn: Optional[Callable] = None) -> None:
    if dst is None or src is None:
        return
    if fn is None:
        dst[offset:offset + len(src)] = src
    else:
        for j, value in enumerate(src):
            dst[offset + j] = fn(value)


def copy_mesh_to_transforms(mesh: Mesh, transforms: Sequence[Transform]) -> Mesh:
    """One copy of `mesh` per transform (scale, then rotation, then translation)."""
    try:
        mesh.validate()
    except InvalidOperationError as exc:
        raise InvalidParameterError(f"source mesh is malformed: {exc}") from exc

    count = len(transforms)
    n = len(mesh.vertices)
    nt = len(mesh.triangles)

    out = Mesh(
        vertices=[None] * (n * count),
        triangles=[0] * (nt * count),
        normals=_alloc(mesh.normals, count),
        uvs0=_alloc(mesh.uvs0, count),
        uvs1=_alloc(mesh.uvs1, count),
        colors=_alloc(mesh.colors, count),
        tangents=_alloc(mesh.tangents, count),
        name=mesh.name,
    )

    for i, tr in enumerate(transforms):
        offset = i * n
        _fill(out.vertices, mesh.vertices, offset, tr.apply_point)
        _fill(out.normals, mesh.normals, offset, tr.apply_direction)
        _fill(out.tangents, mesh.tangents, offset, tr.apply_direction)
        _fill(out.uvs0, mesh.uvs0, offset)
        _fill(out.uvs1, mesh.uvs1, offset)
        _fill(out.colors, mesh.colors, offset)
        base = i * nt
        for j, idx in enumerate(mesh.triangles):
            out.triangles[base + j] = idx + offset

    logger.debug("merged %d instances of %s: %d vertices, %d triangles",
                 count, mesh.name, out.vertex_count, out.triangle_count)
    return out


def copy_mesh_to_points(mesh: Mesh, points: Sequence[Vec3],
                        rotations: Optional[Sequence[Quat]] = None) -> Mesh:
    """
    One copy of `mesh` at every point, optionally rotated per instance.

    `rotations`, when given, must be as long as `points`.
    """
    if rotations is not None and len(rotations) != len(points):
        raise InvalidParameterError(
            f"rotations has {len(rotations)} entries but points has {len(points)}")
    transforms: List[Transform] = [
        Transform(position=tuple(p), rotation=quat_identity() if rotations is None else rotations[i])
        for i, p in enumerate(points)
    ]
    return copy_mesh_to_transforms(mesh, transforms)


def copy_mesh_to_positions(mesh: Mesh, positions: Sequence[Vec3],
                           transforms: Sequence[Transform]) -> Mesh:
    """
    Like `copy_mesh_to_transforms`, but the instance positions come from
    `positions` and override each transform's own position.
    """
    if len(positions) != len(transforms):
        raise InvalidParameterError(
            f"transforms has {len(transforms)} entries but positions has {len(positions)}")
    return copy_mesh_to_transforms(
        mesh, [Transform(tuple(p), tr.rotation, tr.scale) for p, tr in zip(positions, transforms)])
