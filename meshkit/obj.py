"""
Wavefront OBJ writer.

Positions, normals and UV0 share one index space, so every face corner uses
the same 1-based index in each slot (`f 3/3/3 ...`). The writer does not
validate: a missing or empty mesh produces a file holding only the comment.
"""
from __future__ import annotations

import io
import logging
from typing import Optional

from .errors import MeshIOError
from .mesh import Mesh

logger = logging.getLogger(__name__)

HEADER = "# Generated by meshkit"


def _face_corner(use_vt: bool, use_vn: bool):
    if use_vt and use_vn:
        return lambda vi: f"{vi}/{vi}/{vi}"
    if use_vt:
        return lambda vi: f"{vi}/{vi}"
    if use_vn:
        return lambda vi: f"{vi}//{vi}"
    return str


def encode_obj(mesh: Optional[Mesh]) -> str:
    f = io.StringIO()
    f.write(HEADER + "\n")
    if mesh is None:
        return f.getvalue()

    if mesh.vertices:
        for x, y, z in mesh.vertices:
            f.write(f"v {x:.6f} {y:.6f} {z:.6f}\n")
        f.write("\n")
    if mesh.normals:
        for nx, ny, nz in mesh.normals:
            f.write(f"vn {nx:.6f} {ny:.6f} {nz:.6f}\n")
        f.write("\n")
    if mesh.uvs0:
        for u, v in mesh.uvs0:
            f.write(f"vt {u:.6f} {v:.6f}\n")
        f.write("\n")

    if mesh.triangles:
        corner = _face_corner(mesh.uvs0 is not None, mesh.normals is not None)
        t = mesh.triangles
        for i in range(0, len(t) - 2, 3):
            f.write(f"f {corner(t[i] + 1)} {corner(t[i + 1] + 1)} {corner(t[i + 2] + 1)}\n")
        f.write("\n")
    return f.getvalue()


def save_obj(path: str, mesh: Optional[Mesh]) -> None:
    """Save OBJ with optional vt/vn (assumes they are aligned with vertices)."""
    text = encode_obj(mesh)
    try:
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
    except OSError as exc:
        raise MeshIOError(f"failed to write {path}: {exc}") from exc
    if mesh is not None:
        logger.info("wrote %s (%d vertices, %d triangles)", path, mesh.vertex_count, mesh.triangle_count)
