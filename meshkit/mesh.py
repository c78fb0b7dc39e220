from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .errors import InvalidOperationError
from .vecmath import Vec2, Vec3, Vec4


class MeshAttribute(enum.Flag):
    """Optional per-vertex channels a Mesh may carry."""

    NONE = 0
    NORMALS = enum.auto()
    UVS0 = enum.auto()
    UVS1 = enum.auto()
    COLORS = enum.auto()
    TANGENTS = enum.auto()


# attribute flag -> Mesh field name
_CHANNELS: Tuple[Tuple[MeshAttribute, str], ...] = (
    (MeshAttribute.NORMALS, "normals"),
    (MeshAttribute.UVS0, "uvs0"),
    (MeshAttribute.UVS1, "uvs1"),
    (MeshAttribute.COLORS, "colors"),
    (MeshAttribute.TANGENTS, "tangents"),
)


# --------------
# Mesh container
# --------------

@dataclass
class Mesh:
    """
    Triangle mesh stored as parallel per-vertex arrays.

    `triangles` is a flat index list; every consecutive triple is one triangle.
    Optional channels are either None or exactly as long as `vertices`.
    """

    vertices: List[Vec3] = field(default_factory=list)
    triangles: List[int] = field(default_factory=list)
    normals: Optional[List[Vec3]] = None
    uvs0: Optional[List[Vec2]] = None
    uvs1: Optional[List[Vec2]] = None
    colors: Optional[List[Vec4]] = None
    tangents: Optional[List[Vec3]] = None
    name: str = "mesh"

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles) // 3

    @property
    def attributes(self) -> MeshAttribute:
        flags = MeshAttribute.NONE
        for flag, attr in _CHANNELS:
            if getattr(self, attr) is not None:
                flags |= flag
        return flags

    def has(self, attribute: MeshAttribute) -> bool:
        return attribute in self.attributes

    def faces(self) -> List[Tuple[int, int, int]]:
        t = self.triangles
        return [(t[i], t[i + 1], t[i + 2]) for i in range(0, len(t) - 2, 3)]

    def copy(self) -> "Mesh":
        def dup(xs):
            return None if xs is None else list(xs)

        return Mesh(list(self.vertices), list(self.triangles),
                    dup(self.normals), dup(self.uvs0), dup(self.uvs1),
                    dup(self.colors), dup(self.tangents), self.name)

    def bounds(self) -> Tuple[Vec3, Vec3]:
        if not self.vertices:
            raise InvalidOperationError("bounds of an empty mesh are undefined")
        xs = [v[0] for v in self.vertices]
        ys = [v[1] for v in self.vertices]
        zs = [v[2] for v in self.vertices]
        return (min(xs), min(ys), min(zs)), (max(xs), max(ys), max(zs))

    def validate(self) -> "Mesh":
        """Raise InvalidOperationError on the first broken invariant."""
        n = len(self.vertices)
        if len(self.triangles) % 3:
            raise InvalidOperationError(
                f"triangle index count {len(self.triangles)} is not a multiple of 3")
        for i, idx in enumerate(self.triangles):
            if not 0 <= idx < n:
                raise InvalidOperationError(
                    f"triangle index {idx} at position {i} outside [0, {n})")
        for _, attr in _CHANNELS:
            values = getattr(self, attr)
            if values is not None and len(values) != n:
                raise InvalidOperationError(
                    f"{attr} has {len(values)} entries, expected {n}")
        return self
