"""
Command line demos: build a mesh, optionally instance it, write it out.

Random sampling goes through an explicitly seeded numpy Generator that is
passed down to the demo functions.
"""
from __future__ import annotations

import argparse
import logging
import math
import sys
from typing import List, Optional, Sequence

import numpy as np

from . import primitives
from .curves import cubic_bezier_points
from .extrusion import extrude_tube
from .gltf import save_gltf
from .instancing import copy_mesh_to_transforms
from .logging_config import setup_logging
from .mesh import Mesh
from .obj import save_obj
from .vecmath import Transform, Vec3, Vec4, quat_from_axis_angle

logger = logging.getLogger(__name__)

_DEF_HELP = """
Examples:
  python -m meshkit shape torus --out torus.obj
  python -m meshkit shape sphere --radius 1 --segments 48 --out sphere.glb
  python -m meshkit grass --count 50 --seed 7 --out mergedGrass.gltf
  python -m meshkit tube --points 7 --radius 2 --segments 8 --out bezierCurve.obj
"""

_SHAPES = ("plane", "cube", "sphere", "cylinder", "cone", "pyramid", "torus", "blade")


def random_color(rng: np.random.Generator) -> Vec4:
    r, g, b = rng.random(3).tolist()
    return (r, g, b, 1.0)


def write_mesh(path: str, mesh: Mesh) -> None:
    if path.lower().endswith((".gltf", ".glb")):
        save_gltf(path, mesh)
    else:
        save_obj(path, mesh)


def build_shape(args: argparse.Namespace) -> Mesh:
    if args.shape == "plane":
        return primitives.plane(args.size, args.size, args.segments, args.segments)
    if args.shape == "cube":
        return primitives.cube(args.size)
    if args.shape == "sphere":
        return primitives.sphere(args.radius, args.segments, max(2, args.segments // 2))
    if args.shape == "cylinder":
        return primitives.cylinder(args.radius, args.height, args.segments)
    if args.shape == "cone":
        return primitives.cone(args.radius, args.height, args.segments)
    if args.shape == "pyramid":
        return primitives.pyramid(args.size, args.height)
    if args.shape == "torus":
        return primitives.torus(args.radius, args.minor_radius, args.segments, max(3, args.segments // 2))
    return primitives.grass_blade(args.segments, args.width)


def grass_field(rng: np.random.Generator, count: int = 50, segments: int = 8,
                width: float = 0.04) -> Mesh:
    """
    `count` grass blades scattered over a unit square, each randomly turned
    about +Z. UV1 holds the blade's root position and every blade gets one
    random vertex color.
    """
    blade = primitives.grass_blade(segments, width)
    points: List[Vec3] = [(float(x), float(y), 0.0) for x, y in rng.uniform(-0.5, 0.5, size=(count, 2))]
    angles = rng.uniform(0.0, 360.0, size=count)
    transforms = [
        Transform(p, quat_from_axis_angle((0.0, 0.0, 1.0), math.radians(a)))
        for p, a in zip(points, angles)
    ]
    merged = copy_mesh_to_transforms(blade, transforms)

    n = blade.vertex_count
    merged.uvs1 = [None] * merged.vertex_count
    merged.colors = [None] * merged.vertex_count
    for i, p in enumerate(points):
        color = random_color(rng)
        for j in range(n):
            merged.uvs1[i * n + j] = (p[0], p[1])
            merged.colors[i * n + j] = color
    return merged


def bezier_tube(points: int = 7, radius: float = 2.0, segments: int = 8) -> Mesh:
    path = cubic_bezier_points((0.0, 0.0, 0.0), (0.0, 0.0, 30.0), (70.0, 0.0, 100.0),
                               (100.0, 0.0, 100.0), points)
    return extrude_tube(path, radius, segments, name="bezier_tube")


def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="meshkit", description="meshkit: procedural mesh generator",
                                epilog=_DEF_HELP, formatter_class=argparse.RawTextHelpFormatter)
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument("--log-file", default=None, help="Also write log records to this file")
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("shape", help="Write a single primitive")
    s.add_argument("shape", choices=_SHAPES)
    s.add_argument("--out", required=True, help="Output path (.obj/.gltf/.glb)")
    s.add_argument("--size", type=float, default=2.0)
    s.add_argument("--radius", type=float, default=1.0)
    s.add_argument("--minor-radius", type=float, default=0.3)
    s.add_argument("--height", type=float, default=2.0)
    s.add_argument("--width", type=float, default=0.04)
    s.add_argument("--segments", type=int, default=32)

    g = sub.add_parser("grass", help="Instanced grass blades with per-blade UV1 and color")
    g.add_argument("--out", default="mergedGrass.gltf")
    g.add_argument("--count", type=int, default=50)
    g.add_argument("--segments", type=int, default=8)
    g.add_argument("--width", type=float, default=0.04)
    g.add_argument("--seed", type=int, default=None)

    t = sub.add_parser("tube", help="Tube swept along a cubic Bezier curve")
    t.add_argument("--out", default="bezierCurve.obj")
    t.add_argument("--points", type=int, default=7)
    t.add_argument("--radius", type=float, default=2.0)
    t.add_argument("--segments", type=int, default=8)
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)

    try:
        if args.command == "shape":
            mesh = build_shape(args)
        elif args.command == "grass":
            mesh = grass_field(np.random.default_rng(args.seed), args.count, args.segments, args.width)
        else:
            mesh = bezier_tube(args.points, args.radius, args.segments)
        write_mesh(args.out, mesh)
    except Exception as exc:
        logger.debug("command failed", exc_info=True)
        print(f"Error: {exc}")
        return 1

    print(f"Exported {args.out} with {mesh.vertex_count} vertices and {mesh.triangle_count} triangles")
    return 0


if __name__ == "__main__":
    sys.exit(main())
