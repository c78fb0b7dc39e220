"""
meshkit: procedural triangle meshes (primitives and curve-swept tubes),
instance merging, and OBJ / glTF export.
"""
from .curves import (cubic_bezier, cubic_bezier_2d, cubic_bezier_points, quadratic_bezier,
                     quadratic_bezier_2d, quadratic_bezier_points)
from .errors import InvalidOperationError, InvalidParameterError, MeshError, MeshIOError
from .extrusion import Frame, curve_frames, extrude_tube
from .gltf import build_gltf, encode_glb, encode_gltf, load_all_gltf, load_gltf, save_glb, save_gltf
from .instancing import copy_mesh_to_points, copy_mesh_to_positions, copy_mesh_to_transforms
from .mesh import Mesh, MeshAttribute
from .obj import encode_obj, save_obj
from .primitives import cone, cube, cylinder, grass_blade, plane, pyramid, sphere, torus
from .vecmath import Transform, quat_from_axis_angle, quat_identity, quat_rotate

__version__ = "0.1.0"
