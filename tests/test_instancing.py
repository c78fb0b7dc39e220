import math

import pytest

from meshkit.errors import InvalidParameterError
from meshkit.instancing import copy_mesh_to_points, copy_mesh_to_positions, copy_mesh_to_transforms
from meshkit.mesh import MeshAttribute
from meshkit.primitives import cube, grass_blade
from meshkit.vecmath import Transform, quat_from_axis_angle, quat_identity

QUARTER_Z = quat_from_axis_angle((0.0, 0.0, 1.0), math.pi / 2)


def test_counts_and_index_range(rng_seed):
    import numpy as np

    rng = np.random.default_rng(rng_seed)
    src = cube(1.0)
    points = [tuple(p) for p in rng.uniform(-5, 5, size=(7, 3)).tolist()]
    out = copy_mesh_to_points(src, points)
    assert out.vertex_count == 7 * src.vertex_count
    assert len(out.triangles) == 7 * len(src.triangles)
    assert all(0 <= i < out.vertex_count for i in out.triangles)
    out.validate()


def test_single_identity_instance_reproduces_source():
    src = grass_blade(4, 0.1)
    out = copy_mesh_to_points(src, [(0.0, 0.0, 0.0)], [quat_identity()])
    assert out.vertices == src.vertices
    assert out.normals == src.normals
    assert out.uvs0 == src.uvs0
    assert out.triangles == src.triangles


def test_triangles_are_rebased_per_instance():
    src = grass_blade(2, 0.1)
    out = copy_mesh_to_points(src, [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (2.0, 0.0, 0.0)])
    n, k = src.vertex_count, len(src.triangles)
    for i in range(3):
        assert out.triangles[i * k:(i + 1) * k] == [t + i * n for t in src.triangles]


def test_translation_only_without_rotations():
    src = grass_blade(1, 0.2)
    out = copy_mesh_to_points(src, [(1.0, 2.0, 3.0)])
    assert out.vertices == [(x + 1.0, y + 2.0, z + 3.0) for x, y, z in src.vertices]
    assert out.normals == src.normals


def test_rotation_applies_to_vertices_and_normals_not_uvs():
    src = grass_blade(1, 0.2)
    out = copy_mesh_to_points(src, [(0.0, 0.0, 0.0), (5.0, 0.0, 0.0)], [quat_identity(), QUARTER_Z])
    n = src.vertex_count
    # (-0.1, 0, 0) turned a quarter about +Z, then moved to x=5
    assert out.vertices[n] == pytest.approx((5.0, -0.1, 0.0))
    # +Y normal turns to -X, no translation
    assert out.normals[n] == pytest.approx((-1.0, 0.0, 0.0))
    assert out.uvs0[n:] == src.uvs0


def test_scale_applies_before_rotation():
    src = grass_blade(1, 0.2)
    tr = Transform((0.0, 0.0, 0.0), QUARTER_Z, (2.0, 1.0, 3.0))
    out = copy_mesh_to_transforms(src, [tr])
    assert out.vertices[-1] == pytest.approx((0.0, 0.0, 3.0))
    assert out.vertices[1] == pytest.approx((0.0, 0.2, 0.0))


def test_non_uniform_scale_leaves_normals_unscaled():
    # known limitation: normals are rotated only, so they stay unit length
    # and are not corrected for the scaled surface
    src = grass_blade(2, 0.2)
    out = copy_mesh_to_transforms(src, [Transform(scale=(1.0, 4.0, 0.5))])
    assert out.normals == src.normals


def test_optional_channels_follow_source():
    src = grass_blade(2, 0.1)
    src.uvs1 = [(0.0, 0.0)] * src.vertex_count
    src.colors = [(1.0, 0.0, 0.0, 1.0)] * src.vertex_count
    src.tangents = [(1.0, 0.0, 0.0)] * src.vertex_count
    out = copy_mesh_to_points(src, [(0.0, 0.0, 0.0), (0.0, 0.0, 1.0)], [quat_identity(), QUARTER_Z])
    assert out.attributes == src.attributes
    assert out.colors == src.colors * 2
    assert out.uvs1 == src.uvs1 * 2
    assert out.tangents[src.vertex_count] == pytest.approx((0.0, 1.0, 0.0))

    bare = copy_mesh_to_points(cube(), [(0.0, 0.0, 0.0)] * 2)
    assert bare.attributes == MeshAttribute.NONE


def test_post_merge_channel_injection_keeps_mesh_valid():
    src = grass_blade(3, 0.05)
    out = copy_mesh_to_points(src, [(0.0, 0.0, 0.0), (1.0, 1.0, 0.0)])
    out.uvs1 = [(0.0, 0.0)] * out.vertex_count
    out.validate()


def test_empty_instance_list_gives_empty_mesh():
    out = copy_mesh_to_points(cube(), [])
    assert out.vertex_count == 0
    assert out.triangles == []


def test_mismatched_rotations_rejected():
    with pytest.raises(InvalidParameterError):
        copy_mesh_to_points(cube(), [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0)], [quat_identity()])


def test_mismatched_positions_and_transforms_rejected():
    with pytest.raises(InvalidParameterError):
        copy_mesh_to_positions(cube(), [(0.0, 0.0, 0.0)], [Transform(), Transform()])


def test_positions_override_transform_position():
    src = grass_blade(1, 0.2)
    out = copy_mesh_to_positions(src, [(3.0, 0.0, 0.0)], [Transform((100.0, 0.0, 0.0))])
    assert out.vertices[-1] == pytest.approx((3.0, 0.0, 1.0))


def test_short_normal_channel_rejected_before_merge():
    src = grass_blade(2, 0.2)
    src.normals = src.normals[:-1]
    with pytest.raises(InvalidParameterError, match="normals"):
        copy_mesh_to_transforms(src, [Transform(), Transform((1.0, 0.0, 0.0))])


def test_out_of_range_source_index_rejected():
    src = grass_blade(1, 0.2)
    src.triangles = [0, 1, 3]
    with pytest.raises(InvalidParameterError):
        copy_mesh_to_points(src, [(0.0, 0.0, 0.0)])
