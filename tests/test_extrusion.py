import pytest

from meshkit.curves import cubic_bezier_points
from meshkit.errors import InvalidParameterError
from meshkit.extrusion import curve_frames, extrude_tube
from meshkit.vecmath import v_cross, v_dot, v_len, v_sub

STRAIGHT = [(0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, 2.0)]


def test_straight_path_frames_do_not_twist():
    frames = curve_frames(STRAIGHT)
    for fr in frames:
        assert fr.tangent == pytest.approx((0.0, 0.0, 1.0))
        assert fr.normal == pytest.approx((1.0, 0.0, 0.0))
        assert fr.binormal == pytest.approx((0.0, 1.0, 0.0))


def test_straight_tube_rings_are_congruent_squares():
    mesh = extrude_tube(STRAIGHT, 1.0, 4)
    assert mesh.vertex_count == 12
    square = [(1.0, 0.0), (0.0, 1.0), (-1.0, 0.0), (0.0, -1.0)]
    for ring in range(3):
        for j, (x, y) in enumerate(square):
            assert mesh.vertices[ring * 4 + j] == pytest.approx((x, y, float(ring)), abs=1e-12)


def test_frames_are_orthonormal_along_curve():
    pts = cubic_bezier_points((0.0, 0.0, 0.0), (0.0, 0.0, 30.0), (70.0, 0.0, 100.0), (100.0, 0.0, 100.0), 7)
    for fr in curve_frames(pts):
        for v in (fr.tangent, fr.normal, fr.binormal):
            assert v_len(v) == pytest.approx(1.0)
        assert v_dot(fr.tangent, fr.normal) == pytest.approx(0.0, abs=1e-12)
        assert v_dot(fr.tangent, fr.binormal) == pytest.approx(0.0, abs=1e-12)
        assert v_dot(fr.normal, fr.binormal) == pytest.approx(0.0, abs=1e-12)


def test_tangent_uses_central_difference():
    frames = curve_frames([(0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 1.0, 1.0)])
    assert frames[0].tangent == pytest.approx((0.0, 0.0, 1.0))
    assert frames[1].tangent == pytest.approx((0.0, 2 ** -0.5, 2 ** -0.5))
    assert frames[2].tangent == pytest.approx((0.0, 1.0, 0.0))


def test_seed_axis_switches_for_x_aligned_tangent():
    fr = curve_frames([(0.0, 0.0, 0.0), (1.0, 0.0, 0.0)])[0]
    assert fr.normal == pytest.approx((0.0, 1.0, 0.0))
    assert fr.binormal == pytest.approx((0.0, 0.0, 1.0))


@pytest.mark.parametrize("n_points,segments", [(2, 3), (7, 8), (5, 16)])
def test_tube_counts(n_points, segments):
    pts = [(0.0, 0.1 * i, float(i)) for i in range(n_points)]
    mesh = extrude_tube(pts, 0.5, segments)
    assert mesh.vertex_count == n_points * segments
    assert len(mesh.triangles) == 6 * segments * (n_points - 1)
    mesh.validate()


def test_profile_wraps_to_first_vertex():
    mesh = extrude_tube(STRAIGHT, 1.0, 4)
    # last quad of the first ring closes back onto index 0
    assert mesh.triangles[18:24] == [3, 7, 0, 0, 7, 4]


def test_tube_winding_is_consistent():
    mesh = extrude_tube(STRAIGHT, 1.0, 6)
    a, b, c = (mesh.vertices[i] for i in mesh.triangles[:3])
    n = v_cross(v_sub(b, a), v_sub(c, a))
    centroid = tuple((a[k] + b[k] + c[k]) / 3.0 for k in range(3))
    radial = (centroid[0], centroid[1], 0.0)
    # consistent winding: every quad's first triangle has the same facing
    for t in range(0, len(mesh.triangles), 6):
        a2, b2, c2 = (mesh.vertices[i] for i in mesh.triangles[t:t + 3])
        n2 = v_cross(v_sub(b2, a2), v_sub(c2, a2))
        cen2 = tuple((a2[k] + b2[k] + c2[k]) / 3.0 for k in range(3))
        assert (v_dot(n2, (cen2[0], cen2[1], 0.0)) > 0) == (v_dot(n, radial) > 0)


def test_two_profile_segments_rejected():
    with pytest.raises(InvalidParameterError):
        extrude_tube(STRAIGHT, 1.0, 2)


def test_single_point_rejected():
    with pytest.raises(InvalidParameterError):
        extrude_tube([(0.0, 0.0, 0.0)], 1.0, 8)
    with pytest.raises(InvalidParameterError):
        curve_frames([(0.0, 0.0, 0.0)])


def test_non_positive_radius_rejected():
    with pytest.raises(InvalidParameterError):
        extrude_tube(STRAIGHT, 0.0, 8)
