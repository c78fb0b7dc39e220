import math

import pytest

from meshkit.vecmath import (Transform, quat_from_axis_angle, quat_identity, quat_mul, quat_rotate,
                             v_cross, v_norm)


def test_normalize_zero_vector_is_zero():
    assert v_norm((0.0, 0.0, 0.0)) == (0.0, 0.0, 0.0)


def test_cross_follows_right_hand_rule():
    assert v_cross((1.0, 0.0, 0.0), (0.0, 1.0, 0.0)) == (0.0, 0.0, 1.0)


def test_identity_rotation_is_exact():
    v = (0.3, -1.7, 2.25)
    assert quat_rotate(quat_identity(), v) == v


def test_quarter_turn_about_z():
    q = quat_from_axis_angle((0.0, 0.0, 2.0), math.pi / 2)
    assert quat_rotate(q, (1.0, 0.0, 0.0)) == pytest.approx((0.0, 1.0, 0.0))


def test_quat_mul_composes_rotations():
    q = quat_from_axis_angle((0.0, 0.0, 1.0), math.pi / 4)
    assert quat_rotate(quat_mul(q, q), (1.0, 0.0, 0.0)) == pytest.approx((0.0, 1.0, 0.0))


def test_transform_scales_then_rotates_then_translates():
    tr = Transform((10.0, 0.0, 0.0), quat_from_axis_angle((0.0, 0.0, 1.0), math.pi / 2), (2.0, 1.0, 1.0))
    assert tr.apply_point((1.0, 0.0, 0.0)) == pytest.approx((10.0, 2.0, 0.0))
    assert tr.apply_direction((1.0, 0.0, 0.0)) == pytest.approx((0.0, 1.0, 0.0))
