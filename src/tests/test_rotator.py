"""
===============================================================================
SPATIAL TRANSFORMS - EulerRotation Test Suite
===============================================================================
Tests for construction, component-wise arithmetic, range normalization,
vector rotation, direction vectors, quaternion conversion (including the
gimbal-pole convention) and direction -> rotation reconstruction.
===============================================================================
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from spatial_transforms import EulerRotation, Quaternion, Vector3

TOL = 1e-4


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def yaw_90():
    return EulerRotation(0.0, 90.0, 0.0)


@pytest.fixture
def random_rotators():
    """Random triples strictly away from the gimbal poles."""
    rng = np.random.default_rng(1234)
    pitches = rng.uniform(-85.0, 85.0, 30)
    yaws = rng.uniform(-179.0, 179.0, 30)
    rolls = rng.uniform(-179.0, 179.0, 30)
    return [EulerRotation(p, y, r) for p, y, r in zip(pitches, yaws, rolls)]


# =============================================================================
# Test: Construction and arithmetic
# =============================================================================

class TestConstruction:

    def test_zero(self):
        zero = EulerRotation.ZERO
        assert (zero.pitch, zero.yaw, zero.roll) == (0.0, 0.0, 0.0)

    def test_components(self):
        r = EulerRotation(15.0, 90.0, 5.0)
        assert_allclose([r.pitch, r.yaw, r.roll], [15.0, 90.0, 5.0], atol=0.0)
        assert list(r) == [15.0, 90.0, 5.0]

    def test_not_range_reduced(self):
        """Construction keeps angles as given."""
        r = EulerRotation(0.0, 450.0, -270.0)
        assert r.yaw == 450.0
        assert r.roll == -270.0


class TestArithmetic:

    def test_add_subtract(self):
        a = EulerRotation(10.0, 20.0, 0.0)
        b = EulerRotation(5.0, -10.0, 0.0)
        total = a + b
        diff = a - b
        assert_allclose([total.pitch, total.yaw, total.roll], [15.0, 10.0, 0.0], atol=TOL)
        assert_allclose([diff.pitch, diff.yaw, diff.roll], [5.0, 30.0, 0.0], atol=TOL)

    def test_no_wraparound(self):
        total = EulerRotation(0.0, 170.0, 0.0) + EulerRotation(0.0, 20.0, 0.0)
        assert total.yaw == pytest.approx(190.0)

    def test_scale_and_negate(self):
        r = EulerRotation(10.0, -20.0, 30.0)
        assert_allclose((r * 2.0).components, [20.0, -40.0, 60.0], atol=0.0)
        assert_allclose((0.5 * r).components, [5.0, -10.0, 15.0], atol=0.0)
        assert_allclose((-r).components, [-10.0, 20.0, -30.0], atol=0.0)
        assert_allclose((r * np.int64(2)).components, [20.0, -40.0, 60.0], atol=0.0)
        assert_allclose((np.float32(0.5) * r).components, [5.0, -10.0, 15.0], atol=0.0)


class TestNormalization:

    @pytest.mark.parametrize("angle,expected", [
        (0.0, 0.0),
        (180.0, 180.0),
        (-180.0, 180.0),
        (190.0, -170.0),
        (360.0, 0.0),
        (540.0, 180.0),
        (-190.0, 170.0),
        (725.0, 5.0),
    ])
    def test_normalized_range(self, angle, expected):
        r = EulerRotation(angle, angle, angle).normalized()
        assert_allclose(r.components, [expected] * 3, atol=1e-9)

    def test_clamped_range(self):
        r = EulerRotation(-90.0, 370.0, 720.0).clamped()
        assert_allclose(r.components, [270.0, 10.0, 0.0], atol=1e-9)

    def test_equals_ignores_full_turns(self):
        assert EulerRotation(0.0, 360.0, -720.0).equals(EulerRotation.ZERO)
        assert EulerRotation(10.0, 190.0, 0.0) == EulerRotation(10.0, -170.0, 0.0)
        assert not EulerRotation(10.0, 20.0, 0.0).equals(EulerRotation(10.0, 21.0, 0.0))

    def test_is_nearly_zero(self):
        assert EulerRotation(0.0, 360.0, 1e-5).is_nearly_zero()
        assert not EulerRotation(0.0, 1.0, 0.0).is_nearly_zero()


# =============================================================================
# Test: Rotating vectors
# =============================================================================

class TestRotateVector:

    def test_yaw_90_rotates_forward_to_right(self, yaw_90):
        rotated = yaw_90.rotate_vector(Vector3(1.0, 0.0, 0.0))
        assert rotated.equals(Vector3(0.0, 1.0, 0.0), TOL)
        assert yaw_90.unrotate_vector(rotated).equals(Vector3(1.0, 0.0, 0.0), TOL)

    @pytest.mark.parametrize("rotator,v_in,v_expected", [
        (EulerRotation(90.0, 0.0, 0.0), [1, 0, 0], [0, 0, -1]),
        (EulerRotation(-90.0, 0.0, 0.0), [1, 0, 0], [0, 0, 1]),
        (EulerRotation(0.0, 0.0, 90.0), [0, 1, 0], [0, 0, 1]),
        (EulerRotation(0.0, 180.0, 0.0), [1, 0, 0], [-1, 0, 0]),
    ])
    def test_single_axis(self, rotator, v_in, v_expected):
        assert_allclose(rotator.rotate_vector(v_in).to_array(), v_expected, atol=1e-12)

    def test_intrinsic_order(self):
        """Roll is applied to the body first, then pitch, then yaw."""
        r = EulerRotation(30.0, 60.0, 45.0)
        q_roll = Quaternion.from_axis_angle(Vector3.FORWARD, np.radians(45.0))
        q_pitch = Quaternion.from_axis_angle(Vector3.RIGHT, np.radians(30.0))
        q_yaw = Quaternion.from_axis_angle(Vector3.UP, np.radians(60.0))
        v = Vector3(0.3, -1.2, 2.0)
        expected = q_yaw.rotate_vector(q_pitch.rotate_vector(q_roll.rotate_vector(v)))
        assert r.rotate_vector(v).equals(expected, 1e-12)

    def test_unrotate_undoes_rotate(self, random_rotators):
        v = Vector3(4.0, -1.0, 2.5)
        for r in random_rotators:
            assert r.unrotate_vector(r.rotate_vector(v)).equals(v, TOL)

    def test_inverse(self, random_rotators):
        v = Vector3(4.0, -1.0, 2.5)
        for r in random_rotators:
            assert r.inverse().rotate_vector(r.rotate_vector(v)).equals(v, TOL)


# =============================================================================
# Test: Direction vectors
# =============================================================================

class TestDirectionVector:

    def test_zero_points_forward(self):
        assert EulerRotation.ZERO.to_direction_vector().equals(Vector3.FORWARD, TOL)

    def test_yaw_90_points_right(self, yaw_90):
        assert yaw_90.to_direction_vector().equals(Vector3.RIGHT, TOL)

    def test_roll_does_not_change_direction(self):
        a = EulerRotation(20.0, 35.0, 0.0).to_direction_vector()
        b = EulerRotation(20.0, 35.0, 77.0).to_direction_vector()
        assert a.equals(b, 1e-12)

    def test_matches_rotated_forward(self, random_rotators):
        for r in random_rotators:
            assert r.to_direction_vector().equals(r.rotate_vector(Vector3.FORWARD), 1e-10)
            assert r.vector().equals(r.to_direction_vector(), 0.0)

    def test_unit_length(self, random_rotators):
        for r in random_rotators:
            assert_allclose(r.to_direction_vector().length(), 1.0, atol=1e-12)


class TestFromDirection:

    @pytest.mark.parametrize("direction,pitch,yaw", [
        ([1, 0, 0], 0.0, 0.0),
        ([0, 1, 0], 0.0, 90.0),
        ([-1, 0, 0], 0.0, 180.0),
        ([0, -3, 0], 0.0, -90.0),
        ([1, 0, -1], 45.0, 0.0),
        ([0, 0, 5], -90.0, 0.0),
    ])
    def test_angles(self, direction, pitch, yaw):
        r = EulerRotation.from_direction(direction)
        assert_allclose([r.pitch, r.yaw, r.roll], [pitch, yaw, 0.0], atol=1e-9)

    def test_round_trip(self):
        direction = Vector3(1.0, 1.0, 0.0)
        back = EulerRotation.from_direction(direction).to_direction_vector()
        assert direction.get_safe_normal().equals(back.get_safe_normal(), TOL)

    def test_round_trip_with_elevation(self):
        direction = Vector3(-2.0, 0.5, 3.0)
        back = direction.rotation().to_direction_vector()
        assert back.equals(direction.get_safe_normal(), TOL)

    def test_zero_direction(self):
        r = EulerRotation.from_direction(Vector3.ZERO)
        assert np.all(np.isfinite(r.components))
        assert r.equals(EulerRotation.ZERO)


# =============================================================================
# Test: Quaternion conversion
# =============================================================================

class TestQuaternionConversion:

    def test_yaw_45_is_normalized(self):
        assert EulerRotation(0.0, 45.0, 0.0).to_quaternion().is_normalized()

    def test_yaw_90_quaternion(self, yaw_90):
        expected = Quaternion.from_axis_angle(Vector3.UP, np.pi / 2)
        assert yaw_90.to_quaternion().equals(expected, 1e-12)
        assert Quaternion.from_euler(yaw_90).equals(expected, 1e-12)

    @pytest.mark.parametrize("pitch,yaw,roll", [
        (10.0, 45.0, 0.0),
        (20.0, 60.0, 0.0),
        (0.0, 0.0, 0.0),
        (-30.0, 120.0, 45.0),
        (60.0, -150.0, -170.0),
        (89.0, 10.0, 20.0),
    ])
    def test_round_trip(self, pitch, yaw, roll):
        original = EulerRotation(pitch, yaw, roll)
        back = original.to_quaternion().to_euler_rotation()
        assert_allclose([back.pitch, back.yaw, back.roll], [pitch, yaw, roll], atol=TOL)

    def test_round_trip_random(self, random_rotators):
        for r in random_rotators:
            assert r.to_quaternion().to_euler_rotation().equals(r, TOL)

    def test_round_trip_out_of_range_input(self):
        """Angles outside the canonical range come back reduced."""
        back = EulerRotation(10.0, 400.0, -200.0).quaternion().rotator()
        assert_allclose([back.pitch, back.yaw, back.roll], [10.0, 40.0, 160.0], atol=TOL)


class TestGimbalPole:
    """Pitch = +/-90: roll collapses to 0 and is folded into yaw."""

    @pytest.mark.parametrize("pitch,yaw,roll,expected_yaw", [
        (90.0, 30.0, 0.0, 30.0),
        (90.0, 30.0, 10.0, 20.0),
        (-90.0, 30.0, 10.0, 40.0),
        (-90.0, -45.0, -45.0, -90.0),
        (90.0, 0.0, 0.0, 0.0),
    ])
    def test_pole_convention(self, pitch, yaw, roll, expected_yaw):
        q = EulerRotation(pitch, yaw, roll).to_quaternion()
        back = q.to_euler_rotation()
        assert np.all(np.isfinite(back.components))
        assert_allclose([back.pitch, back.roll], [pitch, 0.0], atol=TOL)
        assert_allclose(back.yaw, expected_yaw, atol=TOL)

    @pytest.mark.parametrize("pitch", [90.0, -90.0, 89.99999, -89.99999])
    def test_pole_preserves_orientation(self, pitch):
        """The reconstructed triple describes the same orientation."""
        q = EulerRotation(pitch, 25.0, -65.0).to_quaternion()
        q_back = q.to_euler_rotation().to_quaternion()
        assert q_back.equals(q, TOL)

    @pytest.mark.parametrize("pitch", [89.9, 89.93, 89.95, 89.99, 89.999, -89.95, -89.99])
    def test_near_pole_round_trip(self, pitch):
        """Just inside the pole the triple is recovered, not snapped to +/-90."""
        original = EulerRotation(pitch, 30.0, 20.0)
        q = original.to_quaternion()
        back = q.to_euler_rotation()
        assert_allclose([back.pitch, back.yaw, back.roll], [pitch, 30.0, 20.0], atol=TOL)
        assert back.to_quaternion().equals(q, TOL)
        assert_allclose(back.to_quaternion().angular_distance(q), 0.0, atol=1e-6)
