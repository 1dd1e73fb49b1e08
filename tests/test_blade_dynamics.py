"""
Test Suite: Blade Dynamics
==========================
Unit tests for the blade drive, rotation advance and render pose.
"""

import numpy as np
import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from propsweep.entities import Propeller, BladeConfig
from propsweep.physics import (
    DRIVE_POWER,
    wrap_rotation,
    apply_drive,
    advance_rotation,
    compute_blade_pose,
    quaternion_from_axis_angle,
    quaternion_multiply,
    rotate_vector,
    update_blade
)


class TestPropeller:
    """Tests for the Propeller record"""

    def test_moment_of_inertia_uniform_rod(self):
        """I = m * L² / 3 = 5 * 16 / 3"""
        propeller = Propeller(mass=5.0, length=4.0)
        assert propeller.moment_of_inertia == pytest.approx(80.0 / 3.0)

    def test_from_config(self):
        propeller = Propeller.from_config(BladeConfig(start_pitch=50.0, start_angular_velocity=30.0))

        assert propeller.pitch == 50.0
        assert propeller.angular_velocity == 30.0
        assert propeller.rotation == 0.0
        np.testing.assert_array_equal(propeller.translation, [2.0, 0.0, 0.0])

    def test_reset_trial_keeps_pitch(self):
        propeller = Propeller(rotation=123.0, old_rotation=120.0, pitch=60.0,
                              angular_velocity=900.0, total_vertical_impulse=-4.2)
        propeller.reset_trial(20.0)

        assert propeller.rotation == 0.0
        assert propeller.old_rotation == 0.0
        assert propeller.angular_velocity == 20.0
        assert propeller.total_vertical_impulse == 0.0
        assert propeller.pitch == 60.0


class TestDrive:
    """Tests for the constant-power drive"""

    def test_drive_increment(self):
        propeller = Propeller(angular_velocity=20.0)
        delta = apply_drive(propeller, 0.01)

        expected = (DRIVE_POWER * 0.01) / ((80.0 / 3.0) * np.radians(20.0))
        assert delta == pytest.approx(expected)
        assert propeller.angular_velocity == pytest.approx(20.0 + expected)

    def test_drive_weakens_as_blade_speeds_up(self):
        slow = Propeller(angular_velocity=20.0)
        fast = Propeller(angular_velocity=200.0)

        assert apply_drive(slow, 0.01) > apply_drive(fast, 0.01)

    def test_stalled_blade_gets_no_drive(self):
        propeller = Propeller(angular_velocity=0.0)

        assert apply_drive(propeller, 0.01) == 0.0
        assert propeller.angular_velocity == 0.0


class TestRotation:
    """Tests for rotation wrapping and advance"""

    def test_wrap_over_full_turn(self):
        propeller = Propeller(rotation=370.0)
        wrap_rotation(propeller)
        assert propeller.rotation == pytest.approx(10.0)

    def test_wrap_leaves_valid_angle(self):
        propeller = Propeller(rotation=359.5)
        wrap_rotation(propeller)
        assert propeller.rotation == 359.5

    def test_advance_sets_trailing_edge(self):
        propeller = Propeller(rotation=10.0, angular_velocity=20.0)
        advance_rotation(propeller, 0.5)

        assert propeller.old_rotation == 10.0
        assert propeller.rotation == pytest.approx(20.0)


class TestQuaternions:
    """Tests for the quaternion helpers"""

    def test_rotation_about_y(self):
        q = quaternion_from_axis_angle(np.array([0.0, 1.0, 0.0]), np.pi / 2)
        np.testing.assert_array_almost_equal(rotate_vector(q, np.array([1.0, 0.0, 0.0])), [0.0, 0.0, -1.0])

    def test_product_applies_right_operand_first(self):
        qx = quaternion_from_axis_angle(np.array([1.0, 0.0, 0.0]), np.pi / 2)
        qy = quaternion_from_axis_angle(np.array([0.0, 1.0, 0.0]), np.pi / 2)
        v = np.array([0.0, 1.0, 0.0])

        combined = rotate_vector(quaternion_multiply(qy, qx), v)
        sequential = rotate_vector(qy, rotate_vector(qx, v))
        np.testing.assert_array_almost_equal(combined, sequential)

    def test_identity(self):
        identity = np.array([1.0, 0.0, 0.0, 0.0])
        q = quaternion_from_axis_angle(np.array([0.0, 0.0, 1.0]), 0.3)
        np.testing.assert_array_almost_equal(quaternion_multiply(identity, q), q)


class TestBladePose:
    """Tests for the derived render pose"""

    def test_pose_at_zero_rotation_vertical_blade(self):
        translation, orientation = compute_blade_pose(0.0, 90.0)

        # Span along +Z, mesh centre half a length out
        np.testing.assert_array_almost_equal(translation, [0.0, 0.0, 2.0])
        np.testing.assert_array_almost_equal(orientation, [np.cos(np.pi / 4), 0.0, np.sin(np.pi / 4), 0.0])

    def test_translation_tracks_span_direction(self):
        """Mesh centre sits at r = 2 along (sin θ, 0, cos θ)"""
        for rotation in (0.0, 45.0, 120.0, 300.0):
            translation, _ = compute_blade_pose(rotation, 45.0)
            angle = np.radians(rotation)
            np.testing.assert_array_almost_equal(translation, [2 * np.sin(angle), 0.0, 2 * np.cos(angle)])

    def test_orientation_is_unit(self):
        _, orientation = compute_blade_pose(77.0, 65.0)
        assert np.linalg.norm(orientation) == pytest.approx(1.0)


class TestUpdateBlade:
    """Tests for the full blade dynamics step"""

    def test_step_order(self):
        """Wrap first, then drive, then rotate with the driven speed"""
        propeller = Propeller(rotation=365.0, angular_velocity=20.0, pitch=45.0)
        delta = update_blade(propeller, 0.01)

        assert propeller.old_rotation == pytest.approx(5.0)
        assert propeller.angular_velocity == pytest.approx(20.0 + delta)
        assert propeller.rotation == pytest.approx(5.0 + (20.0 + delta) * 0.01)

        translation, orientation = compute_blade_pose(propeller.rotation, 45.0)
        np.testing.assert_array_almost_equal(propeller.translation, translation)
        np.testing.assert_array_almost_equal(propeller.orientation, orientation)
