"""
Test Suite: Particle Physics
============================
Unit tests for free flight, wall reflection and pair exchanges.

Tests:
- Forward Euler integration
- Axis-independent wall clamping and reflection
- Pair velocity swap and back-off
- Sequential pair processing order
"""

import numpy as np
import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from propsweep.entities import ParticleCloud
from propsweep.physics import (
    integrate_positions,
    reflect_walls,
    resolve_particle_pairs
)


class TestParticleCloud:
    """Tests for the ParticleCloud container"""

    def test_random_cloud_within_spawn_bounds(self):
        """Spawned particles sit in [-5, 5) with speeds in [-1, 1)"""
        rng = np.random.default_rng(7)
        cloud = ParticleCloud.random(400, rng, half_extent=5.0, speed=1.0)

        assert len(cloud) == 400
        assert np.all(np.abs(cloud.positions) < 5.0)
        assert np.all(np.abs(cloud.velocities) < 1.0)

    def test_shape_mismatch_rejected(self):
        with pytest.raises(ValueError):
            ParticleCloud(np.zeros((3, 3)), np.zeros((2, 3)))

    def test_momentum_and_energy(self):
        cloud = ParticleCloud([[0, 0, 0], [1, 1, 1]], [[3, 4, 0], [-1, 0, 0]], mass=2.0)

        np.testing.assert_array_almost_equal(cloud.total_momentum, [4.0, 8.0, 0.0])
        # KE = 0.5 * 2 * (25 + 1)
        assert cloud.kinetic_energy == pytest.approx(26.0)

    def test_relocate_keeps_velocity(self):
        rng = np.random.default_rng(3)
        cloud = ParticleCloud([[9, 9, 9]], [[0.5, -0.5, 0.25]])
        cloud.relocate(0, rng, 5.0)

        assert np.all(np.abs(cloud.positions[0]) < 5.0)
        np.testing.assert_array_equal(cloud.velocities[0], [0.5, -0.5, 0.25])


class TestMotionIntegrator:
    """Tests for position integration"""

    def test_forward_euler_step(self):
        cloud = ParticleCloud([[0, 0, 0]], [[1, 2, 3]])
        integrate_positions(cloud, 0.5)

        np.testing.assert_array_almost_equal(cloud.positions[0], [0.5, 1.0, 1.5])

    def test_no_bounds_check(self):
        """Integration alone may leave the cube"""
        cloud = ParticleCloud([[5.0, 0, 0]], [[1, 0, 0]])
        integrate_positions(cloud, 1.0)

        assert cloud.positions[0, 0] == pytest.approx(6.0)


class TestWallReflector:
    """Tests for the cube boundary"""

    def test_clamps_and_reflects_each_axis(self):
        cloud = ParticleCloud([[5.3, -5.2, 0.0]], [[1.0, -1.0, 1.0]])
        reflections = reflect_walls(cloud, 5.1)

        assert reflections == 2
        np.testing.assert_array_almost_equal(cloud.positions[0], [5.1, -5.1, 0.0])
        np.testing.assert_array_almost_equal(cloud.velocities[0], [-1.0, 1.0, 1.0])

    def test_particle_inside_untouched(self):
        cloud = ParticleCloud([[5.1, -5.0, 4.9]], [[1.0, 1.0, 1.0]])
        reflections = reflect_walls(cloud, 5.1)

        assert reflections == 0
        np.testing.assert_array_equal(cloud.velocities[0], [1.0, 1.0, 1.0])

    def test_corner_reflects_all_axes(self):
        cloud = ParticleCloud([[6.0, 6.0, -6.0]], [[2.0, 3.0, -4.0]])
        reflect_walls(cloud, 5.1)

        np.testing.assert_array_almost_equal(cloud.positions[0], [5.1, 5.1, -5.1])
        np.testing.assert_array_almost_equal(cloud.velocities[0], [-2.0, -3.0, 4.0])

    def test_all_coordinates_bounded_after_reflection(self):
        """After reflection every coordinate satisfies |c| <= 5.1"""
        rng = np.random.default_rng(11)
        cloud = ParticleCloud.random(400, rng, speed=1.0)
        cloud.velocities *= 20.0

        for _ in range(20):
            integrate_positions(cloud, 0.5)
            reflect_walls(cloud, 5.1)
            assert np.all(np.abs(cloud.positions) <= 5.1)


class TestPairResolver:
    """Tests for particle-particle exchanges"""

    def test_close_pair_swaps_and_backs_off(self):
        cloud = ParticleCloud(
            [[0.0, 0.0, 0.0], [0.1, 0.0, 0.0]],
            [[1.0, 0.0, 0.0], [-1.0, 0.5, 0.0]]
        )
        exchanges = resolve_particle_pairs(cloud, 0.1, radius=0.2)

        assert exchanges == 1
        # Back-off uses each particle's own pre-swap velocity
        np.testing.assert_array_almost_equal(cloud.positions[0], [-0.1, 0.0, 0.0])
        np.testing.assert_array_almost_equal(cloud.positions[1], [0.2, -0.05, 0.0])
        np.testing.assert_array_almost_equal(cloud.velocities[0], [-1.0, 0.5, 0.0])
        np.testing.assert_array_almost_equal(cloud.velocities[1], [1.0, 0.0, 0.0])

    def test_pair_momentum_conserved(self):
        cloud = ParticleCloud(
            [[1.0, 1.0, 1.0], [1.05, 1.05, 1.0]],
            [[0.3, -0.2, 0.9], [-0.7, 0.4, 0.1]],
            mass=5.0
        )
        p_before = cloud.total_momentum.copy()
        resolve_particle_pairs(cloud, 0.016, radius=0.2)

        np.testing.assert_array_equal(cloud.total_momentum, p_before)

    def test_contact_radius_is_inclusive(self):
        cloud = ParticleCloud([[0.0, 0.0, 0.0], [0.2, 0.0, 0.0]], [[1, 0, 0], [0, 1, 0]])
        assert resolve_particle_pairs(cloud, 0.0, radius=0.2) == 1

    def test_distant_pair_ignored(self):
        cloud = ParticleCloud([[0.0, 0.0, 0.0], [0.0, 0.3, 0.0]], [[1, 0, 0], [0, 1, 0]])
        exchanges = resolve_particle_pairs(cloud, 0.1, radius=0.2)

        assert exchanges == 0
        np.testing.assert_array_equal(cloud.velocities, [[1, 0, 0], [0, 1, 0]])

    def test_pairs_processed_in_index_order(self):
        """Later pairs see velocities swapped by earlier pairs"""
        v0, v1, v2 = [1.0, 0, 0], [0, 1.0, 0], [0, 0, 1.0]
        cloud = ParticleCloud(
            [[0.0, 0.0, 0.0], [0.15, 0.0, 0.0], [0.3, 0.0, 0.0]],
            [v0, v1, v2]
        )
        # dt = 0 keeps positions fixed: pairs (0,1) and (1,2) are in range, (0,2) is not
        exchanges = resolve_particle_pairs(cloud, 0.0, radius=0.2)

        assert exchanges == 2
        np.testing.assert_array_equal(cloud.velocities, [v1, v2, v0])

    def test_velocity_multiset_preserved(self):
        rng = np.random.default_rng(5)
        cloud = ParticleCloud.random(200, rng, half_extent=1.0)
        before = sorted(map(tuple, cloud.velocities))

        resolve_particle_pairs(cloud, 0.01, radius=0.2)

        after = sorted(map(tuple, cloud.velocities))
        assert before == after
