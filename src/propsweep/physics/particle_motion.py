"""
Particle Motion
===============
Free flight and wall reflection for the particle cloud.

Both steps are independent per particle (and per axis for the walls),
so they run vectorized over the whole cloud.
"""

import numpy as np

from ..entities import ParticleCloud


def integrate_positions(cloud: ParticleCloud, dt: float):
    """
    Explicit forward Euler step: x += v * dt

    No bounds checking here; the wall reflector runs next.
    """
    cloud.positions += cloud.velocities * dt


def reflect_walls(cloud: ParticleCloud, half_extent: float = 5.1) -> int:
    """
    Perfectly elastic, axis-aligned cube walls.

    Any coordinate beyond ±half_extent is clamped onto the wall (sign
    preserved) and the matching velocity component is negated. A particle
    near a corner can reflect on several axes in the same tick.

    Returns:
        Number of (particle, axis) reflections applied
    """
    outside = np.abs(cloud.positions) > half_extent
    cloud.positions[outside] = np.sign(cloud.positions[outside]) * half_extent
    cloud.velocities[outside] *= -1.0
    return int(np.count_nonzero(outside))
