"""
Particle Pair Collisions
========================
Proximity-triggered velocity exchange between particles.

Any unordered pair closer than the contact radius is treated as an
equal-mass head-on elastic collision, whatever the approach angle:
both particles step back along their own velocity, then swap velocities.

Pairs are visited in (i, j) index order with i < j. A particle moved by
an earlier pair is tested against later partners from its new position
with its new velocity.
"""

import numpy as np

from ..entities import ParticleCloud


def resolve_particle_pairs(cloud: ParticleCloud, dt: float, radius: float = 0.2) -> int:
    """
    Resolve every particle pair within `radius` of each other.

    O(n²) over the cloud. Distances from particle i to all later
    particles are evaluated as one array; after each exchange the row is
    re-evaluated from the next partner on, since particle i has moved.

    Returns:
        Number of pair exchanges performed
    """
    positions = cloud.positions
    velocities = cloud.velocities
    n = len(cloud)
    exchanges = 0

    for i in range(n - 1):
        start = i + 1
        while start < n:
            separation = np.linalg.norm(positions[start:] - positions[i], axis=1)
            hits = np.flatnonzero(separation <= radius)
            if hits.size == 0:
                break

            j = start + int(hits[0])

            # Back off along the pre-exchange velocities
            positions[i] -= velocities[i] * dt
            positions[j] -= velocities[j] * dt

            velocities[[i, j]] = velocities[[j, i]]

            exchanges += 1
            start = j + 1

    return exchanges
