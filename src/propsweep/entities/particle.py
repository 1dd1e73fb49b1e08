"""
Particle Cloud
==============
Free-floating point masses confined to the bounding cube.

All particle state lives in two (N, 3) arrays so the integrator and the
wall reflector can work on the whole cloud at once. Collision resolvers
still walk particles in index order through the same arrays.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional


@dataclass
class WorldConfig:
    """Configuration parameters for the particle cloud"""
    particle_count: int = 400
    particle_mass: float = 5.0
    spawn_half_extent: float = 5.0       # positions drawn from [-h, h)
    spawn_speed: float = 1.0             # velocity components drawn from [-s, s)
    wall_half_extent: float = 5.1        # half of the 10.2 bounding box
    pair_radius: float = 0.2             # particle-particle contact distance
    seed: Optional[int] = None


class ParticleCloud:
    """
    Ordered collection of equal-mass particles.

    Index order is stable for the lifetime of the cloud: particles are
    repositioned, never added or removed.
    """

    def __init__(self, positions, velocities, mass: float = 5.0):
        self.positions = np.array(positions, dtype=np.float64).reshape(-1, 3)
        self.velocities = np.array(velocities, dtype=np.float64).reshape(-1, 3)
        if self.positions.shape != self.velocities.shape:
            raise ValueError(
                f"Position/velocity shape mismatch: "
                f"{self.positions.shape} vs {self.velocities.shape}"
            )
        self.mass = float(mass)

    @classmethod
    def random(cls,
               count: int,
               rng: np.random.Generator,
               half_extent: float = 5.0,
               speed: float = 1.0,
               mass: float = 5.0) -> 'ParticleCloud':
        """Spawn `count` particles with uniform positions and velocities."""
        cloud = cls(np.zeros((count, 3)), np.zeros((count, 3)), mass=mass)
        cloud.randomize(rng, half_extent, speed)
        return cloud

    def __len__(self) -> int:
        return len(self.positions)

    def randomize(self, rng: np.random.Generator, half_extent: float, speed: float):
        """Fresh uniform sample of every position and velocity, in place."""
        count = len(self)
        self.positions[:] = rng.uniform(-half_extent, half_extent, size=(count, 3))
        self.velocities[:] = rng.uniform(-speed, speed, size=(count, 3))

    def relocate(self, index: int, rng: np.random.Generator, half_extent: float):
        """Move one particle to a fresh uniform position. Velocity is kept."""
        self.positions[index] = rng.uniform(-half_extent, half_extent, size=3)

    @property
    def total_momentum(self) -> np.ndarray:
        return self.mass * self.velocities.sum(axis=0)

    @property
    def kinetic_energy(self) -> float:
        """KE = 0.5 * m * sum(v²)"""
        return 0.5 * self.mass * float(np.einsum('ij,ij->', self.velocities, self.velocities))
