"""
World State
===========
Owner of the particle cloud, the blade, and the random source that
re-samples them.
"""

import numpy as np
from typing import Optional

from .particle import ParticleCloud, WorldConfig
from .propeller import Propeller, BladeConfig


class WorldState:
    """
    Everything the physics systems read and write during a tick.

    Systems are plain functions over this object; the trial controller
    is the only component that resets it between trials.
    """

    def __init__(self,
                 particles: ParticleCloud,
                 propeller: Propeller,
                 config: Optional[WorldConfig] = None,
                 rng: Optional[np.random.Generator] = None):
        self.config = config if config is not None else WorldConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.particles = particles
        self.propeller = propeller

    @classmethod
    def create(cls,
               world_config: Optional[WorldConfig] = None,
               blade_config: Optional[BladeConfig] = None) -> 'WorldState':
        """Spawn the startup cloud and blade."""
        world_config = world_config or WorldConfig()
        blade_config = blade_config or BladeConfig()
        rng = np.random.default_rng(world_config.seed)

        particles = ParticleCloud.random(
            world_config.particle_count,
            rng,
            half_extent=world_config.spawn_half_extent,
            speed=world_config.spawn_speed,
            mass=world_config.particle_mass
        )
        return cls(particles, Propeller.from_config(blade_config), world_config, rng)

    def randomize_particles(self):
        """Fresh sample of every particle position and velocity."""
        self.particles.randomize(
            self.rng,
            self.config.spawn_half_extent,
            self.config.spawn_speed
        )

    def relocate_particle(self, index: int):
        self.particles.relocate(index, self.rng, self.config.spawn_half_extent)
