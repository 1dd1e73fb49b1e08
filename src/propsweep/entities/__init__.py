"""
Entities Module
===============
Physical entities in the propeller sweep simulation.

- ParticleCloud: The swarm of point masses inside the cube
- Propeller: The single driven, pitched blade
- WorldState: Container tying both to a shared random source
"""

from .particle import ParticleCloud, WorldConfig
from .propeller import Propeller, BladeConfig
from .world import WorldState

__all__ = [
    'ParticleCloud',
    'WorldConfig',
    'Propeller',
    'BladeConfig',
    'WorldState'
]
