"""
Physics Module
==============
Per-tick physics systems for the propeller sweep simulation.

Submodules:
- particle_motion: Euler integration and cube wall reflection
- pair_collisions: Proximity velocity exchange between particles
- blade_collisions: Blade strike detection, impulse and reaction torque
- blade_dynamics: Constant-power drive, rotation and render pose
"""

from .particle_motion import (
    integrate_positions,
    reflect_walls
)

from .pair_collisions import resolve_particle_pairs

from .blade_collisions import (
    BladeStrike,
    compute_azimuth,
    sweep_window,
    blade_surface_frame,
    compute_strike_impulse,
    find_slab_candidates,
    resolve_blade_collisions
)

from .blade_dynamics import (
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

__all__ = [
    # Particles
    'integrate_positions',
    'reflect_walls',
    'resolve_particle_pairs',
    # Blade strikes
    'BladeStrike',
    'compute_azimuth',
    'sweep_window',
    'blade_surface_frame',
    'compute_strike_impulse',
    'find_slab_candidates',
    'resolve_blade_collisions',
    # Blade dynamics
    'DRIVE_POWER',
    'wrap_rotation',
    'apply_drive',
    'advance_rotation',
    'compute_blade_pose',
    'quaternion_from_axis_angle',
    'quaternion_multiply',
    'rotate_vector',
    'update_blade',
]
