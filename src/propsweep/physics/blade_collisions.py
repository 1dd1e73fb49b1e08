"""
Blade-Particle Collisions
=========================
Strike detection and momentum exchange between the blade and particles.

The blade is not a fluid model. A particle is "struck" when it sits in
the thin slab the pitched blade occupies, inside the sweep disk, and at
an azimuth the blade passed over since the previous rotation step. The
struck particle then trades an elastic impulse along the blade normal:

    J = 2 * m_blade * m_particle * (v_rel · n) * n / (m_blade + m_particle)

The vertical part of J is the thrust sample. The horizontal part acts on
the blade as a reaction torque about the hub. Struck particles are then
re-spawned at random, modelling continuous throughput of fresh medium.

Key geometry:
- Azimuth is measured about +Y from +Z toward +X, in [0, 2π)
- The sweep window is widened by atan(cos(pitch) / 2r) on both sides so
  fast blades do not tunnel past particles between ticks
"""

import numpy as np
from dataclasses import dataclass
from typing import List, Tuple

from ..entities import Propeller, WorldState


# Downward vertical used to read the torque impulse about the hub
DOWNWARD = np.array([0.0, -1.0, 0.0])


@dataclass
class BladeStrike:
    """Record of one blade-particle strike within a tick"""
    particle_index: int
    azimuth: float                   # rad
    radius: float                    # distance of the particle from the hub
    impulse: np.ndarray              # full impulse, vertical component included
    moment_arm: np.ndarray           # horizontal lever from the hub
    delta_angular_velocity: float    # deg/s applied to the blade

    @property
    def vertical_impulse(self) -> float:
        return float(self.impulse[1])


def compute_azimuth(x: float, z: float) -> float:
    """
    Angle of a point about the vertical axis, in [0, 2π).

    Uses atan(x / z) with quadrant correction. A zero depth coordinate
    follows IEEE division (x / 0 -> ±inf, atan -> ±π/2); a point on the
    axis itself (x = z = 0) has no azimuth and yields NaN, which never
    falls inside a sweep window.
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        theta = float(np.arctan(np.float64(x) / np.float64(z)))

    if z < 0.0:
        theta += np.pi
    elif theta < 0.0:
        theta += 2.0 * np.pi
    return theta


def sweep_window(propeller: Propeller, radius: float) -> Tuple[float, float]:
    """
    Open angular interval (rad) swept by the blade at `radius` this tick.

    Runs from the previous rotation to the current one, each edge pushed
    out by the blade's apparent angular half-width at that radius.
    """
    pitch = np.radians(propeller.pitch)
    with np.errstate(divide='ignore'):
        angle_modifier = np.arctan(np.cos(pitch) / (2.0 * np.float64(radius)))

    lower = np.radians(propeller.old_rotation) - angle_modifier
    upper = np.radians(propeller.rotation) + angle_modifier
    return float(lower), float(upper)


def blade_surface_frame(rotation: float, pitch: float) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Unit vectors of the blade surface at the given rotation and pitch (deg).

    Returns:
        (parallel, tilt, normal) where parallel runs along the span,
        tilt runs across the chord (dipping by the pitch angle), and
        normal = parallel × tilt
    """
    angle = np.radians(rotation)
    parallel = np.array([np.sin(angle), 0.0, np.cos(angle)])

    down = -np.sin(np.radians(pitch))
    out = np.sqrt(1.0 - down * down)
    trailing = np.radians(rotation - 90.0)
    tilt = np.array([np.sin(trailing) * out, down, np.cos(trailing) * out])

    normal = np.cross(parallel, tilt)
    return parallel, tilt, normal


def compute_strike_impulse(propeller: Propeller,
                           particle_velocity: np.ndarray,
                           particle_mass: float,
                           radius: float) -> np.ndarray:
    """
    Elastic impulse along the blade normal for one struck particle.

    The blade's local surface speed is angular_velocity * r / 360, moving
    perpendicular to the span in the direction of rotation.
    """
    _, _, normal = blade_surface_frame(propeller.rotation, propeller.pitch)

    blade_speed = propeller.angular_velocity * radius / 360.0
    leading = np.radians(propeller.rotation + 90.0)
    blade_velocity = blade_speed * np.array([np.sin(leading), 0.0, np.cos(leading)])

    relative_velocity = np.asarray(particle_velocity, dtype=np.float64) - blade_velocity
    scalar = np.dot(relative_velocity, normal)

    reduced = 2.0 * propeller.mass * particle_mass / (propeller.mass + particle_mass)
    return reduced * scalar * normal


def find_slab_candidates(world: WorldState, sweep_radius: float = 4.0) -> Tuple[np.ndarray, np.ndarray]:
    """
    Indices of particles inside both the blade slab and the sweep disk.

    The slab is |y| < 0.5 * sin(pitch); the disk is a 3D distance from the
    hub below `sweep_radius`.

    Returns:
        (indices, radii) with radii holding every particle's hub distance
    """
    positions = world.particles.positions
    half_thickness = 0.5 * np.sin(np.radians(world.propeller.pitch))

    radii = np.linalg.norm(positions, axis=1)
    in_slab = np.abs(positions[:, 1]) < half_thickness
    in_disk = radii < sweep_radius
    return np.flatnonzero(in_slab & in_disk), radii


def resolve_blade_collisions(world: WorldState, sweep_radius: float = 4.0) -> List[BladeStrike]:
    """
    Detect and resolve every blade strike for this tick.

    Particles are processed in index order; the blade's angular velocity
    reacts after each strike, so later strikes in the same tick see the
    updated blade speed.

    Returns:
        One BladeStrike per struck particle
    """
    cloud = world.particles
    propeller = world.propeller
    candidates, radii = find_slab_candidates(world, sweep_radius)

    strikes = []
    for index in candidates:
        x, _, z = cloud.positions[index]
        radius = float(radii[index])

        theta = compute_azimuth(x, z)
        lower, upper = sweep_window(propeller, radius)
        if not (lower < theta < upper):
            continue

        impulse = compute_strike_impulse(propeller, cloud.velocities[index], cloud.mass, radius)
        propeller.total_vertical_impulse += float(impulse[1])

        # Reaction torque from the horizontal part only
        horizontal = impulse.copy()
        horizontal[1] = 0.0
        moment_arm = np.array([x, 0.0, z])
        angular_impulse = np.cross(moment_arm, horizontal)
        torque_impulse = np.dot(angular_impulse, DOWNWARD)

        delta_angular_velocity = float(-torque_impulse / propeller.moment_of_inertia)
        propeller.angular_velocity += delta_angular_velocity

        strikes.append(BladeStrike(
            particle_index=int(index),
            azimuth=theta,
            radius=radius,
            impulse=impulse,
            moment_arm=moment_arm,
            delta_angular_velocity=delta_angular_velocity
        ))

        world.relocate_particle(int(index))

    return strikes
