"""
Blade Dynamics
==============
Constant-power drive, rotation advance, and render pose of the blade.

The drive approximates a constant-power source, where instantaneous
torque = power / angular velocity:

    dω = P * dt / (I * radians(ω))

Angular velocity stays in deg/s everywhere else; only the denominator
converts it to rad/s. Downstream thrust numbers depend on this exact
convention.
"""

import numpy as np
from typing import Tuple

from ..entities import Propeller


# Default drive power of the blade motor
DRIVE_POWER = 50000.0

X_AXIS = np.array([1.0, 0.0, 0.0])
Y_AXIS = np.array([0.0, 1.0, 0.0])


def wrap_rotation(propeller: Propeller):
    """Keep the rotation angle in [0, 360)."""
    propeller.rotation %= 360.0


def apply_drive(propeller: Propeller, dt: float, drive_power: float = DRIVE_POWER) -> float:
    """
    Spin the blade up under constant power.

    The update is undefined at zero angular velocity; a stalled blade
    receives no drive that tick.

    Returns:
        Change in angular velocity (deg/s)
    """
    if propeller.angular_velocity == 0.0:
        return 0.0

    delta = (drive_power * dt) / (propeller.moment_of_inertia * np.radians(propeller.angular_velocity))
    propeller.angular_velocity += float(delta)
    return float(delta)


def advance_rotation(propeller: Propeller, dt: float):
    """Store the trailing sweep edge, then rotate by ω * dt."""
    propeller.old_rotation = propeller.rotation
    propeller.rotation += propeller.angular_velocity * dt


def quaternion_from_axis_angle(axis: np.ndarray, angle: float) -> np.ndarray:
    """Unit quaternion [w, x, y, z] for a rotation of `angle` rad about `axis`."""
    axis = np.asarray(axis, dtype=np.float64)
    axis = axis / np.linalg.norm(axis)
    half = 0.5 * angle
    return np.concatenate(([np.cos(half)], np.sin(half) * axis))


def quaternion_multiply(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Hamilton product a * b (apply b first, then a)."""
    w1, x1, y1, z1 = a
    w2, x2, y2, z2 = b
    return np.array([
        w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
        w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
        w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
        w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2
    ])


def rotate_vector(q: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Rotate vector v by unit quaternion q."""
    u = q[1:]
    w = q[0]
    t = 2.0 * np.cross(u, v)
    return np.asarray(v, dtype=np.float64) + w * t + np.cross(u, t)


def compute_blade_pose(rotation: float, pitch: float, length: float = 4.0) -> Tuple[np.ndarray, np.ndarray]:
    """
    World-space pose of the blade mesh for the renderer.

    The mesh is centred on its span, so it is offset by half a length and
    spun about the hub rather than about its own centre.

    Returns:
        (translation, orientation) with orientation as [w, x, y, z]
    """
    spin = quaternion_from_axis_angle(Y_AXIS, np.radians(rotation) + np.pi / 2.0)
    tilt = quaternion_from_axis_angle(X_AXIS, np.radians(90.0 - pitch))

    pivot = np.array([-length / 2.0, 0.0, 0.0])
    translation = rotate_vector(spin, pivot)
    orientation = quaternion_multiply(spin, tilt)
    return translation, orientation


def update_blade(propeller: Propeller, dt: float, drive_power: float = DRIVE_POWER) -> float:
    """
    One blade dynamics step: wrap, drive, rotate, refresh pose.

    Returns:
        Drive contribution to angular velocity (deg/s)
    """
    wrap_rotation(propeller)
    delta = apply_drive(propeller, dt, drive_power)
    advance_rotation(propeller, dt)

    propeller.translation, propeller.orientation = compute_blade_pose(
        propeller.rotation, propeller.pitch, propeller.length
    )
    return delta
