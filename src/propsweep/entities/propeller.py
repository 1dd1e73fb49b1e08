"""
Propeller Entity
================
The single pitched blade spinning about the vertical (Y) axis.

Angles are kept in degrees and angular velocity in degrees per second,
matching the way the experiment reports pitch. Conversions to radians
happen inside the physics routines that need them.
"""

import numpy as np
from dataclasses import dataclass, field


@dataclass
class BladeConfig:
    """Configuration parameters for the propeller blade"""
    length: float = 4.0                    # units, tip-to-hub
    mass: float = 5.0
    start_pitch: float = 45.0              # degrees
    start_angular_velocity: float = 20.0   # deg/s, avoids a runaway spin-up from rest
    sweep_radius: float = 4.0              # radial reach of the strike test
    drive_power: float = 50000.0           # constant-power drive


@dataclass
class Propeller:
    """
    Kinematic and bookkeeping state of the blade.

    `old_rotation` holds the angle at the start of the latest rotation
    step and forms the trailing edge of the strike sweep window.
    """
    rotation: float = 0.0                  # degrees, wrapped into [0, 360)
    old_rotation: float = 0.0              # degrees
    pitch: float = 45.0                    # degrees from horizontal
    angular_velocity: float = 20.0         # deg/s
    mass: float = 5.0
    length: float = 4.0
    total_vertical_impulse: float = 0.0    # thrust metric of the current trial

    # Render pose, derived from rotation and pitch
    translation: np.ndarray = field(default_factory=lambda: np.array([2.0, 0.0, 0.0]))
    orientation: np.ndarray = field(default_factory=lambda: np.array([1.0, 0.0, 0.0, 0.0]))  # Quaternion [w, x, y, z]

    @classmethod
    def from_config(cls, config: BladeConfig) -> 'Propeller':
        return cls(
            pitch=config.start_pitch,
            angular_velocity=config.start_angular_velocity,
            mass=config.mass,
            length=config.length,
            translation=np.array([config.length / 2.0, 0.0, 0.0])
        )

    @property
    def moment_of_inertia(self) -> float:
        """Uniform rod about one end: I = m * L² / 3"""
        return self.mass * self.length ** 2 / 3.0

    def reset_trial(self, angular_velocity: float):
        """Return to the start-of-trial spin state. Pitch is untouched."""
        self.rotation = 0.0
        self.old_rotation = 0.0
        self.angular_velocity = angular_velocity
        self.total_vertical_impulse = 0.0
