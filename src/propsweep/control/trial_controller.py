"""
Trial Controller
================
State machine driving the pitch sweep experiment.

Cycle:
1. Run a fixed-duration trial at constant pitch
2. Bank the blade's accumulated vertical impulse as one thrust sample
3. Reset the blade spin and re-sample the particle cloud
4. After a full group of trials, log the samples plus their mean,
   then step the pitch up
5. Stop once the terminal pitch has been logged
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from ..entities import WorldState
from .thrust_log import ThrustLog, summarize_trials


class TickOutcome(Enum):
    """What the controller did at the start of a tick"""
    RUNNING = "running"                # Inside a trial
    TRIAL_COMPLETE = "trial_complete"  # Trial boundary, world reset
    PITCH_COMPLETE = "pitch_complete"  # Row logged, pitch stepped up
    FINISHED = "finished"              # Terminal pitch logged, no more ticks


@dataclass
class SweepConfig:
    """Configuration for the pitch sweep"""
    trial_duration: float = 10.0       # seconds per trial
    trials_per_pitch: int = 8
    pitch_step: float = 5.0            # degrees
    terminal_pitch: float = 85.0       # last pitch logged
    output_path: str = "output.csv"


class TrialController:
    """
    Owner of the trial counters and the current pitch's sample buffer.

    Called first in every tick, before any physics runs. It is the only
    component that mutates pitch or resets world state.
    """

    def __init__(self,
                 config: Optional[SweepConfig] = None,
                 thrust_log: Optional[ThrustLog] = None,
                 reset_angular_velocity: float = 20.0):
        self.config = config if config is not None else SweepConfig()
        self.thrust_log = thrust_log if thrust_log is not None else ThrustLog(self.config.output_path)
        self.reset_angular_velocity = reset_angular_velocity

        # Trial state
        self.elapsed = 0.0
        self.trial_index = 0
        self.data_row: List[float] = []
        self.finished = False

        # (pitch, row) for every completed pitch
        self.completed_rows: List[Tuple[float, List[float]]] = []

    def update(self, world: WorldState, dt: float) -> TickOutcome:
        """Advance the trial clock and handle any boundary it crosses."""
        if self.finished:
            return TickOutcome.FINISHED

        self.elapsed += dt
        if self.elapsed < self.config.trial_duration:
            return TickOutcome.RUNNING

        self.elapsed = 0.0
        propeller = world.propeller

        self.data_row.append(propeller.total_vertical_impulse)
        propeller.reset_trial(self.reset_angular_velocity)
        self.trial_index += 1

        outcome = TickOutcome.TRIAL_COMPLETE
        if self.trial_index == self.config.trials_per_pitch:
            self._complete_pitch(world)
            if self.finished:
                return TickOutcome.FINISHED
            outcome = TickOutcome.PITCH_COMPLETE

        world.randomize_particles()
        return outcome

    def _complete_pitch(self, world: WorldState):
        """Log the finished group and move to the next pitch (or stop)."""
        propeller = world.propeller
        row = summarize_trials(self.data_row)

        self.thrust_log.append(row)
        self.completed_rows.append((propeller.pitch, row))
        print(f"[Sweep] Pitch {propeller.pitch:5.1f}° complete | "
              f"Mean impulse: {row[-1]:.4f}")

        self.data_row = []
        self.trial_index = 0

        if propeller.pitch >= self.config.terminal_pitch:
            self.finished = True
            print(f"[Sweep] Terminal pitch reached after {len(self.completed_rows)} rows")
        else:
            propeller.pitch += self.config.pitch_step

    @property
    def current_trial(self) -> int:
        """1-based trial number within the current pitch group"""
        return self.trial_index + 1
