"""
Control Module
==============
Experiment orchestration for the pitch sweep.

- TrialController: Trial timing, resets, averaging and pitch stepping
- ThrustLog: Append-only CSV sink for completed pitch rows
"""

from .trial_controller import TrialController, SweepConfig, TickOutcome
from .thrust_log import ThrustLog, append_to_csv, summarize_trials

__all__ = [
    'TrialController',
    'SweepConfig',
    'TickOutcome',
    'ThrustLog',
    'append_to_csv',
    'summarize_trials'
]
