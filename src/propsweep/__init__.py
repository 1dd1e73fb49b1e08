"""
Propeller Pitch Sweep
=====================
Particle-swarm thrust experiment for a single pitched rotating blade.

A cloud of point masses bounces around a closed cube while a driven blade
sweeps through it. Each strike transfers momentum to the blade, and the
vertical share of that momentum is the thrust metric recorded per trial.
"""

__version__ = "0.1.0"
__author__ = "Propsweep Development Team"
