"""
Propeller Pitch Sweep - Main Simulation
=======================================
Entry point for the particle-swarm propeller thrust experiment.

This simulation demonstrates:
1. 400 elastic particles bouncing inside a 10.2-unit cube
2. A constant-power blade striking particles as it sweeps
3. Thrust sampled as accumulated vertical impulse per 10 s trial
4. A pitch sweep from 45° to 85° logged to CSV
"""

import argparse
import copy
import time
import numpy as np
import yaml
from pathlib import Path
from typing import Callable, Dict, List, Optional

# World state
from .entities import WorldState, WorldConfig, BladeConfig

# Physics systems
from .physics import (
    BladeStrike,
    integrate_positions,
    reflect_walls,
    resolve_particle_pairs,
    resolve_blade_collisions,
    update_blade
)

# Experiment control
from .control import TrialController, SweepConfig, ThrustLog, TickOutcome

# Render collaborator
from .visualization import RenderState, create_renderer, boundary_cube_edges


def _merge_config(defaults: Dict, overrides: Optional[Dict]) -> Dict:
    """Recursively overlay `overrides` onto a copy of `defaults`."""
    merged = copy.deepcopy(defaults)
    for key, value in (overrides or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


class PropellerSweepSimulation:
    """
    Main simulation controller for the pitch sweep experiment.

    Orchestrates, once per tick and in this order:
    - Trial bookkeeping (may reset the world or end the sweep)
    - Particle flight and wall reflection
    - Particle pair exchanges
    - Blade strikes
    - Blade drive and rotation
    """

    def __init__(self, config_path: Optional[str] = None, overrides: Optional[Dict] = None):
        # Load configuration
        loaded = None
        if config_path:
            with open(config_path, 'r') as f:
                loaded = yaml.safe_load(f)
        self.config = _merge_config(self._default_config(), loaded)
        self.config = _merge_config(self.config, overrides)

        self.world_config = WorldConfig(**self.config['world'])
        self.blade_config = BladeConfig(**self.config['blade'])
        self.sweep_config = SweepConfig(**self.config['sweep'])

        # World
        self.world = WorldState.create(self.world_config, self.blade_config)

        # Experiment control
        self.thrust_log = ThrustLog(self.sweep_config.output_path)
        self.controller = TrialController(
            self.sweep_config,
            self.thrust_log,
            reset_angular_velocity=self.blade_config.start_angular_velocity
        )

        # Simulation state
        self.time = 0.0
        self.frame_count = 0
        self.frame_dt = self.config['simulation']['frame_dt']
        self.realtime = self.config['simulation']['realtime']
        self.status_interval = self.config['simulation']['status_interval']
        self.running = False

        # Strikes resolved in the most recent tick
        self.last_strikes: List[BladeStrike] = []

    def _default_config(self) -> Dict:
        """Default configuration if no file provided"""
        return {
            'world': {
                'particle_count': 400,
                'particle_mass': 5.0,
                'spawn_half_extent': 5.0,
                'spawn_speed': 1.0,
                'wall_half_extent': 5.1,
                'pair_radius': 0.2,
                'seed': None
            },
            'blade': {
                'length': 4.0,
                'mass': 5.0,
                'start_pitch': 45.0,
                'start_angular_velocity': 20.0,
                'sweep_radius': 4.0,
                'drive_power': 50000.0
            },
            'sweep': {
                'trial_duration': 10.0,
                'trials_per_pitch': 8,
                'pitch_step': 5.0,
                'terminal_pitch': 85.0,
                'output_path': 'output.csv'
            },
            'simulation': {
                'frame_dt': 1.0 / 60.0,
                'realtime': False,
                'status_interval': 1.0
            }
        }

    @property
    def finished(self) -> bool:
        return self.controller.finished

    def tick(self, dt: float) -> TickOutcome:
        """
        Execute one simulation tick of `dt` seconds.

        Returns the trial controller's outcome for this tick. Once the
        sweep has finished, ticks do nothing.
        """
        outcome = self.controller.update(self.world, dt)
        if outcome is TickOutcome.FINISHED:
            self.running = False
            self.last_strikes = []
            return outcome

        cloud = self.world.particles

        # 1. Free flight
        integrate_positions(cloud, dt)

        # 2. Cube walls
        reflect_walls(cloud, self.world_config.wall_half_extent)

        # 3. Particle-particle exchanges
        resolve_particle_pairs(cloud, dt, self.world_config.pair_radius)

        # 4. Blade strikes
        self.last_strikes = resolve_blade_collisions(self.world, self.blade_config.sweep_radius)

        # 5. Blade drive and rotation
        update_blade(self.world.propeller, dt, self.blade_config.drive_power)

        # 6. Update time
        self.time += dt
        self.frame_count += 1

        return outcome

    def get_render_state(self) -> RenderState:
        """Transforms and debug lines for the render collaborator."""
        propeller = self.world.propeller

        strike_lines = []
        for strike in self.last_strikes:
            strike_lines.append((np.zeros(3), strike.impulse.copy(), 'impulse'))
            strike_lines.append((np.zeros(3), strike.moment_arm.copy(), 'moment_arm'))

        return RenderState(
            particle_positions=self.world.particles.positions.copy(),
            blade_translation=propeller.translation.copy(),
            blade_orientation=propeller.orientation.copy(),
            boundary_edges=boundary_cube_edges(self.world_config.wall_half_extent),
            strike_lines=strike_lines,
            hud_text={
                'pitch': f"{propeller.pitch:.1f}°",
                'trial': f"{self.controller.current_trial}/{self.sweep_config.trials_per_pitch}",
                'angular_velocity': f"{propeller.angular_velocity:.1f} deg/s",
                'impulse': f"{propeller.total_vertical_impulse:.4f}",
                'kinetic_energy': f"{self.world.particles.kinetic_energy:.1f}"
            }
        )

    def run(self,
            frame_dt: Optional[float] = None,
            max_frames: Optional[int] = None,
            realtime: Optional[bool] = None,
            callback: Optional[Callable] = None) -> int:
        """
        Tick until the sweep finishes (or `max_frames` ticks have run).

        Args:
            frame_dt: Fixed tick length in seconds (default from config)
            max_frames: Optional cap on ticks
            realtime: Use wall-clock deltas between ticks instead of frame_dt
            callback: Optional function called after each tick with the simulation

        Returns:
            Number of ticks executed
        """
        frame_dt = self.frame_dt if frame_dt is None else frame_dt
        realtime = self.realtime if realtime is None else realtime

        self.running = True
        start_time = time.time()
        last_frame = time.perf_counter()
        next_status = self.time + self.status_interval
        frames = 0

        print(f"Starting Propeller Sweep - Pitch {self.world.propeller.pitch:.1f}° "
              f"to {self.sweep_config.terminal_pitch:.1f}°")
        print("=" * 50)

        while self.running and not self.finished:
            if max_frames is not None and frames >= max_frames:
                break

            if realtime:
                now = time.perf_counter()
                dt = now - last_frame
                last_frame = now
            else:
                dt = frame_dt

            outcome = self.tick(dt)
            if outcome is TickOutcome.FINISHED:
                break
            frames += 1

            if callback:
                callback(self)

            if self.time >= next_status:
                self._print_status()
                next_status += self.status_interval

        self.running = False
        real_time = time.time() - start_time
        print("=" * 50)
        print(f"Sweep {'complete' if self.finished else 'stopped'}. "
              f"Sim time: {self.time:.2f}s, Real time: {real_time:.2f}s")
        return frames

    def _print_status(self):
        """Print compact status line"""
        propeller = self.world.propeller
        print(f"T={self.time:7.1f}s | "
              f"Pitch: {propeller.pitch:4.1f}° | "
              f"Trial: {self.controller.current_trial}/{self.sweep_config.trials_per_pitch} | "
              f"ω: {propeller.angular_velocity:8.1f} deg/s | "
              f"Impulse: {propeller.total_vertical_impulse:9.4f} | "
              f"KE: {self.world.particles.kinetic_energy:9.1f}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Propeller pitch sweep simulation")
    parser.add_argument("--config", type=str, default=None, help="YAML configuration file")
    parser.add_argument("--output", type=str, default=None, help="CSV output path")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--max-frames", type=int, default=None, help="Stop after this many ticks")
    parser.add_argument("--realtime", action="store_true", help="Use wall-clock frame deltas")
    args = parser.parse_args(argv)

    config_path = args.config
    if config_path is None:
        default_path = Path(__file__).resolve().parents[2] / "config" / "sweep_params.yaml"
        if default_path.exists():
            config_path = str(default_path)

    overrides = {}
    if args.output is not None:
        overrides['sweep'] = {'output_path': args.output}
    if args.seed is not None:
        overrides['world'] = {'seed': args.seed}
    if args.realtime:
        overrides['simulation'] = {'realtime': True}

    sim = PropellerSweepSimulation(config_path, overrides)

    renderer = create_renderer('headless', max_frames=args.max_frames)
    renderer.set_simulation(sim)
    renderer.run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
