"""
Propeller Sweep Visualization Interface
=======================================

Pluggable render-loop collaborator.
The simulation core never draws anything: a renderer calls `tick(dt)`
once per frame and reads back a RenderState to draw.

Supported engines:
- Headless - No rendering, drives the sweep and keeps the latest state

Usage:
    from propsweep.visualization.engine_interface import create_renderer

    renderer = create_renderer('headless')
    renderer.set_simulation(sim)
    renderer.run()
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
import numpy as np


# Edges of the bounding cube, as corner index pairs
CUBE_EDGES = [
    (0, 1), (1, 2), (2, 3), (3, 0),  # Bottom square
    (4, 5), (5, 6), (6, 7), (7, 4),  # Top square
    (0, 4), (1, 5), (2, 6), (3, 7),  # Vertical edges
]


def boundary_cube_edges(half_size: float = 5.1) -> List[Tuple[np.ndarray, np.ndarray]]:
    """Line segments outlining the bounding cube."""
    h = half_size
    corners = [
        np.array([-h, -h, -h]),
        np.array([h, -h, -h]),
        np.array([h, h, -h]),
        np.array([-h, h, -h]),
        np.array([-h, -h, h]),
        np.array([h, -h, h]),
        np.array([h, h, h]),
        np.array([-h, h, h]),
    ]
    return [(corners[start], corners[end]) for start, end in CUBE_EDGES]


@dataclass
class RenderState:
    """Snapshot of everything a renderer needs for one frame."""

    # Particles
    particle_positions: np.ndarray

    # Blade (mesh centred on its span)
    blade_translation: np.ndarray
    blade_orientation: np.ndarray  # Quaternion [w, x, y, z]

    # Debug lines
    boundary_edges: list = None    # [(start, end), ...]
    strike_lines: list = None      # [(start, end, kind), ...] kind in {'impulse', 'moment_arm'}

    # HUD
    hud_text: Dict[str, str] = None


class RendererInterface(ABC):
    """Abstract base for all renderers."""

    @abstractmethod
    def initialize(self):
        """Initialize the rendering engine."""
        pass

    @abstractmethod
    def set_simulation(self, sim):
        """Connect to the sweep simulation."""
        pass

    @abstractmethod
    def update_state(self, state: RenderState):
        """Push new state to renderer."""
        pass

    @abstractmethod
    def render_frame(self, dt: float):
        """Advance the simulation by dt and render one frame."""
        pass

    @abstractmethod
    def run(self):
        """Run the render loop (blocking)."""
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """Check if renderer is still active."""
        pass

    @abstractmethod
    def shutdown(self):
        """Clean up resources."""
        pass


class HeadlessRenderer(RendererInterface):
    """Display-free render loop: ticks the sweep and keeps the latest state."""

    def __init__(self,
                 frame_dt: Optional[float] = None,
                 max_frames: Optional[int] = None,
                 realtime: Optional[bool] = None):
        self._running = False
        self._frame_count = 0
        self.sim = None
        self.state: Optional[RenderState] = None

        # None defers to the simulation's own settings
        self.frame_dt = frame_dt
        self.max_frames = max_frames
        self.realtime = realtime

    def initialize(self):
        self._running = True
        print("[Headless] Renderer initialized (no display)")

    def set_simulation(self, sim):
        self.sim = sim

    def update_state(self, state: RenderState):
        self.state = state

    def render_frame(self, dt: float):
        self.sim.tick(dt)
        self._on_frame(self.sim)

    def _on_frame(self, sim):
        self._frame_count += 1
        self.update_state(sim.get_render_state())

    def run(self):
        if self.sim is None:
            raise RuntimeError("No simulation connected; call set_simulation() first")

        self._running = True
        print("[Headless] Running (no visual output)")
        self.sim.run(
            frame_dt=self.frame_dt,
            max_frames=self.max_frames,
            realtime=self.realtime,
            callback=self._on_frame
        )
        self.shutdown()

    def is_running(self) -> bool:
        return self._running

    def shutdown(self):
        self._running = False
        print(f"[Headless] Shutdown after {self._frame_count} frames")

    @property
    def frame_count(self) -> int:
        return self._frame_count


# Registry of available engines
RENDERERS = {
    'headless': HeadlessRenderer,
    'none': HeadlessRenderer,  # Alias
}


def create_renderer(engine: str = 'headless', **kwargs) -> RendererInterface:
    """
    Create a renderer instance.

    Args:
        engine: One of the RENDERERS keys
        **kwargs: Passed to the renderer constructor

    Returns:
        Initialized renderer
    """
    engine = engine.lower()

    if engine not in RENDERERS:
        available = ', '.join(RENDERERS.keys())
        raise ValueError(f"Unknown engine '{engine}'. Available: {available}")

    renderer = RENDERERS[engine](**kwargs)
    renderer.initialize()

    return renderer
