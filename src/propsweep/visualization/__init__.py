"""
Visualization Module
====================
Render-loop collaborators for the propeller sweep simulation.
"""

from .engine_interface import (
    RenderState,
    RendererInterface,
    HeadlessRenderer,
    create_renderer,
    boundary_cube_edges
)

__all__ = [
    'RenderState',
    'RendererInterface',
    'HeadlessRenderer',
    'create_renderer',
    'boundary_cube_edges'
]
