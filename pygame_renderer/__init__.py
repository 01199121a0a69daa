"""
Pygame Renderer for the Mass-Spring Grid.

This module provides the rendering used by:
- demo/demo_touch_grid.py

Main classes:
- Renderer: pygame-based top-down view of the grid, coloured by height
"""

from .renderer import Renderer

__all__ = ['Renderer']
