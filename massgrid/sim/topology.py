# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Grid dimensions, linear indexing and rigid-border tests

import math

import numpy as np


class GridTopology:
    """
    Stateless description of a ``width`` x ``height`` vertex grid.

    Vertices are addressed by a single linear index ``i = x + y * width``.
    The outer two rows/columns form a rigid border that never receives
    externally injected force.

    Example:
        >>> topo = GridTopology(8, 8)
        >>> topo.index(3, 2)
        19
        >>> topo.coords(19)
        (3, 2)
        >>> topo.is_interior_edge(19)
        True
    """

    def __init__(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)
        self.vertex_count = self.width * self.height

    def __repr__(self):
        return f"GridTopology(width={self.width}, height={self.height})"

    def index(self, x: int, y: int) -> int:
        return x + y * self.width

    def coords(self, i: int):
        return i % self.width, i // self.width

    def contains(self, i: int) -> bool:
        return 0 <= i < self.vertex_count

    def is_interior_edge(self, i: int) -> bool:
        """True if vertex ``i`` lies outside the rigid border and accepts force."""
        col = i % self.width
        return (
            i > 2 * self.width
            and 2 <= col <= self.width - 3
            and i < self.vertex_count - 2
        )

    def interior_mask(self) -> np.ndarray:
        """Boolean mask over all vertices, vectorized ``is_interior_edge``."""
        i = np.arange(self.vertex_count)
        col = i % self.width
        return (i > 2 * self.width) & (col >= 2) & (col <= self.width - 3) & (i < self.vertex_count - 2)

    # ========================================================================
    # WORLD SPACE
    # ========================================================================

    def world_extent_x(self, rest_length: float) -> float:
        return self.width * rest_length

    def world_extent_y(self, rest_length: float) -> float:
        return self.height * rest_length

    def lattice_positions(self, rest_length: float) -> np.ndarray:
        """
        Resting lattice, shape [vertex_count, 3], float32.

        Vertices are spaced by ``rest_length`` and the lattice is centred on
        the origin in the z = 0 plane.
        """
        i = np.arange(self.vertex_count)
        col = (i % self.width).astype(np.float64)
        row = (i // self.width).astype(np.float64)
        positions = np.zeros((self.vertex_count, 3), dtype=np.float32)
        positions[:, 0] = (col - (self.width - 1) / 2.0) * rest_length
        positions[:, 1] = (row - (self.height - 1) / 2.0) * rest_length
        return positions

    def world_to_cell(self, wx: float, wy: float, rest_length: float):
        """
        Map a world-space point on the grid plane to (column, row).

        The grid's world extent is rescaled linearly onto [0, width) x [0, height),
        so each vertex owns the square cell of side ``rest_length`` around it.
        The result may lie outside the grid.
        """
        extent_x = self.world_extent_x(rest_length)
        extent_y = self.world_extent_y(rest_length)
        col = math.floor((wx + extent_x / 2.0) / extent_x * self.width)
        row = math.floor((wy + extent_y / 2.0) / extent_y * self.height)
        return col, row

    def world_to_index(self, wx: float, wy: float, rest_length: float) -> int:
        col, row = self.world_to_cell(wx, wy, rest_length)
        return col + row * self.width
