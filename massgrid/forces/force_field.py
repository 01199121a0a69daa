# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Per-tick external force buffer assembled from touch/pointer events

import math
from typing import Iterable, NamedTuple

import numpy as np

from ..sim.neighbors import direct_neighbors


class TouchEvent(NamedTuple):
    """A touch or pointer event in world space on the grid plane."""
    x: float
    y: float
    pressure: float = 1.0


class ForceField:
    """
    Builds the external force buffer for one tick.

    Pressure is applied orthogonally to the grid plane (negative z) and only
    at interior vertices, so the two-vertex border stays rigid no matter how
    hard it is pressed.

    Example:
        >>> field = ForceField(model)
        >>> forces = field.assemble([TouchEvent(0.0, 0.0, 1.0)])
        >>> forces.shape
        (64, 3)
    """

    def __init__(self, model):
        """
        Args:
            model: The GridModel whose topology and parameters are used
        """
        self.model = model
        self.topology = model.topology
        self.forces_np = np.zeros((self.topology.vertex_count, 3), dtype=np.float32)
        self.dropped_events = 0

    def reset(self):
        self.forces_np.fill(0.0)

    def apply_pressure(self, index: int, pressure: float):
        """Set the force at ``index`` from ``pressure``; no-op on the rigid border."""
        if self.topology.is_interior_edge(index):
            self.forces_np[index] = (0.0, 0.0, -self.model.params.max_touch_force * pressure)

    def apply_pressure_to_neighbors(self, index: int, pressure: float):
        """Apply half of ``pressure`` to each of the 8 direct neighbours of ``index``."""
        for n in direct_neighbors(index, self.topology.width):
            self.apply_pressure(n, pressure * 0.5)

    def apply_event(self, x: float, y: float, pressure: float) -> bool:
        """
        Turn one world-space event into pressure on the grid.

        Pressure is clipped to [0, 1]. Non-finite coordinates or pressure are
        dropped like out-of-grid events.

        Returns:
            False if the event was dropped
        """
        if not (math.isfinite(x) and math.isfinite(y) and math.isfinite(pressure)):
            print(f"Warning: Touch or mouse input at ({x}, {y}) with pressure {pressure} "
                  f"is not finite, skipping")
            self.dropped_events += 1
            return False
        pressure = min(max(pressure, 0.0), 1.0)

        rest_length = self.model.params.rest_length
        col, row = self.topology.world_to_cell(x, y, rest_length)
        index = col + row * self.topology.width

        if not (0 <= col < self.topology.width and 0 <= row < self.topology.height):
            print(f"Warning: Touch or mouse input at ({x:.3f}, {y:.3f}) generated out of bounds "
                  f"grid index {index}, skipping")
            self.dropped_events += 1
            return False

        self.apply_pressure(index, pressure)
        self.apply_pressure_to_neighbors(index, pressure)
        return True

    def assemble(self, events: Iterable) -> np.ndarray:
        """
        Rebuild the force buffer from this tick's events.

        Args:
            events: Iterable of (x, y, pressure) tuples or TouchEvent

        Returns:
            Copy of the force buffer, shape [vertex_count, 3], float32
        """
        self.reset()
        for event in events:
            x, y, pressure = event
            self.apply_event(float(x), float(y), float(pressure))
        return self.forces_np.copy()
