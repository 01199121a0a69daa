# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Model class for mass-spring grid simulations

import numpy as np
import warp as wp

from ..config import SpringParameters
from .state import State


class Model:
    """
    Represents the static definition of a mass-spring grid.

    Stores the grid topology, the neighbour table, the rest configuration
    and the physical parameters read by the solver every tick.

    Key Features:
        - Vertex rest positions and velocities (vec3)
        - Neighbour table (12 slots per vertex) uploaded once
        - Physical parameters (mass, damping, stiffness, rest length)
    """

    def __init__(self, device=None):
        """
        Initialize a Model object.

        Args:
            device: Device on which the Model's data will be allocated
                ('cuda', 'cpu' or None for Warp's default device)
        """
        self.device = wp.get_device(device)

        # Grid description
        self.topology = None                # GridTopology
        self.neighbors = None               # NeighborTable (host copy)
        self.grid_config = None             # GridConfig used for dispatch

        # Vertex properties
        self.particle_q = None              # Rest positions, shape [particle_count], vec3
        self.particle_qd = None             # Initial velocities, shape [particle_count], vec3
        self.particle_count = 0             # Total number of vertices

        # Neighbour table on device
        self.neighbor_indices = None        # shape [particle_count, 12], int
        self.neighbor_exists = None         # shape [particle_count, 12], int
        self.neighbor_rest_scale = None     # shape [12], float

        # Physical parameters
        self.params = SpringParameters()

    def state(self) -> State:
        """
        Create and return a new State object for this model.

        The returned state is initialized with the rest configuration
        from the model description.

        Returns:
            State: The state object
        """
        s = State()

        if self.particle_count > 0:
            s.particle_q = wp.clone(self.particle_q)
            s.particle_qd = wp.clone(self.particle_qd)
            s.particle_f = wp.zeros(self.particle_count, dtype=wp.vec3, device=self.device)

        return s

    def set_rest_configuration(self, positions: np.ndarray):
        """Replace the rest positions and zero the initial velocities."""
        positions = np.asarray(positions, dtype=np.float32)
        self.particle_count = len(positions)
        self.particle_q = wp.array(positions, dtype=wp.vec3, device=self.device)
        self.particle_qd = wp.zeros(self.particle_count, dtype=wp.vec3, device=self.device)

    def release(self):
        self.particle_q = None
        self.particle_qd = None
        self.neighbor_indices = None
        self.neighbor_exists = None
        self.neighbor_rest_scale = None
