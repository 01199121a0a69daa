# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Buffer ownership and per-tick orchestration of the mass-spring grid

import math
from typing import Iterable

import numpy as np
import warp as wp

from .config import GridConfig, SpringParameters
from .errors import ConfigurationError
from .forces import ForceField
from .models import GridModel
from .sim.neighbors import REST_SCALE
from .solvers import SolverTwoPhase


class MassSpringSystem:
    """
    Owns the simulation buffers and runs one tick at a time.

    Architecture:
        - models.GridModel: static description (topology, neighbour table, parameters)
        - sim.State: double-buffered positions, velocities and external forces
        - forces.ForceField: turns this tick's touch events into external forces
        - solvers.SolverTwoPhase: velocity phase followed by position phase

    Per tick: assemble forces -> velocity phase -> position phase -> swap
    buffers -> publish a read-only position snapshot.

    Example:
        >>> system = MassSpringSystem(GridConfig(tiles_x=2, tiles_y=2), device='cpu')
        >>> positions = system.tick(0.016, [(0.0, 0.0, 1.0)])
        >>> positions.shape
        (64, 3)
        >>> system.shutdown()
    """

    def __init__(self, grid: GridConfig = None, params: SpringParameters = SpringParameters(),
                 device=None, allocate: bool = True):
        """
        Args:
            grid: Dispatch layout; defaults to 15x7 tiles of 4x4 threads
            params: Physical parameters, validated before anything is allocated
            device: Warp device ('cuda', 'cpu' or None for the default device)
            allocate: If False, buffers are created later by create_buffers()
        """
        if params is None:
            raise ConfigurationError("MassSpringSystem requires SpringParameters")
        self.grid = (grid if grid is not None else GridConfig()).validate()
        self.params = params.validate()

        wp.init()
        self.device = device

        self.model = None
        self.solver = None
        self.force_field = None
        self.state_in = None
        self.state_out = None
        self.tick_count = 0
        self.t = 0.0

        if allocate:
            self.create_buffers()

    # ========================================================================
    # CONSTRUCTION / DESTRUCTION
    # ========================================================================

    def create_buffers(self):
        """Build the model and allocate double-buffered state at rest."""
        self.model = GridModel(self.grid, self.params, device=self.device)
        self.params = self.model.params
        self.solver = SolverTwoPhase(self.model)
        self.force_field = ForceField(self.model)
        self.reset_buffers()

    def reset_buffers(self):
        """
        Return to the resting grid: lattice positions for the current rest
        length, zero velocities and zero forces.
        """
        self._require_buffers()
        self.model.reset_rest_configuration()
        self.state_in = self.model.state()
        self.state_out = self.model.state()
        self.force_field.reset()
        self.tick_count = 0
        self.t = 0.0

    def release_buffers(self):
        """Release every buffer. Safe to call repeatedly or before allocation."""
        if self.state_in is not None:
            self.state_in.release()
        if self.state_out is not None:
            self.state_out.release()
        if self.model is not None:
            self.model.release()
        self.state_in = None
        self.state_out = None
        self.model = None
        self.solver = None
        self.force_field = None

    def shutdown(self):
        self.release_buffers()

    @property
    def is_allocated(self) -> bool:
        return self.model is not None

    def _require_buffers(self):
        if self.model is None:
            raise RuntimeError("MassSpringSystem buffers have been released")

    # ========================================================================
    # SIMULATION
    # ========================================================================

    def tick(self, dt: float, events: Iterable = ()) -> np.ndarray:
        """
        Advance the grid by one tick.

        Args:
            dt: Elapsed time for this tick, > 0
            events: Touch/pointer events as (world_x, world_y, pressure)

        Returns:
            Read-only positions, shape [vertex_count, 3]
        """
        self._require_buffers()
        if not dt > 0.0:
            raise ValueError(f"Time step must be positive (got {dt})")

        forces = self.force_field.assemble(events)

        self.solver.step(self.state_in, self.state_out, dt, external_forces=forces)

        # Swap state buffers
        self.state_in, self.state_out = self.state_out, self.state_in

        self.tick_count += 1
        self.t += dt

        return self.positions()

    def set_parameters(self, **changes):
        """
        Update physical parameters between ticks.

        A new rest length no longer matches the rest lattice, so it resets
        the grid.
        """
        self._require_buffers()
        new_params = self.params.replace(**changes)
        reset = new_params.rest_length != self.params.rest_length

        self.params = new_params
        self.model.params = new_params

        if reset:
            print(f"✓ Rest length changed to {new_params.rest_length}, grid reset")
            self.reset_buffers()

    def animate_grid(self, elapsed: float, gesture_time: float = 1.0,
                     amplitude: float = 20.0, frequency: float = 0.1):
        """
        Scripted disturbance: drive the velocity of the interior of row 2
        with a sine that fades out over ``gesture_time`` seconds.

        Call between ticks with the elapsed simulation time.
        """
        self._require_buffers()
        width = self.model.grid_res_x
        fade = (gesture_time - elapsed) / gesture_time if elapsed < gesture_time else 0.0
        vz = math.sin(elapsed * frequency) * fade * amplitude

        velocities = self.state_in.particle_qd.numpy().copy()
        velocities[2 * width + 2:3 * width - 2] = (0.0, 0.0, vz)
        self.state_in.particle_qd.assign(wp.array(velocities, dtype=wp.vec3, device=self.model.device))

    # ========================================================================
    # SNAPSHOTS
    # ========================================================================

    @staticmethod
    def _snapshot(array: wp.array) -> np.ndarray:
        out = array.numpy().copy()
        out.setflags(write=False)
        return out

    def positions(self) -> np.ndarray:
        self._require_buffers()
        return self._snapshot(self.state_in.particle_q)

    def velocities(self) -> np.ndarray:
        self._require_buffers()
        return self._snapshot(self.state_in.particle_qd)

    def external_forces(self) -> np.ndarray:
        """Forces applied during the most recent tick."""
        self._require_buffers()
        return self._snapshot(self.state_in.particle_f)

    @property
    def vertex_count(self) -> int:
        return self.grid.vertex_count

    def world_grid_side_length_x(self) -> float:
        self._require_buffers()
        return self.model.world_grid_side_length_x()

    def world_grid_side_length_y(self) -> float:
        self._require_buffers()
        return self.model.world_grid_side_length_y()

    # ========================================================================
    # ENERGY
    # ========================================================================

    def kinetic_energy(self) -> float:
        vel = self.velocities().astype(np.float64)
        return float(0.5 * self.params.mass * np.sum(vel ** 2))

    def spring_potential_energy(self) -> float:
        """
        Total spring energy 0.5 * k * (l - L_n)^2, each spring counted once.

        Every spring appears in the table of both of its end vertices, so the
        per-slot sum is halved.
        """
        pos = self.positions().astype(np.float64)
        table = self.model.neighbors
        live = table.exists == 1
        i, slot = np.nonzero(live)
        j = table.indices[live]

        lengths = np.linalg.norm(pos[j] - pos[i], axis=1)
        rest = self.params.rest_length * REST_SCALE[slot].astype(np.float64)
        return float(0.25 * self.params.stiffness * np.sum((lengths - rest) ** 2))
