# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Two-phase (velocity, then position) solver for the mass-spring grid

import warp as wp

from ..solver import SolverBase
from .kernels_grid import launch_position_phase, launch_velocity_phase


class SolverTwoPhase(SolverBase):
    """
    Damped explicit integrator for the mass-spring grid.

    Each step runs two data-parallel passes over the grid:

        1. velocity phase: v_{n+1} = (v_n + F(x_n) / m * dt) * damping
        2. position phase: x_{n+1} = x_n + v_{n+1} * dt

    The passes are separate kernel launches, so every velocity is written
    before any position update reads it. Both passes read from ``state_in``
    and write to ``state_out``; no vertex sees another vertex's result from
    the same pass.

    Example:
        >>> model = GridModel(GridConfig(tiles_x=2, tiles_y=2), SpringParameters(), device='cpu')
        >>> solver = SolverTwoPhase(model)
        >>> state_in = model.state()
        >>> state_out = model.state()
        >>>
        >>> for i in range(100):
        >>>     solver.step(state_in, state_out, dt=0.01)
        >>>     state_in, state_out = state_out, state_in
    """

    def step(self, state_in, state_out, dt: float, external_forces=None):
        """
        Advance the simulation by one timestep.

        Args:
            state_in: The input state (read only)
            state_out: The output state
            dt: The timestep (in seconds)
            external_forces: Optional external forces (numpy array [N, 3] or wp.array)

        Returns:
            state_out
        """
        self._check_dt(dt)
        model = self.model

        # The step's external forces travel with the output state
        if external_forces is not None:
            if isinstance(external_forces, wp.array):
                wp.copy(state_out.particle_f, external_forces)
            else:
                # Assume numpy array
                temp = wp.array(external_forces, dtype=wp.vec3, device='cpu')
                wp.copy(state_out.particle_f, temp)
        else:
            state_out.particle_f.zero_()

        launch_velocity_phase(model, state_in, state_out.particle_f, dt, state_out.particle_qd)
        launch_position_phase(model, state_in, state_out.particle_qd, dt, state_out.particle_q)

        return state_out
