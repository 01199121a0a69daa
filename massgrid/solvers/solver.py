# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Base solver class for mass-spring grid simulations


class SolverBase:
    """
    Generic base class for grid solvers.

    Holds the model and defines the interface that concrete solvers
    must implement.
    """

    def __init__(self, model):
        """
        Initialize the solver with a model.

        Args:
            model: The GridModel object containing the system description
        """
        self.model = model

    @property
    def device(self):
        """
        Get the device used by the solver.

        Returns:
            The device used by the solver
        """
        return self.model.device

    def step(self, state_in, state_out, dt: float, external_forces=None):
        """
        Simulate the model for a given time step.

        Must be implemented by concrete solver subclasses.

        Args:
            state_in: The input state
            state_out: The output state
            dt: The time step (in seconds)
            external_forces: Optional external forces for this step
        """
        raise NotImplementedError("Concrete solvers must implement step()")

    @staticmethod
    def _check_dt(dt: float):
        if not dt > 0.0:
            raise ValueError(f"Time step must be positive (got {dt})")
