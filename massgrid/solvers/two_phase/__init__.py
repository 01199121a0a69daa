# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0

from .solver_two_phase import SolverTwoPhase
from .kernels_grid import (
    eval_grid_velocity,
    integrate_grid_positions,
    launch_position_phase,
    launch_velocity_phase,
)

__all__ = [
    "SolverTwoPhase",
    "eval_grid_velocity",
    "integrate_grid_positions",
    "launch_position_phase",
    "launch_velocity_phase",
]
