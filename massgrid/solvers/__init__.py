# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Solvers module for mass-spring grid simulations

from .two_phase import SolverTwoPhase
from .solver import SolverBase

__all__ = [
    "SolverBase",
    "SolverTwoPhase",
]
