# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
"""
massgrid: Warp-accelerated 2D mass-spring grid.

A fixed grid of point masses joined by structural and bend springs,
integrated every tick with a velocity pass followed by a position pass.
Touch/pointer events press on the interior of the grid; the two-vertex
border stays rigid.
"""

from .config import GridConfig, SpringParameters
from .errors import ConfigurationError, MassGridError, NeighborTableError
from .forces import ForceField, TouchEvent
from .models import GridModel
from .simulation import MassSpringSystem
from .sim import GridTopology, NeighborEntry, NeighborTable
from .solvers import SolverTwoPhase

__version__ = "0.1.0"

__all__ = [
    "GridConfig",
    "SpringParameters",
    "ConfigurationError",
    "MassGridError",
    "NeighborTableError",
    "ForceField",
    "TouchEvent",
    "GridModel",
    "MassSpringSystem",
    "GridTopology",
    "NeighborEntry",
    "NeighborTable",
    "SolverTwoPhase",
]
