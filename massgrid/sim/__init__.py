# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0

from .state import State
from .model import Model
from .topology import GridTopology
from .neighbors import NeighborEntry, NeighborTable, NEIGHBOR_SLOTS, REST_SCALE

__all__ = [
    "Model",
    "State",
    "GridTopology",
    "NeighborEntry",
    "NeighborTable",
    "NEIGHBOR_SLOTS",
    "REST_SCALE",
]
