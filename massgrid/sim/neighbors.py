# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Precomputed neighbour table: 8 direct + 4 bend neighbours per vertex

from typing import List, NamedTuple

import numpy as np
import warp as wp

from ..errors import NeighborTableError
from .topology import GridTopology


NEIGHBOR_SLOTS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW", "Nb", "Eb", "Sb", "Wb")
NUM_NEIGHBORS = len(NEIGHBOR_SLOTS)
NUM_DIRECT = 8

# Rest distance of each slot in units of rest_length
REST_SCALE = np.array(
    [1.0, np.sqrt(2.0), 1.0, np.sqrt(2.0), 1.0, np.sqrt(2.0), 1.0, np.sqrt(2.0), 2.0, 2.0, 2.0, 2.0],
    dtype=np.float32,
)

# Lattice step (dx, dy) of each slot, used to verify the table
SLOT_OFFSETS = (
    (0, 1), (1, 1), (1, 0), (1, -1), (0, -1), (-1, -1), (-1, 0), (-1, 1),
    (0, 2), (2, 0), (0, -2), (-2, 0),
)


class NeighborEntry(NamedTuple):
    index: int
    exists: bool


def direct_neighbors(index: int, width: int) -> List[int]:
    """
    Raw indices of the 8 direct neighbours in clockwise order
    (n, ne, e, se, s, sw, w, nw). Bounds are NOT checked.
    """
    return [
        index + width, index + width + 1, index + 1, index - width + 1,
        index - width, index - width - 1, index - 1, index + width - 1,
    ]


def _vertical_exists(idx, count):
    return (idx >= 0) & (idx < count)


def _east_exists(idx, width, count):
    return (np.mod(idx, width) > 0) & (idx < count)


def _east_bend_exists(idx, width, count):
    return (np.mod(idx, width) > 1) & (idx < count)


def _west_exists(idx, width):
    return (np.mod(idx, width) < width - 1) & (idx >= 0)


def _west_bend_exists(idx, width):
    return (np.mod(idx, width) < width - 2) & (idx >= 0)


class NeighborTable:
    """
    Per-vertex table of 12 ``(index, exists)`` neighbour pairs.

    Slots are ordered N, NE, E, SE, S, SW, W, NW followed by the bend slots
    Nb, Eb, Sb, Wb. A slot with ``exists == 0`` points outside the grid (or
    across the row wrap-around) and must never be dereferenced.

    The table is built once and is immutable afterwards.

    Attributes:
        indices: Raw neighbour indices, shape [vertex_count, 12], int32
        exists: Existence flags (0/1), shape [vertex_count, 12], int32
    """

    def __init__(self, topology: GridTopology):
        self.topology = topology
        self.indices, self.exists = self._build(topology.width, topology.vertex_count)
        self._verify()
        self.indices.setflags(write=False)
        self.exists.setflags(write=False)

    @staticmethod
    def _build(width, count):
        i = np.arange(count, dtype=np.int64)
        n, ne, e, se, s, sw, w, nw = direct_neighbors(i, width)
        nb, eb, sb, wb = n + width, e + 1, s - width, w - 1
        indices = np.stack([n, ne, e, se, s, sw, w, nw, nb, eb, sb, wb], axis=1)

        exists = np.stack([
            _vertical_exists(n, count),
            _vertical_exists(ne, count) & _east_exists(ne, width, count),
            _east_exists(e, width, count),
            _vertical_exists(se, count) & _east_exists(se, width, count),
            _vertical_exists(s, count),
            _vertical_exists(sw, count) & _west_exists(sw, width),
            _west_exists(w, width),
            _vertical_exists(nw, count) & _west_exists(nw, width),
            _vertical_exists(nb, count),
            _east_bend_exists(eb, width, count),
            _vertical_exists(sb, count),
            _west_bend_exists(wb, width),
        ], axis=1)

        return indices.astype(np.int32), exists.astype(np.int32)

    def _verify(self):
        """Every existing slot must be the true lattice neighbour inside the grid."""
        topo = self.topology
        count = topo.vertex_count
        i = np.arange(count)
        col = i % topo.width
        row = i // topo.width
        for slot, (dx, dy) in enumerate(SLOT_OFFSETS):
            live = self.exists[:, slot] == 1
            idx = self.indices[live, slot]
            if np.any(idx < 0) or np.any(idx >= count):
                raise NeighborTableError(f"Slot {NEIGHBOR_SLOTS[slot]} references a vertex outside the grid")
            if np.any(idx % topo.width != col[live] + dx) or np.any(idx // topo.width != row[live] + dy):
                raise NeighborTableError(f"Slot {NEIGHBOR_SLOTS[slot]} wraps across a grid edge")

    def __len__(self):
        return self.topology.vertex_count

    def neighbors_of(self, i: int) -> List[NeighborEntry]:
        return [
            NeighborEntry(int(idx), bool(flag))
            for idx, flag in zip(self.indices[i], self.exists[i])
        ]

    @property
    def existing_count(self) -> int:
        return int(self.exists.sum())

    def to_warp(self, device):
        """Upload the table; returns (indices, exists, rest_scale) warp arrays."""
        return (
            wp.array(self.indices, dtype=int, device=device),
            wp.array(self.exists, dtype=int, device=device),
            wp.array(REST_SCALE, dtype=float, device=device),
        )
