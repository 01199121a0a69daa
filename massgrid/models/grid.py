# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Rectangular mass-spring grid model

from ..config import GridConfig, SpringParameters
from ..errors import ConfigurationError
from ..sim.model import Model
from ..sim.neighbors import NUM_NEIGHBORS, NeighborTable
from ..sim.topology import GridTopology


class GridModel(Model):
    """
    Mass-spring model with rectangular grid geometry.

    Every vertex is connected to its 8 direct neighbours (structural springs)
    and to the 4 vertices two steps away along the cardinal axes (bend
    springs). The rest lattice lies in the z = 0 plane, centred on the origin,
    with vertices spaced by ``params.rest_length``.

    Args:
        grid: Dispatch layout (tiles and threads per tile). Default 15x7 tiles
            of 4x4 threads = 60x28 vertices.
        params: Physical parameters. Validated on construction.
        device: Warp device ('cuda', 'cpu' or None for the default device)

    Example:
        >>> model = GridModel(GridConfig(tiles_x=2, tiles_y=2), device='cpu')
        >>> model.particle_count
        64
        >>> state = model.state()
    """

    def __init__(self, grid: GridConfig = None, params: SpringParameters = None, device=None):
        super().__init__(device=device)

        if grid is None:
            grid = GridConfig()
        if params is None:
            raise ConfigurationError("GridModel requires SpringParameters")

        self.grid_config = grid.validate()
        self.params = params.validate()

        self.topology = GridTopology(grid.width, grid.height)
        self.grid_res_x = self.topology.width
        self.grid_res_y = self.topology.height

        # Neighbour table is built once and never changes
        self.neighbors = NeighborTable(self.topology)
        self.neighbor_indices, self.neighbor_exists, self.neighbor_rest_scale = \
            self.neighbors.to_warp(self.device)

        self.reset_rest_configuration()

        print(f"✓ Created {self.grid_res_x}x{self.grid_res_y} grid = {self.particle_count} vertices "
              f"({grid.tiles_x}x{grid.tiles_y} tiles of {grid.threads_x}x{grid.threads_y})")
        print(f"✓ Created neighbour table: {self.neighbors.existing_count} of "
              f"{self.particle_count * NUM_NEIGHBORS} slots connected")

    def reset_rest_configuration(self):
        """Lay the vertices out on the rest lattice for the current rest length."""
        self.set_rest_configuration(self.topology.lattice_positions(self.params.rest_length))

    def world_grid_side_length_x(self) -> float:
        return self.topology.world_extent_x(self.params.rest_length)

    def world_grid_side_length_y(self) -> float:
        return self.topology.world_extent_y(self.params.rest_length)
