"""
Tests for GridTopology: indexing, rigid border and world-space mapping.
"""

import numpy as np
import pytest

from massgrid.sim.topology import GridTopology


def test_index_and_coords_are_inverse():
    topo = GridTopology(6, 5)
    assert topo.vertex_count == 30
    for i in range(topo.vertex_count):
        x, y = topo.coords(i)
        assert topo.index(x, y) == i
    assert topo.coords(13) == (1, 2)


def test_contains():
    topo = GridTopology(4, 4)
    assert topo.contains(0)
    assert topo.contains(15)
    assert not topo.contains(-1)
    assert not topo.contains(16)


def test_world_extent():
    topo = GridTopology(60, 28)
    assert topo.world_extent_x(0.5) == pytest.approx(30.0)
    assert topo.world_extent_y(0.5) == pytest.approx(14.0)


def test_interior_edge_predicate():
    topo = GridTopology(8, 8)
    # i > 2*width
    assert not topo.is_interior_edge(16)
    assert topo.is_interior_edge(18)
    # column must be in [2, width-3]
    assert not topo.is_interior_edge(25)   # column 1
    assert topo.is_interior_edge(26)       # column 2
    assert topo.is_interior_edge(29)       # column 5
    assert not topo.is_interior_edge(30)   # column 6
    # row 1 never qualifies
    assert not topo.is_interior_edge(10)


def test_interior_mask_matches_predicate():
    topo = GridTopology(9, 7)
    mask = topo.interior_mask()
    expected = [topo.is_interior_edge(i) for i in range(topo.vertex_count)]
    assert mask.tolist() == expected


def test_small_grid_has_no_interior():
    topo = GridTopology(4, 4)
    assert not topo.interior_mask().any()


def test_lattice_is_centred_with_rest_spacing():
    topo = GridTopology(5, 4)
    pos = topo.lattice_positions(0.5)

    assert pos.shape == (20, 3)
    assert pos.dtype == np.float32
    np.testing.assert_allclose(pos.mean(axis=0), 0.0, atol=1e-6)
    np.testing.assert_allclose(pos[:, 2], 0.0)

    # Horizontal and vertical neighbours are rest_length apart
    grid = pos.reshape(4, 5, 3)
    np.testing.assert_allclose(np.diff(grid[:, :, 0], axis=1), 0.5)
    np.testing.assert_allclose(np.diff(grid[:, :, 1], axis=0), 0.5)


def test_world_to_index_recovers_vertex():
    topo = GridTopology(8, 6)
    pos = topo.lattice_positions(1.5)
    for i in range(topo.vertex_count):
        assert topo.world_to_index(float(pos[i, 0]), float(pos[i, 1]), 1.5) == i


def test_world_to_cell_outside_grid():
    topo = GridTopology(8, 8)
    col, row = topo.world_to_cell(-100.0, 0.0, 1.0)
    assert col < 0
    col, row = topo.world_to_cell(0.0, 4.0, 1.0)
    assert row == 8
