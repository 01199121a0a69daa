# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Velocity and position kernels for the two-phase grid integrator

import warp as wp


@wp.func
def grid_spring_force(
    xi: wp.vec3,
    xj: wp.vec3,
    stiffness: float,
    rest: float,
):
    """
    Hooke force on vertex i from the spring to vertex j.

    Pulls i towards j when the spring is stretched, pushes it away when
    compressed.
    """
    d = xj - xi
    l = wp.length(d)

    f = wp.vec3(0.0, 0.0, 0.0)

    # Degenerate (coincident) vertices have no direction
    if l > 1.0e-6:
        f = d * (stiffness * (l - rest) / l)

    return f


@wp.kernel
def eval_grid_velocity(
    x: wp.array(dtype=wp.vec3),
    v: wp.array(dtype=wp.vec3),
    external_forces: wp.array(dtype=wp.vec3),
    neighbor_indices: wp.array2d(dtype=int),
    neighbor_exists: wp.array2d(dtype=int),
    neighbor_rest_scale: wp.array(dtype=float),
    grid_res_x: int,
    mass: float,
    damping: float,
    stiffness: float,
    rest_length: float,
    dt: float,
    v_new: wp.array(dtype=wp.vec3),
):
    """
    Velocity phase.

    f = f_ext + sum_n k * (|x_j - x_i| - L_n) * dir(i -> j)
    v_{n+1} = (v_n + f / m * dt) * damping

    Positions are read from the pre-phase snapshot only, so every vertex
    can be updated independently. Slots flagged as missing are skipped
    before their index is touched.
    """
    row, col = wp.tid()
    i = col + row * grid_res_x

    xi = x[i]
    f = external_forces[i]

    for n in range(12):
        if neighbor_exists[i, n] != 0:
            j = neighbor_indices[i, n]
            f = f + grid_spring_force(xi, x[j], stiffness, rest_length * neighbor_rest_scale[n])

    acc = f / mass
    v_new[i] = (v[i] + acc * dt) * damping


@wp.kernel
def integrate_grid_positions(
    x: wp.array(dtype=wp.vec3),
    v_new: wp.array(dtype=wp.vec3),
    grid_res_x: int,
    dt: float,
    x_new: wp.array(dtype=wp.vec3),
):
    """
    Position phase.

    x_{n+1} = x_n + v_{n+1} * dt
    """
    row, col = wp.tid()
    i = col + row * grid_res_x

    x_new[i] = x[i] + v_new[i] * dt


# ============================================================================
# High-level wrapper functions
# ============================================================================

def launch_velocity_phase(model, state_in, external_forces: wp.array, dt: float, v_out: wp.array):
    """
    Run the velocity phase over every vertex (wrapper function).

    The launch covers the grid as (rows, cols) with one tile of threads
    per block.
    """
    params = model.params
    grid = model.grid_config

    wp.launch(
        kernel=eval_grid_velocity,
        dim=(model.grid_res_y, model.grid_res_x),
        inputs=[
            state_in.particle_q,
            state_in.particle_qd,
            external_forces,
            model.neighbor_indices,
            model.neighbor_exists,
            model.neighbor_rest_scale,
            model.grid_res_x,
            float(params.mass),
            float(params.damping),
            float(params.stiffness),
            float(params.rest_length),
            float(dt),
        ],
        outputs=[v_out],
        device=model.device,
        block_dim=grid.threads_per_tile,
    )


def launch_position_phase(model, state_in, v_new: wp.array, dt: float, x_out: wp.array):
    """Run the position phase over every vertex (wrapper function)."""
    wp.launch(
        kernel=integrate_grid_positions,
        dim=(model.grid_res_y, model.grid_res_x),
        inputs=[
            state_in.particle_q,
            v_new,
            model.grid_res_x,
            float(dt),
        ],
        outputs=[x_out],
        device=model.device,
        block_dim=model.grid_config.threads_per_tile,
    )
