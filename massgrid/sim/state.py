# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# State class for the mass-spring grid


class State:
    """
    Represents the time-varying state of the grid.

    Contains vertex positions, velocities and external forces.

    Attributes:
        particle_q: Positions (vec3), shape [vertex_count]
        particle_qd: Velocities (vec3), shape [vertex_count]
        particle_f: External forces (vec3), shape [vertex_count]
    """

    def __init__(self):
        self.particle_q = None    # Positions (vec3)
        self.particle_qd = None   # Velocities (vec3)
        self.particle_f = None    # External forces (vec3)

    def release(self):
        self.particle_q = None
        self.particle_qd = None
        self.particle_f = None

    @property
    def allocated(self) -> bool:
        return self.particle_q is not None
