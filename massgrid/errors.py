# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Exception types for the mass-spring grid


class MassGridError(Exception):
    """Base class for all mass-spring grid errors."""


class ConfigurationError(MassGridError, ValueError):
    """Out-of-range parameter, invalid dispatch layout or missing collaborator."""


class NeighborTableError(MassGridError, RuntimeError):
    """
    The neighbour table references a vertex outside the grid or across the
    row wrap-around. Only a construction bug can cause this.
    """
