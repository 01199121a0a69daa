# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Configuration dataclasses for the mass-spring grid

from dataclasses import dataclass, fields, replace as dc_replace

from .errors import ConfigurationError


@dataclass(frozen=True)
class GridConfig:
    """
    Dispatch layout of the grid.

    The grid is processed in tiles of ``threads_x`` by ``threads_y`` vertices,
    with ``tiles_x`` tiles along X and ``tiles_y`` along Y. The grid resolution
    follows from the layout, so kernel launches always cover it exactly.

    Example:
        >>> GridConfig().width, GridConfig().height
        (60, 28)
        >>> GridConfig(tiles_x=2, tiles_y=2).vertex_count
        64
    """
    tiles_x: int = 15
    tiles_y: int = 7
    threads_x: int = 4
    threads_y: int = 4

    @property
    def width(self) -> int:
        return self.tiles_x * self.threads_x

    @property
    def height(self) -> int:
        return self.tiles_y * self.threads_y

    @property
    def vertex_count(self) -> int:
        return self.width * self.height

    @property
    def threads_per_tile(self) -> int:
        return self.threads_x * self.threads_y

    def validate(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ConfigurationError(f"{f.name} must be a positive integer (got {value!r})")
        return self


# name -> (low, high, low_inclusive, high_inclusive)
PARAMETER_RANGES = {
    "mass": (0.0, 100.0, False, True),
    "damping": (0.1, 0.999, True, True),
    "stiffness": (0.1, 100.0, False, True),
    "rest_length": (0.1, 10.0, False, True),
    "max_touch_force": (0.0, 1000.0, True, True),
}


@dataclass(frozen=True)
class SpringParameters:
    """
    Physical parameters shared by every vertex and spring.

    Args:
        mass: Mass of each vertex. Heavier vertices resist the springs more
            and move slower. Range (0, 100].
        damping: Multiplicative velocity damping applied each tick. Higher
            values let disturbances travel further. Range [0.1, 0.999].
        stiffness: Spring stiffness. Range (0.1, 100].
        rest_length: Distance between neighbouring vertices at rest.
            Range (0.1, 10].
        max_touch_force: Force applied by a full-pressure touch. Range [0, 1000].
    """
    mass: float = 1.0
    damping: float = 0.1
    stiffness: float = 10.0
    rest_length: float = 1.0
    max_touch_force: float = 100.0

    def validate(self):
        for name, (low, high, low_inc, high_inc) in PARAMETER_RANGES.items():
            value = getattr(self, name)
            try:
                value = float(value)
            except (TypeError, ValueError):
                raise ConfigurationError(f"{name} must be a number (got {value!r})") from None
            above = value >= low if low_inc else value > low
            below = value <= high if high_inc else value < high
            if not (above and below):
                lo = "[" if low_inc else "("
                hi = "]" if high_inc else ")"
                raise ConfigurationError(
                    f"{name}={value} is outside the allowed range {lo}{low}, {high}{hi}"
                )
        return self

    def replace(self, **changes) -> "SpringParameters":
        """Return a validated copy with ``changes`` applied."""
        unknown = set(changes) - set(PARAMETER_RANGES)
        if unknown:
            raise ConfigurationError(f"Unknown parameter(s): {', '.join(sorted(unknown))}")
        return dc_replace(self, **changes).validate()
