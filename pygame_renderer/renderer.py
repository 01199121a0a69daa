"""
Pygame Renderer for the Mass-Spring Grid

Draws the grid seen from above: each vertex is a circle at its (x, y)
position, coloured by its z displacement out of the grid plane.

Features:
1. World <-> screen conversion centred on the grid (for picking)
2. Height-coloured vertices with a diverging gradient
3. Y-up world translation for consumers that keep gravity on Y
4. Info text overlay

Usage:
    from pygame_renderer import Renderer

    renderer = Renderer(window_width=1000, window_height=500,
                        world_width=60.0, world_height=28.0)

    # In render loop:
    canvas = renderer.create_canvas()
    renderer.draw_grid(canvas)
    renderer.draw_particles(canvas, positions)
    renderer.draw_info_text(canvas, [("tick 10", renderer.BLACK)])

    # Mouse picking:
    wx, wy = renderer.screen_to_world(*pygame.mouse.get_pos())
"""

import numpy as np
import pygame
from typing import List, Tuple


class Renderer:
    """
    Pygame renderer for mass-spring grid visualization.

    All methods work with pygame surfaces and numpy arrays.
    """

    # ========================================================================
    # COLOR CONSTANTS
    # ========================================================================

    WHITE = (255, 255, 255)
    BLACK = (0, 0, 0)
    GREY = (100, 100, 100)
    LIGHT_GREY = (230, 230, 230)

    PARTICLE_OUTLINE = (0, 0, 0)
    RIGID_FILL = (150, 150, 150)

    # Height: Blue (pressed in) -> White (rest) -> Red (raised)
    HEIGHT_COLORS = [(50, 50, 255), (255, 255, 255), (255, 0, 0)]

    # ========================================================================
    # INITIALIZATION
    # ========================================================================

    def __init__(
        self,
        window_width: int = 1000,
        window_height: int = 500,
        world_width: float = 60.0,
        world_height: float = 28.0,
        margin: float = 0.05,
        particle_radius: int = 3,
        particle_outline: int = 4,
        height_scale: float = 1.0,
        font_size: int = 24,
        font_size_small: int = 18,
    ):
        """
        Initialize the renderer.

        Args:
            window_width: Window width in pixels
            window_height: Window height in pixels
            world_width: World extent of the grid along X
            world_height: World extent of the grid along Y
            margin: Fraction of the window kept free around the grid
            particle_radius: Vertex fill circle radius
            particle_outline: Vertex outline circle radius
            height_scale: |z| mapped to full colour saturation
            font_size: Main font size
            font_size_small: Small font size for labels
        """
        self.window_width = window_width
        self.window_height = window_height
        self.world_width = world_width
        self.world_height = world_height

        # Uniform scale (pixels per world unit) that fits the grid
        usable = 1.0 - 2.0 * margin
        self.scale = min(window_width * usable / world_width, window_height * usable / world_height)

        self.particle_radius = particle_radius
        self.particle_outline = particle_outline
        self.height_scale = height_scale

        # Fonts (initialized lazily)
        self._font = None
        self._font_small = None
        self._font_size = font_size
        self._font_size_small = font_size_small

    @property
    def font(self):
        """Lazy font initialization."""
        if self._font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            self._font = pygame.font.Font(None, self._font_size)
        return self._font

    @property
    def font_small(self):
        """Lazy small font initialization."""
        if self._font_small is None:
            if not pygame.font.get_init():
                pygame.font.init()
            self._font_small = pygame.font.Font(None, self._font_size_small)
        return self._font_small

    # ========================================================================
    # COORDINATE CONVERSION
    # ========================================================================

    def world_to_screen(self, x: float, y: float) -> Tuple[int, int]:
        """Convert world coordinates (origin at grid centre) to screen coordinates."""
        return (int(self.window_width / 2 + x * self.scale),
                int(self.window_height / 2 - y * self.scale))

    def world_to_screen_array(self, positions: np.ndarray) -> np.ndarray:
        """
        Convert array of world positions to screen coordinates.

        Args:
            positions: Array of shape (N, 2) or (N, 3) with [x, y, ...] world coordinates

        Returns:
            Array of shape (N, 2) with [screen_x, screen_y] pixel coordinates
        """
        screen = np.zeros((len(positions), 2), dtype=np.int32)
        screen[:, 0] = (self.window_width / 2 + positions[:, 0] * self.scale).astype(int)
        screen[:, 1] = (self.window_height / 2 - positions[:, 1] * self.scale).astype(int)
        return screen

    def screen_to_world(self, sx: float, sy: float) -> Tuple[float, float]:
        """Inverse of world_to_screen, used to turn mouse positions into touch events."""
        return ((sx - self.window_width / 2) / self.scale,
                (self.window_height / 2 - sy) / self.scale)

    @staticmethod
    def translate_to_y_up(positions: np.ndarray) -> np.ndarray:
        """
        Swap Y and Z so the grid's out-of-plane axis becomes the world's up axis.
        """
        return positions[:, [0, 2, 1]]

    # ========================================================================
    # CANVAS CREATION
    # ========================================================================

    def create_canvas(self, background_color=None) -> pygame.Surface:
        """
        Create a new canvas (pygame Surface) with background color.

        Args:
            background_color: RGB tuple or None for white

        Returns:
            pygame.Surface
        """
        canvas = pygame.Surface((self.window_width, self.window_height))
        canvas.fill(background_color or self.WHITE)
        return canvas

    def draw_grid(self, canvas: pygame.Surface, color=None):
        """Draw the outline of the grid's world extent."""
        color = color or self.LIGHT_GREY
        left, top = self.world_to_screen(-self.world_width / 2, self.world_height / 2)
        right, bottom = self.world_to_screen(self.world_width / 2, -self.world_height / 2)
        pygame.draw.rect(canvas, color, pygame.Rect(left, top, right - left, bottom - top), 1)

    # ========================================================================
    # PARTICLE RENDERING
    # ========================================================================

    def height_color(self, z: float) -> Tuple[int, int, int]:
        """Diverging colour for a z displacement."""
        t = float(np.clip(z / self.height_scale, -1.0, 1.0))
        low, mid, high = self.HEIGHT_COLORS
        if t < 0.0:
            a, b, s = mid, low, -t
        else:
            a, b, s = mid, high, t
        return tuple(int(a[k] + (b[k] - a[k]) * s) for k in range(3))

    def draw_particles(
        self,
        canvas: pygame.Surface,
        positions: np.ndarray,
        rigid_mask: np.ndarray = None,
        outline_color=None,
    ):
        """
        Draw vertices as circles coloured by height.

        Args:
            canvas: pygame Surface to draw on
            positions: Array of shape (N, 3) with vertex positions
            rigid_mask: Optional boolean mask of rigid-border vertices (drawn grey)
            outline_color: Vertex outline color (default: black)
        """
        outline_color = outline_color or self.PARTICLE_OUTLINE
        screen = self.world_to_screen_array(positions)

        for i, pos in enumerate(positions):
            if np.isnan(pos[0]) or np.isnan(pos[1]):
                continue

            fill = self.RIGID_FILL if rigid_mask is not None and rigid_mask[i] else self.height_color(pos[2])
            screen_pos = (int(screen[i, 0]), int(screen[i, 1]))
            pygame.draw.circle(canvas, outline_color, screen_pos, self.particle_outline)
            pygame.draw.circle(canvas, fill, screen_pos, self.particle_radius)

    def draw_info_text(
        self,
        canvas: pygame.Surface,
        lines: List[Tuple[str, Tuple[int, int, int]]],
        position: Tuple[int, int] = (10, 10),
        line_spacing: int = 17,
    ):
        """
        Draw multiple lines of info text.

        Args:
            canvas: pygame Surface to draw on
            lines: List of (text, color) tuples
            position: Top-left position
            line_spacing: Vertical spacing between lines
        """
        x, y = position

        for i, (text, color) in enumerate(lines):
            text_surface = self.font_small.render(text, True, color)
            canvas.blit(text_surface, (x, y + i * line_spacing))
