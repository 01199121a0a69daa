#!/usr/bin/env python3
"""
Interactive Touch Demo for the Mass-Spring Grid

Click or drag on the grid to press it. Vertices are drawn from above and
coloured by how far they move out of the grid plane (blue = pressed in,
red = raised). The two-vertex rigid border is drawn grey.

Usage:
    python demo/demo_touch_grid.py
    python demo/demo_touch_grid.py --device cpu --damping 0.5
    python demo/demo_touch_grid.py --animate     # scripted wave, no input needed

Keys:
    Q/ESC quit, R reset, SPACE pause

Author: NBEL
License: Apache-2.0
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import argparse
import time
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pygame

from massgrid import GridConfig, MassSpringSystem, SpringParameters
from pygame_renderer import Renderer


@dataclass
class DemoConfig:
    """Configuration for the touch demo."""
    # Grid
    tiles_x: int = 15
    tiles_y: int = 7
    threads_x: int = 4
    threads_y: int = 4

    # Physics
    mass: float = 1.0
    damping: float = 0.9
    stiffness: float = 10.0
    rest_length: float = 1.0
    max_touch_force: float = 100.0
    device: Optional[str] = None

    # Input
    pressure: float = 1.0
    animate: bool = False

    # Display
    window_width: int = 1200
    window_height: int = 600
    fps: int = 60

    # Simulation
    duration: float = 600.0


class TouchGridDemo:
    """Owns the driver loop: input -> tick -> render, and shutdown at exit."""

    def __init__(self, config: Optional[DemoConfig] = None):
        self.config = config or DemoConfig()
        cfg = self.config

        self.grid = GridConfig(cfg.tiles_x, cfg.tiles_y, cfg.threads_x, cfg.threads_y)
        self.params = SpringParameters(
            mass=cfg.mass,
            damping=cfg.damping,
            stiffness=cfg.stiffness,
            rest_length=cfg.rest_length,
            max_touch_force=cfg.max_touch_force,
        )
        self.system = MassSpringSystem(self.grid, self.params, device=cfg.device)

        self.renderer = Renderer(
            window_width=cfg.window_width,
            window_height=cfg.window_height,
            world_width=self.system.world_grid_side_length_x(),
            world_height=self.system.world_grid_side_length_y(),
            height_scale=cfg.rest_length,
        )
        self.rigid_mask = ~self.system.model.topology.interior_mask()

        self.window = None
        self.clock = None
        self.running = True
        self.paused = False
        self.mouse_down = False
        self.frame_count = 0
        self.positions = self.system.positions()

    def _init_window(self):
        if self.window is None:
            pygame.init()
            pygame.display.init()
            self.window = pygame.display.set_mode((self.config.window_width, self.config.window_height))
            pygame.display.set_caption("Mass-Spring Grid")
            self.clock = pygame.time.Clock()

    def handle_events(self) -> list:
        """Handle pygame events and return this frame's touch events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key in (pygame.K_q, pygame.K_ESCAPE):
                    self.running = False
                elif event.key == pygame.K_r:
                    self.system.reset_buffers()
                    print("Reset")
                elif event.key == pygame.K_SPACE:
                    self.paused = not self.paused
                    print("Paused" if self.paused else "Resumed")
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self.mouse_down = True
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                self.mouse_down = False

        if not self.mouse_down:
            return []
        wx, wy = self.renderer.screen_to_world(*pygame.mouse.get_pos())
        return [(wx, wy, self.config.pressure)]

    def step(self, dt: float, touches: list):
        if self.config.animate:
            self.system.animate_grid(self.system.t)
        self.positions = self.system.tick(dt, touches)
        self.frame_count += 1

    def render(self):
        canvas = self.renderer.create_canvas()
        self.renderer.draw_grid(canvas)
        self.renderer.draw_particles(canvas, self.positions, rigid_mask=self.rigid_mask)

        z = self.positions[:, 2]
        self.renderer.draw_info_text(canvas, [
            (f"{self.grid.width}x{self.grid.height} vertices  t={self.system.t:.2f}s", self.renderer.BLACK),
            (f"z min={z.min():+.3f} max={z.max():+.3f}", self.renderer.GREY),
            (f"kinetic energy={self.system.kinetic_energy():.4f}", self.renderer.GREY),
        ])

        self.window.blit(canvas, canvas.get_rect())
        pygame.display.flip()

    def run(self):
        self._init_window()

        print("=" * 70)
        print("SIMULATION STARTED")
        print("=" * 70)
        print("Click/drag to press the grid. Q/ESC quit, R reset, SPACE pause")
        print()

        start_time = time.time()
        try:
            while self.running and self.system.t < self.config.duration:
                touches = self.handle_events()

                dt = self.clock.tick(self.config.fps) / 1000.0
                if self.paused or dt <= 0.0:
                    continue

                self.step(dt, touches)
                self.render()

                if self.frame_count % 100 == 0:
                    fps = self.frame_count / max(time.time() - start_time, 0.01)
                    # Report the deepest vertex in Y-up world space
                    world = Renderer.translate_to_y_up(self.positions)
                    lowest = int(np.argmin(world[:, 1]))
                    print(f"t={self.system.t:.2f}s | KE={self.system.kinetic_energy():.4f} "
                          f"| lowest=({world[lowest, 0]:+.2f}, {world[lowest, 1]:+.4f}, {world[lowest, 2]:+.2f}) "
                          f"| fps={fps:.1f}")
        finally:
            self.system.shutdown()
            pygame.quit()

        print()
        print("=" * 70)
        print("SIMULATION COMPLETE")
        print("=" * 70)


def parse_args():
    parser = argparse.ArgumentParser(description='Interactive mass-spring grid')
    parser.add_argument('--tiles', type=int, nargs=2, default=[15, 7], metavar=('X', 'Y'),
                        help='Number of tiles along X and Y (default: 15 7)')
    parser.add_argument('--threads', type=int, nargs=2, default=[4, 4], metavar=('X', 'Y'),
                        help='Threads per tile along X and Y (default: 4 4)')
    parser.add_argument('--mass', type=float, default=1.0, help='Vertex mass (default: 1.0)')
    parser.add_argument('--damping', type=float, default=0.9, help='Velocity damping (default: 0.9)')
    parser.add_argument('--stiffness', type=float, default=10.0, help='Spring stiffness (default: 10.0)')
    parser.add_argument('--rest-length', type=float, default=1.0, help='Spring rest length (default: 1.0)')
    parser.add_argument('--max-touch-force', type=float, default=100.0,
                        help='Force of a full-pressure touch (default: 100.0)')
    parser.add_argument('--pressure', type=float, default=1.0, help='Simulated touch pressure 0-1 (default: 1.0)')
    parser.add_argument('--animate', action='store_true', help='Drive a scripted wave along row 2')
    parser.add_argument('--device', type=str, default=None,
                        choices=['cuda', 'cpu'], help='Device (default: Warp default)')
    parser.add_argument('--window-width', type=int, default=1200, help='Window width (default: 1200)')
    parser.add_argument('--window-height', type=int, default=600, help='Window height (default: 600)')
    parser.add_argument('--duration', '-t', type=float, default=600.0,
                        help='Simulation duration in seconds (default: 600)')
    return parser.parse_args()


def config_from_args(args) -> DemoConfig:
    return DemoConfig(
        tiles_x=args.tiles[0],
        tiles_y=args.tiles[1],
        threads_x=args.threads[0],
        threads_y=args.threads[1],
        mass=args.mass,
        damping=args.damping,
        stiffness=args.stiffness,
        rest_length=args.rest_length,
        max_touch_force=args.max_touch_force,
        device=args.device,
        pressure=args.pressure,
        animate=args.animate,
        window_width=args.window_width,
        window_height=args.window_height,
        duration=args.duration,
    )


if __name__ == "__main__":
    TouchGridDemo(config_from_args(parse_args())).run()
