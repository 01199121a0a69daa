"""
Simple example of the Mass-Spring Grid

Presses the centre of a small grid for a few ticks, lets it ring down and
plots the kinetic energy and the displacement of the pressed vertex.

Author: NBEL
Date: November 2025
"""

import numpy as np
import matplotlib.pyplot as plt

from massgrid import GridConfig, MassSpringSystem, SpringParameters


def main():
    print("=" * 60)
    print("Simple Mass-Spring Grid Example")
    print("=" * 60)

    # Create a 16x16 grid
    print("\n1. Creating grid...")
    system = MassSpringSystem(
        GridConfig(tiles_x=4, tiles_y=4, threads_x=4, threads_y=4),
        SpringParameters(
            mass=1.0,           # 1 kg per vertex
            damping=0.9,        # Velocity kept per tick
            stiffness=10.0,     # Spring stiffness
            rest_length=1.0,    # Vertex spacing
            max_touch_force=100.0,
        ),
        device='cpu',
    )
    print("   ✓ Grid created")

    topo = system.model.topology
    centre = topo.index(topo.width // 2, topo.height // 2)
    rest = system.positions()
    touch = (float(rest[centre, 0]), float(rest[centre, 1]), 1.0)
    print(f"   Pressing vertex {centre} at ({touch[0]:.2f}, {touch[1]:.2f})")

    # Press for 10 ticks, then release
    print("\n2. Running 200 ticks...")
    dt = 0.02
    press_ticks = 10
    kinetic = []
    depth = []
    for step in range(200):
        events = [touch] if step < press_ticks else []
        positions = system.tick(dt, events)
        kinetic.append(system.kinetic_energy())
        depth.append(positions[centre, 2])

        if step % 50 == 0:
            print(f"   Step {step:3d}: KE = {kinetic[-1]:.5f}, z = {depth[-1]:+.4f}")

    print("\n3. Results:")
    print(f"   Peak kinetic energy:  {max(kinetic):.5f}")
    print(f"   Final kinetic energy: {kinetic[-1]:.3e}")
    print(f"   Final spring energy:  {system.spring_potential_energy():.3e}")

    # Visualize
    print("\n4. Plotting...")
    time_vec = np.arange(len(kinetic)) * dt
    fig, axes = plt.subplots(2, 1, figsize=(10, 8))

    axes[0].semilogy(time_vec, np.maximum(kinetic, 1e-12), 'b-', linewidth=2)
    axes[0].axvline(x=press_ticks * dt, color='k', linestyle='--', alpha=0.3, label='Release')
    axes[0].set_ylabel('Kinetic energy', fontsize=12)
    axes[0].set_title('Energy decay after a touch', fontsize=14, fontweight='bold')
    axes[0].legend(loc='upper right')
    axes[0].grid(True, alpha=0.3)

    axes[1].plot(time_vec, depth, 'r-', linewidth=2)
    axes[1].axhline(y=0, color='k', linestyle='--', alpha=0.3)
    axes[1].set_ylabel('Centre z', fontsize=12)
    axes[1].set_xlabel('Time (s)', fontsize=12)
    axes[1].grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig('simple_example.png', dpi=150, bbox_inches='tight')
    print("   ✓ Plot saved as: simple_example.png")

    system.shutdown()

    print("\n" + "=" * 60)
    print("Example complete!")
    print("=" * 60)

    plt.show()


if __name__ == "__main__":
    main()
