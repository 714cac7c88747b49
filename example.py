#!/usr/bin/env python3
"""
Example usage of the bitlife package as a host would drive it.
"""

from bitlife import GLIDER, RandomSource, Simulation, Transformation, Universe


def main():
    """Place a few gliders, then tick and read the packed buffer."""
    source = RandomSource(seed=2024)
    universe = Universe.empty(24, 16)

    # One glider with a fixed orientation, two picked at random
    universe.place_shape(GLIDER, 2, 2, Transformation.ROTATE_RIGHT)
    universe.spawn_shape_at(12, 8, source)
    universe.spawn_shape_at(19, 3, source)

    simulation = Simulation(universe)
    print("Initial state:")
    print(universe)

    for _ in range(8):
        simulation.step()

        # Read the buffer the way a renderer would, before the next tick
        buffer = simulation.universe.cell_buffer()
        live = sum(bin(byte).count("1") for byte in buffer.tobytes())
        print(f"Generation {simulation.generation}: {live} live cells, "
              f"{simulation.universe.cell_buffer_length()} bytes")

    print()
    print(simulation.universe)

    stats = simulation.get_statistics()
    print("Final statistics:")
    for key, value in stats.items():
        print(f"  {key}: {value}")


if __name__ == "__main__":
    main()
