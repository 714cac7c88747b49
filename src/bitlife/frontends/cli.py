"""Command-line host for the bit-dense Game of Life engine."""

import argparse
import logging
import sys
import time
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..core.random_source import RandomSource
from ..core.shapes import ShapeLibrary, Transformation, random_transformation
from ..core.simulation import Simulation
from ..core.universe import Universe

logger = logging.getLogger(__name__)

TRANSFORM_CHOICES = [t.value for t in Transformation] + ["random"]


@dataclass
class RunConfig:
    """Configuration for a single command-line run."""

    width: int = 64
    height: int = 64
    random_fill: bool = False
    shape: Optional[str] = None
    shape_x: Optional[int] = None
    shape_y: Optional[int] = None
    transform: str = "identity"
    spawn_points: List[Tuple[int, int]] = field(default_factory=list)
    seed: Optional[int] = None
    generations: int = 100


class CLIGameOfLife:
    """Builds universes from a RunConfig and runs them to completion."""

    def __init__(self) -> None:
        self.shape_library = ShapeLibrary()

    def build_universe(self, config: RunConfig, source: RandomSource) -> Universe:
        """Create the starting universe described by ``config``.

        Args:
            config: Run configuration
            source: Random source for seeding and orientations

        Returns:
            The initial universe

        Raises:
            KeyError: If the configured shape is unknown
        """
        if config.random_fill:
            universe = Universe.random(config.width, config.height, source)
        else:
            universe = Universe.empty(config.width, config.height)

        if config.shape:
            shape = self.shape_library.get_shape(config.shape)
            if config.transform == "random":
                transformation = random_transformation(source)
            else:
                transformation = Transformation(config.transform)

            box_width, box_height = shape.bounding_box(transformation)
            x = config.shape_x if config.shape_x is not None else (config.width - box_width) // 2
            y = config.shape_y if config.shape_y is not None else (config.height - box_height) // 2
            universe.place_shape(shape, x, y, transformation)

        for x, y in config.spawn_points:
            applied = universe.spawn_shape_at(x, y, source)
            logger.debug("Spawned glider at (%d, %d) as %s", x, y, applied.value)

        return universe

    def run_simulation(
        self,
        config: RunConfig,
        verbose: bool = False,
        show_grid: bool = False,
    ) -> Tuple[int, str, dict]:
        """Run one simulation.

        Args:
            config: Run configuration
            verbose: Print progress updates
            show_grid: Show initial and final grids

        Returns:
            Tuple of (final_generation, finish_reason, statistics)
        """
        source = RandomSource(config.seed)
        universe = self.build_universe(config, source)
        simulation = Simulation(universe)

        initial_population = simulation.population

        if verbose:
            print(f"Initialized {config.width}x{config.height} universe ({universe.cell_buffer_length()} bytes)")
            print(f"Initial population: {initial_population} cells")

        if show_grid:
            print("\nInitial grid:")
            print(self._format_grid(universe))

        start_time = time.time()
        final_generation, reason = simulation.run_until_stable(config.generations)
        duration = time.time() - start_time

        stats = simulation.get_statistics()
        stats["initial_population"] = initial_population
        stats["duration_seconds"] = duration
        stats["generations_per_second"] = final_generation / duration if duration > 0 else 0

        if show_grid:
            print(f"\nFinal grid (generation {final_generation}):")
            print(self._format_grid(simulation.universe))

        return final_generation, reason, stats

    def _format_grid(self, universe: Universe, max_size: int = 80) -> str:
        """Format a universe for display, refusing very large ones.

        Args:
            universe: Universe to format
            max_size: Maximum dimension to display

        Returns:
            Formatted grid string
        """
        if universe.width > max_size or universe.height > max_size:
            return f"Grid too large to display ({universe.width}x{universe.height})"

        return str(universe).rstrip("\n")

    def list_shapes(self) -> None:
        """Print the shape catalog."""
        print("Available shapes:")
        for name in self.shape_library.list_shapes():
            shape = self.shape_library.get_shape(name)
            print(f"  {name}: {shape.width}x{shape.height}, {len(shape)} cells")
            if shape.description:
                print(f"    {shape.description}")


def parse_spawn_point(value: str) -> Tuple[int, int]:
    """Parse an 'X,Y' spawn point for argparse.

    Raises:
        argparse.ArgumentTypeError: If the value is not two integers
    """
    parts = value.split(",")
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(f"Invalid spawn point '{value}'. Expected 'X,Y'")
    try:
        return (int(parts[0].strip()), int(parts[1].strip()))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid spawn point '{value}'. Expected integers")


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Run Conway's Game of Life on a bit-packed toroidal universe",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run a random 64x64 universe for 200 generations
  bitlife-cli --random -m 200

  # Place a glider rotated to the right in the middle of a 20x20 universe
  bitlife-cli -W 20 -H 20 --shape Glider --transform rotate-right --show-grid

  # Spawn randomly oriented gliders with a reproducible seed
  bitlife-cli --spawn 5,5 --spawn 30,12 --seed 42

  # List available shapes
  bitlife-cli --list-shapes
        """,
    )

    # Universe configuration
    parser.add_argument("-W", "--width", type=int, default=64, help="Universe width (default: 64)")

    parser.add_argument("-H", "--height", type=int, default=64, help="Universe height (default: 64)")

    parser.add_argument(
        "-r",
        "--random",
        action="store_true",
        help="Seed every cell from random bytes (about half alive)",
    )

    # Shape configuration
    parser.add_argument(
        "--shape",
        type=str,
        help="Place a shape from the catalog",
    )

    parser.add_argument(
        "--shape-x",
        type=int,
        help="Column of the shape's bounding box (default: centred)",
    )

    parser.add_argument(
        "--shape-y",
        type=int,
        help="Row of the shape's bounding box (default: centred)",
    )

    parser.add_argument(
        "--transform",
        type=str,
        default="identity",
        choices=TRANSFORM_CHOICES,
        help="Orientation of the placed shape (default: identity)",
    )

    parser.add_argument(
        "--spawn",
        type=parse_spawn_point,
        action="append",
        default=[],
        metavar="X,Y",
        help="Spawn a randomly oriented glider centred on X,Y (repeatable)",
    )

    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducible runs",
    )

    # Simulation configuration
    parser.add_argument(
        "-m",
        "--generations",
        type=int,
        default=100,
        help="Maximum generations to simulate (default: 100)",
    )

    # Output configuration
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print detailed progress and debug logging",
    )

    parser.add_argument(
        "-g",
        "--show-grid",
        action="store_true",
        help="Display initial and final grids (small universes only)",
    )

    parser.add_argument(
        "--list-shapes",
        action="store_true",
        help="List all available shapes and exit",
    )

    return parser


def validate_args(args: argparse.Namespace) -> bool:
    """Validate command-line arguments.

    Args:
        args: Parsed arguments

    Returns:
        True if arguments are valid
    """
    errors = []

    if args.width <= 0:
        errors.append("Width must be positive")

    if args.height <= 0:
        errors.append("Height must be positive")

    if args.generations <= 0:
        errors.append("Generations must be positive")

    if errors:
        print("Error: Invalid arguments:")
        for error in errors:
            print(f"  - {error}")
        return False

    return True


def config_from_args(args: argparse.Namespace) -> RunConfig:
    """Build a RunConfig from parsed arguments."""
    return RunConfig(
        width=args.width,
        height=args.height,
        random_fill=args.random,
        shape=args.shape,
        shape_x=args.shape_x,
        shape_y=args.shape_y,
        transform=args.transform,
        spawn_points=list(args.spawn),
        seed=args.seed,
        generations=args.generations,
    )


def format_finish_reason(reason: str, stats: dict) -> str:
    """Describe why ``Simulation.run_until_stable`` stopped."""
    if reason == "extinction":
        return "Extinction - all cells died"
    if reason == "cycle":
        return (
            f"Cycle detected - length {stats['cycle_length']}, "
            f"started at generation {stats['cycle_start_generation']}"
        )
    return f"Maximum generations reached ({stats['generation']})"


def print_results(final_generation: int, reason: str, stats: dict, verbose: bool) -> None:
    """Print simulation results.

    Args:
        final_generation: Final generation number
        reason: Finish reason
        stats: Statistics dictionary
        verbose: Whether to show detailed statistics
    """
    print(f"\nSimulation completed after {final_generation} generations")
    print(f"Finish reason: {format_finish_reason(reason, stats)}")

    if verbose:
        print("\nDetailed Statistics:")
        print(f"  Grid size: {stats['grid_size'][0]}x{stats['grid_size'][1]}")
        print(f"  Cell buffer: {stats['buffer_bytes']} bytes")
        print(f"  Initial population: {stats['initial_population']}")
        print(f"  Final population: {stats['population']}")
        print(f"  Population density: {stats['population_density']:.2%}")
        if "duration_seconds" in stats:
            print(f"  Duration: {stats['duration_seconds']:.3f} seconds")
            print(f"  Speed: {stats['generations_per_second']:.0f} generations/second")
    else:
        print(
            "Population: {} -> {}, Duration: {:.3f}s".format(
                stats["initial_population"], stats["population"], stats.get("duration_seconds", 0)
            )
        )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    cli = CLIGameOfLife()

    if args.list_shapes:
        cli.list_shapes()
        return 0

    if not validate_args(args):
        return 1

    if args.shape and args.shape not in cli.shape_library:
        print(f"Error: Shape '{args.shape}' not found")
        print(f"Available shapes: {', '.join(cli.shape_library.list_shapes())}")
        return 1

    try:
        final_generation, reason, stats = cli.run_simulation(
            config_from_args(args),
            verbose=args.verbose,
            show_grid=args.show_grid,
        )
        print_results(final_generation, reason, stats, args.verbose)
        return 0

    except KeyboardInterrupt:
        print("\nSimulation interrupted by user")
        return 1
    except (ValueError, KeyError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
