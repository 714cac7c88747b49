"""Tests for the CLI frontend."""

import argparse
from io import StringIO
from unittest.mock import patch

import pytest

from bitlife.core.random_source import RandomSource
from bitlife.core.universe import Universe
from bitlife.frontends.cli import (
    CLIGameOfLife,
    RunConfig,
    config_from_args,
    create_parser,
    format_finish_reason,
    main,
    parse_spawn_point,
    print_results,
    validate_args,
)


class TestCLIGameOfLife:
    """Test cases for the CLI Game of Life."""

    def test_initialization(self):
        cli = CLIGameOfLife()
        assert "Glider" in cli.shape_library.list_shapes()

    def test_build_empty(self):
        cli = CLIGameOfLife()
        universe = cli.build_universe(RunConfig(width=12, height=8), RandomSource(1))
        assert universe.shape == (12, 8)
        assert universe.population == 0

    def test_build_centred_shape(self):
        cli = CLIGameOfLife()
        config = RunConfig(width=20, height=20, shape="Glider")

        universe = cli.build_universe(config, RandomSource(1))

        assert universe.population == 5
        assert universe.get_cell(8, 8)
        assert universe.get_cell(10, 9)

    def test_build_shape_with_offset_and_transform(self):
        cli = CLIGameOfLife()
        config = RunConfig(width=10, height=10, shape="Glider", shape_x=0, shape_y=0, transform="reflect")

        universe = cli.build_universe(config, RandomSource(1))

        assert universe.get_cell(2, 2)
        assert universe.get_cell(0, 1)
        assert not universe.get_cell(0, 0)

    def test_build_with_spawn_points(self):
        cli = CLIGameOfLife()
        config = RunConfig(width=30, height=30, spawn_points=[(5, 5), (20, 20)])

        universe = cli.build_universe(config, RandomSource(3))

        assert universe.population == 10

    def test_build_unknown_shape(self):
        cli = CLIGameOfLife()
        with pytest.raises(KeyError):
            cli.build_universe(RunConfig(shape="Nope"), RandomSource(1))

    def test_build_random_is_seeded(self):
        cli = CLIGameOfLife()
        config = RunConfig(width=16, height=16, random_fill=True)

        first = cli.build_universe(config, RandomSource(11))
        second = cli.build_universe(config, RandomSource(11))

        assert first == second
        assert first.population > 0

    def test_run_simulation_with_shape(self):
        cli = CLIGameOfLife()
        config = RunConfig(width=10, height=10, shape="Blinker", generations=50)

        final_gen, reason, stats = cli.run_simulation(config)

        assert reason == "cycle"
        assert final_gen == 3
        assert stats["initial_population"] == 3
        assert stats["cycle_length"] == 2
        assert "duration_seconds" in stats

    def test_run_simulation_random(self):
        cli = CLIGameOfLife()
        config = RunConfig(width=16, height=16, random_fill=True, seed=5, generations=20)

        final_gen, reason, stats = cli.run_simulation(config)

        assert 0 < final_gen <= 20
        assert reason in ["extinction", "cycle", "max_generations"]
        assert stats["initial_population"] > 0

    @patch("sys.stdout", new_callable=StringIO)
    def test_run_simulation_show_grid(self, mock_stdout):
        cli = CLIGameOfLife()
        config = RunConfig(width=6, height=6, shape="Block", generations=5)

        cli.run_simulation(config, verbose=True, show_grid=True)

        output = mock_stdout.getvalue()
        assert "Initial grid:" in output
        assert "Final grid" in output
        assert "--XX--" in output

    def test_format_grid_large(self):
        cli = CLIGameOfLife()
        formatted = cli._format_grid(Universe.empty(100, 100), max_size=50)
        assert "too large to display" in formatted

    @patch("sys.stdout", new_callable=StringIO)
    def test_list_shapes(self, mock_stdout):
        cli = CLIGameOfLife()
        cli.list_shapes()

        output = mock_stdout.getvalue()
        assert "Available shapes:" in output
        assert "Glider: 3x3, 5 cells" in output
        assert "Block" in output


class TestArguments:
    """Test cases for argument parsing and validation."""

    def test_defaults(self):
        args = create_parser().parse_args([])

        assert args.width == 64
        assert args.height == 64
        assert args.random is False
        assert args.transform == "identity"
        assert args.spawn == []
        assert args.generations == 100

    def test_spawn_points(self):
        args = create_parser().parse_args(["--spawn", "1,2", "--spawn", " 3, 4"])
        assert args.spawn == [(1, 2), (3, 4)]

    def test_parse_spawn_point_errors(self):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_spawn_point("3")

        with pytest.raises(argparse.ArgumentTypeError):
            parse_spawn_point("a,b")

    @patch("sys.stderr", new_callable=StringIO)
    def test_invalid_transform(self, mock_stderr):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["--transform", "flip"])

    @patch("sys.stdout", new_callable=StringIO)
    def test_validate_args(self, mock_stdout):
        parser = create_parser()

        assert validate_args(parser.parse_args([]))
        assert not validate_args(parser.parse_args(["-W", "0"]))
        assert not validate_args(parser.parse_args(["-m", "0"]))
        assert not validate_args(parser.parse_args(["-H", "-3"]))
        assert "Height must be positive" in mock_stdout.getvalue()

    def test_config_from_args(self):
        args = create_parser().parse_args(
            ["-W", "20", "-H", "10", "--shape", "Toad", "--transform", "random", "--seed", "4"]
        )

        config = config_from_args(args)

        assert config == RunConfig(
            width=20, height=10, shape="Toad", transform="random", seed=4
        )


class TestOutput:
    """Test cases for result formatting."""

    def test_format_finish_reason(self):
        assert "Extinction" in format_finish_reason("extinction", {})
        assert "length 2" in format_finish_reason("cycle", {"cycle_length": 2, "cycle_start_generation": 0})
        assert "(7)" in format_finish_reason("max_generations", {"generation": 7})

    @patch("sys.stdout", new_callable=StringIO)
    def test_print_results(self, mock_stdout):
        stats = {
            "grid_size": (4, 4),
            "buffer_bytes": 2,
            "initial_population": 3,
            "population": 3,
            "population_density": 0.1875,
            "cycle_length": 2,
            "cycle_start_generation": 0,
            "duration_seconds": 0.5,
            "generations_per_second": 6,
        }

        print_results(3, "cycle", stats, verbose=True)

        output = mock_stdout.getvalue()
        assert "completed after 3 generations" in output
        assert "Cell buffer: 2 bytes" in output
        assert "18.75%" in output


class TestMain:
    """Test cases for the main entry point."""

    @patch("sys.stdout", new_callable=StringIO)
    def test_list_shapes(self, mock_stdout):
        assert main(["--list-shapes"]) == 0
        assert "Glider" in mock_stdout.getvalue()

    @patch("sys.stdout", new_callable=StringIO)
    def test_run(self, mock_stdout):
        assert main(["-W", "10", "-H", "10", "--shape", "Block", "-m", "5"]) == 0
        assert "Cycle detected" in mock_stdout.getvalue()

    @patch("sys.stdout", new_callable=StringIO)
    def test_invalid_dimensions(self, mock_stdout):
        assert main(["-W", "0"]) == 1
        assert "Width must be positive" in mock_stdout.getvalue()

    @patch("sys.stdout", new_callable=StringIO)
    def test_unknown_shape(self, mock_stdout):
        assert main(["--shape", "Nope"]) == 1
        assert "Shape 'Nope' not found" in mock_stdout.getvalue()
