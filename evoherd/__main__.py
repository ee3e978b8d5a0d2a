"""Command line entry point for evoherd.

Usage:
    python -m evoherd run --generations 10 --population 20
    python -m evoherd run --config experiment.yaml --export out/data.csv
    python -m evoherd report data/SimulationData.csv
"""

from __future__ import annotations

import argparse
import logging
import sys

from evoherd.analytics.generation import read_export
from evoherd.config import SimulationConfig
from evoherd.errors import ConfigurationError, ExportError
from evoherd.persistence.winners import NullWinnerStore
from evoherd.simulation.host import SimulatedHost
from evoherd.simulation.manager import GenerationManager
from evoherd.simulation.renderer import GenerationRenderer

# Guard against runs that never reach a generation boundary
MAX_STEPS_PER_GENERATION = 1_000_000


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="evoherd",
        description="Generational evolution of agents in a hazardous arena",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable info logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    run_parser = subparsers.add_parser("run", help="Run a headless simulation")
    run_parser.add_argument("--config", type=str, help="YAML file with SimulationConfig values")
    run_parser.add_argument("--generations", type=int, default=5, help="Generations to run")
    run_parser.add_argument("--population", type=int, help="Agents per generation")
    run_parser.add_argument("--parents", type=int, help="Parent pool size")
    run_parser.add_argument("--timer", type=float, help="Seconds per generation")
    run_parser.add_argument("--dt", type=float, default=0.1, help="Seconds per host step")
    run_parser.add_argument("--seed", type=int, help="Fixed random seed")
    run_parser.add_argument("--predators", type=float, default=0.0, help="Predator contacts/s")
    run_parser.add_argument("--export", type=str, help="Statistics export path")
    run_parser.add_argument("--winners", type=str, help="Directory for winner snapshots")
    run_parser.add_argument(
        "--no-winners", action="store_true", help="Do not persist winner snapshots"
    )

    report_parser = subparsers.add_parser("report", help="Show winners of an export file")
    report_parser.add_argument("path", help="Path to an exported statistics file")

    return parser


def load_config(args: argparse.Namespace) -> SimulationConfig:
    """Config from YAML/env, with command line values on top."""
    config = SimulationConfig.from_yaml(args.config) if args.config else SimulationConfig()

    if args.population is not None:
        config.population_size = args.population
    if args.parents is not None:
        config.parent_size = args.parents
    if args.timer is not None:
        config.simulation_timer = args.timer
    if args.seed is not None:
        config.seed = args.seed
    if args.export is not None:
        config.export_path = args.export
    if args.winners is not None:
        config.winners_dir = args.winners
    return config


def run(args: argparse.Namespace, renderer: GenerationRenderer) -> int:
    config = load_config(args)
    winner_store = NullWinnerStore() if args.no_winners else None
    manager = GenerationManager(config, winner_store=winner_store)
    host = SimulatedHost(manager, predator_rate=args.predators)

    try:
        manager.start_simulation()
    except ConfigurationError as e:
        renderer.console.print(f"[red]Configuration error:[/red] {e}")
        return 2

    max_steps = MAX_STEPS_PER_GENERATION * max(1, args.generations)
    steps = 0
    while len(manager.history) < args.generations and steps < max_steps:
        host.step(args.dt)
        steps += 1

    manager.stop_simulation()
    renderer.print_history(manager.history)
    renderer.console.print(f"Statistics appended to {config.export_path}")
    return 0


def report(args: argparse.Namespace, renderer: GenerationRenderer) -> int:
    try:
        rows = read_export(args.path)
    except (OSError, ExportError) as e:
        renderer.console.print(f"[red]Cannot read {args.path}:[/red] {e}")
        return 1
    renderer.print_export(rows)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    renderer = GenerationRenderer()
    if args.command == "run":
        return run(args, renderer)
    if args.command == "report":
        return report(args, renderer)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
