"""
Command-line interface for edge profiling.

Usage:
    edge-profiling --list
    edge-profiling --example if-else --runs 100 --seed 7
    edge-profiling --example while-loop --animate --speed 3
    python -m edge_profiling --config sim.yaml --example loop-if
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .config.simulation_config import SimulationConfig, clamp_speed, load_config, normalize_runs
from .managers.profiling_session import ProfilingSession
from .managers.tick_scheduler import BlockingTickScheduler
from .models.exceptions import ExampleNotFoundError, InvalidConfigError
from .utils.logger import Logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="edge-profiling",
        description="Simulate instrumented runs of a flow graph and reconstruct the remaining edge counts",
    )
    parser.add_argument("--list", action="store_true", help="List built-in examples and exit")
    parser.add_argument("--example", "-e", type=str, default=None, help="Example id (default: first example)")
    parser.add_argument("--config", "-c", type=Path, default=None, help="YAML simulation config")
    parser.add_argument("--runs", "-r", type=int, default=None, help="Number of traversals (overrides config)")
    parser.add_argument("--max-steps", type=int, default=None, help="Edge traversals allowed per run")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs")
    parser.add_argument("--speed", type=float, default=None, help="Animation speed multiplier, 0.25 to 3")
    parser.add_argument("--animate", action="store_true", help="Run stepwise in real time, printing every tick")
    parser.add_argument("--log-file", type=Path, default=None, help="Write the log to this file")
    parser.add_argument("--log-level", type=str.upper, default="DEBUG",
                        choices=[p.name for p in Logger.LogPriority],
                        help="Lowest priority written to --log-file (default: DEBUG)")
    parser.add_argument("--quiet", "-q", action="store_true", help="Print only the final counters")
    return parser


def _resolve_config(args) -> SimulationConfig:
    config = load_config(args.config) if args.config else SimulationConfig()
    if args.runs is not None:
        config.runs = normalize_runs(args.runs)
    if args.max_steps is not None:
        config.max_steps_per_run = normalize_runs(args.max_steps)
    if args.seed is not None:
        config.seed = args.seed
    if args.speed is not None:
        config.speed = clamp_speed(args.speed)
    config.fast_mode = not args.animate
    return config


def _print_tick(snapshot) -> None:
    if snapshot.current_node_id is None:
        return
    edge = snapshot.current_edge_id or "-"
    print(f"  run {snapshot.current_run + 1}/{snapshot.total_runs}: edge {edge} -> node {snapshot.current_node_id}")


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)

    if args.log_file:
        Logger.initialize(str(args.log_file), min_priority=args.log_level)

    try:
        config = _resolve_config(args)
    except FileNotFoundError:
        print(f"Error: Config file not found: {args.config}", file=sys.stderr)
        return 1
    except InvalidConfigError as e:
        print(f"Error: Invalid configuration: {e}", file=sys.stderr)
        return 1

    scheduler = BlockingTickScheduler() if args.animate else None
    session = ProfilingSession(config=config, scheduler=scheduler)

    if args.list:
        for item in session.catalog.list():
            print(f"{item.id:<14} {item.title} - {item.description}")
        return 0

    if args.example:
        try:
            session.select_example(args.example)
        except ExampleNotFoundError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    example = session.example
    if not args.quiet:
        print(f"Example: {example.id} ({example.title})")
        print(f"  Spanning tree:   {', '.join(session.spanning_edge_ids) or '(none)'}")
        print(f"  Instrumented:    {', '.join(session.instrumented_edge_ids) or '(none)'}")
        print(f"  Runs: {config.runs}  max steps/run: {config.max_steps_per_run}  seed: {config.seed}")
        print()

    if args.animate:
        if not args.quiet:
            session.simulator.on_tick = _print_tick
        session.start_simulation()
        scheduler.run()
    else:
        session.start_simulation()

    measured = session.simulator.counters
    steps = session.solver.solve_all()

    if not args.quiet:
        print("Measured counters:")
        for edge_id, count in measured.items():
            print(f"  {edge_id:<20} {count}")
        print()
        print("Reconstruction:")
        for i, step in enumerate(steps, start=1):
            print(f"[{i}] {step.solved_edge_id} = {step.value} (node {step.node_id})")
            for line in step.text.splitlines():
                print(f"    {line}")
        print()

    print("All counters:")
    for edge_id, count in session.solver.merged_counters().items():
        print(f"  {edge_id:<20} {count}")

    pending = session.solver.pending_tree_edge_ids()
    if pending:
        print(
            f"No further balance equation is solvable (pending: {', '.join(pending)}). "
            f"Run more simulations so every instrumented edge gets a count.",
            file=sys.stderr,
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
