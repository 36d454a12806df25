"""Command-line entry point.

Two subcommands:

- ``py-pager run`` replays a trace (read from a file, or generated)
  under every policy and prints the fault counts.
- ``py-pager generate`` writes a locality-biased trace file.

``main`` returns an exit status instead of calling ``sys.exit`` so it
stays testable; input and configuration errors map to status 2.
"""

from __future__ import annotations

import argparse
import random
import sys
from typing import TYPE_CHECKING

from py_pager.config import SimulationConfig
from py_pager.errors import ConfigurationError, SimulationError
from py_pager.logging import Logger
from py_pager.report import format_results, format_trace
from py_pager.simulator import run_all
from py_pager.trace import Trace, generate_trace, load_trace, write_trace

if TYPE_CHECKING:
    from collections.abc import Sequence

EXIT_OK = 0
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for both subcommands."""
    parser = argparse.ArgumentParser(
        prog="py-pager",
        description="Compare page replacement policies on a reference trace.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    def add_bounds(cmd: argparse.ArgumentParser) -> None:
        cmd.add_argument("--pages", dest="max_pages", type=int, help="page id range")
        cmd.add_argument("--length", dest="trace_length", type=int, help="trace length cap and generated length")
        cmd.add_argument("--seed", type=int, help="session seed for reproducible runs")

    run = sub.add_parser("run", help="replay a trace under every policy")
    add_bounds(run)
    run.add_argument("--trace", help="trace file (generated when omitted)")
    run.add_argument("--frames", dest="num_frames", type=int, help="physical frame count")
    run.add_argument("--verbose", action="store_true", help="dump the page table after faults")
    run.add_argument(
        "--steps",
        help="with --verbose, only show log entries for trace positions START:STOP",
    )
    run.add_argument(
        "--fifo",
        dest="fifo_mode",
        choices=("queue", "cursor"),
        help="FIFO flavour (default: queue)",
    )
    run.add_argument("--save-trace", help="write the replayed trace to this file")

    gen = sub.add_parser("generate", help="write a synthetic trace file")
    add_bounds(gen)
    gen.add_argument("--output", required=True, help="destination file")
    return parser


def _config_from(args: argparse.Namespace) -> SimulationConfig:
    keys = ("max_pages", "num_frames", "trace_length", "seed", "verbose", "fifo_mode")
    return SimulationConfig.from_mapping({k: getattr(args, k, None) for k in keys})


def _parse_steps(text: str) -> range:
    """Parse a ``START:STOP`` window of 0-based trace positions (STOP exclusive)."""
    start, sep, stop = text.partition(":")
    try:
        window = range(int(start) if start else 0, int(stop)) if sep else None
    except ValueError:
        window = None
    if window is None:
        msg = f"--steps must look like START:STOP, got {text!r}"
        raise ConfigurationError(msg)
    return window


def _generated(config: SimulationConfig) -> Trace:
    seed = config.seed_for("trace")
    return generate_trace(
        length=config.trace_length,
        max_pages=config.max_pages,
        rng=random.Random(seed),  # noqa: S311
    )


def _cmd_run(args: argparse.Namespace) -> int:
    config = _config_from(args)
    window = _parse_steps(args.steps) if args.steps else None
    if args.trace:
        trace = load_trace(
            args.trace, max_pages=config.max_pages, max_length=config.trace_length
        )
    else:
        trace = _generated(config)
    if args.save_trace:
        write_trace(args.save_trace, trace)

    logger = Logger()
    results = run_all(trace, config, logger=logger)

    if config.verbose:
        print(format_trace(trace))
        for entry in logger.filter(steps=window) if window is not None else logger.entries:
            print(entry)
    print(format_results(results))
    return EXIT_OK


def _cmd_generate(args: argparse.Namespace) -> int:
    config = _config_from(args)
    trace = _generated(config)
    write_trace(args.output, trace)
    print(f"Wrote {len(trace)} references to {args.output}")
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return the process exit status."""
    args = build_parser().parse_args(argv)
    handlers = {"run": _cmd_run, "generate": _cmd_generate}
    try:
        return handlers[args.command](args)
    except (SimulationError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_USAGE
