"""
cli.py - Command line interface for the biscuit packing solver

Usage:
    python run.py -w 10 -l 20 single -n 17
    python run.py -w 10 -l 20 --mode quick multi --start 1 --end 30

Modes (default iteration budgets, override with --runs):
    quick:      20,000 iterations per run
    standard:   5,000,000 iterations per run
    maximum:    20,000,000 iterations per run
"""
import argparse
import logging
import sys
from typing import List, Optional

from .app import parse, run_app
from .errors import BiscuitPackingError
from .optimize import COOLING_SCHEDULES, OptimizationConfig
from .validate import print_clearance_summary, validate_all_solutions


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Place biscuits on a pan so they are as far apart as possible"
    )
    parser.add_argument("-w", "--pan-width", type=float, required=True, help="Pan width")
    parser.add_argument("-l", "--pan-length", type=float, required=True, help="Pan length")
    parser.add_argument(
        "-r", "--runs", type=int, default=None,
        help="Number of simulated annealing iterations per run (overrides --mode)"
    )
    parser.add_argument(
        "--mode",
        choices=["quick", "standard", "maximum"],
        default="standard",
        help="Optimization mode"
    )
    parser.add_argument(
        "--cooling", choices=COOLING_SCHEDULES, default="fast", help="Cooling schedule"
    )
    parser.add_argument("--seed", type=int, default=None, help="Base random seed")
    parser.add_argument("--workers", type=int, default=None, help="Concurrent runs")
    parser.add_argument(
        "--executor", choices=["process", "thread"], default="process",
        help="Pool used to execute runs"
    )
    parser.add_argument("-o", "--output-dir", default=None, help="Directory for SVG files")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    single = sub.add_parser("single", help="Place a single number of biscuits")
    single.add_argument("-n", "--biscuits", type=int, required=True, help="Number of biscuits")
    multi = sub.add_parser("multi", help="Place every number of biscuits in a range")
    multi.add_argument("--start", type=int, required=True, help="First number of biscuits")
    multi.add_argument("--end", type=int, required=True, help="Last number of biscuits (inclusive)")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    args = build_parser().parse_args(argv)
    config = OptimizationConfig.from_mode(args.mode)
    if args.runs is None:
        args.runs = config.iterations
    return args


def main(argv: Optional[List[str]] = None) -> int:
    """Main solver entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    config = OptimizationConfig.from_mode(args.mode)
    config.iterations = args.runs
    config.cooling = args.cooling
    config.seed = args.seed

    try:
        app = parse(args)
    except BiscuitPackingError as e:
        print(e, file=sys.stderr)
        return 1

    print(app.header)
    outcomes = run_app(
        app,
        output_dir=args.output_dir,
        max_workers=args.workers,
        executor=args.executor,
        config=config
    )
    print("done")

    finished = {o.run.biscuits: o.placement for o in outcomes if o.ok}
    failed = [o for o in outcomes if not o.ok]
    if finished:
        width, length = app.runs[0].width, app.runs[0].length
        validate_all_solutions(finished, width, length, verbose=True)
        if len(app.runs) > 1:
            print_clearance_summary(finished, width, length)
    if failed:
        print(f"{len(failed)} run(s) failed", file=sys.stderr)
        return 1
    return 0
