"""
app.py - Run orchestration: turn CLI arguments into runs and execute them concurrently
Each run is a pure computation; rendering, saving and announcements happen
here, after the run's result comes back.
"""
import logging
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import List, Optional

from .errors import (
    AnnealingConfigError, BiscuitsBelowOneError, InvalidPanError, StartGreaterThanEndError
)
from .geometry import Placement
from .io_utils import get_output_path, output_filename, render_packing, save_svg
from .optimize import OptimizationConfig
from .packing import approximate

logger = logging.getLogger(__name__)

# Pan sides are scaled up so the SVG comes out with reasonable dimensions
PAN_SCALE = 10.0


@dataclass
class Run:
    biscuits: int
    width: float
    length: float
    iters: int
    seed: Optional[int] = None
    announce_end: Optional[str] = None


@dataclass
class App:
    header: str
    runs: List[Run] = field(default_factory=list)


@dataclass
class RunOutcome:
    run: Run
    placement: Optional[Placement] = None
    path: Optional[str] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _run_seed(base_seed: Optional[int], biscuits: int) -> Optional[int]:
    return None if base_seed is None else base_seed + biscuits


def parse(args) -> App:
    """Build the App from parsed command line arguments."""
    if not (args.pan_width > 0 and args.pan_length > 0):
        raise InvalidPanError(args.pan_width, args.pan_length)
    if args.runs < 1:
        raise AnnealingConfigError(f"runs must be at least 1, got {args.runs}")

    width = args.pan_width * PAN_SCALE
    length = args.pan_length * PAN_SCALE
    iters = args.runs
    seed = getattr(args, "seed", None)

    if args.command == "single":
        biscuits = args.biscuits
        if biscuits < 1:
            raise BiscuitsBelowOneError()

        header = (
            f"optimizing placement of {biscuits} biscuits on a "
            f"{args.pan_width:g} X {args.pan_length:g} pan with {iters} runs"
        )
        run = Run(
            biscuits=biscuits, width=width, length=length, iters=iters,
            seed=_run_seed(seed, biscuits), announce_end=None
        )
        return App(header=header, runs=[run])

    start, end = args.start, args.end
    if start < 1 or end < 1:
        raise BiscuitsBelowOneError()
    # equal bounds is just a single run
    if start > end:
        raise StartGreaterThanEndError(start, end)

    header = (
        f"optimizing placement of biscuits from {start} to {end} on a "
        f"{args.pan_width:g} X {args.pan_length:g} pan with {iters} runs"
    )
    runs = [
        Run(
            biscuits=n, width=width, length=length, iters=iters,
            seed=_run_seed(seed, n),
            announce_end=f"finished placing {n} biscuits"
        )
        for n in range(start, end + 1)
    ]
    return App(header=header, runs=runs)


def execute_run(run: Run, config: Optional[OptimizationConfig] = None) -> Placement:
    """The unit of work handed to the pool; no side effects."""
    return approximate(run.biscuits, run.width, run.length, run.iters, seed=run.seed, config=config)


def _make_executor(kind: str, max_workers: Optional[int]) -> Executor:
    if kind == "thread":
        return ThreadPoolExecutor(max_workers=max_workers)
    elif kind == "process":
        return ProcessPoolExecutor(max_workers=max_workers)
    raise ValueError(f"Unknown executor {kind!r}, expected 'process' or 'thread'")


def run_app(
    app: App,
    output_dir: Optional[str] = None,
    max_workers: Optional[int] = None,
    executor: str = "process",
    config: Optional[OptimizationConfig] = None
) -> List[RunOutcome]:
    """
    Execute every run concurrently, then render and save each result.

    Completion order is arbitrary. A failed run is announced on its own line
    and kept in the returned outcomes, never dropped.
    """
    outcomes: List[RunOutcome] = []

    with _make_executor(executor, max_workers) as pool:
        futures = {pool.submit(execute_run, run, config): run for run in app.runs}

        for future in as_completed(futures):
            run = futures[future]
            outcome = RunOutcome(run=run)
            try:
                outcome.placement = future.result()
                document = render_packing(run.width, run.length, outcome.placement)
                path = get_output_path(output_filename(run.biscuits, run.width, run.length), output_dir)
                outcome.path = save_svg(document, path)
            except Exception as e:
                logger.debug("Run with %d biscuits failed", run.biscuits, exc_info=True)
                outcome.error = e
                print(f"failed placing {run.biscuits} biscuits: {e}")
            else:
                if run.announce_end:
                    print(run.announce_end)
            outcomes.append(outcome)

    return outcomes
