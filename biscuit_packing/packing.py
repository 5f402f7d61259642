"""
packing.py - Biscuit packing problem and initial layouts

Key strategies:
1. Poisson-disk (blue-noise) start, much better spread than uniform random
2. Radius chosen to over-sample, then random trimming to exactly n
3. Simulated annealing on the minimum clearance
"""
import logging
import math
from typing import Optional

import numpy as np
from scipy.stats import qmc

from .errors import BiscuitsBelowOneError, InvalidPanError, SamplingError
from .geometry import Placement, PlacementLike, as_array, packing_cost, to_points
from .optimize import (
    AnnealResult, OptimizationConfig, SimulatedAnnealing,
    perturb_placement, perturbation_scale
)

logger = logging.getLogger(__name__)


def check_problem(n: int, width: float, length: float):
    if n < 1:
        raise BiscuitsBelowOneError()
    if not (width > 0 and length > 0):
        raise InvalidPanError(width, length)


def initial_radius(n: int, width: float, length: float) -> float:
    """
    Disk radius that makes the Poisson-disk process emit more than n samples.

    Samples always sit between r and 2r of a neighbour, so on a square pan
    spaced at 2r there is room for about n of them at this radius.
    """
    return (length + width) / (8.0 * math.sqrt(n))


def sampling_radius(n: int, width: float, length: float) -> float:
    """
    Starting radius for the sampler: initial_radius, capped at the short side.

    Candidates are drawn r to 2r away from an accepted sample, so a radius
    wider than the pan throws nearly all of them outside a thin pan.
    """
    return min(initial_radius(n, width, length), min(width, length))


def poisson_disk_samples(
    width: float,
    length: float,
    radius: float,
    rng: np.random.Generator
) -> np.ndarray:
    """Fill the width x length pan with Poisson-disk samples (Bridson's algorithm)."""
    engine = qmc.PoissonDisk(
        d=2,
        radius=radius,
        l_bounds=[0.0, 0.0],
        u_bounds=[width, length],
        rng=rng
    )
    return engine.fill_space()


def sample_initial_layout(
    n: int,
    width: float,
    length: float,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
    config: Optional[OptimizationConfig] = None
) -> np.ndarray:
    """
    Blue-noise starting layout with exactly n points inside the pan.

    The same generator drives sampling and trimming, so a seed (or a seeded
    rng) reproduces the layout exactly.
    """
    check_problem(n, width, length)
    if config is None:
        config = OptimizationConfig()
    if rng is None:
        rng = np.random.default_rng(seed)

    radius = sampling_radius(n, width, length)
    samples = poisson_disk_samples(width, length, radius, rng)

    retries = 0
    while len(samples) < n:
        if retries >= config.max_sampling_retries:
            raise SamplingError(
                f"Poisson-disk sampling produced {len(samples)} of {n} points "
                f"after {retries} radius reductions (radius={radius:.6g})"
            )
        radius *= config.radius_shrink
        retries += 1
        logger.debug(
            "Under-sampled %d < %d, retrying with radius %.6g", len(samples), n, radius
        )
        samples = poisson_disk_samples(width, length, radius, rng)

    # Randomly drop samples until the exact number of biscuits is reached
    keep = np.sort(rng.choice(len(samples), size=n, replace=False))
    return samples[keep]


class BiscuitPacking:
    """
    One placement problem: n biscuits in a width x length pan.

    Owns its random generator; every step of a run (sampling, neighbour
    moves, acceptance draws) borrows it in turn, and no two runs share one.
    """

    def __init__(
        self,
        n: int,
        width: float,
        length: float,
        rng: Optional[np.random.Generator] = None,
        config: Optional[OptimizationConfig] = None
    ):
        check_problem(n, width, length)
        self.n = n
        self.width = width
        self.length = length
        self.config = config or OptimizationConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.scale = perturbation_scale(n)

    def __str__(self) -> str:
        return f"{self.n} biscuits in a {self.width:g} X {self.length:g} pan."

    def initial_placement(self) -> np.ndarray:
        return sample_initial_layout(
            self.n, self.width, self.length, rng=self.rng, config=self.config
        )

    def cost(self, placement: PlacementLike) -> float:
        return packing_cost(placement, self.width, self.length)

    def perturb(self, placement: PlacementLike, temperature: float) -> np.ndarray:
        return perturb_placement(
            as_array(placement), temperature, self.rng, self.width, self.length,
            scale=self.scale, step=self.config.step_size
        )

    def solve(self, max_iters: Optional[int] = None, initial: Optional[PlacementLike] = None) -> AnnealResult:
        """Anneal from `initial` (or a fresh Poisson-disk layout) and return the best result."""
        if max_iters is None:
            max_iters = self.config.iterations
        start = self.initial_placement() if initial is None else as_array(initial)
        if len(start) != self.n:
            raise ValueError(f"Initial placement has {len(start)} points, expected {self.n}")

        solver = SimulatedAnnealing.from_config(self.config, rng=self.rng)
        logger.info("Annealing %s for %d iterations", self, max_iters)
        result = solver.run(self.cost, self.perturb, start, max_iters)
        logger.info(
            "Finished %s: cost %.6g -> %.6g (%d accepted)",
            self, result.initial_cost, result.best_cost, result.accepted
        )
        return result


def approximate(
    biscuits: int,
    width: float,
    length: float,
    iterations: int,
    seed: Optional[int] = None,
    config: Optional[OptimizationConfig] = None
) -> Placement:
    """Best placement of `biscuits` points found in `iterations` annealing steps."""
    problem = BiscuitPacking(
        biscuits, width, length,
        rng=np.random.default_rng(seed),
        config=config
    )
    return problem.solve(iterations).best


def initial_points(n: int, width: float, length: float, seed: Optional[int] = None) -> Placement:
    """Initial layout as a list of Points."""
    return to_points(sample_initial_layout(n, width, length, seed=seed))
