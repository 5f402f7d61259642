"""
optimize.py - Simulated annealing for biscuit placement
Key components:
- OptimizationConfig with named modes
- Neighbour move: single-coordinate nudges, rejected at the pan edges
- Cooling schedules (fast, boltzmann, exponential)
- Metropolis acceptance with best-so-far tracking
"""
import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from .errors import AnnealingConfigError
from .geometry import Placement, as_array, to_points

logger = logging.getLogger(__name__)

CostFunction = Callable[[np.ndarray], float]
NeighborFunction = Callable[[np.ndarray, float], np.ndarray]

COOLING_SCHEDULES = ("fast", "boltzmann", "exponential")


@dataclass
class OptimizationConfig:
    # Iteration budget ("runs" on the command line)
    iterations: int = 5_000_000

    # Temperature schedule
    initial_temperature: float = 100.0
    cooling: str = "fast"
    cooling_rate: float = 0.95          # exponential schedule only

    # Move parameters
    step_size: float = 0.1              # max nudge per attempt, pan units

    # Initial layout sampling
    radius_shrink: float = 0.8          # applied when Poisson-disk under-samples
    max_sampling_retries: int = 16

    # Optional early stop once the best cost reaches this value
    target_cost: Optional[float] = None

    seed: Optional[int] = None

    @classmethod
    def quick_mode(cls):
        """Fast mode for testing."""
        return cls(iterations=20_000)

    @classmethod
    def standard_mode(cls):
        """Standard mode - same budget the CLI has always defaulted to."""
        return cls(iterations=5_000_000)

    @classmethod
    def maximum_mode(cls):
        """Long runs for large pans or many biscuits."""
        return cls(iterations=20_000_000)

    @classmethod
    def from_mode(cls, mode: str):
        if mode == "quick":
            return cls.quick_mode()
        elif mode == "maximum":
            return cls.maximum_mode()
        return cls.standard_mode()


def perturbation_scale(n: int) -> int:
    """Attempts per whole degree of temperature; grows with problem size."""
    return max(1, math.ceil(n / 2))


def perturb_placement(
    placement: np.ndarray,
    temperature: float,
    rng: np.random.Generator,
    width: float,
    length: float,
    scale: Optional[int] = None,
    step: float = 0.1,
) -> np.ndarray:
    """
    Return a copy of the placement with floor(T) * scale + 1 nudge attempts applied.

    Each attempt moves one random point along one random axis. Attempts that
    would leave the open interval (0, extent) are dropped, not clamped.
    """
    coords = as_array(placement)
    n = len(coords)
    if scale is None:
        scale = perturbation_scale(n)
    attempts = int(math.floor(max(temperature, 0.0))) * scale + 1

    idxs = rng.integers(0, n, size=attempts)
    axes = rng.integers(0, 2, size=attempts)
    steps = rng.uniform(-step, step, size=attempts)
    extents = (width, length)

    for idx, axis, delta in zip(idxs, axes, steps):
        nxt = coords[idx, axis] + delta
        if 0.0 < nxt < extents[axis]:
            coords[idx, axis] = nxt
    return coords


def cooling_temperature(
    schedule: str,
    initial_temperature: float,
    k: int,
    rate: float = 0.95
) -> float:
    """Temperature after k completed iterations."""
    if schedule == "fast":
        return initial_temperature / (k + 1)
    elif schedule == "boltzmann":
        return initial_temperature / math.log(k + math.e)
    elif schedule == "exponential":
        return initial_temperature * rate ** k
    raise AnnealingConfigError(
        f"Unknown cooling schedule {schedule!r}, expected one of {', '.join(COOLING_SCHEDULES)}"
    )


@dataclass
class AnnealResult:
    best: Placement
    best_cost: float
    initial_cost: float
    iterations: int
    accepted: int
    final_temperature: float


class SimulatedAnnealing:
    """
    Classical simulated annealing, generic over a cost and a neighbour function.

    The solver never looks inside a placement: cost_fn scores it and
    neighbor_fn(placement, temperature) proposes the next one.
    """

    def __init__(
        self,
        initial_temperature: float = 100.0,
        cooling: str = "fast",
        cooling_rate: float = 0.95,
        target_cost: Optional[float] = None,
        rng: Optional[np.random.Generator] = None
    ):
        if initial_temperature <= 0:
            raise AnnealingConfigError(
                f"Initial temperature must be positive, got {initial_temperature}"
            )
        if cooling not in COOLING_SCHEDULES:
            raise AnnealingConfigError(
                f"Unknown cooling schedule {cooling!r}, expected one of {', '.join(COOLING_SCHEDULES)}"
            )
        if cooling == "exponential" and not 0.0 < cooling_rate < 1.0:
            raise AnnealingConfigError(f"Cooling rate must be in (0, 1), got {cooling_rate}")
        self.initial_temperature = initial_temperature
        self.cooling = cooling
        self.cooling_rate = cooling_rate
        self.target_cost = target_cost
        self.rng = rng if rng is not None else np.random.default_rng()

    @classmethod
    def from_config(cls, config: OptimizationConfig, rng: Optional[np.random.Generator] = None):
        return cls(
            initial_temperature=config.initial_temperature,
            cooling=config.cooling,
            cooling_rate=config.cooling_rate,
            target_cost=config.target_cost,
            rng=rng
        )

    def temperature(self, k: int) -> float:
        return cooling_temperature(self.cooling, self.initial_temperature, k, self.cooling_rate)

    def run(
        self,
        cost_fn: CostFunction,
        neighbor_fn: NeighborFunction,
        initial: np.ndarray,
        max_iters: int
    ) -> AnnealResult:
        """Anneal from `initial` for max_iters iterations and return the best state seen."""
        if max_iters < 1:
            raise AnnealingConfigError(
                f"Annealing needs at least one iteration to record a result, got {max_iters}"
            )

        current = as_array(initial)
        current_cost = cost_fn(current)
        initial_cost = current_cost
        best = current.copy()
        best_cost = current_cost

        T = self.initial_temperature
        accepted = 0
        iteration = 0
        log_every = max(1, max_iters // 10)

        while iteration < max_iters:
            candidate = neighbor_fn(current, T)
            candidate_cost = cost_fn(candidate)

            # Acceptance criterion (Metropolis)
            delta = candidate_cost - current_cost
            if delta <= 0 or (T > 0 and self.rng.random() < math.exp(-delta / T)):
                current = candidate
                current_cost = candidate_cost
                accepted += 1

                if current_cost < best_cost:
                    best_cost = current_cost
                    best = current.copy()

            iteration += 1
            T = self.temperature(iteration)

            if iteration % log_every == 0:
                logger.debug(
                    "iter=%d T=%.4g current=%.6g best=%.6g accepted=%d",
                    iteration, T, current_cost, best_cost, accepted
                )

            if self.target_cost is not None and best_cost <= self.target_cost:
                logger.info("Target cost %.6g reached after %d iterations", self.target_cost, iteration)
                break

        return AnnealResult(
            best=to_points(best),
            best_cost=float(best_cost),
            initial_cost=float(initial_cost),
            iterations=iteration,
            accepted=accepted,
            final_temperature=T
        )
