"""
Biscuit Packing Solver
Places n equal biscuits on a rectangular pan, maximising the smallest clearance:
- Poisson-disk (blue-noise) initial layout
- Simulated annealing on single-coordinate nudges
- Concurrent runs over a range of biscuit counts
- SVG output
"""

from .errors import (
    BiscuitPackingError,
    BiscuitsBelowOneError,
    StartGreaterThanEndError,
    InvalidPanError,
    SamplingError,
    AnnealingConfigError,
)

from .geometry import (
    Point,
    packing_cost,
    point_clearances,
    min_clearance,
)

from .optimize import (
    OptimizationConfig,
    SimulatedAnnealing,
    AnnealResult,
    perturb_placement,
)

from .packing import (
    BiscuitPacking,
    sample_initial_layout,
    initial_points,
    approximate,
)

from .validate import (
    validate_placement,
    validate_all_solutions,
)

from .io_utils import (
    render_packing,
    save_svg,
)

__version__ = "0.1.0"
