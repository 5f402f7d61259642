"""
validate.py - Validation utilities for biscuit placements
"""
from typing import Dict, List, Optional
from dataclasses import dataclass

from shapely.geometry import Point as ShapelyPoint, box

from .geometry import PlacementLike, as_array, min_clearance, packing_cost


@dataclass
class ValidationResult:
    valid: bool
    n: int
    n_biscuits: int
    out_of_bounds: List[int]
    min_clearance: float
    cost: float
    error_message: Optional[str] = None


def validate_placement(
    placement: PlacementLike,
    n: int,
    width: float,
    length: float
) -> ValidationResult:
    """Validate a single placement against its pan."""
    coords = as_array(placement)

    if len(coords) != n:
        return ValidationResult(
            valid=False, n=n, n_biscuits=len(coords),
            out_of_bounds=[], min_clearance=0.0, cost=float("inf"),
            error_message=f"Expected {n} biscuits, got {len(coords)}"
        )

    # Check bounds (points on the edge still count as inside)
    pan = box(0.0, 0.0, width, length)
    out_of_bounds = [
        i for i, (x, y) in enumerate(coords)
        if not pan.covers(ShapelyPoint(x, y))
    ]

    clearance = min_clearance(coords, width, length)
    cost = packing_cost(coords, width, length)

    valid = not out_of_bounds
    error_msg = None
    if not valid:
        error_msg = f"{len(out_of_bounds)} out of bounds"

    return ValidationResult(
        valid=valid, n=n, n_biscuits=len(coords),
        out_of_bounds=out_of_bounds,
        min_clearance=clearance, cost=cost,
        error_message=error_msg
    )


def validate_all_solutions(
    solutions: Dict[int, PlacementLike],
    width: float,
    length: float,
    verbose: bool = True
) -> bool:
    """Validate every placement, keyed by biscuit count."""

    invalid: Dict[int, ValidationResult] = {}
    for n in sorted(solutions):
        result = validate_placement(solutions[n], n, width, length)
        if not result.valid:
            invalid[n] = result

    if verbose:
        if not invalid:
            print(f"✓ All {len(solutions)} placements are valid")
        else:
            print(f"✗ {len(invalid)} invalid placement(s)")
            for n, result in list(invalid.items())[:10]:
                print(f"  n={n}: {result.error_message}")

    return not invalid


def print_clearance_summary(
    solutions: Dict[int, PlacementLike],
    width: float,
    length: float
):
    """Print the minimum clearance reached for each biscuit count."""

    print("=" * 60)
    print(f"CLEARANCE SUMMARY ({width:g} X {length:g} pan)")
    print("=" * 60)

    for n in sorted(solutions):
        clearance = min_clearance(solutions[n], width, length)
        print(f"  n={n:3d}: clearance={clearance:.4f}, max radius={clearance / 2:.4f}")

    print("=" * 60)
