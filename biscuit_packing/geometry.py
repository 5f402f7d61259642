"""
geometry.py - Points, clearances and the packing objective
A biscuit is just its centre point; its radius only matters when rendering.
Clearance of a biscuit = distance to its nearest neighbour or pan edge.
"""
import math
from typing import List, NamedTuple, Sequence, Union

import numpy as np
from scipy.spatial.distance import pdist, squareform

from .errors import BiscuitsBelowOneError


class Point(NamedTuple):
    x: float
    y: float

    def distance(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


Placement = List[Point]
PlacementLike = Union[Sequence[Point], np.ndarray]


def as_array(placement: PlacementLike) -> np.ndarray:
    """Convert a placement into an (n, 2) float array (always a fresh copy)."""
    coords = np.array(placement, dtype=float)
    if coords.size == 0:
        return coords.reshape(0, 2)
    return coords.reshape(-1, 2)


def to_points(coords: np.ndarray) -> Placement:
    """Convert an (n, 2) array back into a list of Points."""
    return [Point(float(x), float(y)) for x, y in coords]


def edge_distances(coords: np.ndarray, width: float, length: float) -> np.ndarray:
    """Distance of every point to its closest pan edge."""
    x, y = coords[:, 0], coords[:, 1]
    return np.minimum.reduce([width - x, x, length - y, y])


def pairwise_distances(coords: np.ndarray) -> np.ndarray:
    """Full (n, n) distance matrix; the diagonal is +inf so a point never counts itself."""
    dist = squareform(pdist(coords))
    np.fill_diagonal(dist, np.inf)
    return dist


def point_clearances(placement: PlacementLike, width: float, length: float) -> np.ndarray:
    """Per point: min distance to the four edges and to every other point."""
    coords = as_array(placement)
    if len(coords) == 0:
        raise BiscuitsBelowOneError()
    clearances = edge_distances(coords, width, length)
    if len(coords) > 1:
        clearances = np.minimum(clearances, pairwise_distances(coords).min(axis=1))
    return clearances


def min_clearance(placement: PlacementLike, width: float, length: float) -> float:
    return float(point_clearances(placement, width, length).min())


def packing_cost(placement: PlacementLike, width: float, length: float) -> float:
    """
    Objective to minimise: min(width, length) - smallest clearance.

    Other points are told apart by index, so coincident points see each
    other at distance 0 and the cost becomes min(width, length).
    """
    return float(min(width, length) - min_clearance(placement, width, length))
