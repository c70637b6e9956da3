"""
Minkowski sum and difference of convex polytopes.

The sum P + Q = {p + q} is the convex hull of all pairwise vertex sums. The
difference F - G = {x : x + G in F} is computed from half-spaces: each facet
n.x <= c of F is moved inwards by the support value max_{g in G} n.g, and the
vertices of the resulting system are wrapped into a face lattice.

Example:
    square = fabrics.cube01_vrep(2)
    grown = sum_by_convex_hull(square, fabrics.ball_oo([0, 0], 0.5))
    difference(grown, fabrics.ball_oo([0, 0], 0.5)).is_close(square)   # True
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from pypolytope.conversion.vertex_enumeration import hrep_to_vrep
from pypolytope.exceptions import DimensionMismatchError, InfeasibleSystemError
from pypolytope.geometry.hyperplane import Hyperplane
from pypolytope.geometry.points import unique_points
from pypolytope.geometry.tolerance import Tolerance
from pypolytope.logging import LOG_DEBUG, timed
from pypolytope.polytope import ConvexPolytope


def _check_space(first: ConvexPolytope, second: ConvexPolytope) -> None:
    if first.space_dim != second.space_dim:
        raise DimensionMismatchError("polytope", first.space_dim, second.space_dim)


def sum_points(first, second, tol: Tolerance) -> np.ndarray:
    """All pairwise sums a + b of two point sets, duplicates merged."""
    first = np.atleast_2d(np.asarray(first, dtype=float))
    second = np.atleast_2d(np.asarray(second, dtype=float))
    sums = (first[:, None, :] + second[None, :, :]).reshape(-1, first.shape[1])
    return unique_points(sums, tol)


@timed
def sum_by_convex_hull(first: ConvexPolytope, second: ConvexPolytope,
                       tol: Optional[Tolerance] = None) -> ConvexPolytope:
    """Minkowski sum as the wrapped hull of the pairwise vertex sums.

    Returns:
        The sum with its face lattice built.
    """
    _check_space(first, second)
    tol = tol or first.tol
    points = sum_points(first.vrep, second.vrep, tol)
    LOG_DEBUG(f"Wrapping {points.shape[0]} pairwise sums")
    return ConvexPolytope.from_points(points, convexify=True, tol=tol)


def support_value(vertices: np.ndarray, direction: np.ndarray) -> float:
    """max <direction, v> over the vertices."""
    return float(np.max(np.asarray(vertices) @ direction))


def shrink_halfspaces(hyperplanes, vertices: np.ndarray) -> List[Hyperplane]:
    """Move every half-space n.x <= c inwards to n.x <= c - h(n)."""
    return [
        Hyperplane(hp.normal, hp.constant - support_value(vertices, hp.normal))
        for hp in hyperplanes
    ]


@timed
def difference(minuend: ConvexPolytope, subtrahend: ConvexPolytope,
               tol: Optional[Tolerance] = None) -> Optional[ConvexPolytope]:
    """Minkowski difference {x : x + subtrahend is inside minuend}.

    The minuend must be full-dimensional, since its facets are used.

    Returns:
        The difference with its face lattice built, or None when it is empty.
    """
    _check_space(minuend, subtrahend)
    tol = tol or minuend.tol
    shrunk = shrink_halfspaces(minuend.hrep, subtrahend.vrep)
    try:
        vertices = hrep_to_vrep(shrunk, tol)
    except InfeasibleSystemError:
        LOG_DEBUG("Minkowski difference is empty")
        return None
    return ConvexPolytope.from_points(vertices, convexify=True, tol=tol)
