"""
First vertex of a half-space system.

A linear program over the system gives some feasible point; the point is then
pushed along null-space directions of its tight constraints until d linearly
independent constraints are tight, which makes it a vertex.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np
from scipy.optimize import linprog

from pypolytope.exceptions import InfeasibleSystemError, SolverFailedError, UnboundedPolytopeError
from pypolytope.geometry.linalg import independent_rows, orthogonal_complement, rank, solve_square
from pypolytope.geometry.tolerance import Tolerance
from pypolytope.logging import LOG_DEBUG, POLYTOPE_ASSERT

# linprog status codes
_LP_INFEASIBLE = 2
_LP_UNBOUNDED = 3

# HiGHS reports feasibility only up to about 1e-7
_LP_ACTIVE_EPS = 1e-7


def find_initial_vertex(normals: np.ndarray, constants: np.ndarray, tol: Tolerance,
                        method: str = "highs") -> Tuple[np.ndarray, Tuple[int, ...]]:
    """Find one vertex of {x : normals @ x <= constants} and its active set.

    Args:
        normals: Unit normals of the hyperplanes, shape (m, d).
        constants: Hyperplane constants, shape (m,).
        tol: Tolerance for the active-set scan.
        method: ``scipy.optimize.linprog`` method.

    Returns:
        The vertex and the sorted indices of the hyperplanes through it.

    Raises:
        InfeasibleSystemError: The system has no solution.
        UnboundedPolytopeError: The feasible region is unbounded.
        SolverFailedError: The LP solver failed for another reason.
    """
    m, d = normals.shape
    result = _solve(np.ones(d), normals, constants, method)
    if result.status == _LP_UNBOUNDED:
        raise UnboundedPolytopeError()
    if result.status == _LP_INFEASIBLE:
        # HiGHS may answer "infeasible or unbounded"; a zero objective decides
        feasibility = _solve(np.zeros(d), normals, constants, method)
        if feasibility.status == _LP_INFEASIBLE:
            raise InfeasibleSystemError(m)
        if not feasibility.success:
            raise SolverFailedError(feasibility.message, feasibility.status)
        raise UnboundedPolytopeError()
    if not result.success:
        raise SolverFailedError(result.message, result.status)

    x = _purify(np.asarray(result.x, dtype=float), normals, constants, tol)
    active = tuple(int(i) for i in np.flatnonzero(np.abs(normals @ x - constants) <= tol.eps))
    POLYTOPE_ASSERT(rank(normals[list(active)], tol) == d, "bootstrap point is not a vertex")
    LOG_DEBUG(f"Initial vertex {x.tolist()} with {len(active)} active hyperplanes")
    return x, active


def _solve(objective: np.ndarray, normals: np.ndarray, constants: np.ndarray, method: str):
    return linprog(
        c=objective,
        A_ub=normals,
        b_ub=constants,
        bounds=[(None, None)] * normals.shape[1],
        method=method,
    )


def _purify(x: np.ndarray, normals: np.ndarray, constants: np.ndarray,
            tol: Tolerance) -> np.ndarray:
    """Move a feasible point to a vertex without leaving the region."""
    d = normals.shape[1]
    active_eps = max(tol.eps, _LP_ACTIVE_EPS)
    while True:
        active = np.flatnonzero(np.abs(normals @ x - constants) <= active_eps)
        tight = normals[active]
        if rank(tight, tol) == d:
            break
        direction = orthogonal_complement(tight, d, tol)[0]
        step = _step_to_boundary(x, direction, normals, constants, tol)
        if step is None:
            direction = -direction
            step = _step_to_boundary(x, direction, normals, constants, tol)
        if step is None:
            raise UnboundedPolytopeError(direction)
        x = x + step * direction

    chosen = active[independent_rows(normals[active], tol)]
    polished = solve_square(normals[chosen], constants[chosen], tol)
    if polished is not None:
        x = polished
    return x


def _step_to_boundary(x, direction, normals, constants, tol: Tolerance):
    """Smallest positive step along direction that makes a constraint tight."""
    rates = normals @ direction
    slack = constants - normals @ x
    moving = rates > tol.eps
    if not np.any(moving):
        return None
    steps = np.maximum(slack[moving], 0.0) / rates[moving]
    return float(np.min(steps))
