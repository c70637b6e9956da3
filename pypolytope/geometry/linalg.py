"""
Linear-algebra helpers on top of numpy/scipy.

Vectors are 1-D float arrays, sets of vectors are 2-D arrays with one vector
per row.
"""

from __future__ import annotations

from typing import Optional

import numpy as np
from scipy.linalg import null_space

from pypolytope.geometry.tolerance import Tolerance


def as_rows(vectors, dim: int) -> np.ndarray:
    """Coerce a (possibly empty) collection of vectors into a (k, dim) array."""
    arr = np.asarray(vectors, dtype=float)
    if arr.size == 0:
        return np.zeros((0, dim))
    return np.atleast_2d(arr)


def orthonormalize(vectors: np.ndarray, tol: Tolerance) -> np.ndarray:
    """Gram-Schmidt orthonormalization, dropping dependent vectors.

    Each vector is orthogonalized twice against the accepted ones, which keeps
    the result orthonormal to machine precision.
    """
    vectors = np.atleast_2d(np.asarray(vectors, dtype=float))
    basis = []
    for v in vectors:
        w = orthogonalize(v, basis)
        norm = np.linalg.norm(w)
        if norm > tol.eps:
            basis.append(w / norm)
    if not basis:
        return np.zeros((0, vectors.shape[1]))
    return np.array(basis)


def orthogonalize(v: np.ndarray, basis) -> np.ndarray:
    """Remove from v its components along the orthonormal rows of basis."""
    w = np.array(v, dtype=float)
    for _ in range(2):
        for b in basis:
            w = w - np.dot(w, b) * b
    return w


def orthogonal_complement(vectors: np.ndarray, dim: int, tol: Tolerance) -> np.ndarray:
    """Orthonormal basis (rows) of the subspace orthogonal to all given vectors."""
    rows = as_rows(vectors, dim)
    if rows.shape[0] == 0:
        return np.eye(dim)
    return null_space(rows, rcond=tol.eps).T


def rank(vectors: np.ndarray, tol: Tolerance) -> int:
    rows = np.asarray(vectors, dtype=float)
    if rows.size == 0:
        return 0
    return int(np.linalg.matrix_rank(np.atleast_2d(rows), tol=tol.eps))


def affine_rank(points: np.ndarray, tol: Tolerance) -> int:
    """Dimension of the affine hull of a set of points."""
    points = np.atleast_2d(np.asarray(points, dtype=float))
    if points.shape[0] <= 1:
        return 0
    return rank(points[1:] - points[0], tol)


def solve_square(matrix: np.ndarray, rhs: np.ndarray, tol: Tolerance) -> Optional[np.ndarray]:
    """Unique solution of a square system, or None when it is singular."""
    matrix = np.atleast_2d(np.asarray(matrix, dtype=float))
    if matrix.shape[0] != matrix.shape[1] or rank(matrix, tol) < matrix.shape[0]:
        return None
    return np.linalg.solve(matrix, np.asarray(rhs, dtype=float))


def independent_rows(vectors: np.ndarray, tol: Tolerance) -> list:
    """Indices of a maximal linearly independent subset, chosen greedily."""
    chosen = []
    basis = []
    for i, v in enumerate(np.atleast_2d(vectors)):
        w = orthogonalize(v, basis)
        norm = np.linalg.norm(w)
        if norm > tol.eps:
            basis.append(w / norm)
            chosen.append(i)
    return chosen
