"""Tolerance-aware collections of points."""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

import numpy as np

from pypolytope.geometry.tolerance import Tolerance


class PointSet:
    """Insertion-ordered set of points where points within eps coincide."""

    def __init__(self, dim: int, tol: Tolerance):
        self.dim = dim
        self.tol = tol
        self._points = np.zeros((0, dim))

    def __len__(self) -> int:
        return self._points.shape[0]

    def __iter__(self):
        return iter(self._points)

    def index_of(self, point: np.ndarray) -> Optional[int]:
        if len(self) == 0:
            return None
        close = np.all(np.abs(self._points - point) <= self.tol.eps, axis=1)
        hits = np.flatnonzero(close)
        return int(hits[0]) if hits.size else None

    def add(self, point: np.ndarray) -> Tuple[int, bool]:
        """Insert a point unless an equal one is present.

        Returns:
            Index of the stored point and whether it was newly added.
        """
        point = np.asarray(point, dtype=float)
        found = self.index_of(point)
        if found is not None:
            return found, False
        self._points = np.vstack([self._points, point])
        return len(self) - 1, True

    def as_array(self) -> np.ndarray:
        return self._points.copy()


def unique_points(points: Iterable, tol: Tolerance) -> np.ndarray:
    """Drop duplicates (within tolerance), keeping the first occurrence."""
    points = np.atleast_2d(np.asarray(points, dtype=float))
    collection = PointSet(points.shape[1], tol)
    for p in points:
        collection.add(p)
    return collection.as_array()


def lex_sorted(points: np.ndarray) -> np.ndarray:
    """Sort points lexicographically by their coordinates."""
    points = np.atleast_2d(points)
    if points.shape[0] == 0:
        return points
    order = np.lexsort(points.T[::-1])
    return points[order]


def lex_min_index(points: np.ndarray) -> int:
    return int(np.lexsort(np.atleast_2d(points).T[::-1])[0])
