"""
Vertex enumeration: from half-spaces to vertices.

Starting at one vertex, the enumeration walks the edge graph of the polytope
breadth-first. At a vertex z with active set A, every (d-1)-subset of A with
independent normals defines a line through z; the line is an edge direction
when it can be oriented into the polytope, i.e. when all active normals make a
non-positive angle with it. Marching along the edge until the first other
hyperplane binds gives the adjacent vertex.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from functools import cmp_to_key
from itertools import combinations
from typing import List, Optional, Sequence, Tuple

import numpy as np

from pypolytope.config import get_config
from pypolytope.conversion.bootstrap import find_initial_vertex
from pypolytope.exceptions import InvalidInputError, UnboundedPolytopeError
from pypolytope.geometry.hyperplane import Hyperplane
from pypolytope.geometry.linalg import orthogonal_complement, rank, solve_square
from pypolytope.geometry.points import PointSet
from pypolytope.geometry.tolerance import Tolerance, default_tolerance
from pypolytope.logging import LOG_DEBUG, timed


@dataclass
class EnumeratedVertex:
    """A vertex together with the indices of the hyperplanes through it."""

    point: np.ndarray
    active: Tuple[int, ...]


class VertexEnumerator:
    """Breadth-first enumeration of the vertices of {x : n_i.x <= c_i}."""

    def __init__(self, hyperplanes: Sequence[Hyperplane], tol: Optional[Tolerance] = None,
                 method: Optional[str] = None):
        if not hyperplanes:
            raise InvalidInputError("hyperplanes", "at least one half-space is required")
        self.tol = tol or default_tolerance()
        self.method = method or get_config().config.solver.method
        self.hyperplanes = list(hyperplanes)
        self.dim = self.hyperplanes[0].space_dim
        self.normals = np.array([hp.normal for hp in self.hyperplanes])
        self.constants = np.array([hp.constant for hp in self.hyperplanes])

    def initial_vertex(self) -> Tuple[np.ndarray, Tuple[int, ...]]:
        return find_initial_vertex(self.normals, self.constants, self.tol, self.method)

    @timed
    def run(self) -> List[EnumeratedVertex]:
        """Enumerate all vertices, sorted lexicographically."""
        z0, active0 = self.initial_vertex()
        found = PointSet(self.dim, self.tol)
        found.add(z0)
        vertices = [EnumeratedVertex(z0, active0)]
        queue = deque([(z0, active0)])

        while queue:
            z, active = queue.popleft()
            for direction, edge in self.edge_directions(z, active):
                z_next, ties = self.march(z, direction)
                z_next = self._polish(z_next, edge, ties)
                if found.add(z_next)[1]:
                    next_active = self.active_set(z_next)
                    extra = set(next_active) - set(ties) - set(edge)
                    if extra:
                        LOG_DEBUG(f"Active set at {z_next.tolist()} extends the binding set by {sorted(extra)}")
                    vertices.append(EnumeratedVertex(z_next, next_active))
                    queue.append((z_next, next_active))

        vertices.sort(key=cmp_to_key(lambda a, b: self.tol.compare_points(a.point, b.point)))
        LOG_DEBUG(f"Enumerated {len(vertices)} vertices from {len(self.hyperplanes)} half-spaces")
        return vertices

    def active_set(self, point: np.ndarray) -> Tuple[int, ...]:
        """Indices of all hyperplanes passing through the point."""
        residual = np.abs(self.normals @ point - self.constants)
        return tuple(int(i) for i in np.flatnonzero(residual <= self.tol.eps))

    def edge_directions(self, z: np.ndarray, active: Sequence[int]):
        """Yield (unit direction, edge hyperplane indices) of every edge leaving z.

        Combinations whose normals are dependent, or whose line cannot be
        oriented into every active half-space, are skipped.
        """
        d = self.dim
        for edge in combinations(active, d - 1):
            edge_normals = self.normals[list(edge)]
            if d > 1 and rank(edge_normals, self.tol) < d - 1:
                continue
            direction = orthogonal_complement(edge_normals, d, self.tol)[0]
            direction = self._orient(direction, active)
            if direction is not None:
                yield direction, edge

    def _orient(self, direction: np.ndarray, active: Sequence[int]) -> Optional[np.ndarray]:
        """Point direction into the polytope or return None if impossible."""
        oriented = False
        for i in active:
            side = self.tol.sign(float(np.dot(self.normals[i], direction)))
            if side == 0:
                continue
            if not oriented:
                if side > 0:
                    direction = -direction
                oriented = True
            elif side > 0:
                return None
        return direction if oriented else None

    def march(self, z: np.ndarray, direction: np.ndarray) -> Tuple[np.ndarray, Tuple[int, ...]]:
        """Move from z along direction to the first binding hyperplanes."""
        rates = self.normals @ direction
        slack = self.constants - self.normals @ z
        steps = np.full(len(self.hyperplanes), np.inf)
        moving = np.abs(rates) > self.tol.eps
        steps[moving] = slack[moving] / rates[moving]
        steps[steps <= self.tol.eps] = np.inf

        t_min = float(np.min(steps))
        if not np.isfinite(t_min):
            raise UnboundedPolytopeError(direction)
        ties = tuple(int(i) for i in np.flatnonzero(np.abs(steps - t_min) <= self.tol.eps))
        return z + t_min * direction, ties

    def _polish(self, point: np.ndarray, edge: Sequence[int], ties: Sequence[int]) -> np.ndarray:
        """Recompute the vertex from the edge hyperplanes and one binding plane."""
        rows = list(edge) + [ties[0]]
        exact = solve_square(self.normals[rows], self.constants[rows], self.tol)
        if exact is None or not self.tol.points_equal(exact, point):
            return point
        return exact


def hrep_to_vrep(hyperplanes: Sequence[Hyperplane], tol: Optional[Tolerance] = None) -> np.ndarray:
    """Vertices of the polytope bounded by the half-spaces, as an (n, d) array."""
    vertices = VertexEnumerator(hyperplanes, tol).run()
    return np.array([v.point for v in vertices])
