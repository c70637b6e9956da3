"""
Gift wrapping: from a point cloud to the face lattice of its convex hull.

The hull of k-dimensional points is built facet by facet. An initial facet is
found by supporting the set at its lexicographically smallest point and
rotating the supporting hyperplane until it touches k affinely independent
points. Each facet is wrapped recursively in its own (k-1)-dimensional
coordinates, which yields its ridges. A ridge shared by only one known facet
is then "rolled over": the facet hyperplane is rotated about the ridge until
it hits another point, giving the neighbouring facet. Points are tracked by
their index in the deduplicated input, so faces found in different
coordinate frames are matched by vertex-index sets.
"""

from __future__ import annotations

from collections import defaultdict, deque
from itertools import combinations
from typing import Dict, FrozenSet, List, Optional, Tuple

import numpy as np

from pypolytope.config import get_config
from pypolytope.exceptions import InvalidInputError
from pypolytope.geometry.basis import AffineBasis
from pypolytope.geometry.linalg import orthogonal_complement, orthogonalize
from pypolytope.geometry.points import lex_min_index, lex_sorted, unique_points
from pypolytope.geometry.tolerance import Tolerance, default_tolerance
from pypolytope.lattice import FaceLattice, FLNode
from pypolytope.logging import LOG_DEBUG, POLYTOPE_ASSERT, timed


class _Face:
    """Combinatorial face found during wrapping: vertex indices and facets."""

    __slots__ = ("vertices", "dim", "faces", "normal")

    def __init__(self, vertices: FrozenSet[int], dim: int, faces: Optional[List["_Face"]] = None):
        self.vertices = frozenset(vertices)
        self.dim = dim
        self.faces = faces or []
        self.normal: Optional[np.ndarray] = None


def _simplex(indices) -> _Face:
    indices = tuple(sorted(int(i) for i in indices))
    if len(indices) == 1:
        return _Face(frozenset(indices), 0)
    faces = [_simplex(sub) for sub in combinations(indices, len(indices) - 1)]
    return _Face(frozenset(indices), len(indices) - 1, faces)


class _Wrapper:
    """Hull of points given in coordinates of their own (full) affine hull."""

    def __init__(self, coords: np.ndarray, ids: np.ndarray, tol: Tolerance):
        self.coords = coords
        self.ids = ids
        self.tol = tol
        self.dim = coords.shape[1]
        self._row_of = {int(i): row for row, i in enumerate(ids)}
        self.face = self._wrap()

    def _wrap(self) -> _Face:
        m, k = self.coords.shape
        if k == 1:
            lo = int(self.ids[np.argmin(self.coords[:, 0])])
            hi = int(self.ids[np.argmax(self.coords[:, 0])])
            return _Face(frozenset([lo, hi]), 1, [_Face(frozenset([lo]), 0), _Face(frozenset([hi]), 0)])
        if m == k + 1:
            return _simplex(self.ids)
        return self._gift_wrap()

    def _gift_wrap(self) -> _Face:
        first = self._build_facet(*self._initial_plane())
        facets: Dict[FrozenSet[int], _Face] = {first.vertices: first}
        owners = defaultdict(set)
        for ridge in first.faces:
            owners[ridge.vertices].add(first.vertices)

        queue = deque([first])
        while queue:
            facet = queue.popleft()
            for ridge in facet.faces:
                if len(owners[ridge.vertices]) >= 2:
                    continue
                neighbor = self._build_facet(*self._roll_over(facet, ridge))
                POLYTOPE_ASSERT(
                    neighbor.vertices != facet.vertices,
                    "rolling over a ridge returned the same facet",
                )
                if neighbor.vertices not in facets:
                    facets[neighbor.vertices] = neighbor
                    for sub in neighbor.faces:
                        owners[sub.vertices].add(neighbor.vertices)
                    queue.append(neighbor)
                owners[ridge.vertices].add(neighbor.vertices)

        vertices = frozenset().union(*facets.keys())
        return _Face(vertices, self.dim, list(facets.values()))

    # =========================================================================
    # Hyperplane rotations
    # =========================================================================

    def _initial_plane(self) -> Tuple[np.ndarray, float]:
        """Supporting hyperplane through k affinely independent points."""
        k = self.dim
        origin = self.coords[lex_min_index(self.coords)]
        normal = np.zeros(k)
        normal[0] = -1.0
        flat = AffineBasis(origin, tol=self.tol)
        rel = self.coords - origin

        while flat.sub_space_dim < k - 1:
            e = orthogonal_complement(np.vstack([flat.basis, normal]), k, self.tol)[0]
            j, a, b = self._min_cos_point(rel, e, normal)
            added = flat.add_point(self.coords[j])
            POLYTOPE_ASSERT(added, "initial facet point is dependent on the current flat")
            r = (a * e + b * normal) / np.hypot(a, b)
            normal = np.dot(r, normal) * e - np.dot(r, e) * normal
            normal = self._orient(normal / np.linalg.norm(normal), rel)
        return normal, float(np.dot(normal, origin))

    def _roll_over(self, facet: _Face, ridge: _Face) -> Tuple[np.ndarray, float]:
        """Hyperplane of the facet adjacent to facet across ridge."""
        ridge_pts = self.coords[[self._row_of[i] for i in sorted(ridge.vertices)]]
        ridge_basis = AffineBasis.from_points(ridge_pts, self.tol)
        origin = ridge_basis.origin

        apex = min(facet.vertices - ridge.vertices)
        inward = orthogonalize(
            self.coords[self._row_of[apex]] - origin, list(ridge_basis.basis) + [facet.normal]
        )
        inward = inward / np.linalg.norm(inward)

        rel = self.coords - origin
        _, a, b = self._min_cos_point(rel, inward, facet.normal)
        normal = b * inward - a * facet.normal
        normal = self._orient(normal / np.linalg.norm(normal), rel)
        return normal, float(np.dot(normal, origin))

    def _min_cos_point(self, rel: np.ndarray, e: np.ndarray, n: np.ndarray) -> Tuple[int, float, float]:
        """Point whose projection onto span(e, n) makes the largest angle with e."""
        a = rel @ e
        b = rel @ n
        lengths = np.hypot(a, b)
        candidates = np.flatnonzero(lengths > self.tol.eps)
        j = int(candidates[np.argmin(a[candidates] / lengths[candidates])])
        return j, float(a[j]), float(b[j])

    def _orient(self, normal: np.ndarray, rel: np.ndarray) -> np.ndarray:
        """Flip normal so that every point is on its non-positive side."""
        dots = rel @ normal
        off_plane = np.flatnonzero(np.abs(dots) > self.tol.eps)
        POLYTOPE_ASSERT(off_plane.size > 0, "all points lie on one hyperplane")
        if dots[off_plane[0]] > 0:
            normal = -normal
            dots = -dots
        POLYTOPE_ASSERT(
            float(np.max(dots)) <= self.tol.eps, "rotated hyperplane does not support the points"
        )
        return normal

    # =========================================================================
    # Facets
    # =========================================================================

    def _build_facet(self, normal: np.ndarray, constant: float) -> _Face:
        rows = np.flatnonzero(np.abs(self.coords @ normal - constant) <= self.tol.eps)
        k = self.dim
        POLYTOPE_ASSERT(rows.size >= k, f"facet hyperplane holds only {rows.size} points")
        ids = self.ids[rows]
        if rows.size == k:
            face = _simplex(ids)
        else:
            points = self.coords[rows]
            basis = AffineBasis.from_points(points, self.tol)
            POLYTOPE_ASSERT(basis.sub_space_dim == k - 1, "facet points do not span a hyperplane")
            face = _Wrapper(basis.project(points), ids, self.tol).face
        face.normal = normal
        return face


class GiftWrapping:
    """Convex hull of a finite point set as a face lattice.

    Duplicate points (within tolerance) are merged. A set whose affine hull
    is lower-dimensional is wrapped in coordinates of that hull; the lattice
    is still expressed in the original coordinates.

    Example:
        lattice = GiftWrapping(points).construct_face_lattice()
        lattice.f_vector  # (8, 12, 6, 1) for a cube
    """

    def __init__(self, points, tol: Optional[Tolerance] = None):
        self.tol = tol or default_tolerance()
        points = np.asarray(points, dtype=float)
        if points.ndim != 2 or points.shape[0] == 0 or points.shape[1] == 0:
            raise InvalidInputError("points", "expected a non-empty (n, d) array")

        self.points = unique_points(points, self.tol)
        self.space_dim = self.points.shape[1]
        hull_basis = AffineBasis.from_points(self.points, self.tol)
        self.dim = hull_basis.sub_space_dim

        ids = np.arange(self.points.shape[0])
        if self.dim == 0:
            self._hull = _Face(frozenset([0]), 0)
        else:
            coords = self.points if hull_basis.is_full_dim else hull_basis.project(self.points)
            self._hull = self._wrap(coords, ids)
        LOG_DEBUG(
            f"Wrapped {points.shape[0]} points in {self.space_dim}-space: "
            f"{len(self._hull.vertices)} vertices, dimension {self.dim}"
        )

    @timed
    def _wrap(self, coords: np.ndarray, ids: np.ndarray) -> _Face:
        return _Wrapper(coords, ids, self.tol).face

    @property
    def vertices(self) -> np.ndarray:
        """Extreme points of the set in lexicographic order."""
        return lex_sorted(self.points[sorted(self._hull.vertices)])

    def construct_face_lattice(self) -> FaceLattice:
        """Assemble the face lattice bottom-up from the wrapped faces."""
        faces_by_rank: List[Dict[FrozenSet[int], List[FrozenSet[int]]]] = [
            {} for _ in range(self.dim + 1)
        ]
        stack = [self._hull]
        while stack:
            face = stack.pop()
            if face.vertices in faces_by_rank[face.dim]:
                continue
            faces_by_rank[face.dim][face.vertices] = [sub.vertices for sub in face.faces]
            stack.extend(face.faces)

        nodes: Dict[FrozenSet[int], FLNode] = {
            key: FLNode.vertex(self.points[next(iter(key))], self.tol) for key in faces_by_rank[0]
        }
        levels = [list(nodes.values())]
        for rank in range(1, self.dim + 1):
            below = nodes
            nodes = {
                key: FLNode.from_subs(below[sub] for sub in subs)
                for key, subs in faces_by_rank[rank].items()
            }
            levels.append(list(nodes.values()))

        lattice = FaceLattice(levels)
        if get_config().config.debug.checks:
            lattice.check_consistency()
        return lattice
