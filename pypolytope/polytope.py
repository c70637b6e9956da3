"""
Convex polytope facade.

A ``ConvexPolytope`` is created from one of three representations and derives
the others on demand:

- V-representation: the vertices (an (n, d) array),
- H-representation: bounding half-spaces ``n.x <= c`` (``Hyperplane`` tuple),
- FL-representation: the face lattice (``FaceLattice``).

Which representations are currently materialized is tracked by a ``Rep``
flag. All transitions go through ``_materialize``:

    V  <- FL (rank-0 level)      | H (vertex enumeration)
    FL <- V  (gift wrapping)     | H (via V)
    H  <- FL (facet hyperplanes) | V (via FL)

Instances are logically immutable; transforms return new polytopes. Lazy
initialization is not synchronized, so an instance shared between threads
must have its representations materialized first.

Example:
    cube = ConvexPolytope.from_points(list(itertools.product([0, 1], repeat=3)))
    cube.f_vector                  # (8, 12, 6, 1)
    cube.contains([0.5, 0.5, 1])   # Containment.BOUNDARY
"""

from __future__ import annotations

from enum import Flag, IntEnum, auto
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np
from scipy.spatial.distance import pdist
from scipy.stats import special_ortho_group

from pypolytope.config import get_config
from pypolytope.conversion.duality import (
    polar_hyperplanes,
    polar_lattice,
    polar_vertices,
    remove_h_redundancy,
)
from pypolytope.conversion.gift_wrapping import GiftWrapping
from pypolytope.conversion.vertex_enumeration import VertexEnumerator, hrep_to_vrep
from pypolytope.exceptions import DimensionMismatchError, InvalidInputError, RepresentationError
from pypolytope.geometry.hyperplane import Hyperplane
from pypolytope.geometry.linalg import affine_rank
from pypolytope.geometry.points import PointSet
from pypolytope.geometry.tolerance import Tolerance, default_tolerance
from pypolytope.lattice import FaceLattice
from pypolytope.logging import LOG_DEBUG, POLYTOPE_ASSERT, profile_scope


class Rep(Flag):
    """Materialized representations of a polytope."""

    NONE = 0
    VREP = auto()
    HREP = auto()
    FLREP = auto()


class Containment(IntEnum):
    """Position of a point relative to a polytope."""

    INSIDE = -1
    BOUNDARY = 0
    OUTSIDE = 1


class ConvexPolytope:
    """Bounded convex polytope in d-space with lazily derived representations."""

    def __init__(
        self,
        space_dim: int,
        vrep: Optional[np.ndarray] = None,
        hrep: Optional[Sequence[Hyperplane]] = None,
        flrep: Optional[FaceLattice] = None,
        tol: Optional[Tolerance] = None,
    ):
        """Build a polytope from already validated representations.

        Prefer the ``from_*`` constructors.
        """
        if vrep is None and hrep is None and flrep is None:
            raise InvalidInputError("representation", "at least one representation is required")
        self.tol = tol or default_tolerance()
        self._space_dim = space_dim
        self._state = Rep.NONE
        self._vrep: Optional[np.ndarray] = None
        self._hrep: Optional[Tuple[Hyperplane, ...]] = None
        self._flrep: Optional[FaceLattice] = None
        self._facet_planes: Optional[List[Hyperplane]] = None
        self._hrep_arrays: Optional[Tuple[np.ndarray, np.ndarray]] = None
        self._inner_point: Optional[np.ndarray] = None

        if vrep is not None:
            self._set_vrep(vrep)
        if hrep is not None:
            self._hrep = tuple(hrep)
            self._state |= Rep.HREP
        if flrep is not None:
            self._flrep = flrep
            self._state |= Rep.FLREP

    # =========================================================================
    # Constructors
    # =========================================================================

    @classmethod
    def from_points(cls, points, convexify: bool = False,
                    tol: Optional[Tolerance] = None) -> "ConvexPolytope":
        """Convex hull of a point set.

        Args:
            points: (n, d) array-like; interior and duplicate points are allowed.
            convexify: Build the face lattice immediately, which also reduces
                the stored points to the vertices.
            tol: Tolerance (default: from configuration).
        """
        points = np.asarray(points, dtype=float)
        if points.ndim != 2 or points.shape[0] == 0 or points.shape[1] == 0:
            raise InvalidInputError("points", "expected a non-empty (n, d) array")
        polytope = cls(points.shape[1], vrep=points, tol=tol)
        if convexify:
            polytope._materialize(Rep.FLREP)
        return polytope

    @classmethod
    def from_halfspaces(cls, hyperplanes: Sequence[Hyperplane], remove_redundancy: bool = False,
                        tol: Optional[Tolerance] = None) -> "ConvexPolytope":
        """Intersection of the half-spaces {x : n.x <= c}."""
        hyperplanes = list(hyperplanes)
        if not hyperplanes:
            raise InvalidInputError("hyperplanes", "at least one half-space is required")
        dim = hyperplanes[0].space_dim
        for hp in hyperplanes:
            if hp.space_dim != dim:
                raise DimensionMismatchError("hyperplanes", dim, hp.space_dim)
        if remove_redundancy:
            hyperplanes = remove_h_redundancy(hyperplanes, tol)
        return cls(dim, hrep=hyperplanes, tol=tol)

    @classmethod
    def from_inequalities(cls, A, b, remove_redundancy: bool = False,
                          tol: Optional[Tolerance] = None) -> "ConvexPolytope":
        """Polytope {x : A x <= b}; rows of A need not be normalized."""
        A = np.atleast_2d(np.asarray(A, dtype=float))
        b = np.asarray(b, dtype=float).reshape(-1)
        if A.shape[0] != b.shape[0]:
            raise DimensionMismatchError("b", A.shape[0], b.shape[0])
        hyperplanes = [Hyperplane(row, rhs) for row, rhs in zip(A, b)]
        return cls.from_halfspaces(hyperplanes, remove_redundancy, tol)

    @classmethod
    def from_face_lattice(cls, lattice: FaceLattice,
                          tol: Optional[Tolerance] = None) -> "ConvexPolytope":
        return cls(lattice.space_dim, flrep=lattice, tol=tol)

    def in_vrep(self) -> "ConvexPolytope":
        """Copy holding only the V-representation."""
        return ConvexPolytope(self._space_dim, vrep=self.vrep, tol=self.tol)

    def in_hrep(self) -> "ConvexPolytope":
        """Copy holding only the H-representation."""
        return ConvexPolytope(self._space_dim, hrep=self.hrep, tol=self.tol)

    def in_flrep(self) -> "ConvexPolytope":
        """Copy holding only the face lattice."""
        return ConvexPolytope(self._space_dim, flrep=self.flrep, tol=self.tol)

    # =========================================================================
    # Representation state machine
    # =========================================================================

    @property
    def state(self) -> Rep:
        return self._state

    def _set_vrep(self, vertices: np.ndarray) -> None:
        vrep = np.array(vertices, dtype=float)
        if vrep.ndim != 2 or vrep.shape[1] != self._space_dim:
            raise DimensionMismatchError("vertices", self._space_dim, vrep.shape[-1])
        vrep.setflags(write=False)
        self._vrep = vrep
        self._state |= Rep.VREP

    def _drop(self, rep: Rep) -> None:
        if rep is Rep.VREP:
            self._vrep = None
        elif rep is Rep.HREP:
            self._hrep = None
            self._hrep_arrays = None
        self._state &= ~rep

    def _materialize(self, rep: Rep) -> None:
        if rep in self._state:
            return

        if rep is Rep.VREP:
            if Rep.FLREP in self._state:
                self._set_vrep(self._flrep.vertices)
            else:
                with profile_scope("H -> V conversion"):
                    self._set_vrep(hrep_to_vrep(self._hrep, self.tol))

        elif rep is Rep.FLREP:
            self._materialize(Rep.VREP)
            with profile_scope("V -> FL conversion"):
                self._flrep = GiftWrapping(self._vrep, self.tol).construct_face_lattice()
            self._state |= Rep.FLREP
            self._drop(Rep.VREP)

        elif rep is Rep.HREP:
            self._materialize(Rep.FLREP)
            self._hrep = tuple(self._facet_hyperplanes())
            self._state |= Rep.HREP
            if get_config().config.debug.checks:
                self._check_vertices_inside()

        LOG_DEBUG(f"Materialized {rep.name}; state is now {self._state}")

    def _facet_hyperplanes(self) -> List[Hyperplane]:
        """Hyperplanes of the lattice facets, oriented away from the interior."""
        if self._facet_planes is None:
            lattice = self.flrep
            if lattice.dim != self._space_dim:
                raise RepresentationError(
                    "H-representation", "the polytope is not full-dimensional"
                )
            inner = lattice.top.inner_point
            self._facet_planes = [
                Hyperplane.from_basis(facet.affine_basis, orient_point=inner, tol=self.tol)
                for facet in lattice.facets
            ]
        return self._facet_planes

    def _check_vertices_inside(self) -> None:
        normals, constants = self._hrep_matrix()
        excess = self.vrep @ normals.T - constants
        POLYTOPE_ASSERT(
            float(np.max(excess)) <= self.tol.eps, "a vertex violates the derived half-spaces"
        )

    def _hrep_matrix(self) -> Tuple[np.ndarray, np.ndarray]:
        if self._hrep_arrays is None:
            hyperplanes = self.hrep
            self._hrep_arrays = (
                np.array([hp.normal for hp in hyperplanes]),
                np.array([hp.constant for hp in hyperplanes]),
            )
        return self._hrep_arrays

    # =========================================================================
    # Representations and derived properties
    # =========================================================================

    @property
    def space_dim(self) -> int:
        return self._space_dim

    @property
    def vrep(self) -> np.ndarray:
        """Vertices (read-only array; may include non-extreme input points)."""
        self._materialize(Rep.VREP)
        return self._vrep

    @property
    def hrep(self) -> Tuple[Hyperplane, ...]:
        """Bounding half-spaces; irredundant when derived from the lattice."""
        self._materialize(Rep.HREP)
        return self._hrep

    @property
    def flrep(self) -> FaceLattice:
        self._materialize(Rep.FLREP)
        return self._flrep

    @property
    def dim(self) -> int:
        """Dimension of the affine hull of the polytope."""
        if Rep.FLREP in self._state:
            return self._flrep.dim
        return affine_rank(self.vrep, self.tol)

    @property
    def f_vector(self) -> Tuple[int, ...]:
        return self.flrep.f_vector

    @property
    def inner_point(self) -> np.ndarray:
        """A point in the relative interior of the polytope."""
        if self._inner_point is None:
            if Rep.FLREP in self._state:
                self._inner_point = self._flrep.top.inner_point
            elif Rep.VREP in self._state:
                self._inner_point = self._vrep.mean(axis=0)
            else:
                self._inner_point = self._inner_point_from_hrep()
        return self._inner_point.copy()

    def _inner_point_from_hrep(self) -> np.ndarray:
        """Step from a vertex along its averaged edge directions halfway to the next facet."""
        enumerator = VertexEnumerator(self._hrep, self.tol)
        z, active = enumerator.initial_vertex()
        directions = [direction for direction, _ in enumerator.edge_directions(z, active)]
        POLYTOPE_ASSERT(len(directions) > 0, "initial vertex has no edges")
        mean = np.mean(directions, axis=0)
        mean = mean / np.linalg.norm(mean)
        hit, _ = enumerator.march(z, mean)
        return (z + hit) / 2

    # =========================================================================
    # Membership and distances
    # =========================================================================

    def _as_point(self, point, name: str = "point") -> np.ndarray:
        point = np.asarray(point, dtype=float)
        if point.ndim != 1 or point.shape[0] != self._space_dim:
            raise DimensionMismatchError(name, self._space_dim, point.shape[-1] if point.ndim else 0)
        return point

    def contains(self, point) -> Containment:
        """Classify the point as INSIDE, on the BOUNDARY or OUTSIDE."""
        point = self._as_point(point)
        normals, constants = self._hrep_matrix()
        values = normals @ point - constants
        if np.any(values > self.tol.eps):
            return Containment.OUTSIDE
        if np.all(values < -self.tol.eps):
            return Containment.INSIDE
        return Containment.BOUNDARY

    def contains_non_strict(self, point) -> bool:
        return self.contains(point) != Containment.OUTSIDE

    def contains_strict(self, point) -> bool:
        return self.contains(point) == Containment.INSIDE

    def on_boundary(self, point) -> bool:
        return self.contains(point) == Containment.BOUNDARY

    def nearest_point(self, point) -> np.ndarray:
        """Nearest point of the boundary.

        A boundary point is returned as is. From inside, the nearest facet
        projection is taken. From outside, the point is projected onto the
        affine hull of every face of the facets it sees, and the nearest
        projection lying in the polytope wins.
        """
        point = self._as_point(point)
        where = self.contains(point)
        if where == Containment.BOUNDARY:
            return point.copy()

        if where == Containment.INSIDE:
            candidates = [hp.project(point) for hp in self.hrep]
        else:
            lattice = self.flrep
            faces = set()
            for facet, hp in zip(lattice.facets, self._facet_hyperplanes()):
                if hp.contains_positive(point, self.tol):
                    faces.update(facet.all_non_strict_subs())
            candidates = []
            for face in faces:
                projection = face.affine_basis.project_in_space(point)
                if self.contains_non_strict(projection):
                    candidates.append(projection)
            POLYTOPE_ASSERT(len(candidates) > 0, "no face projection lies on the boundary")

        distances = [np.linalg.norm(c - point) for c in candidates]
        return candidates[int(np.argmin(distances))]

    def min_vertex_distance(self) -> float:
        """Smallest distance between two distinct vertices (0 for a point)."""
        vertices = self.vrep
        if vertices.shape[0] < 2:
            return 0.0
        return float(np.min(pdist(vertices)))

    def is_close(self, other: "ConvexPolytope") -> bool:
        """True when both polytopes have the same vertices within tolerance."""
        if other.space_dim != self._space_dim:
            return False
        mine = PointSet(self._space_dim, self.tol)
        for v in self.flrep.vertices:
            mine.add(v)
        theirs = other.flrep.vertices
        if len(mine) != theirs.shape[0]:
            return False
        return all(mine.index_of(v) is not None for v in theirs)

    # =========================================================================
    # Duality
    # =========================================================================

    def polar(self, convexify: bool = False) -> "ConvexPolytope":
        """Polar polytope; the origin must be an interior point.

        The cheapest available representation is dualized: a face lattice
        gives a face lattice, vertices give half-spaces, half-spaces give
        points (wrapped into a lattice if convexify is set). Vertex input is
        not checked for containing the origin.
        """
        if Rep.FLREP in self._state:
            return ConvexPolytope.from_face_lattice(polar_lattice(self._flrep, self.tol), self.tol)
        if Rep.VREP in self._state:
            return ConvexPolytope.from_halfspaces(polar_vertices(self._vrep, self.tol), tol=self.tol)
        return ConvexPolytope.from_points(
            polar_hyperplanes(self._hrep, self.tol), convexify=convexify, tol=self.tol
        )

    def polar_with_shift(self, convexify: bool = False) -> Tuple["ConvexPolytope", np.ndarray]:
        """Polar of the polytope translated so its interior point is the origin.

        Returns:
            The polar and the translation vector to add back afterwards.
        """
        centered, shift = self.shift_to_origin()
        return centered.polar(convexify), shift

    # =========================================================================
    # Transformations
    # =========================================================================

    def _mapped(self, point_map: Callable[[np.ndarray], np.ndarray],
                hyperplane_map: Optional[Callable[[Hyperplane], Hyperplane]],
                space_dim: Optional[int] = None) -> "ConvexPolytope":
        """Image under an injective affine map, keeping materialized representations."""
        vrep = hrep = flrep = None
        if Rep.FLREP in self._state:
            flrep = self._flrep.vertex_transform(point_map, self.tol)
        if Rep.VREP in self._state:
            vrep = np.array([point_map(v) for v in self._vrep])
        if Rep.HREP in self._state and hyperplane_map is not None:
            hrep = [hyperplane_map(hp) for hp in self._hrep]
        if vrep is None and hrep is None and flrep is None:
            vrep = np.array([point_map(v) for v in self.vrep])
        return ConvexPolytope(space_dim or self._space_dim, vrep=vrep, hrep=hrep,
                              flrep=flrep, tol=self.tol)

    def shift(self, vector) -> "ConvexPolytope":
        """Translate by vector."""
        vector = self._as_point(vector, "vector")
        return self._mapped(
            lambda x: x + vector,
            lambda hp: Hyperplane(hp.normal, hp.constant + float(np.dot(hp.normal, vector))),
        )

    def shift_to_origin(self) -> Tuple["ConvexPolytope", np.ndarray]:
        """Translate the interior point to the origin.

        Returns:
            The translated polytope and the former interior point.
        """
        inner = self.inner_point
        return self.shift(-inner), inner

    def rotate(self, rotation) -> "ConvexPolytope":
        """Apply an orthogonal matrix to row vectors: x -> x @ rotation."""
        rotation = np.asarray(rotation, dtype=float)
        d = self._space_dim
        if rotation.shape != (d, d):
            raise DimensionMismatchError("rotation", d, rotation.shape[0])
        if not self.tol.points_equal(rotation.T @ rotation, np.eye(d)):
            raise InvalidInputError("rotation", "matrix is not orthogonal")
        return self._mapped(
            lambda x: x @ rotation,
            lambda hp: Hyperplane(hp.normal @ rotation, hp.constant),
        )

    def rotate_random(self, seed: Optional[int] = None) -> "ConvexPolytope":
        """Rotate by a random special orthogonal matrix."""
        if self._space_dim == 1:
            return self._mapped(lambda x: x.copy(), lambda hp: hp)
        return self.rotate(special_ortho_group.rvs(self._space_dim, random_state=seed))

    def scale(self, factor: float, origin=None) -> "ConvexPolytope":
        """Homothety x -> origin + factor (x - origin) with factor > 0."""
        if not factor > 0:
            raise InvalidInputError("factor", f"must be positive, got {factor}")
        origin = np.zeros(self._space_dim) if origin is None else self._as_point(origin, "origin")

        def scale_hyperplane(hp: Hyperplane) -> Hyperplane:
            anchor = float(np.dot(hp.normal, origin))
            return Hyperplane(hp.normal, factor * (hp.constant - anchor) + anchor)

        return self._mapped(lambda x: origin + factor * (x - origin), scale_hyperplane)

    def lift_up(self, dim: int, value: float = 0.0) -> "ConvexPolytope":
        """Embed into a higher-dimensional space, filling new coordinates with value."""
        if dim < self._space_dim:
            raise InvalidInputError("dim", f"must be at least {self._space_dim}, got {dim}")
        padding = np.full(dim - self._space_dim, float(value))
        return self._mapped(lambda x: np.concatenate([x, padding]), None, space_dim=dim)

    # =========================================================================
    # Sections
    # =========================================================================

    def section_by_hyperplane(self, hyperplane: Hyperplane) -> "ConvexPolytope":
        """Intersection of the polytope with a hyperplane, as a V-polytope.

        Raises:
            InfeasibleSystemError: If the hyperplane misses the polytope.
        """
        if hyperplane.space_dim != self._space_dim:
            raise DimensionMismatchError("hyperplane", self._space_dim, hyperplane.space_dim)
        hyperplanes = list(self.hrep)
        below = hrep_to_vrep(hyperplanes + [hyperplane], self.tol)
        above = PointSet(self._space_dim, self.tol)
        for v in hrep_to_vrep(hyperplanes + [hyperplane.flipped()], self.tol):
            above.add(v)
        common = [v for v in below if above.index_of(v) is not None]
        POLYTOPE_ASSERT(len(common) > 0, "section of a feasible cut has no vertices")
        return ConvexPolytope.from_points(common, tol=self.tol)

    def __repr__(self) -> str:
        return f"ConvexPolytope(space_dim={self._space_dim}, state={self._state})"
