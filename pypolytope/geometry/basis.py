"""Affine subspaces given by an origin and orthonormal directions."""

from __future__ import annotations

from typing import Optional

import numpy as np

from pypolytope.exceptions import DimensionMismatchError
from pypolytope.geometry.linalg import orthogonalize, orthonormalize
from pypolytope.geometry.tolerance import Tolerance, default_tolerance


class AffineBasis:
    """Origin point plus an orthonormal set of direction vectors.

    The subspace dimension grows only through ``add_vector``/``add_point``,
    which orthogonalize the new direction against the current ones and report
    whether it was independent.

    Attributes:
        origin: Point of the affine subspace, shape (d,).
        basis: Orthonormal directions, shape (k, d).
        tol: Tolerance used for independence and containment.
    """

    def __init__(
        self,
        origin: np.ndarray,
        directions: Optional[np.ndarray] = None,
        tol: Optional[Tolerance] = None,
        orthonormal: bool = False,
    ):
        self.tol = tol or default_tolerance()
        self.origin = np.asarray(origin, dtype=float).copy()
        dim = self.origin.shape[0]
        if directions is None or np.size(directions) == 0:
            self.basis = np.zeros((0, dim))
        elif orthonormal:
            self.basis = np.atleast_2d(np.asarray(directions, dtype=float)).copy()
        else:
            self.basis = orthonormalize(directions, self.tol)
        if self.basis.shape[1] != dim:
            raise DimensionMismatchError("directions", dim, self.basis.shape[1])

    @classmethod
    def from_points(cls, points: np.ndarray, tol: Optional[Tolerance] = None) -> "AffineBasis":
        """Affine hull of a point set, rooted at the first point."""
        points = np.atleast_2d(np.asarray(points, dtype=float))
        basis = cls(points[0], tol=tol)
        for p in points[1:]:
            basis.add_point(p)
        return basis

    @classmethod
    def full_space(cls, dim: int, origin: Optional[np.ndarray] = None,
                   tol: Optional[Tolerance] = None) -> "AffineBasis":
        """The whole d-space with the standard basis."""
        origin = np.zeros(dim) if origin is None else origin
        return cls(origin, np.eye(dim), tol=tol, orthonormal=True)

    @property
    def space_dim(self) -> int:
        return self.origin.shape[0]

    @property
    def sub_space_dim(self) -> int:
        return self.basis.shape[0]

    @property
    def is_full_dim(self) -> bool:
        return self.sub_space_dim == self.space_dim

    def copy(self) -> "AffineBasis":
        return AffineBasis(self.origin, self.basis, self.tol, orthonormal=True)

    def add_vector(self, vector: np.ndarray) -> bool:
        """Extend the basis by the part of vector orthogonal to it.

        Returns:
            True if the dimension of the subspace increased.
        """
        if self.is_full_dim:
            return False
        w = orthogonalize(vector, self.basis)
        norm = np.linalg.norm(w)
        if norm <= self.tol.eps:
            return False
        self.basis = np.vstack([self.basis, w / norm])
        return True

    def add_point(self, point: np.ndarray) -> bool:
        return self.add_vector(np.asarray(point, dtype=float) - self.origin)

    def project(self, points: np.ndarray) -> np.ndarray:
        """Coordinates of the points in the subspace frame, shape (n, k) or (k,)."""
        return (np.asarray(points, dtype=float) - self.origin) @ self.basis.T

    def to_original(self, coords: np.ndarray) -> np.ndarray:
        """Inverse of ``project`` for points of the subspace."""
        return self.origin + np.asarray(coords, dtype=float) @ self.basis

    def project_in_space(self, point: np.ndarray) -> np.ndarray:
        """Orthogonal projection of a point onto the affine subspace."""
        return self.to_original(self.project(point))

    def contains(self, point: np.ndarray) -> bool:
        point = np.asarray(point, dtype=float)
        return self.tol.is_zero_vector(point - self.project_in_space(point))

    def __repr__(self) -> str:
        return f"AffineBasis(origin={self.origin.tolist()}, dim={self.sub_space_dim})"
