"""Oriented hyperplanes and the half-spaces they bound."""

from __future__ import annotations

from typing import Optional

import numpy as np

from pypolytope.exceptions import DimensionMismatchError, InvalidInputError
from pypolytope.geometry.basis import AffineBasis
from pypolytope.geometry.linalg import orthogonal_complement
from pypolytope.geometry.tolerance import Tolerance, default_tolerance


class Hyperplane:
    """Hyperplane {x : n.x = c} with unit normal n.

    Either the constant c or an origin point on the plane may be given; the
    other one is derived on first access. The normal points towards the
    positive side; the polytope described by a set of hyperplanes lies on
    their non-positive sides.
    """

    def __init__(self, normal, constant: Optional[float] = None,
                 origin: Optional[np.ndarray] = None):
        normal = np.asarray(normal, dtype=float)
        if normal.ndim != 1:
            raise InvalidInputError("normal", "must be a vector")
        norm = np.linalg.norm(normal)
        if norm == 0:
            raise InvalidInputError("normal", "must be non-zero")
        if (constant is None) == (origin is None):
            raise InvalidInputError("hyperplane", "exactly one of constant or origin is required")
        self._normal = normal / norm
        self._constant = None if constant is None else float(constant) / norm
        self._origin = None
        if origin is not None:
            self._origin = np.asarray(origin, dtype=float).copy()
            if self._origin.shape != self._normal.shape:
                raise DimensionMismatchError("origin", self.space_dim, self._origin.shape[0])

    @classmethod
    def from_basis(cls, basis: AffineBasis, orient_point: Optional[np.ndarray] = None,
                   tol: Optional[Tolerance] = None) -> "Hyperplane":
        """Hyperplane spanned by a (d-1)-dimensional affine basis.

        If orient_point is given, the normal is chosen so that the point lies
        on the negative side.
        """
        tol = tol or basis.tol
        if basis.sub_space_dim != basis.space_dim - 1:
            raise InvalidInputError(
                "basis", f"must span a hyperplane, got dimension {basis.sub_space_dim}"
            )
        normal = orthogonal_complement(basis.basis, basis.space_dim, tol)[0]
        hp = cls(normal, origin=basis.origin)
        if orient_point is not None:
            hp = hp.oriented_away_from(orient_point, tol)
        return hp

    @property
    def normal(self) -> np.ndarray:
        return self._normal

    @property
    def constant(self) -> float:
        if self._constant is None:
            self._constant = float(np.dot(self._normal, self._origin))
        return self._constant

    @property
    def origin(self) -> np.ndarray:
        if self._origin is None:
            self._origin = self._normal * self._constant
        return self._origin

    @property
    def space_dim(self) -> int:
        return self._normal.shape[0]

    def evaluate(self, x: np.ndarray):
        """Signed distance n.x - c for a point, or an array of them for rows."""
        return np.asarray(x, dtype=float) @ self._normal - self.constant

    def contains(self, x: np.ndarray, tol: Optional[Tolerance] = None) -> bool:
        return (tol or default_tolerance()).eq(self.evaluate(x))

    def contains_negative(self, x: np.ndarray, tol: Optional[Tolerance] = None) -> bool:
        return (tol or default_tolerance()).lt(self.evaluate(x))

    def contains_positive(self, x: np.ndarray, tol: Optional[Tolerance] = None) -> bool:
        return (tol or default_tolerance()).gt(self.evaluate(x))

    def contains_negative_non_strict(self, x: np.ndarray, tol: Optional[Tolerance] = None) -> bool:
        return (tol or default_tolerance()).le(self.evaluate(x))

    def flipped(self) -> "Hyperplane":
        return Hyperplane(-self._normal, -self.constant)

    def oriented_away_from(self, point: np.ndarray, tol: Optional[Tolerance] = None) -> "Hyperplane":
        """Copy oriented so that point is on the non-positive side."""
        if (tol or default_tolerance()).gt(self.evaluate(point)):
            return self.flipped()
        return self

    def project(self, point: np.ndarray) -> np.ndarray:
        """Orthogonal projection of a point onto the hyperplane."""
        point = np.asarray(point, dtype=float)
        return point - self.evaluate(point) * self._normal

    def is_close(self, other: "Hyperplane", tol: Optional[Tolerance] = None) -> bool:
        tol = tol or default_tolerance()
        return tol.points_equal(self._normal, other.normal) and tol.eq(self.constant, other.constant)

    def __repr__(self) -> str:
        return f"Hyperplane(normal={self._normal.tolist()}, constant={self.constant})"
