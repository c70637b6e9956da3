"""
Tolerance predicate shared by every geometric decision.

Every comparison of a computed quantity against zero (signs of evaluated
hyperplanes, ray parameters, vector norms, point identity) goes through a
single ``Tolerance`` instance, so that vertex enumeration, gift wrapping and
the containment queries agree on what "on the boundary" means.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from pypolytope.config import get_config
from pypolytope.exceptions import InvalidInputError


@dataclass(frozen=True)
class Tolerance:
    """Absolute-epsilon comparisons of floats and vectors."""

    eps: float = 1e-8

    def __post_init__(self):
        if not self.eps > 0:
            raise InvalidInputError("eps", f"must be positive, got {self.eps}")

    def eq(self, a: float, b: float = 0.0) -> bool:
        return abs(a - b) <= self.eps

    def gt(self, a: float, b: float = 0.0) -> bool:
        return a - b > self.eps

    def lt(self, a: float, b: float = 0.0) -> bool:
        return b - a > self.eps

    def le(self, a: float, b: float = 0.0) -> bool:
        return a - b <= self.eps

    def sign(self, a: float) -> int:
        """Return -1, 0 or 1 treating values within eps of zero as zero."""
        if a > self.eps:
            return 1
        if a < -self.eps:
            return -1
        return 0

    def is_zero_vector(self, v: np.ndarray) -> bool:
        return float(np.linalg.norm(v)) <= self.eps

    def points_equal(self, a: np.ndarray, b: np.ndarray) -> bool:
        """Coordinate-wise equality within eps."""
        return bool(np.all(np.abs(np.asarray(a) - np.asarray(b)) <= self.eps))

    def compare_points(self, a: np.ndarray, b: np.ndarray) -> int:
        """Lexicographic comparison of two points with tolerant coordinates."""
        for x, y in zip(a, b):
            s = self.sign(x - y)
            if s != 0:
                return s
        return 0


def default_tolerance() -> Tolerance:
    """Build the tolerance configured globally (``tolerance.eps``)."""
    return Tolerance(get_config().config.tolerance.eps)
