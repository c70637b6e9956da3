"""
Geometric primitives: tolerance, affine bases, hyperplanes and point sets.
"""

from pypolytope.geometry.tolerance import Tolerance, default_tolerance
from pypolytope.geometry.basis import AffineBasis
from pypolytope.geometry.hyperplane import Hyperplane
from pypolytope.geometry.points import PointSet, lex_sorted, unique_points

__all__ = [
    "Tolerance",
    "default_tolerance",
    "AffineBasis",
    "Hyperplane",
    "PointSet",
    "lex_sorted",
    "unique_points",
]
