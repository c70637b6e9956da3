"""
Constructors of frequently used polytopes.

Every function returns a ``ConvexPolytope``; pass ``convexify=True`` where
offered to build the face lattice right away.
"""

from __future__ import annotations

import itertools
from typing import Optional

import numpy as np

from pypolytope.exceptions import DimensionMismatchError, InvalidInputError
from pypolytope.geometry.hyperplane import Hyperplane
from pypolytope.geometry.linalg import affine_rank
from pypolytope.geometry.points import unique_points
from pypolytope.geometry.tolerance import Tolerance, default_tolerance
from pypolytope.minkowski import sum_by_convex_hull
from pypolytope.polytope import ConvexPolytope


def _check_dim(dim: int) -> None:
    if dim < 1:
        raise InvalidInputError("dim", f"must be positive, got {dim}")


def rect_axis_parallel(left, right, convexify: bool = False,
                       tol: Optional[Tolerance] = None) -> ConvexPolytope:
    """Axis-parallel box with opposite corners left and right."""
    left = np.asarray(left, dtype=float)
    right = np.asarray(right, dtype=float)
    if left.shape != right.shape:
        raise DimensionMismatchError("right", left.shape[0], right.shape[0])
    corners = list(itertools.product(*zip(left, right)))
    return ConvexPolytope.from_points(corners, convexify=convexify, tol=tol)


def cube01_vrep(dim: int, convexify: bool = False, tol: Optional[Tolerance] = None) -> ConvexPolytope:
    """Unit cube [0, 1]^dim given by its vertices."""
    _check_dim(dim)
    return rect_axis_parallel(np.zeros(dim), np.ones(dim), convexify, tol)


def cube01_hrep(dim: int, tol: Optional[Tolerance] = None) -> ConvexPolytope:
    """Unit cube [0, 1]^dim given by its 2 * dim facets."""
    _check_dim(dim)
    hyperplanes = []
    for e in np.eye(dim):
        hyperplanes.append(Hyperplane(-e, 0.0))
        hyperplanes.append(Hyperplane(e, 1.0))
    return ConvexPolytope.from_halfspaces(hyperplanes, tol=tol)


def simplex_standard(dim: int, convexify: bool = False,
                     tol: Optional[Tolerance] = None) -> ConvexPolytope:
    """Simplex with vertices at the origin and the unit vectors."""
    _check_dim(dim)
    points = np.vstack([np.zeros(dim), np.eye(dim)])
    return ConvexPolytope.from_points(points, convexify=convexify, tol=tol)


def simplex_random(dim: int, seed: Optional[int] = None, convexify: bool = False,
                   tol: Optional[Tolerance] = None) -> ConvexPolytope:
    """Full-dimensional simplex with vertices drawn uniformly from [0, 10)^dim."""
    _check_dim(dim)
    tol = tol or default_tolerance()
    rng = np.random.default_rng(seed)
    while True:
        points = rng.uniform(0.0, 10.0, size=(dim + 1, dim))
        if affine_rank(points, tol) == dim:
            return ConvexPolytope.from_points(points, convexify=convexify, tol=tol)


def cyclic(dim: int, num_points: int, step: float = 1.0, convexify: bool = False,
           tol: Optional[Tolerance] = None) -> ConvexPolytope:
    """Cyclic polytope: the origin and points (t, t^2, ..., t^dim) on the moment curve.

    The parameters are t = 1 + step, 1 + 2 step, ...
    """
    _check_dim(dim)
    if num_points <= dim:
        raise InvalidInputError("num_points", f"must exceed the dimension {dim}, got {num_points}")
    params = 1.0 + step * np.arange(1, num_points)
    curve = np.power.outer(params, np.arange(1, dim + 1))
    points = np.vstack([np.zeros(dim), curve])
    return ConvexPolytope.from_points(points, convexify=convexify, tol=tol)


def ball_1(center, radius: float, tol: Optional[Tolerance] = None) -> ConvexPolytope:
    """Cross-polytope {x : |x - center|_1 <= radius}."""
    center = np.asarray(center, dtype=float)
    if not radius > 0:
        raise InvalidInputError("radius", f"must be positive, got {radius}")
    axes = radius * np.eye(center.shape[0])
    return ConvexPolytope.from_points(np.vstack([center + axes, center - axes]), tol=tol)


def ball_oo(center, radius: float, tol: Optional[Tolerance] = None) -> ConvexPolytope:
    """Box {x : |x - center|_oo <= radius}."""
    center = np.asarray(center, dtype=float)
    if not radius > 0:
        raise InvalidInputError("radius", f"must be positive, got {radius}")
    return rect_axis_parallel(center - radius, center + radius, tol=tol)


def ellipsoid(center, semi_axes, polar_divisions: int, azimuth_divisions: int,
              tol: Optional[Tolerance] = None) -> ConvexPolytope:
    """Polytope inscribed in an axis-parallel ellipsoid.

    Points are sampled on a grid of hyperspherical angles: the azimuth phi in
    [0, 2 pi) with azimuth_divisions steps and each of the dim - 2 polar
    angles in [0, pi] with polar_divisions steps. Coincident samples at the
    poles are merged.
    """
    center = np.asarray(center, dtype=float)
    semi_axes = np.asarray(semi_axes, dtype=float)
    dim = center.shape[0]
    if semi_axes.shape != center.shape:
        raise DimensionMismatchError("semi_axes", dim, semi_axes.shape[0])
    if np.any(semi_axes <= 0):
        raise InvalidInputError("semi_axes", "all semi-axes must be positive")
    if dim == 1:
        return ConvexPolytope.from_points([center - semi_axes, center + semi_axes], tol=tol)
    if polar_divisions < 2 or azimuth_divisions < 3:
        raise InvalidInputError("divisions", "need at least 2 polar and 3 azimuth divisions")

    phis = 2 * np.pi * np.arange(azimuth_divisions) / azimuth_divisions
    thetas = np.pi * np.arange(polar_divisions + 1) / polar_divisions
    points = []
    for phi in phis:
        for angles in itertools.product(thetas, repeat=dim - 2):
            points.append(_spherical_to_cartesian(phi, angles))
    tol = tol or default_tolerance()
    points = unique_points(center + semi_axes * np.array(points), tol)
    return ConvexPolytope.from_points(points, tol=tol)


def sphere(center, radius: float, polar_divisions: int, azimuth_divisions: int,
           tol: Optional[Tolerance] = None) -> ConvexPolytope:
    """Polytope inscribed in the Euclidean sphere of the given radius."""
    center = np.asarray(center, dtype=float)
    return ellipsoid(center, np.full(center.shape[0], float(radius)), polar_divisions,
                     azimuth_divisions, tol)


def _spherical_to_cartesian(phi: float, polar) -> np.ndarray:
    """Unit vector for azimuth phi and polar angles theta_1..theta_{d-2}.

    x_{d-1} = cos t1, x_{d-2} = sin t1 cos t2, ..., and the first two
    coordinates are the product of all sines times cos phi and sin phi.
    """
    tail = []
    sines = 1.0
    for theta in polar:
        tail.append(sines * np.cos(theta))
        sines *= np.sin(theta)
    return np.array([sines * np.cos(phi), sines * np.sin(phi)] + tail[::-1])


# =============================================================================
# Distance functions
# =============================================================================
#
# The epigraph {(x, t) : dist(x, S) <= t <= c_max} of the distance to a convex
# set S is the hull of S at height 0 and S grown by a ball of radius c_max at
# height c_max. The builders below return it as a polytope in (dim + 1)-space.


def _check_c_max(c_max: float) -> None:
    if not c_max > 0:
        raise InvalidInputError("c_max", f"must be positive, got {c_max}")


def _epigraph(bottom: ConvexPolytope, top: ConvexPolytope, c_max: float) -> ConvexPolytope:
    dim = bottom.space_dim + 1
    points = np.vstack([bottom.lift_up(dim, 0.0).vrep, top.lift_up(dim, c_max).vrep])
    return ConvexPolytope.from_points(points, convexify=True, tol=bottom.tol)


def distance_to_ball_2(dim: int, polar_divisions: int, azimuth_divisions: int, radius: float,
                       c_max: float, tol: Optional[Tolerance] = None) -> ConvexPolytope:
    """Euclidean distance to the ball of the given radius around the origin.

    Both the ball and the grown ball of radius radius + c_max are replaced by
    inscribed polytopes sampled as in ``sphere``.
    """
    _check_dim(dim)
    _check_c_max(c_max)
    origin = np.zeros(dim)
    ball = sphere(origin, radius, polar_divisions, azimuth_divisions, tol)
    grown = sphere(origin, radius + c_max, polar_divisions, azimuth_divisions, tol)
    return _epigraph(ball, grown, c_max)


def _distance_to_polytope(polytope: ConvexPolytope, c_max: float, make_ball) -> ConvexPolytope:
    _check_c_max(c_max)
    ball = make_ball(np.zeros(polytope.space_dim), c_max)
    grown = sum_by_convex_hull(polytope, ball, polytope.tol)
    return _epigraph(polytope, grown, c_max)


def distance_to_polytope_ball_1(polytope: ConvexPolytope, c_max: float) -> ConvexPolytope:
    """Distance to a polytope in the 1-norm."""
    return _distance_to_polytope(polytope, c_max, lambda c, r: ball_1(c, r, polytope.tol))


def distance_to_polytope_ball_oo(polytope: ConvexPolytope, c_max: float) -> ConvexPolytope:
    """Distance to a polytope in the max-norm."""
    return _distance_to_polytope(polytope, c_max, lambda c, r: ball_oo(c, r, polytope.tol))


def distance_to_polytope_ball_2(polytope: ConvexPolytope, polar_divisions: int,
                                azimuth_divisions: int, c_max: float) -> ConvexPolytope:
    """Distance to a polytope in the Euclidean norm, with a sampled ball."""
    return _distance_to_polytope(
        polytope, c_max,
        lambda c, r: sphere(c, r, polar_divisions, azimuth_divisions, polytope.tol),
    )


def _distance_to_origin(dim: int, c_max: float, make_ball,
                        tol: Optional[Tolerance]) -> ConvexPolytope:
    _check_dim(dim)
    _check_c_max(c_max)
    point = ConvexPolytope.from_points(np.zeros((1, dim)), tol=tol)
    return _epigraph(point, make_ball(np.zeros(dim), c_max), c_max)


def distance_to_origin_ball_1(dim: int, c_max: float,
                              tol: Optional[Tolerance] = None) -> ConvexPolytope:
    """Distance to the origin in the 1-norm: a cone over a cross-polytope."""
    return _distance_to_origin(dim, c_max, lambda c, r: ball_1(c, r, tol), tol)


def distance_to_origin_ball_oo(dim: int, c_max: float,
                               tol: Optional[Tolerance] = None) -> ConvexPolytope:
    """Distance to the origin in the max-norm: a cone over a box."""
    return _distance_to_origin(dim, c_max, lambda c, r: ball_oo(c, r, tol), tol)


def distance_to_origin_ball_2(dim: int, polar_divisions: int, azimuth_divisions: int,
                              c_max: float, tol: Optional[Tolerance] = None) -> ConvexPolytope:
    """Distance to the origin in the Euclidean norm, with a sampled ball."""
    return _distance_to_origin(
        dim, c_max,
        lambda c, r: sphere(c, r, polar_divisions, azimuth_divisions, tol),
        tol,
    )
