"""
Polar duality.

For a polytope P containing the origin in its interior, the polar is
P* = {y : x.y <= 1 for all x in P}. Vertices of P become facets of P* and
vice versa; the face lattice of P* is the lattice of P turned upside down.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import numpy as np

from pypolytope.exceptions import RepresentationError
from pypolytope.geometry.basis import AffineBasis
from pypolytope.geometry.hyperplane import Hyperplane
from pypolytope.geometry.tolerance import Tolerance, default_tolerance
from pypolytope.lattice import FaceLattice, FLNode
from pypolytope.logging import LOG_DEBUG


def polar_lattice(lattice: FaceLattice, tol: Optional[Tolerance] = None) -> FaceLattice:
    """Face lattice of the polar of a full-dimensional polytope.

    Raises:
        RepresentationError: If the polytope is not full-dimensional or the
            origin is not in its interior.
    """
    tol = tol or default_tolerance()
    d = lattice.space_dim
    if lattice.dim != d:
        raise RepresentationError("polar", "the polytope is not full-dimensional")

    inner = lattice.top.inner_point
    dual: Dict[FLNode, FLNode] = {}
    for facet in lattice.facets:
        hp = Hyperplane.from_basis(facet.affine_basis, orient_point=inner, tol=tol)
        if not tol.gt(hp.constant):
            raise RepresentationError("polar", "the origin is not an interior point")
        dual[facet] = FLNode.vertex(hp.normal / hp.constant, tol)

    levels: List[List[FLNode]] = [list(dual.values())]
    for rank in range(d - 2, -1, -1):
        level = []
        for node in lattice[rank]:
            dual[node] = FLNode.from_subs(dual[s] for s in node.supers)
            level.append(dual[node])
        levels.append(level)

    top = FLNode.from_subs(levels[-1], affine_basis=AffineBasis.full_space(d, tol=tol))
    levels.append([top])
    LOG_DEBUG(f"Polar lattice built with f-vector {tuple(len(level) for level in levels)}")
    return FaceLattice(levels)


def polar_vertices(vertices: np.ndarray, tol: Optional[Tolerance] = None) -> List[Hyperplane]:
    """Half-spaces {y : v.y <= 1}, one per vertex."""
    tol = tol or default_tolerance()
    hyperplanes = []
    for v in np.atleast_2d(vertices):
        if tol.is_zero_vector(v):
            raise RepresentationError("polar", "the origin is a vertex")
        hyperplanes.append(Hyperplane(v, 1.0))
    return hyperplanes


def polar_hyperplanes(hyperplanes: Sequence[Hyperplane], tol: Optional[Tolerance] = None) -> np.ndarray:
    """Points n / c, one per half-space {x : n.x <= c}."""
    tol = tol or default_tolerance()
    points = []
    for hp in hyperplanes:
        if not tol.gt(hp.constant):
            raise RepresentationError("polar", "the origin is not an interior point")
        points.append(hp.normal / hp.constant)
    return np.array(points)


def remove_h_redundancy(hyperplanes: Sequence[Hyperplane],
                        tol: Optional[Tolerance] = None) -> List[Hyperplane]:
    """Drop the half-spaces that do not support a facet.

    The system is shifted so that an interior point sits at the origin, then
    polarized twice: the first polar (convexified) discards the dual points of
    redundant half-spaces, the second returns to the primal through the face
    lattice, whose facets are exactly the irredundant half-spaces.
    """
    from pypolytope.polytope import ConvexPolytope

    polytope = ConvexPolytope.from_halfspaces(hyperplanes, tol=tol)
    centered, shift = polytope.shift_to_origin()
    restored = centered.polar(convexify=True).polar().shift(shift)
    result = list(restored.hrep)
    LOG_DEBUG(f"H-redundancy removal kept {len(result)} of {len(hyperplanes)} half-spaces")
    return result
