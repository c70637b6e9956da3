"""
Tests for the ConvexPolytope facade.
"""

from __future__ import annotations

import itertools

import numpy as np
import pytest

from pypolytope import Containment, ConvexPolytope, Rep, fabrics
from pypolytope.exceptions import (
    DimensionMismatchError,
    InfeasibleSystemError,
    InvalidInputError,
    RepresentationError,
)
from pypolytope.geometry import Hyperplane


def _rounded(points):
    return sorted(tuple(row) for row in np.round(points, 9) + 0.0)


class TestConstruction:
    """Tests for constructors and validation."""

    def test_requires_a_representation(self):
        """A polytope without any representation is rejected."""
        with pytest.raises(InvalidInputError):
            ConvexPolytope(2)

    def test_from_points_validates_shape(self):
        """Points must form a non-empty 2-D array."""
        with pytest.raises(InvalidInputError):
            ConvexPolytope.from_points([])
        with pytest.raises(InvalidInputError):
            ConvexPolytope.from_points([1.0, 2.0])

    def test_from_halfspaces_dimension_mismatch(self):
        """All half-spaces must live in one space."""
        with pytest.raises(DimensionMismatchError):
            ConvexPolytope.from_halfspaces([Hyperplane([1.0, 0.0], 1.0), Hyperplane([1.0], 1.0)])

    def test_from_halfspaces_requires_input(self):
        """At least one half-space is needed."""
        with pytest.raises(InvalidInputError):
            ConvexPolytope.from_halfspaces([])

    def test_from_inequalities(self, tol):
        """A x <= b with unnormalized rows describes the same cube."""
        A = np.vstack([2 * np.eye(3), -np.eye(3)])
        b = np.array([2.0, 2.0, 2.0, 0.0, 0.0, 0.0])
        polytope = ConvexPolytope.from_inequalities(A, b, tol=tol)
        assert _rounded(polytope.vrep) == _rounded(list(itertools.product([0.0, 1.0], repeat=3)))

    def test_from_inequalities_shape_mismatch(self):
        """A and b must have matching row counts."""
        with pytest.raises(DimensionMismatchError):
            ConvexPolytope.from_inequalities(np.eye(2), np.ones(3))

    def test_convexify(self, square_points, tol):
        """convexify builds the lattice and keeps only the vertices."""
        polytope = ConvexPolytope.from_points(square_points, convexify=True, tol=tol)
        assert polytope.state == Rep.FLREP
        assert polytope.vrep.shape == (4, 2)


class TestRepresentationState:
    """Tests for lazy conversions between representations."""

    def test_vertex_input(self, cube):
        """Conversions from vertices follow V -> FL -> H."""
        assert cube.state == Rep.VREP
        cube.flrep
        assert cube.state == Rep.FLREP
        cube.vrep
        assert cube.state == Rep.VREP | Rep.FLREP
        assert len(cube.hrep) == 6
        assert cube.state == Rep.VREP | Rep.FLREP | Rep.HREP

    def test_halfspace_input(self, cube_hyperplanes, tol):
        """Conversions from half-spaces go through vertex enumeration."""
        polytope = ConvexPolytope.from_halfspaces(cube_hyperplanes, tol=tol)
        assert polytope.state == Rep.HREP
        assert polytope.vrep.shape == (8, 3)
        assert polytope.state == Rep.HREP | Rep.VREP
        assert polytope.f_vector == (8, 12, 6, 1)
        assert Rep.FLREP in polytope.state

    def test_vrep_is_read_only(self, cube):
        """Vertices cannot be modified in place."""
        with pytest.raises(ValueError):
            cube.vrep[0, 0] = 3.0

    def test_copies(self, cube):
        """in_* copies hold a single representation."""
        assert cube.in_hrep().state == Rep.HREP
        assert cube.in_flrep().state == Rep.FLREP
        assert cube.in_vrep().state == Rep.VREP

    def test_hrep_of_lower_dimensional(self, tol):
        """A flat polytope has no facet description."""
        square = ConvexPolytope.from_points(
            [[0.0, 0.0, 1.0], [1.0, 0.0, 1.0], [0.0, 1.0, 1.0], [1.0, 1.0, 1.0]], tol=tol
        )
        assert square.dim == 2
        with pytest.raises(RepresentationError):
            square.hrep

    def test_derived_hyperplanes_face_outward(self, cube):
        """Every facet half-space holds the whole cube."""
        for hp in cube.hrep:
            assert np.all(hp.evaluate(cube.vrep) <= 1e-9)
            assert hp.contains_negative(cube.inner_point)

    def test_debug_checks(self, cube_points, monkeypatch):
        """Debug checks verify the derived half-spaces against the vertices."""
        monkeypatch.setenv("PYPOLYTOPE_DEBUG_CHECKS", "1")
        cube = ConvexPolytope.from_points(cube_points)
        assert len(cube.hrep) == 6


class TestQueries:
    """Tests for membership, distances and derived properties."""

    def test_containment(self, cube):
        """Points are classified inside, on the boundary or outside."""
        assert cube.contains([0.5, 0.5, 0.5]) == Containment.INSIDE
        assert cube.contains([0.5, 0.5, 1.0]) == Containment.BOUNDARY
        assert cube.contains([1.0, 1.0, 1.0]) == Containment.BOUNDARY
        assert cube.contains([1.5, 0.5, 0.5]) == Containment.OUTSIDE

    def test_containment_helpers(self, cube):
        """Boolean helpers agree with contains."""
        assert cube.contains_strict([0.2, 0.2, 0.2])
        assert cube.contains_non_strict([0.0, 0.2, 0.2])
        assert not cube.contains_strict([0.0, 0.2, 0.2])
        assert cube.on_boundary([0.0, 0.2, 0.2])
        assert not cube.contains_non_strict([-0.1, 0.2, 0.2])

    def test_containment_within_tolerance(self, cube):
        """Points within eps of a facet count as boundary points."""
        assert cube.contains([0.5, 0.5, 1.0 + 1e-10]) == Containment.BOUNDARY

    def test_point_dimension(self, cube):
        """Query points must have the space dimension."""
        with pytest.raises(DimensionMismatchError):
            cube.contains([0.5, 0.5])

    def test_nearest_point_from_inside(self, cube):
        """From inside the closest facet wins."""
        np.testing.assert_allclose(cube.nearest_point([0.5, 0.5, 0.2]), [0.5, 0.5, 0.0], atol=1e-9)

    def test_nearest_point_from_outside_facet(self, cube):
        """A point facing one facet projects onto it."""
        np.testing.assert_allclose(cube.nearest_point([2.0, 0.5, 0.5]), [1.0, 0.5, 0.5], atol=1e-9)

    def test_nearest_point_from_outside_edge(self, cube):
        """A point beyond an edge projects onto the edge."""
        np.testing.assert_allclose(cube.nearest_point([2.0, 2.0, 0.5]), [1.0, 1.0, 0.5], atol=1e-9)

    def test_nearest_point_from_outside_vertex(self, cube):
        """A point beyond a corner projects onto the corner."""
        np.testing.assert_allclose(cube.nearest_point([-1.0, -1.0, -1.0]), [0.0, 0.0, 0.0], atol=1e-9)

    def test_nearest_point_on_boundary(self, cube):
        """A boundary point is its own nearest point."""
        np.testing.assert_allclose(cube.nearest_point([1.0, 0.3, 0.3]), [1.0, 0.3, 0.3])

    def test_inner_point_from_each_representation(self, cube, cube_hyperplanes, tol):
        """The interior point is strictly inside whatever the source."""
        from_h = ConvexPolytope.from_halfspaces(cube_hyperplanes, tol=tol)
        from_fl = cube.in_flrep()
        for polytope in (cube, from_h, from_fl):
            assert cube.contains_strict(polytope.inner_point)

    def test_inner_point_from_pyramid_halfspaces(self, pyramid_hyperplanes, tol):
        """The edge-averaged step lands inside a pyramid."""
        pyramid = ConvexPolytope.from_halfspaces(pyramid_hyperplanes, tol=tol)
        inner = pyramid.inner_point
        assert all(hp.contains_negative(inner, tol) for hp in pyramid_hyperplanes)

    def test_dim_and_f_vector(self, cube):
        """The cube is 3-dimensional with the usual face counts."""
        assert cube.dim == 3
        assert cube.space_dim == 3
        assert cube.f_vector == (8, 12, 6, 1)

    def test_min_vertex_distance(self, cube, tol):
        """Closest vertices of the unit cube are one apart."""
        assert cube.min_vertex_distance() == pytest.approx(1.0)
        assert ConvexPolytope.from_points([[1.0, 1.0]], tol=tol).min_vertex_distance() == 0.0

    def test_is_close(self, cube, cube_hyperplanes, tol):
        """Polytopes with the same vertices are close regardless of source."""
        assert cube.is_close(ConvexPolytope.from_halfspaces(cube_hyperplanes, tol=tol))
        assert not cube.is_close(cube.shift([0.1, 0.0, 0.0]))
        assert not cube.is_close(fabrics.cube01_vrep(2))


class TestTransformations:
    """Tests for shift, rotate, scale and lift."""

    def test_shift_vertices(self, cube):
        """Translation moves every vertex."""
        moved = cube.shift([1.0, 2.0, 3.0])
        np.testing.assert_allclose(moved.vrep.min(axis=0), [1.0, 2.0, 3.0])
        assert moved.state == cube.state

    def test_shift_halfspaces(self, cube_hyperplanes, tol):
        """Translation of half-spaces matches translation of vertices."""
        polytope = ConvexPolytope.from_halfspaces(cube_hyperplanes, tol=tol)
        moved = polytope.shift([1.0, 0.0, 0.0])
        assert moved.state == Rep.HREP
        assert moved.contains([1.5, 0.5, 0.5]) == Containment.INSIDE
        assert moved.contains([0.5, 0.5, 0.5]) == Containment.BOUNDARY

    def test_shift_to_origin(self, cube):
        """The interior point moves to the origin."""
        centered, shift = cube.shift_to_origin()
        assert centered.contains_strict(np.zeros(3))
        assert cube.contains_strict(shift)

    def test_shift_lattice(self, cube):
        """A materialized lattice is carried along."""
        cube.flrep
        moved = cube.shift([0.0, 0.0, -1.0])
        assert moved.state == Rep.FLREP
        assert moved.f_vector == (8, 12, 6, 1)
        assert moved.contains([0.5, 0.5, -0.5]) == Containment.INSIDE

    def test_rotate(self, tol):
        """x -> x @ R turns the unit square by a quarter."""
        square = fabrics.cube01_hrep(2, tol=tol)
        quarter = np.array([[0.0, 1.0], [-1.0, 0.0]])
        turned = square.rotate(quarter)
        assert turned.contains([-0.5, 0.5]) == Containment.INSIDE
        assert turned.contains([0.5, 0.5]) == Containment.OUTSIDE
        assert _rounded(turned.vrep) == _rounded([[0.0, 0.0], [-1.0, 0.0], [0.0, 1.0], [-1.0, 1.0]])

    def test_rotate_rejects_non_orthogonal(self, cube):
        """Only orthogonal matrices are rotations."""
        with pytest.raises(InvalidInputError):
            cube.rotate(2 * np.eye(3))
        with pytest.raises(DimensionMismatchError):
            cube.rotate(np.eye(2))

    def test_rotate_random_preserves_shape(self, cube):
        """A random rotation keeps distances and face counts."""
        turned = cube.rotate_random(seed=3)
        assert turned.min_vertex_distance() == pytest.approx(1.0)
        assert turned.f_vector == (8, 12, 6, 1)

    def test_rotate_random_in_one_dimension(self, tol):
        """The only rotation of the line is the identity."""
        segment = ConvexPolytope.from_points([[0.0], [2.0]], tol=tol)
        np.testing.assert_allclose(segment.rotate_random(seed=1).vrep, segment.vrep)

    def test_scale_about_origin(self, cube):
        """Scaling by 2 doubles every vertex."""
        np.testing.assert_allclose(cube.scale(2.0).vrep, 2 * cube.vrep)

    def test_scale_about_center(self, cube_hyperplanes, tol):
        """Scaling half-spaces about the center keeps the center fixed."""
        polytope = ConvexPolytope.from_halfspaces(cube_hyperplanes, tol=tol)
        scaled = polytope.scale(2.0, origin=[0.5, 0.5, 0.5])
        assert _rounded(scaled.vrep) == _rounded(list(itertools.product([-0.5, 1.5], repeat=3)))

    def test_scale_factor_must_be_positive(self, cube):
        """Non-positive factors are rejected."""
        with pytest.raises(InvalidInputError):
            cube.scale(0.0)
        with pytest.raises(InvalidInputError):
            cube.scale(-1.0)

    def test_lift_up(self, tol):
        """A square lifted into 3-space stays a square."""
        square = fabrics.cube01_vrep(2, tol=tol)
        lifted = square.lift_up(3, value=1.0)
        assert lifted.space_dim == 3
        assert lifted.dim == 2
        np.testing.assert_allclose(lifted.vrep[:, 2], 1.0)
        assert lifted.f_vector == (4, 4, 1)

    def test_lift_up_to_lower_dimension(self, cube):
        """Lifting cannot reduce the dimension."""
        with pytest.raises(InvalidInputError):
            cube.lift_up(2)


class TestSections:
    """Tests for hyperplane sections."""

    def test_horizontal_section(self, cube):
        """Cutting the cube at z = 0.5 gives a square."""
        section = cube.section_by_hyperplane(Hyperplane([0.0, 0.0, 1.0], 0.5))
        expected = [[x, y, 0.5] for x, y in itertools.product([0.0, 1.0], repeat=2)]
        assert _rounded(section.vrep) == _rounded(expected)

    def test_diagonal_section(self, cube):
        """Cutting the cube at x + y + z = 1.5 gives a hexagon."""
        section = cube.section_by_hyperplane(Hyperplane([1.0, 1.0, 1.0], 1.5))
        assert section.vrep.shape == (6, 3)
        assert section.dim == 2
        assert section.f_vector == (6, 6, 1)

    def test_missing_section(self, cube):
        """A hyperplane missing the polytope has no section."""
        with pytest.raises(InfeasibleSystemError):
            cube.section_by_hyperplane(Hyperplane([1.0, 0.0, 0.0], 5.0))

    def test_section_dimension(self, cube):
        """The hyperplane must live in the polytope's space."""
        with pytest.raises(DimensionMismatchError):
            cube.section_by_hyperplane(Hyperplane([1.0, 0.0], 0.5))
