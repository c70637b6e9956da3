"""
Tests for matplotlib drawing.
"""

from __future__ import annotations

import matplotlib.pyplot as plt
import pytest

from pypolytope import fabrics
from pypolytope.exceptions import InvalidInputError
from pypolytope.plotting import plot_polytope, save_plot


class TestPlotPolytope:
    """Tests for plot_polytope."""

    def test_square_edges(self):
        """Each edge of a square is drawn as one line."""
        ax = plot_polytope(fabrics.cube01_vrep(2), title="square")
        assert len(ax.lines) == 4
        assert ax.get_title() == "square"
        plt.close(ax.get_figure())

    def test_cube_uses_3d_axes(self):
        """A 3-D polytope is drawn on 3-D axes."""
        ax = plot_polytope(fabrics.cube01_vrep(3))
        assert ax.name == "3d"
        assert len(ax.lines) == 12
        plt.close(ax.get_figure())

    def test_existing_axes(self):
        """Drawing into given axes returns them."""
        fig, ax = plt.subplots()
        assert plot_polytope(fabrics.simplex_standard(2), ax=ax) is ax
        plt.close(fig)

    def test_unsupported_dimension(self):
        """Only 2-D and 3-D polytopes can be drawn."""
        with pytest.raises(InvalidInputError):
            plot_polytope(fabrics.cube01_vrep(4))


class TestSavePlot:
    """Tests for save_plot."""

    def test_writes_file(self, temp_output_dir):
        """The drawing is saved to the given file."""
        path = temp_output_dir / "square.png"
        save_plot(fabrics.cube01_vrep(2), str(path), title="square")
        assert path.exists()
        assert path.stat().st_size > 0
