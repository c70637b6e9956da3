"""
Matplotlib drawing of 2-D and 3-D polytopes.

Edges (rank-1 faces of the lattice) are drawn as line segments and vertices
as markers.
"""

from __future__ import annotations

from typing import Optional, Tuple

import matplotlib.pyplot as plt

from pypolytope.exceptions import InvalidInputError
from pypolytope.polytope import ConvexPolytope


def plot_polytope(polytope: ConvexPolytope, ax=None, color: str = "tab:blue",
                  title: Optional[str] = None, figsize: Tuple[int, int] = (8, 8)):
    """Draw the vertices and edges of a polytope in 2- or 3-space.

    Args:
        polytope: Polytope to draw.
        ax: Existing axes (3-D axes for 3-space); created when omitted.
        color: Matplotlib color of edges and vertices.
        title: Optional axes title.
        figsize: Figure size used when creating new axes.

    Returns:
        The axes the polytope was drawn on.
    """
    dim = polytope.space_dim
    if dim not in (2, 3):
        raise InvalidInputError("polytope", f"can only draw 2-D or 3-D polytopes, got {dim}-D")

    if ax is None:
        fig = plt.figure(figsize=figsize)
        ax = fig.add_subplot(projection="3d" if dim == 3 else None)

    lattice = polytope.flrep
    vertices = lattice.vertices
    if lattice.dim >= 1:
        for edge in lattice[1]:
            segment = edge.vertex_array
            ax.plot(*segment.T, color=color, linewidth=1.5)
    ax.scatter(*vertices.T, color=color, s=12)

    if dim == 2:
        ax.set_aspect("equal")
        ax.grid(True, alpha=0.3)
    if title:
        ax.set_title(title)
    ax.set_xlabel("x1")
    ax.set_ylabel("x2")
    return ax


def save_plot(polytope: ConvexPolytope, filename: str, title: Optional[str] = None) -> None:
    """Draw the polytope into a fresh figure and save it."""
    ax = plot_polytope(polytope, title=title)
    fig = ax.get_figure()
    fig.savefig(filename, dpi=150, bbox_inches="tight")
    plt.close(fig)
