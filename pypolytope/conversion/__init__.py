"""
Conversions between the vertex, half-space and face-lattice representations.
"""

from pypolytope.conversion.vertex_enumeration import EnumeratedVertex, VertexEnumerator, hrep_to_vrep
from pypolytope.conversion.gift_wrapping import GiftWrapping
from pypolytope.conversion.duality import (
    polar_hyperplanes,
    polar_lattice,
    polar_vertices,
    remove_h_redundancy,
)

__all__ = [
    "EnumeratedVertex",
    "VertexEnumerator",
    "hrep_to_vrep",
    "GiftWrapping",
    "polar_lattice",
    "polar_vertices",
    "polar_hyperplanes",
    "remove_h_redundancy",
]
