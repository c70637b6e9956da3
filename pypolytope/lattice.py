"""
Face lattice of a convex polytope.

A face lattice is the poset of all faces of a polytope ordered by inclusion,
stored as rank-indexed levels: level 0 holds the vertices, level k the
k-dimensional faces, and the top level the polytope itself. Every face is an
``FLNode`` knowing its immediate subfaces (``subs``) and superfaces
(``supers``); the vertex set of a face is the union of its subs' vertex sets.

Nodes compare by rank and then lexicographically by their sorted vertex
tuples, so independently built nodes with identical vertex sets are equal and
collapse in sets and dictionaries.
"""

from __future__ import annotations

from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from pypolytope.exceptions import InvalidInputError
from pypolytope.geometry.basis import AffineBasis
from pypolytope.geometry.tolerance import Tolerance
from pypolytope.logging import POLYTOPE_ASSERT

VertexKey = Tuple[float, ...]


def vertex_key(point) -> VertexKey:
    return tuple(float(x) for x in point)


class FLNode:
    """A face of a polytope, one node of its face lattice.

    Use ``FLNode.vertex`` for rank-0 nodes and ``FLNode.from_subs`` for the
    rest; the latter registers the new node as a super of each of its subs.

    Attributes:
        vertices: Frozen set of vertex coordinate tuples.
        affine_basis: Basis of the face's affine hull; its dimension is the rank.
        inner_point: A point in the relative interior of the face.
        subs: Faces of rank ``rank - 1`` contained in this face.
        supers: Faces of rank ``rank + 1`` containing this face.
    """

    def __init__(self, vertices: FrozenSet[VertexKey], inner_point: np.ndarray,
                 affine_basis: AffineBasis, subs: Iterable["FLNode"] = ()):
        self.vertices = frozenset(vertices)
        self.inner_point = np.asarray(inner_point, dtype=float)
        self.affine_basis = affine_basis
        self.subs = set(subs)
        self.supers = set()
        self._sorted_vertices = tuple(sorted(self.vertices))
        self._levels: Optional[List[List[FLNode]]] = None

    @classmethod
    def vertex(cls, point, tol: Optional[Tolerance] = None) -> "FLNode":
        """Rank-0 node; its interior point is the vertex itself."""
        point = np.asarray(point, dtype=float)
        return cls(frozenset([vertex_key(point)]), point, AffineBasis(point, tol=tol))

    @classmethod
    def from_subs(cls, subs: Iterable["FLNode"],
                  affine_basis: Optional[AffineBasis] = None) -> "FLNode":
        """Node one rank above the given subfaces.

        The interior point is the midpoint of the interior points of the first
        and last sub in sorted order. Unless an explicit affine basis is
        passed, the first sub's basis is extended by the direction towards
        that interior point.
        """
        subs = sorted(set(subs))
        if not subs:
            raise InvalidInputError("subs", "a face needs at least one subface")
        sub_rank = subs[0].rank
        POLYTOPE_ASSERT(
            all(s.rank == sub_rank for s in subs),
            "all subfaces of a face must have the same rank",
        )

        vertices = frozenset().union(*(s.vertices for s in subs))
        inner = (subs[0].inner_point + subs[-1].inner_point) / 2
        if affine_basis is None:
            affine_basis = subs[0].affine_basis.copy()
            affine_basis.add_vector(inner - subs[0].inner_point)
        POLYTOPE_ASSERT(
            affine_basis.sub_space_dim == sub_rank + 1,
            f"face built from rank-{sub_rank} subfaces has rank {affine_basis.sub_space_dim}",
        )

        node = cls(vertices, inner, affine_basis, subs)
        for s in subs:
            s.supers.add(node)
        return node

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def rank(self) -> int:
        return self.affine_basis.sub_space_dim

    @property
    def space_dim(self) -> int:
        return self.affine_basis.space_dim

    @property
    def vertex_array(self) -> np.ndarray:
        """Vertices as a (n, d) array in lexicographic order."""
        return np.array(self._sorted_vertices, dtype=float)

    # =========================================================================
    # Lattice queries
    # =========================================================================

    def levels(self) -> List[List["FLNode"]]:
        """Faces reachable downward from this node, grouped by rank 0..rank."""
        if self._levels is None:
            levels = [set() for _ in range(self.rank + 1)]
            levels[self.rank].add(self)
            for r in range(self.rank, 0, -1):
                for node in levels[r]:
                    levels[r - 1].update(node.subs)
            self._levels = [sorted(level) for level in levels]
        return [list(level) for level in self._levels]

    def level(self, rank: int) -> List["FLNode"]:
        if not 0 <= rank <= self.rank:
            raise InvalidInputError("rank", f"must be in [0, {self.rank}], got {rank}")
        return self.levels()[rank]

    def all_non_strict_subs(self) -> List["FLNode"]:
        """This node and every face below it."""
        return [node for level in self.levels() for node in level]

    # =========================================================================
    # Comparison
    # =========================================================================

    def _key(self):
        return self.rank, self._sorted_vertices

    def __eq__(self, other) -> bool:
        if not isinstance(other, FLNode):
            return NotImplemented
        return self.rank == other.rank and self.vertices == other.vertices

    def __hash__(self) -> int:
        return hash((self.rank, self.vertices))

    def __lt__(self, other: "FLNode") -> bool:
        return self._key() < other._key()

    def __le__(self, other: "FLNode") -> bool:
        return self._key() <= other._key()

    def __gt__(self, other: "FLNode") -> bool:
        return self._key() > other._key()

    def __ge__(self, other: "FLNode") -> bool:
        return self._key() >= other._key()

    def __repr__(self) -> str:
        return f"FLNode(rank={self.rank}, vertices={len(self.vertices)})"


class FaceLattice:
    """Rank-indexed levels of faces; the top level holds exactly one node."""

    def __init__(self, levels: Sequence[Iterable[FLNode]]):
        self._levels = [sorted(set(level)) for level in levels]
        POLYTOPE_ASSERT(len(self._levels) > 0, "a face lattice has at least one level")
        POLYTOPE_ASSERT(len(self._levels[-1]) == 1, "the top level must hold a single node")

    @classmethod
    def from_top(cls, top: FLNode) -> "FaceLattice":
        return cls(top.levels())

    @classmethod
    def from_point(cls, point, tol: Optional[Tolerance] = None) -> "FaceLattice":
        return cls([[FLNode.vertex(point, tol)]])

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def levels(self) -> List[List[FLNode]]:
        return [list(level) for level in self._levels]

    @property
    def top(self) -> FLNode:
        return self._levels[-1][0]

    @property
    def dim(self) -> int:
        """Dimension of the polytope (rank of the top node)."""
        return len(self._levels) - 1

    @property
    def space_dim(self) -> int:
        return self.top.space_dim

    @property
    def vertices(self) -> np.ndarray:
        """Vertices as a read-only (n, d) array in lexicographic order."""
        arr = np.array([node.inner_point for node in self._levels[0]], dtype=float)
        arr.setflags(write=False)
        return arr

    @property
    def facets(self) -> List[FLNode]:
        return list(self._levels[-2]) if self.dim > 0 else []

    @property
    def f_vector(self) -> Tuple[int, ...]:
        """Number of faces of each rank, vertices first, the polytope last."""
        return tuple(len(level) for level in self._levels)

    @property
    def number_of_faces(self) -> int:
        return sum(self.f_vector)

    def __getitem__(self, rank: int) -> List[FLNode]:
        return list(self._levels[rank])

    def __len__(self) -> int:
        return len(self._levels)

    def __iter__(self):
        return iter(self.levels)

    # =========================================================================
    # Transformations
    # =========================================================================

    def vertex_transform(self, func: Callable[[np.ndarray], np.ndarray],
                         tol: Optional[Tolerance] = None) -> "FaceLattice":
        """Rebuild the lattice bottom-up after mapping every vertex.

        func must be an injective affine map, otherwise ranks collapse.
        """
        tol = tol or self.top.affine_basis.tol
        mapping: Dict[FLNode, FLNode] = {}
        for node in self._levels[0]:
            mapping[node] = FLNode.vertex(func(node.inner_point), tol)
        for level in self._levels[1:]:
            for node in level:
                mapping[node] = FLNode.from_subs(mapping[s] for s in node.subs)
        return FaceLattice([[mapping[n] for n in level] for level in self._levels])

    # =========================================================================
    # Comparison and checking
    # =========================================================================

    def __eq__(self, other) -> bool:
        if not isinstance(other, FaceLattice):
            return NotImplemented
        if self.f_vector != other.f_vector:
            return False
        for mine, theirs in zip(self._levels, other._levels):
            if set(mine) != set(theirs):
                return False
            counterpart = {node: node for node in theirs}
            for node in mine:
                twin = counterpart[node]
                if node.subs != twin.subs or node.supers != twin.supers:
                    return False
        return True

    __hash__ = None

    def check_consistency(self) -> None:
        """Verify the structural invariants of the lattice.

        Raises:
            AssertionError: If any invariant is violated.
        """
        for rank, level in enumerate(self._levels):
            members = set(level)
            below = set(self._levels[rank - 1]) if rank > 0 else set()
            for node in level:
                POLYTOPE_ASSERT(node.rank == rank, f"{node!r} stored at level {rank}")
                if rank == 0:
                    POLYTOPE_ASSERT(len(node.vertices) == 1, f"{node!r} is not a single vertex")
                    continue
                POLYTOPE_ASSERT(len(node.subs) >= 2, f"{node!r} has fewer than two subfaces")
                POLYTOPE_ASSERT(node.subs <= below, f"{node!r} has subfaces outside level {rank - 1}")
                union = frozenset().union(*(s.vertices for s in node.subs))
                POLYTOPE_ASSERT(union == node.vertices, f"{node!r} vertex set differs from its subfaces")
                for s in node.subs:
                    POLYTOPE_ASSERT(node in s.supers, f"{s!r} does not list {node!r} as super")
                for v in node.vertex_array:
                    POLYTOPE_ASSERT(node.affine_basis.contains(v), f"{node!r} basis misses a vertex")
            POLYTOPE_ASSERT(len(members) == len(level), f"duplicate faces at level {rank}")

    def __repr__(self) -> str:
        return f"FaceLattice(f_vector={self.f_vector})"
