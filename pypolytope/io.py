"""
Textual polytope format.

A polytope is stored as a YAML mapping carrying exactly one representation:

    rep: FLrep            # Vrep, Hrep or FLrep
    space_dim: 2
    polytope_dim: 2       # FLrep only
    vertices:             # Vrep and FLrep
    - [0.0, 0.0]
    - [0.0, 1.0]
    - [1.0, 0.0]
    f1:                   # FLrep: faces of rank k as indices into level k - 1
    - [0, 1]
    - [0, 2]
    - [1, 2]
    f2:
    - [0, 1, 2]

An H-representation is stored under ``halfspaces`` with one row
``[n_1, ..., n_d, c]`` per half-space ``n.x <= c``. Face-lattice levels are
written in their sorted order, so reading back reproduces the same
combinatorial structure.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO, Union

import numpy as np
import yaml

from pypolytope.exceptions import FormatError, PolytopeError
from pypolytope.geometry.hyperplane import Hyperplane
from pypolytope.geometry.tolerance import Tolerance, default_tolerance
from pypolytope.lattice import FaceLattice, FLNode
from pypolytope.logging import LOG_DEBUG
from pypolytope.polytope import ConvexPolytope, Rep

REP_NAMES = {Rep.VREP: "Vrep", Rep.HREP: "Hrep", Rep.FLREP: "FLrep"}
_REPS_BY_NAME = {name.lower(): rep for rep, name in REP_NAMES.items()}


class PolytopeAction(Enum):
    """Post-processing applied to a polytope after reading it."""

    NONE = "none"
    CONVEXIFY = "convexify"
    H_REDUNDANCY = "h-redundancy"


# =============================================================================
# Writing
# =============================================================================


def to_dict(polytope: ConvexPolytope, rep: Rep = Rep.FLREP) -> Dict[str, Any]:
    """Plain-data description of one representation of the polytope."""
    if rep not in REP_NAMES:
        raise FormatError(f"cannot write representation {rep}", key="rep")

    data: Dict[str, Any] = {"rep": REP_NAMES[rep], "space_dim": polytope.space_dim}
    if rep is Rep.VREP:
        data["vertices"] = np.asarray(polytope.vrep).tolist()
    elif rep is Rep.HREP:
        data["halfspaces"] = [
            hp.normal.tolist() + [float(hp.constant)] for hp in polytope.hrep
        ]
    else:
        lattice = polytope.flrep
        data["polytope_dim"] = lattice.dim
        data["vertices"] = lattice.vertices.tolist()
        index = {node: i for i, node in enumerate(lattice[0])}
        for rank in range(1, lattice.dim + 1):
            faces = []
            for node in lattice[rank]:
                faces.append(sorted(index[s] for s in node.subs))
            data[f"f{rank}"] = faces
            index = {node: i for i, node in enumerate(lattice[rank])}
    return data


def dump_polytope(polytope: ConvexPolytope, rep: Rep = Rep.FLREP) -> str:
    return yaml.safe_dump(to_dict(polytope, rep), default_flow_style=None, sort_keys=False)


def write_polytope(polytope: ConvexPolytope, path: Union[str, Path, TextIO],
                   rep: Rep = Rep.FLREP) -> None:
    """Write the polytope to a file path or an open text stream."""
    text = dump_polytope(polytope, rep)
    if hasattr(path, "write"):
        path.write(text)
        return
    with open(path, "w") as f:
        f.write(text)
    LOG_DEBUG(f"Wrote {REP_NAMES[rep]} polytope to {path}")


# =============================================================================
# Reading
# =============================================================================


def from_dict(data: Dict[str, Any], action: PolytopeAction = PolytopeAction.NONE,
              tol: Optional[Tolerance] = None) -> ConvexPolytope:
    """Rebuild a polytope from the plain-data description.

    Raises:
        FormatError: If keys are missing or the data is inconsistent.
    """
    tol = tol or default_tolerance()
    if not isinstance(data, dict):
        raise FormatError("expected a mapping at the top level")
    rep_name = str(_require(data, "rep")).lower()
    if rep_name not in _REPS_BY_NAME:
        raise FormatError(f"unknown representation '{data['rep']}'", key="rep")
    rep = _REPS_BY_NAME[rep_name]
    space_dim = _integer(data, "space_dim")

    try:
        if rep is Rep.VREP:
            polytope = ConvexPolytope.from_points(
                _matrix(data, "vertices", space_dim), convexify=action is PolytopeAction.CONVEXIFY,
                tol=tol,
            )
        elif rep is Rep.HREP:
            rows = _matrix(data, "halfspaces", space_dim + 1)
            hyperplanes = [Hyperplane(row[:-1], row[-1]) for row in rows]
            polytope = ConvexPolytope.from_halfspaces(
                hyperplanes, remove_redundancy=action is PolytopeAction.H_REDUNDANCY, tol=tol
            )
        else:
            polytope = ConvexPolytope.from_face_lattice(_read_lattice(data, space_dim, tol), tol)
    except FormatError:
        raise
    except (PolytopeError, AssertionError) as e:
        raise FormatError(f"inconsistent {REP_NAMES[rep]} data: {e}") from e

    if action is PolytopeAction.CONVEXIFY and rep is not Rep.VREP:
        polytope = ConvexPolytope.from_face_lattice(polytope.flrep, tol)
    return polytope


def load_polytope(text: str, action: PolytopeAction = PolytopeAction.NONE,
                  tol: Optional[Tolerance] = None) -> ConvexPolytope:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise FormatError(f"invalid YAML: {e}") from e
    return from_dict(data, action, tol)


def read_polytope(path: Union[str, Path, TextIO], action: PolytopeAction = PolytopeAction.NONE,
                  tol: Optional[Tolerance] = None) -> ConvexPolytope:
    """Read a polytope from a file path or an open text stream."""
    if hasattr(path, "read"):
        return load_polytope(path.read(), action, tol)
    with open(path, "r") as f:
        polytope = load_polytope(f.read(), action, tol)
    LOG_DEBUG(f"Read polytope from {path}")
    return polytope


def _require(data: Dict[str, Any], key: str) -> Any:
    if key not in data:
        raise FormatError("missing key", key=key)
    return data[key]


def _integer(data: Dict[str, Any], key: str) -> int:
    value = _require(data, key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise FormatError(f"expected an integer, got {value!r}", key=key)
    return value


def _matrix(data: Dict[str, Any], key: str, width: int) -> np.ndarray:
    try:
        rows = np.array(_require(data, key), dtype=float)
    except (TypeError, ValueError) as e:
        raise FormatError(f"non-numeric entries: {e}", key=key) from e
    if rows.ndim != 2 or rows.shape[0] == 0 or rows.shape[1] != width:
        raise FormatError(f"expected a non-empty list of rows of length {width}", key=key)
    return rows


def _read_lattice(data: Dict[str, Any], space_dim: int, tol: Tolerance) -> FaceLattice:
    dim = _integer(data, "polytope_dim")
    if not 0 <= dim <= space_dim:
        raise FormatError(f"polytope_dim must be in [0, {space_dim}]", key="polytope_dim")

    level: List[FLNode] = [FLNode.vertex(v, tol) for v in _matrix(data, "vertices", space_dim)]
    levels = [level]
    for rank in range(1, dim + 1):
        key = f"f{rank}"
        below = levels[-1]
        level = []
        for face in _require(data, key):
            if not isinstance(face, list) or not all(
                isinstance(i, int) and 0 <= i < len(below) for i in face
            ):
                raise FormatError(f"sub-face indices must be in [0, {len(below)})", key=key)
            level.append(FLNode.from_subs(below[i] for i in face))
        levels.append(level)
    if len(levels[-1]) != 1:
        raise FormatError(f"top level f{dim} must hold exactly one face", key=f"f{dim}")
    return FaceLattice(levels)
