"""
PyPolytope - Convex polytopes in arbitrary dimension.

This package converts between the three representations of a bounded
convex polytope:
- Vrep: the list of vertices
- Hrep: the list of facet half-spaces n.x <= c
- FLrep: the face lattice, every face linked to its sub- and super-faces

Basic Usage:
    from pypolytope import ConvexPolytope, fabrics

    cube = fabrics.cube01_hrep(3)
    print(cube.vrep)            # vertex enumeration
    print(cube.f_vector)        # (8, 12, 6, 1)
    print(cube.contains([0.5, 0.5, 1.0]))

For more control:
    from pypolytope.conversion import GiftWrapping, VertexEnumerator
    from pypolytope.geometry import Tolerance, Hyperplane
    from pypolytope.io import read_polytope, write_polytope
"""

from __future__ import annotations

__version__ = "0.1.0"
__author__ = "Stephen"

# =============================================================================
# Core API
# =============================================================================

from pypolytope.geometry import (
    Tolerance,
    default_tolerance,
    AffineBasis,
    Hyperplane,
)

from pypolytope.lattice import (
    FLNode,
    FaceLattice,
)

from pypolytope.polytope import (
    Containment,
    ConvexPolytope,
    Rep,
)

from pypolytope.io import (
    PolytopeAction,
    read_polytope,
    write_polytope,
)

from pypolytope import fabrics, minkowski

from pypolytope.config import (
    create_default_config,
    load_config,
    PolytopeConfig,
    ConfigManager,
    get_config,
    init_config,
)

# =============================================================================
# Logging
# =============================================================================

from pypolytope.logging import (
    LOG_DEBUG,
    LOG_INFO,
    LOG_WARN,
    LOG_ERROR,
    LOG_CRITICAL,
    POLYTOPE_ASSERT,
    profile_scope,
    get_logger,
    setup_logging,
    timed,
)

# =============================================================================
# Exceptions
# =============================================================================

from pypolytope.exceptions import (
    PolytopeError,
    ConfigurationError,
    ConfigNotFoundError,
    ConfigValidationError,
    ConversionError,
    InfeasibleSystemError,
    UnboundedPolytopeError,
    SolverFailedError,
    RepresentationError,
    InvalidInputError,
    DimensionMismatchError,
    FormatError,
)

# =============================================================================
# Public API
# =============================================================================

__all__ = [
    # Version
    "__version__",
    # Geometry
    "Tolerance",
    "default_tolerance",
    "AffineBasis",
    "Hyperplane",
    # Lattice
    "FLNode",
    "FaceLattice",
    # Polytope
    "Containment",
    "ConvexPolytope",
    "Rep",
    "fabrics",
    "minkowski",
    # Format
    "PolytopeAction",
    "read_polytope",
    "write_polytope",
    # Config
    "create_default_config",
    "load_config",
    "PolytopeConfig",
    "ConfigManager",
    "get_config",
    "init_config",
    # Logging
    "LOG_DEBUG",
    "LOG_INFO",
    "LOG_WARN",
    "LOG_ERROR",
    "LOG_CRITICAL",
    "POLYTOPE_ASSERT",
    "profile_scope",
    "get_logger",
    "setup_logging",
    "timed",
    # Exceptions
    "PolytopeError",
    "ConfigurationError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "ConversionError",
    "InfeasibleSystemError",
    "UnboundedPolytopeError",
    "SolverFailedError",
    "RepresentationError",
    "InvalidInputError",
    "DimensionMismatchError",
    "FormatError",
]
