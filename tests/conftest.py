"""
Pytest configuration and fixtures for PyPolytope tests.

This module provides shared fixtures for testing:
- Configuration fixtures
- Tolerance fixtures
- Point set and half-space fixtures
- Output fixtures
"""

from __future__ import annotations

import itertools
from pathlib import Path
from typing import Any, Dict, List

import matplotlib
import numpy as np
import pytest
import yaml

matplotlib.use("Agg")


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def fresh_global_config(monkeypatch):
    """Give every test its own global configuration manager."""
    import pypolytope.config

    monkeypatch.setattr(pypolytope.config, "_global_config", None)


@pytest.fixture
def default_config() -> Dict[str, Any]:
    """Create default configuration dictionary."""
    from pypolytope import create_default_config

    return create_default_config()


@pytest.fixture
def temp_config_file(tmp_path) -> Path:
    """Create a temporary configuration file."""
    config = {
        "tolerance": {
            "eps": 1e-9,
        },
        "solver": {
            "method": "highs-ds",
        },
        "debug": {
            "checks": True,
        },
    }

    config_path = tmp_path / "test_config.yml"
    with open(config_path, "w") as f:
        yaml.dump(config, f)

    return config_path


# =============================================================================
# Tolerance Fixtures
# =============================================================================


@pytest.fixture
def tol():
    """Default tolerance."""
    from pypolytope.geometry import Tolerance

    return Tolerance(1e-8)


# =============================================================================
# Geometry Fixtures
# =============================================================================


@pytest.fixture
def cube_points() -> np.ndarray:
    """Vertices of the unit cube [0, 1]^3."""
    return np.array(list(itertools.product([0.0, 1.0], repeat=3)))


@pytest.fixture
def square_points() -> np.ndarray:
    """Vertices of the unit square plus its center and a duplicate corner."""
    return np.array([
        [0.0, 0.0],
        [1.0, 0.0],
        [0.0, 1.0],
        [1.0, 1.0],
        [0.5, 0.5],
        [1.0, 1.0],
    ])


@pytest.fixture
def cube_hyperplanes() -> List:
    """Facets of the unit cube [0, 1]^3."""
    from pypolytope.geometry import Hyperplane

    hyperplanes = []
    for e in np.eye(3):
        hyperplanes.append(Hyperplane(-e, 0.0))
        hyperplanes.append(Hyperplane(e, 1.0))
    return hyperplanes


@pytest.fixture
def pyramid_hyperplanes() -> List:
    """Square pyramid over [0, 1]^2 with apex (0.5, 0.5, 1)."""
    from pypolytope.geometry import Hyperplane

    return [
        Hyperplane([0.0, 0.0, -1.0], 0.0),
        Hyperplane([-2.0, 0.0, 1.0], 0.0),
        Hyperplane([2.0, 0.0, 1.0], 2.0),
        Hyperplane([0.0, -2.0, 1.0], 0.0),
        Hyperplane([0.0, 2.0, 1.0], 2.0),
    ]


@pytest.fixture
def cube(cube_points):
    """Unit cube as a polytope given by its vertices."""
    from pypolytope import ConvexPolytope

    return ConvexPolytope.from_points(cube_points)


@pytest.fixture
def centered_cube():
    """Cube [-1, 1]^3 given by its vertices."""
    from pypolytope import ConvexPolytope

    return ConvexPolytope.from_points(list(itertools.product([-1.0, 1.0], repeat=3)))


# =============================================================================
# Output Fixtures
# =============================================================================


@pytest.fixture
def temp_output_dir(tmp_path) -> Path:
    """Create a temporary output directory."""
    output_dir = tmp_path / "outputs"
    output_dir.mkdir()
    return output_dir


# =============================================================================
# Marker Registrations
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
