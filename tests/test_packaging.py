"""
Tests for the package metadata.
"""

from __future__ import annotations

import re
from pathlib import Path

import pypolytope

ROOT = Path(__file__).resolve().parent.parent


class TestMetadata:
    """Tests for pyproject.toml."""

    def test_readme_points_at_project_readme(self):
        """The long description comes from the project README."""
        text = (ROOT / "pyproject.toml").read_text()
        match = re.search(r'^readme = "([^"]+)"', text, re.MULTILINE)
        assert match is not None
        assert match.group(1) == "README.md"
        assert (ROOT / match.group(1)).is_file()

    def test_version_matches_package(self):
        """The declared version is the package version."""
        text = (ROOT / "pyproject.toml").read_text()
        assert f'version = "{pypolytope.__version__}"' in text
