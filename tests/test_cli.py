"""
Tests for the command-line interface.
"""

from __future__ import annotations

import pytest
import yaml

from pypolytope import fabrics, write_polytope
from pypolytope.cli import create_parser, main
from pypolytope.polytope import Rep


@pytest.fixture
def cube_file(tmp_path):
    """Unit cube written as a Vrep file."""
    path = tmp_path / "cube.yml"
    write_polytope(fabrics.cube01_vrep(3), path, Rep.VREP)
    return path


class TestParser:
    """Tests for argument parsing."""

    def test_convert_requires_target(self):
        """convert needs --to."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["convert", "cube.yml"])

    def test_verbosity(self):
        """-v can be repeated."""
        args = create_parser().parse_args(["-vv", "info"])
        assert args.verbose == 2

    def test_no_command(self, capsys):
        """Without a command the help is printed and the exit code is 1."""
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out


class TestCommands:
    """Tests for the subcommands."""

    def test_fvector(self, cube_file, capsys):
        """fvector prints the face counts."""
        assert main(["fvector", str(cube_file)]) == 0
        assert capsys.readouterr().out.strip() == "8 12 6 1"

    def test_contains(self, cube_file, capsys):
        """contains prints the classification."""
        assert main(["contains", str(cube_file), "0.5", "0.5", "1.0"]) == 0
        assert capsys.readouterr().out.strip() == "boundary"

    def test_convert_to_stdout(self, cube_file, capsys):
        """convert writes the requested representation."""
        assert main(["convert", str(cube_file), "--to", "hrep"]) == 0
        data = yaml.safe_load(capsys.readouterr().out)
        assert data["rep"] == "Hrep"
        assert len(data["halfspaces"]) == 6

    def test_convert_to_file(self, cube_file, tmp_path):
        """convert -o writes into a file."""
        out = tmp_path / "cube_fl.yml"
        assert main(["convert", str(cube_file), "--to", "flrep", "-o", str(out)]) == 0
        data = yaml.safe_load(out.read_text())
        assert data["polytope_dim"] == 3

    def test_plot(self, tmp_path):
        """plot saves an image."""
        square = tmp_path / "square.yml"
        write_polytope(fabrics.cube01_vrep(2), square, Rep.VREP)
        image = tmp_path / "square.png"
        assert main(["plot", str(square), "-o", str(image)]) == 0
        assert image.exists()

    def test_missing_file(self, tmp_path):
        """A missing input file is reported with exit code 1."""
        assert main(["fvector", str(tmp_path / "missing.yml")]) == 1

    def test_malformed_file(self, tmp_path):
        """A malformed input file is reported with exit code 1."""
        path = tmp_path / "bad.yml"
        path.write_text("rep: Vrep\n")
        assert main(["fvector", str(path)]) == 1

    def test_validate(self, temp_config_file, capsys):
        """validate accepts a good configuration."""
        assert main(["validate", str(temp_config_file)]) == 0
        assert "is valid" in capsys.readouterr().out

    def test_validate_rejects_bad_config(self, tmp_path, capsys):
        """validate reports invalid values."""
        path = tmp_path / "bad.yml"
        path.write_text("solver:\n  method: simplex\n")
        assert main(["validate", str(path)]) == 1
        assert "Configuration error" in capsys.readouterr().err

    def test_global_config(self, cube_file, temp_config_file, capsys):
        """--config loads a configuration before running the command."""
        assert main(["--config", str(temp_config_file), "fvector", str(cube_file)]) == 0
        assert capsys.readouterr().out.strip() == "8 12 6 1"

    def test_info(self, capsys):
        """info lists the dependencies."""
        assert main(["info"]) == 0
        out = capsys.readouterr().out
        assert "numpy" in out
        assert "scipy" in out
