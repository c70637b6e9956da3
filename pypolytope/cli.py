"""
Command-line interface for PyPolytope.

Usage:
    pypolytope convert cube.yml --to hrep
    pypolytope fvector cube.yml
    pypolytope contains cube.yml 0.5 0.5 0.5
    pypolytope validate config.yml
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from pypolytope import __version__


REP_CHOICES = ["vrep", "hrep", "flrep"]
ACTION_CHOICES = ["none", "convexify", "h-redundancy"]


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="pypolytope",
        description="PyPolytope - convex polytopes in arbitrary dimension",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pypolytope convert cube.yml --to hrep       Print the facets of a polytope
  pypolytope convert cube.yml --to flrep -o cube_fl.yml
  pypolytope fvector cube.yml                 Print the f-vector
  pypolytope contains cube.yml 0.5 0.5 1.0    Classify a point
  pypolytope plot square.yml -o square.png    Draw a 2-D or 3-D polytope
  pypolytope validate config.yml              Validate a configuration file
        """,
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (use -vv for debug)",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress all output except errors",
    )

    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file (tolerance, solver, debug checks)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert a polytope to another representation",
        description="Read a polytope and write the requested representation",
    )
    _add_input_arguments(convert_parser)
    convert_parser.add_argument(
        "--to", "-t",
        choices=REP_CHOICES,
        required=True,
        help="Target representation",
    )
    convert_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: standard output)",
    )

    fvector_parser = subparsers.add_parser(
        "fvector",
        help="Print the f-vector of a polytope",
        description="Print the number of faces of every dimension",
    )
    _add_input_arguments(fvector_parser)

    contains_parser = subparsers.add_parser(
        "contains",
        help="Classify a point against a polytope",
        description="Print inside, boundary or outside",
    )
    _add_input_arguments(contains_parser)
    contains_parser.add_argument(
        "point",
        type=float,
        nargs="+",
        help="Point coordinates",
    )

    plot_parser = subparsers.add_parser(
        "plot",
        help="Draw a 2-D or 3-D polytope",
        description="Save a drawing of the vertices and edges of a polytope",
    )
    _add_input_arguments(plot_parser)
    plot_parser.add_argument(
        "--output", "-o",
        type=Path,
        required=True,
        help="Image file to write",
    )

    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a configuration file",
        description="Validate a YAML configuration file",
    )
    validate_parser.add_argument(
        "config_file",
        type=Path,
        help="Path to configuration file",
    )

    subparsers.add_parser(
        "info",
        help="Show system information",
        description="Display system and dependency information",
    )

    return parser


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the polytope input file and read action."""
    parser.add_argument(
        "input",
        type=Path,
        help="Polytope file in the PyPolytope YAML format",
    )
    parser.add_argument(
        "--action", "-a",
        choices=ACTION_CHOICES,
        default="none",
        help="Post-processing after reading (default: none)",
    )


def setup_logging(verbose: int, quiet: bool) -> None:
    """Setup logging based on verbosity level."""
    import logging
    from pypolytope.logging import setup_logging as _setup_logging

    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    _setup_logging(level=level, force=True)


def _read(args: argparse.Namespace):
    from pypolytope.io import PolytopeAction, read_polytope

    return read_polytope(args.input, PolytopeAction(args.action))


def cmd_convert(args: argparse.Namespace) -> int:
    """Execute the convert command."""
    from pypolytope.io import dump_polytope
    from pypolytope.logging import LOG_INFO
    from pypolytope.polytope import Rep

    target = {"vrep": Rep.VREP, "hrep": Rep.HREP, "flrep": Rep.FLREP}[args.to]
    polytope = _read(args)
    text = dump_polytope(polytope, target)

    if args.output:
        with open(args.output, "w") as f:
            f.write(text)
        LOG_INFO(f"Wrote {args.to} to {args.output}")
    else:
        sys.stdout.write(text)
    return 0


def cmd_fvector(args: argparse.Namespace) -> int:
    """Execute the fvector command."""
    polytope = _read(args)
    print(" ".join(str(n) for n in polytope.f_vector))
    return 0


def cmd_contains(args: argparse.Namespace) -> int:
    """Execute the contains command."""
    polytope = _read(args)
    print(polytope.contains(args.point).name.lower())
    return 0


def cmd_plot(args: argparse.Namespace) -> int:
    """Execute the plot command."""
    from pypolytope.plotting import save_plot

    polytope = _read(args)
    save_plot(polytope, str(args.output), title=args.input.name)
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Execute the validate command."""
    from pypolytope.config import ConfigManager
    from pypolytope.exceptions import ConfigurationError

    try:
        manager = ConfigManager(args.config_file)
        config = manager.load(validate=True)
        print(f"Configuration file '{args.config_file}' is valid.")
        print(f"  Tolerance: {config.tolerance.eps}")
        print(f"  LP method: {config.solver.method}")
        print(f"  Debug checks: {config.debug.checks}")
        return 0

    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error reading configuration: {e}", file=sys.stderr)
        return 1


def cmd_info(args: argparse.Namespace) -> int:
    """Execute the info command."""
    import platform

    print("PyPolytope System Information")
    print("=" * 40)
    print(f"PyPolytope version: {__version__}")
    print(f"Python version: {platform.python_version()}")
    print(f"Platform: {platform.platform()}")
    print()

    print("Dependencies:")
    dependencies = [("numpy", "numpy"), ("scipy", "scipy"), ("pyyaml", "yaml"),
                    ("matplotlib", "matplotlib")]
    for name, module in dependencies:
        try:
            mod = __import__(module)
            version = getattr(mod, "__version__", "unknown")
            print(f"  {name}: {version}")
        except ImportError:
            print(f"  {name}: NOT INSTALLED")

    return 0


COMMANDS = {
    "convert": cmd_convert,
    "fvector": cmd_fvector,
    "contains": cmd_contains,
    "plot": cmd_plot,
    "validate": cmd_validate,
    "info": cmd_info,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    from pypolytope.config import init_config
    from pypolytope.exceptions import PolytopeError
    from pypolytope.logging import LOG_ERROR

    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.quiet)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        if args.config and args.command != "validate":
            init_config(args.config)
        return COMMANDS[args.command](args)
    except (PolytopeError, OSError) as e:
        LOG_ERROR(f"Error: {e}")
        if args.verbose >= 2:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
