"""
Command-line interface for circuitcore.

Usage::

    circuitcore validate circuit.json
    circuitcore solve circuit.json --matrix
    circuitcore nodes circuit.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .container import Container
from .interfaces import ContainerSetup, SolveError, get_tools, load_container, solve
from .solver import SolverConfig
from .validation import StatusError, flatten


def try_load_setup(filepath: str) -> tuple[ContainerSetup | None, str]:
    """Read a circuit JSON file without exiting.

    Returns:
        (setup, "") on success, or (None, error_message) on failure.
    """
    path = Path(filepath)
    if not path.exists():
        return None, f"file not found: {filepath}"
    try:
        return ContainerSetup.from_file(path), ""
    except json.JSONDecodeError as e:
        return None, f"invalid JSON in {filepath}: {e}"
    except (ValueError, TypeError) as e:
        return None, f"invalid circuit file: {e}"


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate a circuit without solving."""
    setup, error = try_load_setup(args.circuit)
    if setup is None:
        print(f"Error: {error}", file=sys.stderr)
        return 1
    try:
        print(load_container(setup))
    except StatusError as e:
        print(f"Circuit has errors: {args.circuit}", file=sys.stderr)
        for err in flatten(e):
            print(f"  - {err}", file=sys.stderr)
        return 1
    return 0


def cmd_solve(args: argparse.Namespace) -> int:
    """Solve a circuit and print the derivation as JSON."""
    setup, error = try_load_setup(args.circuit)
    if setup is None:
        print(f"Error: {error}", file=sys.stderr)
        return 1
    container = Container.from_setup(setup)
    config = SolverConfig(decimals=args.decimals)
    try:
        output = solve(args.matrix, not args.mesh, container, config)
    except SolveError as e:
        print(e.message, file=sys.stderr)
        return 1

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        print(f"Steps written to {args.output}", file=sys.stderr)
    else:
        print(json.dumps(json.loads(output), indent=2, ensure_ascii=False))
    return 0


def cmd_nodes(args: argparse.Namespace) -> int:
    """Print the member ids of every node."""
    setup, error = try_load_setup(args.circuit)
    if setup is None:
        print(f"Error: {error}", file=sys.stderr)
        return 1
    try:
        print(get_tools(Container.from_setup(setup)))
    except StatusError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="circuitcore",
        description="Validate and solve DC resistive circuits described as JSON.",
    )
    parser.add_argument("--verbose", "-v", action="count", default=0, help="Increase log verbosity")
    subparsers = parser.add_subparsers(dest="command", required=True)

    val_parser = subparsers.add_parser("validate", help="Check a circuit for errors")
    val_parser.add_argument("circuit", help="Path to circuit JSON file")

    solve_parser = subparsers.add_parser("solve", help="Solve a circuit with nodal analysis")
    solve_parser.add_argument("circuit", help="Path to circuit JSON file")
    solve_parser.add_argument("--matrix", action="store_true", help="Use the matrix solver (default: step derivation)")
    solve_parser.add_argument("--mesh", action="store_true", help="Use mesh analysis (not implemented)")
    solve_parser.add_argument("--decimals", type=int, default=4, help="Rounding of displayed numbers (default: 4)")
    solve_parser.add_argument("--output", "-o", help="Write steps to file instead of stdout")

    nodes_parser = subparsers.add_parser("nodes", help="List node member ids")
    nodes_parser.add_argument("circuit", help="Path to circuit JSON file")

    return parser


def main(argv=None) -> int:
    """CLI entry point. Returns exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    handlers = {
        "validate": cmd_validate,
        "solve": cmd_solve,
        "nodes": cmd_nodes,
    }

    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
