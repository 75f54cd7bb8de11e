#!/usr/bin/env python3
"""
Command-line free-space extraction for obstacle fields.

Usage:
    python free_space_cli.py <input.json> [<output.json>] [options]

Options:
    --validate      Check obstacle preconditions before building
    --debug         Print counts for each stage

Input format:
    {
      "obstacles": [
        {"vertices": [[0.3, 0.2], [0.7, 0.3], [0.4, 0.7]]},
        {"vertices": [...], "constraints": [{"normal": [a1, a2], "offset": b}, ...]}
      ],
      "config": {"point_tolerance": 1e-9}
    }

Constraints are derived from the vertices when they are omitted.
"""

import sys
import os
import argparse
import json

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import ArrangementConfig
from geometry import Obstacle
from planar_subdivision import construct_graph
from validation import validate_obstacles


def load_field(filepath: str) -> tuple[list[Obstacle], ArrangementConfig]:
    """
    Load obstacles and configuration from a JSON file.

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if the content is malformed
    """
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"File not found: {filepath}")

    with open(filepath, 'r') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {filepath}: {e}") from e

    if isinstance(data, list):
        data = {"obstacles": data}
    if not isinstance(data, dict) or not isinstance(data.get("obstacles"), list):
        raise ValueError("Input must contain an 'obstacles' list")
    if not isinstance(data.get("config", {}), dict):
        raise ValueError("'config' must be an object")

    obstacles = [Obstacle.from_dict(o) for o in data["obstacles"]]
    config = ArrangementConfig.from_dict(data.get("config", {}))
    return obstacles, config


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Extract free-space faces of an obstacle field in the unit square',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s field.json
  %(prog)s field.json faces.json
  %(prog)s field.json faces.json --validate --debug
        """
    )
    parser.add_argument('input', help='Input obstacle field (.json)')
    parser.add_argument('output', nargs='?', default=None,
                        help='Output file for points, graph and faces (.json)')
    parser.add_argument('--validate', action='store_true',
                        help='Check obstacle preconditions before building')
    parser.add_argument('--debug', action='store_true',
                        help='Print counts for each stage')

    args = parser.parse_args(argv)

    print(f"Loading obstacle field: {args.input}")

    try:
        obstacles, config = load_field(args.input)
        print(f"Found {len(obstacles)} obstacle(s)")

        errors = config.validate()
        if errors:
            for error in errors:
                print(f"ERROR: {error}")
            return 1

        if args.validate:
            report = validate_obstacles(obstacles, config)
            for warning in report.warnings:
                print(f"{warning.severity.upper()}: {warning.message}")
            if report.has_errors:
                print(f"Validation failed with {report.error_count} error(s)")
                return 1

        print("Building arrangement...")
        result = construct_graph(obstacles, config, debug=args.debug)

        print(f"Points: {len(result.points)}, edges: {result.graph.num_edges}")
        print(f"Free-space faces: {len(result.faces)} (area {result.free_area():.6f})")

        if args.output:
            with open(args.output, 'w') as f:
                json.dump(result.to_dict(), f, indent=2)
            print(f"SUCCESS: Wrote {args.output}")

    except (OSError, ValueError) as e:
        print(f"ERROR: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
