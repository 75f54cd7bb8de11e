"""Pytest fixtures for free-space arrangement tests."""

import json
import pytest
import sys
from pathlib import Path

# Add repository root to path for imports
ROOT_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT_DIR))

from geometry import Obstacle


# Triangle strictly inside the square; its extended sides hit the borders at
# six distinct non-corner points and no three lines meet in one point.
TRIANGLE = [(0.3, 0.2), (0.7, 0.3), (0.4, 0.7)]

# Two triangles sharing the supporting line y = 0.45. No line of one triangle
# crosses the other, and their sides meet pairwise at two interior points.
LEFT_TRIANGLE = [(0.1, 0.45), (0.3, 0.45), (0.2, 0.6)]
RIGHT_TRIANGLE = [(0.55, 0.45), (0.75, 0.45), (0.65, 0.6)]


@pytest.fixture
def unit_square() -> list[tuple[float, float]]:
    """Return the unit square corners, counter-clockwise."""
    return [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]


@pytest.fixture
def triangle() -> Obstacle:
    """Return a single triangle obstacle."""
    return Obstacle.from_vertices(TRIANGLE)


@pytest.fixture
def two_triangles() -> list[Obstacle]:
    """Return two non-overlapping triangle obstacles."""
    return [
        Obstacle.from_vertices(LEFT_TRIANGLE),
        Obstacle.from_vertices(RIGHT_TRIANGLE),
    ]


@pytest.fixture
def field_file(tmp_path) -> Path:
    """Write a one-obstacle field to a JSON file and return its path."""
    path = tmp_path / "field.json"
    path.write_text(json.dumps({"obstacles": [{"vertices": [list(v) for v in TRIANGLE]}]}))
    return path
