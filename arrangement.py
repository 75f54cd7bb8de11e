"""
Line arrangement of an obstacle field.

Every halfplane boundary of every obstacle, plus the four borders of the unit
square, is treated as an infinite line. Lines are intersected pairwise, the
intersections inside the square become the nodes of the arrangement, and
consecutive nodes along each line are neighbors.

Algorithm:
1. Collect all obstacle halfplanes followed by the unit square borders
2. Solve the 2x2 system for every pair of lines, skipping parallel pairs
3. Merge nearly equal intersections through a bucketed point index
4. Sort the points on each line along the line and link consecutive ones
"""

from __future__ import annotations
import math
from typing import Optional, Sequence

import numpy as np

try:
    from .config import ArrangementConfig
    from .geometry import HalfPlane, Obstacle, Point, UNIT_SQUARE_BORDERS, points_equal
except ImportError:
    from config import ArrangementConfig
    from geometry import HalfPlane, Obstacle, Point, UNIT_SQUARE_BORDERS, points_equal


# Relative determinant below which two lines are treated as parallel
PARALLEL_TOLERANCE = 1e-12

# Bucket width as a multiple of the point tolerance
BUCKET_FACTOR = 10.0


# =============================================================================
# Line Registry
# =============================================================================

def collect_lines(obstacles: Sequence[Obstacle]) -> list[HalfPlane]:
    """
    Flatten the constraints of all obstacles into one list of lines.

    The four unit square borders are always appended last.
    """
    lines: list[HalfPlane] = []
    for obstacle in obstacles:
        lines.extend(obstacle.constraints)
    lines.extend(UNIT_SQUARE_BORDERS)
    return lines


# =============================================================================
# Point Index
# =============================================================================

class PointIndex:
    """
    Deduplicating store of points with tolerance-aware lookup.

    Points are hashed into square buckets wider than the tolerance, and a
    lookup checks the 3x3 block of buckets around the query so that two
    equal points on either side of a bucket edge still match. The position
    of a point in `points` is its id.

    Example:
        >>> index = PointIndex(1e-9)
        >>> index.add((0.5, 0.5))
        0
        >>> index.add((0.5 + 1e-12, 0.5))
        0
    """

    def __init__(self, tolerance: float = 1e-9):
        if tolerance <= 0:
            raise ValueError(f"PointIndex tolerance must be positive, got {tolerance}")
        self.tolerance = tolerance
        self.bucket_size = tolerance * BUCKET_FACTOR
        self.points: list[Point] = []
        self._buckets: dict[tuple[int, int], list[int]] = {}

    def __len__(self):
        return len(self.points)

    def _bucket(self, point: Point) -> tuple[int, int]:
        return (
            math.floor(point[0] / self.bucket_size),
            math.floor(point[1] / self.bucket_size),
        )

    def find(self, point: Point) -> Optional[int]:
        """Return the id of an existing equal point, or None."""
        bx, by = self._bucket(point)
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                for idx in self._buckets.get((bx + dx, by + dy), ()):
                    if points_equal(self.points[idx], point, self.tolerance):
                        return idx
        return None

    def add(self, point: Point) -> int:
        """Add point (unless an equal one exists) and return its id."""
        existing = self.find(point)
        if existing is not None:
            return existing
        idx = len(self.points)
        self.points.append(point)
        self._buckets.setdefault(self._bucket(point), []).append(idx)
        return idx


# =============================================================================
# Intersection Finder
# =============================================================================

def intersect_lines(first: HalfPlane, second: HalfPlane) -> Optional[Point]:
    """
    Intersect the boundary lines of two halfplanes.

    Returns:
        The intersection point, or None for parallel or coincident lines.
    """
    a = np.array([first.normal, second.normal], dtype=float)
    b = np.array([first.offset, second.offset], dtype=float)

    scale = np.linalg.norm(a[0]) * np.linalg.norm(a[1])
    if abs(np.linalg.det(a)) <= PARALLEL_TOLERANCE * scale:
        return None

    try:
        x = np.linalg.solve(a, b)
    except np.linalg.LinAlgError:
        # Singular system: no unique intersection
        return None

    return (float(x[0]), float(x[1]))


def find_intersections(
    lines: Sequence[HalfPlane],
    config: Optional[ArrangementConfig] = None
) -> tuple[PointIndex, list[list[int]]]:
    """
    Intersect all pairs of lines and keep the points inside the unit square.

    Args:
        lines: Obstacle lines followed by the unit square borders
        config: Tolerances (defaults if None)

    Returns:
        (index, colinear) where index holds the deduplicated points and
        colinear[i] lists the ids of the points lying on lines[i], in
        discovery order.
    """
    config = config or ArrangementConfig()
    index = PointIndex(config.point_tolerance)
    colinear: list[list[int]] = [[] for _ in lines]
    eps = config.bounds_tolerance

    for i in range(len(lines)):
        for j in range(i + 1, len(lines)):
            point = intersect_lines(lines[i], lines[j])
            if point is None:
                continue

            x, y = point
            if not (-eps <= x <= 1 + eps and -eps <= y <= 1 + eps):
                continue

            # Clamp border-touching points onto the square (+ 0.0 drops -0.0)
            point = (min(max(x, 0.0), 1.0) + 0.0, min(max(y, 0.0), 1.0) + 0.0)

            idx = index.add(point)
            if idx not in colinear[i]:
                colinear[i].append(idx)
            if idx not in colinear[j]:
                colinear[j].append(idx)

    return index, colinear


# =============================================================================
# Neighbor Builder
# =============================================================================

def sort_colinear(
    points: Sequence[Point],
    lines: Sequence[HalfPlane],
    colinear: Sequence[Sequence[int]]
) -> list[list[int]]:
    """Order the point ids of every line along that line."""
    return [
        sorted(ids, key=lambda idx, line=line: line.project(points[idx]))
        for line, ids in zip(lines, colinear)
    ]


def find_neighbors(
    points: Sequence[Point],
    lines: Sequence[HalfPlane],
    colinear: Sequence[Sequence[int]]
) -> list[list[int]]:
    """
    Find the neighbors of every point.

    The neighbors of a point are the points just before and just after it
    on every line it lies on.

    Returns:
        neighbors[i] is the ascending list of ids adjacent to point i.
    """
    adjacent: list[set[int]] = [set() for _ in points]

    for ordered in sort_colinear(points, lines, colinear):
        for k in range(len(ordered) - 1):
            p, q = ordered[k], ordered[k + 1]
            adjacent[p].add(q)
            adjacent[q].add(p)

    return [sorted(n) for n in adjacent]
