"""
Planar Subdivision Module

Extracts the free-space faces of an obstacle field in the unit square.
The lines of all obstacle halfplanes and the square borders form an
arrangement; its bounded faces that are not obstacle outlines are the
free-space regions.

Algorithm:
1. Intersect all lines pairwise and link consecutive points on each line
2. Precompute the direction angle between every pair of points
3. From every directed edge, repeatedly take the neighbor with the smallest
   angle strictly greater than the incoming angle until the walk can close
   back to its start (dead ends are dropped)
4. Drop repeated faces and obstacle outlines, and return the rest clockwise
"""

from __future__ import annotations
from dataclasses import dataclass, field
import math
from typing import Iterator, Optional, Sequence

import numpy as np

try:
    from .arrangement import PointIndex, collect_lines, find_intersections, find_neighbors
    from .config import ArrangementConfig
    from .geometry import HalfPlane, Obstacle, Point, Polygon, signed_area
    from .graph import SimpleGraph, build_graph
except ImportError:
    from arrangement import PointIndex, collect_lines, find_intersections, find_neighbors
    from config import ArrangementConfig
    from geometry import HalfPlane, Obstacle, Point, Polygon, signed_area
    from graph import SimpleGraph, build_graph


# Type aliases
Face = tuple[int, ...]  # Clockwise cycle of point ids


# =============================================================================
# Angle Table
# =============================================================================

def compute_angle_table(points: Sequence[Point]) -> np.ndarray:
    """
    Direction angle of the vector from point i to point j, in [0, 2*pi).

    Returns:
        (n, n) array with angles[i, j] = atan2(yj - yi, xj - xi).
    """
    if len(points) == 0:
        return np.zeros((0, 0))

    coords = np.asarray(points, dtype=float)
    dx = coords[np.newaxis, :, 0] - coords[:, np.newaxis, 0]
    dy = coords[np.newaxis, :, 1] - coords[:, np.newaxis, 1]
    angles = np.arctan2(dy, dx)
    angles[angles < 0] += 2 * math.pi
    return angles


# =============================================================================
# Angular Face Tracer
# =============================================================================

def greatest_angle_neighbor(
    source: int,
    last_angle: float,
    visited: set[int] | Sequence[int],
    neighbors: Sequence[Sequence[int]],
    angles: np.ndarray,
    tolerance: float = 1e-9
) -> Optional[tuple[int, float]]:
    """
    Pick the next point of a face walk.

    Among the unvisited neighbors of source whose direction angle exceeds
    last_angle by more than tolerance, take the one with the smallest angle.

    Returns:
        (neighbor, angle), or None when the walk is at a dead end.
    """
    best: Optional[tuple[int, float]] = None

    for neighbor in neighbors[source]:
        if neighbor in visited:
            continue
        angle = float(angles[source, neighbor])
        if angle <= last_angle + tolerance:
            continue
        if best is None or angle < best[1]:
            best = (neighbor, angle)

    return best


def winds_counter_clockwise(cycle: Sequence[int], angles: np.ndarray) -> bool:
    """Check that a closed cycle of point ids turns once counter-clockwise."""
    n = len(cycle)
    headings = [float(angles[cycle[k], cycle[(k + 1) % n]]) for k in range(n)]

    turning = 0.0
    for k in range(n):
        turn = headings[(k + 1) % n] - headings[k]
        # Wrap into (-pi, pi]
        while turn <= -math.pi:
            turn += 2 * math.pi
        while turn > math.pi:
            turn -= 2 * math.pi
        turning += turn

    return turning > math.pi


def trace_face(
    start: int,
    first: int,
    neighbors: Sequence[Sequence[int]],
    angles: np.ndarray,
    tolerance: float = 1e-9
) -> Optional[list[int]]:
    """
    Walk counter-clockwise from the directed edge start -> first.

    A walk that turned right at a border point can close round a face
    clockwise; such cycles are dropped.

    Returns:
        The closed counter-clockwise cycle of point ids, or None if the walk
        runs into a dead end.
    """
    face = [start, first]
    visited = {start, first}
    current = first
    last_angle = float(angles[start, first])

    while True:
        if len(face) > 2 and start in neighbors[current]:
            return face if winds_counter_clockwise(face, angles) else None

        step = greatest_angle_neighbor(current, last_angle, visited, neighbors, angles, tolerance)
        if step is None:
            return None

        current, last_angle = step
        face.append(current)
        visited.add(current)


def trace_faces(
    neighbors: Sequence[Sequence[int]],
    angles: np.ndarray,
    config: Optional[ArrangementConfig] = None
) -> list[list[int]]:
    """
    Trace a candidate face from every directed edge of the arrangement.

    The same face is usually found from several of its edges; filtering
    happens afterwards.

    Returns:
        Counter-clockwise point id cycles, in tracing order.
    """
    config = config or ArrangementConfig()
    candidates = []

    for start in range(len(neighbors)):
        for first in neighbors[start]:
            face = trace_face(start, first, neighbors, angles, config.angle_tolerance)
            if face is not None:
                candidates.append(face)

    return candidates


# =============================================================================
# Face Filter
# =============================================================================

def match_vertex(
    vertex: Point,
    coords: np.ndarray,
    tolerance: float = 1e-8
) -> Optional[int]:
    """
    Id of the arrangement point closest to vertex, if it is close enough.

    Closeness is numpy.isclose per coordinate with rtol = atol = tolerance.
    """
    if len(coords) == 0:
        return None
    close = np.isclose(coords, vertex, rtol=tolerance, atol=tolerance).all(axis=1)
    candidates = np.flatnonzero(close)
    if len(candidates) == 0:
        return None
    distances = np.hypot(*(coords[candidates] - np.asarray(vertex)).T)
    return int(candidates[np.argmin(distances)])


def obstacle_vertex_sets(
    obstacles: Sequence[Obstacle],
    points: Sequence[Point],
    tolerance: float = 1e-8
) -> list[frozenset[int]]:
    """
    Map every obstacle outline to the set of arrangement point ids.

    An obstacle with a vertex that is not an arrangement point cannot be
    any traced face and gets an empty set.
    """
    coords = np.asarray(points, dtype=float).reshape(-1, 2)
    result = []
    for obstacle in obstacles:
        ids = [match_vertex(v, coords, tolerance) for v in obstacle.vertices]
        if any(idx is None for idx in ids):
            result.append(frozenset())
        else:
            result.append(frozenset(ids))
    return result



def filter_faces(
    candidates: Sequence[Sequence[int]],
    obstacle_sets: Sequence[frozenset[int]]
) -> list[Face]:
    """
    Keep one copy of every free-space face, oriented clockwise.

    A candidate is dropped if a face with the same vertex set was already
    kept, or if its vertex set is an obstacle outline.
    """
    excluded = {s for s in obstacle_sets if s}
    seen: set[frozenset[int]] = set()
    faces: list[Face] = []

    for candidate in candidates:
        key = frozenset(candidate)
        if key in seen or key in excluded:
            continue
        seen.add(key)
        faces.append(tuple(reversed(candidate)))

    return faces


# =============================================================================
# Free Space Subdivision
# =============================================================================

@dataclass
class FreeSpaceSubdivision:
    """
    Result of building the free-space arrangement.

    Unpacks as (obstacles, points, graph, faces).

    Attributes:
        obstacles: The input obstacles, unchanged
        points: Point coordinates indexed by point id
        graph: Adjacency graph over point ids
        faces: Clockwise point id cycles, one per free-space face
    """
    obstacles: list[Obstacle]
    points: list[Point]
    graph: SimpleGraph
    faces: list[Face] = field(default_factory=list)

    def __iter__(self) -> Iterator:
        yield self.obstacles
        yield self.points
        yield self.graph
        yield self.faces

    def face_polygons(self) -> list[Polygon]:
        """Faces as clockwise coordinate lists."""
        return [[self.points[i] for i in face] for face in self.faces]

    def face_areas(self) -> list[float]:
        return [abs(signed_area(polygon)) for polygon in self.face_polygons()]

    def free_area(self) -> float:
        """Total area covered by the free-space faces."""
        return sum(self.face_areas())

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "obstacles": [o.to_dict() for o in self.obstacles],
            "points": [list(p) for p in self.points],
            "graph": self.graph.to_dict(),
            "faces": [list(f) for f in self.faces],
        }


class FreeSpaceBuilder:
    """
    Builds the free-space subdivision of an obstacle field.

    Intermediate results are kept as attributes for inspection.

    Example:
        >>> triangle = Obstacle.from_vertices([(0.3, 0.2), (0.7, 0.3), (0.4, 0.7)])
        >>> builder = FreeSpaceBuilder([triangle])
        >>> result = builder.compute()
        >>> len(result.faces)
        6
    """

    def __init__(
        self,
        obstacles: Sequence[Obstacle],
        config: Optional[ArrangementConfig] = None
    ):
        self.obstacles = list(obstacles)
        self.config = config or ArrangementConfig()

        errors = self.config.validate()
        if errors:
            raise ValueError("Invalid arrangement config: " + "; ".join(errors))

        # Populated by compute()
        self.lines: list[HalfPlane] = []
        self.index = PointIndex(self.config.point_tolerance)
        self.colinear: list[list[int]] = []
        self.neighbors: list[list[int]] = []
        self.graph = SimpleGraph(0)
        self.angles = np.zeros((0, 0))
        self.candidates: list[list[int]] = []
        self.faces: list[Face] = []

    @property
    def points(self) -> list[Point]:
        return self.index.points

    def compute(self, debug: bool = False) -> FreeSpaceSubdivision:
        """
        Build the arrangement and extract the free-space faces.

        Args:
            debug: If True, print counts for each stage.

        Returns:
            FreeSpaceSubdivision with the points, graph and clockwise faces.
        """
        # Step 1: Lines and their intersections
        self.lines = collect_lines(self.obstacles)
        self.index, self.colinear = find_intersections(self.lines, self.config)

        if debug:
            print(f"  Lines: {len(self.lines)}")
            print(f"  Points: {len(self.index)}")

        # Step 2: Adjacency
        self.neighbors = find_neighbors(self.points, self.lines, self.colinear)
        self.graph = build_graph(self.neighbors)

        if debug:
            print(f"  Edges: {self.graph.num_edges}")

        # Step 3: Trace faces
        self.angles = compute_angle_table(self.points)
        self.candidates = trace_faces(self.neighbors, self.angles, self.config)

        # Step 4: Keep unique free-space faces
        obstacle_sets = obstacle_vertex_sets(self.obstacles, self.points, self.config.vertex_tolerance)
        self.faces = filter_faces(self.candidates, obstacle_sets)

        if debug:
            print(f"  Candidate faces: {len(self.candidates)}")
            print(f"  Free-space faces: {len(self.faces)}")

        return FreeSpaceSubdivision(
            obstacles=self.obstacles,
            points=list(self.points),
            graph=self.graph,
            faces=list(self.faces),
        )


def construct_graph(
    obstacles: Sequence[Obstacle],
    config: Optional[ArrangementConfig] = None,
    debug: bool = False
) -> FreeSpaceSubdivision:
    """
    Build the free-space graph and faces of a field of obstacles.

    Obstacles must be convex, inside the unit square and pairwise
    non-overlapping.

    Args:
        obstacles: Obstacles with halfplane constraints and vertices
        config: Tolerances (defaults if None)
        debug: If True, print counts for each stage.

    Returns:
        FreeSpaceSubdivision, which unpacks as (obstacles, points, graph, faces).
    """
    return FreeSpaceBuilder(obstacles, config).compute(debug=debug)
