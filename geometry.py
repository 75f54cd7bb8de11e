"""
Geometry primitives for obstacle fields in the unit square.

Obstacles are convex polygons described twice: as a list of halfplane
constraints (a . x <= beta) and as their vertex list. The arrangement code
only intersects the boundary lines of the halfplanes; the vertices are used
to recognise an obstacle's own outline among the traced faces.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import math
from typing import Iterable, Sequence


# Type aliases
Point = tuple[float, float]
Polygon = list[Point]


# =============================================================================
# Basic Geometry Functions
# =============================================================================

def points_equal(p1: Point, p2: Point, eps: float = 1e-9) -> bool:
    """Check if two points are equal within epsilon tolerance."""
    return abs(p1[0] - p2[0]) <= eps and abs(p1[1] - p2[1]) <= eps


def signed_area(polygon: Sequence[Point]) -> float:
    """
    Calculate signed area of polygon using shoelace formula.

    Returns:
        Positive for CCW winding, negative for CW winding.
    """
    n = len(polygon)
    if n < 3:
        return 0.0
    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += polygon[i][0] * polygon[j][1]
        area -= polygon[j][0] * polygon[i][1]
    return area / 2.0


def ensure_ccw(polygon: Sequence[Point]) -> Polygon:
    """Ensure polygon has counter-clockwise winding order."""
    if signed_area(polygon) < 0:
        return list(reversed(polygon))
    return list(polygon)


def is_convex(polygon: Sequence[Point], eps: float = 1e-12) -> bool:
    """
    Check that a polygon is convex and not self-intersecting.

    Collinear vertices are tolerated. The turn direction must never change
    and the total turning must be a single revolution.
    """
    n = len(polygon)
    if n < 3:
        return False

    sign = 0
    turning = 0.0
    for i in range(n):
        p0 = polygon[i]
        p1 = polygon[(i + 1) % n]
        p2 = polygon[(i + 2) % n]
        d1 = (p1[0] - p0[0], p1[1] - p0[1])
        d2 = (p2[0] - p1[0], p2[1] - p1[1])
        cross = d1[0] * d2[1] - d1[1] * d2[0]
        if abs(cross) > eps:
            current = 1 if cross > 0 else -1
            if sign == 0:
                sign = current
            elif current != sign:
                return False
        turning += math.atan2(cross, d1[0] * d2[0] + d1[1] * d2[1])

    # A star polygon turns consistently but winds more than once
    return sign != 0 and abs(abs(turning) - 2 * math.pi) < 1e-6


def _coordinate_pair(value, what: str) -> tuple[float, float]:
    """Convert a 2-element list from JSON to a float pair."""
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError(f"{what} must be a pair of numbers, got {value!r}")
    try:
        return (float(value[0]), float(value[1]))
    except (TypeError, ValueError) as e:
        raise ValueError(f"{what} must be a pair of numbers, got {value!r}") from e


def in_unit_square(point: Point, eps: float = 0.0) -> bool:
    """Check if a point lies in [0, 1]^2, borders included."""
    return -eps <= point[0] <= 1 + eps and -eps <= point[1] <= 1 + eps


# =============================================================================
# Halfplanes and Obstacles
# =============================================================================

@dataclass(frozen=True)
class HalfPlane:
    """
    The halfplane normal . x <= offset.

    Its boundary line normal . x = offset is what the arrangement intersects.
    """
    normal: tuple[float, float]
    offset: float

    def __post_init__(self):
        a1, a2 = self.normal
        if a1 == 0 and a2 == 0:
            raise ValueError("HalfPlane normal cannot be zero")
        object.__setattr__(self, "normal", (float(a1), float(a2)))
        object.__setattr__(self, "offset", float(self.offset))

    def evaluate(self, point: Point) -> float:
        """Return normal . point - offset (<= 0 inside the halfplane)."""
        return self.normal[0] * point[0] + self.normal[1] * point[1] - self.offset

    def contains(self, point: Point, eps: float = 1e-9) -> bool:
        return self.evaluate(point) <= eps

    def on_boundary(self, point: Point, eps: float = 1e-9) -> bool:
        return abs(self.evaluate(point)) <= eps

    @property
    def direction(self) -> tuple[float, float]:
        """
        Unit vector along the boundary line.

        Oriented towards increasing x (increasing y for vertical lines), so
        projecting onto it orders points the same way as sorting (x, y).
        """
        a1, a2 = self.normal
        dx, dy = -a2, a1
        if dx < 0 or (dx == 0 and dy < 0):
            dx, dy = -dx, -dy
        length = math.hypot(dx, dy)
        return (dx / length, dy / length)

    def project(self, point: Point) -> float:
        """Scalar position of a point along the boundary line."""
        dx, dy = self.direction
        return point[0] * dx + point[1] * dy

    def to_dict(self) -> dict:
        return {"normal": list(self.normal), "offset": self.offset}

    @classmethod
    def from_dict(cls, data: dict) -> "HalfPlane":
        if not isinstance(data, dict):
            raise ValueError(f"HalfPlane must be an object with normal and offset, got {data!r}")
        try:
            normal = data["normal"]
            offset = data["offset"]
        except KeyError as e:
            raise ValueError(f"HalfPlane is missing field {e}") from e
        try:
            offset = float(offset)
        except (TypeError, ValueError) as e:
            raise ValueError(f"HalfPlane offset must be a number, got {offset!r}") from e
        return cls(_coordinate_pair(normal, "HalfPlane normal"), offset)

    @classmethod
    def through(cls, start: Point, end: Point) -> "HalfPlane":
        """
        Halfplane whose boundary passes through start and end, with the
        region to the left of start -> end inside.
        """
        dx = end[0] - start[0]
        dy = end[1] - start[1]
        if math.hypot(dx, dy) < 1e-12:
            raise ValueError(f"Cannot build a line through coincident points {start}")
        normal = (dy, -dx)
        return cls(normal, normal[0] * start[0] + normal[1] * start[1])


# Unit square borders: x >= 0, x <= 1, y >= 0, y <= 1
UNIT_SQUARE_BORDERS: tuple[HalfPlane, ...] = (
    HalfPlane((-1.0, 0.0), 0.0),
    HalfPlane((1.0, 0.0), 1.0),
    HalfPlane((0.0, -1.0), 0.0),
    HalfPlane((0.0, 1.0), 1.0),
)


@dataclass
class Obstacle:
    """
    A convex obstacle given both as halfplane constraints and as vertices.

    Attributes:
        constraints: Halfplanes whose intersection is the obstacle
        vertices: Corner coordinates of the obstacle
    """
    constraints: list[HalfPlane] = field(default_factory=list)
    vertices: list[Point] = field(default_factory=list)

    def __post_init__(self):
        self.constraints = list(self.constraints)
        self.vertices = [(float(x), float(y)) for x, y in self.vertices]

    def __len__(self):
        return len(self.vertices)

    def contains(self, point: Point, eps: float = 1e-9) -> bool:
        """Check if a point satisfies every constraint."""
        return all(h.contains(point, eps) for h in self.constraints)

    @property
    def area(self) -> float:
        return abs(signed_area(self.vertices))

    @classmethod
    def from_vertices(cls, vertices: Iterable[Point]) -> "Obstacle":
        """
        Build an obstacle from a convex vertex list of either winding.

        One outward halfplane is created per edge.
        """
        polygon = [(float(x), float(y)) for x, y in vertices]
        if len(polygon) < 3:
            raise ValueError(f"Obstacle needs at least 3 vertices, got {len(polygon)}")
        for i in range(len(polygon)):
            if points_equal(polygon[i], polygon[(i + 1) % len(polygon)], 1e-12):
                raise ValueError(f"Obstacle has repeated vertex {polygon[i]}")

        ccw = ensure_ccw(polygon)
        constraints = [
            HalfPlane.through(ccw[i], ccw[(i + 1) % len(ccw)])
            for i in range(len(ccw))
        ]
        return cls(constraints, polygon)

    def to_dict(self) -> dict:
        return {
            "vertices": [list(v) for v in self.vertices],
            "constraints": [h.to_dict() for h in self.constraints],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Obstacle":
        """
        Create from dictionary.

        Constraints are derived from the vertices when they are absent.
        """
        if not isinstance(data, dict) or "vertices" not in data:
            raise ValueError("Obstacle is missing field 'vertices'")
        if not isinstance(data["vertices"], list):
            raise ValueError("Obstacle vertices must be a list")
        vertices = [_coordinate_pair(v, "Obstacle vertex") for v in data["vertices"]]
        if "constraints" not in data:
            return cls.from_vertices(vertices)
        if not isinstance(data["constraints"], list):
            raise ValueError("Obstacle constraints must be a list")
        constraints = [HalfPlane.from_dict(h) for h in data["constraints"]]
        return cls(constraints, vertices)
