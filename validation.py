"""
Validation of obstacle fields.

Checks the preconditions the arrangement relies on:
- Obstacles have at least three vertices and are convex
- Obstacles lie inside the unit square
- Vertices satisfy the obstacle's own constraints
- Obstacles do not overlap each other
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence

try:
    from .config import ArrangementConfig
    from .geometry import Obstacle, Point, in_unit_square, is_convex
except ImportError:
    from config import ArrangementConfig
    from geometry import Obstacle, Point, in_unit_square, is_convex


@dataclass
class ValidationWarning:
    """A single validation warning."""
    category: str  # "shape", "bounds", "constraints", "overlap"
    severity: str  # "error", "warning"
    message: str
    details: dict = field(default_factory=dict)


@dataclass
class ValidationResult:
    """Results of all validation checks."""
    warnings: list[ValidationWarning] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(w.severity == "error" for w in self.warnings)

    @property
    def has_warnings(self) -> bool:
        return any(w.severity == "warning" for w in self.warnings)

    @property
    def error_count(self) -> int:
        return sum(1 for w in self.warnings if w.severity == "error")

    @property
    def warning_count(self) -> int:
        return sum(1 for w in self.warnings if w.severity == "warning")

    def get_by_category(self, category: str) -> list[ValidationWarning]:
        return [w for w in self.warnings if w.category == category]


def _edge_normals(polygon: Sequence[Point]) -> list[tuple[float, float]]:
    normals = []
    for i in range(len(polygon)):
        p1 = polygon[i]
        p2 = polygon[(i + 1) % len(polygon)]
        normals.append((p2[1] - p1[1], p1[0] - p2[0]))
    return normals


def _project(polygon: Sequence[Point], axis: tuple[float, float]) -> tuple[float, float]:
    values = [p[0] * axis[0] + p[1] * axis[1] for p in polygon]
    return min(values), max(values)


def convex_polygons_overlap(
    first: Sequence[Point],
    second: Sequence[Point],
    eps: float = 1e-9
) -> bool:
    """
    Check if two convex polygons share interior area.

    Separating axis test over the edge normals of both polygons. Polygons
    that only touch along an edge or at a vertex do not overlap.
    """
    for axis in _edge_normals(first) + _edge_normals(second):
        if axis == (0, 0):
            continue
        min_a, max_a = _project(first, axis)
        min_b, max_b = _project(second, axis)
        if max_a <= min_b + eps or max_b <= min_a + eps:
            return False
    return True


def _check_obstacle(
    idx: int,
    obstacle: Obstacle,
    config: ArrangementConfig
) -> list[ValidationWarning]:
    warnings = []

    if len(obstacle.vertices) < 3:
        warnings.append(ValidationWarning(
            category="shape",
            severity="error",
            message=f"Obstacle {idx} has {len(obstacle.vertices)} vertices (need at least 3)",
            details={"obstacle": idx},
        ))
        return warnings

    if not is_convex(obstacle.vertices):
        warnings.append(ValidationWarning(
            category="shape",
            severity="error",
            message=f"Obstacle {idx} is not convex",
            details={"obstacle": idx},
        ))

    outside = [v for v in obstacle.vertices if not in_unit_square(v, config.bounds_tolerance)]
    if outside:
        warnings.append(ValidationWarning(
            category="bounds",
            severity="error",
            message=f"Obstacle {idx} has {len(outside)} vertex(es) outside the unit square",
            details={"obstacle": idx, "vertices": outside},
        ))

    # At least 1e-7 slack for solver-produced constraints
    tolerance = max(config.point_tolerance, 1e-7)
    violating = [v for v in obstacle.vertices if not obstacle.contains(v, tolerance)]
    if violating:
        warnings.append(ValidationWarning(
            category="constraints",
            severity="warning",
            message=f"Obstacle {idx} has {len(violating)} vertex(es) violating its own constraints",
            details={"obstacle": idx, "vertices": violating},
        ))

    if not obstacle.constraints:
        warnings.append(ValidationWarning(
            category="constraints",
            severity="warning",
            message=f"Obstacle {idx} has no constraints and adds no lines",
            details={"obstacle": idx},
        ))

    return warnings


def validate_obstacles(
    obstacles: Sequence[Obstacle],
    config: Optional[ArrangementConfig] = None
) -> ValidationResult:
    """
    Run all validation checks on an obstacle field.

    Args:
        obstacles: Obstacles to check
        config: Tolerances (defaults if None)

    Returns:
        ValidationResult with all warnings found.
    """
    config = config or ArrangementConfig()
    result = ValidationResult()

    for idx, obstacle in enumerate(obstacles):
        result.warnings.extend(_check_obstacle(idx, obstacle, config))

    for i in range(len(obstacles)):
        for j in range(i + 1, len(obstacles)):
            if len(obstacles[i]) < 3 or len(obstacles[j]) < 3:
                continue
            if convex_polygons_overlap(obstacles[i].vertices, obstacles[j].vertices, config.point_tolerance):
                result.warnings.append(ValidationWarning(
                    category="overlap",
                    severity="error",
                    message=f"Obstacles {i} and {j} overlap",
                    details={"obstacles": [i, j]},
                ))

    return result
