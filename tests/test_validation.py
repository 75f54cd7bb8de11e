"""
Unit tests for validation module.

Tests the obstacle field precondition checks.
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import ArrangementConfig
from geometry import HalfPlane, Obstacle
from validation import (
    ValidationResult,
    ValidationWarning,
    convex_polygons_overlap,
    validate_obstacles,
)
from conftest import TRIANGLE


class TestValidationResult:
    """Test result aggregation."""

    def test_empty(self):
        result = ValidationResult()
        assert not result.has_errors
        assert not result.has_warnings
        assert result.error_count == 0

    def test_counts(self):
        result = ValidationResult([
            ValidationWarning("shape", "error", "bad"),
            ValidationWarning("constraints", "warning", "odd"),
            ValidationWarning("overlap", "error", "worse"),
        ])
        assert result.has_errors
        assert result.has_warnings
        assert result.error_count == 2
        assert result.warning_count == 1
        assert len(result.get_by_category("overlap")) == 1


class TestConvexOverlap:
    """Test the separating axis overlap check."""

    def test_overlapping_squares(self):
        a = [(0.0, 0.0), (0.5, 0.0), (0.5, 0.5), (0.0, 0.5)]
        b = [(0.25, 0.25), (0.75, 0.25), (0.75, 0.75), (0.25, 0.75)]
        assert convex_polygons_overlap(a, b) is True

    def test_separate_squares(self):
        a = [(0.0, 0.0), (0.2, 0.0), (0.2, 0.2), (0.0, 0.2)]
        b = [(0.5, 0.5), (0.7, 0.5), (0.7, 0.7), (0.5, 0.7)]
        assert convex_polygons_overlap(a, b) is False

    def test_shared_edge_is_not_overlap(self):
        a = [(0.0, 0.0), (0.5, 0.0), (0.5, 0.5), (0.0, 0.5)]
        b = [(0.5, 0.0), (1.0, 0.0), (1.0, 0.5), (0.5, 0.5)]
        assert convex_polygons_overlap(a, b) is False

    def test_triangle_inside_square(self):
        square = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]
        assert convex_polygons_overlap(square, TRIANGLE) is True


class TestValidateObstacles:
    """Test the per-obstacle and pairwise checks."""

    def test_clean_single_obstacle(self, triangle):
        result = validate_obstacles([triangle])
        assert result.warnings == []

    def test_clean_two_obstacles(self, two_triangles):
        result = validate_obstacles(two_triangles)
        assert not result.has_errors
        assert not result.has_warnings

    def test_empty_field(self):
        assert validate_obstacles([]).warnings == []

    def test_too_few_vertices(self):
        obstacle = Obstacle([], [(0.1, 0.1), (0.2, 0.2)])
        result = validate_obstacles([obstacle])
        shape = result.get_by_category("shape")
        assert len(shape) == 1
        assert shape[0].severity == "error"
        assert "at least 3" in shape[0].message

    def test_concave_obstacle(self):
        vertices = [(0.1, 0.1), (0.5, 0.1), (0.3, 0.2), (0.5, 0.5), (0.1, 0.5)]
        result = validate_obstacles([Obstacle.from_vertices(vertices)])
        shape = result.get_by_category("shape")
        assert len(shape) == 1
        assert "not convex" in shape[0].message
        assert result.has_errors

    def test_outside_unit_square(self):
        obstacle = Obstacle.from_vertices([(0.8, 0.8), (1.2, 0.8), (0.9, 0.95)])
        result = validate_obstacles([obstacle])
        bounds = result.get_by_category("bounds")
        assert len(bounds) == 1
        assert bounds[0].details["vertices"] == [(1.2, 0.8)]

    def test_border_vertices_are_inside(self):
        obstacle = Obstacle.from_vertices([(0.0, 0.3), (0.2, 0.5), (0.0, 0.7)])
        assert validate_obstacles([obstacle]).get_by_category("bounds") == []

    def test_vertices_violate_constraints(self):
        obstacle = Obstacle([HalfPlane((1, 0), 0.2)], TRIANGLE)
        result = validate_obstacles([obstacle])
        constraints = result.get_by_category("constraints")
        assert len(constraints) == 1
        assert constraints[0].severity == "warning"
        assert len(constraints[0].details["vertices"]) == 3
        assert not result.has_errors

    def test_no_constraints(self):
        result = validate_obstacles([Obstacle([], TRIANGLE)])
        constraints = result.get_by_category("constraints")
        assert len(constraints) == 1
        assert "no constraints" in constraints[0].message

    def test_overlapping_obstacles(self, triangle):
        shifted = Obstacle.from_vertices([(x + 0.05, y + 0.05) for x, y in TRIANGLE])
        result = validate_obstacles([triangle, shifted])
        overlap = result.get_by_category("overlap")
        assert len(overlap) == 1
        assert overlap[0].message == "Obstacles 0 and 1 overlap"
        assert overlap[0].details == {"obstacles": [0, 1]}

    def test_degenerate_obstacle_skips_overlap(self, triangle):
        degenerate = Obstacle([], [(0.4, 0.4), (0.5, 0.4)])
        result = validate_obstacles([triangle, degenerate])
        assert result.get_by_category("overlap") == []

    def test_uses_config_bounds_tolerance(self):
        obstacle = Obstacle.from_vertices([(0.5, 0.5), (1.0 + 1e-6, 0.5), (0.7, 0.8)])
        assert validate_obstacles([obstacle]).get_by_category("bounds")

        config = ArrangementConfig(bounds_tolerance=1e-5)
        assert validate_obstacles([obstacle], config).get_by_category("bounds") == []
