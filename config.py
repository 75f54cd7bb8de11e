"""
Configuration for free-space arrangement construction.

Defines the numeric tolerances used when intersecting lines, merging
intersection points and comparing angles during face tracing.
"""

from dataclasses import dataclass
import json
from pathlib import Path


# Tolerances above this would merge visibly distinct points of the unit square
MAX_TOLERANCE = 1e-3

TOLERANCE_FIELDS = ("point_tolerance", "angle_tolerance", "bounds_tolerance", "vertex_tolerance")


@dataclass
class ArrangementConfig:
    """
    Numeric tolerances for building the arrangement.

    Attributes:
        point_tolerance: Two points are the same point if both coordinates
            differ by at most this amount
        angle_tolerance: A direction must exceed the incoming angle by more
            than this to count as a counter-clockwise continuation
        bounds_tolerance: Intersections this far outside the unit square are
            still kept (and clamped onto the border)
        vertex_tolerance: Relative and absolute tolerance (numpy.isclose)
            when matching obstacle vertices to arrangement points
    """
    point_tolerance: float = 1e-9
    angle_tolerance: float = 1e-9
    bounds_tolerance: float = 1e-9
    vertex_tolerance: float = 1e-8

    def validate(self) -> list[str]:
        """
        Validate configuration values.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        for name in TOLERANCE_FIELDS:
            value = getattr(self, name)
            if value <= 0:
                errors.append(f"{name} must be positive, got {value}")
            elif value > MAX_TOLERANCE:
                errors.append(f"{name} {value} is excessive (max: {MAX_TOLERANCE})")

        return errors

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "point_tolerance": self.point_tolerance,
            "angle_tolerance": self.angle_tolerance,
            "bounds_tolerance": self.bounds_tolerance,
            "vertex_tolerance": self.vertex_tolerance,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ArrangementConfig":
        """Create from dictionary."""
        defaults = cls()
        values = {}
        for name in TOLERANCE_FIELDS:
            value = data.get(name, getattr(defaults, name))
            try:
                values[name] = float(value)
            except (TypeError, ValueError) as e:
                raise ValueError(f"{name} must be a number, got {value!r}") from e
        return cls(**values)

    def save(self, filepath: Path | str) -> None:
        """Save configuration to JSON file."""
        filepath = Path(filepath)
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: Path | str) -> "ArrangementConfig":
        """Load configuration from JSON file."""
        filepath = Path(filepath)
        if not filepath.exists():
            return cls()  # Return defaults if file doesn't exist

        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)
