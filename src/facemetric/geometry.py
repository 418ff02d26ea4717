"""Geometry primitives over image-space points.

All helpers are pure. Aggregates over an empty point list return ``None``
instead of raising, so derived landmark accessors can degrade quietly.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence


@dataclass(frozen=True)
class Point:
    """A 2D point in image pixel space."""

    x: float
    y: float

    def distance_to(self, other: "Point") -> float:
        return distance(self, other)

    def midpoint_to(self, other: "Point") -> "Point":
        return midpoint(self, other)

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Point":
        return cls(float(data["x"]), float(data["y"]))


@dataclass(frozen=True)
class Extent:
    """Axis-aligned bounding extent of a point set."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


@dataclass(frozen=True)
class BoundingBox:
    """Face bounding box (x, y, width, height) in pixels."""

    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    def left_half(self) -> "BoundingBox":
        """Left half of the box, split at the horizontal center."""
        return BoundingBox(self.x, self.y, self.width / 2, self.height)

    def right_half(self) -> "BoundingBox":
        """Right half of the box, split at the horizontal center."""
        return BoundingBox(self.center_x, self.y, self.width / 2, self.height)

    def to_tuple(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)

    @classmethod
    def from_tuple(cls, bbox: Sequence[float]) -> "BoundingBox":
        x, y, w, h = bbox
        return cls(float(x), float(y), float(w), float(h))


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(a.x - b.x, a.y - b.y)


def midpoint(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)


def centroid(points: Sequence[Point]) -> Optional[Point]:
    """Mean position of a point set, or None when empty."""
    if not points:
        return None
    n = len(points)
    return Point(sum(p.x for p in points) / n, sum(p.y for p in points) / n)


def bounding_extent(points: Sequence[Point]) -> Optional[Extent]:
    """Axis-aligned extent of a point set, or None when empty."""
    if not points:
        return None
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return Extent(min(xs), min(ys), max(xs), max(ys))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


__all__ = [
    "Point",
    "Extent",
    "BoundingBox",
    "distance",
    "midpoint",
    "centroid",
    "bounding_extent",
    "clamp",
]
