"""Landmark and pose value types produced from detector output."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from facemetric.geometry import BoundingBox, Point, bounding_extent, centroid

# Group names in canonical order. Serialized dicts use these keys.
LANDMARK_GROUPS: Tuple[str, ...] = (
    "left_eye",
    "right_eye",
    "nose",
    "mouth",
    "face_contour",
    "left_eyebrow",
    "right_eyebrow",
)


@dataclass(frozen=True)
class PoseAngles:
    """Head pose in degrees as reported by the detector."""

    pitch: float = 0.0
    yaw: float = 0.0
    roll: float = 0.0

    @property
    def total_abs(self) -> float:
        return abs(self.pitch) + abs(self.yaw) + abs(self.roll)

    @property
    def max_abs(self) -> float:
        """Largest deviation from frontal on any axis."""
        return max(abs(self.pitch), abs(self.yaw), abs(self.roll))


@dataclass(frozen=True)
class LandmarkSet:
    """Named groups of facial landmark points.

    Derived accessors return None when the backing group is empty.
    """

    left_eye: Tuple[Point, ...] = ()
    right_eye: Tuple[Point, ...] = ()
    nose: Tuple[Point, ...] = ()
    mouth: Tuple[Point, ...] = ()
    face_contour: Tuple[Point, ...] = ()
    left_eyebrow: Tuple[Point, ...] = ()
    right_eyebrow: Tuple[Point, ...] = ()

    @classmethod
    def empty(cls) -> "LandmarkSet":
        return cls()

    @classmethod
    def from_groups(cls, groups: Dict[str, List[Point]]) -> "LandmarkSet":
        """Build from a mapping of group name to points; unknown keys are ignored."""
        return cls(**{
            name: tuple(groups.get(name, ()))
            for name in LANDMARK_GROUPS
        })

    def group(self, name: str) -> Tuple[Point, ...]:
        if name not in LANDMARK_GROUPS:
            raise KeyError(f"Unknown landmark group: {name}")
        return getattr(self, name)

    def groups(self) -> Dict[str, Tuple[Point, ...]]:
        return {name: getattr(self, name) for name in LANDMARK_GROUPS}

    @property
    def point_count(self) -> int:
        return sum(len(pts) for pts in self.groups().values())

    @property
    def group_count(self) -> int:
        """Number of non-empty groups."""
        return sum(1 for pts in self.groups().values() if pts)

    # ── derived accessors ──

    @property
    def left_eye_center(self) -> Optional[Point]:
        return centroid(self.left_eye)

    @property
    def right_eye_center(self) -> Optional[Point]:
        return centroid(self.right_eye)

    @property
    def interocular_distance(self) -> Optional[float]:
        left = self.left_eye_center
        right = self.right_eye_center
        if left is None or right is None:
            return None
        return left.distance_to(right)

    @property
    def facial_width(self) -> Optional[float]:
        extent = bounding_extent(self.face_contour)
        return extent.width if extent is not None else None

    @property
    def facial_height(self) -> Optional[float]:
        extent = bounding_extent(self.face_contour)
        return extent.height if extent is not None else None

    @property
    def nose_tip(self) -> Optional[Point]:
        # lowest point in image space = largest y
        if not self.nose:
            return None
        return max(self.nose, key=lambda p: p.y)

    @property
    def mouth_center(self) -> Optional[Point]:
        return centroid(self.mouth)

    @property
    def mouth_width(self) -> Optional[float]:
        extent = bounding_extent(self.mouth)
        return extent.width if extent is not None else None

    # ── serialization ──

    def to_dict(self) -> Dict[str, List[Dict[str, float]]]:
        return {
            name: [p.to_dict() for p in pts]
            for name, pts in self.groups().items()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LandmarkSet":
        return cls.from_groups({
            name: [Point.from_dict(p) for p in data.get(name, [])]
            for name in LANDMARK_GROUPS
        })


@dataclass(frozen=True)
class FrameSample:
    """One accepted frame of a capture sequence."""

    landmarks: LandmarkSet
    pose: PoseAngles = field(default_factory=PoseAngles)
    bbox: Optional[BoundingBox] = None
    image_size: Optional[Tuple[int, int]] = None
    frame_index: int = 0


__all__ = ["LANDMARK_GROUPS", "PoseAngles", "LandmarkSet", "FrameSample"]
