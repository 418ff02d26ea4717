"""Backend protocol definitions for face landmark detection."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol

import numpy as np

from facemetric.geometry import BoundingBox, Point
from facemetric.landmarks import LandmarkSet, PoseAngles

# Contour and landmark keys feeding each landmark group, in append order.
_GROUP_SOURCES = {
    "left_eye": (("left_eye",), ("left_eye",)),
    "right_eye": (("right_eye",), ("right_eye",)),
    "nose": (("nose_base",), ("nose_bridge", "nose_bottom")),
    "mouth": (("bottom_mouth", "left_mouth", "right_mouth"), ("upper_lip_top", "lower_lip_bottom")),
    "face_contour": ((), ("face",)),
    "left_eyebrow": ((), ("left_eyebrow_top",)),
    "right_eyebrow": ((), ("right_eyebrow_top",)),
}


@dataclass
class DetectedFace:
    """Result from a face landmark backend.

    Attributes:
        bbox: Bounding box (x, y, width, height) in pixels.
        pitch: Head pitch angle in degrees (0 if unavailable).
        yaw: Head yaw angle in degrees (0 if unavailable).
        roll: Head roll angle in degrees (0 if unavailable).
        landmarks: Named single landmark points (e.g. "left_eye", "nose_base").
        contours: Named contour point lists (e.g. "face", "upper_lip_top").
        tracking_id: Optional tracker identity.
        confidence: Detection confidence in [0, 1] (1.0 if unavailable).
    """

    bbox: tuple[float, float, float, float]
    pitch: float = 0.0
    yaw: float = 0.0
    roll: float = 0.0
    landmarks: Dict[str, Point] = field(default_factory=dict)
    contours: Dict[str, List[Point]] = field(default_factory=dict)
    tracking_id: Optional[int] = None
    confidence: float = 1.0

    @property
    def box(self) -> BoundingBox:
        return BoundingBox.from_tuple(self.bbox)

    @property
    def pose(self) -> PoseAngles:
        return PoseAngles(
            pitch=float(self.pitch or 0.0),
            yaw=float(self.yaw or 0.0),
            roll=float(self.roll or 0.0),
        )

    def to_landmark_set(self) -> LandmarkSet:
        """Group named landmarks and contours into a LandmarkSet.

        Single landmarks come first within a group, followed by contour
        points in detector order.
        """
        groups: Dict[str, List[Point]] = {}
        for group, (landmark_keys, contour_keys) in _GROUP_SOURCES.items():
            points: List[Point] = []
            for key in landmark_keys:
                if key in self.landmarks:
                    points.append(self.landmarks[key])
            for key in contour_keys:
                points.extend(self.contours.get(key, ()))
            groups[group] = points
        return LandmarkSet.from_groups(groups)


class FaceLandmarkBackend(Protocol):
    """Protocol for face landmark backends.

    Implementations should be swappable without changing engine logic
    (e.g. ML Kit bridge, MediaPipe Face Mesh, InsightFace 106-point).
    """

    def initialize(self) -> None:
        """Initialize the backend and load models."""
        ...

    def detect(self, image: np.ndarray) -> Optional[DetectedFace]:
        """Detect at most one face. Returns None when no face is present."""
        ...

    def cleanup(self) -> None:
        """Release resources and unload models."""
        ...


__all__ = ["DetectedFace", "FaceLandmarkBackend"]
