"""Shared test helpers for facemetric tests."""

import math
from typing import List, Optional, Sequence

import numpy as np

from facemetric.detection.backends.base import DetectedFace
from facemetric.geometry import Point


def make_image(width: int = 640, height: int = 480, value: int = 0) -> np.ndarray:
    """Solid BGR test image."""
    return np.full((height, width, 3), value, dtype=np.uint8)


def ring(center: Point, rx: float, ry: float, count: int) -> List[Point]:
    """``count`` points evenly spaced on an ellipse, starting at angle 0."""
    return [
        Point(
            center.x + rx * math.cos(2 * math.pi * i / count),
            center.y + ry * math.sin(2 * math.pi * i / count),
        )
        for i in range(count)
    ]


def make_face(
    bbox=(220.0, 80.0, 200.0, 320.0),
    pitch: float = 0.0,
    yaw: float = 0.0,
    roll: float = 0.0,
    left_eye=(270.0, 200.0),
    right_eye=(370.0, 200.0),
    contour_points: int = 36,
    face_rx: float = 100.0,
    face_ry: float = 161.8,
    tracking_id: Optional[int] = None,
    confidence: float = 1.0,
) -> DetectedFace:
    """Synthetic detector output.

    Eyes are rings around the given centers, so each eye group's centroid
    equals its center. The face contour is an ellipse whose extents are
    exactly ``2*face_rx`` by ``2*face_ry``.
    """
    left = Point(*left_eye)
    right = Point(*right_eye)
    face_center = Point(320.0, 240.0)
    contours = {
        "left_eye": ring(left, 12.0, 6.0, 16),
        "right_eye": ring(right, 12.0, 6.0, 16),
        "nose_bridge": [Point(320.0, 210.0 + 10 * i) for i in range(2)],
        "nose_bottom": [Point(310.0, 260.0), Point(320.0, 265.0), Point(330.0, 260.0)],
        "upper_lip_top": [Point(290.0 + 10 * i, 300.0) for i in range(7)],
        "lower_lip_bottom": [Point(290.0 + 10 * i, 320.0) for i in range(7)],
    }
    if contour_points:
        contours["face"] = ring(face_center, face_rx, face_ry, contour_points)
    return DetectedFace(
        bbox=bbox,
        pitch=pitch,
        yaw=yaw,
        roll=roll,
        landmarks={
            "left_eye": left,
            "right_eye": right,
            "nose_base": Point(320.0, 262.0),
        },
        contours=contours,
        tracking_id=tracking_id,
        confidence=confidence,
    )


class MockBackend:
    """Backend returning scripted faces in order, then repeating the last."""

    def __init__(self, faces: Sequence[Optional[DetectedFace]]):
        self.faces = list(faces)
        self.calls = 0
        self.initialized = 0
        self.cleaned_up = 0

    def initialize(self) -> None:
        self.initialized += 1

    def detect(self, image: np.ndarray) -> Optional[DetectedFace]:
        face = self.faces[min(self.calls, len(self.faces) - 1)]
        self.calls += 1
        return face

    def cleanup(self) -> None:
        self.cleaned_up += 1


class SplitSampler:
    """Returns ``left`` for rectangles left of ``split_x``, else ``right``.

    With no ``split_x``, calls alternate left, right, left, ...
    """

    def __init__(self, left: float, right: float, split_x: Optional[float] = None):
        self.left = left
        self.right = right
        self.split_x = split_x
        self.calls = []

    def average_brightness(self, image, rect) -> float:
        self.calls.append(rect)
        if self.split_x is not None:
            return self.left if rect.x < self.split_x else self.right
        return self.left if len(self.calls) % 2 == 1 else self.right
