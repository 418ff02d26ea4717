"""Per-metric derivation functions over a landmark set.

Each function is pure and total: degenerate or missing geometry yields a
documented default rather than an exception.
"""

from __future__ import annotations

import math
from typing import Callable, Dict, Optional

from facemetric.geometry import BoundingBox, clamp
from facemetric.landmarks import LandmarkSet
from facemetric.measurement.metrics import MetricId

GOLDEN_RATIO = 1.618

DEFAULT_SYMMETRY = 75.0
DEFAULT_JAW_DEFINITION = 60.0
DEFAULT_CHEEKBONE_PROMINENCE = 60.0

# Contour length of a full 36-point face outline.
FULL_CONTOUR_POINTS = 36
MIN_JAW_CONTOUR_POINTS = 10

Derivation = Callable[[LandmarkSet, Optional[BoundingBox]], float]


def facial_symmetry(landmarks: LandmarkSet, bbox: Optional[BoundingBox] = None) -> float:
    """Left-right alignment of the eye centers, 0-100.

    Only the eyes are scored. Unlabelled mouth points carry no left-right
    signal, so they do not contribute a sub-score.
    """
    left = landmarks.left_eye_center
    right = landmarks.right_eye_center
    if left is None or right is None:
        return DEFAULT_SYMMETRY

    midline_x = (left.x + right.x) / 2
    scores = []

    left_dist = abs(left.x - midline_x)
    right_dist = abs(right.x - midline_x)
    max_dist = max(left_dist, right_dist)
    if max_dist > 0:
        scores.append(1.0 - abs(left_dist - right_dist) / max_dist)

    interocular = left.distance_to(right)
    y_diff = abs(left.y - right.y)
    if interocular > 0:
        scores.append(1.0 - clamp(y_diff / interocular, 0.0, 1.0))
    else:
        scores.append(1.0)

    return clamp(sum(scores) / len(scores) * 100.0, 0.0, 100.0)


def proportional_harmony(landmarks: LandmarkSet, bbox: Optional[BoundingBox] = None) -> float:
    """Deviation of height/width from the golden ratio, -15..15.

    Falls back to the face box when the contour is empty.
    """
    width = landmarks.facial_width
    height = landmarks.facial_height
    if width is None and bbox is not None:
        width, height = bbox.width, bbox.height
    if not width or height is None:
        return 0.0
    return clamp((height / width - GOLDEN_RATIO) * 10.0, -15.0, 15.0)


def canthal_tilt(landmarks: LandmarkSet, bbox: Optional[BoundingBox] = None) -> float:
    """Angle in degrees of the eye-center line, -10..15."""
    left = landmarks.left_eye_center
    right = landmarks.right_eye_center
    if left is None or right is None:
        return 0.0
    dx = right.x - left.x
    if dx == 0:
        return 0.0
    return clamp(math.degrees(math.atan((right.y - left.y) / dx)), -10.0, 15.0)


def jaw_definition(landmarks: LandmarkSet, bbox: Optional[BoundingBox] = None) -> float:
    """Contour-detail proxy, 0-100."""
    count = len(landmarks.face_contour)
    if count < MIN_JAW_CONTOUR_POINTS:
        return DEFAULT_JAW_DEFINITION
    detail = clamp(count / FULL_CONTOUR_POINTS * 40.0, 0.0, 40.0)
    return clamp(50.0 + detail, 0.0, 100.0)


def cheekbone_prominence(landmarks: LandmarkSet, bbox: Optional[BoundingBox] = None) -> float:
    """Width-to-height proxy, 40-90 when measurable."""
    width = landmarks.facial_width
    height = landmarks.facial_height
    if width is None or not height:
        return DEFAULT_CHEEKBONE_PROMINENCE
    return clamp(width / height * 80.0, 40.0, 90.0)


DERIVATIONS: Dict[MetricId, Derivation] = {
    MetricId.FACIAL_SYMMETRY: facial_symmetry,
    MetricId.PROPORTIONAL_HARMONY: proportional_harmony,
    MetricId.CANTHAL_TILT: canthal_tilt,
    MetricId.JAW_DEFINITION: jaw_definition,
    MetricId.CHEEKBONE_PROMINENCE: cheekbone_prominence,
}


__all__ = [
    "GOLDEN_RATIO",
    "Derivation",
    "DERIVATIONS",
    "facial_symmetry",
    "proportional_harmony",
    "canthal_tilt",
    "jaw_definition",
    "cheekbone_prominence",
]
