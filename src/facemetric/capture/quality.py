"""Per-frame image quality scoring and burst frame selection.

Each frame gets three 0-100 component scores computed on its grayscale
luminance:

- brightness: mean luminance, mapped around the optimal band 40-120.
- contrast: population standard deviation of luminance.
- sharpness: mean absolute 4-neighbour Laplacian over the interior.

The overall score weighs them 30/30/40. When a capture records a longer
burst than it needs, ``frame_quality_score`` folds the image quality with
the detector confidence and head pose, and ``select_best_frames`` keeps
the top N frames in their original order.

Example:
    >>> quality = analyze_image_quality(image)
    >>> for item in quality_feedback(quality):
    ...     print(item.level.value, item.message)
    >>> keep = select_best_frames(scores, target_count=10)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Sequence

import cv2
import numpy as np

from facemetric.detection.sampling import to_grayscale

logger = logging.getLogger(__name__)

OPTIMAL_BRIGHTNESS_MIN = 40.0
OPTIMAL_BRIGHTNESS_MAX = 120.0
MIN_ACCEPTABLE_QUALITY = 50.0
MIN_FACE_CONFIDENCE = 0.7

# Returned when a component cannot be measured (image too small).
NEUTRAL_COMPONENT_SCORE = 50.0

# Pose deviation (degrees) beyond which a frame is scored on image quality alone.
FRONTAL_POSE_LIMIT = 15.0


class FeedbackLevel(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"


@dataclass(frozen=True)
class QualityFeedback:
    level: FeedbackLevel
    message: str


@dataclass(frozen=True)
class ImageQuality:
    """Image quality of a single frame.

    Attributes:
        brightness: Exposure score (0-100).
        contrast: Luminance spread score (0-100).
        sharpness: Edge strength score (0-100).
        overall: Weighted combination (0-100).
    """

    brightness: float
    contrast: float
    sharpness: float
    overall: float

    @classmethod
    def from_components(cls, brightness: float, contrast: float, sharpness: float) -> "ImageQuality":
        overall = brightness * 0.3 + contrast * 0.3 + sharpness * 0.4
        return cls(brightness=brightness, contrast=contrast, sharpness=sharpness, overall=overall)

    @classmethod
    def empty(cls) -> "ImageQuality":
        return cls(brightness=0.0, contrast=0.0, sharpness=0.0, overall=0.0)

    @property
    def is_acceptable(self) -> bool:
        return self.overall >= MIN_ACCEPTABLE_QUALITY

    @property
    def label(self) -> str:
        if self.overall >= 80:
            return "Excellent"
        if self.overall >= 60:
            return "Good"
        if self.overall >= MIN_ACCEPTABLE_QUALITY:
            return "Acceptable"
        return "Poor"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "brightness": round(self.brightness, 2),
            "contrast": round(self.contrast, 2),
            "sharpness": round(self.sharpness, 2),
            "overall": round(self.overall, 2),
            "label": self.label,
            "acceptable": self.is_acceptable,
        }


def brightness_score(mean_luminance: float) -> float:
    """Map mean luminance (0-255) to a 0-100 exposure score."""
    if mean_luminance < OPTIMAL_BRIGHTNESS_MIN:
        return mean_luminance / OPTIMAL_BRIGHTNESS_MIN * 50.0
    if mean_luminance > OPTIMAL_BRIGHTNESS_MAX:
        excess = mean_luminance - OPTIMAL_BRIGHTNESS_MAX
        return max(0.0, 100.0 - excess / 135.0 * 50.0)
    span = OPTIMAL_BRIGHTNESS_MAX - OPTIMAL_BRIGHTNESS_MIN
    return 70.0 + (mean_luminance - OPTIMAL_BRIGHTNESS_MIN) / span * 30.0


def contrast_score(std_luminance: float) -> float:
    """Map luminance standard deviation to a 0-100 contrast score."""
    if std_luminance < 20.0:
        return std_luminance * 2.0
    if std_luminance > 80.0:
        return max(50.0, 100.0 - (std_luminance - 80.0))
    return 60.0 + (std_luminance - 20.0) / 60.0 * 40.0


def sharpness_score(mean_abs_laplacian: float) -> float:
    return min(100.0, mean_abs_laplacian * 2.0)


def analyze_image_quality(image: np.ndarray) -> ImageQuality:
    """Score brightness, contrast and sharpness of a BGR or grayscale image."""
    if image is None or image.size == 0:
        return ImageQuality.empty()

    gray = to_grayscale(image).astype(np.float64)
    brightness = brightness_score(float(np.mean(gray)))
    contrast = contrast_score(float(np.std(gray)))

    h, w = gray.shape[:2]
    if h < 3 or w < 3:
        sharpness = NEUTRAL_COMPONENT_SCORE
    else:
        # ksize=1 is the 4-neighbour kernel: top + bottom + left + right - 4*center
        laplacian = cv2.Laplacian(gray, cv2.CV_64F, ksize=1)
        sharpness = sharpness_score(float(np.mean(np.abs(laplacian[1:-1, 1:-1]))))

    return ImageQuality.from_components(brightness, contrast, sharpness)


def quality_feedback(quality: ImageQuality) -> List[QualityFeedback]:
    """User-facing hints for a frame, one per failing component."""
    feedback: List[QualityFeedback] = []

    if quality.brightness < 50:
        feedback.append(QualityFeedback(
            FeedbackLevel.WARNING, "Image is too dark. Try better lighting."
        ))
    elif quality.brightness > 90:
        feedback.append(QualityFeedback(
            FeedbackLevel.WARNING, "Image is overexposed. Reduce lighting."
        ))

    if quality.contrast < 40:
        feedback.append(QualityFeedback(
            FeedbackLevel.WARNING, "Low contrast. Ensure even lighting."
        ))

    if quality.sharpness < 40:
        feedback.append(QualityFeedback(
            FeedbackLevel.WARNING, "Image is blurry. Hold camera steady."
        ))

    if quality.is_acceptable and not feedback:
        feedback.append(QualityFeedback(FeedbackLevel.SUCCESS, "Good photo quality!"))

    return feedback


def frame_quality_score(
    quality: ImageQuality,
    face_confidence: float = 1.0,
    pose_angle: float = 0.0,
    min_face_confidence: float = MIN_FACE_CONFIDENCE,
) -> float:
    """Rank score for burst selection; 0 when the detection is unreliable.

    Frames posed more than 15 degrees off frontal lose the confidence
    bonus and are scaled down by their deviation.
    """
    if face_confidence < min_face_confidence:
        return 0.0

    angle = abs(pose_angle)
    if angle > FRONTAL_POSE_LIMIT:
        score = (
            quality.brightness * 0.2 + quality.contrast * 0.2 + quality.sharpness * 0.3
        ) * (1.0 - angle / 90.0) * face_confidence
    else:
        score = (
            quality.brightness * 0.25
            + quality.contrast * 0.25
            + quality.sharpness * 0.3
            + face_confidence * 20.0
        ) * (1.0 - angle / 45.0)
    return max(0.0, score)


def select_best_frames(scores: Sequence[float], target_count: int = 10) -> List[int]:
    """Indices of the ``target_count`` highest scores, in ascending order.

    The earlier frame wins a tie. Fewer scores than the target keeps all.
    """
    if target_count < 1:
        raise ValueError("target_count must be >= 1")
    if len(scores) <= target_count:
        return list(range(len(scores)))

    ranked = sorted(range(len(scores)), key=lambda i: scores[i], reverse=True)
    chosen = sorted(ranked[:target_count])
    logger.debug("Selected %d of %d frames by quality", len(chosen), len(scores))
    return chosen


__all__ = [
    "OPTIMAL_BRIGHTNESS_MIN",
    "OPTIMAL_BRIGHTNESS_MAX",
    "MIN_ACCEPTABLE_QUALITY",
    "MIN_FACE_CONFIDENCE",
    "FeedbackLevel",
    "QualityFeedback",
    "ImageQuality",
    "brightness_score",
    "contrast_score",
    "sharpness_score",
    "analyze_image_quality",
    "quality_feedback",
    "frame_quality_score",
    "select_best_frames",
]
