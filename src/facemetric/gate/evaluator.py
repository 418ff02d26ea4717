"""Quality gate evaluator: per-frame face size, head pose and lighting checks.

A failing gate is advisory: results are returned, never raised. Callers
(typically a live preview) decide whether to withhold capture.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

import numpy as np

from facemetric.config import GateConfig
from facemetric.detection.backends.base import DetectedFace
from facemetric.detection.sampling import BrightnessSampler
from facemetric.gate.output import (
    FaceSizeValidation,
    LightingValidation,
    PoseValidation,
    QualityGateResult,
)
from facemetric.geometry import BoundingBox
from facemetric.landmarks import PoseAngles

logger = logging.getLogger(__name__)


class QualityGateEvaluator:
    """Evaluates face size, pose and lighting for a single frame.

    Args:
        config: Gate thresholds (default: GateConfig()).

    Example:
        >>> evaluator = QualityGateEvaluator()
        >>> result = evaluator.evaluate(face, (640, 480), left=120.0, right=110.0)
        >>> if not result.passed:
        ...     print(result.primary_message)
    """

    def __init__(self, config: Optional[GateConfig] = None):
        self.config = config or GateConfig()
        self._stats_total = 0
        self._stats_fail = 0
        self._stats_reasons: Dict[str, int] = {}

    def initialize(self) -> None:
        self._stats_total = 0
        self._stats_fail = 0
        self._stats_reasons = {}

    def cleanup(self) -> None:
        if self._stats_total > 0:
            pass_count = self._stats_total - self._stats_fail
            logger.info(
                "quality gate summary: %d/%d passed (%.0f%%), fail reasons: %s",
                pass_count, self._stats_total,
                100.0 * pass_count / self._stats_total,
                dict(self._stats_reasons) if self._stats_reasons else "none",
            )

    @property
    def stats(self) -> Dict[str, object]:
        return {
            "total": self._stats_total,
            "failed": self._stats_fail,
            "reasons": dict(self._stats_reasons),
        }

    def check_face_size(self, bbox: BoundingBox, image_width: float) -> FaceSizeValidation:
        cfg = self.config
        return FaceSizeValidation.evaluate(
            face_width=bbox.width,
            image_width=image_width,
            min_required=cfg.min_face_width_ratio,
            max_allowed=cfg.max_face_width_ratio,
        )

    def check_pose(self, pose: PoseAngles) -> PoseValidation:
        return PoseValidation.evaluate(pose.pitch, pose.yaw, pose.roll, self.config.max_pose_angle)

    def check_lighting(self, left_brightness: float, right_brightness: float) -> LightingValidation:
        """Compare raw [0, 255] brightness samples of the two face halves."""
        left = min(max(left_brightness / 255.0, 0.0), 1.0)
        right = min(max(right_brightness / 255.0, 0.0), 1.0)
        return LightingValidation.evaluate(left, right, self.config.max_lighting_asymmetry)

    def evaluate(
        self,
        face: Optional[DetectedFace],
        image_size: Tuple[int, int],
        left_brightness: float = 0.0,
        right_brightness: float = 0.0,
    ) -> QualityGateResult:
        """Run all three checks on one detected face.

        Args:
            face: Detector output, or None when no face was found.
            image_size: (width, height) of the frame in pixels.
            left_brightness: Mean brightness of the left face half [0, 255].
            right_brightness: Mean brightness of the right face half [0, 255].
        """
        if face is None:
            result = QualityGateResult.no_face_detected(self.config)
            self._record(result)
            return result
        return self.evaluate_geometry(
            face.box, face.pose, image_size, left_brightness, right_brightness
        )

    def evaluate_geometry(
        self,
        bbox: BoundingBox,
        pose: PoseAngles,
        image_size: Tuple[int, int],
        left_brightness: float,
        right_brightness: float,
    ) -> QualityGateResult:
        """Run all three checks on a face box and pose."""
        result = QualityGateResult.from_validations(
            face_size=self.check_face_size(bbox, image_size[0]),
            pose=self.check_pose(pose),
            lighting=self.check_lighting(left_brightness, right_brightness),
        )
        self._record(result)
        return result

    def evaluate_frame(
        self,
        image: np.ndarray,
        face: Optional[DetectedFace],
        sampler: BrightnessSampler,
    ) -> QualityGateResult:
        """Sample face-half brightness from ``image`` and evaluate."""
        h, w = image.shape[:2]
        if face is None:
            return self.evaluate(None, (w, h))
        box = face.box
        left = sampler.average_brightness(image, box.left_half())
        right = sampler.average_brightness(image, box.right_half())
        return self.evaluate(face, (w, h), left, right)

    def _record(self, result: QualityGateResult) -> None:
        self._stats_total += 1
        if result.passed:
            return
        self._stats_fail += 1
        for reason in result.failure_reasons:
            self._stats_reasons[reason] = self._stats_reasons.get(reason, 0) + 1
        logger.debug("quality gate FAIL: %s", list(result.failure_reasons))


__all__ = ["QualityGateEvaluator"]
