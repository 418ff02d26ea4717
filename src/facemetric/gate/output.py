"""Output types for the per-frame quality gate."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from facemetric.config import GateConfig

NO_FACE_REASON = "No face detected in frame"


@dataclass(frozen=True)
class FaceSizeValidation:
    """Face width relative to image width."""

    passed: bool
    face_width_ratio: float
    min_required: float
    max_allowed: float

    @classmethod
    def evaluate(
        cls, face_width: float, image_width: float, min_required: float, max_allowed: float
    ) -> "FaceSizeValidation":
        ratio = face_width / image_width if image_width > 0 else 0.0
        return cls(
            passed=min_required <= ratio <= max_allowed,
            face_width_ratio=ratio,
            min_required=min_required,
            max_allowed=max_allowed,
        )

    @property
    def message(self) -> str:
        if self.passed:
            return "Face size is good"
        if self.face_width_ratio < self.min_required:
            return "Move closer to the camera"
        if self.face_width_ratio > self.max_allowed:
            return "Move further from the camera"
        return "Adjust your distance"


@dataclass(frozen=True)
class PoseValidation:
    """Head pose within the allowed angle on every axis."""

    passed: bool
    pitch: float
    yaw: float
    roll: float
    max_angle_allowed: float

    @classmethod
    def evaluate(cls, pitch: float, yaw: float, roll: float, max_angle: float) -> "PoseValidation":
        return cls(
            passed=abs(pitch) <= max_angle and abs(yaw) <= max_angle and abs(roll) <= max_angle,
            pitch=pitch,
            yaw=yaw,
            roll=roll,
            max_angle_allowed=max_angle,
        )

    @property
    def message(self) -> str:
        if self.passed:
            return "Head position is good"
        limit = self.max_angle_allowed
        if abs(self.pitch) > limit:
            return "Tilt your head down" if self.pitch > 0 else "Tilt your head up"
        if abs(self.yaw) > limit:
            return "Turn your head left" if self.yaw > 0 else "Turn your head right"
        if abs(self.roll) > limit:
            return (
                "Tilt your head counter-clockwise" if self.roll > 0
                else "Tilt your head clockwise"
            )
        return "Face the camera directly"


@dataclass(frozen=True)
class LightingValidation:
    """Brightness balance between the left and right face halves.

    Brightness values are normalized to [0, 1].
    """

    passed: bool
    left_brightness: float
    right_brightness: float
    asymmetry: float
    max_asymmetry: float

    @classmethod
    def evaluate(cls, left: float, right: float, max_asymmetry: float) -> "LightingValidation":
        brightest = max(left, right)
        asymmetry = abs(left - right) / brightest if brightest > 0 else 0.0
        return cls(
            passed=asymmetry <= max_asymmetry,
            left_brightness=left,
            right_brightness=right,
            asymmetry=asymmetry,
            max_asymmetry=max_asymmetry,
        )

    @property
    def message(self) -> str:
        if self.passed:
            return "Lighting is good"
        if self.asymmetry > self.max_asymmetry:
            # turn toward the dimmer side
            if self.left_brightness > self.right_brightness:
                return "Light is uneven - turn right slightly"
            return "Light is uneven - turn left slightly"
        return "Find more even lighting"


@dataclass(frozen=True)
class QualityGateResult:
    """Combined admissibility of one frame."""

    passed: bool
    face_size: FaceSizeValidation
    pose: PoseValidation
    lighting: LightingValidation
    face_detected: bool
    failure_reasons: Tuple[str, ...] = ()

    @classmethod
    def from_validations(
        cls,
        face_size: FaceSizeValidation,
        pose: PoseValidation,
        lighting: LightingValidation,
    ) -> "QualityGateResult":
        reasons = []
        if not face_size.passed:
            reasons.append(face_size.message)
        if not pose.passed:
            reasons.append(pose.message)
        if not lighting.passed:
            reasons.append(lighting.message)
        return cls(
            passed=face_size.passed and pose.passed and lighting.passed,
            face_size=face_size,
            pose=pose,
            lighting=lighting,
            face_detected=True,
            failure_reasons=tuple(reasons),
        )

    @classmethod
    def no_face_detected(cls, config: GateConfig | None = None) -> "QualityGateResult":
        """Synthetic failed result; sub-checks are zeroed, not evaluated."""
        cfg = config or GateConfig()
        return cls(
            passed=False,
            face_size=FaceSizeValidation(
                passed=False,
                face_width_ratio=0.0,
                min_required=cfg.min_face_width_ratio,
                max_allowed=cfg.max_face_width_ratio,
            ),
            pose=PoseValidation(
                passed=False, pitch=0.0, yaw=0.0, roll=0.0,
                max_angle_allowed=cfg.max_pose_angle,
            ),
            lighting=LightingValidation(
                passed=False, left_brightness=0.0, right_brightness=0.0,
                asymmetry=0.0, max_asymmetry=cfg.max_lighting_asymmetry,
            ),
            face_detected=False,
            failure_reasons=(NO_FACE_REASON,),
        )

    @property
    def primary_message(self) -> str:
        if not self.face_detected:
            return "No face detected"
        if self.failure_reasons:
            return self.failure_reasons[0]
        return "Ready"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "passed": self.passed,
            "face_detected": self.face_detected,
            "failure_reasons": list(self.failure_reasons),
            "primary_message": self.primary_message,
            "face_width_ratio": self.face_size.face_width_ratio,
            "pitch": self.pose.pitch,
            "yaw": self.pose.yaw,
            "roll": self.pose.roll,
            "lighting_asymmetry": self.lighting.asymmetry,
        }


__all__ = [
    "NO_FACE_REASON",
    "FaceSizeValidation",
    "PoseValidation",
    "LightingValidation",
    "QualityGateResult",
]
