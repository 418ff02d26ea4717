from facemetric.gate.evaluator import QualityGateEvaluator
from facemetric.gate.output import (
    NO_FACE_REASON,
    FaceSizeValidation,
    LightingValidation,
    PoseValidation,
    QualityGateResult,
)

__all__ = [
    "QualityGateEvaluator",
    "NO_FACE_REASON",
    "FaceSizeValidation",
    "PoseValidation",
    "LightingValidation",
    "QualityGateResult",
]
