"""Output types for measurement derivation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

from facemetric.gate.output import QualityGateResult
from facemetric.landmarks import LandmarkSet


@dataclass(frozen=True)
class FacialMeasurement:
    """One measured metric with its error bar and evidence strength.

    Attributes:
        metric_id: Metric identifier (see MetricId).
        value: Measured value, clamped to the metric's range.
        uncertainty: Plus/minus range in the value's unit.
        confidence: Evidence strength in [0, 1].
        measured_at: Derivation timestamp.
    """

    metric_id: str
    value: float
    uncertainty: float
    confidence: float
    measured_at: datetime = field(default_factory=datetime.now)

    @property
    def display_value(self) -> str:
        """Value with uncertainty, e.g. ``"63.2 ± 1.5"``."""
        return f"{self.value:.1f} ± {self.uncertainty:.1f}"

    @property
    def confidence_percent(self) -> str:
        return f"{self.confidence * 100:.0f}%"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metric_id": self.metric_id,
            "value": self.value,
            "uncertainty": self.uncertainty,
            "confidence": self.confidence,
            "measured_at": self.measured_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FacialMeasurement":
        measured_at = data.get("measured_at")
        return cls(
            metric_id=str(data["metric_id"]),
            value=float(data["value"]),
            uncertainty=float(data.get("uncertainty", 0.0)),
            confidence=float(data["confidence"]),
            measured_at=datetime.fromisoformat(measured_at) if measured_at else datetime.now(),
        )


@dataclass
class AnalysisResult:
    """Outcome of analysing one capture.

    Attributes:
        landmarks: Fused (or single best) landmark set.
        measurements: metric id -> FacialMeasurement.
        quality_gate: Gate summary for the capture.
        frame_count: Number of frames that contributed.
        processing_time_sec: Wall time spent deriving measurements.
        warnings: Non-fatal notes (e.g. proxy metrics present).
    """

    landmarks: LandmarkSet
    measurements: Dict[str, FacialMeasurement]
    quality_gate: QualityGateResult
    frame_count: int
    processing_time_sec: float = 0.0
    analyzed_at: datetime = field(default_factory=datetime.now)
    warnings: List[str] = field(default_factory=list)

    @property
    def overall_confidence(self) -> float:
        if not self.measurements:
            return 0.0
        return sum(m.confidence for m in self.measurements.values()) / len(self.measurements)

    @property
    def average_uncertainty(self) -> float:
        if not self.measurements:
            return 0.0
        return sum(m.uncertainty for m in self.measurements.values()) / len(self.measurements)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "landmarks": self.landmarks.to_dict(),
            "measurements": {k: v.to_dict() for k, v in self.measurements.items()},
            "quality_gate": self.quality_gate.to_dict(),
            "frame_count": self.frame_count,
            "processing_time_sec": self.processing_time_sec,
            "analyzed_at": self.analyzed_at.isoformat(),
            "warnings": list(self.warnings),
        }


__all__ = ["FacialMeasurement", "AnalysisResult"]
