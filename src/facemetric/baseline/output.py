"""Output types for baseline aggregation and trend classification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from facemetric.measurement.output import FacialMeasurement


class MetricTrend(str, Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def icon(self) -> str:
        return _TREND_ICONS[self]


_TREND_ICONS = {
    MetricTrend.IMPROVING: "↑",
    MetricTrend.STABLE: "→",
    MetricTrend.DECLINING: "↓",
}


@dataclass(frozen=True)
class MeasurementBaseline:
    """Confidence-weighted reference values across captures.

    Attributes:
        metrics: metric id -> baseline FacialMeasurement.
        sample_count: Number of capture maps folded in.
        computed_at: When the baseline was computed.
    """

    metrics: Dict[str, FacialMeasurement] = field(default_factory=dict)
    sample_count: int = 0
    computed_at: datetime = field(default_factory=datetime.now)

    def __contains__(self, metric_id: object) -> bool:
        return metric_id in self.metrics

    def get(self, metric_id: str) -> Optional[FacialMeasurement]:
        return self.metrics.get(metric_id)

    @property
    def is_empty(self) -> bool:
        return not self.metrics

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metrics": {k: v.to_dict() for k, v in self.metrics.items()},
            "sample_count": self.sample_count,
            "computed_at": self.computed_at.isoformat(),
        }


@dataclass(frozen=True)
class MetricChange:
    """Change of one metric relative to its baseline."""

    metric_id: str
    current: float
    baseline: float
    change: float
    trend: MetricTrend
    significant: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metric_id": self.metric_id,
            "current": self.current,
            "baseline": self.baseline,
            "change": self.change,
            "trend": self.trend.value,
            "significant": self.significant,
        }


__all__ = ["MetricTrend", "MeasurementBaseline", "MetricChange"]
