"""Metric identifiers and their display/trend configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


class MetricId(str, Enum):
    FACIAL_SYMMETRY = "facialSymmetry"
    PROPORTIONAL_HARMONY = "proportionalHarmony"
    CANTHAL_TILT = "canthalTilt"
    JAW_DEFINITION = "jawDefinition"
    CHEEKBONE_PROMINENCE = "cheekboneProminence"


class TrendPreference(str, Enum):
    """Which direction of change counts as improvement."""

    HIGHER = "HIGHER"
    LOWER = "LOWER"
    TOWARD_ZERO = "TOWARD_ZERO"


@dataclass(frozen=True)
class MetricConfig:
    """Static description of one metric.

    Attributes:
        id: Metric identifier.
        name: Human-readable name.
        description: What the metric compares.
        min_value / max_value: Clamp range of the value.
        unit: Display unit ("" for unitless scores).
        typical_min / typical_max: Range used for neutral descriptions.
        preference: Direction considered an improvement.
        proxy: True when the value is an illustrative estimate rather
            than a direct geometric measurement.
        factors: Everyday factors that shift the value.
    """

    id: MetricId
    name: str
    description: str
    min_value: float
    max_value: float
    unit: str = ""
    typical_min: float = 0.0
    typical_max: float = 100.0
    preference: TrendPreference = TrendPreference.HIGHER
    proxy: bool = False
    factors: Tuple[str, ...] = ()

    @property
    def higher_is_better(self) -> bool:
        return self.preference == TrendPreference.HIGHER

    def clamp(self, value: float) -> float:
        return max(self.min_value, min(self.max_value, value))


METRICS: Dict[MetricId, MetricConfig] = {
    MetricId.FACIAL_SYMMETRY: MetricConfig(
        id=MetricId.FACIAL_SYMMETRY,
        name="Facial Symmetry",
        description="Bilateral feature comparison measuring left-right alignment",
        min_value=0.0,
        max_value=100.0,
        typical_min=65.0,
        typical_max=95.0,
        factors=("Sleep", "Hydration", "Stress", "Posture"),
    ),
    MetricId.PROPORTIONAL_HARMONY: MetricConfig(
        id=MetricId.PROPORTIONAL_HARMONY,
        name="Proportional Harmony",
        description="Facial thirds ratio analysis measuring vertical proportions",
        min_value=-15.0,
        max_value=15.0,
        typical_min=-8.0,
        typical_max=8.0,
        preference=TrendPreference.TOWARD_ZERO,
        factors=("Camera angle", "Expression", "Head tilt"),
    ),
    MetricId.CANTHAL_TILT: MetricConfig(
        id=MetricId.CANTHAL_TILT,
        name="Canthal Tilt",
        description="Inner/outer eye corner angle measurement",
        min_value=-10.0,
        max_value=15.0,
        unit="°",
        typical_min=-2.0,
        typical_max=10.0,
        factors=("Sleep", "Fluid retention", "Age"),
    ),
    MetricId.JAW_DEFINITION: MetricConfig(
        id=MetricId.JAW_DEFINITION,
        name="Jaw Definition",
        description="Mandibular contour sharpness assessment",
        min_value=0.0,
        max_value=100.0,
        typical_min=50.0,
        typical_max=88.0,
        proxy=True,
        factors=("Body fat", "Posture", "Mewing", "Hydration"),
    ),
    MetricId.CHEEKBONE_PROMINENCE: MetricConfig(
        id=MetricId.CHEEKBONE_PROMINENCE,
        name="Cheekbone Prominence",
        description="Zygomatic projection measurement",
        min_value=0.0,
        max_value=100.0,
        typical_min=55.0,
        typical_max=85.0,
        proxy=True,
        factors=("Lighting", "Body fat", "Facial exercises"),
    ),
}


def get_metric(metric_id: str) -> Optional[MetricConfig]:
    """Look up a metric by id string; None if unknown."""
    try:
        return METRICS[MetricId(metric_id)]
    except ValueError:
        return None


__all__ = ["MetricId", "TrendPreference", "MetricConfig", "METRICS", "get_metric"]
