"""Confidence levels and progress readiness for tracked measurements.

Example:
    >>> level = confidence_level(2.0, variance_min=0.0, variance_max=9.0)
    >>> print(level.label, level.description)
    High Reliable measurement
    >>> readiness = days_until_confident_progress(first_capture, current_samples=4)
    >>> readiness.is_ready
    False
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional

MIN_TRACKING_DAYS = 14
MIN_TRACKING_SAMPLES = 7

# Relative weight of each named factor in overall_confidence.
CONFIDENCE_FACTOR_WEIGHTS: Dict[str, float] = {
    "photo_quality": 0.3,
    "consistency": 0.25,
    "sample_size": 0.25,
    "timespan": 0.2,
}
# Returned when no recognised factor is given.
NEUTRAL_CONFIDENCE = 0.5


class ConfidenceLevel(str, Enum):
    """Coarse reliability bucket for display."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def description(self) -> str:
        return _LEVEL_DESCRIPTIONS[self]


_LEVEL_DESCRIPTIONS = {
    ConfidenceLevel.HIGH: "Reliable measurement",
    ConfidenceLevel.MEDIUM: "Some variance expected",
    ConfidenceLevel.LOW: "High uncertainty",
}


def confidence_level(
    variance: float,
    variance_min: float,
    variance_max: float,
) -> ConfidenceLevel:
    """Bucket ``variance`` by where it falls in ``[variance_min, variance_max]``.

    The lower third is HIGH, the middle third MEDIUM and the rest LOW.
    A degenerate range puts anything at or below its bound in HIGH.
    """
    span = variance_max - variance_min
    if span <= 0:
        return ConfidenceLevel.HIGH if variance <= variance_min else ConfidenceLevel.LOW

    normalized = (variance - variance_min) / span
    if normalized <= 0.33:
        return ConfidenceLevel.HIGH
    if normalized <= 0.66:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def overall_confidence(factors: Mapping[str, float]) -> float:
    """Weighted mean of the recognised 0-1 factors; unknown keys are ignored."""
    total_weight = 0.0
    weighted_sum = 0.0
    for name, value in factors.items():
        weight = CONFIDENCE_FACTOR_WEIGHTS.get(name)
        if weight is None:
            continue
        weighted_sum += value * weight
        total_weight += weight
    if total_weight == 0:
        return NEUTRAL_CONFIDENCE
    return weighted_sum / total_weight


@dataclass(frozen=True)
class ConfidenceProgress:
    """How far a tracking history is from supporting progress claims.

    Attributes:
        days_remaining: Days until the minimum tracking period is met.
        samples_needed: Captures still required.
        progress: Combined readiness in [0, 1].
    """

    days_remaining: int
    samples_needed: int
    progress: float

    @property
    def is_ready(self) -> bool:
        return self.days_remaining == 0 and self.samples_needed == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "days_remaining": self.days_remaining,
            "samples_needed": self.samples_needed,
            "progress": round(self.progress, 3),
            "ready": self.is_ready,
        }


def days_until_confident_progress(
    start: datetime,
    current_samples: int = 0,
    min_days: int = MIN_TRACKING_DAYS,
    min_samples: int = MIN_TRACKING_SAMPLES,
    now: Optional[datetime] = None,
) -> ConfidenceProgress:
    """Readiness of a history that began at ``start``.

    Progress averages the elapsed fraction of ``min_days`` with the
    collected fraction of ``min_samples``.
    """
    if min_days < 1 or min_samples < 1:
        raise ValueError("min_days and min_samples must be >= 1")

    now = now or datetime.now(start.tzinfo)
    days_since_start = (now - start).days
    progress = (days_since_start / min_days + current_samples / min_samples) / 2
    return ConfidenceProgress(
        days_remaining=max(0, min_days - days_since_start),
        samples_needed=max(0, min_samples - current_samples),
        progress=min(1.0, max(0.0, progress)),
    )


__all__ = [
    "MIN_TRACKING_DAYS",
    "MIN_TRACKING_SAMPLES",
    "ConfidenceLevel",
    "ConfidenceProgress",
    "confidence_level",
    "overall_confidence",
    "days_until_confident_progress",
]
