"""Baseline aggregation across captures and trend classification."""

from facemetric.baseline.aggregator import (
    calculate_change,
    classify_trend,
    classify_trend_values,
    compare_to_baseline,
    compute_baseline,
    history_readiness,
    is_significant_change,
    moving_average,
    weighted_moving_average,
)
from facemetric.baseline.confidence import (
    ConfidenceLevel,
    ConfidenceProgress,
    confidence_level,
    days_until_confident_progress,
    overall_confidence,
)
from facemetric.baseline.output import MeasurementBaseline, MetricChange, MetricTrend

__all__ = [
    "calculate_change",
    "classify_trend",
    "classify_trend_values",
    "compare_to_baseline",
    "compute_baseline",
    "history_readiness",
    "is_significant_change",
    "moving_average",
    "weighted_moving_average",
    "ConfidenceLevel",
    "ConfidenceProgress",
    "confidence_level",
    "days_until_confident_progress",
    "overall_confidence",
    "MeasurementBaseline",
    "MetricChange",
    "MetricTrend",
]
