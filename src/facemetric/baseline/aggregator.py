"""Baseline aggregation and trend classification.

A baseline is a pure fold over already-materialized measurement maps,
one map per capture. Nothing here blocks or touches storage.

Example:
    >>> baseline = compute_baseline(history)
    >>> changes = compare_to_baseline(latest, baseline)
    >>> for metric_id, change in changes.items():
    ...     print(metric_id, change.trend.label, change.trend.icon)
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Sequence

from facemetric.baseline.confidence import ConfidenceProgress, days_until_confident_progress
from facemetric.baseline.output import MeasurementBaseline, MetricChange, MetricTrend
from facemetric.config import TrendConfig
from facemetric.measurement.metrics import MetricId, TrendPreference, get_metric
from facemetric.measurement.output import FacialMeasurement

logger = logging.getLogger(__name__)

MeasurementMap = Mapping[str, FacialMeasurement]

SIGNIFICANCE_FACTOR = 1.5
DEFAULT_WINDOW = 5


def _preference(metric_id: str) -> TrendPreference:
    metric = get_metric(metric_id)
    return metric.preference if metric is not None else TrendPreference.HIGHER


def compute_baseline(
    history: Sequence[MeasurementMap],
    config: Optional[TrendConfig] = None,
) -> MeasurementBaseline:
    """Confidence-weighted average per metric across captures.

    Every metric present in at least one map is included; metrics absent
    from all maps are omitted. Baseline confidence is the maximum input
    confidence discounted by ``baseline_confidence_discount``. Uncertainty
    is the confidence-weighted mean of the input uncertainties.
    """
    cfg = config or TrendConfig()

    metric_ids: List[str] = []
    for measurements in history:
        for metric_id in measurements:
            if metric_id not in metric_ids:
                metric_ids.append(metric_id)

    metrics: Dict[str, FacialMeasurement] = {}
    for metric_id in metric_ids:
        values = [m[metric_id] for m in history if metric_id in m]
        total_weight = sum(v.confidence for v in values)
        if total_weight > 0:
            average = sum(v.value * v.confidence for v in values) / total_weight
            uncertainty = sum(v.uncertainty * v.confidence for v in values) / total_weight
        else:
            average = sum(v.value for v in values) / len(values)
            uncertainty = sum(v.uncertainty for v in values) / len(values)
        metrics[metric_id] = FacialMeasurement(
            metric_id=metric_id,
            value=average,
            uncertainty=uncertainty,
            confidence=max(v.confidence for v in values) * cfg.baseline_confidence_discount,
        )

    logger.debug("Baseline over %d captures: %d metrics", len(history), len(metrics))
    return MeasurementBaseline(metrics=metrics, sample_count=len(history))


def calculate_change(current: FacialMeasurement, baseline: FacialMeasurement) -> float:
    return current.value - baseline.value


def classify_trend(
    metric_id: str,
    change: float,
    config: Optional[TrendConfig] = None,
) -> MetricTrend:
    """Classify a signed change by the metric's preferred direction.

    Metrics where proximity to zero is preferred cannot be classified
    from the change alone and are reported stable; use
    ``classify_trend_values`` for those.
    """
    cfg = config or TrendConfig()
    preference = _preference(metric_id)
    if preference == TrendPreference.TOWARD_ZERO:
        return MetricTrend.STABLE
    if abs(change) < cfg.stable_threshold:
        return MetricTrend.STABLE
    improved = change > 0 if preference == TrendPreference.HIGHER else change < 0
    return MetricTrend.IMPROVING if improved else MetricTrend.DECLINING


def classify_trend_values(
    metric_id: str,
    current: float,
    baseline: float,
    config: Optional[TrendConfig] = None,
) -> MetricTrend:
    """Classify a change given both absolute values."""
    cfg = config or TrendConfig()
    if _preference(metric_id) != TrendPreference.TOWARD_ZERO:
        return classify_trend(metric_id, current - baseline, cfg)

    if cfg.legacy_harmony_stable and metric_id == MetricId.PROPORTIONAL_HARMONY.value:
        return MetricTrend.STABLE
    delta = abs(current) - abs(baseline)
    if abs(delta) < cfg.harmony_stable_threshold:
        return MetricTrend.STABLE
    return MetricTrend.IMPROVING if delta < 0 else MetricTrend.DECLINING


def is_significant_change(current: float, previous: float, variance: float) -> bool:
    """True when the change exceeds 1.5x the given variance."""
    return abs(current - previous) > variance * SIGNIFICANCE_FACTOR


def compare_to_baseline(
    current: MeasurementMap,
    baseline: MeasurementBaseline,
    config: Optional[TrendConfig] = None,
) -> Dict[str, MetricChange]:
    """Change and trend for every metric present in both inputs.

    Significance uses the current measurement's uncertainty as variance.
    """
    changes: Dict[str, MetricChange] = {}
    for metric_id, measurement in current.items():
        reference = baseline.get(metric_id)
        if reference is None:
            continue
        changes[metric_id] = MetricChange(
            metric_id=metric_id,
            current=measurement.value,
            baseline=reference.value,
            change=calculate_change(measurement, reference),
            trend=classify_trend_values(metric_id, measurement.value, reference.value, config),
            significant=is_significant_change(
                measurement.value, reference.value, measurement.uncertainty
            ),
        )
    return changes


def history_readiness(
    history: Sequence[MeasurementMap],
    now: Optional[datetime] = None,
) -> ConfidenceProgress:
    """Readiness of a capture history for progress claims.

    The history starts at its earliest measurement timestamp; each map
    counts as one sample.
    """
    timestamps = [m.measured_at for measurements in history for m in measurements.values()]
    start = min(timestamps) if timestamps else (now or datetime.now())
    return days_until_confident_progress(start, current_samples=len(history), now=now)


def moving_average(values: Sequence[float], window: int = DEFAULT_WINDOW) -> Optional[float]:
    """Mean of the last ``window`` values; None when empty."""
    if not values:
        return None
    recent = list(values)[-window:]
    return sum(recent) / len(recent)


def weighted_moving_average(
    values: Sequence[float],
    window: int = DEFAULT_WINDOW,
) -> Optional[float]:
    """Linearly weighted mean of the last ``window`` values (newest weighs most)."""
    if not values:
        return None
    recent = list(values)[-window:]
    weights = range(1, len(recent) + 1)
    return sum(v * w for v, w in zip(recent, weights)) / sum(weights)


__all__ = [
    "compute_baseline",
    "calculate_change",
    "classify_trend",
    "classify_trend_values",
    "is_significant_change",
    "compare_to_baseline",
    "history_readiness",
    "moving_average",
    "weighted_moving_average",
]
