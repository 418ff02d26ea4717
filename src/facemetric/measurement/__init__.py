"""Measurement derivation: metric registry, derivations and engine."""

from facemetric.measurement.derivations import (
    DERIVATIONS,
    canthal_tilt,
    cheekbone_prominence,
    facial_symmetry,
    jaw_definition,
    proportional_harmony,
)
from facemetric.measurement.engine import MeasurementEngine
from facemetric.measurement.metrics import (
    METRICS,
    MetricConfig,
    MetricId,
    TrendPreference,
    get_metric,
)
from facemetric.measurement.output import AnalysisResult, FacialMeasurement

__all__ = [
    "DERIVATIONS",
    "canthal_tilt",
    "cheekbone_prominence",
    "facial_symmetry",
    "jaw_definition",
    "proportional_harmony",
    "MeasurementEngine",
    "METRICS",
    "MetricConfig",
    "MetricId",
    "TrendPreference",
    "get_metric",
    "AnalysisResult",
    "FacialMeasurement",
]
