"""facemetric - Quality-gated multi-frame facial measurement.

Quick Start:
    >>> import facemetric as fm
    >>> result = fm.analyze(frames, backend)
    >>> print(f"Confidence: {result.overall_confidence:.0%}")

Baseline and trend:
    >>> baseline = fm.compute_baseline([r.measurements for r in history])
    >>> changes = fm.compare_to_baseline(result.measurements, baseline)

Neutral language:
    >>> fm.sanitize("slightly uneven")
    'slightly asymmetric'
"""

__version__ = "0.1.0"

from facemetric.baseline import (
    MeasurementBaseline,
    MetricChange,
    MetricTrend,
    compare_to_baseline,
    compute_baseline,
)
from facemetric.capture import CaptureSignal
from facemetric.config import EngineConfig, load_config
from facemetric.errors import (
    CaptureCancelledError,
    CaptureStateError,
    DetectorNotInitializedError,
    NoUsableFaceDataError,
)
from facemetric.language import contains_banned_terms, neutral_description, sanitize
from facemetric.main import (
    # Session
    FacemetricSession,
    # High-level API
    analyze,
)
from facemetric.measurement import AnalysisResult, FacialMeasurement, MetricId

__all__ = [
    # High-level API
    "analyze",
    "FacemetricSession",
    "CaptureSignal",
    "AnalysisResult",
    "FacialMeasurement",
    "MetricId",
    # Configuration
    "EngineConfig",
    "load_config",
    # Baseline
    "compute_baseline",
    "compare_to_baseline",
    "MeasurementBaseline",
    "MetricChange",
    "MetricTrend",
    # Language
    "sanitize",
    "contains_banned_terms",
    "neutral_description",
    # Errors
    "NoUsableFaceDataError",
    "DetectorNotInitializedError",
    "CaptureStateError",
    "CaptureCancelledError",
]
