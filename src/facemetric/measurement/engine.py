"""Measurement derivation engine.

Derives every registered metric from a fused landmark set. Uncertainty
comes from the spread of the same metric computed on each buffered
frame; confidence comes from the number of frames. The engine does not
consult the quality gate; whether gated-out frames may be measured is
the caller's decision.

Example:
    >>> engine = MeasurementEngine()
    >>> measurements = engine.measure(buffer)
    >>> print(measurements["facialSymmetry"].display_value)
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from facemetric.capture.fusion import (
    MultiFrameBuffer,
    confidence_from_frame_count,
    frame_uncertainty,
)
from facemetric.config import MeasurementConfig
from facemetric.errors import NoUsableFaceDataError
from facemetric.geometry import BoundingBox
from facemetric.landmarks import FrameSample, LandmarkSet
from facemetric.measurement.derivations import DERIVATIONS
from facemetric.measurement.metrics import METRICS
from facemetric.measurement.output import FacialMeasurement

logger = logging.getLogger(__name__)


def _mean_bbox(samples: Sequence[FrameSample]) -> Optional[BoundingBox]:
    boxes = [s.bbox for s in samples if s.bbox is not None]
    if not boxes:
        return None
    n = len(boxes)
    return BoundingBox(
        x=sum(b.x for b in boxes) / n,
        y=sum(b.y for b in boxes) / n,
        width=sum(b.width for b in boxes) / n,
        height=sum(b.height for b in boxes) / n,
    )


class MeasurementEngine:
    """Turns landmarks into ``FacialMeasurement`` values.

    Args:
        config: Proxy scaling (default: MeasurementConfig()).
        single_frame_uncertainty: Uncertainty reported when fewer than
            two frames are available.
    """

    def __init__(
        self,
        config: Optional[MeasurementConfig] = None,
        single_frame_uncertainty: float = 3.0,
    ):
        self.config = config or MeasurementConfig()
        self.single_frame_uncertainty = single_frame_uncertainty

    def measure(
        self,
        buffer: MultiFrameBuffer,
        align_by_nearest: bool = False,
    ) -> Dict[str, FacialMeasurement]:
        """Fuse the buffer and derive all metrics.

        Raises:
            NoUsableFaceDataError: If the buffer holds no frames.
        """
        if buffer.frame_count == 0:
            raise NoUsableFaceDataError("measurement", attempted_frames=0)
        fused = buffer.fused_landmarks(align_by_nearest=align_by_nearest)
        return self.derive(fused, _mean_bbox(buffer.samples), buffer.samples)

    def measure_frame(
        self,
        landmarks: LandmarkSet,
        bbox: Optional[BoundingBox] = None,
    ) -> Dict[str, FacialMeasurement]:
        """Derive all metrics from a single frame's landmarks."""
        return self.derive(landmarks, bbox, [FrameSample(landmarks=landmarks, bbox=bbox)])

    def derive(
        self,
        fused: LandmarkSet,
        bbox: Optional[BoundingBox],
        samples: Sequence[FrameSample],
    ) -> Dict[str, FacialMeasurement]:
        """Derive all metrics from ``fused`` using ``samples`` for spread.

        Args:
            fused: Landmark set the values are computed from.
            bbox: Face box used when the contour group is empty.
            samples: Contributing frames, for per-frame uncertainty.
        """
        frame_count = max(len(samples), 1)
        base_confidence = confidence_from_frame_count(frame_count)
        measured_at = datetime.now()
        cfg = self.config

        results: Dict[str, FacialMeasurement] = {}
        for metric_id, derive_fn in DERIVATIONS.items():
            metric = METRICS[metric_id]
            value = metric.clamp(derive_fn(fused, bbox))

            per_frame: List[float] = [
                derive_fn(s.landmarks, s.bbox if s.bbox is not None else bbox)
                for s in samples
            ]
            uncertainty = frame_uncertainty(per_frame, default=self.single_frame_uncertainty)
            confidence = base_confidence
            if metric.proxy:
                uncertainty = max(uncertainty, cfg.proxy_min_uncertainty)
                confidence = base_confidence * cfg.proxy_confidence_multiplier

            results[metric_id.value] = FacialMeasurement(
                metric_id=metric_id.value,
                value=value,
                uncertainty=uncertainty,
                confidence=confidence,
                measured_at=measured_at,
            )

        logger.debug(
            "Derived %d metrics from %d frame(s), confidence=%.2f",
            len(results), frame_count, base_confidence,
        )
        return results


__all__ = ["MeasurementEngine"]
