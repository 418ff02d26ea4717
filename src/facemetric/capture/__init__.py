"""Frame selection, multi-frame fusion and capture sequencing."""

from facemetric.capture.fusion import (
    DEFAULT_SINGLE_FRAME_UNCERTAINTY,
    MultiFrameBuffer,
    confidence_from_frame_count,
    frame_uncertainty,
    fuse_landmarks,
)
from facemetric.capture.quality import (
    FeedbackLevel,
    ImageQuality,
    QualityFeedback,
    analyze_image_quality,
    frame_quality_score,
    quality_feedback,
    select_best_frames,
)
from facemetric.capture.selector import score_frame, select_best_frame
from facemetric.capture.sequence import (
    CaptureSequence,
    CaptureSignal,
    CaptureState,
    FrameOutcome,
)

__all__ = [
    "DEFAULT_SINGLE_FRAME_UNCERTAINTY",
    "MultiFrameBuffer",
    "confidence_from_frame_count",
    "frame_uncertainty",
    "fuse_landmarks",
    "FeedbackLevel",
    "ImageQuality",
    "QualityFeedback",
    "analyze_image_quality",
    "frame_quality_score",
    "quality_feedback",
    "select_best_frames",
    "score_frame",
    "select_best_frame",
    "CaptureSequence",
    "CaptureSignal",
    "CaptureState",
    "FrameOutcome",
]
