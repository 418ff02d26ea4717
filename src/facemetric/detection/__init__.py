"""Detector and pixel-sampling collaborators consumed by the engine."""

from facemetric.detection.backends.base import DetectedFace, FaceLandmarkBackend
from facemetric.detection.detector import FaceLandmarkDetector
from facemetric.detection.sampling import (
    NEUTRAL_BRIGHTNESS,
    BrightnessSampler,
    ImageBrightnessSampler,
)

__all__ = [
    "DetectedFace",
    "FaceLandmarkBackend",
    "FaceLandmarkDetector",
    "NEUTRAL_BRIGHTNESS",
    "BrightnessSampler",
    "ImageBrightnessSampler",
]
