from facemetric.detection.backends.base import DetectedFace, FaceLandmarkBackend

__all__ = ["DetectedFace", "FaceLandmarkBackend"]
