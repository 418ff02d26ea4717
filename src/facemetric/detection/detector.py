"""Lifecycle wrapper around a face landmark backend."""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from facemetric.detection.backends.base import DetectedFace, FaceLandmarkBackend
from facemetric.errors import DetectorNotInitializedError

logger = logging.getLogger(__name__)


class FaceLandmarkDetector:
    """Owns the initialize/detect/cleanup lifecycle of one backend.

    ``detect`` before ``initialize`` raises ``DetectorNotInitializedError``;
    the error is not retried here. Calls are expected one frame at a time.

    Example:
        >>> detector = FaceLandmarkDetector(backend)
        >>> detector.initialize()
        >>> face = detector.detect(image)
        >>> detector.cleanup()
    """

    def __init__(self, backend: FaceLandmarkBackend, name: str = "FaceLandmarkDetector"):
        self._backend = backend
        self._name = name
        self._initialized = False
        self._closing = False
        self._detect_count = 0
        self._empty_count = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        if self._initialized:
            return
        self._backend.initialize()
        self._initialized = True
        self._detect_count = 0
        self._empty_count = 0
        logger.info("%s initialized", self._name)

    def detect(self, image: np.ndarray) -> Optional[DetectedFace]:
        """Detect zero or one face in ``image``."""
        if not self._initialized or self._closing:
            raise DetectorNotInitializedError(self._name)
        face = self._backend.detect(image)
        self._detect_count += 1
        if face is None:
            self._empty_count += 1
        return face

    def cleanup(self) -> None:
        if not self._initialized:
            return
        self._closing = True
        try:
            self._backend.cleanup()
        finally:
            self._initialized = False
            self._closing = False
        if self._detect_count > 0:
            logger.info(
                "%s summary: %d frames, %d without a face",
                self._name, self._detect_count, self._empty_count,
            )

    def __enter__(self) -> "FaceLandmarkDetector":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()


__all__ = ["FaceLandmarkDetector"]
