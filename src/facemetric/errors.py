"""Exception types raised by the measurement engine.

Quality gate failures and degenerate geometry are returned as data and
never raised. Only terminal and precondition failures surface here.
"""

from __future__ import annotations


class NoUsableFaceDataError(Exception):
    """Raised when a capture or selection ends without any usable face.

    Attributes:
        stage: Where the failure occurred ("capture" or "selection").
        attempted_frames: Number of frames submitted before giving up.
    """

    def __init__(self, stage: str, attempted_frames: int = 0):
        self.stage = stage
        self.attempted_frames = attempted_frames
        super().__init__(
            f"No usable face data ({stage}, {attempted_frames} frames attempted)"
        )


class DetectorNotInitializedError(RuntimeError):
    """Raised when a detector backend is used before ``initialize()``."""

    def __init__(self, backend_name: str = "Detector"):
        self.backend_name = backend_name
        super().__init__(f"{backend_name} not initialized. Call initialize() first.")


class CaptureStateError(RuntimeError):
    """Raised when a capture sequence is driven out of order."""


class CaptureCancelledError(Exception):
    """Raised when a capture is cancelled and its frames are discarded.

    Attributes:
        attempted_frames: Number of frames submitted before the cancel.
    """

    def __init__(self, attempted_frames: int = 0):
        self.attempted_frames = attempted_frames
        super().__init__(f"Capture cancelled after {attempted_frames} frames")


__all__ = [
    "NoUsableFaceDataError",
    "DetectorNotInitializedError",
    "CaptureStateError",
    "CaptureCancelledError",
]
