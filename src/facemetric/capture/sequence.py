"""Capture sequence control.

Frames are submitted one at a time. The sequence completes when the
number of accepted frames reaches the target, and can be cancelled
between any two frames, which discards the buffer.

Example:
    >>> seq = CaptureSequence(CaptureConfig(target_frame_count=5))
    >>> seq.start()
    >>> for image in frames:
    ...     seq.submit(image, detector, sampler)
    ...     if seq.is_complete:
    ...         break
    >>> buffer = seq.finish()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from facemetric.capture.fusion import MultiFrameBuffer
from facemetric.config import CaptureConfig, GateConfig
from facemetric.detection.detector import FaceLandmarkDetector
from facemetric.detection.sampling import BrightnessSampler
from facemetric.errors import CaptureStateError, NoUsableFaceDataError
from facemetric.gate.evaluator import QualityGateEvaluator
from facemetric.gate.output import QualityGateResult
from facemetric.landmarks import FrameSample

logger = logging.getLogger(__name__)


class CaptureState(str, Enum):
    IDLE = "IDLE"
    CAPTURING = "CAPTURING"
    COMPLETE = "COMPLETE"
    CANCELLED = "CANCELLED"


class CaptureSignal(str, Enum):
    """What a per-frame callback asks the capture loop to do next.

    STOP ends the capture and analyses the frames accepted so far;
    CANCEL discards them.
    """

    CONTINUE = "CONTINUE"
    STOP = "STOP"
    CANCEL = "CANCEL"


@dataclass(frozen=True)
class FrameOutcome:
    """Result of submitting one frame."""

    gate: QualityGateResult
    accepted: bool
    frame_index: int


class CaptureSequence:
    """Collects accepted frames into a bounded ``MultiFrameBuffer``."""

    def __init__(
        self,
        config: Optional[CaptureConfig] = None,
        gate: Optional[QualityGateEvaluator] = None,
        gate_config: Optional[GateConfig] = None,
    ):
        self.config = config or CaptureConfig()
        self._gate = gate or QualityGateEvaluator(gate_config)
        self._state = CaptureState.IDLE
        self._buffer = MultiFrameBuffer(self.config.target_frame_count)
        self._attempted = 0
        self._last_gate: Optional[QualityGateResult] = None

    @property
    def state(self) -> CaptureState:
        return self._state

    @property
    def target_frame_count(self) -> int:
        return self._buffer.target_frame_count

    @property
    def captured_frame_count(self) -> int:
        return self._buffer.frame_count

    @property
    def attempted_frame_count(self) -> int:
        return self._attempted

    @property
    def is_capturing(self) -> bool:
        return self._state == CaptureState.CAPTURING

    @property
    def is_complete(self) -> bool:
        return self._state == CaptureState.COMPLETE

    @property
    def progress(self) -> float:
        """Accepted frames as a fraction of the target (0.0 to 1.0)."""
        return self.captured_frame_count / self.target_frame_count

    @property
    def last_gate(self) -> Optional[QualityGateResult]:
        return self._last_gate

    @property
    def feedback_message(self) -> str:
        if self._state == CaptureState.CAPTURING:
            if self._last_gate is not None and not self._last_gate.passed:
                return self._last_gate.primary_message
            return f"Hold still... {self.captured_frame_count}/{self.target_frame_count}"
        if self._state == CaptureState.COMPLETE:
            return "Capture complete"
        return "Ready to capture"

    def start(self, target_frame_count: Optional[int] = None) -> None:
        """Begin a new sequence, discarding any previous buffer."""
        target = target_frame_count or self.config.target_frame_count
        self._buffer = MultiFrameBuffer(target)
        self._attempted = 0
        self._last_gate = None
        self._gate.initialize()
        self._state = CaptureState.CAPTURING
        logger.info("Capture started (target=%d frames)", target)

    def add_frame(self, sample: FrameSample) -> bool:
        """Append an already-accepted sample. Returns True if it was kept."""
        if self._state != CaptureState.CAPTURING:
            raise CaptureStateError(f"Cannot add frames in state {self._state.value}")
        kept = self._buffer.append(sample)
        if self._buffer.is_full:
            self._state = CaptureState.COMPLETE
            logger.info("Capture complete (%d frames)", self._buffer.frame_count)
        return kept

    def submit(
        self,
        image: np.ndarray,
        detector: FaceLandmarkDetector,
        sampler: BrightnessSampler,
    ) -> FrameOutcome:
        """Detect, gate and (if admissible) accept one frame.

        Detector errors propagate unchanged; nothing is retried here.
        """
        if self._state != CaptureState.CAPTURING:
            raise CaptureStateError(f"Cannot submit frames in state {self._state.value}")

        frame_index = self._attempted
        self._attempted += 1

        face = detector.detect(image)
        gate = self._gate.evaluate_frame(image, face, sampler)
        self._last_gate = gate

        accepted = face is not None and (gate.passed or not self.config.require_gate_pass)
        if accepted:
            h, w = image.shape[:2]
            self.add_frame(FrameSample(
                landmarks=face.to_landmark_set(),
                pose=face.pose,
                bbox=face.box,
                image_size=(w, h),
                frame_index=frame_index,
            ))
        else:
            logger.debug("Frame %d rejected: %s", frame_index, gate.primary_message)

        return FrameOutcome(gate=gate, accepted=accepted, frame_index=frame_index)

    def cancel(self) -> None:
        """Abort the sequence and discard every collected frame."""
        if self._state == CaptureState.CAPTURING:
            logger.info("Capture cancelled after %d frames", self._attempted)
            self._gate.cleanup()
        self._buffer = MultiFrameBuffer(self._buffer.target_frame_count)
        self._attempted = 0
        self._last_gate = None
        self._state = CaptureState.CANCELLED

    def finish(self) -> MultiFrameBuffer:
        """End the sequence and hand over the buffer.

        Raises:
            CaptureStateError: If the sequence was never started or was cancelled.
            NoUsableFaceDataError: If no frame was accepted.
        """
        if self._state not in (CaptureState.CAPTURING, CaptureState.COMPLETE):
            raise CaptureStateError(f"Cannot finish capture in state {self._state.value}")
        buffer = self._buffer
        attempted = self._attempted
        self._buffer = MultiFrameBuffer(buffer.target_frame_count)
        self._state = CaptureState.IDLE
        self._gate.cleanup()
        if buffer.frame_count == 0:
            raise NoUsableFaceDataError("capture", attempted_frames=attempted)
        return buffer


__all__ = ["CaptureState", "CaptureSignal", "FrameOutcome", "CaptureSequence"]
