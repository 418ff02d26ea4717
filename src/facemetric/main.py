"""High-level API for facemetric.

    >>> import facemetric as fm
    >>> result = fm.analyze(frames, backend)
    >>> for metric_id, m in result.measurements.items():
    ...     print(metric_id, m.display_value, m.confidence_percent)

All execution goes through a single path:
    fm.analyze() → FacemetricSession().capture() / .capture_burst() / .analyze_single()
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, List, Optional, Union

import numpy as np

from facemetric.capture.fusion import MultiFrameBuffer
from facemetric.capture.quality import analyze_image_quality, frame_quality_score, select_best_frames
from facemetric.capture.selector import select_best_frame
from facemetric.capture.sequence import CaptureSequence, CaptureSignal, FrameOutcome
from facemetric.config import EngineConfig
from facemetric.detection.backends.base import DetectedFace, FaceLandmarkBackend
from facemetric.detection.detector import FaceLandmarkDetector
from facemetric.detection.sampling import BrightnessSampler, ImageBrightnessSampler
from facemetric.errors import CaptureCancelledError, NoUsableFaceDataError
from facemetric.gate.evaluator import QualityGateEvaluator
from facemetric.gate.output import PoseValidation, QualityGateResult
from facemetric.landmarks import FrameSample, PoseAngles
from facemetric.measurement.engine import MeasurementEngine
from facemetric.measurement.metrics import METRICS
from facemetric.measurement.output import AnalysisResult

logger = logging.getLogger(__name__)

# Returns False/STOP to end early, CANCEL to discard; True/None/CONTINUE go on.
FrameCallback = Callable[[FrameOutcome], Union[bool, CaptureSignal, None]]


def _to_signal(reply: Union[bool, CaptureSignal, None]) -> CaptureSignal:
    if isinstance(reply, CaptureSignal):
        return reply
    return CaptureSignal.STOP if reply is False else CaptureSignal.CONTINUE


def _proxy_warning() -> str:
    names = [m.name for m in METRICS.values() if m.proxy]
    return f"{' and '.join(names)} are estimates with reduced confidence"


class FacemetricSession:
    """Owns a detector for the duration of one or more analyses.

    The detector is initialized on ``__enter__`` and released on
    ``__exit__``. Frames are processed strictly one at a time.

    Args:
        detector: A ``FaceLandmarkDetector`` or a raw backend to wrap.
        sampler: Brightness sampler (default: ImageBrightnessSampler()).
        config: Engine configuration (default: EngineConfig()).

    Example:
        >>> with FacemetricSession(backend) as session:
        ...     result = session.capture(frames)
    """

    def __init__(
        self,
        detector: Union[FaceLandmarkDetector, FaceLandmarkBackend],
        sampler: Optional[BrightnessSampler] = None,
        config: Optional[EngineConfig] = None,
    ):
        if not isinstance(detector, FaceLandmarkDetector):
            detector = FaceLandmarkDetector(detector)
        self.detector = detector
        self.sampler = sampler or ImageBrightnessSampler()
        self.config = config or EngineConfig()
        self.engine = MeasurementEngine(
            self.config.measurement,
            single_frame_uncertainty=self.config.capture.single_frame_uncertainty,
        )

    def __enter__(self) -> "FacemetricSession":
        self.detector.initialize()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.detector.cleanup()

    def capture(
        self,
        frames: Iterable[np.ndarray],
        target_frame_count: Optional[int] = None,
        on_frame: Optional[FrameCallback] = None,
    ) -> AnalysisResult:
        """Run a multi-frame capture over ``frames`` and measure the result.

        Frames are consumed until the target is reached or the iterable is
        exhausted. ``on_frame`` may end the capture early: returning False
        or ``CaptureSignal.STOP`` analyses whatever was accepted so far,
        while ``CaptureSignal.CANCEL`` discards it.

        Raises:
            NoUsableFaceDataError: If no frame was accepted.
            CaptureCancelledError: If ``on_frame`` cancelled the capture.
        """
        sequence = CaptureSequence(
            self.config.capture,
            gate=QualityGateEvaluator(self.config.gate),
        )
        sequence.start(target_frame_count)
        target = sequence.target_frame_count
        last_accepted: Optional[QualityGateResult] = None

        for image in frames:
            outcome = sequence.submit(image, self.detector, self.sampler)
            if outcome.accepted:
                last_accepted = outcome.gate
            signal = CaptureSignal.CONTINUE
            if on_frame is not None:
                signal = _to_signal(on_frame(outcome))
            if signal == CaptureSignal.CANCEL:
                attempted = sequence.attempted_frame_count
                sequence.cancel()
                raise CaptureCancelledError(attempted)
            if signal == CaptureSignal.STOP:
                logger.info("Capture stopped by callback at frame %d", outcome.frame_index)
                break
            if sequence.is_complete:
                break

        attempted = sequence.attempted_frame_count
        buffer = sequence.finish()
        return self._measure_buffer(buffer, last_accepted, target, attempted)

    def capture_burst(
        self,
        frames: Iterable[np.ndarray],
        target_frame_count: Optional[int] = None,
    ) -> AnalysisResult:
        """Record a whole burst, then fuse the best frames by image quality.

        Every frame is detected and gated. Admissible frames are ranked by
        ``frame_quality_score`` and the top ``target_frame_count`` are
        fused in their original order.

        Raises:
            NoUsableFaceDataError: If no frame was admissible.
        """
        capture_cfg = self.config.capture
        target = target_frame_count or capture_cfg.target_frame_count
        gate = QualityGateEvaluator(self.config.gate)
        gate.initialize()

        samples: List[FrameSample] = []
        gates: List[QualityGateResult] = []
        scores: List[float] = []
        attempted = 0
        try:
            for frame_index, image in enumerate(frames):
                attempted += 1
                face = self.detector.detect(image)
                result = gate.evaluate_frame(image, face, self.sampler)
                if face is None or (capture_cfg.require_gate_pass and not result.passed):
                    continue
                quality = analyze_image_quality(image)
                h, w = image.shape[:2]
                samples.append(FrameSample(
                    landmarks=face.to_landmark_set(),
                    pose=face.pose,
                    bbox=face.box,
                    image_size=(w, h),
                    frame_index=frame_index,
                ))
                gates.append(result)
                scores.append(frame_quality_score(
                    quality,
                    face_confidence=face.confidence,
                    pose_angle=face.pose.max_abs,
                    min_face_confidence=capture_cfg.min_face_confidence,
                ))
        finally:
            gate.cleanup()

        if not samples:
            raise NoUsableFaceDataError("capture", attempted_frames=attempted)

        chosen = select_best_frames(scores, target)
        buffer = MultiFrameBuffer(target)
        for index in chosen:
            buffer.append(samples[index])
        logger.info(
            "Burst: %d admissible of %d frames, kept %s",
            len(samples), attempted, [samples[i].frame_index for i in chosen],
        )
        return self._measure_buffer(buffer, gates[chosen[-1]], target, attempted)

    def analyze_single(self, frames: Iterable[np.ndarray]) -> AnalysisResult:
        """Pick the best of independent single-shot frames and measure it.

        Frames without a face are skipped; the gate is evaluated on the
        chosen frame for reporting only.

        Raises:
            NoUsableFaceDataError: If no frame contains a face.
        """
        candidates: List[DetectedFace] = []
        images: List[np.ndarray] = []
        attempted = 0
        for image in frames:
            attempted += 1
            face = self.detector.detect(image)
            if face is not None:
                candidates.append(face)
                images.append(image)

        if not candidates:
            raise NoUsableFaceDataError("selection", attempted_frames=attempted)

        best = select_best_frame(candidates)
        image = images[candidates.index(best)]
        gate = QualityGateEvaluator(self.config.gate).evaluate_frame(image, best, self.sampler)

        landmarks = best.to_landmark_set()
        start = time.monotonic()
        measurements = self.engine.measure_frame(landmarks, best.box)
        elapsed = time.monotonic() - start

        warnings = [_proxy_warning(), "Single-frame analysis; uncertainty is a fixed estimate"]
        if not gate.passed:
            warnings.append(f"Selected frame did not pass the quality gate: {gate.primary_message}")

        return AnalysisResult(
            landmarks=landmarks,
            measurements=measurements,
            quality_gate=gate,
            frame_count=1,
            processing_time_sec=elapsed,
            warnings=warnings,
        )

    def _measure_buffer(
        self,
        buffer: MultiFrameBuffer,
        last_accepted: Optional[QualityGateResult],
        target: int,
        attempted: int,
    ) -> AnalysisResult:
        start = time.monotonic()
        measurements = self.engine.measure(buffer)
        elapsed = time.monotonic() - start

        gate = self._summarize_gate(last_accepted, buffer.mean_pose())
        warnings = [_proxy_warning()]
        if buffer.frame_count < target:
            warnings.append(f"Capture ended early with {buffer.frame_count}/{target} frames")

        logger.info(
            "Capture analysed: %d/%d frames accepted from %d attempts",
            buffer.frame_count, target, attempted,
        )
        return AnalysisResult(
            landmarks=buffer.fused_landmarks(),
            measurements=measurements,
            quality_gate=gate,
            frame_count=buffer.frame_count,
            processing_time_sec=elapsed,
            warnings=warnings,
        )

    def _summarize_gate(
        self,
        last_accepted: Optional[QualityGateResult],
        mean_pose: PoseAngles,
    ) -> QualityGateResult:
        """Gate summary for the capture: last accepted frame, pose averaged."""
        if last_accepted is None or not last_accepted.face_detected:
            return QualityGateResult.no_face_detected(self.config.gate)
        pose = PoseValidation.evaluate(
            mean_pose.pitch, mean_pose.yaw, mean_pose.roll, self.config.gate.max_pose_angle
        )
        return QualityGateResult.from_validations(
            face_size=last_accepted.face_size,
            pose=pose,
            lighting=last_accepted.lighting,
        )


def analyze(
    frames: Iterable[np.ndarray],
    detector: Union[FaceLandmarkDetector, FaceLandmarkBackend],
    sampler: Optional[BrightnessSampler] = None,
    config: Optional[EngineConfig] = None,
    single_frame: bool = False,
    target_frame_count: Optional[int] = None,
    select_by_quality: bool = False,
) -> AnalysisResult:
    """Analyse a burst of frames with a fresh session.

    Args:
        frames: Decoded images (numpy arrays, BGR or grayscale).
        detector: Face landmark detector or backend.
        sampler: Brightness sampler (default: ImageBrightnessSampler()).
        config: Engine configuration (default: EngineConfig()).
        single_frame: Select the single best frame instead of fusing.
        target_frame_count: Override ``config.capture.target_frame_count``.
        select_by_quality: Consume every frame and fuse the best by image
            quality instead of the first accepted.

    Returns:
        AnalysisResult with measurements and the capture's gate summary.

    Raises:
        NoUsableFaceDataError: If no usable face was found.
    """
    with FacemetricSession(detector, sampler=sampler, config=config) as session:
        if single_frame:
            return session.analyze_single(frames)
        if select_by_quality:
            return session.capture_burst(frames, target_frame_count=target_frame_count)
        return session.capture(frames, target_frame_count=target_frame_count)


__all__ = ["FacemetricSession", "analyze"]
