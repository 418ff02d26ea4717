"""Tests for the high-level analyze() API and FacemetricSession."""

import pytest

from helpers import MockBackend, SplitSampler, make_face, make_image

from facemetric import CaptureSignal, FacemetricSession, NoUsableFaceDataError, analyze
from facemetric.config import CaptureConfig, EngineConfig
from facemetric.errors import CaptureCancelledError, DetectorNotInitializedError


def _frames(n):
    return [make_image() for _ in range(n)]


class TestFacemetricSession:
    def test_lifecycle(self):
        backend = MockBackend([make_face()])
        with FacemetricSession(backend, sampler=SplitSampler(100.0, 100.0)) as session:
            assert session.detector.is_initialized
        assert backend.initialized == 1
        assert backend.cleaned_up == 1

    def test_cleanup_on_error(self):
        backend = MockBackend([None])
        with pytest.raises(NoUsableFaceDataError):
            with FacemetricSession(backend, sampler=SplitSampler(100.0, 100.0)) as session:
                session.capture(_frames(3))
        assert backend.cleaned_up == 1

    def test_capture_without_enter_raises(self):
        session = FacemetricSession(MockBackend([make_face()]), sampler=SplitSampler(100.0, 100.0))
        with pytest.raises(DetectorNotInitializedError):
            session.capture(_frames(1))

    def test_capture_full(self):
        backend = MockBackend([make_face()])
        with FacemetricSession(backend, sampler=SplitSampler(100.0, 100.0)) as session:
            result = session.capture(_frames(15))
        assert result.frame_count == 10
        assert backend.calls == 10
        assert result.quality_gate.passed
        assert result.measurements["facialSymmetry"].confidence == 0.95
        assert not any("ended early" in w for w in result.warnings)

    def test_capture_skips_failed_frames(self):
        faces = [make_face(yaw=30.0), None, make_face(), make_face()]
        with FacemetricSession(MockBackend(faces), sampler=SplitSampler(100.0, 100.0)) as session:
            result = session.capture(_frames(4), target_frame_count=2)
        assert result.frame_count == 2

    def test_capture_ends_early(self):
        config = EngineConfig(capture=CaptureConfig(target_frame_count=5))
        with FacemetricSession(MockBackend([make_face()]), SplitSampler(100.0, 100.0), config) as session:
            result = session.capture(_frames(3))
        assert result.frame_count == 3
        assert result.measurements["canthalTilt"].confidence == 0.75
        assert "Capture ended early with 3/5 frames" in result.warnings

    def test_on_frame_can_stop(self):
        seen = []

        def on_frame(outcome):
            seen.append(outcome.frame_index)
            return len(seen) < 2

        with FacemetricSession(MockBackend([make_face()]), SplitSampler(100.0, 100.0)) as session:
            result = session.capture(_frames(10), on_frame=on_frame)
        assert seen == [0, 1]
        assert result.frame_count == 2

    def test_on_frame_stop_signal(self):
        with FacemetricSession(MockBackend([make_face()]), SplitSampler(100.0, 100.0)) as session:
            result = session.capture(_frames(10), on_frame=lambda outcome: CaptureSignal.STOP)
        assert result.frame_count == 1

    def test_on_frame_cancel_discards(self):
        backend = MockBackend([make_face()])

        def on_frame(outcome):
            return CaptureSignal.CANCEL if outcome.frame_index == 1 else None

        with FacemetricSession(backend, SplitSampler(100.0, 100.0)) as session:
            with pytest.raises(CaptureCancelledError) as exc_info:
                session.capture(_frames(10), on_frame=on_frame)
        assert exc_info.value.attempted_frames == 2
        assert backend.calls == 2
        assert backend.cleaned_up == 1

    def test_gate_summary_uses_mean_pose(self):
        faces = [make_face(pitch=4.0), make_face(pitch=8.0)]
        with FacemetricSession(MockBackend(faces), SplitSampler(100.0, 100.0)) as session:
            result = session.capture(_frames(2), target_frame_count=2)
        assert result.quality_gate.pose.pitch == pytest.approx(6.0)

    def test_analyze_single(self):
        faces = [None, make_face(yaw=12.0), make_face()]
        with FacemetricSession(MockBackend(faces), SplitSampler(100.0, 100.0)) as session:
            result = session.analyze_single(_frames(3))
        assert result.frame_count == 1
        assert result.quality_gate.pose.yaw == 0.0
        assert result.measurements["facialSymmetry"].uncertainty == 3.0

    def test_analyze_single_without_faces(self):
        with FacemetricSession(MockBackend([None]), SplitSampler(100.0, 100.0)) as session:
            with pytest.raises(NoUsableFaceDataError) as exc_info:
                session.analyze_single(_frames(4))
        assert exc_info.value.attempted_frames == 4


class TestAnalyze:
    def test_default_sampler(self):
        result = analyze(_frames(3), MockBackend([make_face()]), target_frame_count=3)
        # black frames sample as zero brightness on both halves
        assert result.quality_gate.lighting.passed
        assert result.frame_count == 3
        assert 0.0 < result.overall_confidence <= 1.0

    def test_single_frame_mode(self):
        result = analyze(_frames(2), MockBackend([make_face()]), single_frame=True)
        assert result.frame_count == 1

    def test_result_serializes(self):
        result = analyze(_frames(2), MockBackend([make_face()]), target_frame_count=2)
        data = result.to_dict()
        assert set(data["measurements"]) == set(result.measurements)
        assert data["quality_gate"]["passed"] is True

    def test_select_by_quality(self):
        frames = [make_image(value=v) for v in (0, 80, 90)]
        result = analyze(frames, MockBackend([make_face()]), target_frame_count=2, select_by_quality=True)
        assert result.frame_count == 2


class TestCaptureBurst:
    def test_keeps_best_frames(self):
        # solid frames: only brightness differs, so 80 and 100 rank highest
        frames = [make_image(value=v) for v in (0, 80, 10, 100)]
        faces = [make_face(pitch=p) for p in (1.0, 2.0, 3.0, 4.0)]
        with FacemetricSession(MockBackend(faces), SplitSampler(100.0, 100.0)) as session:
            result = session.capture_burst(frames, target_frame_count=2)
        assert result.frame_count == 2
        assert result.quality_gate.pose.pitch == pytest.approx(3.0)
        assert not any("ended early" in w for w in result.warnings)

    def test_low_detection_confidence_ranked_last(self):
        frames = [make_image(value=80) for _ in range(3)]
        faces = [
            make_face(pitch=9.0, confidence=0.5),
            make_face(pitch=2.0),
            make_face(pitch=4.0),
        ]
        with FacemetricSession(MockBackend(faces), SplitSampler(100.0, 100.0)) as session:
            result = session.capture_burst(frames, target_frame_count=2)
        assert result.quality_gate.pose.pitch == pytest.approx(3.0)

    def test_gate_failures_excluded(self):
        frames = [make_image(value=80) for _ in range(3)]
        faces = [make_face(yaw=30.0), None, make_face()]
        with FacemetricSession(MockBackend(faces), SplitSampler(100.0, 100.0)) as session:
            result = session.capture_burst(frames, target_frame_count=2)
        assert result.frame_count == 1
        assert "Capture ended early with 1/2 frames" in result.warnings

    def test_no_admissible_frames(self):
        with FacemetricSession(MockBackend([None]), SplitSampler(100.0, 100.0)) as session:
            with pytest.raises(NoUsableFaceDataError) as exc_info:
                session.capture_burst(_frames(3))
        assert exc_info.value.attempted_frames == 3
