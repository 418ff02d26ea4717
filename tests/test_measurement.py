"""Tests for metric derivations and the measurement engine."""

import math
from datetime import datetime

import pytest

from helpers import make_face

from facemetric.capture import MultiFrameBuffer
from facemetric.config import MeasurementConfig
from facemetric.errors import NoUsableFaceDataError
from facemetric.geometry import BoundingBox, Point
from facemetric.landmarks import FrameSample, LandmarkSet
from facemetric.measurement import (
    DERIVATIONS,
    METRICS,
    AnalysisResult,
    FacialMeasurement,
    MeasurementEngine,
    MetricId,
    canthal_tilt,
    cheekbone_prominence,
    facial_symmetry,
    get_metric,
    jaw_definition,
    proportional_harmony,
)
from facemetric.gate import QualityGateResult


def _landmarks(**kw):
    return make_face(**kw).to_landmark_set()


def _buffer(faces, target=10):
    buffer = MultiFrameBuffer(target)
    for face in faces:
        buffer.append(FrameSample(face.to_landmark_set(), pose=face.pose, bbox=face.box))
    return buffer


class TestFacialSymmetry:
    def test_level_eyes(self):
        assert facial_symmetry(_landmarks()) == pytest.approx(100.0)

    def test_vertical_offset(self):
        lm = _landmarks(right_eye=(370.0, 210.0))
        vertical = 1 - 10 / math.hypot(100, 10)
        assert facial_symmetry(lm) == pytest.approx((1 + vertical) / 2 * 100, abs=1e-6)

    def test_mouth_group_not_scored(self):
        lm = _landmarks()
        assert len(lm.mouth) >= 3
        without_mouth = LandmarkSet.from_groups({"left_eye": lm.left_eye, "right_eye": lm.right_eye})
        assert facial_symmetry(lm) == facial_symmetry(without_mouth) == pytest.approx(100.0)

    def test_mouth_alone_is_default(self):
        lm = LandmarkSet.from_groups({"mouth": [Point(0, 0), Point(5, 2), Point(10, 0)]})
        assert facial_symmetry(lm) == 75.0

    def test_missing_eyes_default(self):
        assert facial_symmetry(LandmarkSet.empty()) == 75.0

    def test_coincident_eyes(self):
        lm = LandmarkSet.from_groups({"left_eye": [Point(5, 5)], "right_eye": [Point(5, 5)]})
        assert facial_symmetry(lm) == 100.0


class TestProportionalHarmony:
    def test_golden_ratio_is_zero(self):
        assert proportional_harmony(_landmarks()) == pytest.approx(0.0, abs=1e-6)

    def test_clamped(self):
        assert proportional_harmony(_landmarks(face_rx=10.0, face_ry=500.0)) == 15.0
        assert proportional_harmony(_landmarks(face_rx=500.0, face_ry=10.0)) == -15.0

    def test_bbox_fallback(self):
        lm = _landmarks(contour_points=0)
        box = BoundingBox(0, 0, 100, 200)
        assert proportional_harmony(lm, box) == pytest.approx((2.0 - 1.618) * 10)

    def test_no_geometry(self):
        assert proportional_harmony(LandmarkSet.empty()) == 0.0

    def test_zero_width(self):
        lm = LandmarkSet.from_groups({"face_contour": [Point(5, 0), Point(5, 100)]})
        assert proportional_harmony(lm) == 0.0


class TestCanthalTilt:
    def test_level(self):
        assert canthal_tilt(_landmarks()) == pytest.approx(0.0, abs=1e-6)

    def test_angle(self):
        lm = _landmarks(right_eye=(370.0, 210.0))
        assert canthal_tilt(lm) == pytest.approx(math.degrees(math.atan(0.1)), abs=1e-6)

    def test_clamped(self):
        assert canthal_tilt(_landmarks(right_eye=(370.0, 300.0))) == 15.0
        assert canthal_tilt(_landmarks(right_eye=(370.0, 100.0))) == -10.0

    def test_vertical_eyes(self):
        lm = LandmarkSet.from_groups({"left_eye": [Point(5, 0)], "right_eye": [Point(5, 10)]})
        assert canthal_tilt(lm) == 0.0

    def test_missing(self):
        assert canthal_tilt(LandmarkSet.empty()) == 0.0


class TestProxies:
    def test_jaw_full_contour(self):
        assert jaw_definition(_landmarks(contour_points=36)) == pytest.approx(90.0)

    def test_jaw_partial_contour(self):
        assert jaw_definition(_landmarks(contour_points=12)) == pytest.approx(50 + 12 / 36 * 40)

    def test_jaw_sparse_contour(self):
        assert jaw_definition(_landmarks(contour_points=5)) == 60.0

    def test_jaw_capped(self):
        assert jaw_definition(_landmarks(contour_points=72)) == pytest.approx(90.0)

    def test_cheekbone(self):
        assert cheekbone_prominence(_landmarks()) == pytest.approx(200 / 323.6 * 80, abs=1e-6)

    def test_cheekbone_clamped(self):
        assert cheekbone_prominence(_landmarks(face_rx=300.0, face_ry=100.0)) == 90.0
        assert cheekbone_prominence(_landmarks(face_rx=50.0, face_ry=200.0)) == 40.0

    def test_cheekbone_missing(self):
        assert cheekbone_prominence(LandmarkSet.empty()) == 60.0


class TestRegistry:
    def test_every_metric_has_derivation(self):
        assert set(DERIVATIONS) == set(METRICS)

    def test_get_metric(self):
        assert get_metric("canthalTilt").unit == "°"
        assert get_metric("unknown") is None

    def test_harmony_prefers_zero(self):
        assert not get_metric("proportionalHarmony").higher_is_better
        assert get_metric("facialSymmetry").higher_is_better

    def test_proxies(self):
        proxies = {m.id for m in METRICS.values() if m.proxy}
        assert proxies == {MetricId.JAW_DEFINITION, MetricId.CHEEKBONE_PROMINENCE}


class TestMeasurementEngine:
    def test_identical_frames(self):
        measurements = MeasurementEngine().measure(_buffer([make_face()] * 10))
        assert set(measurements) == {m.value for m in MetricId}

        symmetry = measurements["facialSymmetry"]
        assert symmetry.value == pytest.approx(100.0)
        assert symmetry.uncertainty == pytest.approx(0.0, abs=1e-9)
        assert symmetry.confidence == 0.95

        jaw = measurements["jawDefinition"]
        assert jaw.uncertainty == 5.0
        assert jaw.confidence == pytest.approx(0.95 * 0.8)

    def test_uncertainty_from_spread(self):
        faces = [make_face(), make_face(right_eye=(370.0, 210.0))]
        measurements = MeasurementEngine().measure(_buffer(faces))
        tilt = measurements["canthalTilt"]
        expected = math.degrees(math.atan(0.1)) / math.sqrt(2)
        assert tilt.uncertainty == pytest.approx(expected, rel=1e-3)
        assert tilt.confidence == 0.60

    def test_values_within_ranges(self):
        faces = [
            make_face(right_eye=(370.0, 300.0), face_rx=20.0, face_ry=400.0, contour_points=8),
            make_face(right_eye=(370.0, 90.0), face_rx=400.0, face_ry=20.0),
        ]
        for metric_id, m in MeasurementEngine().measure(_buffer(faces)).items():
            cfg = get_metric(metric_id)
            assert cfg.min_value <= m.value <= cfg.max_value
            assert 0.0 <= m.confidence <= 1.0
            assert m.uncertainty >= 0.0

    def test_single_frame(self):
        face = make_face()
        measurements = MeasurementEngine().measure_frame(face.to_landmark_set(), face.box)
        assert measurements["facialSymmetry"].uncertainty == 3.0
        assert measurements["facialSymmetry"].confidence == 0.60
        assert measurements["cheekboneProminence"].uncertainty == 5.0

    def test_proxy_multiplier_config(self):
        engine = MeasurementEngine(MeasurementConfig(proxy_confidence_multiplier=0.7))
        measurements = engine.measure(_buffer([make_face()] * 5))
        assert measurements["cheekboneProminence"].confidence == pytest.approx(0.85 * 0.7)

    def test_empty_buffer_raises(self):
        with pytest.raises(NoUsableFaceDataError):
            MeasurementEngine().measure(MultiFrameBuffer())

    def test_shared_timestamp(self):
        measurements = MeasurementEngine().measure(_buffer([make_face()]))
        stamps = {m.measured_at for m in measurements.values()}
        assert len(stamps) == 1


class TestFacialMeasurement:
    def test_display(self):
        m = FacialMeasurement("facialSymmetry", 63.24, 1.46, 0.853)
        assert m.display_value == "63.2 ± 1.5"
        assert m.confidence_percent == "85%"

    def test_dict_round_trip(self):
        m = FacialMeasurement("canthalTilt", 4.2, 0.8, 0.9, datetime(2024, 5, 1, 12, 0))
        assert FacialMeasurement.from_dict(m.to_dict()) == m


class TestAnalysisResult:
    def test_aggregates(self):
        result = AnalysisResult(
            landmarks=LandmarkSet.empty(),
            measurements={
                "a": FacialMeasurement("a", 1.0, 2.0, 0.9),
                "b": FacialMeasurement("b", 1.0, 4.0, 0.7),
            },
            quality_gate=QualityGateResult.no_face_detected(),
            frame_count=3,
        )
        assert result.overall_confidence == pytest.approx(0.8)
        assert result.average_uncertainty == pytest.approx(3.0)
        assert result.to_dict()["frame_count"] == 3

    def test_empty(self):
        result = AnalysisResult(
            landmarks=LandmarkSet.empty(),
            measurements={},
            quality_gate=QualityGateResult.no_face_detected(),
            frame_count=0,
        )
        assert result.overall_confidence == 0.0
        assert result.average_uncertainty == 0.0
