"""Tests for image quality scoring and burst frame selection."""

import numpy as np
import pytest

from helpers import make_image

from facemetric.capture import (
    FeedbackLevel,
    ImageQuality,
    analyze_image_quality,
    frame_quality_score,
    quality_feedback,
    select_best_frames,
)
from facemetric.capture.quality import brightness_score, contrast_score, sharpness_score


def _checkerboard(low, high, size=32, channels=None):
    board = np.full((size, size), low, dtype=np.uint8)
    board[0::2, 1::2] = high
    board[1::2, 0::2] = high
    if channels:
        board = np.repeat(board[:, :, None], channels, axis=2)
    return board


class TestComponentScores:
    @pytest.mark.parametrize("luminance,expected", [
        (0, 0.0), (20, 25.0), (40, 70.0), (80, 85.0), (120, 100.0), (255, 50.0),
    ])
    def test_brightness(self, luminance, expected):
        assert brightness_score(luminance) == pytest.approx(expected)

    @pytest.mark.parametrize("std,expected", [
        (10, 20.0), (20, 60.0), (50, 80.0), (80, 100.0), (90, 90.0), (200, 50.0),
    ])
    def test_contrast(self, std, expected):
        assert contrast_score(std) == pytest.approx(expected)

    def test_sharpness_capped(self):
        assert sharpness_score(10) == 20.0
        assert sharpness_score(80) == 100.0


class TestAnalyzeImageQuality:
    def test_flat_image(self):
        quality = analyze_image_quality(make_image(value=80))
        assert quality.brightness == pytest.approx(85.0)
        assert quality.contrast == 0.0
        assert quality.sharpness == 0.0
        assert quality.overall == pytest.approx(25.5)
        assert quality.label == "Poor"
        assert not quality.is_acceptable

    def test_well_exposed_detail(self):
        quality = analyze_image_quality(_checkerboard(40, 140, channels=3))
        assert quality.brightness == pytest.approx(88.75)
        assert quality.contrast == pytest.approx(80.0)
        assert quality.sharpness == 100.0
        assert quality.label == "Excellent"

    def test_grayscale_input(self):
        gray = analyze_image_quality(_checkerboard(40, 140))
        bgr = analyze_image_quality(_checkerboard(40, 140, channels=3))
        assert gray == bgr

    def test_tiny_image_neutral_sharpness(self):
        quality = analyze_image_quality(make_image(width=2, height=2, value=80))
        assert quality.sharpness == 50.0

    def test_empty_image(self):
        assert analyze_image_quality(np.zeros((0, 0, 3), dtype=np.uint8)) == ImageQuality.empty()

    def test_to_dict(self):
        data = analyze_image_quality(make_image(value=80)).to_dict()
        assert data["label"] == "Poor"
        assert data["acceptable"] is False


class TestQualityFeedback:
    def test_blurry_and_flat(self):
        messages = [f.message for f in quality_feedback(analyze_image_quality(make_image(value=80)))]
        assert messages == [
            "Low contrast. Ensure even lighting.",
            "Image is blurry. Hold camera steady.",
        ]

    def test_too_dark(self):
        feedback = quality_feedback(ImageQuality.from_components(20.0, 70.0, 80.0))
        assert [f.message for f in feedback] == ["Image is too dark. Try better lighting."]
        assert feedback[0].level == FeedbackLevel.WARNING

    def test_overexposed(self):
        feedback = quality_feedback(analyze_image_quality(_checkerboard(0, 255)))
        assert [f.message for f in feedback] == ["Image is overexposed. Reduce lighting."]

    def test_good(self):
        feedback = quality_feedback(analyze_image_quality(_checkerboard(40, 140)))
        assert len(feedback) == 1
        assert feedback[0].level == FeedbackLevel.SUCCESS


class TestFrameQualityScore:
    QUALITY = ImageQuality.from_components(80.0, 60.0, 100.0)

    def test_frontal(self):
        assert frame_quality_score(self.QUALITY) == pytest.approx(85.0)

    def test_mild_pose_scales_down(self):
        assert frame_quality_score(self.QUALITY, pose_angle=9.0) == pytest.approx(68.0)

    def test_strong_pose_drops_confidence_bonus(self):
        score = frame_quality_score(self.QUALITY, face_confidence=0.9, pose_angle=-30.0)
        assert score == pytest.approx(58.0 * (2 / 3) * 0.9)

    def test_unreliable_detection(self):
        assert frame_quality_score(self.QUALITY, face_confidence=0.6) == 0.0

    def test_never_negative(self):
        assert frame_quality_score(self.QUALITY, pose_angle=100.0) == 0.0


class TestSelectBestFrames:
    def test_top_n_in_order(self):
        assert select_best_frames([5, 9, 1, 9, 7], target_count=3) == [1, 3, 4]

    def test_ties_keep_earlier(self):
        assert select_best_frames([5, 5, 5], target_count=2) == [0, 1]

    def test_fewer_than_target(self):
        assert select_best_frames([1.0, 2.0], target_count=5) == [0, 1]

    def test_invalid_target(self):
        with pytest.raises(ValueError):
            select_best_frames([1.0], target_count=0)
