"""Tests for confidence levels and progress readiness."""

from datetime import datetime, timedelta

import pytest

from facemetric.baseline import (
    ConfidenceLevel,
    confidence_level,
    days_until_confident_progress,
    history_readiness,
    overall_confidence,
)
from facemetric.measurement import FacialMeasurement

START = datetime(2024, 1, 1, 9, 0)


class TestConfidenceLevel:
    @pytest.mark.parametrize("variance,expected", [
        (0.0, ConfidenceLevel.HIGH),
        (1.0, ConfidenceLevel.HIGH),
        (4.0, ConfidenceLevel.MEDIUM),
        (6.0, ConfidenceLevel.LOW),
        (12.0, ConfidenceLevel.LOW),
    ])
    def test_thirds(self, variance, expected):
        assert confidence_level(variance, 0.0, 9.0) == expected

    def test_degenerate_range(self):
        assert confidence_level(2.0, 2.0, 2.0) == ConfidenceLevel.HIGH
        assert confidence_level(2.5, 2.0, 2.0) == ConfidenceLevel.LOW

    def test_display(self):
        assert ConfidenceLevel.HIGH.label == "High"
        assert ConfidenceLevel.MEDIUM.description == "Some variance expected"
        assert ConfidenceLevel.LOW.description == "High uncertainty"


class TestOverallConfidence:
    def test_weighted(self):
        score = overall_confidence({"photo_quality": 1.0, "consistency": 0.5})
        assert score == pytest.approx((0.3 + 0.125) / 0.55)

    def test_unknown_factors_ignored(self):
        assert overall_confidence({"photo_quality": 0.8, "mood": 0.0}) == pytest.approx(0.8)

    def test_no_factors(self):
        assert overall_confidence({}) == 0.5


class TestDaysUntilConfidentProgress:
    def test_partway(self):
        progress = days_until_confident_progress(START, current_samples=3, now=START + timedelta(days=7))
        assert progress.days_remaining == 7
        assert progress.samples_needed == 4
        assert progress.progress == pytest.approx((0.5 + 3 / 7) / 2)
        assert not progress.is_ready

    def test_ready(self):
        progress = days_until_confident_progress(START, current_samples=7, now=START + timedelta(days=19))
        assert progress.is_ready
        assert progress.progress == 1.0
        assert progress.to_dict()["ready"] is True

    def test_partial_day_not_counted(self):
        progress = days_until_confident_progress(START, now=START + timedelta(days=13, hours=23))
        assert progress.days_remaining == 1

    def test_start_in_future(self):
        progress = days_until_confident_progress(START, now=START - timedelta(days=2))
        assert progress.days_remaining == 16
        assert progress.progress == 0.0

    def test_invalid_minimums(self):
        with pytest.raises(ValueError):
            days_until_confident_progress(START, min_days=0)


class TestHistoryReadiness:
    def test_uses_earliest_timestamp(self):
        history = [
            {"facialSymmetry": FacialMeasurement("facialSymmetry", 80, 1.0, 0.9, START + timedelta(days=3))},
            {"canthalTilt": FacialMeasurement("canthalTilt", 4, 0.5, 0.9, START)},
        ]
        progress = history_readiness(history, now=START + timedelta(days=10))
        assert progress.days_remaining == 4
        assert progress.samples_needed == 5

    def test_empty_history(self):
        progress = history_readiness([], now=START)
        assert progress.days_remaining == 14
        assert progress.samples_needed == 7
        assert progress.progress == 0.0
