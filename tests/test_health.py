"""Tests for switchyard.execution.health module."""

from __future__ import annotations

import sys

import pytest

from switchyard.execution.health import (
    HealthLevelTracker,
    health_rank,
    least_healthy_level,
)
from tests.helpers import RecordingLogger


class TestHealthRank:
    """Tests for status ranking."""

    @pytest.mark.parametrize(
        ("status", "rank"),
        [
            ("green", 0),
            ("yellow", 1),
            ("yellow-3", 3),
            ("YELLOW-2", 2),
            ("red", sys.maxsize),
            (5, 5),
        ],
    )
    def test_recognized(self, status, rank):
        assert health_rank(status) == rank

    @pytest.mark.parametrize("status", ["n/a", "yellow-x", None, True, 1.5, object()])
    def test_unrecognized(self, status):
        assert health_rank(status) is None


class TestLeastHealthyLevel:
    """Tests for reducing stats to one level."""

    def test_worst_wins(self):
        stats = {"a": "green", "b": "yellow-2", "c": "yellow"}
        assert least_healthy_level(stats) == "yellow-2"

    def test_red_beats_yellow(self):
        assert least_healthy_level({"a": "yellow-50", "b": "red"}) == "red"

    def test_unranked_ignored(self):
        assert least_healthy_level({"a": "n/a", "b": "green"}) == "green"

    def test_nothing_ranked(self):
        assert least_healthy_level({"a": "n/a"}) is None
        assert least_healthy_level({}) is None


class TestHealthLevelTracker:
    """Tests for change detection."""

    def test_baseline_from_initial_stats(self):
        calls = []
        tracker = HealthLevelTracker(calls.append, RecordingLogger(), {"a": "green"})

        assert tracker.level == "green"
        assert tracker.observe({"a": "green"}) is False
        assert calls == []

    def test_change_notifies(self):
        calls = []
        logger = RecordingLogger()
        tracker = HealthLevelTracker(calls.append, logger, {"a": "green"})

        assert tracker.observe({"a": "red"}) is True
        assert calls == ["red"]
        assert tracker.level == "red"
        assert "dispatcher.health_level_changed" in logger.events("info")

    def test_first_reading_without_baseline_notifies(self):
        calls = []
        tracker = HealthLevelTracker(calls.append, RecordingLogger())

        assert tracker.observe({"a": "yellow"}) is True
        assert calls == ["yellow"]

    def test_same_rank_is_not_a_change(self):
        """"yellow" and "yellow-1" are the same level."""
        calls = []
        tracker = HealthLevelTracker(calls.append, RecordingLogger(), {"a": "yellow"})
        assert tracker.observe({"a": "yellow-1"}) is False
        assert calls == []

    def test_unranked_reading_ignored(self):
        calls = []
        tracker = HealthLevelTracker(calls.append, RecordingLogger(), {"a": "green"})
        assert tracker.observe({"a": "n/a"}) is False
        assert tracker.level == "green"

    def test_hook_failure_logged(self):
        def hook(level):
            raise RuntimeError("broken")

        logger = RecordingLogger()
        tracker = HealthLevelTracker(hook, logger, {"a": "green"})

        assert tracker.observe({"a": "red"}) is True
        assert "dispatcher.health_change_hook_failed" in logger.events("warning")
        assert tracker.level == "red"
