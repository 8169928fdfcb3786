"""Tests for throttled progress reporting."""

import pytest

from pdfit.utils.progress import ProgressTracker


class Recorder:
    def __init__(self):
        self.reports = []

    def __call__(self, percent, processed, total):
        self.reports.append((percent, processed, total))


class TestProgressTracker:
    """Tests for ProgressTracker."""

    def test_reports_every_five_percent(self):
        """100 items give exactly 20 reports, one per 5%."""
        recorder = Recorder()
        tracker = ProgressTracker(100, on_report=recorder)

        for _ in range(100):
            tracker.advance()

        assert [r[0] for r in recorder.reports] == list(range(5, 101, 5))

    def test_always_reports_final_item(self):
        """The last item is reported even below the step."""
        recorder = Recorder()
        tracker = ProgressTracker(3, step=50, on_report=recorder)

        for _ in range(3):
            tracker.advance()

        assert recorder.reports[-1] == (100, 3, 3)

    def test_single_item(self):
        recorder = Recorder()
        tracker = ProgressTracker(1, on_report=recorder)

        assert tracker.advance() is True
        assert recorder.reports == [(100, 1, 1)]

    def test_reports_are_monotonic_and_unique(self):
        """Reported percentages strictly increase."""
        recorder = Recorder()
        tracker = ProgressTracker(37, on_report=recorder)

        for _ in range(37):
            tracker.advance()

        percents = [r[0] for r in recorder.reports]
        assert percents == sorted(set(percents))
        processed = [r[1] for r in recorder.reports]
        assert processed == sorted(processed)

    def test_large_total_is_throttled(self):
        """Far fewer reports than items for large batches."""
        recorder = Recorder()
        tracker = ProgressTracker(1000, on_report=recorder)

        emitted = sum(tracker.advance() for _ in range(1000))

        assert emitted == len(recorder.reports) == 20

    def test_advance_past_total_raises(self):
        tracker = ProgressTracker(1, on_report=Recorder())
        tracker.advance()

        with pytest.raises(RuntimeError):
            tracker.advance()

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            ProgressTracker(-1)
        with pytest.raises(ValueError):
            ProgressTracker(10, step=0)

    def test_counters(self):
        tracker = ProgressTracker(20, on_report=Recorder())
        tracker.advance()
        tracker.advance()

        assert tracker.processed == 2
        assert tracker.last_reported == 10

    def test_callback_error_is_contained(self):
        def explode(percent, processed, total):
            raise ValueError("display broke")

        tracker = ProgressTracker(2, on_report=explode)

        assert tracker.advance() is True
        assert tracker.advance() is True
        assert tracker.processed == 2
        assert tracker.last_reported == 100
