"""Tests for result aggregation."""

from pathlib import Path
from unittest.mock import MagicMock

from pdfit.core.models import ConversionJob, ConversionResult
from pdfit.utils.stats import RunStatistics, aggregate


def _job(name):
    return ConversionJob(Path("in") / name, Path("out") / (Path(name).stem + ".pdf"))


def _results(converted=0, skipped=0, failed=0):
    results = []
    results += [ConversionResult.converted(_job(f"c{i}.doc")) for i in range(converted)]
    results += [ConversionResult.skipped_result(_job(f"s{i}.doc")) for i in range(skipped)]
    results += [ConversionResult.failed(_job(f"f{i}.doc"), f"error {i}") for i in range(failed)]
    return results


class TestAggregate:
    """Tests for aggregate()."""

    def test_counts_are_conserved(self):
        """Every result lands in exactly one bucket."""
        stats = aggregate(_results(converted=3, skipped=2, failed=4), elapsed=2.0)

        assert stats.success_count == 3
        assert stats.skipped_count == 2
        assert stats.failure_count == 4
        assert stats.total == 9
        assert len(stats.failures) == 4

    def test_throughput(self):
        stats = aggregate(_results(converted=10), elapsed=4.0)

        assert stats.throughput == 2.5
        assert stats.average_seconds == 0.4

    def test_zero_elapsed_has_zero_throughput(self):
        """No division by zero for instant runs."""
        stats = aggregate(_results(skipped=5), elapsed=0.0)

        assert stats.throughput == 0.0

    def test_negative_elapsed_clamped(self):
        assert aggregate([], elapsed=-1.0).elapsed == 0.0

    def test_empty(self):
        stats = aggregate([], elapsed=1.0)

        assert stats.total == 0
        assert stats.average_seconds == 0.0
        assert stats.success_rate == 0.0

    def test_success_rate_counts_skipped(self):
        stats = aggregate(_results(converted=1, skipped=2, failed=1), elapsed=1.0)

        assert stats.success_rate == 75.0


class TestFailurePreview:
    """Tests for the bounded failure list."""

    def test_at_most_ten_plus_remainder(self):
        """15 failures show 10 entries and '... and 5 more'."""
        stats = aggregate(_results(failed=15), elapsed=1.0)

        lines = list(stats.failure_preview())

        assert len(lines) == 11
        assert lines[0] == "f0.doc: error 0"
        assert lines[-1] == "... and 5 more"

    def test_no_remainder_line_within_limit(self):
        stats = aggregate(_results(failed=10), elapsed=1.0)

        lines = list(stats.failure_preview())

        assert len(lines) == 10
        assert not any(line.startswith("...") for line in lines)

    def test_custom_limit(self):
        stats = aggregate(_results(failed=3), elapsed=1.0)

        assert list(stats.failure_preview(limit=1))[-1] == "... and 2 more"


class TestReporting:
    """Tests for summary output."""

    def test_format_summary(self):
        stats = aggregate(_results(converted=2, skipped=1, failed=1), elapsed=2.0)

        summary = stats.format_summary()

        assert "2 converted, 1 skipped, 1 failed, 4 total" in summary
        assert "Throughput: 2.00 files/s" in summary

    def test_log_summary(self):
        log = MagicMock()
        stats = aggregate(_results(converted=1, failed=12), elapsed=1.0)

        stats.log_summary(log)

        log.info.assert_called_once()
        assert log.info.call_args.kwargs["failed"] == 12
        # header + 10 failures + remainder line
        assert log.warning.call_count == 12

    def test_log_summary_without_failures(self):
        log = MagicMock()

        aggregate(_results(converted=1), elapsed=1.0).log_summary(log)

        log.warning.assert_not_called()

    def test_to_dict(self):
        stats = RunStatistics(success_count=1, elapsed=0.5)

        data = stats.to_dict()

        assert data["total"] == 1
        assert data["throughput"] == 2.0
        assert data["failures"] == []
