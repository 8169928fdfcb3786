"""Tests for job and result models."""

from pathlib import Path

import pytest

from pdfit.core.models import ConversionJob, ConversionResult


@pytest.fixture
def job():
    return ConversionJob(source_path=Path("in/a.doc"), target_path=Path("out/a.pdf"))


class TestConversionResult:
    """Tests for ConversionResult."""

    def test_converted(self, job):
        result = ConversionResult.converted(job, duration=1.5)

        assert result.success is True
        assert result.skipped is False
        assert result.error_message is None
        assert result.target_path == Path("out/a.pdf")
        assert result.duration == 1.5

    def test_skipped_is_success(self, job):
        """A skipped job counts as successful."""
        result = ConversionResult.skipped_result(job)

        assert result.success is True
        assert result.skipped is True

    def test_failed(self, job):
        result = ConversionResult.failed(job, "boom")

        assert result.success is False
        assert result.skipped is False
        assert result.error_message == "boom"
        assert result.target_path is None

    def test_failed_without_message(self, job):
        """Failures always carry a message."""
        assert ConversionResult.failed(job, "").error_message == "Unknown error"

    def test_skipped_failure_rejected(self):
        """skipped implies success."""
        with pytest.raises(ValueError):
            ConversionResult(file_path=Path("a.doc"), success=False, skipped=True)

    def test_job_name(self, job):
        assert job.name == "a.doc"
