"""Batch result aggregation and reporting."""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from pdfit.config.constants import DEFAULT_FAILURE_PREVIEW
from pdfit.core.models import ConversionResult


@dataclass
class RunStatistics:
    """Aggregate outcome of one batch run.

    Built once by :func:`aggregate` after every job has finished and not
    mutated afterwards.
    """

    success_count: int = 0
    skipped_count: int = 0
    failure_count: int = 0
    elapsed: float = 0.0
    failures: list[ConversionResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.success_count + self.skipped_count + self.failure_count

    @property
    def throughput(self) -> float:
        """Jobs per second over the whole run (0.0 when no time elapsed)."""
        if self.elapsed <= 0:
            return 0.0
        return self.total / self.elapsed

    @property
    def average_seconds(self) -> float:
        """Average wall-clock seconds per job."""
        if self.total == 0:
            return 0.0
        return self.elapsed / self.total

    @property
    def success_rate(self) -> float:
        """Percentage of jobs that did not fail."""
        if self.total == 0:
            return 0.0
        return (self.success_count + self.skipped_count) / self.total * 100

    def failure_preview(self, limit: int = DEFAULT_FAILURE_PREVIEW) -> Iterator[str]:
        """Yield ``name: error`` lines for the first ``limit`` failures.

        A trailing ``... and K more`` line stands in for the rest.
        """
        for result in self.failures[:limit]:
            yield f"{result.file_path.name}: {result.error_message}"
        remaining = len(self.failures) - limit
        if remaining > 0:
            yield f"... and {remaining} more"

    def format_summary(self) -> str:
        """Format statistics as a human-readable summary.

        Returns:
            Multi-line summary string
        """
        lines = [
            f"Complete: {self.success_count} converted, {self.skipped_count} skipped, "
            f"{self.failure_count} failed, {self.total} total",
            f"Total: {self.elapsed:.2f}s | Avg: {self.average_seconds:.2f}s/file"
            f" | Throughput: {self.throughput:.2f} files/s",
        ]
        return "\n".join(lines)

    def log_summary(self, log, limit: int = DEFAULT_FAILURE_PREVIEW) -> None:
        """Write the final summary and the bounded failure list to ``log``."""
        log.info(
            "Conversion completed",
            converted=self.success_count,
            skipped=self.skipped_count,
            failed=self.failure_count,
            total=self.total,
            duration=f"{self.elapsed:.2f}s",
            avg_per_file=f"{self.average_seconds:.2f}s",
            throughput=f"{self.throughput:.2f}/s",
        )
        if self.failures:
            log.warning("Failed files", count=self.failure_count)
            for line in self.failure_preview(limit):
                log.warning(f"  - {line}")

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "success_count": self.success_count,
            "skipped_count": self.skipped_count,
            "failure_count": self.failure_count,
            "total": self.total,
            "elapsed": self.elapsed,
            "throughput": self.throughput,
            "success_rate": self.success_rate,
            "failures": [
                {"file": str(r.file_path), "error": r.error_message} for r in self.failures
            ],
        }


def aggregate(results: Sequence[ConversionResult], elapsed: float) -> RunStatistics:
    """Tally a complete result sequence into RunStatistics."""
    stats = RunStatistics(elapsed=max(0.0, elapsed))
    for result in results:
        if not result.success:
            stats.failure_count += 1
            stats.failures.append(result)
        elif result.skipped:
            stats.skipped_count += 1
        else:
            stats.success_count += 1
    return stats
