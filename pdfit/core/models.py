"""Job and result types shared by the scheduler, backends and aggregator."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ConversionJob:
    """One source document and the PDF it should become."""

    source_path: Path
    target_path: Path

    @property
    def name(self) -> str:
        return self.source_path.name


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of a single job.

    A skipped job counts as successful: the target was already up to date.
    """

    file_path: Path
    success: bool
    skipped: bool = False
    error_message: str | None = None
    target_path: Path | None = None
    duration: float = 0.0

    def __post_init__(self) -> None:
        if self.skipped and not self.success:
            raise ValueError("A skipped result must be successful")

    @classmethod
    def converted(cls, job: ConversionJob, duration: float = 0.0) -> "ConversionResult":
        return cls(
            file_path=job.source_path,
            success=True,
            target_path=job.target_path,
            duration=duration,
        )

    @classmethod
    def skipped_result(cls, job: ConversionJob) -> "ConversionResult":
        return cls(
            file_path=job.source_path,
            success=True,
            skipped=True,
            target_path=job.target_path,
        )

    @classmethod
    def failed(
        cls, job: ConversionJob, error_message: str, duration: float = 0.0
    ) -> "ConversionResult":
        return cls(
            file_path=job.source_path,
            success=False,
            error_message=error_message or "Unknown error",
            duration=duration,
        )
