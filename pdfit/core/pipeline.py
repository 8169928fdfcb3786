"""Batch conversion pipeline.

Composes the stages of one run: validate configuration, discover candidate
documents, filter them by name pattern, resolve target names, schedule the
conversions and aggregate the results.
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from pdfit.config.settings import ConverterConfig, PdfitSettings
from pdfit.converters import create_backend
from pdfit.converters.base import ConversionBackend
from pdfit.core.filters import filter_paths
from pdfit.core.models import ConversionJob, ConversionResult
from pdfit.core.scheduler import ChunkedScheduler
from pdfit.core.skip import SkipDecision, decide
from pdfit.exceptions import ConfigurationError, NoCandidatesError
from pdfit.naming import NameResolver, create_resolver, default_target_name
from pdfit.utils.fs import discover_files, ensure_directory
from pdfit.utils.logging import get_logger
from pdfit.utils.progress import ProgressCallback
from pdfit.utils.stats import RunStatistics, aggregate

log = get_logger(__name__)


@dataclass(frozen=True)
class PlannedJob:
    """A job and the skip decision it would get right now."""

    job: ConversionJob
    decision: SkipDecision


class BatchPipeline:
    """Runs one batch conversion from configuration to statistics.

    Fatal problems (missing or invalid directories, unavailable backend, no
    candidates) raise before any conversion starts. Per-document problems
    become failed results and never abort the run.
    """

    def __init__(
        self,
        settings: PdfitSettings,
        backend: ConversionBackend | None = None,
        resolver: NameResolver | None = None,
        on_result: Callable[[ConversionResult], None] | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            settings: Application settings
            backend: Backend to use instead of the configured one
            resolver: Name resolver to use instead of the configured one
            on_result: Called with each ConversionResult as it completes
            on_progress: Progress report callback
        """
        self.settings = settings
        self.config: ConverterConfig = settings.converter
        self._backend = backend
        self._resolver = resolver
        self._on_result = on_result
        self._on_progress = on_progress

    def validate(self) -> tuple[Path, Path]:
        """Check the configured directories.

        Returns:
            Tuple of (input_dir, output_dir)

        Raises:
            ConfigurationError: A directory is not configured or input is missing
        """
        input_dir = self.settings.get_input_dir()
        output_dir = self.settings.get_output_dir()

        if input_dir is None:
            raise ConfigurationError("Input directory is not configured (converter.input_dir)")
        if output_dir is None:
            raise ConfigurationError("Output directory is not configured (converter.output_dir)")
        if not input_dir.exists():
            raise ConfigurationError(f"Input directory not found: {input_dir}")
        if not input_dir.is_dir():
            raise ConfigurationError(f"Input path is not a directory: {input_dir}")

        return input_dir, output_dir

    def discover(self, input_dir: Path) -> list[Path]:
        """Find candidate documents and apply the name patterns.

        Raises:
            NoCandidatesError: Nothing is left to convert
        """
        candidates = discover_files(input_dir, self.config.extensions)
        log.info("Found candidate files", count=len(candidates), input_dir=str(input_dir))

        if not candidates:
            raise NoCandidatesError(input_dir, self.config.extensions)

        patterns = self.config.file_name_patterns
        if patterns:
            candidates = filter_paths(candidates, patterns)
            log.info(
                "Applied file name patterns",
                patterns=", ".join(patterns),
                matched=len(candidates),
            )

        if not candidates:
            raise NoCandidatesError(input_dir, self.config.extensions, patterns)
        return candidates

    def build_jobs(self, sources: list[Path], output_dir: Path) -> list[ConversionJob]:
        """Pair each source with its resolved target path."""
        resolver = self._get_resolver()
        jobs: list[ConversionJob] = []
        claimed: dict[Path, Path] = {}

        for source in sources:
            target_name = self._resolve_name(resolver, source)
            target = output_dir / target_name

            if target in claimed:
                log.warning(
                    "Target name already used by another source, it will be overwritten",
                    file=source.name,
                    other=claimed[target].name,
                    target=target_name,
                )
            claimed.setdefault(target, source)
            jobs.append(ConversionJob(source_path=source, target_path=target))

        return jobs

    def plan(self) -> list[PlannedJob]:
        """Build the job list and current skip decisions without converting anything."""
        input_dir, output_dir = self.validate()
        jobs = self.build_jobs(self.discover(input_dir), output_dir)
        return [
            PlannedJob(job, decide(job.source_path, job.target_path, self.config.mtime_tolerance))
            for job in jobs
        ]

    async def run(self) -> RunStatistics:
        """Run the batch and return its statistics."""
        input_dir, output_dir = self.validate()
        backend = self._get_backend()
        ensure_directory(output_dir)

        sources = self.discover(input_dir)
        jobs = self.build_jobs(sources, output_dir)

        scheduler = ChunkedScheduler(
            backend,
            max_parallelism=self.config.effective_max_parallelism,
            chunk_size=self.config.chunk_size,
            timeout=self.config.timeout,
            chunk_pause=self.config.chunk_pause,
            mtime_tolerance=self.config.mtime_tolerance,
            on_progress=self._on_progress,
            on_result=self._on_result,
        )

        log.info(
            "Starting batch conversion",
            files=len(jobs),
            backend=backend.name,
            output_dir=str(output_dir),
        )
        start = time.perf_counter()
        results: list[ConversionResult] = await scheduler.run(jobs)
        stats = aggregate(results, time.perf_counter() - start)

        stats.log_summary(log)
        return stats

    def run_sync(self) -> RunStatistics:
        """Run the batch from synchronous code."""
        return asyncio.run(self.run())

    def _get_backend(self) -> ConversionBackend:
        if self._backend is None:
            self._backend = create_backend(self.config)
        return self._backend

    def _get_resolver(self) -> NameResolver:
        if self._resolver is None:
            self._resolver = create_resolver(self.settings.naming)
        return self._resolver

    @staticmethod
    def _resolve_name(resolver: NameResolver, source: Path) -> str:
        try:
            name = resolver.resolve(source.name)
        except Exception as e:
            log.warning("Name resolver failed, using source name", file=source.name, error=str(e))
            name = ""
        return name or default_target_name(source.name)
