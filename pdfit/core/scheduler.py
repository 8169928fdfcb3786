"""Chunked, bounded-parallel execution of conversion jobs.

Jobs are split into fixed-size chunks that run one after another. Inside a
chunk, jobs run concurrently up to the effective parallelism, each backend
call on its own worker thread. Between chunks the scheduler pauses and
collects garbage so an unstable automation backend can release its handles
before the next wave starts.
"""

import asyncio
import gc
import time
from collections.abc import Callable, Sequence

import anyio

from pdfit.config.constants import DEFAULT_CHUNK_PAUSE, DEFAULT_CHUNK_SIZE, DEFAULT_PROGRESS_STEP
from pdfit.converters.base import ConversionBackend
from pdfit.core.models import ConversionJob, ConversionResult
from pdfit.core.skip import SkipDecision, decide
from pdfit.exceptions import ConversionError
from pdfit.utils.logging import get_logger
from pdfit.utils.progress import ProgressCallback, ProgressTracker

log = get_logger(__name__)


def partition(jobs: Sequence[ConversionJob], chunk_size: int) -> list[list[ConversionJob]]:
    """Split jobs into consecutive chunks of at most ``chunk_size``."""
    if chunk_size < 1:
        raise ValueError("chunk_size must be at least 1")
    return [list(jobs[i : i + chunk_size]) for i in range(0, len(jobs), chunk_size)]


class ChunkedScheduler:
    """Runs jobs against one backend in chunks with a hard concurrency bound.

    Every job produces exactly one ConversionResult. Failures, including
    unexpected exceptions, are captured at the job boundary and never abort
    the chunk or the run.
    """

    def __init__(
        self,
        backend: ConversionBackend,
        max_parallelism: int,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        timeout: float | None = None,
        chunk_pause: float = DEFAULT_CHUNK_PAUSE,
        mtime_tolerance: float = 0.0,
        progress_step: int = DEFAULT_PROGRESS_STEP,
        on_progress: ProgressCallback | None = None,
        on_result: Callable[[ConversionResult], None] | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            backend: Backend performing the conversions
            max_parallelism: Requested concurrency, clamped by the backend
            chunk_size: Jobs per chunk
            timeout: Per-job timeout passed to the backend
            chunk_pause: Seconds to pause between chunks
            mtime_tolerance: Skip policy tolerance in seconds
            progress_step: Report progress every N percent
            on_progress: Progress report callback (defaults to logging)
            on_result: Called with each result as soon as it is available
        """
        if chunk_size < 1:
            raise ValueError("chunk_size must be at least 1")
        self.backend = backend
        self.parallelism = backend.clamp_parallelism(max_parallelism)
        self.chunk_size = chunk_size
        self.timeout = timeout
        self.chunk_pause = chunk_pause
        self.mtime_tolerance = mtime_tolerance
        self.progress_step = progress_step
        self._on_progress = on_progress
        self._on_result = on_result

    async def run(self, jobs: Sequence[ConversionJob]) -> list[ConversionResult]:
        """Run all jobs and return their results once every chunk has finished."""
        results: list[ConversionResult] = []
        if not jobs:
            return results

        chunks = partition(jobs, self.chunk_size)
        tracker = ProgressTracker(len(jobs), step=self.progress_step, on_report=self._on_progress)
        semaphore = asyncio.Semaphore(self.parallelism)
        limiter = anyio.CapacityLimiter(self.parallelism)

        log.info(
            "Processing files in chunks",
            total=len(jobs),
            chunks=len(chunks),
            chunk_size=self.chunk_size,
            parallelism=self.parallelism,
            backend=self.backend.name,
        )

        for index, chunk in enumerate(chunks, 1):
            log.info("Processing chunk", chunk=f"{index}/{len(chunks)}", files=len(chunk))

            chunk_results = await asyncio.gather(
                *(self._run_job(job, semaphore, limiter, tracker) for job in chunk)
            )
            results.extend(chunk_results)

            if index < len(chunks):
                await self._settle()

        return results

    async def _run_job(
        self,
        job: ConversionJob,
        semaphore: asyncio.Semaphore,
        limiter: anyio.CapacityLimiter,
        tracker: ProgressTracker,
    ) -> ConversionResult:
        async with semaphore:
            result = await self._process(job, limiter)

        tracker.advance()

        if self._on_result:
            try:
                self._on_result(result)
            except Exception as e:
                log.warning("Result callback failed", file=job.name, error=str(e))

        return result

    async def _process(self, job: ConversionJob, limiter: anyio.CapacityLimiter) -> ConversionResult:
        start = time.perf_counter()
        try:
            if decide(job.source_path, job.target_path, self.mtime_tolerance) is SkipDecision.SKIP:
                return ConversionResult.skipped_result(job)

            log.debug("Converting", file=job.name, target=job.target_path.name)
            await anyio.to_thread.run_sync(
                self.backend.convert,
                job.source_path,
                job.target_path,
                self.timeout,
                limiter=limiter,
            )
        except ConversionError as e:
            log.error("Failed to convert", file=job.name, error=e.reason)
            return ConversionResult.failed(job, e.reason, time.perf_counter() - start)
        except Exception as e:
            log.error("Failed to convert", file=job.name, error=str(e), exc_info=True)
            return ConversionResult.failed(
                job, str(e) or type(e).__name__, time.perf_counter() - start
            )

        duration = time.perf_counter() - start
        log.info(
            "Converted",
            file=job.name,
            output=job.target_path.name,
            duration=f"{duration:.2f}s",
        )
        return ConversionResult.converted(job, duration)

    async def _settle(self) -> None:
        """Give the backend time to release resources before the next chunk."""
        log.debug("Pausing between chunks for backend cleanup", pause=self.chunk_pause)
        await asyncio.sleep(self.chunk_pause)
        gc.collect()
        try:
            self.backend.reclaim()
        except Exception as e:
            log.debug("Backend reclaim failed (non-fatal)", error=str(e))
