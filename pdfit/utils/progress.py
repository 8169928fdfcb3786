"""Throttled progress reporting for batch runs."""

from collections.abc import Callable

from pdfit.config.constants import DEFAULT_PROGRESS_STEP
from pdfit.utils.logging import get_logger

log = get_logger(__name__)

ProgressCallback = Callable[[int, int, int], None]


def log_progress(percent: int, processed: int, total: int) -> None:
    """Default progress reporter."""
    log.info("Progress", percent=f"{percent}%", processed=processed, total=total)


class ProgressTracker:
    """Monotonic processed-item counter that reports every ``step`` percent.

    A report is emitted when the completed percentage has moved at least
    ``step`` points past the last report, and always for the final item. The
    last-reported threshold only ever moves forward, so reports come out in
    increasing order and never repeat. Callback errors are logged and
    never reach the caller.

    The tracker is confined to the event loop thread: ``advance`` does not
    await, so concurrent jobs cannot interleave inside it.
    """

    def __init__(
        self,
        total: int,
        step: int = DEFAULT_PROGRESS_STEP,
        on_report: ProgressCallback | None = None,
    ) -> None:
        if total < 0:
            raise ValueError("total must not be negative")
        if step < 1:
            raise ValueError("step must be at least 1")
        self.total = total
        self.step = step
        self._on_report = on_report or log_progress
        self._processed = 0
        self._last_reported = 0

    @property
    def processed(self) -> int:
        return self._processed

    @property
    def last_reported(self) -> int:
        """Percentage of the most recent report."""
        return self._last_reported

    def advance(self) -> bool:
        """Count one processed item.

        Returns:
            True if this call emitted a progress report
        """
        if self._processed >= self.total:
            raise RuntimeError("Progress advanced past the total item count")

        self._processed += 1
        processed = self._processed
        percent = processed * 100 // self.total

        if percent < self._last_reported + self.step and processed != self.total:
            return False

        self._last_reported = percent
        try:
            self._on_report(percent, processed, self.total)
        except Exception as e:
            log.warning("Progress callback failed", percent=percent, error=str(e))
        return True
