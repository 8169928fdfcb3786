"""Conversion backend interface."""

from abc import ABC, abstractmethod
from pathlib import Path

from pdfit.config.settings import BackendKind
from pdfit.utils.logging import get_logger

log = get_logger(__name__)


class ConversionBackend(ABC):
    """Abstract base class for document-to-PDF backends.

    A backend converts exactly one document per ``convert`` call. Calls are
    made from worker threads, possibly several at once, so implementations
    must not share per-conversion state between calls.
    """

    name: str = "base"
    kind: BackendKind

    # Hard upper bound on concurrent conversions, None for unbounded
    parallelism_ceiling: int | None = None

    @abstractmethod
    def convert(self, source_path: Path, target_path: Path, timeout: float | None = None) -> Path:
        """Convert a document to PDF.

        Args:
            source_path: Document to convert
            target_path: Where the PDF must be written
            timeout: Per-conversion time budget in seconds, if the backend
                     can enforce one

        Returns:
            Path to the produced PDF (``target_path``)

        Raises:
            ConversionError: The conversion failed or timed out
        """
        pass

    def clamp_parallelism(self, requested: int) -> int:
        """Clamp the requested parallelism to what this backend tolerates."""
        requested = max(1, requested)
        ceiling = self.parallelism_ceiling
        if ceiling is not None and requested > ceiling:
            log.warning(
                "Parallelism clamped for backend stability",
                backend=self.name,
                requested=requested,
                ceiling=ceiling,
            )
            return ceiling
        return requested

    def reclaim(self) -> None:
        """Release transient backend resources between chunks.

        The default implementation does nothing.
        """
        return None


def partial_target_path(target_path: Path) -> Path:
    """Hidden sibling that receives output until it is complete.

    The partial file keeps the target's extension, since some exporters
    insist on it.
    """
    return target_path.with_name(f".{target_path.stem}.partial{target_path.suffix}")


def discard_partial(path: Path) -> None:
    """Remove a leftover partial output file, if any."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        log.warning("Failed to remove partial output", path=str(path), error=str(e))
