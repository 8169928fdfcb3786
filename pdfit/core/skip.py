"""Timestamp-based skip policy.

A target PDF that is at least as new as its source is considered up to date,
so repeated runs over an unchanged input set do no work after the first pass.
"""

from datetime import datetime
from enum import Enum
from pathlib import Path

from pdfit.utils.logging import get_logger

log = get_logger(__name__)


class SkipDecision(Enum):
    """Whether a job needs the backend."""

    CONVERT = "convert"
    SKIP = "skip"


def decide(source: Path, target: Path, tolerance: float = 0.0) -> SkipDecision:
    """Decide whether ``source`` has to be (re)converted into ``target``.

    Args:
        source: Source document
        target: Resolved target PDF path
        tolerance: Seconds by which the target may be older than the source
                   and still count as up to date. 0 compares exactly.

    Returns:
        SkipDecision.SKIP when the target exists and is up to date,
        SkipDecision.CONVERT otherwise.
    """
    try:
        target_mtime = target.stat().st_mtime
    except FileNotFoundError:
        return SkipDecision.CONVERT

    source_mtime = source.stat().st_mtime

    if target_mtime + tolerance >= source_mtime:
        log.debug(
            "Skipping up-to-date target",
            file=source.name,
            source_time=_fmt(source_mtime),
            target_time=_fmt(target_mtime),
        )
        return SkipDecision.SKIP

    log.info(
        "Regenerating target, source modified after it",
        file=source.name,
        source_time=_fmt(source_mtime),
        target_time=_fmt(target_mtime),
    )
    return SkipDecision.CONVERT


def _fmt(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp).isoformat(timespec="seconds")
