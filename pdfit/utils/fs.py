"""File system utilities for PdfIt."""

from collections.abc import Iterable
from pathlib import Path

from pdfit.utils.logging import get_logger

log = get_logger(__name__)

# Word keeps "~$name.doc" owner files next to documents that are open
_OFFICE_LOCK_PREFIX = "~$"


def ensure_directory(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path

    Returns:
        The directory path
    """
    if not path.exists():
        path.mkdir(parents=True, exist_ok=True)
        log.info("Created output directory", output_dir=str(path))
    return path


def discover_files(directory: Path, extensions: Iterable[str]) -> list[Path]:
    """Discover files directly inside ``directory`` with one of ``extensions``.

    Extensions are compared case-insensitively. Office lock files are ignored.

    Args:
        directory: Directory to search (not recursive)
        extensions: File extensions including the dot (e.g. ".doc")

    Returns:
        Sorted list of file paths
    """
    wanted = {ext.lower() for ext in extensions}
    files = [
        p
        for p in directory.iterdir()
        if p.is_file()
        and p.suffix.lower() in wanted
        and not p.name.startswith(_OFFICE_LOCK_PREFIX)
    ]

    # Sort for consistent ordering
    files.sort()
    return files
