"""CLI callback functions."""

from pathlib import Path

import typer


def validate_output_dir(value: Path | None) -> Path | None:
    """Reject output paths that exist but are not directories."""
    if value is None:
        return None

    if value.exists() and not value.is_dir():
        raise typer.BadParameter(f"Output path exists but is not a directory: {value}")

    return value


def validate_backend(value: str | None) -> str | None:
    """Validate backend option."""
    from pdfit.config.constants import BACKENDS

    if value is not None and value not in BACKENDS:
        raise typer.BadParameter(f"Invalid backend '{value}'. Options: {', '.join(BACKENDS)}")

    return value
