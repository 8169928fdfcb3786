"""Check command for backend availability."""

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from pdfit.config import get_settings
from pdfit.converters import check_backends_available

console = Console()

_BACKEND_LABELS = {
    "exclusive_session": "Microsoft Word (exclusive_session)",
    "external_process": "LibreOffice (external_process)",
}


def check(
    backend_path: Annotated[
        str | None,
        typer.Option(
            "--backend-path",
            help="Path to the soffice executable to check.",
        ),
    ] = None,
) -> None:
    """Show which conversion backends are available on this machine."""
    settings = get_settings()
    available = check_backends_available(backend_path or settings.converter.backend_path)

    table = Table(title="Conversion Backends", show_header=True, header_style="bold")
    table.add_column("Backend", style="cyan")
    table.add_column("Status")

    for kind, ok in available.items():
        status = "[green]available[/green]" if ok else "[red]not available[/red]"
        if kind == settings.converter.backend:
            status += " [dim](configured)[/dim]"
        table.add_row(_BACKEND_LABELS.get(kind, kind), status)

    console.print()
    console.print(table)
    console.print()

    if not available.get(settings.converter.backend):
        raise typer.Exit(1)
