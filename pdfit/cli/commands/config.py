"""Config command for configuration management."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from pdfit.config import get_settings
from pdfit.config.constants import CONFIG_LOCATIONS, DEFAULT_CONFIG_FILE

# Create config sub-app
config_app = typer.Typer(help="Configuration management.")
console = Console()


@config_app.command("show")
def show() -> None:
    """Show current configuration."""
    settings = get_settings()
    converter = settings.converter

    console.print("\n[bold blue]Current Configuration[/bold blue]\n")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    # Global settings
    table.add_row("Log Level", settings.log_level)
    table.add_row("Log Directory", settings.log_dir)

    # Converter settings
    table.add_row("Input Directory", converter.input_dir or "[dim]not set[/dim]")
    table.add_row("Output Directory", converter.output_dir or "[dim]not set[/dim]")
    table.add_row("Backend", converter.backend)
    table.add_row("Backend Path", converter.backend_path or "[dim]auto-detect[/dim]")
    table.add_row("Max Parallelism", str(converter.effective_max_parallelism))
    table.add_row("Session Ceiling", str(converter.session_ceiling))
    table.add_row("Chunk Size", str(converter.chunk_size))
    table.add_row("Chunk Pause", f"{converter.chunk_pause}s")
    table.add_row("Timeout", f"{converter.timeout}s")
    table.add_row("Extensions", ", ".join(converter.extensions))
    table.add_row(
        "File Name Patterns",
        ", ".join(converter.file_name_patterns) or "[dim]all files[/dim]",
    )
    table.add_row("Mtime Tolerance", f"{converter.mtime_tolerance}s")

    # Naming settings
    table.add_row("Naming Source", settings.naming.source)
    if settings.naming.source == "excel":
        table.add_row("Naming Workbook", settings.naming.excel_path or "[dim]not set[/dim]")
    elif settings.naming.source == "database":
        table.add_row("Naming Database", settings.naming.database_path or "[dim]not set[/dim]")

    console.print(table)
    console.print()


# Default configuration template
DEFAULT_CONFIG_TEMPLATE = """# PdfIt Configuration

log_level: "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
log_dir: ".logs"  # Per-run batch log files

converter:
  input_dir: "documents"
  output_dir: "pdf"
  backend: "external_process"  # external_process (LibreOffice), exclusive_session (Word)
  # backend_path: "/usr/bin/soffice"  # Auto-detected when omitted
  # max_parallelism: 4  # Default: 2 for exclusive_session, 4 for external_process
  session_ceiling: 4  # Hard limit for concurrent Word sessions
  chunk_size: 50  # Documents per chunk
  chunk_pause: 0.5  # Seconds to pause between chunks
  timeout: 60  # Per-document timeout in seconds (external_process only)
  extensions: [".doc", ".docx"]
  file_name_patterns: []  # e.g. ["Invoice_*", "Report_??.docx"]; empty = all files
  mtime_tolerance: 0.0  # Seconds; raise on filesystems with coarse timestamps

naming:
  source: "none"  # none, excel, database
  # excel_path: "Departments.xlsx"
  # database_path: "departments.db"
"""


@config_app.command("init")
def init(
    path: Annotated[
        Path | None,
        typer.Option(
            "--path",
            "-p",
            help="Path to create config file.",
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite existing config file.",
        ),
    ] = False,
) -> None:
    """Initialize a configuration file."""
    config_path = path or Path.cwd() / DEFAULT_CONFIG_FILE

    if config_path.exists() and not force:
        console.print(f"[red]Error:[/red] Config file already exists at {config_path}")
        console.print("Use --force to overwrite.")
        raise typer.Exit(1)

    config_path.write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
    console.print(f"[green]Created config file at:[/green] {config_path}")


@config_app.command("locations")
def locations() -> None:
    """Show configuration file search locations."""
    console.print("\n[bold blue]Configuration File Locations[/bold blue]\n")
    console.print("PdfIt searches for configuration files in the following order:\n")

    for i, loc in enumerate(CONFIG_LOCATIONS, 1):
        exists = "[green]exists[/green]" if loc.exists() else "[dim]not found[/dim]"
        console.print(f"  {i}. {loc} ({exists})")

    console.print()
    console.print("[dim]Environment variables with PDFIT_ prefix are also supported.[/dim]")
    console.print()
