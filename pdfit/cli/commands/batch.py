"""Batch command for directory conversion."""

from pathlib import Path
from typing import Annotated, Any

import typer
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from pdfit.cli.callbacks import validate_backend, validate_output_dir
from pdfit.config import PdfitSettings, get_settings
from pdfit.config.constants import BACKENDS, DEFAULT_FAILURE_PREVIEW
from pdfit.core.models import ConversionResult
from pdfit.core.pipeline import BatchPipeline, PlannedJob
from pdfit.core.skip import SkipDecision
from pdfit.exceptions import ConfigurationError, DiscoveryError
from pdfit.utils.logging import get_console, get_logger, setup_task_logging
from pdfit.utils.progress import log_progress
from pdfit.utils.stats import RunStatistics

console = get_console()
log = get_logger(__name__)


def batch(
    input_dir: Annotated[
        Path | None,
        typer.Argument(
            help="Input directory containing documents (defaults to converter.input_dir).",
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output directory for PDF files (defaults to converter.output_dir).",
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
            callback=validate_output_dir,
        ),
    ] = None,
    backend: Annotated[
        str | None,
        typer.Option(
            "--backend",
            help=f"Conversion backend. Options: {', '.join(BACKENDS)}",
            callback=validate_backend,
        ),
    ] = None,
    backend_path: Annotated[
        str | None,
        typer.Option(
            "--backend-path",
            help="Path to the soffice executable (external_process backend).",
        ),
    ] = None,
    parallelism: Annotated[
        int | None,
        typer.Option(
            "--parallelism",
            "-j",
            min=1,
            help="Number of documents to convert concurrently.",
        ),
    ] = None,
    chunk_size: Annotated[
        int | None,
        typer.Option(
            "--chunk-size",
            min=1,
            help="Number of documents per chunk.",
        ),
    ] = None,
    timeout: Annotated[
        int | None,
        typer.Option(
            "--timeout",
            min=1,
            help="Per-document timeout in seconds (external_process backend).",
        ),
    ] = None,
    patterns: Annotated[
        list[str] | None,
        typer.Option(
            "--pattern",
            "-p",
            help="File name pattern to include (* and ? wildcards). Repeatable.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Show batch plan without converting.",
        ),
    ] = False,
) -> None:
    """Batch convert Word documents in a directory to PDF.

    Examples:
        pdfit batch ./documents -o ./pdf
        pdfit batch ./documents -o ./pdf --backend exclusive_session -j 4
        pdfit batch ./documents -o ./pdf -p "Invoice_*" -p "Report_??.docx"
    """
    settings = _apply_overrides(
        get_settings(),
        input_dir=input_dir,
        output_dir=output,
        backend=backend,
        backend_path=backend_path,
        max_parallelism=parallelism,
        chunk_size=chunk_size,
        timeout=timeout,
        file_name_patterns=patterns,
    )

    task_id, log_path = setup_task_logging(
        log_dir=settings.log_dir,
        prefix="batch",
        verbose=verbose,
    )

    if verbose:
        log.info("Logs will be saved to", log_file=str(log_path))

    log.info("Task Configuration", task_id=task_id, config=settings.model_dump())

    try:
        if dry_run:
            _show_dry_run(BatchPipeline(settings).plan(), settings)
            return

        if verbose:
            stats = BatchPipeline(settings).run_sync()
        else:
            stats = _run_with_progress(settings)
    except (ConfigurationError, DiscoveryError) as e:
        console.print(f"[red]Error:[/red] {e}")
        log.error("Batch aborted", error=str(e))
        raise typer.Exit(1) from e
    except KeyboardInterrupt:
        console.print("\n[yellow]Batch interrupted.[/yellow]")
        raise typer.Exit(130) from None
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        log.error("Batch conversion failed", error=str(e), exc_info=True)
        raise typer.Exit(1) from e

    _display_summary(stats)


def _apply_overrides(settings: PdfitSettings, **overrides: Any) -> PdfitSettings:
    """Return settings with the given converter values replaced (None = keep)."""
    update = {k: v for k, v in overrides.items() if v is not None}
    for key in ("input_dir", "output_dir"):
        if key in update:
            update[key] = str(update[key])

    if not update:
        return settings

    # Revalidate so CLI values go through the same normalization as config files
    converter = type(settings.converter).model_validate(
        {**settings.converter.model_dump(), **update}
    )
    return settings.model_copy(update={"converter": converter})


def _run_with_progress(settings: PdfitSettings) -> RunStatistics:
    """Run the batch behind a Rich progress bar."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TextColumn("({task.completed}/{task.total})"),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    ) as progress:
        progress_task_id = progress.add_task("[cyan]Converting files...", total=None)

        def on_progress(percent: int, processed: int, total: int) -> None:
            log_progress(percent, processed, total)
            progress.update(progress_task_id, total=total, completed=processed)

        def on_result(result: ConversionResult) -> None:
            if not result.success:
                progress.console.print(f"  [red]x[/red] {result.file_path.name}")
                progress.console.print(f"    [dim]{_simplify_error(result.error_message)}[/dim]")

        pipeline = BatchPipeline(settings, on_result=on_result, on_progress=on_progress)
        return pipeline.run_sync()


def _display_summary(stats: RunStatistics) -> None:
    """Display batch processing summary."""
    console.print()

    table = Table(title="Batch Summary", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value")

    table.add_row("Total Files", str(stats.total))
    table.add_row("Converted", f"[green]{stats.success_count}[/green]")
    table.add_row("Skipped", f"[yellow]{stats.skipped_count}[/yellow]")
    table.add_row("Failed", f"[red]{stats.failure_count}[/red]")
    if stats.total > 0:
        table.add_row("Success Rate", f"{stats.success_rate:.1f}%")
    table.add_row("Duration", f"{stats.elapsed:.2f}s")
    table.add_row("Avg per File", f"{stats.average_seconds:.2f}s")
    table.add_row("Throughput", f"{stats.throughput:.2f} files/s")

    console.print(table)

    if stats.failures:
        console.print()
        console.print("[bold red]Failed Files:[/bold red]")

        for result in stats.failures[:DEFAULT_FAILURE_PREVIEW]:
            console.print(f"  [dim]-[/dim] {result.file_path.name}")
            console.print(f"    [dim]{_simplify_error(result.error_message)}[/dim]")
        remaining = len(stats.failures) - DEFAULT_FAILURE_PREVIEW
        if remaining > 0:
            console.print(f"  [dim]... and {remaining} more[/dim]")

    console.print()


def _simplify_error(error: str | None) -> str:
    """Simplify error message for display."""
    error = error or "Unknown error"

    if "Office automation error" in error and "-2147" in error:
        return "Word automation failed (COM error), see the log file for details"

    # LibreOffice tends to print its whole usage text on bad arguments
    first_line = error.strip().splitlines()[0] if error.strip() else error

    if len(first_line) > 100:
        return first_line[:97] + "..."

    return first_line


def _show_dry_run(plan: list[PlannedJob], settings: PdfitSettings) -> None:
    """Display the batch plan without executing."""
    config = settings.converter

    console.print("\n[bold blue]Batch Plan (Dry Run)[/bold blue]\n")
    console.print(f"  [bold]Input Directory:[/bold] {config.input_dir}")
    console.print(f"  [bold]Output Directory:[/bold] {config.output_dir}")
    console.print(f"  [bold]Backend:[/bold] {config.backend}")
    console.print(f"  [bold]Parallelism:[/bold] {config.effective_max_parallelism}")
    console.print(f"  [bold]Chunk Size:[/bold] {config.chunk_size}")
    if config.file_name_patterns:
        console.print(f"  [bold]Patterns:[/bold] {', '.join(config.file_name_patterns)}")

    to_convert = [p for p in plan if p.decision is SkipDecision.CONVERT]

    console.print()
    console.print(f"[bold]Files Found:[/bold] {len(plan)}")
    console.print(f"[bold]To Convert:[/bold] {len(to_convert)}")
    console.print(f"[bold]Up To Date:[/bold] {len(plan) - len(to_convert)}")

    if to_convert:
        console.print()
        console.print("[bold]Files:[/bold]")
        for planned in to_convert[:10]:
            console.print(f"  - {planned.job.name} -> {planned.job.target_path.name}")
        if len(to_convert) > 10:
            console.print(f"  ... and {len(to_convert) - 10} more")

    console.print()
