"""Main CLI application using Typer."""

from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console

from pdfit import __version__
from pdfit.cli.commands.batch import batch
from pdfit.cli.commands.check import check
from pdfit.cli.commands.config import config_app

# Load environment variables from .env file
load_dotenv()

# Create main Typer app
app = typer.Typer(
    name="pdfit",
    help="Batch conversion of Word documents to PDF.",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

# Console for output
console = Console()

# Register commands
app.command(name="batch", help="Batch convert documents in a directory.")(batch)
app.command(name="check", help="Check which conversion backends are available.")(check)
app.add_typer(config_app, name="config")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]PdfIt[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """PdfIt - Batch document to PDF conversion.

    Converts directories of Word documents to PDF through LibreOffice or
    Microsoft Word, skipping documents whose PDF is already up to date.
    """
    pass


if __name__ == "__main__":
    app()
