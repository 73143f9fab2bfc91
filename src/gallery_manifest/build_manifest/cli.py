"""CLI command for build."""

import logging

import typer
from rich.markup import escape

from gallery_manifest.build_manifest.main import main
from gallery_manifest.build_manifest.pool import DEFAULT_CONCURRENCY
from gallery_manifest.models.manifest import GalleryConfig, OutputFormat, TimestampSource
from gallery_manifest.utils.cli import (
    EXIT_DISCOVERY_ERROR,
    EXIT_SERIALIZATION_ERROR,
    cli_error_handler,
    setup_logging,
    stderr_console,
)
from gallery_manifest.utils.errors import DiscoveryError, SerializationError


@cli_error_handler
def build(
    root: str = typer.Argument("./images", envvar="GALLERY_ROOT", help="Directory containing the gallery images"),
    output: str = typer.Option("./gallery.json", "--output", "-o", envvar="GALLERY_OUTPUT", help="Path of the JSON manifest to write"),
    base_url: str = typer.Option("./images", "--base-url", "-b", envvar="GALLERY_BASE_URL", help="Public URL of the image directory"),
    concurrency: int = typer.Option(DEFAULT_CONCURRENCY, "--concurrency", "-j", envvar="GALLERY_CONCURRENCY", help="Maximum files resolved at once"),
    output_format: OutputFormat = typer.Option(OutputFormat.RECORDS, "--format", "-f", help="Output format: 'records' (src + takenAt, newest first) or 'urls' (plain URL list, ascending)"),
    no_exif: bool = typer.Option(False, "--no-exif", help="Do not read embedded EXIF dates"),
    no_mtime: bool = typer.Option(False, "--no-mtime", help="Do not fall back to file modification times"),
    no_filename: bool = typer.Option(False, "--no-filename", help="Do not infer dates from file names"),
    follow_symlinks: bool = typer.Option(False, "--follow-symlinks", help="Descend into symlinked directories"),
    skip_unreadable: bool = typer.Option(False, "--skip-unreadable", help="Skip (and report) subdirectories that cannot be listed instead of failing"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """
    Build the gallery manifest.

    Recursively scans ROOT for images, dates each one from its EXIF data,
    its modification time or its file name (first that works), and writes
    a JSON index sorted newest first.
    """
    setup_logging(verbose)
    logger = logging.getLogger(__name__)

    disabled = {
        TimestampSource.EXIF: no_exif,
        TimestampSource.MTIME: no_mtime,
        TimestampSource.FILENAME: no_filename,
    }
    config = GalleryConfig(
        root=root,
        output=output,
        base_url=base_url,
        concurrency=concurrency,
        output_format=output_format,
        sources=tuple(source for source, off in disabled.items() if not off),
        follow_symlinks=follow_symlinks,
        skip_unreadable=skip_unreadable,
    )

    logger.info(f"Building gallery manifest from: {config.root}")
    try:
        result = main(config)
    except DiscoveryError as e:
        stderr_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=EXIT_DISCOVERY_ERROR)
    except SerializationError as e:
        stderr_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=EXIT_SERIALIZATION_ERROR)

    if result.skipped_dirs:
        stderr_console.print(f"[bold yellow]Skipped {len(result.skipped_dirs)} unreadable directories[/bold yellow]")
    if result.output_format == OutputFormat.RECORDS:
        breakdown = ", ".join(f"{source.value}: {result.source_counts[source]}" for source in TimestampSource)
        stderr_console.print(f"[dim]{breakdown}[/dim]")
    stderr_console.print(f"[bold green]Wrote {result.count} entries[/bold green] to {escape(str(result.output))}")
