"""Console script for gallery_manifest."""

import typer

from gallery_manifest.build_manifest.cli import build

__version__ = "0.1.0"

app = typer.Typer(no_args_is_help=True)

app.command()(build)


@app.command()
def version():
    """Display version information."""
    typer.echo(f"Gallery Manifest v{__version__}")
    raise typer.Exit()


if __name__ == "__main__":
    app()
