#!/usr/bin/env python3
"""
Invoice Rendering CLI

Renders bill records to PDF, runs the HTTP service, and inspects rendered PDFs.

Commands:
    render  - Render a bill record JSON file to PDF
    serve   - Run the HTTP rendering service
    inspect - Show page count, page sizes and text of a PDF

Examples:\n

    billpdf_cli.py render bill.json                  # Writes bill.pdf

    billpdf_cli.py render bill.json -o out/inv.pdf   # Explicit output path

    billpdf_cli.py serve --port 8080                 # Run the service

    billpdf_cli.py inspect out/inv.pdf --text        # Inspect a rendered PDF
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
import uvicorn
from typing_extensions import Annotated

from billpdf.contexts.rendering.engine import ChromiumEngine, RenderedArtifact, RenderTimeouts
from billpdf.contexts.service.api import create_app
from billpdf.contexts.service.orchestrator import handle
from billpdf.utils.logger import setup_logger
from billpdf.utils.pdf_processing import extract_text, page_count, page_sizes
from billpdf.utils.settings import load_settings
from billpdf.utils.timestamp import now

app = typer.Typer(
    help="Render tax invoices to PDF with headless Chromium",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("render")
def render_command(
    record_file: Annotated[
        Path,
        typer.Argument(help="JSON file holding one bill record", exists=True, dir_okay=False),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output PDF path (default: next to the record)"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
):
    """
    Render a bill record to PDF.

    Examples:\n

        $ billpdf_cli.py render bill.json

        $ billpdf_cli.py render bill.json --output invoices/INV-001.pdf
    """
    settings = load_settings()
    setup_logger("render", settings.logs_path, level="DEBUG" if verbose else settings.log_level)

    typer.secho(f"\nRendering: {record_file}", fg=typer.colors.BLUE, bold=True)

    engine = ChromiumEngine(settings)
    result = asyncio.run(
        handle(record_file.read_bytes(), engine, RenderTimeouts.from_settings(settings))
    )

    if not isinstance(result, RenderedArtifact):
        typer.secho(f"✗ {result.error} ({result.reason})", fg=typer.colors.RED, bold=True, err=True)
        typer.secho(f"  {result.message}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    output = output or record_file.with_suffix(".pdf")
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(result.content)

    typer.secho("✓ Rendering succeeded", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Pages: {result.page_count}")
    typer.echo(f"  PDF: {output}\n")


@app.command("serve")
def serve_command(
    host: Annotated[
        Optional[str],
        typer.Option("--host", help="Interface to bind (default: HOST or 0.0.0.0)"),
    ] = None,
    port: Annotated[
        Optional[int],
        typer.Option("--port", "-p", help="Port to listen on (default: PORT or 3000)"),
    ] = None,
):
    """
    Run the HTTP rendering service.

    Environment is read once here; see .env.example for the variables.
    """
    settings = load_settings()
    log_dir = settings.logs_path / f"serve_{now()}" if settings.logs_path else None
    setup_logger(
        "serve",
        log_dir,
        level=settings.log_level,
        extra_provenance={"Chromium": settings.chromium_path},
    )

    host = host or settings.host
    port = port or settings.port

    typer.secho(f"\nServer running on port {port}", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Health check: http://localhost:{port}/")
    typer.echo(f"  PDF endpoint: http://localhost:{port}/generate-pdf\n")

    uvicorn.run(create_app(settings), host=host, port=port, log_level=settings.log_level.lower())


@app.command("inspect")
def inspect_command(
    pdf_file: Annotated[
        Path,
        typer.Argument(help="PDF to inspect", exists=True, dir_okay=False),
    ],
    text: Annotated[
        bool,
        typer.Option("--text", "-t", help="Also print the extracted text"),
    ] = False,
):
    """Show page count and page sizes of a rendered PDF."""
    pages = page_count(pdf_file)
    if pages is None:
        typer.secho(f"Error: cannot read {pdf_file} as PDF\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho(f"\n{pdf_file}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"  Pages: {pages}")
    for number, (width, height) in enumerate(page_sizes(pdf_file), 1):
        typer.echo(f"  Page {number}: {width} x {height} pt")

    if text:
        typer.echo("")
        typer.echo(extract_text(pdf_file))
    typer.echo("")


if __name__ == "__main__":
    app()
