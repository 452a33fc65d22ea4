"""
CLI for mdcopy image embedding.

Commands:
- resolve: Resolve image references to embeddable data
- info: Show effective image settings
"""

from enum import Enum
from pathlib import Path

import httpx
import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from .config import resolve_base_dir, settings, warn_inert_optimization
from .images import EmbeddedImage, FailurePolicy, ImageCache, ImageError, ImagePolicy
from .logging import level_from_verbosity, setup_logging

app = typer.Typer(
    name="mdcopy",
    help="Resolve and embed images for markdown conversion",
)
console = Console()
err_console = Console(stderr=True)


class OutputFormat(str, Enum):
    """How resolved images are printed."""

    DATA_URL = "data-url"
    RTF_HEX = "rtf-hex"
    SUMMARY = "summary"


def _pick(specific: bool | None, shorthand: bool | None, default: bool) -> bool:
    """Specific flag beats the shorthand, which beats the configured default."""
    if specific is not None:
        return specific
    if shorthand is not None:
        return shorthand
    return default


def _render(image: EmbeddedImage | None, reference: str, output_format: OutputFormat) -> str:
    if image is None:
        return reference
    if output_format is OutputFormat.RTF_HEX:
        return image.to_rtf_hex()
    return image.to_data_url()


@app.callback()
def main(
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Increase logging verbosity"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress all output except errors"),
):
    """mdcopy - embed local and remote images into converted documents."""
    log_level = level_from_verbosity(verbose, quiet) if verbose or quiet else settings.log_level
    setup_logging(level=log_level, json_output=settings.log_json)
    logger.debug("CLI initialized with log level: {}", log_level)


@app.command()
def resolve(
    references: list[str] = typer.Argument(..., help="Image references (paths or URLs)"),
    root: Path | None = typer.Option(
        None, "--root", "-r", help="Directory for resolving relative image paths (default: cwd)"
    ),
    embed: bool | None = typer.Option(
        None, "--embed/--no-embed", "-e/-E", help="Embed all images (local and remote)"
    ),
    embed_local: bool | None = typer.Option(
        None, "--embed-local/--no-embed-local", help="Embed local images"
    ),
    embed_remote: bool | None = typer.Option(
        None, "--embed-remote/--no-embed-remote", help="Embed remote images"
    ),
    optimize: bool | None = typer.Option(
        None, "--optimize/--no-optimize", "-z/-Z", help="Optimize all embedded images"
    ),
    optimize_local: bool | None = typer.Option(
        None, "--optimize-local/--no-optimize-local", help="Optimize local images"
    ),
    optimize_remote: bool | None = typer.Option(
        None, "--optimize-remote/--no-optimize-remote", help="Optimize remote images"
    ),
    max_dimension: int | None = typer.Option(
        None, "--max-dimension", min=1, help="Max image dimension in pixels"
    ),
    quality: int | None = typer.Option(None, "--quality", min=1, max=100, help="JPEG quality 1-100"),
    strict: bool | None = typer.Option(
        None, "--strict/--no-strict", "-s/-S", help="Fail on errors instead of falling back"
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.DATA_URL, "--format", "-f", help="Output format"
    ),
):
    """Resolve image references and print them as embeddable data."""
    policy = ImagePolicy(
        embed_local=_pick(embed_local, embed, settings.embed_local),
        embed_remote=_pick(embed_remote, embed, settings.embed_remote),
        optimize_local=_pick(optimize_local, optimize, settings.optimize_local),
        optimize_remote=_pick(optimize_remote, optimize, settings.optimize_remote),
        max_dimension=max_dimension or settings.image_max_dimension,
        quality=quality or settings.image_quality,
    )
    failure = FailurePolicy.from_strict(strict) if strict is not None else settings.failure_policy
    base_dir = resolve_base_dir(None, root or settings.root_path)
    warn_inert_optimization(policy)
    logger.debug("Resolving {} references from {} with {}", len(references), base_dir, policy)

    results: list[tuple[str, EmbeddedImage | None]] = []
    with (
        httpx.Client(timeout=settings.image_fetch_timeout, follow_redirects=True) as client,
        ImageCache(client=client) as cache,
    ):
        for reference in references:
            try:
                image = cache.get_or_load(reference, base_dir, policy, failure)
            except ImageError as e:
                logger.error("{}", e)
                err_console.print(f"[red]Error: {e}[/]")
                raise typer.Exit(1)
            results.append((reference, image))

    if output_format is OutputFormat.SUMMARY:
        table = Table(title="Resolved Images")
        table.add_column("Reference", style="cyan")
        table.add_column("Status", style="green")
        table.add_column("MIME Type")
        table.add_column("Bytes", justify="right")
        for reference, image in results:
            if image is None:
                table.add_row(reference, "[yellow]not embedded[/]", "-", "-")
            else:
                table.add_row(reference, "embedded", image.mime_type, str(len(image.data)))
        console.print(table)
        return

    # Plain echo: rich would wrap long data URLs
    for reference, image in results:
        typer.echo(_render(image, reference, output_format))


@app.command()
def info():
    """Show the effective image settings."""
    logger.debug("Displaying configuration")
    console.print("[bold blue]mdcopy Configuration[/]")

    policy = settings.image_policy()
    table = Table(title="Image Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Root", settings.root or "(input directory or cwd)")
    table.add_row("Strict", str(settings.strict))
    table.add_row("Embed Local", str(policy.embed_local))
    table.add_row("Embed Remote", str(policy.embed_remote))
    table.add_row("Optimize Local", str(policy.optimize_local))
    table.add_row("Optimize Remote", str(policy.optimize_remote))
    table.add_row("Max Dimension", f"{policy.max_dimension}px")
    table.add_row("Quality", str(policy.quality))
    table.add_row("Fetch Timeout", f"{settings.image_fetch_timeout}s")

    console.print(table)

    warn_inert_optimization(policy)


if __name__ == "__main__":
    app()
