"""
Command-line interface for the texture optimiser.
Hosts a one-off optimisation run and configuration inspection.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
import typer
from rich.console import Console
from rich.table import Table

from .config import OptimiserConfig
from .pipeline import ConfigurationError, RunSummary, TextureOptimiser

# Initialize typer app and rich console
app = typer.Typer(
    name="texture-optimiser",
    help="Texture optimiser for product packs - Downscale oversized textures and icons, keeping backups",
    add_completion=False,
    rich_markup_mode="rich",
    epilog="""
[bold]Examples:[/bold]
  [cyan]python scripts/optimise_textures.py run plugins/MoreProducts[/cyan]                 Optimise all packs
  [cyan]python scripts/optimise_textures.py run packs --backup-dir backups[/cyan]          Custom backup location
  [cyan]TEXTURE_OPTIMISER_MAX_WORKERS=2 python scripts/optimise_textures.py run packs[/cyan]  Limit threads

[bold]Environment Variables:[/bold]
  Use [cyan]python scripts/optimise_textures.py config --env-vars[/cyan] to see all available variables.
    """
)
console = Console()


@app.command()
def run(
    root_dir: Path = typer.Argument(..., help="Directory containing the product packs"),
    backup_dir: Optional[Path] = typer.Option(None, "--backup-dir", "-b", help="Backup directory (default: sibling of root)"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Threads per asset batch (default: CPU count)"),
    keep_first_backup: bool = typer.Option(False, "--keep-first-backup", help="Never overwrite an existing backup"),
    atomic: bool = typer.Option(True, "--atomic/--no-atomic", help="Write resized images through a temporary file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose log output"),
    show_summary: bool = typer.Option(True, "--summary/--no-summary", help="Show execution summary")
):
    """Downscale oversized textures of every product pack under ROOT_DIR."""
    _setup_logging(verbose)

    try:
        config = OptimiserConfig.default()
    except ValueError as e:
        console.print(f"[red]Error reading configuration:[/red] {e}")
        raise typer.Exit(1)

    if workers is not None:
        config.max_workers = workers
    if keep_first_backup:
        config.backup_policy = "keep_first"
    config.atomic_writes = atomic

    console.print(f"[bold blue]Optimising textures in {root_dir}...[/bold blue]")

    try:
        optimiser = TextureOptimiser(config)
        summary = optimiser.run(root_dir, backup_dir)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)

    if summary.failed_packs:
        console.print(f"[yellow]Completed with {len(summary.failed_packs)} failed pack(s)[/yellow]")
        for pack in summary.failed_packs:
            console.print(f"  [red]✗[/red] {pack.relative_path}: {pack.error}")
    else:
        console.print("[green]✓ Texture optimisation completed successfully![/green]")

    if show_summary:
        _display_run_summary(summary)


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    validate_config: bool = typer.Option(False, "--validate", help="Validate configuration"),
    env_vars: bool = typer.Option(False, "--env-vars", help="Show available environment variables")
):
    """Inspect optimiser configuration."""
    if env_vars:
        _display_env_vars()
        return

    if not show and not validate_config:
        console.print("Use --show to display configuration, --validate to check it, or --env-vars to see environment variables.")
        return

    try:
        current = OptimiserConfig.default()
    except ValueError as e:
        console.print(f"[red]Error reading configuration:[/red] {e}")
        raise typer.Exit(1)

    if show:
        _display_config(current)

    if validate_config:
        errors = current.validate()
        if errors:
            console.print("[red]Configuration validation errors:[/red]")
            for error in errors:
                console.print(f"  • {error}")
            raise typer.Exit(1)
        console.print("[green]✓ Configuration is valid[/green]")


@app.command()
def version():
    """Show texture optimiser version information."""
    from . import __version__

    console.print("[bold]Texture Optimiser for product packs[/bold]")
    console.print(f"Version: {__version__}")
    console.print("Python: " + sys.version.split()[0])

    from importlib import metadata

    table = Table(show_header=False)
    table.add_column("Status", width=3)
    table.add_column("Package", style="cyan")
    table.add_column("Version", style="green")

    for name in ("Pillow", "typer", "rich"):
        try:
            table.add_row("[green]✓[/green]", name, metadata.version(name))
        except metadata.PackageNotFoundError:
            table.add_row("[red]✗[/red]", name, "Not installed")

    console.print("\n[bold]Dependencies:[/bold]")
    console.print(table)


def _setup_logging(verbose: bool = False) -> logging.Logger:
    """Set up logging for the optimiser."""
    logger = logging.getLogger("texture_optimiser")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def _display_run_summary(summary: RunSummary) -> None:
    """Display optimisation run summary."""
    console.print("\n[bold]Texture Optimisation Summary[/bold]")
    console.print("=" * 50)

    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Total execution time", f"{summary.duration_ms} ms")
    table.add_row("Directories scanned", str(summary.directories_scanned))
    table.add_row("Packs processed", str(len(summary.packs)))
    table.add_row("Packs failed", str(len(summary.failed_packs)))
    table.add_row("Products", str(summary.product_count))
    table.add_row("Textures", str(summary.texture_count))
    table.add_row("Resized textures", str(summary.resized_texture_count))
    table.add_row("Failed textures", str(summary.failed_texture_count))
    table.add_row("Backup directory", summary.backup_dir)

    console.print(table)

    if summary.packs:
        console.print("\n[bold]Pack Details[/bold]")
        pack_table = Table()
        pack_table.add_column("Pack", style="cyan")
        pack_table.add_column("Status", width=8)
        pack_table.add_column("Products", justify="right")
        pack_table.add_column("Textures", justify="right")
        pack_table.add_column("Resized", justify="right", style="yellow")
        pack_table.add_column("Max scale", justify="right", style="dim")

        for pack in summary.packs:
            status = "[red]✗[/red]" if pack.failed else "[green]✓[/green]"
            pack_table.add_row(
                pack.relative_path,
                status,
                str(pack.product_count),
                str(pack.texture_count),
                str(pack.resized_texture_count),
                str(pack.object_scale) if pack.object_scale else "-"
            )

        console.print(pack_table)


def _display_config(config: OptimiserConfig) -> None:
    """Display configuration in a formatted table."""
    table = Table(title="Texture Optimiser Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    # Pack layout
    table.add_row("Metadata File", config.metadata_filename)
    table.add_row("Textures Directory", config.textures_dir_name)
    table.add_row("Icons Directory", config.icons_dir_name)
    table.add_row("Backup Directory Name", config.backup_dir_name)

    # Sizing
    table.add_row("Max Icon Size", str(config.max_icon_size))
    table.add_row("Base Texture Size", str(config.base_texture_size))
    table.add_row("Surface Size Factor", str(config.surface_size_factor))

    # Output settings
    table.add_row("JPEG Quality", str(config.jpeg_quality))
    table.add_row("Resample", config.resample)
    table.add_row("Atomic Writes", str(config.atomic_writes))
    table.add_row("Backup Policy", config.backup_policy)

    # Concurrency
    table.add_row("Workers", str(config.worker_count))

    console.print(table)


def _display_env_vars() -> None:
    """Display available environment variables for configuration."""
    table = Table(title="Texture Optimiser Environment Variables")
    table.add_column("Environment Variable", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Example", style="green")

    env_vars = [
        ("TEXTURE_OPTIMISER_MAX_ICON_SIZE", "Longest side allowed for product icons", "512"),
        ("TEXTURE_OPTIMISER_BASE_TEXTURE_SIZE", "Minimum object texture cap", "1024"),
        ("TEXTURE_OPTIMISER_SURFACE_SIZE_FACTOR", "Box surface size per texture size step", "1000"),
        ("TEXTURE_OPTIMISER_JPEG_QUALITY", "JPEG encoder quality (1-100)", "90"),
        ("TEXTURE_OPTIMISER_RESAMPLE", "Resampling filter", "lanczos"),
        ("TEXTURE_OPTIMISER_ATOMIC_WRITES", "Write through a temporary file (true/false)", "true"),
        ("TEXTURE_OPTIMISER_BACKUP_POLICY", "overwrite or keep_first", "overwrite"),
        ("TEXTURE_OPTIMISER_BACKUP_DIR_NAME", "Backup directory created next to the root", "backup_textures"),
        ("TEXTURE_OPTIMISER_MAX_WORKERS", "Threads per asset batch", "8"),
    ]

    for var_name, description, example in env_vars:
        table.add_row(var_name, description, example)

    console.print(table)
    console.print("\n[dim]Set these environment variables to override the defaults.[/dim]")
    console.print("[dim]Example: export TEXTURE_OPTIMISER_MAX_WORKERS=4[/dim]")


if __name__ == "__main__":
    app()
