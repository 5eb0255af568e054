"""HeatSmith CLI application.

Commands:
    render  - Render a scalar grid to a heatmap image through a LUT image
    lut     - Build a LUT from a source image and report its statistics
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import numpy as np
import typer
from rich.console import Console
from rich.table import Table

from heatsmith import __version__
from heatsmith.config import DEFAULT_BACKEND, DEFAULT_LUT_RESOLUTION
from heatsmith.core.types import RenderConfig
from heatsmith.errors import HeatSmithError, RenderError

app = typer.Typer(
    name="heatsmith",
    help="Render scalar fields as color heatmaps through a 1D LUT image.",
    no_args_is_help=True,
)
console = Console()

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)


def version_callback(value: bool):
    if value:
        console.print(f"HeatSmith v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False, "--version", "-V", help="Show version and exit.",
        callback=version_callback, is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
):
    if verbose:
        logging.getLogger("heatsmith").setLevel(logging.DEBUG)


def _data_range(grid: np.ndarray) -> tuple[float, float]:
    """Finite min/max of a grid, widened when the grid is constant."""
    finite = grid[np.isfinite(grid)]
    if finite.size == 0:
        return 0.0, 1.0
    lo, hi = float(finite.min()), float(finite.max())
    if lo == hi:
        return lo - 0.5, hi + 0.5
    return lo, hi


def _render_pixels(renderer, grid: np.ndarray) -> np.ndarray:
    """Run the renderer, reporting backend failures as RenderError."""
    height, width = grid.shape
    try:
        return renderer.get_heatmap(grid, width, height)
    except HeatSmithError:
        raise
    except Exception as e:
        backend = renderer.config.backend.value
        raise RenderError(f"{backend} backend failed: {type(e).__name__}: {e}") from e


@app.command()
def render(
    data: Path = typer.Argument(..., help="Scalar grid (.npy, .csv, .txt)."),
    lut_image: Path = typer.Argument(..., help="LUT source image, 1 pixel high."),
    output: Path = typer.Option("heatmap.png", "-o", "--output", help="Output image path."),
    width: int = typer.Option(0, "-W", "--width", help="Output width (0 = input width)."),
    height: int = typer.Option(0, "-H", "--height", help="Output height (0 = input height)."),
    domain_min: Optional[float] = typer.Option(
        None, "--min", help="Value shown as the first LUT color (default: data min).",
    ),
    domain_max: Optional[float] = typer.Option(
        None, "--max", help="Value shown as the last LUT color (default: data max).",
    ),
    resolution: int = typer.Option(
        DEFAULT_LUT_RESOLUTION, "-r", "--resolution", help="Number of LUT entries.",
    ),
    backend: str = typer.Option(
        DEFAULT_BACKEND, "-b", "--backend", help="Backend (numpy, numba, scipy).",
    ),
    workers: int = typer.Option(1, "-j", "--workers", min=1, help="Threads per resampling pass."),
):
    """Render a scalar grid as a heatmap image."""
    from heatsmith.io.image import load_lut_image, load_scalar_grid, save_pixels
    from heatsmith.pipeline.renderer import HeatmapRenderer

    try:
        grid = load_scalar_grid(data)
        source = load_lut_image(lut_image)

        in_height, in_width = grid.shape
        lo, hi = _data_range(grid)
        config = RenderConfig(
            output_width=width or in_width,
            output_height=height or in_height,
            domain_min=lo if domain_min is None else domain_min,
            domain_max=hi if domain_max is None else domain_max,
            lut_resolution=resolution,
            backend=backend,
            workers=workers,
        )

        console.print(f"\n[bold]HeatSmith Render[/bold]")
        console.print(f"  Data:    {data} ({in_width}x{in_height})")
        console.print(f"  LUT:     {lut_image} ({source.shape[1]} px -> {resolution} entries)")
        console.print(f"  Output:  {config.output_width}x{config.output_height}")
        console.print(f"  Domain:  [{config.domain_min:g}, {config.domain_max:g}]")
        console.print(f"  Backend: {config.backend.value}")
        console.print()

        renderer = HeatmapRenderer(config, source)
        pixels = _render_pixels(renderer, grid)
        saved = save_pixels(pixels, output)
    except (HeatSmithError, FileNotFoundError, PermissionError) as e:
        console.print(f"\n[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    console.print(f"[green]Saved:[/green] {saved}\n")


@app.command()
def lut(
    lut_image: Path = typer.Argument(..., help="LUT source image, 1 pixel high."),
    resolution: int = typer.Option(
        DEFAULT_LUT_RESOLUTION, "-r", "--resolution", help="Number of LUT entries.",
    ),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Save the built LUT as a 1-pixel-high strip.",
    ),
):
    """Build a LUT from a source image and show its statistics."""
    from heatsmith.core.lut import build_lut, lut_stats, lut_to_image
    from heatsmith.io.image import load_lut_image, save_pixels

    try:
        source = load_lut_image(lut_image)
        table_lut = build_lut(source, resolution)
        if output is not None:
            save_pixels(lut_to_image(table_lut), output)
    except (HeatSmithError, FileNotFoundError, PermissionError) as e:
        console.print(f"\n[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    _print_lut_stats(lut_stats(table_lut))
    if output is not None:
        console.print(f"\n[green]Saved:[/green] {output}")
    console.print()


def _print_lut_stats(stats: dict):
    """Display LUT statistics in a formatted table."""
    table = Table(
        title=f"LUT Statistics ({stats['resolution']} entries)",
        show_header=True, header_style="bold",
    )
    table.add_column("Channel", style="cyan")
    table.add_column("First", justify="right")
    table.add_column("Last", justify="right")
    table.add_column("Min", justify="right")
    table.add_column("Max", justify="right")
    table.add_column("Mean", justify="right")
    table.add_column("Monotonic", justify="center")

    for ch, name in enumerate("RGBA"):
        table.add_row(
            name,
            str(stats["first"][ch]),
            str(stats["last"][ch]),
            str(stats["min_per_channel"][ch]),
            str(stats["max_per_channel"][ch]),
            f"{stats['mean_per_channel'][ch]:.1f}",
            "[green]Yes[/green]" if stats["monotonic_per_channel"][ch] else "[yellow]No[/yellow]",
        )

    console.print(table)


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
