"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import logging
import time
from pathlib import Path

import numpy as np
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from photo_mosaic.config import MosaicConfig
from photo_mosaic.errors import MosaicError
from photo_mosaic.image_io import load_image
from photo_mosaic.pipeline import run_mosaic

app = typer.Typer(
    name="photo-mosaic",
    help="Rebuild an image out of a folder of photos.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=True)],
    )


def _quality_metric(target: np.ndarray, mosaic: np.ndarray) -> float:
    t = target.reshape(-1, 3).astype(np.float64)
    m = mosaic.reshape(-1, 3).astype(np.float64)
    return float(np.mean(np.sqrt(np.sum((t - m) ** 2, axis=1))))


# Defaults come from MosaicConfig - single source of truth
_DEFAULTS = MosaicConfig()


@app.command()
def main(
    image: Path = typer.Option(
        _DEFAULTS.image_path, "--image", "-i", help="Source image path",
    ),
    tiles: int = typer.Option(
        _DEFAULTS.tiles_per_edge, "--tiles", "-t",
        help="Number of tiles along the image edge",
    ),
    tiles_dir: Path = typer.Option(
        _DEFAULTS.tile_dir, "--tiles-dir", "-d", help="Folder with tile photos",
    ),
    output: Path = typer.Option(
        _DEFAULTS.output_path, "--output", "-o", help="Mosaic output file",
    ),
    quality: int = typer.Option(
        _DEFAULTS.jpeg_quality, "--quality", "-q", help="JPEG quality (1-95)",
    ),
    aggregation: str = typer.Option(
        _DEFAULTS.aggregation, "--aggregation",
        help="'queue', 'lock' or 'sequential' tile indexing",
    ),
    canvas: str = typer.Option(
        _DEFAULTS.canvas_strategy, "--canvas",
        help="'lock' (serialised blits) or 'partition' (per-cell views)",
    ),
    sampling: str = typer.Option(
        _DEFAULTS.sampling, "--sampling",
        help="'average' cell colour or top-left 'corner' pixel",
    ),
    workers: int | None = typer.Option(
        _DEFAULTS.max_workers, "--workers", "-w", help="Thread pool size",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Turn IMAGE into a mosaic of the photos in TILES_DIR."""
    _setup_logging(verbose)

    cfg = MosaicConfig(
        image_path=image,
        tiles_per_edge=tiles,
        tile_dir=tiles_dir,
        output_path=output,
        jpeg_quality=quality,
        aggregation=aggregation,
        canvas_strategy=canvas,
        sampling=sampling,
        max_workers=workers,
    )

    console.print(Panel.fit(
        f"[bold]PHOTO MOSAIC[/bold]\n"
        f"Source: {cfg.image_path}  |  Tiles per edge: {cfg.tiles_per_edge}\n"
        f"Tiles: {cfg.tile_dir}/  |  Output: {cfg.output_path}\n"
        f"Indexing: {cfg.aggregation}  |  Canvas: {cfg.canvas_strategy}"
        f"  |  Sampling: {cfg.sampling}",
        border_style="cyan",
    ))

    t_total = time.perf_counter()
    try:
        result = run_mosaic(cfg)
    except (MosaicError, ValueError) as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(1) from exc

    err = _quality_metric(load_image(cfg.image_path), result.canvas)
    elapsed = time.perf_counter() - t_total
    rows, cols = result.grid.shape
    used = len(set(result.assignments.values()))

    console.print(
        f"[green]✓[/green] Saved to {cfg.output_path}  "
        f"[dim]{cols}x{rows} cells  tiles used={used}  error={err:.1f}"
        f"  time={elapsed:.1f}s[/dim]"
    )


if __name__ == "__main__":
    app()
