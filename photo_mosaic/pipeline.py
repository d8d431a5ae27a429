"""End-to-end run: source -> grid -> catalog -> composite -> JPEG."""

from __future__ import annotations

import logging
import time

from photo_mosaic.catalog import build_catalog, list_tile_candidates
from photo_mosaic.compositor import MosaicResult, compose_mosaic, compute_grid
from photo_mosaic.config import MosaicConfig
from photo_mosaic.errors import OutputWriteError, SourceImageError
from photo_mosaic.image_io import load_image, save_jpeg

logger = logging.getLogger(__name__)


def run_mosaic(cfg: MosaicConfig) -> MosaicResult:
    """Build the mosaic described by *cfg* and write it to ``cfg.output_path``.

    Phases run strictly in order: the catalog is complete before the first
    cell is painted, and the canvas is complete before it is saved.

    Raises:
        SourceImageError: the source cannot be opened or decoded.
        GridDimensionError: ``cfg.tiles_per_edge`` is too large for the source.
        TileDirectoryError: ``cfg.tile_dir`` cannot be listed.
        EmptyCatalogError: no usable tiles were found.
        OutputWriteError: the output file cannot be written.
    """
    try:
        source = load_image(cfg.image_path)
    except OSError as exc:
        msg = f"Cannot read source image {cfg.image_path}: {exc}"
        raise SourceImageError(msg) from exc

    h, w = source.shape[:2]
    grid = compute_grid(w, h, cfg.tiles_per_edge)
    logger.info(
        "Source %dx%d  |  cell %dx%d  |  %d tiles per edge",
        w, h, grid.cell_width, grid.cell_height, cfg.tiles_per_edge,
    )

    t0 = time.perf_counter()
    candidates = list_tile_candidates(cfg.tile_dir)
    catalog = build_catalog(
        candidates, cfg.tile_dir, grid.cell_width,
        aggregation=cfg.aggregation,
        max_workers=cfg.max_workers,
    )
    t_catalog = time.perf_counter() - t0

    t0 = time.perf_counter()
    result = compose_mosaic(
        source, catalog, grid,
        canvas_strategy=cfg.canvas_strategy,
        sampling=cfg.sampling,
        max_workers=cfg.max_workers,
    )
    t_composite = time.perf_counter() - t0

    t0 = time.perf_counter()
    try:
        save_jpeg(result.canvas, cfg.output_path, cfg.jpeg_quality)
    except OSError as exc:
        msg = f"Cannot write mosaic to {cfg.output_path}: {exc}"
        raise OutputWriteError(msg) from exc
    logger.info("Saved %s (quality %d)", cfg.output_path, cfg.jpeg_quality)

    result.timings = {
        "catalog": t_catalog,
        "composite": t_composite,
        "save": time.perf_counter() - t0,
    }
    return result
