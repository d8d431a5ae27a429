"""Grid geometry and concurrent cell compositing."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

import numpy as np

from photo_mosaic.catalog import Catalog
from photo_mosaic.color_utils import average_color, corner_color
from photo_mosaic.errors import EmptyCatalogError, GridDimensionError
from photo_mosaic.matcher import match_tile

logger = logging.getLogger(__name__)

CANVAS_STRATEGIES = ("lock", "partition")
SAMPLING_MODES = ("average", "corner")

Rect = tuple[int, int, int, int]  # x0, y0, x1, y1 (half-open)


@dataclass(frozen=True)
class Grid:
    """Cell layout over a ``width x height`` image."""

    width: int
    height: int
    cell_width: int
    cell_height: int

    def cells(self) -> Iterator[Rect]:
        """Yield each cell rectangle, row by row.

        Trailing cells are clipped to the image, so rectangles never
        overlap and never leave ``[0, width) x [0, height)``.
        """
        for y in range(0, self.height, self.cell_height):
            for x in range(0, self.width, self.cell_width):
                yield (
                    x, y,
                    min(x + self.cell_width, self.width),
                    min(y + self.cell_height, self.height),
                )

    @property
    def shape(self) -> tuple[int, int]:
        """(rows, cols) of cells, including clipped trailing ones."""
        rows = -(-self.height // self.cell_height)
        cols = -(-self.width // self.cell_width)
        return rows, cols


def compute_grid(width: int, height: int, tiles_per_edge: int) -> Grid:
    """Split an image into *tiles_per_edge* cells along each edge.

    Raises:
        GridDimensionError: either cell dimension would be <= 0.
    """
    if tiles_per_edge <= 0:
        msg = f"tiles_per_edge must be > 0, got {tiles_per_edge}"
        raise GridDimensionError(msg)
    cell_w = width // tiles_per_edge
    cell_h = height // tiles_per_edge
    if cell_w <= 0 or cell_h <= 0:
        msg = (
            f"Cell size {cell_w}x{cell_h} for a {width}x{height} image with "
            f"{tiles_per_edge} tiles per edge: both must be > 0"
        )
        raise GridDimensionError(msg)
    return Grid(width, height, cell_w, cell_h)


def blit(
    dest: np.ndarray,
    dest_rect: Rect,
    src: np.ndarray,
    src_origin: tuple[int, int] = (0, 0),
) -> None:
    """Copy *src* (read from *src_origin*) into *dest_rect* of *dest*.

    The rectangle is clipped to *dest* and to what *src* can supply;
    nothing outside *dest* is touched.
    """
    x0, y0, x1, y1 = dest_rect
    sx, sy = src_origin
    dh, dw = dest.shape[:2]
    sh, sw = src.shape[:2]

    # Clip the top-left against dest, shifting the read origin with it
    if x0 < 0:
        sx -= x0
        x0 = 0
    if y0 < 0:
        sy -= y0
        y0 = 0
    x1 = min(x1, dw, x0 + sw - sx)
    y1 = min(y1, dh, y0 + sh - sy)
    if x1 <= x0 or y1 <= y0:
        return
    dest[y0:y1, x0:x1] = src[sy:sy + (y1 - y0), sx:sx + (x1 - x0), :3]


@dataclass
class MosaicResult:
    """Finished canvas plus what was placed where.

    Attributes:
        canvas:      (H, W, 3) uint8 output pixels.
        grid:        The cell layout used.
        assignments: Cell top-left (x, y) -> chosen tile id.
        timings:     Phase name -> wall-clock seconds.
    """

    canvas: np.ndarray
    grid: Grid
    assignments: dict[tuple[int, int], str] = field(default_factory=dict)
    timings: dict[str, float] = field(default_factory=dict)


def compose_mosaic(
    source: np.ndarray,
    catalog: Catalog,
    grid: Grid,
    canvas_strategy: str = "lock",
    sampling: str = "average",
    max_workers: int | None = None,
) -> MosaicResult:
    """Paint every grid cell with its nearest-colour tile.

    One task per cell samples the source, matches a tile and blits it.
    Source and catalog are shared read-only. Returns after all cell tasks
    have finished; a failing task re-raises here.

    Args:
        source:          (H, W, 3) uint8 source pixels.
        catalog:         Finished tile catalog.
        grid:            Layout from :func:`compute_grid`.
        canvas_strategy: ``"lock"`` - one lock serialises every blit;
            ``"partition"`` - each task writes only its own cell view.
        sampling:        ``"average"`` - mean colour of the cell;
            ``"corner"`` - the cell's top-left pixel, matched against
            each tile's top-left pixel.
        max_workers:     Thread pool size.

    Raises:
        ValueError: unknown strategy or sampling mode.
        EmptyCatalogError: *catalog* holds no tiles.
    """
    if canvas_strategy not in CANVAS_STRATEGIES:
        available = ", ".join(CANVAS_STRATEGIES)
        msg = f"Unknown canvas strategy '{canvas_strategy}'. Available: {available}"
        raise ValueError(msg)
    if sampling not in SAMPLING_MODES:
        available = ", ".join(SAMPLING_MODES)
        msg = f"Unknown sampling mode '{sampling}'. Available: {available}"
        raise ValueError(msg)
    if len(catalog) == 0:
        msg = "Cannot composite with an empty catalog"
        raise EmptyCatalogError(msg)

    canvas = np.zeros((grid.height, grid.width, 3), dtype=np.uint8)
    canvas_lock = threading.Lock()
    assignments: dict[tuple[int, int], str] = {}

    def _paint(cell: Rect) -> tuple[tuple[int, int], str]:
        x0, y0, x1, y1 = cell
        if sampling == "corner":
            query = corner_color(source, x0, y0)
        else:
            query = average_color(source, x0, y0, x1, y1)
        tile = catalog[match_tile(query, catalog, reference=sampling)]

        if canvas_strategy == "partition":
            view = canvas[y0:y1, x0:x1]
            blit(view, (0, 0, x1 - x0, y1 - y0), tile.bitmap, tile.origin)
        else:
            with canvas_lock:
                blit(canvas, cell, tile.bitmap, tile.origin)
        return (x0, y0), tile.tile_id

    rows, cols = grid.shape
    logger.info(
        "Compositing %dx%d cells of %dx%d px (%s canvas, %s sampling) …",
        cols, rows, grid.cell_width, grid.cell_height, canvas_strategy, sampling,
    )
    t0 = time.perf_counter()
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        for origin, tile_id in pool.map(_paint, grid.cells()):
            assignments[origin] = tile_id
    logger.info("Mosaic composited  (%.2f s)", time.perf_counter() - t0)

    return MosaicResult(canvas=canvas, grid=grid, assignments=assignments)
