"""Tile catalog: scan, decode, resize and average candidate tile images."""

from __future__ import annotations

import logging
import queue
import threading
import time
from collections.abc import Iterable, Iterator, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from photo_mosaic.color_utils import average_color, corner_color
from photo_mosaic.config import MosaicConfig
from photo_mosaic.errors import EmptyCatalogError, TileDirectoryError
from photo_mosaic.image_io import load_image, resize_to_width

logger = logging.getLogger(__name__)

AGGREGATIONS = ("queue", "lock", "sequential")


@dataclass(frozen=True, eq=False)
class Tile:
    """A candidate image prepared for compositing.

    Attributes:
        tile_id:       Source filename.
        average_color: (3,) float64 mean RGB of *bitmap*.
        bitmap:        (h, cell_width, 3) uint8 resized pixels.
        origin:        Read origin inside *bitmap* when blitting.
        corner_color:  (3,) float64 top-left pixel of the decoded image,
                       matched in corner sampling (None = *average_color*).
    """

    tile_id: str
    average_color: np.ndarray
    bitmap: np.ndarray
    origin: tuple[int, int] = (0, 0)
    corner_color: np.ndarray | None = None


@dataclass(frozen=True, eq=False)
class Catalog(Mapping[str, Tile]):
    """Read-only mapping of tile id to :class:`Tile`.

    ``ids`` is lexically sorted; ``colors`` and ``corners`` hold the
    matching average and top-left colours row by row, so lookups never
    depend on dict ordering.
    """

    _tiles: dict[str, Tile] = field(default_factory=dict)
    ids: tuple[str, ...] = field(init=False)
    colors: np.ndarray = field(init=False)
    corners: np.ndarray = field(init=False)

    def __post_init__(self) -> None:
        ids = tuple(sorted(self._tiles))
        tiles = [self._tiles[i] for i in ids]
        colors = np.array(
            [t.average_color for t in tiles], dtype=np.float64,
        ).reshape(-1, 3)
        corners = np.array(
            [t.average_color if t.corner_color is None else t.corner_color
             for t in tiles],
            dtype=np.float64,
        ).reshape(-1, 3)
        colors.setflags(write=False)
        corners.setflags(write=False)
        object.__setattr__(self, "ids", ids)
        object.__setattr__(self, "colors", colors)
        object.__setattr__(self, "corners", corners)

    def __getitem__(self, tile_id: str) -> Tile:
        return self._tiles[tile_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self.ids)

    def __len__(self) -> int:
        return len(self._tiles)


def is_tile_filename(
    name: str,
    extensions: Iterable[str] = MosaicConfig.TILE_EXTENSIONS,
) -> bool:
    """True when *name* ends with an accepted (case-sensitive) extension."""
    return name.endswith(tuple(extensions))


def list_tile_candidates(tile_dir: str | Path) -> list[str]:
    """Sorted names of the regular files in *tile_dir*.

    Raises:
        TileDirectoryError: the directory cannot be listed.
    """
    folder = Path(tile_dir)
    try:
        return sorted(f.name for f in folder.iterdir() if f.is_file())
    except OSError as exc:
        msg = f"Cannot list tile directory {folder}: {exc}"
        raise TileDirectoryError(msg) from exc


def load_tile(
    tile_dir: str | Path,
    filename: str,
    cell_width: int,
) -> Tile | None:
    """Build one :class:`Tile`, or ``None`` when the candidate is unusable.

    Names failing :func:`is_tile_filename` and files that cannot be opened
    or decoded are skipped without raising.
    """
    if not is_tile_filename(filename):
        logger.debug("Skipping %s: not a JPEG filename", filename)
        return None

    try:
        pixels = load_image(Path(tile_dir) / filename)
    except OSError as exc:
        logger.warning("Skipping %s: %s", filename, exc)
        return None

    scaled = resize_to_width(pixels, cell_width)
    scaled.setflags(write=False)
    return Tile(
        tile_id=filename,
        average_color=average_color(scaled),
        bitmap=scaled,
        corner_color=corner_color(pixels, 0, 0),
    )


def build_catalog(
    filenames: Iterable[str],
    tile_dir: str | Path,
    cell_width: int,
    aggregation: str = "queue",
    max_workers: int | None = None,
) -> Catalog:
    """Load every candidate concurrently and return the finished catalog.

    One task runs per candidate; the catalog is assembled only after all
    tasks have finished.

    Args:
        filenames:   Candidate names inside *tile_dir*.
        tile_dir:    Folder holding the candidates.
        cell_width:  Width every tile bitmap is resized to.
        aggregation: ``"queue"`` - tasks post results to a queue drained
            after the join; ``"lock"`` - tasks insert into a shared dict
            under a lock; ``"sequential"`` - no worker threads.
        max_workers: Thread pool size.

    Raises:
        ValueError: unknown *aggregation*.
        EmptyCatalogError: no candidate produced a tile.
    """
    if aggregation not in AGGREGATIONS:
        available = ", ".join(AGGREGATIONS)
        msg = f"Unknown aggregation '{aggregation}'. Available: {available}"
        raise ValueError(msg)

    names = list(filenames)
    logger.info("Indexing %d candidate tiles (%s) …", len(names), aggregation)
    t0 = time.perf_counter()

    if aggregation == "sequential":
        tiles = _build_sequential(names, tile_dir, cell_width)
    elif aggregation == "lock":
        tiles = _build_locked(names, tile_dir, cell_width, max_workers)
    else:
        tiles = _build_queued(names, tile_dir, cell_width, max_workers)

    logger.info(
        "Catalog ready: %d tiles  (%.2f s)", len(tiles), time.perf_counter() - t0,
    )
    if not tiles:
        msg = f"No usable tile images in {tile_dir}"
        raise EmptyCatalogError(msg)
    return Catalog(tiles)


# -- Aggregation strategies --------------------------------------------


def _build_sequential(
    names: list[str], tile_dir: str | Path, cell_width: int,
) -> dict[str, Tile]:
    tiles: dict[str, Tile] = {}
    for name in names:
        tile = load_tile(tile_dir, name, cell_width)
        if tile is not None:
            tiles[name] = tile
    return tiles


def _build_locked(
    names: list[str],
    tile_dir: str | Path,
    cell_width: int,
    max_workers: int | None,
) -> dict[str, Tile]:
    tiles: dict[str, Tile] = {}
    lock = threading.Lock()

    def _task(name: str) -> None:
        tile = load_tile(tile_dir, name, cell_width)
        if tile is None:
            return
        with lock:
            tiles[name] = tile

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        # list() re-raises any unexpected task failure
        list(pool.map(_task, names))
    return tiles


def _build_queued(
    names: list[str],
    tile_dir: str | Path,
    cell_width: int,
    max_workers: int | None,
) -> dict[str, Tile]:
    messages: queue.Queue[tuple[str, Tile]] = queue.Queue()

    def _task(name: str) -> None:
        tile = load_tile(tile_dir, name, cell_width)
        if tile is not None:
            messages.put((name, tile))

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        list(pool.map(_task, names))

    # Single consumer, after every producer has finished
    tiles: dict[str, Tile] = {}
    while not messages.empty():
        name, tile = messages.get_nowait()
        tiles[name] = tile
    return tiles
