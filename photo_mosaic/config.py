"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class MosaicConfig:
    """All tuneable parameters for a mosaic run.

    Attributes:
        image_path:      Source image to rebuild out of tiles.
        tiles_per_edge:  Number of cells along each edge of the source.
        tile_dir:        Folder scanned for candidate tile images.
        output_path:     Where the finished mosaic is written.
        jpeg_quality:    Encoder quality for the output JPEG.
        aggregation:     How catalog-build tasks publish their tiles -
                         "queue", "lock" or "sequential".
        canvas_strategy: How cell tasks write the canvas - "lock" or "partition".
        sampling:        Cell colour query - "average" or "corner".
        max_workers:     Thread pool size (None = executor default).
    """

    # Source & grid
    image_path: Path = field(default_factory=lambda: Path("origImage.jpg"))
    tiles_per_edge: int = 10

    # Tiles
    tile_dir: Path = field(default_factory=lambda: Path("images"))

    # Concurrency
    aggregation: str = "queue"  # "queue" | "lock" | "sequential"
    canvas_strategy: str = "lock"  # "lock" | "partition"
    max_workers: int | None = None

    # Matching
    sampling: str = "average"  # "average" | "corner"

    # Output
    output_path: Path = field(default_factory=lambda: Path("mosaic.jpg"))
    jpeg_quality: int = 80

    # Case-sensitive, matched as filename suffixes
    TILE_EXTENSIONS: tuple[str, ...] = (".jpg", ".JPG", ".jpeg", ".JPEG")
