"""
Photo Mosaic Generator
======================

Rebuild a source image out of a folder of photos. The source is cut
into a grid; every cell is replaced by the photo whose average colour
is nearest in RGB. Two concurrent phases:

- **Catalog** - decode, resize and average every candidate tile
- **Composite** - match each cell and paint its tile onto the canvas
"""

__version__ = "1.0.0"

from photo_mosaic.catalog import (
    Catalog,
    Tile,
    build_catalog,
    is_tile_filename,
    list_tile_candidates,
    load_tile,
)
from photo_mosaic.color_utils import average_color, average_color_chunked
from photo_mosaic.compositor import (
    Grid,
    MosaicResult,
    blit,
    compose_mosaic,
    compute_grid,
)
from photo_mosaic.config import MosaicConfig
from photo_mosaic.errors import (
    EmptyCatalogError,
    GridDimensionError,
    MosaicError,
    OutputWriteError,
    SourceImageError,
    TileDirectoryError,
)
from photo_mosaic.matcher import match_distance, match_tile
from photo_mosaic.pipeline import run_mosaic

__all__ = [
    "Catalog",
    "EmptyCatalogError",
    "Grid",
    "GridDimensionError",
    "MosaicConfig",
    "MosaicError",
    "MosaicResult",
    "OutputWriteError",
    "SourceImageError",
    "Tile",
    "TileDirectoryError",
    "average_color",
    "average_color_chunked",
    "blit",
    "build_catalog",
    "compose_mosaic",
    "compute_grid",
    "is_tile_filename",
    "list_tile_candidates",
    "load_tile",
    "match_distance",
    "match_tile",
    "run_mosaic",
]
