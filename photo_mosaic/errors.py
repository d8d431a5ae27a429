"""Exceptions raised by the mosaic pipeline."""

from __future__ import annotations


class MosaicError(Exception):
    """Base class for fatal pipeline errors."""


class SourceImageError(MosaicError):
    """The source image could not be opened or decoded."""


class TileDirectoryError(MosaicError):
    """The tile directory could not be listed."""


class GridDimensionError(MosaicError, ValueError):
    """Tile count is too large for the image: a cell would be empty."""


class EmptyCatalogError(MosaicError):
    """No candidate tile survived filtering and decoding."""


class OutputWriteError(MosaicError):
    """The finished mosaic could not be written."""
