"""Nearest-colour tile lookup by Euclidean RGB distance."""

from __future__ import annotations

import numpy as np

from photo_mosaic.catalog import Catalog
from photo_mosaic.color_utils import rgb_distances
from photo_mosaic.errors import EmptyCatalogError

REFERENCES = ("average", "corner")


def _reference_colors(catalog: Catalog, reference: str) -> np.ndarray:
    if reference not in REFERENCES:
        available = ", ".join(REFERENCES)
        msg = f"Unknown reference colour '{reference}'. Available: {available}"
        raise ValueError(msg)
    return catalog.corners if reference == "corner" else catalog.colors


def match_tile(
    query: np.ndarray,
    catalog: Catalog,
    reference: str = "average",
) -> str:
    """Return the id of the tile whose colour is nearest *query*.

    *reference* picks the tile colour compared against: its ``"average"``
    or its top-left ``"corner"`` pixel. Every tile is scanned (no spatial
    index). Equidistant tiles resolve to the lexically smallest id, since
    ``catalog.ids`` is sorted and ``argmin`` keeps the first minimum.

    Raises:
        ValueError: unknown *reference*.
        EmptyCatalogError: *catalog* holds no tiles.
    """
    colors = _reference_colors(catalog, reference)
    if len(catalog) == 0:
        msg = "Cannot match against an empty catalog"
        raise EmptyCatalogError(msg)
    distances = rgb_distances(query, colors)
    return catalog.ids[int(np.argmin(distances))]


def match_distance(
    query: np.ndarray,
    catalog: Catalog,
    tile_id: str,
    reference: str = "average",
) -> float:
    """Euclidean RGB distance between *query* and one catalog tile."""
    colors = _reference_colors(catalog, reference)
    row = colors[catalog.ids.index(tile_id)][np.newaxis, :]
    return float(rgb_distances(query, row)[0])
