"""Region colour averaging and RGB distance computation."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import numpy as np


def _clip_region(
    pixels: np.ndarray,
    x_min: int,
    y_min: int,
    x_max: int,
    y_max: int,
) -> tuple[int, int, int, int]:
    h, w = pixels.shape[:2]
    x0, y0 = max(0, x_min), max(0, y_min)
    x1, y1 = min(w, x_max), min(h, y_max)
    if x1 <= x0 or y1 <= y0:
        msg = f"Empty region [{x_min},{x_max}) x [{y_min},{y_max}) in {w}x{h} image"
        raise ValueError(msg)
    return x0, y0, x1, y1


def average_color(
    pixels: np.ndarray,
    x_min: int = 0,
    y_min: int = 0,
    x_max: int | None = None,
    y_max: int | None = None,
) -> np.ndarray:
    """Mean RGB of the half-open region ``[x_min, x_max) x [y_min, y_max)``.

    The region is clipped to the array bounds; omitted maxima mean the full
    extent. Samples are averaged at their native depth.

    Args:
        pixels: (H, W, 3) array.

    Returns:
        (3,) float64 channel means.

    Raises:
        ValueError: the clipped region holds no pixels.
    """
    h, w = pixels.shape[:2]
    x0, y0, x1, y1 = _clip_region(
        pixels, x_min, y_min,
        w if x_max is None else x_max,
        h if y_max is None else y_max,
    )
    region = pixels[y0:y1, x0:x1, :3].astype(np.float64)
    return region.reshape(-1, 3).mean(axis=0)


def average_color_chunked(
    pixels: np.ndarray,
    x_min: int = 0,
    y_min: int = 0,
    x_max: int | None = None,
    y_max: int | None = None,
    chunks: int = 4,
    max_workers: int | None = None,
) -> np.ndarray:
    """Same as :func:`average_color`, summed in parallel row bands.

    Each band's channel sums are computed on a thread pool and reduced
    before dividing by the total pixel count.
    """
    h, w = pixels.shape[:2]
    x0, y0, x1, y1 = _clip_region(
        pixels, x_min, y_min,
        w if x_max is None else x_max,
        h if y_max is None else y_max,
    )
    bounds = np.linspace(y0, y1, max(1, chunks) + 1).astype(int)
    bands = [(a, b) for a, b in zip(bounds[:-1], bounds[1:], strict=False) if b > a]

    def _band_sum(band: tuple[int, int]) -> np.ndarray:
        a, b = band
        return pixels[a:b, x0:x1, :3].astype(np.float64).reshape(-1, 3).sum(axis=0)

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        partials = list(pool.map(_band_sum, bands))

    n = (x1 - x0) * (y1 - y0)
    return np.sum(partials, axis=0) / n


def corner_color(pixels: np.ndarray, x: int, y: int) -> np.ndarray:
    """Colour of the single pixel at (x, y) as (3,) float64."""
    return pixels[y, x, :3].astype(np.float64)


def rgb_distances(query: np.ndarray, colors: np.ndarray) -> np.ndarray:
    """Euclidean distance from one query colour to each row of *colors*.

    Args:
        query:  (3,) RGB.
        colors: (N, 3) RGB.

    Returns:
        (N,) float64 distances.
    """
    diff = colors.astype(np.float64) - np.asarray(query, dtype=np.float64)[np.newaxis, :]
    return np.sqrt(np.sum(diff ** 2, axis=1))
