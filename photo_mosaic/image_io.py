"""Image loading, resampling and JPEG saving."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image


def compute_target_size(
    original_width: int,
    original_height: int,
    target_width: int,
) -> tuple[int, int]:
    """Compute resized (w, h) for a fixed width, preserving aspect ratio.

    The height is scaled proportionally (rounded to the nearest integer,
    minimum 1).
    """
    h = max(1, round(original_height * target_width / original_width))
    return target_width, h


def load_image(path: str | Path) -> np.ndarray:
    """Decode an image file.

    Raises:
        OSError: the file is missing, Pillow cannot identify / decode it,
            or its declared size exceeds Pillow's decompression-bomb limit.

    Returns:
        (H, W, 3) uint8 array.
    """
    try:
        with Image.open(path) as img:
            return np.array(img.convert("RGB"), dtype=np.uint8)
    except Image.DecompressionBombError as exc:
        raise OSError(f"{path}: {exc}") from exc


def resize_to_width(pixels: np.ndarray, target_width: int) -> np.ndarray:
    """Lanczos-resample *pixels* to *target_width*, keeping the aspect ratio.

    Returns:
        (h, target_width, 3) uint8 array.
    """
    img = Image.fromarray(pixels.astype(np.uint8))
    w, h = compute_target_size(img.width, img.height, target_width)
    img = img.resize((w, h), Image.LANCZOS)
    return np.array(img, dtype=np.uint8)


def save_jpeg(
    array: np.ndarray,
    path: str | Path,
    quality: int = 80,
) -> None:
    """Encode *array* as a JPEG at *quality*."""
    img = Image.fromarray(array.astype(np.uint8))
    img.save(path, format="JPEG", quality=quality)
