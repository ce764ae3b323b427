"""
Tiled local contrast normalization.

Wraps OpenCV's CLAHE so that tiles are expressed in pixels (the tag size)
rather than as a tile count. OpenCV splits the image into a fixed number of
tiles, so the image is first extended to a whole number of tiles and the
result is cropped back.
"""

import math

import cv2
import numpy as np

from config import TAG_SIZE, CLAHE_CLIP_LIMIT


def tile_grid_for(shape: tuple[int, ...], tile_size: tuple[int, int]) -> tuple[int, int]:
    """Return the CLAHE grid (columns, rows) covering shape with tile_size tiles.

    A partial tile at the right or bottom edge counts as a whole tile; the
    image is padded up to it before equalization.
    """
    rows, cols = shape[:2]
    tile_width, tile_height = tile_size
    return (
        max(1, math.ceil(cols / tile_width)),
        max(1, math.ceil(rows / tile_height)),
    )


def equalize_tiles(
    img: np.ndarray,
    tile_size: tuple[int, int] = TAG_SIZE,
    clip_limit: float = CLAHE_CLIP_LIMIT,
) -> np.ndarray:
    """Apply contrast-limited adaptive histogram equalization per tile.

    Each tile_size tile gets its own equalization mapping, clipped at
    `clip_limit` so near-uniform tiles are not blown up into noise. Mappings
    are bilinearly interpolated between tile centers, which avoids seams at
    tile edges.

    When the image is not a whole number of tiles, it is extended on the
    right and bottom by reflection (BORDER_REFLECT_101) and the extension is
    cropped from the result.

    Pure function: returns a new array with the same shape as the input.

    Args:
        img: Grayscale image as a 2D uint8 array.
        tile_size: (width, height) of a tile in pixels.
        clip_limit: Contrast limit passed to CLAHE.

    Returns:
        Contrast-normalized image.
    """
    rows, cols = img.shape[:2]
    tile_width, tile_height = tile_size
    grid = tile_grid_for(img.shape, tile_size)
    pad_right = grid[0] * tile_width - cols
    pad_bottom = grid[1] * tile_height - rows

    padded = img
    if pad_right or pad_bottom:
        padded = cv2.copyMakeBorder(
            img, 0, pad_bottom, 0, pad_right, cv2.BORDER_REFLECT_101
        )

    clahe = cv2.createCLAHE(clipLimit=clip_limit, tileGridSize=grid)
    equalized = clahe.apply(padded)
    return np.ascontiguousarray(equalized[:rows, :cols])
