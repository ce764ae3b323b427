"""
Border padding by edge replication.

Tags close to the image edge would otherwise be cut off by the tagger's
sliding window, so every image gets half a tag of margin on each side.
"""

import cv2
import numpy as np

from config import TAG_SIZE


def pad_border(
    img: np.ndarray,
    tag_size: tuple[int, int] = TAG_SIZE,
) -> np.ndarray:
    """Pad an image by half a tag on every side.

    Pure function: returns a new array without modifying the input.

    Each margin pixel copies the nearest pixel of the edge on its own side.
    Sides are replicated in isolation, so corner regions hold the corner
    pixel and never mix values from two edges.

    The input must be a non-empty image; this is not checked.

    Args:
        img: Grayscale image as a 2D uint8 array.
        tag_size: (width, height) of a tag. The margin is half of each.

    Returns:
        Padded image of shape (rows + tag_height, cols + tag_width).

    Examples:
        >>> img = np.zeros((100, 200), dtype=np.uint8)
        >>> pad_border(img, (64, 64)).shape
        (164, 264)
    """
    tag_width, tag_height = tag_size
    margin_y = tag_height // 2
    margin_x = tag_width // 2
    return cv2.copyMakeBorder(
        img,
        margin_y, margin_y,
        margin_x, margin_x,
        cv2.BORDER_REPLICATE | cv2.BORDER_ISOLATED,
    )
