"""
Adaptive local thresholding and blending.

The binary mask marks pixels brighter than their Gaussian-weighted
neighborhood. It is either used as-is or mixed back into the image to
sharpen tag outlines while keeping the original structure.
"""

from fractions import Fraction
from math import lcm

import cv2
import numpy as np

from config import (
    THRESHOLD_BLOCK_SIZE,
    THRESHOLD_OFFSET,
    THRESHOLD_MAX_VALUE,
    BLEND_WEIGHT_ORIGINAL,
    BLEND_WEIGHT_THRESHOLD,
)


def adaptive_threshold_mask(
    img: np.ndarray,
    block_size: int = THRESHOLD_BLOCK_SIZE,
    offset: float = THRESHOLD_OFFSET,
) -> np.ndarray:
    """Binarize an image against its Gaussian-weighted local mean.

    Args:
        img: Grayscale image as a 2D uint8 array.
        block_size: Odd neighborhood size in pixels.
        offset: Constant subtracted from the local mean.

    Returns:
        Mask with the input's shape and values in {0, 255}.
    """
    return cv2.adaptiveThreshold(
        img,
        THRESHOLD_MAX_VALUE,
        cv2.ADAPTIVE_THRESH_GAUSSIAN_C,
        cv2.THRESH_BINARY,
        block_size,
        offset,
    )


def blend_with_mask(
    img: np.ndarray,
    mask: np.ndarray,
    weight_original: float = BLEND_WEIGHT_ORIGINAL,
    weight_threshold: float = BLEND_WEIGHT_THRESHOLD,
) -> np.ndarray:
    """Return round(weight_original * img + weight_threshold * mask) as uint8.

    Weights are taken as exact decimals (0.7 is 7/10) and the weighted sum is
    formed in integers, so halfway values such as 0.7 * 45 = 31.5 stay exactly
    halfway before rounding. Halves round to even, as in cv2.addWeighted.
    """
    w_original = Fraction(str(weight_original))
    w_threshold = Fraction(str(weight_threshold))
    denominator = lcm(w_original.denominator, w_threshold.denominator)
    numerator = (
        int(w_original * denominator) * img.astype(np.int64)
        + int(w_threshold * denominator) * mask.astype(np.int64)
    )
    return np.clip(np.rint(numerator / denominator), 0, 255).astype(np.uint8)


def adaptive_threshold(
    img: np.ndarray,
    binary_output: bool = False,
    block_size: int = THRESHOLD_BLOCK_SIZE,
    weight_original: float = BLEND_WEIGHT_ORIGINAL,
    weight_threshold: float = BLEND_WEIGHT_THRESHOLD,
) -> np.ndarray:
    """Threshold an image, returning either the mask or a blend with it.

    Pure function: the input array is not modified.
    """
    mask = adaptive_threshold_mask(img, block_size)
    if binary_output:
        return mask
    return blend_with_mask(img, mask, weight_original, weight_threshold)
