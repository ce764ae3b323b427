"""
Image decode/encode helpers.

Images are read as single-channel 8-bit buffers and written back in the
format implied by the output file extension.
"""

from __future__ import annotations

import logging
from pathlib import Path

import cv2
import numpy as np

from .errors import ImageReadError, ImageWriteError

logger = logging.getLogger(__name__)


def read_image(path: Path | str) -> np.ndarray:
    """Decode an image file into a grayscale uint8 buffer.

    Raises:
        ImageReadError: If OpenCV cannot decode the file.
    """
    img = cv2.imread(str(path), cv2.IMREAD_GRAYSCALE)
    if img is None:
        raise ImageReadError(path)
    logger.debug("Read %s (%dx%d)", path, img.shape[1], img.shape[0])
    return img


def write_image(img: np.ndarray, path: Path | str) -> Path:
    """Encode a buffer and write it to path.

    Returns:
        The path that was written.

    Raises:
        ImageWriteError: If encoding fails or the file cannot be written.
    """
    path = Path(path)
    try:
        written = cv2.imwrite(str(path), img)
    except cv2.error as exc:
        raise ImageWriteError(path, str(exc)) from exc
    if not written:
        raise ImageWriteError(path)
    logger.debug("Wrote %s", path)
    return path
