"""Convert pipeline buffers into displayable images.

Presentation code (viewers, notebooks, labeling tools) uses this to show a
buffer. The preprocessing pipeline itself never calls it.
"""

from __future__ import annotations

import logging

import cv2
import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


def to_display_image(buffer: np.ndarray) -> Image.Image:
    """Convert an OpenCV-style uint8 buffer into a PIL image.

    Supported layouts:
        - 2D or (H, W, 1): grayscale, mode "L"
        - (H, W, 3): BGR, converted to mode "RGB"
        - (H, W, 4): BGRA, alpha dropped, mode "RGB"

    Args:
        buffer: Image buffer with dtype uint8.

    Returns:
        A PIL image that owns a copy of the pixel data.

    Raises:
        ValueError: If the buffer layout or dtype is not supported.
    """
    if buffer.dtype != np.uint8:
        raise ValueError(f"Expected uint8 buffer, got {buffer.dtype}")

    if buffer.ndim == 2:
        return Image.fromarray(buffer.copy())

    channels = buffer.shape[2] if buffer.ndim == 3 else None
    if channels == 1:
        return Image.fromarray(buffer[:, :, 0].copy())
    if channels == 3:
        return Image.fromarray(cv2.cvtColor(buffer, cv2.COLOR_BGR2RGB))
    if channels == 4:
        return Image.fromarray(cv2.cvtColor(buffer, cv2.COLOR_BGRA2RGB))

    logger.warning("Unsupported buffer layout for display: shape=%s", buffer.shape)
    raise ValueError(f"Unsupported buffer shape for display: {buffer.shape}")
