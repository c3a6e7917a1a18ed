"""
Image encoding.

Turns the renderer's flat linear color buffer into an 8-bit RGB image:
clamp to [0, 1], gamma 2 (square root), quantize, and flip vertically so
that buffer row 0 ends up at the bottom of the picture.
"""

from __future__ import annotations
from pathlib import Path
from typing import Union
import numpy as np
from PIL import Image as PILImage


class ImageWriteError(Exception):
    """Error while writing an image file."""
    pass


def to_ldr(colors: np.ndarray, width: int, height: int) -> np.ndarray:
    """Convert a linear color buffer to an 8-bit image.

    Args:
        colors: Array of shape (width * height, 3), bottom row first
        width: Image width
        height: Image height

    Returns:
        uint8 array of shape (height, width, 3), top row first
    """
    colors = np.asarray(colors, dtype=np.float64)
    if colors.shape != (width * height, 3):
        raise ValueError(
            f"Expected a color buffer of shape {(width * height, 3)}, got {colors.shape}"
        )

    image = colors.reshape(height, width, 3)[::-1]
    corrected = np.sqrt(np.clip(np.nan_to_num(image, nan=0.0), 0.0, 1.0))
    return (corrected * 255).astype(np.uint8)


def write_image(filename: Union[str, Path], width: int, height: int, colors: np.ndarray) -> None:
    """Encode a linear color buffer and save it (format from the extension).

    Raises:
        ImageWriteError: If the file could not be written
    """
    ldr = to_ldr(colors, width, height)
    try:
        PILImage.fromarray(ldr).save(str(filename))
    except (OSError, ValueError) as exc:
        raise ImageWriteError(f"Could not write image {filename}: {exc}") from exc
