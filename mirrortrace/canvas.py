"""
Pixel sinks the renderer writes into.

The renderer only needs ``set_pixel(x, y, color)``. ImageCanvas keeps an
HDR float buffer and converts to 8-bit on demand.
"""

from __future__ import annotations
from typing import Protocol
import logging

import numpy as np

from .vec3 import Color

logger = logging.getLogger(__name__)


class PixelSink(Protocol):
    """Anything that accepts colored pixels."""

    def set_pixel(self, x: int, y: int, color: Color) -> None:
        ...


class ImageCanvas:
    """A width x height HDR image buffer.

    Writes outside the grid are ignored. Colors are stored unclamped;
    clamping happens when converting to a displayable format.
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width, 3), dtype=np.float64)

    def set_pixel(self, x: int, y: int, color: Color) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            self.pixels[y, x] = (color.r, color.g, color.b)

    def get_pixel(self, x: int, y: int) -> Color:
        return Color(*self.pixels[y, x])

    def to_ldr(self) -> np.ndarray:
        """Convert to an 8-bit RGB array.

        Each channel is clamped to [0, 1] and scaled by 255 (truncating).
        """
        return (np.clip(self.pixels, 0.0, 1.0) * 255.0).astype(np.uint8)

    def save(self, filename: str) -> None:
        """Save the image; the extension selects the format."""
        from PIL import Image as PILImage

        pil_image = PILImage.fromarray(self.to_ldr(), 'RGB')
        pil_image.save(filename)
        logger.info("Saved %dx%d image to %s", self.width, self.height, filename)
