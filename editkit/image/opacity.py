"""
Uniform overlay dimming with a tiled destination-in mask.
"""
from typing import Any
from PIL import Image
import numpy as np

from .ratio import parse_percentage


class OpacityMask:
    """Builds and applies the 1x1 RGBA opacity tile."""

    @staticmethod
    def mask_alpha(alpha: Any) -> int:
        """Alpha channel value of the tile; invalid alpha counts as 0."""
        percent = parse_percentage(alpha) or 0
        return int(255 * (1 - percent / 100))

    @classmethod
    def build(cls, alpha: Any) -> Image.Image:
        """Single opaque-white pixel carrying the scaled alpha."""
        return Image.new("RGBA", (1, 1), (255, 255, 255, cls.mask_alpha(alpha)))

    @classmethod
    def apply(cls, image: Image.Image, alpha: Any) -> Image.Image:
        """
        Tile the mask over the whole image and blend destination-in.

        The result keeps the image colours and multiplies its alpha channel
        by the mask alpha, so alpha=0 is a no-op and alpha=100 is fully
        transparent.
        """
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        tile = np.asarray(cls.build(alpha), dtype=np.uint16)
        mask = np.tile(tile[..., 3], (rgba.height, rgba.width))

        pixels = np.array(rgba, dtype=np.uint16)
        pixels[..., 3] = (pixels[..., 3] * mask + 127) // 255
        return Image.fromarray(pixels.astype(np.uint8))
