"""
Overlay sizing relative to the primary image.
"""
import re
from typing import Any, Optional

from ..core.interfaces import OverlayDimensions

ZERO_TO_HUNDRED = re.compile(r"^(100|[1-9]?[0-9])$")


def parse_percentage(value: Any) -> Optional[int]:
    """Return value as an int if it is a whole number from 0 to 100, else None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value)
    if not ZERO_TO_HUNDRED.match(text):
        return None
    return int(text)


class RatioResizer:
    """Computes overlay dimensions as percentages of the primary image."""

    @staticmethod
    def calculate(
        base_width: int,
        base_height: int,
        resized_width: int,
        resized_height: int,
        w_ratio: Any,
        h_ratio: Any
    ) -> OverlayDimensions:
        """
        Compute the overlay target size.

        Orientation comes from the base (original) image while the scaling
        reference is the resized image. On a portrait base the ratios follow
        the long/short axes, so the width ratio drives the overlay height and
        the height ratio drives the overlay width.

        Args:
            base_width: Original image width
            base_height: Original image height
            resized_width: Width of the image after the resize edit
            resized_height: Height of the image after the resize edit
            w_ratio: Width percentage (0-100)
            h_ratio: Height percentage (0-100)

        Returns:
            OverlayDimensions, unset when either ratio is invalid
        """
        w = parse_percentage(w_ratio)
        h = parse_percentage(h_ratio)
        if w is None or h is None:
            return OverlayDimensions()

        if base_height > base_width:
            return OverlayDimensions(
                width=int(resized_height * h / 100),
                height=int(resized_width * w / 100),
            )
        return OverlayDimensions(
            width=int(resized_width * w / 100),
            height=int(resized_height * h / 100),
        )
