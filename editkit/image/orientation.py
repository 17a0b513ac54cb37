"""
Image orientation correction using EXIF data.
Backs the argument-less rotate edit.
"""
from PIL import Image
import logging

logger = logging.getLogger(__name__)

ORIENTATION_TAG = 0x0112


class OrientationFixer:
    """Fixes image orientation based on EXIF metadata."""

    _TRANSFORMS = {
        2: lambda img: img.transpose(Image.Transpose.FLIP_LEFT_RIGHT),
        3: lambda img: img.rotate(180, expand=True),
        4: lambda img: img.transpose(Image.Transpose.FLIP_TOP_BOTTOM),
        5: lambda img: img.rotate(-90, expand=True).transpose(Image.Transpose.FLIP_LEFT_RIGHT),
        6: lambda img: img.rotate(-90, expand=True),
        7: lambda img: img.rotate(90, expand=True).transpose(Image.Transpose.FLIP_LEFT_RIGHT),
        8: lambda img: img.rotate(90, expand=True),
    }

    @classmethod
    def orientation(cls, img: Image.Image) -> int:
        """EXIF orientation value, 1 when absent or unreadable."""
        try:
            return int(img.getexif().get(ORIENTATION_TAG, 1))
        except Exception as e:
            logger.warning(f"Error reading EXIF orientation: {e}")
            return 1

    @classmethod
    def fix_pil_image(cls, img: Image.Image) -> Image.Image:
        """Return an upright copy of img according to its EXIF orientation."""
        transform = cls._TRANSFORMS.get(cls.orientation(img))
        if transform is None:
            return img
        return transform(img)
