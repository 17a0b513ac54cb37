"""
Image editing module for editkit.
"""
from .ratio import RatioResizer, parse_percentage
from .opacity import OpacityMask
from .orientation import OrientationFixer
from .editable import EditableImage
from .overlay import OverlayResolver
from .pipeline import EditPipeline
from .transforms import TRANSFORMS, resize_image

__all__ = [
    'RatioResizer',
    'parse_percentage',
    'OpacityMask',
    'OrientationFixer',
    'EditableImage',
    'OverlayResolver',
    'EditPipeline',
    'TRANSFORMS',
    'resize_image',
]
