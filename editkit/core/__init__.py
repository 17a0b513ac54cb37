"""
Core module - Interfaces, data types and errors for editkit.
"""
from .interfaces import (
    # Enums
    FitMode,

    # Data classes
    ImageDimensions,
    OverlayDimensions,
    ResizeSpec,
    OverlaySpec,
    CompositeSpec,
    CompositeLayer,
    Edit,
    EditRequest,

    # Abstract interfaces
    IObjectFetcher,
    IOverlayResolver,
    IImageProcessor,
)
from .errors import (
    ImageHandlerError,
    FetchError,
    DecodeError,
    UnsupportedEditError,
    UnsupportedFormatError,
    EditError,
)

__all__ = [
    # Enums
    "FitMode",

    # Data classes
    "ImageDimensions",
    "OverlayDimensions",
    "ResizeSpec",
    "OverlaySpec",
    "CompositeSpec",
    "CompositeLayer",
    "Edit",
    "EditRequest",

    # Abstract interfaces
    "IObjectFetcher",
    "IOverlayResolver",
    "IImageProcessor",

    # Errors
    "ImageHandlerError",
    "FetchError",
    "DecodeError",
    "UnsupportedEditError",
    "UnsupportedFormatError",
    "EditError",
]
