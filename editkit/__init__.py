"""
EditKit - Declarative image editing with overlay compositing.

Applies an ordered set of edits to an image and returns the result as
base64. Besides the generic edits (resize, rotate, flip, blur, ...) it
supports:
- Watermarks sized as a percentage of the (resized) image
- Multi-image composites in a single pass
- Overlay rotation for portrait images and alpha dimming
- Local filesystem and HTTP overlay storage

Example usage:
    from pathlib import Path
    from editkit import ImageProcessor, LocalObjectFetcher

    processor = ImageProcessor(LocalObjectFetcher(Path("/srv/storage")))

    encoded = await processor.process(image_bytes, {
        "resize": {"width": 1200, "height": 800, "fit": "inside"},
        "watermark": {"bucket": "brand", "key": "logo.png", "wRatio": 25, "hRatio": 25, "alpha": 40},
    })
"""

from .processor import ImageProcessor, ProcessorConfig, create_fetcher
from .core.interfaces import (
    FitMode,
    ImageDimensions,
    OverlayDimensions,
    ResizeSpec,
    OverlaySpec,
    CompositeSpec,
    CompositeLayer,
    Edit,
    EditRequest,
    IObjectFetcher,
)
from .core.errors import (
    ImageHandlerError,
    FetchError,
    DecodeError,
    UnsupportedEditError,
    UnsupportedFormatError,
    EditError,
)
from .image import (
    RatioResizer,
    OpacityMask,
    OverlayResolver,
    EditPipeline,
    EditableImage,
)
from .storage import LocalObjectFetcher, HttpObjectFetcher

__version__ = "1.0.0"

__all__ = [
    # Main entry point
    "ImageProcessor",
    "ProcessorConfig",
    "create_fetcher",

    # Core types
    "FitMode",
    "ImageDimensions",
    "OverlayDimensions",
    "ResizeSpec",
    "OverlaySpec",
    "CompositeSpec",
    "CompositeLayer",
    "Edit",
    "EditRequest",
    "IObjectFetcher",

    # Errors
    "ImageHandlerError",
    "FetchError",
    "DecodeError",
    "UnsupportedEditError",
    "UnsupportedFormatError",
    "EditError",

    # Image editing
    "RatioResizer",
    "OpacityMask",
    "OverlayResolver",
    "EditPipeline",
    "EditableImage",

    # Storage
    "LocalObjectFetcher",
    "HttpObjectFetcher",
]
