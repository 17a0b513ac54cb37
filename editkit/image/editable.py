"""
In-progress image handle.

Generic edits are applied eagerly in request order. Composite calls are
queued and flattened onto the image when it is rendered, after every
geometry edit, so overlays sized against the resized image land on the
resized image.
"""
from io import BytesIO
from typing import Any, Dict, List, Optional, Tuple
from PIL import Image, ImageChops, ImageFile, UnidentifiedImageError
import logging

from ..core.interfaces import CompositeLayer, ImageDimensions, ResizeSpec
from ..core.errors import DecodeError, EditError
from ..core.extensions import DEFAULT_FORMAT, OUTPUT_FORMATS, resolve_format, supports_alpha
from .transforms import has_alpha, resize_image

logger = logging.getLogger(__name__)

ImageFile.LOAD_TRUNCATED_IMAGES = True
Image.MAX_IMAGE_PIXELS = 1_000_000_000

GRAVITIES = {
    "centre": (0.5, 0.5),
    "center": (0.5, 0.5),
    "north": (0.5, 0.0),
    "northeast": (1.0, 0.0),
    "east": (1.0, 0.5),
    "southeast": (1.0, 1.0),
    "south": (0.5, 1.0),
    "southwest": (0.0, 1.0),
    "west": (0.0, 0.5),
    "northwest": (0.0, 0.0),
}

BLENDS = ("over", "dest-in")


def decode_image(data: bytes) -> Tuple[Image.Image, Optional[str]]:
    """
    Decode bytes permissively.

    Truncated or partially corrupt data is decoded as far as possible; only
    bytes that Pillow cannot identify at all raise DecodeError.
    """
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise DecodeError(f"Could not decode image: {e}")
    return img, img.format


class EditableImage:
    """Mutable handle around a Pillow image, finalized by to_buffer()."""

    def __init__(
        self,
        image: Image.Image,
        source_format: Optional[str] = None,
        quality: int = 90,
        progressive: bool = True
    ):
        self.image = image
        self.source_format = source_format
        self.quality = quality
        self.progressive = progressive
        self.output_format: Optional[str] = None
        self.output_options: Dict[str, Any] = {}
        self.composites: List[List[CompositeLayer]] = []

    @classmethod
    def decode(cls, data: bytes, **kwargs) -> "EditableImage":
        image, source_format = decode_image(data)
        return cls(image, source_format, **kwargs)

    def metadata(self) -> ImageDimensions:
        """Current pixel dimensions (composites never change them)."""
        return ImageDimensions(width=self.image.width, height=self.image.height)

    def apply(self, transform, params: Any) -> "EditableImage":
        self.image = transform(self.image, params)
        return self

    def probe_resize(self, spec: ResizeSpec) -> ImageDimensions:
        """Dimensions the current image would have after spec, without applying it."""
        probe = resize_image(self.image.copy(), spec)
        return ImageDimensions(width=probe.width, height=probe.height)

    def composite(self, layers: List[CompositeLayer]) -> "EditableImage":
        """Queue one compositing call with all of its layers."""
        for layer in layers:
            if layer.blend not in BLENDS:
                raise EditError(f"Unsupported blend mode: {layer.blend}")
        self.composites.append(list(layers))
        return self

    def to_format(self, name: str, **options) -> "EditableImage":
        self.output_format = resolve_format(name)
        self.output_options = options
        return self

    def render(self) -> Image.Image:
        """The image with every queued composite flattened onto it."""
        if not self.composites:
            return self.image

        base = self.image.convert("RGBA")
        for layers in self.composites:
            for layer in layers:
                base = self._composite_layer(base, layer)

        if has_alpha(self.image):
            return base
        return base.convert("RGB")

    def _composite_layer(self, base: Image.Image, layer: CompositeLayer) -> Image.Image:
        overlay, _ = decode_image(layer.input)
        overlay = overlay.convert("RGBA")

        if overlay.width > base.width or overlay.height > base.height:
            raise EditError(
                f"Image to composite must have same dimensions or smaller: "
                f"{overlay.width}x{overlay.height} over {base.width}x{base.height}",
                code="CompositeTooLarge"
            )

        left, top = self._position(base, overlay, layer)

        if layer.blend == "dest-in":
            mask = Image.new("L", base.size, 0)
            mask.paste(overlay.getchannel("A"), (left, top))
            result = base.copy()
            result.putalpha(ImageChops.multiply(base.getchannel("A"), mask))
            return result

        result = base.copy()
        result.alpha_composite(overlay, (left, top))
        return result

    @staticmethod
    def _position(base: Image.Image, overlay: Image.Image, layer: CompositeLayer) -> Tuple[int, int]:
        if layer.top is not None and layer.left is not None:
            return int(layer.left), int(layer.top)
        try:
            fx, fy = GRAVITIES[str(layer.gravity).lower()]
        except KeyError:
            raise EditError(f"Unsupported gravity: {layer.gravity}")
        return int((base.width - overlay.width) * fx), int((base.height - overlay.height) * fy)

    def _pil_format(self) -> str:
        if self.output_format:
            return self.output_format
        return OUTPUT_FORMATS.get(str(self.source_format).lower(), DEFAULT_FORMAT)

    def _prepare_for_jpeg(self, img: Image.Image) -> Image.Image:
        """Convert image to RGB mode for JPEG saving."""
        if img.mode in ("RGBA", "LA"):
            background = Image.new("RGB", img.size, (255, 255, 255))
            alpha = img.split()[-1]
            background.paste(img.convert("RGB"), mask=alpha)
            return background
        if img.mode not in ("RGB", "L"):
            return img.convert("RGB")
        return img

    def to_buffer(self) -> bytes:
        """Render and encode the image."""
        img = self.render()
        pil_format = self._pil_format()
        options = dict(self.output_options)
        buffer = BytesIO()

        if pil_format == "JPEG":
            img = self._prepare_for_jpeg(img)
            options.setdefault("quality", self.quality)
            options.setdefault("optimize", True)
            options.setdefault("progressive", self.progressive)
        elif pil_format == "WEBP":
            options.setdefault("quality", self.quality)
        elif not supports_alpha(pil_format) and has_alpha(img):
            img = img.convert("RGB")

        img.save(buffer, format=pil_format, **options)
        logger.debug(f"Encoded {img.width}x{img.height} image as {pil_format}")
        return buffer.getvalue()

