"""
Ordered application of an edit request to an image.
"""
from typing import Any, Mapping, Union
import logging

from ..core.interfaces import (
    CompositeLayer,
    CompositeSpec,
    Edit,
    EditRequest,
    FitMode,
    IOverlayResolver,
    ImageDimensions,
    OverlaySpec,
)
from ..core.errors import EditError, ImageHandlerError, UnsupportedEditError
from .editable import EditableImage
from .transforms import TRANSFORMS

logger = logging.getLogger(__name__)


class EditPipeline:
    """
    Applies edits in order to a decoded image.

    ``watermark`` and ``composite`` edits are resolved through the overlay
    resolver and produce exactly one compositing call each; every other
    name is looked up in the transform table.
    """

    def __init__(
        self,
        resolver: IOverlayResolver,
        default_fit: FitMode = FitMode.INSIDE,
        quality: int = 90,
        progressive: bool = True
    ):
        self.resolver = resolver
        self.default_fit = default_fit
        self.quality = quality
        self.progressive = progressive

    def prepare(self, edits: Union[EditRequest, Mapping[str, Any]]) -> EditRequest:
        """The effective request: edits plus a default resize when none is given."""
        return EditRequest.coerce(edits).with_default_resize(self.default_fit)

    async def apply(self, original: bytes, edits: Union[EditRequest, Mapping[str, Any]]) -> EditableImage:
        """
        Apply edits to the original image bytes.

        Returns:
            The edited, not yet encoded image
        """
        request = self.prepare(edits)
        image = EditableImage.decode(original, quality=self.quality, progressive=self.progressive)
        metadata = image.metadata()
        logger.info(f"Applying {len(request)} edits to {metadata.width}x{metadata.height} image: {request.names}")

        for edit in request:
            if edit.name == "watermark":
                await self._apply_watermark(image, edit, request, metadata)
            elif edit.name == "composite":
                await self._apply_composite(image, edit, request, metadata)
            else:
                self._apply_transform(image, edit)

        return image

    def _resized_metadata(self, image: EditableImage, request: EditRequest, metadata: ImageDimensions) -> ImageDimensions:
        try:
            resize = request.resize
        except (TypeError, ValueError) as e:
            raise EditError(f"Invalid resize parameters: {e}")
        if resize is None:
            return metadata
        return image.probe_resize(resize)

    async def _apply_watermark(
        self,
        image: EditableImage,
        edit: Edit,
        request: EditRequest,
        metadata: ImageDimensions
    ) -> None:
        resized = self._resized_metadata(image, request, metadata)
        spec = self._overlay_spec(edit, OverlaySpec.from_dict)
        overlay = await self.resolver.resolve(spec, resized, metadata, FitMode.INSIDE)
        image.composite([CompositeLayer.from_overlay(spec, overlay)])

    async def _apply_composite(
        self,
        image: EditableImage,
        edit: Edit,
        request: EditRequest,
        metadata: ImageDimensions
    ) -> None:
        resized = self._resized_metadata(image, request, metadata)
        composite = self._overlay_spec(edit, CompositeSpec.from_dict)

        layers = []
        for spec in composite.images:
            overlay = await self.resolver.resolve(spec, resized, metadata, FitMode.COVER)
            layers.append(CompositeLayer.from_overlay(spec, overlay))
        image.composite(layers)

    @staticmethod
    def _overlay_spec(edit: Edit, parse):
        try:
            return parse(edit.params)
        except (TypeError, ValueError) as e:
            raise EditError(f"Invalid {edit.name} parameters: {e}")

    @staticmethod
    def _apply_transform(image: EditableImage, edit: Edit) -> None:
        transform = TRANSFORMS.get(edit.name)
        if transform is None:
            raise UnsupportedEditError(f"Unsupported edit: {edit.name}")
        try:
            image.apply(transform, edit.params)
        except ImageHandlerError:
            raise
        except (TypeError, ValueError, KeyError, OSError) as e:
            logger.error(f"Error applying {edit.name}: {e}")
            raise EditError(f"Could not apply {edit.name}: {e}")
