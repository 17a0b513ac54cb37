"""
Overlay resolution: fetch, rotate, size and dim a secondary image.
"""
from io import BytesIO
from PIL import Image
import logging

from ..core.interfaces import (
    FitMode,
    IObjectFetcher,
    IOverlayResolver,
    ImageDimensions,
    OverlaySpec,
    ResizeSpec,
)
from ..core.errors import FetchError
from .opacity import OpacityMask
from .ratio import RatioResizer
from .transforms import resize_image

logger = logging.getLogger(__name__)


class OverlayResolver(IOverlayResolver):
    """
    Turns an OverlaySpec into PNG bytes ready for compositing.

    Example:
        resolver = OverlayResolver(LocalObjectFetcher("/srv/storage"))
        data = await resolver.resolve(spec, resized, original, FitMode.INSIDE)
    """

    def __init__(self, fetcher: IObjectFetcher):
        self.fetcher = fetcher
        self.ratio_resizer = RatioResizer()

    async def resolve(
        self,
        spec: OverlaySpec,
        resized: ImageDimensions,
        original: ImageDimensions,
        fit: FitMode
    ) -> bytes:
        """
        Fetch and prepare one overlay.

        Args:
            spec: Overlay location, ratios, rotation and alpha
            resized: Primary image dimensions after the resize edit
            original: Primary image dimensions as decoded
            fit: INSIDE for a standalone watermark, COVER for composite members

        Returns:
            PNG encoded overlay

        Raises:
            FetchError: on any fetch or decode failure
        """
        try:
            data = await self.fetcher.fetch(spec.bucket, spec.key)

            logger.debug(f"width:{resized.width} / height:{resized.height}")
            degrees = 90 if spec.rotate and original.is_portrait else 0
            logger.debug(f"rotate:{spec.rotate} -> {degrees} degrees")

            dimensions = self.ratio_resizer.calculate(
                original.width, original.height,
                resized.width, resized.height,
                spec.w_ratio, spec.h_ratio
            )
            resize = ResizeSpec(fit=fit, width=dimensions.width, height=dimensions.height)

            with Image.open(BytesIO(data)) as img:
                overlay = img.convert("RGBA")

            if degrees:
                overlay = overlay.rotate(-degrees, expand=True)
            overlay = resize_image(overlay, resize)
            overlay = OpacityMask.apply(overlay, spec.alpha)

            buffer = BytesIO()
            overlay.save(buffer, format="PNG")
            return buffer.getvalue()

        except FetchError as e:
            logger.error(f"Error fetching overlay {spec.bucket}/{spec.key}: {e}")
            raise
        except Exception as e:
            logger.error(f"Error preparing overlay {spec.bucket}/{spec.key}: {e}")
            raise FetchError.from_exception(e) from e
