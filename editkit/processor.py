"""
ImageProcessor - Main entry point for applying edits to an image.
Orchestrates the edit pipeline, format conversion and encoding.
"""
from pathlib import Path
from typing import Any, Mapping, Optional, Union
from dataclasses import dataclass
import asyncio
import base64
import logging
import os

from .core.interfaces import EditRequest, FitMode, IImageProcessor, IObjectFetcher
from .image.overlay import OverlayResolver
from .image.pipeline import EditPipeline
from .storage import HttpObjectFetcher, LocalObjectFetcher

logger = logging.getLogger(__name__)


@dataclass
class ProcessorConfig:
    """Configuration for image processing."""
    quality: int = 90
    progressive: bool = True
    default_fit: FitMode = FitMode.INSIDE
    storage_backend: str = "local"
    storage_root: str = "./storage"
    storage_url: str = ""
    fetch_timeout: float = 30.0

    def __post_init__(self):
        if not isinstance(self.default_fit, FitMode):
            self.default_fit = FitMode(self.default_fit)
        self.storage_backend = self.storage_backend.lower()

    @classmethod
    def from_env(cls) -> "ProcessorConfig":
        """
        Build configuration from environment variables.

        Environment variables:
            EDITKIT_QUALITY: JPEG/WebP quality (default 90)
            EDITKIT_STORAGE_BACKEND: 'local' (default) or 'http'
            EDITKIT_STORAGE_ROOT: Root directory for the local backend
            EDITKIT_STORAGE_URL: Base URL for the http backend
            EDITKIT_FETCH_TIMEOUT: Overlay fetch timeout in seconds
        """
        return cls(
            quality=int(os.getenv("EDITKIT_QUALITY", "90")),
            storage_backend=os.getenv("EDITKIT_STORAGE_BACKEND", "local"),
            storage_root=os.getenv("EDITKIT_STORAGE_ROOT", "./storage"),
            storage_url=os.getenv("EDITKIT_STORAGE_URL", ""),
            fetch_timeout=float(os.getenv("EDITKIT_FETCH_TIMEOUT", "30")),
        )


def create_fetcher(config: ProcessorConfig) -> IObjectFetcher:
    """Build the overlay fetcher selected by config."""
    if config.storage_backend == "http":
        if not config.storage_url:
            raise ValueError("storage_url is required for the http storage backend")
        return HttpObjectFetcher(config.storage_url, timeout=config.fetch_timeout)
    if config.storage_backend == "local":
        return LocalObjectFetcher(Path(config.storage_root))
    raise ValueError(f"Unknown storage backend: {config.storage_backend}")


class ImageProcessor(IImageProcessor):
    """
    Main entry point for image edits.

    Example:
        processor = ImageProcessor(LocalObjectFetcher(Path("/srv/overlays")))

        encoded = await processor.process(
            image_bytes,
            {"resize": {"width": 800}, "watermark": {"bucket": "logos", "key": "mark.png", "wRatio": 20, "hRatio": 20}},
            output_format="webp",
        )
    """

    def __init__(self, fetcher: Optional[IObjectFetcher] = None, config: Optional[ProcessorConfig] = None):
        self.config = config or ProcessorConfig()
        self.fetcher = fetcher or create_fetcher(self.config)
        self.resolver = OverlayResolver(self.fetcher)
        self.pipeline = EditPipeline(
            self.resolver,
            default_fit=self.config.default_fit,
            quality=self.config.quality,
            progressive=self.config.progressive,
        )

    async def process(
        self,
        image: bytes,
        edits: Optional[Union[EditRequest, Mapping[str, Any]]] = None,
        output_format: Optional[str] = None
    ) -> str:
        """
        Apply edits to image and return the result base64 encoded.

        Args:
            image: Original image bytes
            edits: Ordered edits; None returns the original bytes untouched
            output_format: Optional output format name (jpeg, png, webp, ...)

        Returns:
            Base64 string of the final image
        """
        if edits is None:
            return base64.b64encode(image).decode("ascii")

        modified = await self.pipeline.apply(image, edits)
        if output_format is not None:
            modified.to_format(output_format)

        buffer = modified.to_buffer()
        logger.info(f"Processed image: {len(image)} -> {len(buffer)} bytes")
        return base64.b64encode(buffer).decode("ascii")

    def process_sync(
        self,
        image: bytes,
        edits: Optional[Union[EditRequest, Mapping[str, Any]]] = None,
        output_format: Optional[str] = None
    ) -> str:
        """Process synchronously."""
        return asyncio.run(self.process(image, edits, output_format))
