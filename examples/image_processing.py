"""
Example: Watermarking and compositing with EditKit

This example demonstrates how to:
- Apply a resize and a watermark in one request
- Composite several overlays onto one image
- Handle structured errors
"""
import asyncio
import base64
from pathlib import Path

from editkit import (
    ImageHandlerError,
    ImageProcessor,
    LocalObjectFetcher,
)


async def watermark(processor: ImageProcessor, image: bytes) -> bytes:
    """Resize to 1200px wide and stamp a dimmed logo in the corner."""
    edits = {
        "resize": {"width": 1200, "fit": "inside"},
        "watermark": {
            "bucket": "brand",
            "key": "logo.png",
            "wRatio": 20,
            "hRatio": 20,
            "alpha": 40,
            "gravity": "southeast",
        },
    }
    encoded = await processor.process(image, edits, output_format="jpeg")
    return base64.b64decode(encoded)


async def product_sheet(processor: ImageProcessor, image: bytes) -> bytes:
    """Place two product shots, rotated on portrait backgrounds."""
    edits = {
        "composite": {
            "images": [
                {"bucket": "products", "key": "front.png", "wRatio": 40, "hRatio": 40, "rotate": True, "gravity": "west"},
                {"bucket": "products", "key": "back.png", "wRatio": 40, "hRatio": 40, "rotate": True, "gravity": "east"},
            ]
        }
    }
    encoded = await processor.process(image, edits, output_format="png")
    return base64.b64decode(encoded)


async def main(storage_root: Path, image_path: Path):
    processor = ImageProcessor(LocalObjectFetcher(storage_root))
    image = image_path.read_bytes()

    try:
        marked = await watermark(processor, image)
        image_path.with_name(f"{image_path.stem}_watermarked.jpg").write_bytes(marked)
        print(f"Watermarked: {len(marked)} bytes")

        sheet = await product_sheet(processor, image)
        image_path.with_name(f"{image_path.stem}_sheet.png").write_bytes(sheet)
        print(f"Product sheet: {len(sheet)} bytes")
    except ImageHandlerError as e:
        print(f"Failed: {e.to_dict()}")


if __name__ == "__main__":
    import sys

    if len(sys.argv) < 3:
        print("Usage: python image_processing.py <storage_root> <image_path>")
        sys.exit(1)

    image_path = Path(sys.argv[2])
    if not image_path.exists():
        print(f"Image not found: {image_path}")
        sys.exit(1)

    asyncio.run(main(Path(sys.argv[1]), image_path))
