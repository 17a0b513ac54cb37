"""
Pytest configuration and fixtures for EditKit tests.
"""
import pytest
import tempfile
import shutil
from io import BytesIO
from pathlib import Path
from typing import Dict, List, Tuple
from PIL import Image

from editkit.core.interfaces import IObjectFetcher


def encode(img: Image.Image, fmt: str = "PNG") -> bytes:
    buffer = BytesIO()
    img.save(buffer, fmt)
    return buffer.getvalue()


def decode(data: bytes) -> Image.Image:
    img = Image.open(BytesIO(data))
    img.load()
    return img


class InMemoryFetcher(IObjectFetcher):
    """Serves objects from a dict and records every request."""

    def __init__(self, objects: Dict[Tuple[str, str], bytes] = None):
        self.objects = dict(objects or {})
        self.requests: List[Tuple[str, str]] = []

    async def fetch(self, bucket: str, key: str) -> bytes:
        self.requests.append((bucket, key))
        return self.objects[(bucket, key)]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = Path(tempfile.mkdtemp(prefix="editkit_test_"))
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def landscape_image() -> bytes:
    """800x600 blue PNG."""
    return encode(Image.new("RGB", (800, 600), color="blue"))


@pytest.fixture
def portrait_image() -> bytes:
    """600x800 green PNG."""
    return encode(Image.new("RGB", (600, 800), color="green"))


@pytest.fixture
def jpeg_image() -> bytes:
    """800x600 JPEG."""
    return encode(Image.new("RGB", (800, 600), color="blue"), "JPEG")


@pytest.fixture
def red_overlay() -> bytes:
    """Opaque 80x60 red overlay (same 4:3 aspect as the landscape image)."""
    return encode(Image.new("RGBA", (80, 60), color=(255, 0, 0, 255)))


@pytest.fixture
def split_overlay() -> bytes:
    """100x50 overlay, left half red and right half blue."""
    img = Image.new("RGBA", (100, 50), color=(0, 0, 255, 255))
    img.paste((255, 0, 0, 255), (0, 0, 50, 50))
    return encode(img)


@pytest.fixture
def fetcher(red_overlay, split_overlay) -> InMemoryFetcher:
    return InMemoryFetcher({
        ("b", "k"): red_overlay,
        ("b", "split"): split_overlay,
        ("b", "broken"): b"not an image",
    })
