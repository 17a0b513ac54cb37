"""
Output format names understood by the encoder.
"""
from .errors import UnsupportedFormatError

OUTPUT_FORMATS = {
    'jpeg': 'JPEG',
    'jpg': 'JPEG',
    'mpo': 'JPEG',
    'png': 'PNG',
    'webp': 'WEBP',
    'tiff': 'TIFF',
    'tif': 'TIFF',
    'gif': 'GIF',
    'bmp': 'BMP',
}

ALPHA_FORMATS = {'PNG', 'WEBP', 'TIFF', 'GIF'}

DEFAULT_FORMAT = 'PNG'


def resolve_format(name: str) -> str:
    """Map a format name (case-insensitive, optional leading dot) to Pillow's name."""
    normalized = str(name).lower().lstrip('.')
    try:
        return OUTPUT_FORMATS[normalized]
    except KeyError:
        raise UnsupportedFormatError(f"Unsupported output format: {name}")


def supports_alpha(pil_format: str) -> bool:
    """Check if a Pillow format keeps an alpha channel."""
    return pil_format.upper() in ALPHA_FORMATS
