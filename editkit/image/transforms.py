"""
Generic edits applied by name.

Each handler takes the current image and the edit parameters and returns
the transformed image. The table is closed: names outside it are rejected
by the pipeline.
"""
from typing import Any, Callable, Dict, Mapping, Tuple
from PIL import Image, ImageColor, ImageFilter, ImageOps

from ..core.interfaces import FitMode, ResizeSpec
from .orientation import OrientationFixer

Transform = Callable[[Image.Image, Any], Image.Image]

DEFAULT_BACKGROUND = (0, 0, 0, 255)


def parse_color(value: Any, default: Tuple[int, int, int, int] = DEFAULT_BACKGROUND) -> Tuple[int, int, int, int]:
    """Parse a CSS colour string, an RGB(A) sequence or an {r, g, b, alpha} mapping."""
    if value is None:
        return default
    if isinstance(value, str):
        return ImageColor.getcolor(value, "RGBA")
    if isinstance(value, Mapping):
        alpha = float(value.get("alpha", 1))
        return (int(value.get("r", 0)), int(value.get("g", 0)), int(value.get("b", 0)), int(round(alpha * 255)))
    channels = [int(c) for c in value]
    if len(channels) == 3:
        channels.append(255)
    if len(channels) != 4:
        raise ValueError(f"Invalid colour: {value!r}")
    return tuple(channels)


def has_alpha(img: Image.Image) -> bool:
    return img.mode in ("RGBA", "LA", "PA") or (img.mode == "P" and "transparency" in img.info)


def _keep_alpha(img: Image.Image, operation: Callable[[Image.Image], Image.Image]) -> Image.Image:
    """Run operation on the colour channels and reattach the alpha channel."""
    if has_alpha(img):
        rgba = img.convert("RGBA")
        alpha = rgba.getchannel("A")
        result = operation(rgba.convert("RGB"))
        result = result.convert("RGBA") if result.mode != "L" else result.convert("LA")
        result.putalpha(alpha)
        return result
    base = img if img.mode in ("RGB", "L") else img.convert("RGB")
    return operation(base)


def _filterable(img: Image.Image) -> Image.Image:
    if img.mode in ("P", "1", "PA"):
        return img.convert("RGBA" if has_alpha(img) else "RGB")
    return img


def _scaled_size(width: int, height: int, scale: float) -> Tuple[int, int]:
    return max(1, round(width * scale)), max(1, round(height * scale))


def resize_image(img: Image.Image, spec: ResizeSpec) -> Image.Image:
    """
    Resize according to a fit mode.

    With a single target dimension the aspect ratio is kept whatever the fit.
    With both, ``cover`` crops the centre, ``contain`` letterboxes onto the
    background, ``fill`` stretches, ``inside`` fits within the box and
    ``outside`` fits around it.
    """
    if not spec.has_dimensions:
        return img

    src_w, src_h = img.size
    width, height = spec.width, spec.height

    if width is None or height is None:
        scale = width / src_w if width is not None else height / src_h
        if spec.without_enlargement and scale > 1:
            return img
        return img.resize(_scaled_size(src_w, src_h, scale), Image.Resampling.LANCZOS)

    if spec.fit is FitMode.FILL:
        if spec.without_enlargement and width >= src_w and height >= src_h:
            return img
        return img.resize((width, height), Image.Resampling.LANCZOS)

    if spec.fit in (FitMode.INSIDE, FitMode.CONTAIN):
        scale = min(width / src_w, height / src_h)
    else:
        scale = max(width / src_w, height / src_h)

    if spec.without_enlargement and scale > 1:
        return img

    resized = img.resize(_scaled_size(src_w, src_h, scale), Image.Resampling.LANCZOS)

    if spec.fit is FitMode.COVER:
        left = (resized.width - width) // 2
        top = (resized.height - height) // 2
        return resized.crop((left, top, left + width, top + height))

    if spec.fit is FitMode.CONTAIN:
        background = parse_color(spec.background)
        canvas = Image.new("RGBA", (width, height), background)
        offset = ((width - resized.width) // 2, (height - resized.height) // 2)
        canvas.alpha_composite(resized.convert("RGBA"), offset)
        return canvas if has_alpha(img) or background[3] < 255 else canvas.convert("RGB")

    return resized


def _resize(img: Image.Image, value: Any) -> Image.Image:
    return resize_image(img, ResizeSpec.from_value(value))


def _rotate(img: Image.Image, value: Any) -> Image.Image:
    if value is None or value is True:
        return OrientationFixer.fix_pil_image(img)
    background = None
    if isinstance(value, Mapping):
        background = value.get("background")
        value = value.get("angle", 0)
    angle = float(value) % 360
    if angle == 0:
        return img
    fill = parse_color(background) if background is not None else None
    if fill is not None and img.mode not in ("RGBA", "RGB"):
        img = img.convert("RGBA")
    return img.rotate(-angle, resample=Image.Resampling.BICUBIC, expand=True, fillcolor=fill)


def _flip(img: Image.Image, value: Any) -> Image.Image:
    return ImageOps.flip(img) if value is not False else img


def _flop(img: Image.Image, value: Any) -> Image.Image:
    return ImageOps.mirror(img) if value is not False else img


def _flatten(img: Image.Image, value: Any) -> Image.Image:
    if value is False or not has_alpha(img):
        return img
    background = value.get("background") if isinstance(value, Mapping) else None
    rgba = img.convert("RGBA")
    canvas = Image.new("RGBA", rgba.size, parse_color(background)[:3] + (255,))
    canvas.alpha_composite(rgba)
    return canvas.convert("RGB")


def _grayscale(img: Image.Image, value: Any) -> Image.Image:
    if value is False:
        return img
    return img.convert("LA") if has_alpha(img) else img.convert("L")


def _negate(img: Image.Image, value: Any) -> Image.Image:
    if value is False:
        return img
    return _keep_alpha(img, ImageOps.invert)


def _normalize(img: Image.Image, value: Any) -> Image.Image:
    if value is False:
        return img
    return _keep_alpha(img, ImageOps.autocontrast)


def _sigma(value: Any, default: float) -> float:
    if isinstance(value, Mapping):
        value = value.get("sigma", default)
    if value is None or value is True:
        return default
    sigma = float(value)
    if sigma <= 0:
        raise ValueError(f"Expected positive sigma, got {value!r}")
    return sigma


def _blur(img: Image.Image, value: Any) -> Image.Image:
    if value is False:
        return img
    return _filterable(img).filter(ImageFilter.GaussianBlur(radius=_sigma(value, 1.0)))


def _sharpen(img: Image.Image, value: Any) -> Image.Image:
    if value is False:
        return img
    if value is None or value is True:
        return _filterable(img).filter(ImageFilter.SHARPEN)
    return _filterable(img).filter(ImageFilter.UnsharpMask(radius=_sigma(value, 1.0)))


def _median(img: Image.Image, value: Any) -> Image.Image:
    if value is False:
        return img
    size = 3 if value is None or value is True else int(value)
    if size % 2 == 0:
        size += 1
    return _filterable(img).filter(ImageFilter.MedianFilter(size=size))


def _threshold(img: Image.Image, value: Any) -> Image.Image:
    if value is False:
        return img
    level = 128 if value is None or value is True else int(value)
    if not 0 <= level <= 255:
        raise ValueError(f"Threshold must be between 0 and 255, got {level}")
    return img.convert("L").point(lambda p: 255 if p >= level else 0)


def _tint(img: Image.Image, value: Any) -> Image.Image:
    color = parse_color(value)[:3]
    return _keep_alpha(img, lambda rgb: ImageOps.colorize(rgb.convert("L"), black=(0, 0, 0), white=color))


def _extract(img: Image.Image, value: Any) -> Image.Image:
    left, top = int(value["left"]), int(value["top"])
    width, height = int(value["width"]), int(value["height"])
    if left < 0 or top < 0 or width <= 0 or height <= 0 or left + width > img.width or top + height > img.height:
        raise ValueError(f"Bad extract area {value!r} for image {img.width}x{img.height}")
    return img.crop((left, top, left + width, top + height))


TRANSFORMS: Dict[str, Transform] = {
    "resize": _resize,
    "rotate": _rotate,
    "flip": _flip,
    "flop": _flop,
    "flatten": _flatten,
    "grayscale": _grayscale,
    "greyscale": _grayscale,
    "negate": _negate,
    "normalize": _normalize,
    "normalise": _normalize,
    "blur": _blur,
    "sharpen": _sharpen,
    "median": _median,
    "threshold": _threshold,
    "tint": _tint,
    "extract": _extract,
}
