"""
Tests for generic edits and the editable image handle.
"""
import pytest
from PIL import Image, ImageFile

from editkit.core.interfaces import CompositeLayer, FitMode, ResizeSpec
from editkit.core.errors import DecodeError, EditError, UnsupportedFormatError
from editkit.image import EditableImage, TRANSFORMS, resize_image
from editkit.image.transforms import parse_color

from conftest import decode, encode


class TestResizeImage:
    """Tests for fit-mode resizing."""

    def setup_method(self):
        self.img = Image.new("RGB", (800, 600), "blue")

    def test_no_dimensions_is_noop(self):
        result = resize_image(self.img, ResizeSpec(fit=FitMode.INSIDE))
        assert result is self.img

    def test_width_only_keeps_aspect(self):
        result = resize_image(self.img, ResizeSpec(width=400))
        assert result.size == (400, 300)

    def test_height_only_keeps_aspect(self):
        result = resize_image(self.img, ResizeSpec(height=150, fit=FitMode.FILL))
        assert result.size == (200, 150)

    def test_inside(self):
        result = resize_image(self.img, ResizeSpec(fit=FitMode.INSIDE, width=400, height=400))
        assert result.size == (400, 300)

    def test_outside(self):
        result = resize_image(self.img, ResizeSpec(fit=FitMode.OUTSIDE, width=400, height=400))
        assert result.size == (533, 400)

    def test_cover_crops_to_exact_size(self):
        result = resize_image(self.img, ResizeSpec(fit=FitMode.COVER, width=400, height=400))
        assert result.size == (400, 400)

    def test_fill_stretches(self):
        result = resize_image(self.img, ResizeSpec(fit=FitMode.FILL, width=100, height=100))
        assert result.size == (100, 100)

    def test_contain_letterboxes(self):
        spec = ResizeSpec(fit=FitMode.CONTAIN, width=400, height=400, background="white")

        result = resize_image(self.img, spec)

        assert result.size == (400, 400)
        assert result.mode == "RGB"
        assert result.getpixel((200, 10)) == (255, 255, 255)
        assert result.getpixel((200, 200)) == (0, 0, 255)

    def test_without_enlargement(self):
        spec = ResizeSpec(fit=FitMode.INSIDE, width=2000, height=2000, without_enlargement=True)
        assert resize_image(self.img, spec).size == (800, 600)

    def test_resize_is_idempotent_for_same_spec(self):
        spec = ResizeSpec(fit=FitMode.INSIDE, width=500, height=500)

        once = resize_image(self.img, spec)
        twice = resize_image(once, spec)

        assert once.size == twice.size


class TestTransforms:
    """Tests for the generic transform table."""

    def test_rotate_clockwise(self):
        img = Image.new("RGB", (100, 50), "blue")
        img.paste((255, 0, 0), (0, 0, 50, 50))

        result = TRANSFORMS["rotate"](img, 90)

        assert result.size == (50, 100)
        assert result.getpixel((25, 10)) == (255, 0, 0)
        assert result.getpixel((25, 90)) == (0, 0, 255)

    def test_rotate_zero_is_noop(self):
        img = Image.new("RGB", (10, 20))
        assert TRANSFORMS["rotate"](img, 360) is img

    def test_rotate_none_auto_orients(self):
        img = Image.new("RGB", (10, 20))
        assert TRANSFORMS["rotate"](img, None).size == (10, 20)

    def test_flip_and_flop(self):
        img = Image.new("RGB", (2, 2), "black")
        img.putpixel((0, 0), (255, 255, 255))

        assert TRANSFORMS["flip"](img, True).getpixel((0, 1)) == (255, 255, 255)
        assert TRANSFORMS["flop"](img, True).getpixel((1, 0)) == (255, 255, 255)
        assert TRANSFORMS["flip"](img, False) is img

    def test_flatten(self):
        img = Image.new("RGBA", (4, 4), (0, 0, 0, 0))

        result = TRANSFORMS["flatten"](img, {"background": "#ff0000"})

        assert result.mode == "RGB"
        assert result.getpixel((1, 1)) == (255, 0, 0)

    def test_grayscale(self):
        assert TRANSFORMS["grayscale"](Image.new("RGB", (4, 4), "red"), True).mode == "L"
        assert TRANSFORMS["greyscale"](Image.new("RGBA", (4, 4), "red"), True).mode == "LA"

    def test_negate_keeps_alpha(self):
        img = Image.new("RGBA", (2, 2), (0, 0, 0, 100))

        result = TRANSFORMS["negate"](img, True)

        assert result.getpixel((0, 0)) == (255, 255, 255, 100)

    def test_threshold(self):
        img = Image.new("RGB", (2, 1), "black")
        img.putpixel((1, 0), (200, 200, 200))

        result = TRANSFORMS["threshold"](img, 128)

        assert result.getpixel((0, 0)) == 0
        assert result.getpixel((1, 0)) == 255

    def test_threshold_out_of_range(self):
        with pytest.raises(ValueError):
            TRANSFORMS["threshold"](Image.new("L", (2, 2)), 300)

    def test_blur_rejects_negative_sigma(self):
        with pytest.raises(ValueError):
            TRANSFORMS["blur"](Image.new("RGB", (4, 4)), -1)

    def test_extract(self):
        result = TRANSFORMS["extract"](Image.new("RGB", (100, 100)), {"left": 10, "top": 20, "width": 30, "height": 40})
        assert result.size == (30, 40)

    def test_extract_outside_image(self):
        with pytest.raises(ValueError):
            TRANSFORMS["extract"](Image.new("RGB", (10, 10)), {"left": 5, "top": 5, "width": 10, "height": 10})

    def test_parse_color(self):
        assert parse_color("white") == (255, 255, 255, 255)
        assert parse_color({"r": 1, "g": 2, "b": 3, "alpha": 0}) == (1, 2, 3, 0)
        assert parse_color([1, 2, 3]) == (1, 2, 3, 255)


class TestEditableImage:
    """Tests for EditableImage."""

    def test_decode_garbage_raises(self):
        with pytest.raises(DecodeError):
            EditableImage.decode(b"definitely not an image")

    def test_decode_truncated_is_permissive(self, jpeg_image):
        image = EditableImage.decode(jpeg_image[: len(jpeg_image) - 200])
        assert image.metadata().width == 800

    def test_truncated_loading_enabled_for_pillow(self):
        assert ImageFile.LOAD_TRUNCATED_IMAGES is True

    def test_mpo_source_encodes_as_jpeg(self):
        image = EditableImage(Image.new("RGB", (40, 30), "green"), source_format="MPO")

        assert decode(image.to_buffer()).format == "JPEG"

    def test_metadata_and_format(self, landscape_image):
        image = EditableImage.decode(landscape_image)

        assert (image.metadata().width, image.metadata().height) == (800, 600)
        assert image.source_format == "PNG"

    def test_probe_does_not_change_image(self, landscape_image):
        image = EditableImage.decode(landscape_image)

        probed = image.probe_resize(ResizeSpec(width=400))

        assert (probed.width, probed.height) == (400, 300)
        assert image.metadata().width == 800

    def test_composite_is_deferred(self, landscape_image, red_overlay):
        image = EditableImage.decode(landscape_image)

        image.composite([CompositeLayer(input=red_overlay)])

        assert len(image.composites) == 1
        assert image.image.getpixel((400, 300)) == (0, 0, 255)

    def test_render_gravity(self, landscape_image, red_overlay):
        image = EditableImage.decode(landscape_image)
        image.composite([CompositeLayer(input=red_overlay, gravity="southeast")])

        result = image.render()

        assert result.mode == "RGB"
        assert result.getpixel((790, 590)) == (255, 0, 0)
        assert result.getpixel((400, 300)) == (0, 0, 255)

    def test_render_top_left(self, landscape_image, red_overlay):
        image = EditableImage.decode(landscape_image)
        image.composite([CompositeLayer(input=red_overlay, top=0, left=0)])

        result = image.render()

        assert result.getpixel((79, 59)) == (255, 0, 0)
        assert result.getpixel((81, 61)) == (0, 0, 255)

    def test_render_dest_in(self):
        base = Image.new("RGBA", (10, 10), (0, 255, 0, 255))
        mask = encode(Image.new("RGBA", (5, 5), (0, 0, 0, 255)))
        image = EditableImage(base, "PNG")
        image.composite([CompositeLayer(input=mask, top=0, left=0, blend="dest-in")])

        result = image.render()

        assert result.getpixel((2, 2)) == (0, 255, 0, 255)
        assert result.getpixel((8, 8))[3] == 0

    def test_overlay_too_large(self, red_overlay):
        image = EditableImage(Image.new("RGB", (40, 40)), "PNG")
        image.composite([CompositeLayer(input=red_overlay)])

        with pytest.raises(EditError) as excinfo:
            image.render()

        assert excinfo.value.code == "CompositeTooLarge"

    def test_unknown_gravity(self, landscape_image, red_overlay):
        image = EditableImage.decode(landscape_image)
        image.composite([CompositeLayer(input=red_overlay, gravity="middle")])

        with pytest.raises(EditError, match="gravity"):
            image.render()

    def test_unknown_blend(self, landscape_image, red_overlay):
        image = EditableImage.decode(landscape_image)

        with pytest.raises(EditError, match="blend"):
            image.composite([CompositeLayer(input=red_overlay, blend="multiply")])

    def test_to_buffer_keeps_source_format(self, jpeg_image):
        image = EditableImage.decode(jpeg_image)
        assert decode(image.to_buffer()).format == "JPEG"

    def test_to_format(self, landscape_image):
        image = EditableImage.decode(landscape_image).to_format("webp")
        assert decode(image.to_buffer()).format == "WEBP"

    def test_to_format_unknown(self, landscape_image):
        with pytest.raises(UnsupportedFormatError):
            EditableImage.decode(landscape_image).to_format("psd")

    def test_jpeg_flattens_alpha_on_white(self):
        image = EditableImage(Image.new("RGBA", (8, 8), (0, 0, 0, 0)), "PNG").to_format("jpeg")

        result = decode(image.to_buffer())

        assert result.mode == "RGB"
        assert result.getpixel((4, 4)) == (255, 255, 255)
