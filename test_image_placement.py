"""Tests for image placement and image validation."""
import io

import pytest
from PIL import Image

from conftest import make_image_bytes
from plant_report.document_builder import image_placement, load_image, parse_image_format
from plant_report.document_builder.document_model import ImageFormat, LayoutCursor
from plant_report.exceptions import (
    ImageDecodeError,
    ImageTooTallError,
    InvalidConfigurationError,
    UnsupportedImageFormatError,
)


def cursor_at(y, page_index=0, bottom=50):
    return LayoutCursor(page_index=page_index, y=y, bottom_margin=bottom)


def test_image_fits_below_text_on_current_page(small_config):
    placement = image_placement.place(100, 50, 1.0, cursor_at(200), small_config)

    assert placement.page_index == 0
    assert (placement.x, placement.y) == (small_config.left_margin, 200 - 50 - small_config.image_gap)
    assert (placement.width, placement.height) == (100, 50)


def test_image_moves_to_new_page_when_text_ends_near_bottom(small_config):
    cursor = cursor_at(small_config.bottom_margin + 1, page_index=3)

    placement = image_placement.place(100, 100, 1.0, cursor, small_config)

    assert placement.page_index == 4
    assert placement.y == small_config.top_margin - 100


def test_gap_is_counted_when_checking_fit(small_config):
    # 100pt available, image is 95pt tall plus a 10pt gap
    placement = image_placement.place(50, 95, 1.0, cursor_at(150), small_config)
    assert placement.page_index == 1


def test_scale_factor_is_applied(small_config):
    placement = image_placement.place(160, 80, 0.5, cursor_at(250), small_config)
    assert (placement.width, placement.height) == (80, 40)


def test_wide_image_is_shrunk_to_margins(small_config):
    placement = image_placement.place(400, 200, 1.0, cursor_at(250), small_config)

    assert placement.width == pytest.approx(small_config.usable_width)
    assert placement.height == pytest.approx(90)


def test_image_taller_than_page_raises(small_config):
    with pytest.raises(ImageTooTallError) as excinfo:
        image_placement.place(100, 300, 1.0, cursor_at(100), small_config)
    assert excinfo.value.usable_height == small_config.usable_height


def test_tall_image_uses_fresh_page_instead_of_skipping_it(small_config):
    # 195pt + 10pt gap does not fit under the top margin, but the page is empty
    placement = image_placement.place(100, 195, 1.0, cursor_at(small_config.top_margin), small_config)

    assert placement.page_index == 0
    assert placement.y == small_config.top_margin - 195


@pytest.mark.parametrize("scale", [0, -0.5])
def test_non_positive_scale_is_rejected(small_config, scale):
    with pytest.raises(InvalidConfigurationError):
        image_placement.place(100, 100, scale, cursor_at(200), small_config)


@pytest.mark.parametrize("mime_type, expected", [
    ("image/png", ImageFormat.PNG),
    ("image/jpeg", ImageFormat.JPEG),
    ("IMAGE/JPG", ImageFormat.JPEG),
    ("image/png; charset=binary", ImageFormat.PNG),
    ("data:image/jpeg;base64,", ImageFormat.JPEG),
])
def test_parse_image_format_accepts_jpeg_and_png(mime_type, expected):
    assert parse_image_format(mime_type) is expected


@pytest.mark.parametrize("mime_type", ["image/gif", "image/webp", "application/pdf", "", None, "data:image/gif;base64,"])
def test_parse_image_format_rejects_everything_else(mime_type):
    with pytest.raises(UnsupportedImageFormatError):
        parse_image_format(mime_type)


def test_load_image_reads_natural_size():
    image = load_image(make_image_bytes("PNG", size=(64, 32)), "image/png")

    assert image.format is ImageFormat.PNG
    assert (image.width, image.height) == (64, 32)


def test_load_image_rejects_garbage():
    with pytest.raises(ImageDecodeError):
        load_image(b"definitely not an image", "image/png")


def test_load_image_rejects_truncated_png():
    buffer = io.BytesIO()
    Image.linear_gradient("L").save(buffer, format="PNG")
    data = buffer.getvalue()

    with pytest.raises(ImageDecodeError):
        load_image(data[: len(data) // 2], "image/png")


def test_load_image_rejects_mismatched_tag(jpeg_bytes):
    with pytest.raises(ImageDecodeError):
        load_image(jpeg_bytes, "image/png")


def test_load_image_checks_tag_before_payload():
    # Format comes from the tag, so a GIF tag fails even with empty bytes
    with pytest.raises(UnsupportedImageFormatError):
        load_image(b"", "image/gif")
