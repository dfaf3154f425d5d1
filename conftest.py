"""Shared pytest fixtures for the report builder tests."""
import io

import pytest
from PIL import Image

from plant_report.report_options import LayoutConfig


class RecordingWriter:
    """Document writer double that records every call instead of drawing."""

    def __init__(self, fail_on_save: bool = False):
        self.calls = []
        self.fail_on_save = fail_on_save

    def create(self, title=None):
        self.calls.append(("create", title))
        return {"pages": 0}

    def add_page(self, doc, width, height):
        doc["pages"] += 1
        self.calls.append(("add_page", width, height))
        return doc["pages"] - 1

    def embed_font(self, doc, family):
        self.calls.append(("embed_font", family))
        return family

    def draw_text(self, page, font, x, y, size, color, text):
        self.calls.append(("draw_text", page, x, y, size, text))

    def embed_image(self, doc, data, image_format):
        self.calls.append(("embed_image", image_format))
        return "image-handle"

    def draw_image(self, page, image, x, y, width, height):
        self.calls.append(("draw_image", page, x, y, width, height))

    def save(self, doc):
        self.calls.append(("save",))
        if self.fail_on_save:
            raise ValueError("corrupt image stream")
        return b"%PDF-recorded"

    def named(self, name):
        return [call for call in self.calls if call[0] == name]

    @property
    def draw_calls(self):
        return [call for call in self.calls if call[0] in ("draw_text", "draw_image")]


def make_image_bytes(image_format: str, size=(40, 20), color=(34, 139, 34)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def small_config():
    """200x300pt page fitting exactly four 50pt lines (baselines 250..100).

    Courier at 10pt advances 6pt per character, so the 180pt text column
    holds 30 characters.
    """
    return LayoutConfig(
        page_width=200,
        page_height=300,
        left_margin=10,
        right_margin=10,
        top_margin=250,
        bottom_margin=50,
        line_height=50,
        font_size=10,
        font_family="Courier",
        image_gap=10,
    )


@pytest.fixture
def recording_writer():
    return RecordingWriter()


@pytest.fixture
def png_bytes():
    return make_image_bytes("PNG")


@pytest.fixture
def jpeg_bytes():
    return make_image_bytes("JPEG")
