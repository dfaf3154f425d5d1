"""Image Source Module

Validates the report image at the request boundary:

- Parsing the explicit mime-type tag into an ImageFormat
- Decoding the payload with Pillow to read its natural pixel size

The format always comes from the tag. The payload is only checked against
it, never used to pick a format.
"""
import io
import re
from dataclasses import dataclass, field
from typing import Optional

from PIL import Image as PILImage, UnidentifiedImageError

from ..config import SUPPORTED_MIME_TYPES
from ..exceptions import ImageDecodeError, UnsupportedImageFormatError
from .document_model import ImageFormat

# Pillow reports multi-picture JPEGs (common from phone cameras) as MPO
_DECODED_FORMATS = {
    ImageFormat.JPEG: {"JPEG", "MPO"},
    ImageFormat.PNG: {"PNG"},
}

_DATA_URI_RE = re.compile(r"^data:([^;,]+)(;base64)?,", re.IGNORECASE)


@dataclass(frozen=True)
class ReportImage:
    data: bytes = field(repr=False)
    format: ImageFormat
    width: int
    height: int


def parse_image_format(mime_type: Optional[str]) -> ImageFormat:
    """
    Map a mime type (or a ``data:`` URI header) to an ImageFormat.

    Args:
        mime_type: e.g. ``image/png``, ``image/jpeg; charset=binary`` or
            ``data:image/png;base64,``

    Returns:
        ImageFormat.JPEG or ImageFormat.PNG

    Raises:
        UnsupportedImageFormatError: For anything other than JPEG or PNG
    """
    if not mime_type:
        raise UnsupportedImageFormatError(mime_type)

    tag = mime_type.strip()
    match = _DATA_URI_RE.match(tag)
    if match:
        tag = match.group(1)
    tag = tag.split(";", 1)[0].strip().lower()

    format_name = SUPPORTED_MIME_TYPES.get(tag)
    if format_name is None:
        raise UnsupportedImageFormatError(mime_type)
    return ImageFormat(format_name)


def load_image(data: bytes, mime_type: Optional[str]) -> ReportImage:
    """
    Validate and measure an image payload.

    Args:
        data: Raw image bytes
        mime_type: Explicit mime type supplied with the bytes

    Returns:
        ReportImage with the natural width and height in pixels

    Raises:
        UnsupportedImageFormatError: If the mime type is not JPEG or PNG
        ImageDecodeError: If the bytes are empty, undecodable, or a
            different format than declared
    """
    image_format = parse_image_format(mime_type)

    if not data:
        raise ImageDecodeError("image payload is empty")

    try:
        with PILImage.open(io.BytesIO(data)) as img:
            decoded_format = img.format
            width, height = img.size
            img.verify()
    except UnidentifiedImageError as e:
        raise ImageDecodeError(f"not a {image_format.value} image") from e
    except Exception as e:
        # Truncated or corrupt data surfaces as OSError, SyntaxError or struct.error
        raise ImageDecodeError(str(e) or type(e).__name__) from e

    if decoded_format not in _DECODED_FORMATS[image_format]:
        raise ImageDecodeError(
            f"payload is {decoded_format or 'unknown'} but was declared as {image_format.value}"
        )
    if width <= 0 or height <= 0:
        raise ImageDecodeError(f"invalid image size {width}x{height}")

    return ReportImage(data=data, format=image_format, width=width, height=height)
