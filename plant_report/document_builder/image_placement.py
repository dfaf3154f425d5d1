"""Image Placement Module

Decides where the report image goes once the text has been planned.
"""
import logging

from ..exceptions import ImageTooTallError, InvalidConfigurationError
from ..report_options import LayoutConfig
from .document_model import ImagePlacement, LayoutCursor

logger = logging.getLogger(__name__)


def scaled_size(natural_width: float, natural_height: float, scale: float, max_width: float):
    """
    Scale natural pixel dimensions, shrinking to ``max_width`` if needed.

    Aspect ratio is preserved when the width is clipped to the margins.

    Examples:
        >>> scaled_size(800, 400, 0.5, 500)
        (400.0, 200.0)
        >>> scaled_size(2000, 1000, 0.5, 500)
        (500.0, 250.0)
    """
    width = float(natural_width) * scale
    height = float(natural_height) * scale
    if width > max_width:
        height = height * max_width / width
        width = float(max_width)
    return width, height


def place(
    natural_width: float,
    natural_height: float,
    scale: float,
    cursor: LayoutCursor,
    config: LayoutConfig,
) -> ImagePlacement:
    """
    Resolve the page and draw rectangle for an image.

    The image goes below the text on the cursor's page when its height plus
    ``config.image_gap`` fits above the bottom margin; otherwise it starts a
    new page with its top edge on ``config.top_margin``.

    Args:
        natural_width, natural_height: Image size in pixels
        scale: Factor applied to the natural size
        cursor: Where the text ended
        config: Page geometry

    Returns:
        ImagePlacement with the bottom-left corner and size in points

    Raises:
        InvalidConfigurationError: For a non-positive scale or image size
        ImageTooTallError: If the image is taller than an empty page allows
    """
    if scale <= 0:
        raise InvalidConfigurationError(f"Image scale must be positive, got {scale}")
    if natural_width <= 0 or natural_height <= 0:
        raise InvalidConfigurationError(
            f"Image size must be positive, got {natural_width}x{natural_height}"
        )

    width, height = scaled_size(natural_width, natural_height, scale, config.usable_width)

    if height + config.image_gap <= cursor.remaining_space:
        placement = ImagePlacement(
            page_index=cursor.page_index,
            x=config.left_margin,
            y=cursor.y - height - config.image_gap,
            width=width,
            height=height,
        )
        logger.debug("Image %.1fx%.1f fits on page %d", width, height, cursor.page_index)
        return placement

    if height > config.usable_height:
        raise ImageTooTallError(height, config.usable_height)

    # Nothing placed on this page yet: use it instead of leaving it blank
    if cursor.y >= config.top_margin:
        return ImagePlacement(
            page_index=cursor.page_index,
            x=config.left_margin,
            y=config.top_margin - height,
            width=width,
            height=height,
        )

    logger.debug(
        "Image %.1fx%.1f needs %.1fpt, %.1fpt left on page %d; moving to next page",
        width, height, height + config.image_gap, cursor.remaining_space, cursor.page_index,
    )
    return ImagePlacement(
        page_index=cursor.page_index + 1,
        x=config.left_margin,
        y=config.top_margin - height,
        width=width,
        height=height,
    )
