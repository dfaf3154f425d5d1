"""Report Options Dataclasses

Layout configuration and request parameters for report generation.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Tuple

from .config import (
    PAGE_WIDTH,
    PAGE_HEIGHT,
    LEFT_MARGIN,
    RIGHT_MARGIN,
    TOP_MARGIN,
    BOTTOM_MARGIN,
    DEFAULT_FONT_FAMILY,
    BODY_FONT_SIZE,
    LINE_HEIGHT,
    TEXT_COLOR,
    IMAGE_GAP,
    DEFAULT_IMAGE_SCALE,
    REPORT_TITLE,
)
from .exceptions import InvalidConfigurationError


@dataclass
class LayoutConfig:
    """Page geometry and typography used by the layout planners.

    All measurements are in PDF points with the origin at the bottom-left
    corner of the page, so ``top_margin`` is the highest baseline a line may
    use and ``bottom_margin`` the lowest.

    Attributes:
        page_width, page_height: Page size (A4 by default)
        left_margin, right_margin: Horizontal margins
        top_margin: Baseline of the first line on each page
        bottom_margin: Lowest allowed baseline / image bottom edge
        max_line_width: Wrap width for body text. Defaults to the space
            between the horizontal margins.
        line_height: Vertical advance between body lines
        font_size: Body font size
        font_family: Font used for all text (resolved by FontManager)
        image_gap: Space left between the last text line and the image
        text_color: RGB tuple in 0..1 for body text
    """

    page_width: float = PAGE_WIDTH
    page_height: float = PAGE_HEIGHT
    left_margin: float = LEFT_MARGIN
    right_margin: float = RIGHT_MARGIN
    top_margin: float = TOP_MARGIN
    bottom_margin: float = BOTTOM_MARGIN
    max_line_width: Optional[float] = None
    line_height: float = LINE_HEIGHT
    font_size: float = BODY_FONT_SIZE
    font_family: str = DEFAULT_FONT_FAMILY
    image_gap: float = IMAGE_GAP
    text_color: Tuple[float, float, float] = TEXT_COLOR

    def __post_init__(self):
        """Validate page geometry after initialization."""
        if self.page_width <= 0 or self.page_height <= 0:
            raise InvalidConfigurationError(
                f"Page size must be positive, got {self.page_width}x{self.page_height}"
            )
        if not (0 <= self.bottom_margin < self.top_margin <= self.page_height):
            raise InvalidConfigurationError(
                f"Vertical margins must satisfy 0 <= bottom < top <= page height, "
                f"got bottom={self.bottom_margin}, top={self.top_margin}"
            )
        if self.left_margin < 0 or self.right_margin < 0:
            raise InvalidConfigurationError("Horizontal margins must not be negative")
        if self.usable_width <= 0:
            raise InvalidConfigurationError(
                f"Horizontal margins leave no room on a {self.page_width}pt wide page"
            )
        if self.max_line_width is None:
            self.max_line_width = self.usable_width
        if self.max_line_width <= 0:
            raise InvalidConfigurationError(
                f"max_line_width must be positive, got {self.max_line_width}"
            )
        if self.line_height <= 0:
            raise InvalidConfigurationError(
                f"line_height must be positive, got {self.line_height}"
            )
        if self.line_height > self.usable_height:
            raise InvalidConfigurationError(
                f"line_height {self.line_height} exceeds the {self.usable_height}pt between the margins"
            )
        if self.font_size <= 0:
            raise InvalidConfigurationError(
                f"font_size must be positive, got {self.font_size}"
            )
        if self.image_gap < 0:
            raise InvalidConfigurationError(
                f"image_gap must not be negative, got {self.image_gap}"
            )

    @property
    def usable_width(self) -> float:
        return self.page_width - self.left_margin - self.right_margin

    @property
    def usable_height(self) -> float:
        return self.top_margin - self.bottom_margin


@dataclass
class ReportRequest:
    """Input of one report generation.

    Attributes:
        text: Analysis text returned by the inference service
        image_bytes: Raw image payload, or None for a text-only report
        mime_type: Explicit mime type of ``image_bytes`` (``image/jpeg`` or
            ``image/png``); a ``data:`` URI header is accepted too
        scale: Factor applied to the image's natural pixel size
        title: Report heading; None or empty to omit the header
        report_date: Date printed under the title (today by default)
    """

    text: str = ""
    image_bytes: Optional[bytes] = None
    mime_type: Optional[str] = None
    scale: float = DEFAULT_IMAGE_SCALE
    title: Optional[str] = REPORT_TITLE
    report_date: date = field(default_factory=date.today)

    def __post_init__(self):
        """Validate request parameters after initialization."""
        if self.text is None:
            self.text = ""

    @property
    def has_image(self) -> bool:
        return bool(self.image_bytes)

    @property
    def has_text(self) -> bool:
        return bool(self.text and self.text.strip())
