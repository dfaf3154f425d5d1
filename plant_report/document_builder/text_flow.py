"""Text Flow Module

Turns raw analysis text into positioned text lines across as many pages as
needed:

- Splitting text into logical lines on newlines
- Greedy word wrapping using the font's advance widths
- Moving to a new page when the next baseline would cross the bottom margin
"""
import logging
from typing import Callable, List, Optional, Tuple

from ..report_options import LayoutConfig
from .document_model import LayoutCursor, Page, TextLine
from .font_manager import FontManager

logger = logging.getLogger(__name__)

MeasureFn = Callable[[str], float]


def wrap_line(line: str, max_width: float, measure: MeasureFn) -> List[str]:
    """
    Greedy word-wrap of a single logical line.

    Words are accumulated until adding the next one would exceed
    ``max_width``; that word then starts a new line. A word wider than
    ``max_width`` is kept whole on a line of its own.

    Args:
        line: Text without newlines
        max_width: Maximum line width in points
        measure: Function returning the rendered width of a string

    Returns:
        Wrapped lines. A blank line yields ``[""]``.

    Examples:
        >>> wrap_line("aa bb cc", 5, len)
        ['aa bb', 'cc']
        >>> wrap_line("", 5, len)
        ['']
    """
    words = line.split()
    if not words:
        return [""]

    wrapped = []
    current = words[0]
    for word in words[1:]:
        candidate = f"{current} {word}"
        if measure(candidate) <= max_width:
            current = candidate
        else:
            wrapped.append(current)
            current = word
    wrapped.append(current)
    return wrapped


def wrap_text(text: str, max_width: float, measure: MeasureFn) -> List[str]:
    """Wrap every logical line of ``text``; empty text yields no lines."""
    if not text or not text.strip():
        return []

    lines = []
    for logical_line in text.splitlines():
        lines.extend(wrap_line(logical_line, max_width, measure))
    return lines


class TextFlowPlanner:
    """Places wrapped text lines on pages, top to bottom.

    The planner never draws anything itself; it produces ``Page`` objects
    holding ``TextLine`` commands plus the cursor where the text ended, so
    the image placement can continue from there.

    Attributes:
        config: Page geometry and typography
        font_name: Font resolved by FontManager, used for measuring
    """

    def __init__(self, config: LayoutConfig, font_name: str):
        self.config = config
        self.font_name = font_name

    def start_cursor(self) -> LayoutCursor:
        return LayoutCursor(page_index=0, y=self.config.top_margin, bottom_margin=self.config.bottom_margin)

    def measure(self, text: str, font_size: Optional[float] = None) -> float:
        return FontManager.string_width(text, self.font_name, font_size or self.config.font_size)

    def plan(
        self,
        text: str,
        cursor: Optional[LayoutCursor] = None,
        font_size: Optional[float] = None,
        line_height: Optional[float] = None,
        color: Optional[Tuple[float, float, float]] = None,
    ) -> Tuple[List[Page], LayoutCursor]:
        """
        Plan text lines starting at ``cursor``.

        Args:
            text: Raw text; newlines separate logical lines
            cursor: Where to start (top of the first page by default)
            font_size: Override of ``config.font_size``
            line_height: Override of ``config.line_height``
            color: Override of ``config.text_color``

        Returns:
            Tuple of (pages touched, in order; cursor after the last line).
            Empty text returns no pages and the cursor unchanged.
        """
        cursor = cursor or self.start_cursor()
        font_size = font_size or self.config.font_size
        line_height = line_height or self.config.line_height
        color = color or self.config.text_color

        lines = wrap_text(text, self.config.max_line_width, lambda s: self.measure(s, font_size))
        pages: List[Page] = []

        for content in lines:
            cursor = self._ensure_room(cursor, line_height)
            if not pages or pages[-1].index != cursor.page_index:
                pages.append(Page(index=cursor.page_index))
            pages[-1].commands.append(
                TextLine(
                    x=self.config.left_margin,
                    y=cursor.y,
                    content=content,
                    font_size=font_size,
                    color=color,
                )
            )
            cursor = cursor.advance(line_height)

        if lines:
            logger.debug(
                "Planned %d text lines on pages %d-%d",
                len(lines), pages[0].index, pages[-1].index,
            )
        return pages, cursor

    def plan_heading(
        self,
        text: str,
        font_size: float,
        line_height: float,
        cursor: Optional[LayoutCursor] = None,
        color: Optional[Tuple[float, float, float]] = None,
    ) -> Tuple[List[Page], LayoutCursor]:
        """Place a single centered line, e.g. the report title."""
        cursor = cursor or self.start_cursor()
        if not text or not text.strip():
            return [], cursor

        cursor = self._ensure_room(cursor, line_height)
        width = self.measure(text, font_size)
        x = max(self.config.left_margin, (self.config.page_width - width) / 2)
        line = TextLine(
            x=x,
            y=cursor.y,
            content=text.strip(),
            font_size=font_size,
            color=color or self.config.text_color,
        )
        return [Page(index=cursor.page_index, commands=[line])], cursor.advance(line_height)

    def _ensure_room(self, cursor: LayoutCursor, line_height: float) -> LayoutCursor:
        # Stepping past this line must not cross the bottom margin
        if cursor.y - line_height < self.config.bottom_margin:
            return cursor.next_page(self.config.top_margin)
        return cursor
