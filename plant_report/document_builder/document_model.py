"""Document Model

Plain data types passed between the layout planners and the render driver:

- TextLine / ImageCommand: immutable draw commands
- Page: ordered draw commands for one page index
- PlannedDocument: the full page sequence handed to the render driver
- LayoutCursor: running position threaded through planning
- ImagePlacement: resolved page and rectangle for the report image
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Union


class ImageFormat(Enum):
    """Image encodings the document writer can embed."""
    JPEG = "JPEG"
    PNG = "PNG"


@dataclass(frozen=True)
class TextLine:
    x: float
    y: float
    content: str
    font_size: float
    color: Tuple[float, float, float] = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class ImageCommand:
    x: float
    y: float
    width: float
    height: float
    pixel_data: bytes = field(repr=False)
    format: ImageFormat


DrawCommand = Union[TextLine, ImageCommand]


@dataclass
class Page:
    """Draw commands for a single page, in drawing order."""
    index: int
    commands: List[DrawCommand] = field(default_factory=list)

    @property
    def text_lines(self) -> List[TextLine]:
        return [cmd for cmd in self.commands if isinstance(cmd, TextLine)]

    @property
    def images(self) -> List[ImageCommand]:
        return [cmd for cmd in self.commands if isinstance(cmd, ImageCommand)]


@dataclass(frozen=True)
class LayoutCursor:
    """Position where the next piece of content goes.

    ``y`` is the baseline of the next text line. Once it drops below the
    bottom margin the current page is exhausted and the next line starts a
    new page.
    """
    page_index: int
    y: float
    bottom_margin: float

    @property
    def remaining_space(self) -> float:
        return self.y - self.bottom_margin

    def next_page(self, top_margin: float) -> "LayoutCursor":
        return LayoutCursor(self.page_index + 1, top_margin, self.bottom_margin)

    def advance(self, distance: float) -> "LayoutCursor":
        return LayoutCursor(self.page_index, self.y - distance, self.bottom_margin)


@dataclass(frozen=True)
class ImagePlacement:
    page_index: int
    x: float
    y: float
    width: float
    height: float


@dataclass
class PlannedDocument:
    """Pages and page geometry ready for rendering."""
    page_width: float
    page_height: float
    font_family: str
    pages: List[Page] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def command_count(self) -> int:
        return sum(len(page.commands) for page in self.pages)

    def page(self, index: int) -> Page:
        """Return the page at ``index``, creating it and any gap pages lazily."""
        while len(self.pages) <= index:
            self.pages.append(Page(index=len(self.pages)))
        return self.pages[index]

    def append(self, page_index: int, command: DrawCommand):
        self.page(page_index).commands.append(command)

    def extend(self, pages: List[Page]):
        """Merge planned pages in, keeping per-page command order."""
        for planned in pages:
            for command in planned.commands:
                self.append(planned.index, command)
