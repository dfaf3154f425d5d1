"""Report Builder Module

Orchestrates report layout by coordinating specialized components:
- FontManager: Font resolution and metrics
- TextFlowPlanner: Header and body text pagination
- image_placement: Where the image goes after the text
- RenderDriver: Drawing the planned pages through the document writer

The builder turns a ReportRequest into a PlannedDocument; rendering is a
separate step so the plan can be inspected or rendered more than once.
"""
import logging
from datetime import date
from typing import Optional

from ..config import (
    DATE_FONT_SIZE,
    DATE_FORMAT,
    DATE_LINE_HEIGHT,
    TITLE_COLOR,
    TITLE_FONT_SIZE,
    TITLE_LINE_HEIGHT,
)
from ..exceptions import EmptyInputError
from ..report_options import LayoutConfig, ReportRequest
from . import image_placement
from .document_model import ImageCommand, LayoutCursor, PlannedDocument
from .font_manager import FontManager
from .image_source import ReportImage, load_image
from .render_driver import RenderDriver
from .text_flow import TextFlowPlanner
from .writer import ReportLabWriter

logger = logging.getLogger(__name__)


class ReportBuilder:
    """Build a planned plant analysis report.

    Attributes:
        config: Page geometry and typography
        font_manager: Resolves ``config.font_family`` to a usable font
        font_name: The resolved font, shared by planning and rendering
        planner: TextFlowPlanner measuring with ``font_name``
    """

    def __init__(self, config: Optional[LayoutConfig] = None, font_manager: Optional[FontManager] = None):
        self.config = config or LayoutConfig()
        self.font_manager = font_manager or FontManager()
        self.font_name = self.font_manager.resolve(self.config.font_family)
        self.planner = TextFlowPlanner(self.config, self.font_name)

    def new_document(self) -> PlannedDocument:
        return PlannedDocument(
            page_width=self.config.page_width,
            page_height=self.config.page_height,
            font_family=self.font_name,
        )

    def plan_header(self, document: PlannedDocument, title: Optional[str], report_date: Optional[date],
                    cursor: LayoutCursor) -> LayoutCursor:
        """Place the centered title and the date line."""
        if title:
            pages, cursor = self.planner.plan_heading(
                title, TITLE_FONT_SIZE, TITLE_LINE_HEIGHT, cursor=cursor, color=TITLE_COLOR
            )
            document.extend(pages)
        if report_date is not None:
            pages, cursor = self.planner.plan(
                f"Date: {report_date.strftime(DATE_FORMAT)}",
                cursor=cursor,
                font_size=DATE_FONT_SIZE,
                line_height=DATE_LINE_HEIGHT,
            )
            document.extend(pages)
        return cursor

    def plan_image(self, document: PlannedDocument, image: ReportImage, scale: float,
                   cursor: LayoutCursor) -> LayoutCursor:
        """Append the image placement after the text already planned."""
        placement = image_placement.place(image.width, image.height, scale, cursor, self.config)
        document.append(
            placement.page_index,
            ImageCommand(
                x=placement.x,
                y=placement.y,
                width=placement.width,
                height=placement.height,
                pixel_data=image.data,
                format=image.format,
            ),
        )
        return LayoutCursor(placement.page_index, placement.y, self.config.bottom_margin)

    def build(self, request: ReportRequest) -> PlannedDocument:
        """
        Plan the full report.

        Args:
            request: Text, optional image and header options

        Returns:
            PlannedDocument with header, wrapped body text and image

        Raises:
            EmptyInputError: If there is no text and no image
            UnsupportedImageFormatError, ImageDecodeError: For a bad image
            ImageTooTallError: If the scaled image cannot fit on a page
        """
        if not request.has_text and not request.has_image:
            raise EmptyInputError()

        # Validate the image before laying anything out
        image = load_image(request.image_bytes, request.mime_type) if request.has_image else None

        document = self.new_document()
        cursor = self.planner.start_cursor()
        cursor = self.plan_header(document, request.title, request.report_date if request.title else None, cursor)

        pages, cursor = self.planner.plan(request.text, cursor=cursor)
        document.extend(pages)

        if image is not None:
            self.plan_image(document, image, request.scale, cursor)

        logger.info(
            "Planned report: %d page(s), %d draw command(s)%s",
            document.page_count, document.command_count,
            f", image {image.width}x{image.height}px @ {request.scale}" if image else "",
        )
        return document


def create_report_pdf(
    request: ReportRequest,
    config: Optional[LayoutConfig] = None,
    writer: Optional[ReportLabWriter] = None,
) -> bytes:
    """
    Plan and render a report in one call.

    Args:
        request: Report input
        config: Optional layout configuration (A4 defaults otherwise)
        writer: Optional document writer (a new ReportLabWriter otherwise)

    Returns:
        PDF bytes
    """
    builder = ReportBuilder(config=config)
    document = builder.build(request)
    return RenderDriver(writer).render(document, title=request.title)
