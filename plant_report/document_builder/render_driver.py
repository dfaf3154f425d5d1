"""Render Driver Module

Walks a PlannedDocument and issues page, text and image calls to a document
writer, then asks the writer to serialize.
"""
import logging
from enum import Enum
from typing import Optional

from ..exceptions import PlantReportError, RenderError
from .document_model import ImageCommand, PlannedDocument, TextLine
from .writer import ReportLabWriter

logger = logging.getLogger(__name__)


class RenderState(Enum):
    EMPTY = "empty"
    BUILDING = "building"
    SERIALIZED = "serialized"


class RenderDriver:
    """Renders one planned document through one writer.

    A driver goes EMPTY -> BUILDING -> SERIALIZED and cannot be reused once
    serialized; render again with a new driver (and a new writer document).

    Attributes:
        writer: Document writer exposing create/add_page/embed_font/
            draw_text/embed_image/draw_image/save
        state: Current RenderState
    """

    def __init__(self, writer: Optional[ReportLabWriter] = None):
        self.writer = writer or ReportLabWriter()
        self.state = RenderState.EMPTY

    def render(self, document: PlannedDocument, title: Optional[str] = None) -> bytes:
        """
        Draw every planned command and serialize.

        Args:
            document: Planned pages in order
            title: Optional PDF metadata title

        Returns:
            Serialized PDF bytes

        Raises:
            RenderError: If the driver was already used, the document has
                no pages, or the writer fails
        """
        if self.state is not RenderState.EMPTY:
            raise RenderError(f"render driver already {self.state.value}; start a new render")
        if not document.pages:
            raise RenderError("nothing to render: document has no pages")

        self.state = RenderState.BUILDING
        try:
            doc = self.writer.create(title=title)
            font = self.writer.embed_font(doc, document.font_family)

            for planned_page in document.pages:
                page = self.writer.add_page(doc, document.page_width, document.page_height)
                for command in planned_page.commands:
                    if isinstance(command, TextLine):
                        self.writer.draw_text(
                            page, font, command.x, command.y, command.font_size, command.color, command.content
                        )
                    elif isinstance(command, ImageCommand):
                        image = self.writer.embed_image(doc, command.pixel_data, command.format)
                        self.writer.draw_image(page, image, command.x, command.y, command.width, command.height)
                    else:
                        raise RenderError(f"unsupported draw command {type(command).__name__}")

            pdf_bytes = self.writer.save(doc)
        except PlantReportError:
            raise
        except Exception as e:
            raise RenderError(str(e) or type(e).__name__) from e

        self.state = RenderState.SERIALIZED
        logger.info(
            "Rendered %d page(s), %d draw command(s), %d bytes",
            document.page_count, document.command_count, len(pdf_bytes),
        )
        return pdf_bytes


def render(document: PlannedDocument, writer: Optional[ReportLabWriter] = None, title: Optional[str] = None) -> bytes:
    """Render ``document`` with a fresh driver."""
    return RenderDriver(writer).render(document, title=title)
