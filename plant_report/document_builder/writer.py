"""Document Writer Module

ReportLab-backed implementation of the document writer used by the render
driver. Drawing calls are recorded per page and replayed onto a
``reportlab.pdfgen.canvas.Canvas`` when the document is saved, so pages can
be created up front and serialized in one pass.
"""
import io
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas as pdfcanvas

from ..exceptions import RenderError
from .document_model import ImageFormat
from .font_manager import FontManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FontHandle:
    name: str


@dataclass
class ImageHandle:
    reader: Any
    format: ImageFormat


@dataclass
class WriterPage:
    width: float
    height: float
    ops: List[Tuple] = field(default_factory=list)


@dataclass
class WriterDocument:
    title: Optional[str] = None
    pages: List[WriterPage] = field(default_factory=list)
    fonts: Dict[str, FontHandle] = field(default_factory=dict)


class ReportLabWriter:
    """Creates, draws and serializes multi-page PDF documents.

    Attributes:
        font_manager: Resolves font families for ``embed_font``
        invariant: If True, ReportLab writes a fixed creation date and
            document ID so identical input yields identical bytes
        page_compression: Compress page content streams
    """

    def __init__(self, font_manager: Optional[FontManager] = None, invariant: bool = False, page_compression: bool = True):
        self.font_manager = font_manager or FontManager()
        self.invariant = invariant
        self.page_compression = page_compression

    def create(self, title: Optional[str] = None) -> WriterDocument:
        return WriterDocument(title=title)

    def add_page(self, doc: WriterDocument, width: float, height: float) -> WriterPage:
        page = WriterPage(width=width, height=height)
        doc.pages.append(page)
        return page

    def embed_font(self, doc: WriterDocument, family: str) -> FontHandle:
        if family not in doc.fonts:
            doc.fonts[family] = FontHandle(self.font_manager.resolve(family))
        return doc.fonts[family]

    def embed_image(self, doc: WriterDocument, data: bytes, image_format: ImageFormat) -> ImageHandle:
        try:
            reader = ImageReader(io.BytesIO(data))
        except Exception as e:
            raise RenderError(f"could not embed {image_format.value} image: {e}") from e
        return ImageHandle(reader=reader, format=image_format)

    def draw_text(self, page: WriterPage, font: FontHandle, x: float, y: float, size: float,
                  color: Tuple[float, float, float], text: str):
        page.ops.append(("text", font.name, size, color, x, y, text))

    def draw_image(self, page: WriterPage, image: ImageHandle, x: float, y: float, width: float, height: float):
        page.ops.append(("image", image, x, y, width, height))

    def save(self, doc: WriterDocument) -> bytes:
        """
        Serialize the document to PDF bytes.

        Raises:
            RenderError: If the document has no pages or ReportLab fails
                (e.g. corrupt image data discovered while encoding)
        """
        if not doc.pages:
            raise RenderError("document has no pages")

        buffer = io.BytesIO()
        try:
            canvas = pdfcanvas.Canvas(
                buffer,
                pagesize=(doc.pages[0].width, doc.pages[0].height),
                invariant=int(self.invariant),
                pageCompression=int(self.page_compression),
            )
            if doc.title:
                canvas.setTitle(doc.title)
            for page in doc.pages:
                canvas.setPageSize((page.width, page.height))
                for op in page.ops:
                    self._replay(canvas, op)
                canvas.showPage()
            canvas.save()
        except RenderError:
            raise
        except Exception as e:
            logger.error("PDF serialization failed: %s", e)
            raise RenderError(str(e) or type(e).__name__) from e

        return buffer.getvalue()

    @staticmethod
    def _replay(canvas, op: Tuple):
        kind = op[0]
        if kind == "text":
            _, font_name, size, color, x, y, text = op
            canvas.setFont(font_name, size)
            canvas.setFillColorRGB(*color)
            canvas.drawString(x, y, text)
        elif kind == "image":
            _, image, x, y, width, height = op
            canvas.drawImage(image.reader, x, y, width=width, height=height)
        else:
            raise RenderError(f"unknown draw operation '{kind}'")
