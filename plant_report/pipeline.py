"""Report Pipeline

Request-boundary orchestration for report generation.
"""
import logging
from typing import Callable, Optional

from .document_builder import ReportBuilder, RenderDriver, ReportLabWriter
from .report_options import LayoutConfig, ReportRequest
from .report_result import ReportResult
from .storage import ReportStorage
from .utils import format_file_size, report_filename

logger = logging.getLogger(__name__)

Handoff = Callable[[str, str], None]


class ReportPipeline:
    """Report generation pipeline orchestrator.

    This class orchestrates one report request:
    1. Validation - non-empty input, JPEG/PNG image that decodes
    2. Layout - header, paginated text and image placement
    3. Rendering - drawing commands issued to a fresh document writer
    4. Hand-off - optional staging in ephemeral storage, deleted afterwards

    Each call builds its own builder, driver and writer, so one pipeline
    can serve concurrent requests.

    Attributes:
        config: Layout configuration shared by all requests (read-only)
        storage: Ephemeral storage for ``export``
        writer_factory: Creates the document writer for each render
    """

    def __init__(
        self,
        config: Optional[LayoutConfig] = None,
        storage: Optional[ReportStorage] = None,
        writer_factory: Optional[Callable[[], ReportLabWriter]] = None,
    ):
        self.config = config or LayoutConfig()
        self.storage = storage or ReportStorage()
        self.writer_factory = writer_factory or ReportLabWriter

    def generate(self, request: ReportRequest) -> ReportResult:
        """Build and render a report.

        Args:
            request: Report input

        Returns:
            ReportResult with PDF bytes and filename

        Raises:
            Does not raise - all errors are captured in ReportResult.error
        """
        try:
            pdf_bytes, page_count = self._render(request)
        except Exception as e:
            logger.error("Error generating PDF report: %s", e)
            return ReportResult.failed(e)

        filename = report_filename()
        logger.info("Generated %s: %d page(s), %s", filename, page_count, format_file_size(len(pdf_bytes)))
        return ReportResult.completed(filename, pdf_bytes, page_count)

    def export(self, request: ReportRequest, handoff: Handoff) -> ReportResult:
        """Generate a report, stage it as a file and hand it off.

        The staged file is deleted once ``handoff`` returns or raises.
        Nothing is written when generation fails.

        Args:
            request: Report input
            handoff: Called with (path, filename) while the file exists,
                e.g. to stream or copy it to the caller

        Returns:
            ReportResult; a failing handoff is reported as a failure too
        """
        result = self.generate(request)
        if result.is_failed:
            return result

        try:
            with self.storage.staged(result.pdf_bytes, result.filename) as path:
                handoff(path, result.filename)
        except Exception as e:
            logger.error("Error handing off PDF report %s: %s", result.filename, e)
            return ReportResult.failed(e)

        return result

    def _render(self, request: ReportRequest):
        builder = ReportBuilder(config=self.config)
        document = builder.build(request)
        driver = RenderDriver(self.writer_factory())
        return driver.render(document, title=request.title), document.page_count
