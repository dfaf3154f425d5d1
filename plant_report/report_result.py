"""Report Result Dataclass

Result of one report generation, successful or not.
"""
from dataclasses import dataclass, field
from typing import Optional

from .exceptions import PlantReportError


@dataclass
class ReportResult:
    """Result from the report pipeline.

    The pipeline never raises; failures come back as a result with
    ``status == "failed"`` and no PDF bytes.

    Attributes:
        status: "completed" or "failed"
        status_message: Human-readable status message

        # Output
        filename: Suggested download name (plant_analysis_report_<ms>.pdf)
        pdf_bytes: Serialized PDF (None on failure)
        page_count: Number of pages rendered

        # Error Handling
        error_code: Machine-readable error code (e.g. "unsupported_image_format")
        error: Error message if generation failed
        http_status: Status a web layer should answer with
    """

    # Status
    status: str  # "completed", "failed"
    status_message: str

    # Output
    filename: Optional[str] = None
    pdf_bytes: Optional[bytes] = field(default=None, repr=False)
    page_count: int = 0

    # Error Handling
    error_code: Optional[str] = None
    error: Optional[str] = None
    http_status: int = 200

    @property
    def is_complete(self) -> bool:
        """True if a PDF was produced."""
        return self.status == "completed" and self.pdf_bytes is not None

    @property
    def is_failed(self) -> bool:
        """True if generation failed with an error."""
        return self.status == "failed"

    @classmethod
    def completed(cls, filename: str, pdf_bytes: bytes, page_count: int) -> "ReportResult":
        return cls(
            status="completed",
            status_message=f"Report generated ({page_count} page{'s' if page_count != 1 else ''})",
            filename=filename,
            pdf_bytes=pdf_bytes,
            page_count=page_count,
        )

    @classmethod
    def failed(cls, error: Exception) -> "ReportResult":
        """Build a failure result, mapping report errors to codes and HTTP statuses."""
        if isinstance(error, PlantReportError):
            return cls(
                status="failed",
                status_message=f"Report generation failed: {error}",
                error_code=error.error_code,
                error=str(error),
                http_status=error.http_status,
            )
        return cls(
            status="failed",
            status_message="An error occurred while generating the PDF report",
            error_code="internal_error",
            error=str(error),
            http_status=500,
        )
