"""Custom Exception Hierarchy

Exception hierarchy for the plant report builder. Every error carries an
``error_code`` and the HTTP status a caller should answer with, so the request
boundary can turn any of them into a structured failure.
"""
from typing import Optional


class PlantReportError(Exception):
    """Base exception for all plant report errors.

    This is the root of the exception hierarchy. Catching this exception
    will catch all custom exceptions raised while building a report.
    """
    error_code = "report_error"
    http_status = 500


# Validation Errors
class ValidationError(PlantReportError):
    """Raised when request input validation fails."""
    error_code = "invalid_input"
    http_status = 400


class EmptyInputError(ValidationError):
    """Raised when there is neither text nor an image to render."""
    error_code = "empty_input"

    def __init__(self):
        super().__init__("Nothing to render: the analysis text is empty and no image was supplied")


class UnsupportedImageFormatError(ValidationError):
    """Raised when the image mime type is not JPEG or PNG."""
    error_code = "unsupported_image_format"

    def __init__(self, mime_type: Optional[str]):
        self.mime_type = mime_type
        super().__init__(
            f"Unsupported image format '{mime_type}'. Please upload a JPEG or PNG image."
        )


class ImageDecodeError(ValidationError):
    """Raised when image bytes cannot be decoded as the declared format."""
    error_code = "image_decode_error"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Could not decode image: {reason}")


class InvalidConfigurationError(ValidationError):
    """Raised when layout or request parameters are invalid."""
    error_code = "invalid_configuration"


# Layout Errors
class LayoutError(PlantReportError):
    """Base class for page layout errors."""
    error_code = "layout_error"
    http_status = 400


class ImageTooTallError(LayoutError):
    """Raised when a scaled image cannot fit even on an empty page.

    The caller should retry with a smaller scale factor.
    """
    error_code = "image_too_tall"

    def __init__(self, image_height: float, usable_height: float):
        self.image_height = image_height
        self.usable_height = usable_height
        super().__init__(
            f"Scaled image height {image_height:.1f}pt exceeds usable page height "
            f"{usable_height:.1f}pt; reduce the scale factor"
        )


# PDF Rendering Errors
class RenderingError(PlantReportError):
    """Base class for PDF rendering errors."""
    error_code = "render_error"
    http_status = 500


class RenderError(RenderingError):
    """Raised when the document writer fails to build or serialize the PDF."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Failed to render PDF report: {reason}")


class FontError(RenderingError):
    """Raised when font setup or registration fails."""
    error_code = "font_error"


# Storage Errors
class StorageError(PlantReportError):
    """Raised when a report cannot be staged in or removed from storage."""
    error_code = "storage_error"


# Inference Service Errors
class InferenceError(PlantReportError):
    """Raised when the image analysis service call fails."""
    error_code = "inference_error"
    http_status = 502

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        if status_code is not None:
            message = f"Inference API error ({status_code}): {message}"
        super().__init__(message)


class InferenceAuthenticationError(InferenceError):
    """Raised when the inference API rejects the configured key."""
    error_code = "inference_auth_error"

    def __init__(self):
        super().__init__(
            "Inference API authentication failed. Please check GEMINI_API_KEY."
        )
