"""Configuration Constants

Constants for report layout and environment-driven settings.
"""
import os

# Page Geometry (points, A4 portrait)
PAGE_WIDTH = 595.28
PAGE_HEIGHT = 841.89

# Margins (points)
LEFT_MARGIN = 50.0
RIGHT_MARGIN = 45.28  # leaves a 500pt text column on A4
TOP_MARGIN = 800.0
BOTTOM_MARGIN = 50.0

# Text
DEFAULT_FONT_FAMILY = "DejaVuSans"
FALLBACK_FONT_FAMILY = "Helvetica"
BODY_FONT_SIZE = 12
LINE_HEIGHT = 18.0
TEXT_COLOR = (0.0, 0.0, 0.0)

# Report Header
REPORT_TITLE = "Plant Analysis Report"
TITLE_FONT_SIZE = 20
TITLE_COLOR = (0.2, 0.4, 0.6)
TITLE_LINE_HEIGHT = 30.0
DATE_FONT_SIZE = 14
DATE_LINE_HEIGHT = 20.0
DATE_FORMAT = "%m/%d/%Y"

# Image
DEFAULT_IMAGE_SCALE = 0.5
IMAGE_GAP = 20.0

# Output
REPORT_FILENAME_PREFIX = "plant_analysis_report"
REPORT_EXTENSION = "pdf"

# Mime types accepted for the report image
SUPPORTED_MIME_TYPES = {
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/pjpeg": "JPEG",
    "image/png": "PNG",
}

# Inference Service
GEMINI_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"
INFERENCE_TIMEOUT_SECONDS = 60
ANALYSIS_PROMPT = (
    "Analyze this plant image and provide detailed analysis of its species, health, "
    "care recommendations, characteristics, care instructions, and any interesting facts. "
    "Provide the response in plain text without any markdown formatting."
)


def get_reports_dir() -> str:
    """Directory where rendered reports are staged before hand-off."""
    return os.getenv("REPORTS_DIR", os.path.join(os.getcwd(), "reports"))


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()
