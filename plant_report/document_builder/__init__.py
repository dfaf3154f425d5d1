"""Document Builder Package

This package lays out and renders plant analysis reports:

Core Classes:
- ReportBuilder: Main orchestrator class (from builder.py)
- TextFlowPlanner: Word wrapping and pagination of text
- RenderDriver: Issues planned draw commands to a document writer
- ReportLabWriter: Document writer backed by ReportLab's canvas
- FontManager: Font resolution and metrics

Utilities:
- image_placement: Image page/rectangle resolution
- image_source: Mime type parsing and image decoding

Helper Functions:
- create_report_pdf: Plan and render a report in one call
"""

from .builder import ReportBuilder, create_report_pdf
from .document_model import (
    ImageCommand,
    ImageFormat,
    ImagePlacement,
    LayoutCursor,
    Page,
    PlannedDocument,
    TextLine,
)
from .font_manager import FontManager
from .image_source import ReportImage, load_image, parse_image_format
from .render_driver import RenderDriver, RenderState, render
from .text_flow import TextFlowPlanner, wrap_line, wrap_text
from .writer import ReportLabWriter
from . import image_placement

# Expose public API
__all__ = [
    # Main builder class
    'ReportBuilder',

    # Helper functions
    'create_report_pdf',
    'render',
    'load_image',
    'parse_image_format',
    'wrap_line',
    'wrap_text',

    # Component classes
    'TextFlowPlanner',
    'RenderDriver',
    'RenderState',
    'ReportLabWriter',
    'FontManager',

    # Data model
    'ImageCommand',
    'ImageFormat',
    'ImagePlacement',
    'LayoutCursor',
    'Page',
    'PlannedDocument',
    'ReportImage',
    'TextLine',

    # Utilities module
    'image_placement',
]
