"""Plant analysis report builder."""

from .pipeline import ReportPipeline
from .report_options import LayoutConfig, ReportRequest
from .report_result import ReportResult

__version__ = "0.1.0"

__all__ = ['ReportPipeline', 'LayoutConfig', 'ReportRequest', 'ReportResult']
