"""Font Manager Module

Handles font registration, the TrueType fallback chain and text metrics.
"""
import logging
import os
from typing import List, Optional

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont, TTFError

from ..config import FALLBACK_FONT_FAMILY
from ..exceptions import FontError

logger = logging.getLogger(__name__)

_BUNDLED_FONT_DIR = os.path.join(os.path.dirname(__file__), '..', '..', 'fonts')

# Directories searched for <family>.ttf, in order of preference
FONT_SEARCH_DIRS = [
    _BUNDLED_FONT_DIR,
    '/usr/share/fonts/truetype/dejavu',
    '/usr/share/fonts/dejavu',
    '/usr/share/fonts/truetype/liberation',
    '/Library/Fonts',
    '/System/Library/Fonts/Supplemental',  # macOS
    'C:\\Windows\\Fonts',  # Windows
]


class FontManager:
    """Resolves a font family to a name registered with ReportLab.

    This class handles:
    - The 14 standard PDF fonts (Helvetica, Times-Roman, Courier...), which
      need no registration
    - TrueType families looked up as ``<family>.ttf`` across bundled and
      system font directories
    - Falling back to Helvetica when a TrueType family is not installed

    Attributes:
        fallback_family: Standard font used when a TrueType family is missing
        search_dirs: Directories scanned for TrueType files
    """

    def __init__(self, fallback_family: str = FALLBACK_FONT_FAMILY, search_dirs: Optional[List[str]] = None):
        if fallback_family not in pdfmetrics.standardFonts:
            raise FontError(f"Fallback font must be a standard PDF font, got '{fallback_family}'")
        self.fallback_family = fallback_family
        self.search_dirs = search_dirs if search_dirs is not None else FONT_SEARCH_DIRS

    @staticmethod
    def is_standard(family: str) -> bool:
        return family in pdfmetrics.standardFonts

    @staticmethod
    def is_registered(family: str) -> bool:
        return family in pdfmetrics.getRegisteredFontNames()

    def find_font_file(self, family: str) -> Optional[str]:
        """Return the first ``<family>.ttf`` found in the search directories."""
        for font_dir in self.search_dirs:
            font_path = os.path.join(font_dir, f"{family}.ttf")
            if os.path.exists(font_path):
                return font_path
        return None

    def resolve(self, family: str) -> str:
        """
        Return a font name ReportLab can draw and measure with.

        Args:
            family: Standard font name or TrueType family (e.g. 'DejaVuSans')

        Returns:
            ``family`` itself when it is usable, otherwise the fallback font
        """
        if self.is_standard(family) or self.is_registered(family):
            return family

        font_path = self.find_font_file(family)
        if font_path is None:
            logger.warning(
                "Font %s not found in %s; using %s (non-Latin text may not render)",
                family, self.search_dirs, self.fallback_family,
            )
            return self.fallback_family

        try:
            pdfmetrics.registerFont(TTFont(family, font_path))
        except (TTFError, OSError) as e:
            logger.warning("Failed to register font %s from %s: %s", family, font_path, e)
            return self.fallback_family

        logger.debug("Registered font %s from %s", family, font_path)
        return family

    @staticmethod
    def string_width(text: str, font_name: str, font_size: float) -> float:
        """Advance width of ``text`` in points."""
        return pdfmetrics.stringWidth(text, font_name, font_size)
