"""Utilities Module

Helper functions for report naming and sizes.
"""
import os
import re
import time
import uuid
from typing import Optional

from .config import REPORT_EXTENSION, REPORT_FILENAME_PREFIX


def report_filename(timestamp_ms: Optional[int] = None, extension: str = REPORT_EXTENSION) -> str:
    """
    Download name for a report.

    Args:
        timestamp_ms: Milliseconds since the epoch (now by default)
        extension: File extension without the dot

    Returns:
        e.g. "plant_analysis_report_1760000000000.pdf"
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{REPORT_FILENAME_PREFIX}_{timestamp_ms}.{extension}"


def unique_storage_name(filename: str) -> str:
    """
    Collision-free on-disk name for ``filename``.

    Concurrent requests can produce the same millisecond timestamp, so a
    random suffix is added before the extension.

    Examples:
        unique_storage_name("report_1.pdf") -> "report_1_3f2a9c1b7d4e.pdf"
    """
    name, ext = os.path.splitext(clean_filename(filename))
    return f"{name}_{uuid.uuid4().hex[:12]}{ext}"


def clean_filename(filename: str) -> str:
    """
    Clean filename for safe saving, keeping the extension.

    Args:
        filename: Original filename

    Returns:
        Cleaned filename
    """
    # Remove path components
    filename = os.path.basename(filename)

    name, ext = os.path.splitext(filename)

    # Replace invalid characters
    name = re.sub(r'[^\w\s-]', '', name)

    # Replace spaces with underscores
    name = re.sub(r'\s+', '_', name)

    # Limit length
    if len(name) > 80:
        name = name[:80]

    ext = re.sub(r'[^\w.]', '', ext)
    return (name or 'report') + ext


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted string (e.g., "45.3 KB")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    else:
        return f"{size_bytes / (1024 * 1024):.1f} MB"
