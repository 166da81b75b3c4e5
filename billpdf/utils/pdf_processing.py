"""
PDF inspection utilities for rendered invoices.

Helper functions:
    page_count: Page count from a path or raw bytes.
    page_sizes: Page dimensions in points.
    extract_text: Plain text of every page (pdfplumber).
"""

from io import BytesIO
from pathlib import Path
from typing import List, Optional, Tuple, Union

import pdfplumber
from PyPDF2 import PdfReader

PdfSource = Union[Path, str, bytes]


def _open_source(source: PdfSource):
    """Wrap raw bytes in a stream; pass paths through as strings."""
    if isinstance(source, bytes):
        return BytesIO(source)
    return str(source)


def page_count(source: PdfSource) -> Optional[int]:
    """Get page count from PDF, or None if unreadable."""
    try:
        reader = PdfReader(_open_source(source))
        return len(reader.pages)
    except Exception:
        return None


def page_sizes(source: PdfSource) -> List[Tuple[float, float]]:
    """
    Get (width, height) in points for every page.

    A4 is roughly (595.3, 841.9).
    """
    reader = PdfReader(_open_source(source))
    sizes = []
    for page in reader.pages:
        box = page.mediabox
        sizes.append((round(float(box.width), 1), round(float(box.height), 1)))
    return sizes


def extract_text(source: PdfSource) -> str:
    """Extract text of all pages, one page per block separated by blank lines."""
    with pdfplumber.open(_open_source(source)) as pdf:
        return "\n\n".join(page.extract_text() or "" for page in pdf.pages)
