"""Plain-text rendering of a .docx via mammoth's HTML conversion."""

from __future__ import annotations

from io import BytesIO
import logging

from bs4 import BeautifulSoup
import mammoth

from redline.extraction.normalization import normalize_whitespace

logger = logging.getLogger(__name__)


class PlainTextConversionError(Exception):
    """Raised when no usable text can be produced from the document."""


def html_to_text(html: str) -> str:
    """Strip markup and collapse whitespace to single spaces."""

    soup = BeautifulSoup(html, "lxml")
    return normalize_whitespace(soup.get_text(" "))


def docx_to_text(data: bytes) -> str:
    try:
        result = mammoth.convert_to_html(BytesIO(data))
    except Exception as exc:
        raise PlainTextConversionError(f"Could not convert document to HTML: {exc}") from exc

    for message in result.messages:
        logger.debug("mammoth: %s", message)
    return html_to_text(result.value)
