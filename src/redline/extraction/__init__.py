"""Extraction package interfaces."""

from .models import ChangeKind, ChangeLocation, DocumentMetadata, ExtractionPath, ParsedDocument, RedlineChange
from .parser import DocumentParseError, DocxRedlineParser

__all__ = [
    "ChangeKind",
    "ChangeLocation",
    "DocumentMetadata",
    "DocumentParseError",
    "DocxRedlineParser",
    "ExtractionPath",
    "ParsedDocument",
    "RedlineChange",
]
