"""Orchestrates structured and fallback track-change extraction for one .docx."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
import logging
from typing import Callable

from redline.extraction.archive import COMMENTS_PART, DOCUMENT_PART, ArchiveOpenError, DocxArchive
from redline.extraction.changes import ExtractionError, extract_changes
from redline.extraction.comments import extract_comments
from redline.extraction.fallback import extract_annotated_changes
from redline.extraction.models import (
    DocumentMetadata,
    ExtractionPath,
    ParsedDocument,
    RedlineChange,
    distinct_authors,
)
from redline.extraction.normalization import count_words
from redline.extraction.plain_text import docx_to_text
from redline.extraction.xml_tree import MalformedXmlError, build_tree

logger = logging.getLogger(__name__)

TextConverter = Callable[[bytes], str]


@dataclass(slots=True)
class DocumentParseError(Exception):
    """Raised when a document yields no usable content at all."""

    filename: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (filename={self.filename})"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def build_metadata(
    *,
    filename: str,
    content: str,
    changes: list[RedlineChange],
    uploaded_at: datetime,
    last_modified: datetime,
) -> DocumentMetadata:
    return DocumentMetadata(
        filename=filename,
        uploaded_at=uploaded_at,
        last_modified=last_modified,
        word_count=count_words(content),
        change_count=len(changes),
        authors=distinct_authors(changes),
    )


class DocxRedlineParser:
    """Turn .docx bytes into plain text, a change list and metadata.

    Structured extraction reads ``word/document.xml`` (and
    ``word/comments.xml`` when present). Any failure there, or an empty
    result, falls back to scanning the plain text for bracketed
    annotations. Only a failed plain-text conversion is raised.
    """

    def __init__(
        self,
        *,
        text_converter: TextConverter = docx_to_text,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._text_converter = text_converter
        self._clock = clock

    async def parse(
        self,
        data: bytes,
        *,
        filename: str,
        last_modified: datetime | None = None,
    ) -> ParsedDocument:
        now = self._clock()

        try:
            content = await asyncio.to_thread(self._text_converter, data)
        except Exception as exc:
            logger.error("Plain-text conversion failed for %s: %s", filename, exc)
            raise DocumentParseError(
                filename, "Failed to parse document. Please ensure it's a valid .docx file."
            ) from exc

        changes, path = await self._extract(data, content, filename=filename, now=now)
        metadata = build_metadata(
            filename=filename,
            content=content,
            changes=changes,
            uploaded_at=now,
            last_modified=last_modified or now,
        )
        return ParsedDocument(content=content, changes=changes, metadata=metadata, extraction_path=path)

    async def _extract(
        self,
        data: bytes,
        content: str,
        *,
        filename: str,
        now: datetime,
    ) -> tuple[list[RedlineChange], ExtractionPath]:
        try:
            changes = await self._extract_structured(data, now=now)
        except (ArchiveOpenError, MalformedXmlError, ExtractionError) as exc:
            logger.warning("Structured extraction failed for %s, scanning text annotations: %s", filename, exc)
            changes = []
        except Exception:
            logger.exception("Unexpected error extracting track changes from %s", filename)
            changes = []

        if changes:
            return changes, ExtractionPath.STRUCTURED

        annotated = extract_annotated_changes(content, now=now)
        if annotated:
            logger.info("Recovered %s annotated changes from %s text", len(annotated), filename)
            return annotated, ExtractionPath.FALLBACK

        logger.info("No track changes found in %s", filename)
        return [], ExtractionPath.EMPTY

    async def _extract_structured(self, data: bytes, *, now: datetime) -> list[RedlineChange]:
        archive = await asyncio.to_thread(DocxArchive.open, data)
        with archive:
            document_xml = await asyncio.to_thread(archive.read_text, DOCUMENT_PART)
            if document_xml is None:
                raise ArchiveOpenError(f"Archive has no {DOCUMENT_PART}")
            comments_xml = await asyncio.to_thread(archive.read_text, COMMENTS_PART)

        document_tree = await asyncio.to_thread(build_tree, document_xml)
        changes = extract_changes(document_tree, now=now)

        if comments_xml is not None:
            comments_tree = await asyncio.to_thread(build_tree, comments_xml)
            changes = changes + extract_comments(comments_tree, now=now)

        return changes
