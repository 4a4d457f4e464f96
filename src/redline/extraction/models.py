"""Canonical data structures produced by the track-change extractors."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ChangeKind(str, Enum):
    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"
    COMMENT = "comment"


class ExtractionPath(str, Enum):
    """Which strategy produced the final change list."""

    STRUCTURED = "structured"
    FALLBACK = "fallback"
    EMPTY = "empty"


@dataclass(frozen=True, slots=True)
class ChangeLocation:
    """Half-open ``[start, end)`` span in a text coordinate space.

    ``approximate`` is True when the span is a placeholder rather than a real
    offset into the extracted plain text.
    """

    start: int
    end: int
    paragraph: int | None = None
    approximate: bool = True


@dataclass(slots=True)
class RedlineChange:
    """One detected insertion, deletion, modification or comment."""

    id: str
    kind: ChangeKind
    text: str
    author: str
    timestamp: datetime
    location: ChangeLocation
    original_text: str | None = None
    comment: str | None = None
    suggestions: list[str] = field(default_factory=list)
    resolved: bool = False

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "text": self.text,
            "original_text": self.original_text,
            "author": self.author,
            "timestamp": self.timestamp.isoformat(),
            "location": {
                "start": self.location.start,
                "end": self.location.end,
                "paragraph": self.location.paragraph,
                "approximate": self.location.approximate,
            },
            "comment": self.comment,
            "suggestions": list(self.suggestions),
            "resolved": self.resolved,
        }


@dataclass(frozen=True, slots=True)
class DocumentMetadata:
    """Read-only summary derived from the final change list and plain text."""

    filename: str
    uploaded_at: datetime
    last_modified: datetime
    word_count: int
    change_count: int
    authors: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "filename": self.filename,
            "uploaded_at": self.uploaded_at.isoformat(),
            "last_modified": self.last_modified.isoformat(),
            "word_count": self.word_count,
            "change_count": self.change_count,
            "authors": list(self.authors),
        }


@dataclass(slots=True)
class ParsedDocument:
    """Complete parser output handed to the review layer."""

    content: str
    changes: list[RedlineChange]
    metadata: DocumentMetadata
    extraction_path: ExtractionPath = ExtractionPath.EMPTY


def distinct_authors(changes: list[RedlineChange]) -> tuple[str, ...]:
    """Return change authors de-duplicated in first-seen order."""

    return tuple(dict.fromkeys(change.author for change in changes))
