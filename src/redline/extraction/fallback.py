"""Bracketed change annotations recovered from plain text.

Used when the structured XML path is unavailable. Each pattern is scanned
independently, so all additions come first, then deletions, then
modifications, each group in text order.
"""

from __future__ import annotations

from datetime import datetime, timezone
import re

from redline.extraction.models import ChangeKind, ChangeLocation, RedlineChange

FALLBACK_AUTHOR = "Document Author"

_ADDED_RE = re.compile(r"\[Added: (.+?)\]")
_DELETED_RE = re.compile(r"\[Deleted: (.+?)\]")
_MODIFIED_RE = re.compile(r"\[Modified: (.+?) -> (.+?)\]")


def extract_annotated_changes(content: str, *, now: datetime | None = None) -> list[RedlineChange]:
    extracted_at = now or datetime.now(timezone.utc)
    changes: list[RedlineChange] = []

    def _emit(kind: ChangeKind, match: re.Match[str], *, text: str, original_text: str | None) -> None:
        changes.append(
            RedlineChange(
                id=f"alt-{kind.value}-{len(changes)}",
                kind=kind,
                text=text,
                original_text=original_text,
                author=FALLBACK_AUTHOR,
                timestamp=extracted_at,
                location=ChangeLocation(start=match.start(), end=match.end(), approximate=False),
            )
        )

    for match in _ADDED_RE.finditer(content):
        _emit(ChangeKind.ADDED, match, text=match.group(1), original_text=None)
    for match in _DELETED_RE.finditer(content):
        _emit(ChangeKind.DELETED, match, text="", original_text=match.group(1))
    for match in _MODIFIED_RE.finditer(content):
        _emit(ChangeKind.MODIFIED, match, text=match.group(2), original_text=match.group(1))

    return changes
