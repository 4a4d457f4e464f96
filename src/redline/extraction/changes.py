"""Insertion/deletion extraction from a parsed ``word/document.xml`` tree."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Collection, Iterator
from uuid import uuid4

from redline.extraction.models import ChangeKind, ChangeLocation, RedlineChange
from redline.extraction.text_recovery import recover_text
from redline.extraction.xml_tree import XmlElement, XmlText

UNKNOWN_AUTHOR = "Unknown"

_REVISION_KINDS = {
    "ins": ChangeKind.ADDED,
    "del": ChangeKind.DELETED,
}


class ExtractionError(Exception):
    """Raised when an unexpected tree shape breaks structured extraction."""


def read_author(element: XmlElement) -> str:
    author = element.find_attribute("author")
    return author if author else UNKNOWN_AUTHOR


def read_timestamp(element: XmlElement, default: datetime) -> datetime:
    """Parse the ``date`` attribute, falling back to ``default``."""

    raw = element.find_attribute("date")
    if not raw:
        return default
    value = raw.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return default
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def iter_elements(node: XmlElement, local_tags: Collection[str]) -> Iterator[XmlElement]:
    """Yield matching elements depth-first in document order.

    A match is still descended into, so nested matches are yielded as well.
    """

    if node.local_tag in local_tags:
        yield node
    for child in node.children:
        if not isinstance(child, XmlText):
            yield from iter_elements(child, local_tags)


def extract_changes(tree: XmlElement, *, now: datetime | None = None) -> list[RedlineChange]:
    """Return added/deleted changes for every ``ins``/``del`` with text."""

    extracted_at = now or datetime.now(timezone.utc)
    changes: list[RedlineChange] = []

    try:
        for element in iter_elements(tree, _REVISION_KINDS.keys()):
            text = recover_text(element)
            if not text:
                continue

            kind = _REVISION_KINDS[element.local_tag]
            location = ChangeLocation(start=0, end=len(text))
            author = read_author(element)
            timestamp = read_timestamp(element, extracted_at)

            if kind is ChangeKind.ADDED:
                changes.append(
                    RedlineChange(
                        id=f"ins-{uuid4().hex}",
                        kind=kind,
                        text=text,
                        author=author,
                        timestamp=timestamp,
                        location=location,
                    )
                )
            else:
                changes.append(
                    RedlineChange(
                        id=f"del-{uuid4().hex}",
                        kind=kind,
                        text="",
                        original_text=text,
                        author=author,
                        timestamp=timestamp,
                        location=location,
                    )
                )
    except RecursionError as exc:
        raise ExtractionError("Document tree is nested too deeply to walk") from exc

    return changes
