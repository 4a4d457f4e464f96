"""Comment extraction from a parsed ``word/comments.xml`` tree."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from redline.extraction.changes import ExtractionError, iter_elements, read_author, read_timestamp
from redline.extraction.models import ChangeKind, ChangeLocation, RedlineChange
from redline.extraction.text_recovery import recover_text
from redline.extraction.xml_tree import XmlElement

_COMMENT_TAGS = frozenset({"comment"})


def extract_comments(tree: XmlElement, *, now: datetime | None = None) -> list[RedlineChange]:
    extracted_at = now or datetime.now(timezone.utc)
    comments: list[RedlineChange] = []

    try:
        for element in iter_elements(tree, _COMMENT_TAGS):
            text = recover_text(element)
            if not text:
                continue
            comments.append(
                RedlineChange(
                    id=f"comment-{uuid4().hex}",
                    kind=ChangeKind.COMMENT,
                    text=text,
                    comment=text,
                    author=read_author(element),
                    timestamp=read_timestamp(element, extracted_at),
                    location=ChangeLocation(start=0, end=0),
                )
            )
    except RecursionError as exc:
        raise ExtractionError("Comments tree is nested too deeply to walk") from exc

    return comments
