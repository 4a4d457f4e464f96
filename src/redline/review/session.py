"""Review state for one parsed document: selection, suggestions, comments."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import PurePath
from uuid import uuid4

from redline.extraction.models import DocumentMetadata, ParsedDocument, RedlineChange

DEFAULT_REVIEWER = "Contract Manager"


class UnknownChangeError(KeyError):
    """Raised when a change id is not part of the session."""


@dataclass(frozen=True, slots=True)
class CollaborationComment:
    id: str
    change_id: str
    author: str
    content: str
    timestamp: datetime
    resolved: bool = False


@dataclass(slots=True)
class ReviewSession:
    """Mutable review layer over an immutable extraction result.

    Change records handed out by the parser are never edited in place; every
    mutation swaps in an updated copy, so the parser's list stays untouched.
    """

    metadata: DocumentMetadata
    changes: list[RedlineChange]
    content: str
    original_content: str
    comments: list[CollaborationComment] = field(default_factory=list)
    selected_change_id: str | None = None

    @classmethod
    def start(cls, document: ParsedDocument) -> "ReviewSession":
        return cls(
            metadata=document.metadata,
            changes=list(document.changes),
            content=document.content,
            original_content=document.content,
        )

    def get(self, change_id: str) -> RedlineChange:
        return self.changes[self._index_of(change_id)]

    def select(self, change_id: str) -> RedlineChange:
        change = self.get(change_id)
        self.selected_change_id = change_id
        return change

    def add_suggestion(self, change_id: str, suggestion: str) -> RedlineChange:
        if not suggestion.strip():
            raise ValueError("Suggestion cannot be empty")
        index = self._index_of(change_id)
        current = self.changes[index]
        updated = replace(current, suggestions=[*current.suggestions, suggestion])
        self.changes[index] = updated
        return updated

    def add_comment(
        self,
        change_id: str,
        content: str,
        *,
        author: str = DEFAULT_REVIEWER,
        now: datetime | None = None,
    ) -> CollaborationComment:
        if not content.strip():
            raise ValueError("Comment cannot be empty")
        self._index_of(change_id)
        comment = CollaborationComment(
            id=f"comment-{uuid4().hex}",
            change_id=change_id,
            author=author,
            content=content,
            timestamp=now or datetime.now(timezone.utc),
        )
        self.comments.append(comment)
        return comment

    def resolve(self, change_id: str) -> RedlineChange:
        index = self._index_of(change_id)
        updated = replace(self.changes[index], resolved=True)
        self.changes[index] = updated
        return updated

    def comments_for(self, change_id: str) -> list[CollaborationComment]:
        return [comment for comment in self.comments if comment.change_id == change_id]

    def pending_changes(self) -> list[RedlineChange]:
        return [change for change in self.changes if not change.resolved]

    def update_content(self, content: str) -> None:
        """Replace the edited text; the extracted original is kept."""

        self.content = content

    def edited_filename(self) -> str:
        """Download name for the edited text, e.g. ``lease.docx`` -> ``lease_edited.txt``."""

        return f"{PurePath(self.metadata.filename).stem}_edited.txt"

    def _index_of(self, change_id: str) -> int:
        for index, change in enumerate(self.changes):
            if change.id == change_id:
                return index
        raise UnknownChangeError(change_id)
