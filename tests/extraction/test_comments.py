from __future__ import annotations

from datetime import datetime, timezone

from redline.extraction.comments import extract_comments
from redline.extraction.models import ChangeKind
from redline.extraction.xml_tree import build_tree

_W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
_NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def _comments(inner: str):
    return build_tree(f'<w:comments xmlns:w="{_W_NS}">{inner}</w:comments>')


def test_extract_comments_reads_text_author_and_date() -> None:
    tree = _comments(
        '<w:comment w:id="0" w:author="Legal" w:date="2024-03-10T14:00:00Z" w:initials="L">'
        "<w:p><w:r><w:t>Please confirm </w:t></w:r><w:r><w:t>the rate.</w:t></w:r></w:p></w:comment>"
    )

    [comment] = extract_comments(tree, now=_NOW)

    assert comment.kind is ChangeKind.COMMENT
    assert comment.text == "Please confirm the rate."
    assert comment.comment == comment.text
    assert comment.author == "Legal"
    assert comment.timestamp == datetime(2024, 3, 10, 14, 0, tzinfo=timezone.utc)
    assert (comment.location.start, comment.location.end) == (0, 0)
    assert comment.original_text is None


def test_extract_comments_skips_blank_comments_and_defaults_author() -> None:
    tree = _comments(
        '<w:comment w:id="0" w:author="Legal"><w:p/></w:comment>'
        '<w:comment w:id="1"><w:p><w:r><w:t>Anonymous note</w:t></w:r></w:p></w:comment>'
    )

    comments = extract_comments(tree, now=_NOW)

    assert [(c.author, c.text, c.timestamp) for c in comments] == [("Unknown", "Anonymous note", _NOW)]


def test_extract_comments_keeps_source_order_and_unique_ids() -> None:
    tree = _comments(
        "".join(
            f'<w:comment w:id="{i}" w:author="R{i}"><w:p><w:r><w:t>note {i}</w:t></w:r></w:p></w:comment>'
            for i in range(3)
        )
    )

    comments = extract_comments(tree, now=_NOW)

    assert [c.text for c in comments] == ["note 0", "note 1", "note 2"]
    assert len({c.id for c in comments}) == 3
