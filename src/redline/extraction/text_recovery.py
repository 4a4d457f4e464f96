"""Flatten an XML subtree into the human-readable text it carries."""

from __future__ import annotations

from typing import Iterator

from redline.extraction.xml_tree import XmlNode, XmlText

TEXT_CARRIERS = frozenset({"t", "delText"})


def recover_text(node: XmlNode | None) -> str:
    """Concatenate the text under ``node`` at any nesting depth.

    Word run text lives in ``w:t`` (or ``w:delText`` inside a deletion). A
    carrier's content is taken verbatim, whitespace included, and the walk
    does not descend into it again. Loose text nodes elsewhere are kept
    unless they are whitespace-only indentation between elements.
    """

    if node is None:
        return ""
    return "".join(_fragments(node)).strip()


def _fragments(node: XmlNode) -> Iterator[str]:
    if isinstance(node, XmlText):
        if node.value.strip():
            yield node.value
        return

    if node.local_tag in TEXT_CARRIERS:
        yield node.text_content
        return

    for child in node.children:
        yield from _fragments(child)
