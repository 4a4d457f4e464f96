"""Prefix-qualified XML tree used by the change and comment extractors.

lxml resolves namespaces to Clark notation (``{uri}ins``). Word markup is
matched on the prefixed names the document author sees (``w:ins``,
``w:author``), so the parsed tree is converted into a small closed node
union that carries those names verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Iterator, Mapping, Union

from lxml import etree

_DECLARATION_RE = re.compile(r"^\s*<\?xml[^>]*\?>")
_XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


class MalformedXmlError(Exception):
    """Raised when an XML part cannot be parsed."""


def local_name(name: str) -> str:
    """Strip a namespace prefix: ``w:ins`` and ``ins`` both become ``ins``."""

    return name.rsplit(":", 1)[-1]


@dataclass(frozen=True, slots=True)
class XmlText:
    value: str


@dataclass(frozen=True, slots=True)
class XmlElement:
    tag: str
    attributes: Mapping[str, str] = field(default_factory=dict)
    children: tuple["XmlNode", ...] = ()

    @property
    def local_tag(self) -> str:
        return local_name(self.tag)

    @property
    def text_content(self) -> str:
        return "".join(node.value for node in self.iter_text_nodes())

    def find_attribute(self, name: str) -> str | None:
        """Look up an attribute by exact or prefix-insensitive name."""

        if name in self.attributes:
            return self.attributes[name]
        wanted = local_name(name)
        for key, value in self.attributes.items():
            if local_name(key) == wanted:
                return value
        return None

    def iter_text_nodes(self) -> Iterator[XmlText]:
        for child in self.children:
            if isinstance(child, XmlText):
                yield child
            else:
                yield from child.iter_text_nodes()


XmlNode = Union[XmlElement, XmlText]


def build_tree(xml_text: str | bytes) -> XmlElement:
    """Parse raw XML into an :class:`XmlElement` tree."""

    if isinstance(xml_text, str):
        xml_text = _DECLARATION_RE.sub("", xml_text, count=1)

    parser = etree.XMLParser(resolve_entities=False, no_network=True, load_dtd=False, huge_tree=False)
    try:
        root = etree.fromstring(xml_text, parser=parser)
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise MalformedXmlError(f"Malformed XML: {exc}") from exc

    return _convert(root)


def _convert(element: etree._Element) -> XmlElement:
    prefixes = {uri: prefix for prefix, uri in element.nsmap.items() if uri}
    prefixes[_XML_NAMESPACE] = "xml"

    children: list[XmlNode] = []
    if element.text:
        children.append(XmlText(element.text))
    for child in element:
        if isinstance(child.tag, str):
            children.append(_convert(child))
        if child.tail:
            children.append(XmlText(child.tail))

    attributes = {_qualify(key, prefixes): value for key, value in element.attrib.items()}
    return XmlElement(tag=_qualify(element.tag, prefixes), attributes=attributes, children=tuple(children))


def _qualify(clark_name: str, prefixes: dict[str, str]) -> str:
    if not clark_name.startswith("{"):
        return clark_name
    uri, _, name = clark_name[1:].partition("}")
    prefix = prefixes.get(uri)
    return f"{prefix}:{name}" if prefix else name
