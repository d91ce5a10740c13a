"""Namespace-agnostic lxml helpers for package documents.

Real-world packages mix default namespaces, prefixes and no namespace at all,
so elements are matched on their local name only.
"""

from typing import List, Optional

from lxml import etree


def parse_xml(raw: bytes) -> Optional[etree._Element]:
    """Parse XML with the recovering parser; None when nothing is salvageable."""
    parser = etree.XMLParser(resolve_entities=False, no_network=True, recover=True)
    try:
        return etree.fromstring(raw, parser=parser)
    except etree.XMLSyntaxError:
        return None


def local_name(tag: object) -> str:
    if not isinstance(tag, str):
        # Comments and processing instructions.
        return ""
    return tag.rsplit("}", 1)[-1]


def children(node: etree._Element, name: str) -> List[etree._Element]:
    return [child for child in node if local_name(child.tag) == name]


def first_child(node: etree._Element, name: str) -> Optional[etree._Element]:
    for child in node:
        if local_name(child.tag) == name:
            return child
    return None


def descendants(node: etree._Element, name: str) -> List[etree._Element]:
    return [element for element in node.iter() if local_name(element.tag) == name]


def first_descendant(node: etree._Element, name: str) -> Optional[etree._Element]:
    for element in node.iter():
        if local_name(element.tag) == name:
            return element
    return None


def attribute(node: etree._Element, name: str) -> str:
    """Return an attribute by local name (``epub:type`` matches ``type``)."""
    value = node.get(name)
    if value is None:
        for key, candidate in node.attrib.items():
            if local_name(key) == name:
                value = candidate
                break
    return (value or "").strip()


def text_of(node: Optional[etree._Element]) -> str:
    if node is None:
        return ""
    return " ".join("".join(node.itertext()).split())
