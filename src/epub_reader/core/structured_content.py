"""Structured-content trees used by term-bank definitions.

A term bank encodes rich-text definitions as untyped nested JSON. They are
lifted into a closed tagged variant before anything walks them:

    ContentTree = TextLeaf | ContentList | ContentNode
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union


@dataclass(frozen=True)
class TextLeaf:
    value: str


@dataclass(frozen=True)
class ContentList:
    items: Tuple["ContentTree", ...]


@dataclass(frozen=True)
class ContentNode:
    """An element such as ``{"tag": "span", "title": "...", "content": ...}``.

    Every key other than ``tag`` and ``content`` is kept in ``attrs``.
    """

    tag: str
    attrs: Dict[str, Any] = field(default_factory=dict)
    content: Optional["ContentTree"] = None

    def attr(self, name: str) -> Any:
        return self.attrs.get(name)


ContentTree = Union[TextLeaf, ContentList, ContentNode]


def parse_content(raw: Any) -> Optional[ContentTree]:
    """Lift decoded JSON into a ContentTree.

    Values that are neither strings, lists nor objects (numbers, null) carry no
    text and map to None; list members that map to None are dropped.
    """
    if isinstance(raw, str):
        return TextLeaf(raw)
    if isinstance(raw, list):
        items = tuple(tree for tree in (parse_content(item) for item in raw) if tree is not None)
        return ContentList(items)
    if isinstance(raw, dict):
        attrs = {key: value for key, value in raw.items() if key not in ("tag", "content")}
        content = parse_content(raw["content"]) if "content" in raw else None
        return ContentNode(tag=str(raw.get("tag") or ""), attrs=attrs, content=content)
    return None
