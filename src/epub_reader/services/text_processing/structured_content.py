"""Structured-content walker - turns a definition tree into text and part of speech."""

from typing import List, Optional

from epub_reader.core.dictionary_entities import DefinitionCandidate
from epub_reader.core.structured_content import (
    ContentList,
    ContentNode,
    ContentTree,
    TextLeaf,
    parse_content,
)

LABEL_TAG = "span"
LIST_ITEM_TAG = "li"


class _Accumulator:
    def __init__(self) -> None:
        self.part_of_speech = ""
        self.text = ""

    def append(self, value: str) -> None:
        self.text += value + " "


def _walk(tree: Optional[ContentTree], acc: _Accumulator) -> None:
    if tree is None:
        return
    if isinstance(tree, TextLeaf):
        acc.append(tree.value)
    elif isinstance(tree, ContentList):
        for item in tree.items:
            _walk(item, acc)
    elif isinstance(tree, ContentNode):
        title = tree.attr("title")
        if tree.tag == LABEL_TAG and isinstance(title, str) and "(" in title:
            # Labels such as "noun (common)" carry the part of speech only.
            acc.part_of_speech = title.split("(", 1)[0].strip()
        elif tree.tag == LIST_ITEM_TAG and isinstance(tree.content, TextLeaf):
            acc.append(tree.content.value)
        elif tree.content is not None:
            _walk(tree.content, acc)
    else:
        raise TypeError(f"Unknown structured-content node: {tree!r}")


def walk_structured_content(tree: Optional[ContentTree]) -> DefinitionCandidate:
    """
    Produce exactly one definition candidate from a structured-content tree.

    Rules:
    - Text leaves append to the definition, space separated
    - Lists are walked in order
    - A ``span`` whose ``title`` contains "(" sets the part of speech to the
      text before it; its content is not visited
    - An ``li`` whose content is a plain string appends that string
    - Any other node is walked through its content
    """
    acc = _Accumulator()
    _walk(tree, acc)
    return DefinitionCandidate(part_of_speech=acc.part_of_speech.strip(), text=acc.text.strip())


def definitions_from_glossary(glossary: object) -> List[DefinitionCandidate]:
    """One candidate per ``structured-content`` block of a term's glossary."""
    if not isinstance(glossary, list):
        return []
    return [
        walk_structured_content(parse_content(block.get("content")))
        for block in glossary
        if isinstance(block, dict) and block.get("type") == "structured-content"
    ]
