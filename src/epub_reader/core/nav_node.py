"""Navigation tree entity built from a table-of-contents document."""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional


@dataclass
class NavNode:
    """A titled entry of the table of contents.

    ``target_path`` is None for heading-only entries that group children
    without pointing at a resource.
    """

    title: str
    target_path: Optional[str]
    children: List["NavNode"] = field(default_factory=list)

    def walk(self) -> Iterator["NavNode"]:
        """Yield this node, then its descendants depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()


def flatten(nodes: List[NavNode]) -> List[NavNode]:
    """Depth-first flattening, parents before children."""
    return [node for root in nodes for node in root.walk()]
