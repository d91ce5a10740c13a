"""Package descriptor entities - manifest, spine and metadata."""

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional


@dataclass(frozen=True)
class ManifestItem:
    """One resource declared in the package manifest.

    ``href`` is kept as written in the descriptor; ``path`` is the href with
    its fragment removed, percent-decoded and resolved against the descriptor.
    """

    id: str
    href: str
    media_type: str
    path: str
    properties: FrozenSet[str] = frozenset()

    def has_property(self, name: str) -> bool:
        return name in self.properties


@dataclass(frozen=True)
class SpineItem:
    idref: str


@dataclass
class PackageMetadata:
    title: Optional[str] = None
    author: Optional[str] = None
    language: Optional[str] = None
    cover_path: Optional[str] = None


@dataclass
class PackageDocument:
    """Parsed package descriptor."""

    descriptor_path: str
    manifest: List[ManifestItem] = field(default_factory=list)
    spine: List[SpineItem] = field(default_factory=list)
    metadata: PackageMetadata = field(default_factory=PackageMetadata)
    toc_id: Optional[str] = None

    def item_by_id(self, item_id: str) -> Optional[ManifestItem]:
        for item in self.manifest:
            if item.id == item_id:
                return item
        return None
