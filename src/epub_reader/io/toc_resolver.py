"""TOC Resolver - builds the navigation tree and merges it with spine order."""

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Set

from lxml import etree

from epub_reader.core import path_resolver
from epub_reader.core.cancellation import CancellationToken, check_cancelled
from epub_reader.core.errors import FileReadError
from epub_reader.core.nav_node import NavNode, flatten
from epub_reader.core.package_document import ManifestItem, PackageDocument
from epub_reader.core.section import Section, generic_title
from epub_reader.io.file_store import FileStore
from epub_reader.io.package_parser import NCX_MEDIA_TYPE
from epub_reader.io.xml_support import (
    attribute,
    children,
    descendants,
    first_child,
    first_descendant,
    local_name,
    parse_xml,
    text_of,
)

logger = logging.getLogger(__name__)

LIST_TAGS = ("ol", "ul")


class TocResolver:
    """Refines spine order and titles with the book's table of contents.

    A modern navigation document (manifest ``nav`` property) wins over a legacy
    NCX; only one of them is ever read.
    """

    def __init__(self, store: FileStore) -> None:
        self.store = store

    def resolve(
        self,
        package: PackageDocument,
        spine_sections: List[Section],
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[Section]:
        """Return the final section order for ``package``.

        Without a usable navigation document the spine order passes through.
        """
        roots = self.load_tree(package, cancel_token)
        if not roots:
            return list(spine_sections)
        return self.merge(spine_sections, roots)

    def find_navigation_item(self, package: PackageDocument) -> Optional[ManifestItem]:
        for item in package.manifest:
            if item.has_property("nav"):
                return item
        if package.toc_id:
            item = package.item_by_id(package.toc_id)
            if item is not None:
                return item
        for item in package.manifest:
            if item.media_type == NCX_MEDIA_TYPE:
                return item
        for item in package.manifest:
            if path_resolver.extension_of(item.path) == ".ncx":
                return item
        return None

    def load_tree(
        self,
        package: PackageDocument,
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[NavNode]:
        """Parse the navigation document into NavNode roots ([] when unusable)."""
        item = self.find_navigation_item(package)
        if item is None:
            logger.debug("No navigation document in %s", package.descriptor_path)
            return []

        check_cancelled(cancel_token)
        try:
            raw = self.store.read_bytes(item.path)
        except FileReadError as e:
            logger.warning("Ignoring unreadable navigation document %s: %s", item.path, e)
            return []

        root = parse_xml(raw)
        if root is None:
            logger.warning("Ignoring unparseable navigation document %s", item.path)
            return []

        if local_name(root.tag) == "ncx" or item.media_type == NCX_MEDIA_TYPE:
            return self._parse_ncx(item.path, root)
        return self._parse_nav_document(item.path, root)

    @staticmethod
    def merge(spine_sections: List[Section], roots: List[NavNode]) -> List[Section]:
        """Merge the flattened tree with the spine-derived sections.

        TOC order comes first; spine sections the TOC never visits follow in
        spine order. Each path is emitted once.
        """
        by_path: Dict[str, Section] = {section.path: section for section in spine_sections}
        emitted: Set[str] = set()
        ordered: List[Section] = []

        for node in flatten(roots):
            path = node.target_path
            if path is None or path in emitted:
                continue
            emitted.add(path)
            existing = by_path.get(path)
            if existing is not None:
                ordered.append(replace(existing, title=node.title or existing.title, order=len(ordered)))
            else:
                ordered.append(Section(path=path, title=node.title or generic_title(len(ordered)), order=len(ordered)))

        for section in spine_sections:
            if section.path in emitted:
                continue
            emitted.add(section.path)
            ordered.append(replace(section, order=len(ordered)))
        return ordered

    def _parse_nav_document(self, doc_path: str, root: etree._Element) -> List[NavNode]:
        navs = descendants(root, "nav")
        toc_nav = next((nav for nav in navs if "toc" in attribute(nav, "type").split()), None)
        if toc_nav is None:
            toc_nav = navs[0] if navs else root
        top_list = next(
            (element for element in toc_nav.iter() if local_name(element.tag) in LIST_TAGS),
            None,
        )
        if top_list is None:
            logger.warning("Navigation document %s has no list", doc_path)
            return []
        return self._parse_nav_list(doc_path, top_list)

    def _parse_nav_list(self, doc_path: str, list_node: etree._Element) -> List[NavNode]:
        nodes: List[NavNode] = []
        for item in children(list_node, "li"):
            nested = next((child for child in item if local_name(child.tag) in LIST_TAGS), None)
            kids = self._parse_nav_list(doc_path, nested) if nested is not None else []

            label = first_child(item, "a")
            if label is None:
                label = first_child(item, "span")
            if label is not None and local_name(label.tag) == "span":
                inner = first_child(label, "a")
                if inner is not None:
                    label = inner

            title = text_of(label)
            href = attribute(label, "href") if label is not None else ""
            target = self._target(doc_path, href)
            if not title and target is None:
                logger.warning("Skipping malformed navigation entry in %s", doc_path)
                nodes.extend(kids)
                continue
            nodes.append(NavNode(title=title, target_path=target, children=kids))
        return nodes

    def _parse_ncx(self, doc_path: str, root: etree._Element) -> List[NavNode]:
        nav_map = first_descendant(root, "navMap")
        if nav_map is None:
            logger.warning("NCX document %s has no navMap", doc_path)
            return []
        return self._parse_nav_points(doc_path, nav_map)

    def _parse_nav_points(self, doc_path: str, parent: etree._Element) -> List[NavNode]:
        nodes: List[NavNode] = []
        for point in children(parent, "navPoint"):
            kids = self._parse_nav_points(doc_path, point)
            label = first_child(point, "navLabel")
            title = text_of(first_child(label, "text")) if label is not None else ""
            content = first_child(point, "content")
            target = self._target(doc_path, attribute(content, "src") if content is not None else "")
            if not title and target is None:
                logger.warning("Skipping malformed navPoint in %s", doc_path)
                nodes.extend(kids)
                continue
            nodes.append(NavNode(title=title, target_path=target, children=kids))
        return nodes

    @staticmethod
    def _target(doc_path: str, href: str) -> Optional[str]:
        if not path_resolver.strip_fragment(href).strip():
            return None
        return path_resolver.resolve_href(doc_path, href)
