"""Package Parser - turns a package descriptor into manifest, spine and metadata."""

import logging
from typing import Dict, List, Optional

from lxml import etree

from epub_reader.core import path_resolver
from epub_reader.core.errors import ManifestParseError
from epub_reader.core.package_document import (
    ManifestItem,
    PackageDocument,
    PackageMetadata,
    SpineItem,
)
from epub_reader.io.xml_support import attribute, children, descendants, first_child, parse_xml, text_of

logger = logging.getLogger(__name__)

MARKUP_MEDIA_TYPES = frozenset(
    {
        "application/xhtml+xml",
        "text/html",
        "application/xml",
        "text/xml",
    }
)
NCX_MEDIA_TYPE = "application/x-dtbncx+xml"


def is_markup_media_type(media_type: str) -> bool:
    return (media_type or "").split(";", 1)[0].strip().lower() in MARKUP_MEDIA_TYPES


class PackageParser:
    """Parses package descriptors with a recovering XML parser."""

    def parse(self, descriptor_path: str, raw: bytes) -> PackageDocument:
        """Parse descriptor bytes into a PackageDocument.

        Args:
            descriptor_path: Package-relative path of the descriptor; manifest
                hrefs are resolved against it.
            raw: Descriptor content.

        Raises:
            ManifestParseError: If the descriptor cannot be parsed at all.
        """
        root = parse_xml(raw)
        if root is None:
            raise ManifestParseError(f"Package descriptor {descriptor_path} is not parseable XML")

        manifest = self._parse_manifest(descriptor_path, root)
        spine_node = first_child(root, "spine")
        spine = self._parse_spine(spine_node)
        if not spine:
            spine = self._synthesize_spine(manifest)
        toc_id = attribute(spine_node, "toc") if spine_node is not None else ""

        return PackageDocument(
            descriptor_path=descriptor_path,
            manifest=manifest,
            spine=spine,
            metadata=self._parse_metadata(root, manifest),
            toc_id=toc_id or None,
        )

    def reading_order(self, package: PackageDocument) -> List[ManifestItem]:
        """Manifest items in spine order; unknown idrefs are skipped."""
        by_id: Dict[str, ManifestItem] = {item.id: item for item in package.manifest}
        ordered: List[ManifestItem] = []
        for spine_item in package.spine:
            item = by_id.get(spine_item.idref)
            if item is None:
                logger.warning(
                    "Spine references unknown manifest id '%s' in %s",
                    spine_item.idref,
                    package.descriptor_path,
                )
                continue
            ordered.append(item)
        return ordered

    @staticmethod
    def _parse_manifest(descriptor_path: str, root: etree._Element) -> List[ManifestItem]:
        manifest_node = first_child(root, "manifest")
        if manifest_node is None:
            logger.warning("Package descriptor %s has no manifest", descriptor_path)
            return []

        items: List[ManifestItem] = []
        seen: set[str] = set()
        for node in children(manifest_node, "item"):
            item_id = attribute(node, "id")
            href = attribute(node, "href")
            if not item_id or not href:
                logger.warning("Skipping manifest item without id or href in %s", descriptor_path)
                continue
            if item_id in seen:
                logger.warning("Duplicate manifest id '%s' in %s, keeping the first", item_id, descriptor_path)
                continue
            seen.add(item_id)
            items.append(
                ManifestItem(
                    id=item_id,
                    href=href,
                    media_type=attribute(node, "media-type").lower(),
                    path=path_resolver.resolve_href(descriptor_path, href),
                    properties=frozenset(attribute(node, "properties").split()),
                )
            )
        return items

    @staticmethod
    def _parse_spine(spine_node: Optional[etree._Element]) -> List[SpineItem]:
        if spine_node is None:
            return []
        return [
            SpineItem(idref=attribute(itemref, "idref"))
            for itemref in children(spine_node, "itemref")
            if attribute(itemref, "idref")
        ]

    @staticmethod
    def _synthesize_spine(manifest: List[ManifestItem]) -> List[SpineItem]:
        markup = [item for item in manifest if is_markup_media_type(item.media_type)]
        if markup:
            logger.warning("Empty spine, using %d markup manifest items", len(markup))
            return [SpineItem(idref=item.id) for item in markup]
        if manifest:
            logger.warning("Empty spine and no markup items, using all %d manifest items", len(manifest))
        return [SpineItem(idref=item.id) for item in manifest]

    @staticmethod
    def _parse_metadata(root: etree._Element, manifest: List[ManifestItem]) -> PackageMetadata:
        metadata = PackageMetadata()
        metadata_node = first_child(root, "metadata")
        if metadata_node is None:
            return metadata

        def first_text(name: str) -> Optional[str]:
            for node in descendants(metadata_node, name):
                text = text_of(node)
                if text:
                    return text
            return None

        metadata.title = first_text("title")
        metadata.author = first_text("creator")
        metadata.language = first_text("language")

        cover = next((item for item in manifest if item.has_property("cover-image")), None)
        if cover is None:
            # EPUB 2 style: <meta name="cover" content="item-id"/>
            for meta in descendants(metadata_node, "meta"):
                if attribute(meta, "name") == "cover":
                    cover_id = attribute(meta, "content")
                    cover = next((item for item in manifest if item.id == cover_id), None)
                    break
        metadata.cover_path = cover.path if cover is not None else None
        return metadata
