"""
Per-slide relationship resolution.

Every ``ppt/slides/_rels/slideN.xml.rels`` descriptor is parsed up front and
cached by slide number, so picture lookups during shape walking are a dict
access. A descriptor that fails to parse only empties that slide's mapping.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from types import MappingProxyType

from loguru import logger
from lxml import etree

from slidereader.archive.ooxml import parse_xml, qn
from slidereader.archive.paths import SLIDE_RELS_PATTERN, slide_number_from_rels
from slidereader.archive.reader import Archive
from slidereader.core.errors import RelationshipParseError
from slidereader.core.models import Relationship
from slidereader.core.stats import SKIP_RELATIONSHIP_PARSE, ExtractionStats


class RelationshipMap:
    """Read-only mapping of slide number to its relationships, by id."""

    def __init__(self, slides: Mapping[int, tuple[Relationship, ...]]) -> None:
        self._slides = MappingProxyType(dict(slides))
        self._by_id = {
            number: {rel.id: rel for rel in rels} for number, rels in slides.items()
        }

    def __contains__(self, slide_number: object) -> bool:
        return slide_number in self._slides

    def slide_numbers(self) -> list[int]:
        return sorted(self._slides)

    def for_slide(self, slide_number: int) -> tuple[Relationship, ...]:
        """Relationships of a slide in descriptor order (empty if unknown)."""
        return self._slides.get(slide_number, ())

    def get(self, slide_number: int, rel_id: str) -> Relationship | None:
        return self._by_id.get(slide_number, {}).get(rel_id)


def parse_relationships(
    data: bytes, *, slide_number: int | None = None
) -> tuple[Relationship, ...]:
    """
    Parse one relationship descriptor into :class:`Relationship` records.

    Records without ``Id`` or ``Target`` are skipped with a warning.

    Raises:
        RelationshipParseError: on malformed XML or an unexpected root element.
    """
    try:
        root = parse_xml(data)
    except etree.XMLSyntaxError as e:
        raise RelationshipParseError(
            f"Invalid relationship XML: {e}", slide_number=slide_number
        ) from e

    if root.tag != qn("rel:Relationships"):
        raise RelationshipParseError(
            f"Unexpected relationship root element {root.tag!r}",
            slide_number=slide_number,
        )

    relationships: list[Relationship] = []
    for element in root.iterchildren(qn("rel:Relationship")):
        rel_id = element.get("Id")
        target = element.get("Target")
        if not rel_id or target is None:
            logger.warning(
                f"Slide {slide_number}: skipping relationship without Id/Target"
            )
            continue
        relationships.append(
            Relationship(
                id=rel_id,
                type=element.get("Type", ""),
                target=target,
                external=element.get("TargetMode", "Internal") == "External",
            )
        )
    return tuple(relationships)


class RelationshipResolver:
    """Builds the :class:`RelationshipMap` for every slide of an archive."""

    def __init__(self, stats: ExtractionStats | None = None) -> None:
        self.stats = stats or ExtractionStats()

    async def build(self, archive: Archive) -> RelationshipMap:
        numbered = [
            (entry, slide_number_from_rels(entry))
            for entry in archive.list_entries(SLIDE_RELS_PATTERN)
        ]
        results = await asyncio.gather(
            *(
                self._resolve_entry(archive, entry, slide_number)
                for entry, slide_number in numbered
                if slide_number is not None
            )
        )
        slides: dict[int, tuple[Relationship, ...]] = {}
        for slide_number, relationships in results:
            # Zero-padded names can collide on one number; first entry wins
            slides.setdefault(slide_number, relationships)
        logger.debug(f"Resolved relationships for {len(slides)} slides")
        return RelationshipMap(slides)

    async def _resolve_entry(
        self, archive: Archive, entry: str, slide_number: int
    ) -> tuple[int, tuple[Relationship, ...]]:
        data = archive.read_bytes(entry)
        try:
            relationships = await asyncio.to_thread(
                parse_relationships, data, slide_number=slide_number
            )
        except RelationshipParseError as e:
            logger.warning(f"Slide {slide_number}: {e}; treating as no relationships")
            self.stats.record_skip(SKIP_RELATIONSHIP_PARSE)
            return slide_number, ()
        return slide_number, relationships
