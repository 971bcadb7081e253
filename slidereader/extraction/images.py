"""
Resolution of picture shapes to the image bytes stored in the archive.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass

from slidereader.archive.paths import resolve_target, slide_entry_path
from slidereader.archive.reader import Archive
from slidereader.archive.relationships import RelationshipMap
from slidereader.core.errors import UnresolvedRelationshipError
from slidereader.extraction.shapes import PictureShape


@dataclass(frozen=True)
class ExtractedImage:
    slide_number: int
    target: str
    source_path: str
    data: bytes

    @property
    def basename(self) -> str:
        return posixpath.basename(self.target)

    @property
    def extension(self) -> str:
        return posixpath.splitext(self.target)[1].lower()


class ImageExtractor:
    """Looks up a picture's embed relationship and reads the referenced bytes."""

    def __init__(self, archive: Archive, relationships: RelationshipMap) -> None:
        self.archive = archive
        self.relationships = relationships

    def extract(
        self,
        slide_number: int,
        picture: PictureShape,
        slide_path: str | None = None,
    ) -> ExtractedImage:
        """
        Fetch the raw bytes behind a picture shape.

        Raises:
            UnresolvedRelationshipError: when the embed id is missing, unknown
                for this slide, or points outside the package.
            EntryNotFoundError: when the resolved entry is absent.
        """
        rel_id = picture.embed_id
        if not rel_id:
            raise UnresolvedRelationshipError(
                rel_id, "picture has no embed id", slide_number=slide_number
            )

        relationship = self.relationships.get(slide_number, rel_id)
        if relationship is None:
            raise UnresolvedRelationshipError(
                rel_id, "not in slide relationships", slide_number=slide_number
            )
        if relationship.external:
            raise UnresolvedRelationshipError(
                rel_id, "linked external resource", slide_number=slide_number
            )

        source_path = resolve_target(
            slide_path or slide_entry_path(slide_number), relationship.target
        )
        data = self.archive.read_bytes(source_path)
        return ExtractedImage(
            slide_number=slide_number,
            target=relationship.target,
            source_path=source_path,
            data=data,
        )
