"""
Unit tests for resolving picture shapes to archive bytes.
"""

import pytest

from pptx_factory import build_package, rels_xml, slide_xml
from slidereader.archive.reader import ArchiveReader
from slidereader.archive.relationships import RelationshipResolver
from slidereader.core.errors import EntryNotFoundError, UnresolvedRelationshipError
from slidereader.extraction.images import ImageExtractor
from slidereader.extraction.shapes import PictureShape


async def make_extractor(rels: str, media: dict[str, bytes]) -> ImageExtractor:
    archive = ArchiveReader().open(
        build_package(slides={1: slide_xml()}, rels={1: rels}, media=media)
    )
    relationships = await RelationshipResolver().build(archive)
    return ImageExtractor(archive, relationships)


class TestImageExtractor:
    """Test suite for ImageExtractor."""

    @pytest.mark.asyncio
    async def test_relative_target_is_read_from_archive(self):
        extractor = await make_extractor(
            rels_xml(("rId2", "../media/Image1.PNG")),
            {"ppt/media/Image1.PNG": b"png-bytes"},
        )

        image = extractor.extract(1, PictureShape(embed_id="rId2"))

        assert image.data == b"png-bytes"
        assert image.source_path == "ppt/media/Image1.PNG"
        assert image.target == "../media/Image1.PNG"
        assert image.basename == "Image1.PNG"
        assert image.extension == ".png"

    @pytest.mark.asyncio
    async def test_absolute_target_is_rooted_at_package(self):
        extractor = await make_extractor(
            rels_xml(("rId2", "/ppt/media/photo.jpg")),
            {"ppt/media/photo.jpg": b"jpg-bytes"},
        )

        image = extractor.extract(1, PictureShape(embed_id="rId2"))

        assert image.source_path == "ppt/media/photo.jpg"
        assert image.data == b"jpg-bytes"

    @pytest.mark.asyncio
    async def test_unknown_rel_id_is_unresolved(self):
        extractor = await make_extractor(rels_xml(("rId2", "../media/a.png")), {})

        with pytest.raises(UnresolvedRelationshipError) as exc_info:
            extractor.extract(1, PictureShape(embed_id="rId7"))

        assert exc_info.value.rel_id == "rId7"
        assert exc_info.value.slide_number == 1
        assert isinstance(exc_info.value, EntryNotFoundError)

    @pytest.mark.asyncio
    async def test_missing_embed_id_is_unresolved(self):
        extractor = await make_extractor(rels_xml(), {})

        with pytest.raises(UnresolvedRelationshipError):
            extractor.extract(1, PictureShape(embed_id=None))

    @pytest.mark.asyncio
    async def test_external_target_is_unresolved(self):
        extractor = await make_extractor(
            rels_xml(("rId2", "https://example.com/a.png", "External")), {}
        )

        with pytest.raises(UnresolvedRelationshipError, match="external"):
            extractor.extract(1, PictureShape(embed_id="rId2"))

    @pytest.mark.asyncio
    async def test_missing_media_entry_is_not_found(self):
        """A resolvable relationship whose target entry is absent."""
        extractor = await make_extractor(rels_xml(("rId2", "../media/gone.png")), {})

        with pytest.raises(EntryNotFoundError) as exc_info:
            extractor.extract(1, PictureShape(embed_id="rId2"))

        assert not isinstance(exc_info.value, UnresolvedRelationshipError)
        assert exc_info.value.path == "ppt/media/gone.png"
