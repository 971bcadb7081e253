"""
Slide assembly for presentation extraction.

Runs the per-slide walk for every slide entry with bounded concurrency,
resolves picture shapes concurrently within a slide while keeping traversal
order, and returns the slides sorted by number.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from loguru import logger

from slidereader.archive.paths import SLIDE_ENTRY_PATTERN, slide_number_from_entry
from slidereader.archive.reader import Archive, ArchiveReader
from slidereader.archive.relationships import RelationshipResolver
from slidereader.configs.config import config
from slidereader.core.errors import (
    EntryNotFoundError,
    ImageDecodeError,
    ImageWriteError,
    MalformedShapeTreeError,
    UnresolvedRelationshipError,
)
from slidereader.core.models import ContentElement, ImageElement, Slide
from slidereader.core.stats import (
    DROP_MALFORMED_SHAPE_TREE,
    DROP_MISSING_ENTRY,
    DROP_UNEXPECTED_ERROR,
    SKIP_IMAGE_DECODE,
    SKIP_IMAGE_WRITE,
    SKIP_MISSING_RESOURCE,
    SKIP_UNRESOLVED_RELATIONSHIP,
    ExtractionStats,
)
from slidereader.extraction.images import ImageExtractor
from slidereader.extraction.shapes import (
    PictureShape,
    ShapeTreeParser,
    ShapeTreeWalker,
)
from slidereader.image.normalizer import ImageNormalizer
from slidereader.storage import get_image_storage


class SlideAssembler:
    """Builds the ordered slide list for one archive."""

    def __init__(
        self,
        normalizer: ImageNormalizer,
        concurrency: int | None = None,
        max_depth: int | None = None,
    ) -> None:
        self.normalizer = normalizer
        self.concurrency = concurrency or config.slide_concurrency
        if self.concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.parser = ShapeTreeParser(max_depth=max_depth)
        self.walker = ShapeTreeWalker(max_depth=max_depth)
        self.stats = ExtractionStats()

    async def assemble(self, archive: Archive) -> list[Slide]:
        self.stats = ExtractionStats()
        relationships = await RelationshipResolver(self.stats).build(archive)
        extractor = ImageExtractor(archive, relationships)

        slide_entries = self._slide_entries(archive)
        self.stats.slides_total = len(slide_entries)
        semaphore = asyncio.Semaphore(self.concurrency)

        async def run(slide_number: int, entry: str) -> Slide | None:
            async with semaphore:
                return await self._process_slide(
                    archive, extractor, slide_number, entry
                )

        results = await asyncio.gather(
            *(run(number, entry) for number, entry in slide_entries),
            return_exceptions=True,
        )

        slides: list[Slide] = []
        for (slide_number, _), result in zip(slide_entries, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.opt(exception=result).error(
                    f"Slide {slide_number}: unexpected error, dropping slide"
                )
                self.stats.record_drop(DROP_UNEXPECTED_ERROR)
            elif result is not None:
                slides.append(result)

        slides.sort(key=lambda slide: slide.number)
        self.stats.slides_extracted = len(slides)
        logger.info(f"Extraction finished: {self.stats.summary()}")
        return slides

    def _slide_entries(self, archive: Archive) -> list[tuple[int, str]]:
        """Slide numbers paired with their entry, one entry per number."""
        entries: dict[int, str] = {}
        for entry in archive.list_entries(SLIDE_ENTRY_PATTERN):
            slide_number = slide_number_from_entry(entry)
            if not slide_number:
                logger.warning(f"Ignoring slide entry without a valid number: {entry}")
                continue
            if slide_number in entries:
                logger.warning(
                    f"Ignoring {entry}: slide {slide_number} already read from "
                    f"{entries[slide_number]}"
                )
                continue
            entries[slide_number] = entry
        return sorted(entries.items())

    async def _process_slide(
        self,
        archive: Archive,
        extractor: ImageExtractor,
        slide_number: int,
        entry: str,
    ) -> Slide | None:
        try:
            data = archive.read_bytes(entry)
            tree = await asyncio.to_thread(
                self.parser.parse, data, slide_number=slide_number
            )
            items = self.walker.walk(tree)
        except MalformedShapeTreeError as e:
            logger.warning(f"Slide {slide_number}: {e}; dropping slide")
            self.stats.record_drop(DROP_MALFORMED_SHAPE_TREE)
            return None
        except EntryNotFoundError as e:
            logger.warning(f"Slide {slide_number}: {e}; dropping slide")
            self.stats.record_drop(DROP_MISSING_ENTRY)
            return None

        pictures = [
            (index, item)
            for index, item in enumerate(items)
            if isinstance(item, PictureShape)
        ]
        resolved = await asyncio.gather(
            *(
                self._resolve_picture(extractor, slide_number, entry, index, picture)
                for index, picture in pictures
            )
        )
        images = dict(resolved)

        content: list[ContentElement] = []
        for index, item in enumerate(items):
            if isinstance(item, PictureShape):
                image = images.get(index)
                if image is not None:
                    content.append(image)
                    self.stats.image_elements += 1
            else:
                content.append(item)
                self.stats.text_elements += 1

        logger.debug(f"Slide {slide_number}: {len(content)} content elements")
        return Slide(number=slide_number, content=content)

    async def _resolve_picture(
        self,
        extractor: ImageExtractor,
        slide_number: int,
        slide_path: str,
        index: int,
        picture: PictureShape,
    ) -> tuple[int, ImageElement | None]:
        """Resolve and normalize one picture, tagged with its traversal index."""
        try:
            normalized = await asyncio.to_thread(
                self._materialize, extractor, slide_number, slide_path, picture
            )
        except (EntryNotFoundError, ImageDecodeError, ImageWriteError) as e:
            logger.warning(
                f"Slide {slide_number}, element {index}: {e}; skipping image"
            )
            self.stats.record_skip(_skip_reason(e))
            return index, None
        return index, ImageElement(path=normalized)

    def _materialize(
        self,
        extractor: ImageExtractor,
        slide_number: int,
        slide_path: str,
        picture: PictureShape,
    ) -> str:
        image = extractor.extract(slide_number, picture, slide_path=slide_path)
        normalized = self.normalizer.normalize(
            image.data,
            image.extension,
            slide_number=slide_number,
            target=image.target,
            source_path=image.source_path,
        )
        return normalized.output_path


async def extract_presentation(
    source: str | Path | bytes,
    *,
    output_dir: str | Path | None = None,
    concurrency: int | None = None,
    quality: int | None = None,
) -> list[Slide]:
    """
    Extract the ordered slide content of a presentation package.

    Args:
        source: Path to a .pptx file, or its bytes
        output_dir: Directory receiving normalized images
            (default: ``config.image_output_dir``)
        concurrency: Maximum number of slides processed at once
        quality: JPEG quality used when re-encoding images

    Raises:
        CorruptArchiveError: if the package cannot be read; nothing is written.
    """
    if isinstance(source, (bytes, bytearray)):
        data = bytes(source)
    else:
        data = await asyncio.to_thread(Path(source).read_bytes)

    archive = await asyncio.to_thread(ArchiveReader().open, data)
    normalizer = ImageNormalizer(
        storage=get_image_storage(output_dir), quality=quality
    )
    assembler = SlideAssembler(normalizer, concurrency=concurrency)
    return await assembler.assemble(archive)


def _skip_reason(error: Exception) -> str:
    if isinstance(error, UnresolvedRelationshipError):
        return SKIP_UNRESOLVED_RELATIONSHIP
    if isinstance(error, ImageDecodeError):
        return SKIP_IMAGE_DECODE
    if isinstance(error, ImageWriteError):
        return SKIP_IMAGE_WRITE
    return SKIP_MISSING_RESOURCE
