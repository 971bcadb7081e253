"""
SlideReader - ordered content extraction from PowerPoint packages

This package reads an OOXML presentation archive and recovers, per slide, the
text runs and embedded images in document order, normalizing images to JPEG
for downstream transcript generation.
"""

from .core.errors import (
    CorruptArchiveError,
    EntryNotFoundError,
    ImageDecodeError,
    ImageWriteError,
    MalformedShapeTreeError,
    RelationshipParseError,
    SlideReaderError,
    UnresolvedRelationshipError,
)
from .core.models import ImageElement, Slide, TextElement
from .pipeline.coordinator import SlideAssembler, extract_presentation

# Public API
__all__ = [
    "extract_presentation",
    "SlideAssembler",
    "Slide",
    "TextElement",
    "ImageElement",
    "SlideReaderError",
    "CorruptArchiveError",
    "EntryNotFoundError",
    "UnresolvedRelationshipError",
    "RelationshipParseError",
    "MalformedShapeTreeError",
    "ImageDecodeError",
    "ImageWriteError",
]

# Package version
__version__ = "1.0.0"
