"""
Error taxonomy for presentation extraction.

Only :class:`CorruptArchiveError` is surfaced to callers of
:func:`slidereader.extract_presentation`; every other error is scoped to one
slide or one element and is counted and logged by the assembler instead.
"""

from __future__ import annotations


class SlideReaderError(Exception):
    """Base class for all extraction errors."""

    def __init__(self, message: str, *, slide_number: int | None = None) -> None:
        super().__init__(message)
        self.slide_number = slide_number


class CorruptArchiveError(SlideReaderError):
    """Raised when the input bytes are not a readable presentation package."""


class EntryNotFoundError(SlideReaderError, LookupError):
    """Raised when a named entry is absent from the archive."""

    def __init__(self, path: str, *, slide_number: int | None = None) -> None:
        super().__init__(f"Archive entry not found: {path}", slide_number=slide_number)
        self.path = path


class UnresolvedRelationshipError(EntryNotFoundError):
    """Raised when a picture's embed id does not resolve to an archive entry."""

    def __init__(
        self, rel_id: str | None, reason: str, *, slide_number: int | None = None
    ) -> None:
        SlideReaderError.__init__(
            self,
            f"Relationship {rel_id!r} unresolved: {reason}",
            slide_number=slide_number,
        )
        self.path = rel_id or ""
        self.rel_id = rel_id
        self.reason = reason


class RelationshipParseError(SlideReaderError):
    """Raised when a slide's relationship descriptor cannot be parsed."""


class MalformedShapeTreeError(SlideReaderError):
    """Raised when a slide's shape tree is unparseable or nested too deeply."""


class ImageDecodeError(SlideReaderError):
    """Raised when image bytes cannot be decoded or re-encoded."""


class ImageWriteError(SlideReaderError):
    """Raised when a normalized image cannot be written to storage."""
