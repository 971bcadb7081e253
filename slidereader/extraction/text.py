"""Text reconstruction for text-bearing shapes."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from slidereader.extraction.shapes import TextShape


class TextExtractor:
    """Joins a text body's runs in paragraph-then-run order."""

    run_separator = " "

    def extract(self, shape: TextShape) -> str | None:
        """
        Reconstruct the text of a shape.

        Every non-empty run contributes its text followed by one space; the
        joined string is trimmed. Returns None when nothing but whitespace
        remains, so callers can suppress the element.
        """
        parts: list[str] = []
        for paragraph in shape.paragraphs:
            for run in paragraph:
                if run:
                    parts.append(run + self.run_separator)
        text = "".join(parts).strip()
        return text or None
