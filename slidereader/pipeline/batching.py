"""
Shaping of extracted slides for the transcript-generation service.

Nothing here talks to the network; the service client owns batching
submission and any remote cleanup.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from slidereader.core.models import ImageElement, Slide, TextElement

DEFAULT_GROUP_SIZE = 2


def group_slides(
    slides: Sequence[Slide], group_size: int = DEFAULT_GROUP_SIZE
) -> list[list[Slide]]:
    """Split slides into consecutive, non-empty batches of ``group_size``."""
    if group_size < 1:
        raise ValueError("group_size must be at least 1")
    return [
        list(slides[start : start + group_size])
        for start in range(0, len(slides), group_size)
    ]


def build_message_parts(slide: Slide) -> list[dict[str, Any]]:
    """Message content parts for one slide, in content order."""
    parts: list[dict[str, Any]] = []
    for element in slide.content:
        if isinstance(element, TextElement):
            parts.append({"type": "text", "text": element.content})
        elif isinstance(element, ImageElement):
            parts.append({"type": "image_file", "image_file": {"path": element.path}})
    return parts


def slides_payload(slides: Sequence[Slide]) -> list[dict[str, Any]]:
    return [slide.model_dump(by_alias=True) for slide in slides]
