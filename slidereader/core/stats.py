"""
Counters that make skipped content observable after an extraction run.
"""

from __future__ import annotations

from collections import Counter
from typing import Any

SKIP_UNRESOLVED_RELATIONSHIP = "unresolved_relationship"
SKIP_MISSING_RESOURCE = "missing_resource"
SKIP_IMAGE_DECODE = "image_decode"
SKIP_RELATIONSHIP_PARSE = "relationship_parse"
SKIP_IMAGE_WRITE = "image_write"

DROP_MALFORMED_SHAPE_TREE = "malformed_shape_tree"
DROP_MISSING_ENTRY = "missing_entry"
DROP_UNEXPECTED_ERROR = "unexpected_error"


class ExtractionStats:
    """Per-run tally of processed, dropped and skipped items.

    Only mutated from the event loop thread, so no locking is needed.
    """

    def __init__(self) -> None:
        self.slides_total = 0
        self.slides_extracted = 0
        self.text_elements = 0
        self.image_elements = 0
        self.skips: Counter[str] = Counter()
        self.drops: Counter[str] = Counter()

    @property
    def slides_dropped(self) -> int:
        return sum(self.drops.values())

    @property
    def skipped(self) -> int:
        return sum(self.skips.values())

    def record_skip(self, reason: str) -> None:
        self.skips[reason] += 1

    def record_drop(self, reason: str) -> None:
        self.drops[reason] += 1

    def as_dict(self) -> dict[str, Any]:
        return {
            "slides_total": self.slides_total,
            "slides_extracted": self.slides_extracted,
            "slides_dropped": self.slides_dropped,
            "text_elements": self.text_elements,
            "image_elements": self.image_elements,
            "skips": dict(sorted(self.skips.items())),
            "drops": dict(sorted(self.drops.items())),
        }

    def summary(self) -> str:
        return (
            f"{self.slides_extracted}/{self.slides_total} slides extracted, "
            f"{self.text_elements} text and {self.image_elements} image elements, "
            f"{self.skipped} skipped, {self.slides_dropped} slides dropped"
        )
