"""
Naming conventions for slide parts inside a presentation package.
"""

from __future__ import annotations

import posixpath
import re

SLIDES_DIR = "ppt/slides"

SLIDE_ENTRY_PATTERN = re.compile(r"ppt/slides/slide(\d+)\.xml")
SLIDE_RELS_PATTERN = re.compile(r"ppt/slides/_rels/slide(\d+)\.xml\.rels")


def slide_entry_path(slide_number: int) -> str:
    return f"{SLIDES_DIR}/slide{slide_number}.xml"


def slide_number_from_entry(name: str) -> int | None:
    """Return the slide number encoded in a slide entry name, if any."""
    match = SLIDE_ENTRY_PATTERN.fullmatch(name)
    return int(match.group(1)) if match else None


def slide_number_from_rels(name: str) -> int | None:
    match = SLIDE_RELS_PATTERN.fullmatch(name)
    return int(match.group(1)) if match else None


def resolve_target(source_part: str, target: str) -> str:
    """
    Resolve a relationship target to an archive entry name.

    Absolute targets ("/ppt/media/x.png") are rooted at the package root;
    anything else is joined to the directory of ``source_part``.
    """
    if target.startswith("/"):
        return posixpath.normpath(target.lstrip("/"))
    return posixpath.normpath(posixpath.join(posixpath.dirname(source_part), target))
