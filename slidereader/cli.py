#!/usr/bin/env python3
"""
CLI tool for extracting slide content from PowerPoint packages.

This tool provides command-line interface for:
- Extracting ordered text and images from a .pptx file
- Printing the result as a per-slide summary or as JSON
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from functools import lru_cache
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.text import Text

from slidereader.archive.reader import ArchiveReader
from slidereader.configs.config import MAX_JPEG_QUALITY
from slidereader.configs.logging_config import setup_logging
from slidereader.core.errors import CorruptArchiveError
from slidereader.core.models import ImageElement, Slide
from slidereader.core.stats import ExtractionStats
from slidereader.image.normalizer import ImageNormalizer
from slidereader.pipeline.batching import group_slides, slides_payload
from slidereader.pipeline.coordinator import SlideAssembler
from slidereader.storage import get_image_storage


@lru_cache(maxsize=1)
def get_console() -> Console:
    """Return a shared stdout console instance."""
    return Console()


def status_label(label: str, style: str) -> Text:
    """Create a styled status label wrapped in brackets."""
    text = Text(f"[{label}]")
    text.stylize(style)
    return text


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"{value!r} must be at least 1")
    return number


def _jpeg_quality(value: str) -> int:
    number = _positive_int(value)
    if number > MAX_JPEG_QUALITY:
        raise argparse.ArgumentTypeError(
            f"{value!r} must be at most {MAX_JPEG_QUALITY}"
        )
    return number


async def run_extraction(
    deck: Path,
    output_dir: str | None,
    concurrency: int | None,
    quality: int | None,
) -> tuple[list[Slide], ExtractionStats]:
    archive = ArchiveReader().open_path(deck)
    normalizer = ImageNormalizer(
        storage=get_image_storage(output_dir), quality=quality
    )
    assembler = SlideAssembler(normalizer, concurrency=concurrency)
    slides = await assembler.assemble(archive)
    return slides, assembler.stats


def _print_slides(slides: list[Slide], stats: ExtractionStats) -> None:
    console = get_console()
    for slide in slides:
        images = sum(isinstance(el, ImageElement) for el in slide.content)
        texts = len(slide.content) - images
        header = Text.assemble(
            Text(f"Slide {slide.number}", style="bold cyan"),
            Text(f"  {texts} text, {images} image(s)", style="white"),
        )
        console.print(header)
        for element in slide.content:
            if isinstance(element, ImageElement):
                line = Text.assemble(
                    status_label("IMAGE", "bold magenta"), Text(f" {element.path}")
                )
            else:
                line = Text.assemble(
                    status_label("TEXT", "bold green"), Text(f" {element.content}")
                )
            console.print(line)

    console.print(f"[bold]{stats.summary()}[/]")
    for reason, count in sorted(stats.skips.items()):
        console.print(status_label("SKIP", "bold yellow"), f"{reason}: {count}")
    for reason, count in sorted(stats.drops.items()):
        console.print(status_label("DROP", "bold red"), f"{reason}: {count}")


def cmd_extract(args: argparse.Namespace) -> None:
    console = get_console()
    deck = Path(args.deck).expanduser()
    if not deck.is_file():
        message = f"Presentation '{deck}' does not exist."
        console.print(f"[bold red]{escape(message)}[/]")
        sys.exit(1)

    try:
        slides, stats = asyncio.run(
            run_extraction(deck, args.output_dir, args.concurrency, args.quality)
        )
    except CorruptArchiveError as exc:
        console.print(f"[bold red]{escape(str(exc))}[/]")
        sys.exit(1)

    if args.json:
        output = {
            "slides": slides_payload(slides),
            "groups": [
                [slide.number for slide in group]
                for group in group_slides(slides, args.group_size)
            ],
            "stats": stats.as_dict(),
        }
        console.print_json(data=output)
    else:
        _print_slides(slides, stats)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="SlideReader presentation extraction CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  slidereader extract deck.pptx
  slidereader extract deck.pptx --output-dir ./output/images --json
  slidereader extract deck.pptx --concurrency 4 --quality 80
        """,
    )
    parser.add_argument(
        "--log-level",
        help="Override LOG_LEVEL for this invocation",
    )
    sub = parser.add_subparsers(dest="command")

    extract_parser = sub.add_parser(
        "extract", help="Extract ordered text and images from a .pptx file"
    )
    extract_parser.add_argument("deck", help="Path to the .pptx file")
    extract_parser.add_argument(
        "--output-dir",
        help="Directory for normalized images (default: $OUTPUT_DIR/images)",
    )
    extract_parser.add_argument(
        "--concurrency",
        type=_positive_int,
        help="Maximum slides processed at once (default: $SLIDE_CONCURRENCY)",
    )
    extract_parser.add_argument(
        "--quality",
        type=_jpeg_quality,
        help="JPEG quality for re-encoded images (default: $IMAGE_JPEG_QUALITY)",
    )
    extract_parser.add_argument(
        "--group-size",
        type=_positive_int,
        default=2,
        help="Slides per batch reported in JSON output (default: 2)",
    )
    extract_parser.add_argument(
        "--json",
        action="store_true",
        help="Output JSON instead of human-readable text",
    )
    extract_parser.set_defaults(func=cmd_extract)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "command", None):
        parser.print_help()
        return
    setup_logging(log_level=args.log_level, component="cli")
    args.func(args)


if __name__ == "__main__":
    main()
