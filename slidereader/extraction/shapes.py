"""
Typed shape trees for slides and their ordered traversal.

Slide XML is converted into :class:`ShapeNode` variants at the archive
boundary by :class:`ShapeTreeParser`; :class:`ShapeTreeWalker` then walks the
typed tree and never touches raw XML.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from lxml import etree

from slidereader.archive.ooxml import NAMESPACES, local_name, parse_xml, qn
from slidereader.configs.config import config
from slidereader.core.errors import MalformedShapeTreeError
from slidereader.core.models import TextElement
from slidereader.extraction.text import TextExtractor

# Source-format grouping of shape kinds inside a container, in output order
SHAPE_CATEGORIES = ("p:sp", "p:pic", "p:grpSp", "p:graphicFrame", "p:cxnSp")
_CATEGORY_TAGS = tuple(qn(tag) for tag in SHAPE_CATEGORIES)


@dataclass(frozen=True)
class TextShape:
    paragraphs: tuple[tuple[str, ...], ...] = ()


@dataclass(frozen=True)
class PictureShape:
    embed_id: str | None = None


@dataclass(frozen=True)
class GroupShape:
    children: tuple[ShapeNode, ...] = ()


@dataclass(frozen=True)
class OtherContainer:
    """A shape kind without a dedicated model; keeps any nested shapes."""

    kind: str
    children: tuple[ShapeNode, ...] = ()


ShapeNode = Union[TextShape, PictureShape, GroupShape, OtherContainer]

# Items produced by a walk: resolved text, or pictures awaiting resolution
WalkItem = Union[TextElement, PictureShape]


class ShapeTreeParser:
    """Parses slide XML into a :class:`GroupShape` rooted at ``p:spTree``."""

    def __init__(self, max_depth: int | None = None) -> None:
        self.max_depth = max_depth or config.max_shape_depth

    def parse(self, data: bytes, *, slide_number: int | None = None) -> GroupShape:
        try:
            root = parse_xml(data)
        except etree.XMLSyntaxError as e:
            raise MalformedShapeTreeError(
                f"Invalid slide XML: {e}", slide_number=slide_number
            ) from e

        sp_tree = root.find("p:cSld/p:spTree", namespaces=NAMESPACES)
        if root.tag != qn("p:sld") or sp_tree is None:
            raise MalformedShapeTreeError(
                "Slide XML has no p:sld/p:cSld/p:spTree", slide_number=slide_number
            )
        return GroupShape(children=self._category_children(sp_tree, 1, slide_number))

    def _category_children(
        self, container: etree._Element, depth: int, slide_number: int | None
    ) -> tuple[ShapeNode, ...]:
        nodes: list[ShapeNode] = []
        for tag in _CATEGORY_TAGS:
            for element in container.iterchildren(tag):
                nodes.append(self._build_node(element, depth, slide_number))
        return tuple(nodes)

    def _build_node(
        self, element: etree._Element, depth: int, slide_number: int | None
    ) -> ShapeNode:
        self._check_depth(depth, slide_number)

        tx_body = element.find("p:txBody", namespaces=NAMESPACES)
        if tx_body is not None:
            return TextShape(paragraphs=_read_paragraphs(tx_body))

        blip_fill = element.find("p:blipFill", namespaces=NAMESPACES)
        if blip_fill is not None:
            blip = blip_fill.find("a:blip", namespaces=NAMESPACES)
            embed_id = blip.get(qn("r:embed")) if blip is not None else None
            return PictureShape(embed_id=embed_id)

        if element.tag == qn("p:grpSp"):
            return GroupShape(
                children=self._category_children(element, depth + 1, slide_number)
            )

        return OtherContainer(
            kind=local_name(element),
            children=self._descend(element, depth + 1, slide_number),
        )

    def _descend(
        self, element: etree._Element, depth: int, slide_number: int | None
    ) -> tuple[ShapeNode, ...]:
        """Find shapes nested anywhere below an unmodelled element."""
        self._check_depth(depth, slide_number)
        nodes: list[ShapeNode] = []
        for child in element:
            if child.tag in _CATEGORY_TAGS:
                nodes.append(self._build_node(child, depth, slide_number))
            else:
                nodes.extend(self._descend(child, depth + 1, slide_number))
        return tuple(nodes)

    def _check_depth(self, depth: int, slide_number: int | None) -> None:
        if depth > self.max_depth:
            raise MalformedShapeTreeError(
                f"Shape tree deeper than {self.max_depth} levels",
                slide_number=slide_number,
            )


class ShapeTreeWalker:
    """Flattens a shape tree into content items in traversal order."""

    def __init__(
        self,
        text_extractor: TextExtractor | None = None,
        max_depth: int | None = None,
    ) -> None:
        self.text_extractor = text_extractor or TextExtractor()
        self.max_depth = max_depth or config.max_shape_depth

    def walk(self, tree: GroupShape) -> list[WalkItem]:
        items: list[WalkItem] = []
        self._visit(tree.children, items, 1)
        return items

    def _visit(
        self, nodes: tuple[ShapeNode, ...], items: list[WalkItem], depth: int
    ) -> None:
        if depth > self.max_depth:
            raise MalformedShapeTreeError(
                f"Shape tree deeper than {self.max_depth} levels"
            )
        for node in nodes:
            if isinstance(node, TextShape):
                text = self.text_extractor.extract(node)
                if text:
                    items.append(TextElement(content=text))
            elif isinstance(node, PictureShape):
                items.append(node)
            else:
                self._visit(node.children, items, depth + 1)


def _read_paragraphs(tx_body: etree._Element) -> tuple[tuple[str, ...], ...]:
    paragraphs = []
    for paragraph in tx_body.iterchildren(qn("a:p")):
        runs = tuple(
            run.findtext("a:t", default="", namespaces=NAMESPACES)
            for run in paragraph.iterchildren(qn("a:r"))
        )
        paragraphs.append(runs)
    return tuple(paragraphs)
