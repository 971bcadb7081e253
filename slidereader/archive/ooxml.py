"""
XML namespaces and a hardened parser for Office Open XML parts.
"""

from __future__ import annotations

from lxml import etree

# XML namespaces for Office Open XML
NAMESPACES = {
    "a": "http://schemas.openxmlformats.org/drawingml/2006/main",
    "p": "http://schemas.openxmlformats.org/presentationml/2006/main",
    "r": "http://schemas.openxmlformats.org/officeDocument/2006/relationships",
    "rel": "http://schemas.openxmlformats.org/package/2006/relationships",
}


def qn(tag: str) -> str:
    """Expand a prefixed tag like ``p:sp`` to Clark notation."""
    prefix, local = tag.split(":", 1)
    return f"{{{NAMESPACES[prefix]}}}{local}"


def local_name(element: etree._Element) -> str:
    return etree.QName(element).localname


def parse_xml(data: bytes) -> etree._Element:
    """Parse a part's bytes; raises ``etree.XMLSyntaxError`` on bad input."""
    # lxml parser instances must not be shared across worker threads
    parser = etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
    )
    return etree.fromstring(data, parser=parser)
