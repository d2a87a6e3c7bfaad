"""XML parsing and shape-normalising access helpers.

Rules never branch on "one node or many": every child lookup returns a
list, and single-node lookups return the first match or None.
"""
from typing import Optional
from xml.etree import ElementTree as ET
from xml.sax.saxutils import quoteattr

# SECURITY: Use defusedxml to protect against XXE and entity expansion
from defusedxml import DefusedXmlException
from defusedxml import ElementTree as DefusedET

# Everything parse_xml can raise for a bad document
XML_ERRORS = (ET.ParseError, DefusedXmlException, UnicodeDecodeError)


def parse_xml(text: str) -> ET.Element:
    """
    Parse XML text and strip namespaces down to local names.

    Raises:
        ET.ParseError: Malformed XML
        DefusedXmlException: DTD entities or external references
    """
    root = DefusedET.fromstring(text.lstrip("\ufeff \t\r\n"))
    _strip_namespaces(root)
    return root


def _strip_namespaces(root: ET.Element) -> None:
    for node in root.iter():
        if isinstance(node.tag, str) and node.tag.startswith("{"):
            node.tag = node.tag.split("}", 1)[1]
        for key in [k for k in node.attrib if k.startswith("{")]:
            node.attrib[key.split("}", 1)[1]] = node.attrib.pop(key)


def children(node: Optional[ET.Element], tag: str) -> list[ET.Element]:
    """Direct children named tag, always as a list."""
    if node is None:
        return []
    return node.findall(tag)


def first(node: Optional[ET.Element], path: str) -> Optional[ET.Element]:
    """First element matching an ElementPath, or None."""
    if node is None:
        return None
    return node.find(path)


def descendants(node: Optional[ET.Element], tag: str) -> list[ET.Element]:
    """All elements named tag below node (node itself excluded), in document order."""
    if node is None:
        return []
    return [el for el in node.iter(tag) if el is not node]


def attr(node: Optional[ET.Element], name: str) -> Optional[str]:
    """Attribute value, or None when absent or blank."""
    if node is None:
        return None
    value = node.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def text_of(node: Optional[ET.Element]) -> str:
    """All text below node with markup removed."""
    if node is None:
        return ""
    return "".join(node.itertext())


def html_content(node: Optional[ET.Element]) -> str:
    """
    Inner content of node as HTML, entities decoded.

    Literal child elements are written back as tags, so a stem built from
    embedded XHTML and a stem built from escaped HTML text come out the
    same way.
    """
    if node is None:
        return ""

    parts = [node.text or ""]
    for child in node:
        if not isinstance(child.tag, str):
            parts.append(child.tail or "")
            continue
        attrs = "".join(f" {k}={quoteattr(v)}" for k, v in child.attrib.items())
        inner = html_content(child)
        if inner:
            parts.append(f"<{child.tag}{attrs}>{inner}</{child.tag}>")
        else:
            parts.append(f"<{child.tag}{attrs}/>")
        parts.append(child.tail or "")
    return "".join(parts)


def local_name(node: ET.Element) -> str:
    return node.tag if isinstance(node.tag, str) else ""


def describe_error(error: Exception) -> str:
    """One-line reason for a parse failure."""
    if isinstance(error, DefusedXmlException):
        return f"forbidden XML construct ({type(error).__name__})"
    return str(error) or type(error).__name__
