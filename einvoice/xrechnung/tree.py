"""Baum-Primitive für den XRechnung-Builder (lxml)."""

from __future__ import annotations

from typing import Mapping, Optional

from lxml import etree

from einvoice.codes import NAMESPACES
from einvoice.errors import DocumentConstructionError

ROOT_TAG = "Invoice"

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'


def qualified_name(name: str) -> str:
    """Create Clark notation (``{uri}local``) from ``prefix:local``.

    Names without prefix land in the UBL Invoice-2 default namespace.
    """
    if ":" in name:
        prefix, local = name.split(":", 1)
    else:
        prefix, local = "ubl", name
    try:
        uri = NAMESPACES[prefix]
    except KeyError as err:
        raise DocumentConstructionError(f"Unknown namespace prefix in element name {name!r}") from err
    return f"{{{uri}}}{local}"


def create_root() -> etree._Element:
    """Create the Invoice root element with its namespace declarations."""
    nsmap = {
        None: NAMESPACES["ubl"],
        "cac": NAMESPACES["cac"],
        "cec": NAMESPACES["cec"],
        "cbc": NAMESPACES["cbc"],
    }
    return etree.Element(qualified_name(ROOT_TAG), nsmap=nsmap)


def add_element(
    parent: etree._Element,
    name: str,
    value: object = None,
    attributes: Optional[Mapping[str, str]] = None,
) -> etree._Element:
    """Append ``name`` as last child of ``parent`` and return the new element.

    The text node stores the raw value; lxml escapes ``&``, ``<`` and ``>`` in
    text and quotes in attribute values when the tree is written. A failure
    leaves ``parent`` unchanged.
    """
    tag = qualified_name(name)
    try:
        element = etree.SubElement(parent, tag)
    except (ValueError, TypeError) as err:
        raise DocumentConstructionError(f"Cannot add element {name!r}: {err}") from err

    try:
        if value is not None:
            element.text = str(value)
        for attr_name, attr_value in (attributes or {}).items():
            element.set(attr_name, str(attr_value))
    except (ValueError, TypeError) as err:
        parent.remove(element)
        raise DocumentConstructionError(f"Cannot add element {name!r}: {err}") from err
    return element


def _is_blank(element: etree._Element) -> bool:
    return (element.text or "").strip() == ""


def prune_empty_elements(node: etree._Element) -> None:
    """Entfernt rekursiv alle Elemente ohne nicht-leeren Textinhalt.

    Post-Order über eine Kopie der Kinderliste: erst werden die Kinder
    bearbeitet, danach wird der Knoten selbst geprüft. Ein Container, dessen
    Kinder alle entfernt wurden, ist damit selbst ein leeres Blatt und wird
    ebenfalls ausgehängt.
    """
    for child in list(node):
        if isinstance(child.tag, str):
            prune_empty_elements(child)

    if len(node) == 0 and _is_blank(node):
        parent = node.getparent()
        if parent is not None:
            parent.remove(node)


def serialize(root: etree._Element, *, pretty_print: bool = True) -> str:
    """Serialize ``root`` as an UTF-8 XML document string."""
    xml_body = etree.tostring(
        root,
        pretty_print=pretty_print,
        xml_declaration=False,
        encoding="UTF-8",
    ).decode("utf-8")
    return f"{XML_DECLARATION}\n{xml_body.lstrip()}"


__all__ = [
    "ROOT_TAG",
    "XML_DECLARATION",
    "qualified_name",
    "create_root",
    "add_element",
    "prune_empty_elements",
    "serialize",
]
