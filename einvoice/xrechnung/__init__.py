"""XRechnung (UBL Invoice-2) Builder und Generator."""

from .builder import InvoiceBuilder
from .generator import (
    GENERATOR_VERSION,
    build_xrechnung_builder,
    build_xrechnung_document,
    build_xrechnung_xml,
    version,
)
from .tree import add_element, create_root, prune_empty_elements, serialize

__all__ = [
    "InvoiceBuilder",
    "GENERATOR_VERSION",
    "build_xrechnung_builder",
    "build_xrechnung_document",
    "build_xrechnung_xml",
    "version",
    "add_element",
    "create_root",
    "prune_empty_elements",
    "serialize",
]
