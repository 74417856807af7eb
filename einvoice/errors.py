"""Fehlerklassen des Rechnungs-Builders."""

from __future__ import annotations


class InvoiceBuilderError(Exception):
    pass


class InvalidArgument(InvoiceBuilderError, ValueError):
    """Unzulässiger Rechnungsart-Code beim Anlegen eines Builders."""


class FormatError(InvoiceBuilderError, ValueError):
    """Eingabe entspricht nicht dem erwarteten Format (z. B. YYYY-MM-DD)."""


class DocumentConstructionError(InvoiceBuilderError):
    """Fehler beim Aufbau des XML-Baums (ungültiger Elementname, Steuerzeichen)."""


class BuilderStateError(InvoiceBuilderError):
    """Builder wurde bereits serialisiert und darf nicht mehr verändert werden."""


__all__ = [
    "InvoiceBuilderError",
    "InvalidArgument",
    "FormatError",
    "DocumentConstructionError",
    "BuilderStateError",
]
