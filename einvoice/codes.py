"""Feste Codes und Kennungen für XRechnung 3.0 (UBL Invoice-2)."""

from __future__ import annotations

from enum import Enum, IntEnum

CUSTOMIZATION_ID = "urn:cen.eu:en16931:2017#compliant#urn:xeinkauf.de:kosit:xrechnung_3.0"
PROFILE_ID = "urn:fdc:peppol.eu:2017:poacc:billing:01:1.0"

CURRENCY_CODE = "EUR"
UNIT_CODE = "C62"  # UN/ECE Rec. 20: "one"

# UBL 2.1 Namespaces
NAMESPACES = {
    "ubl": "urn:oasis:names:specification:ubl:schema:xsd:Invoice-2",
    "cac": "urn:oasis:names:specification:ubl:schema:xsd:CommonAggregateComponents-2",
    "cec": "urn:oasis:names:specification:ubl:schema:xsd:CommonExtensionComponents-2",
    "cbc": "urn:oasis:names:specification:ubl:schema:xsd:CommonBasicComponents-2",
}


class InvoiceTypeCode(IntEnum):
    """Rechnungsarten nach UNCL1001."""

    INVOICE = 380
    CREDIT_NOTE = 381
    INVOICE_CORRECTION = 384


class PaymentMeansCode(IntEnum):
    """Zahlungsarten nach UNCL4461."""

    IN_CASH = 10
    CHEQUE = 20
    CREDIT_TRANSFER_NON_SEPA = 30
    CREDIT_CARD = 54
    SEPA_CREDIT_TRANSFER = 58
    SEPA_DIRECT_DEBIT = 59


class PartyRole(str, Enum):
    """Container-Element für Verkäufer bzw. Käufer."""

    SELLER = "AccountingSupplierParty"
    BUYER = "AccountingCustomerParty"


class TaxSchemeId(str, Enum):
    VAT = "VAT"
    FC = "FC"  # Steuernummer


__all__ = [
    "CUSTOMIZATION_ID",
    "PROFILE_ID",
    "CURRENCY_CODE",
    "UNIT_CODE",
    "NAMESPACES",
    "InvoiceTypeCode",
    "PaymentMeansCode",
    "PartyRole",
    "TaxSchemeId",
]
