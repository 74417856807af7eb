"""XRechnung 3.0 Rechnungs-Builder (UBL Invoice-2, EN16931)."""

from .codes import (
    CURRENCY_CODE,
    CUSTOMIZATION_ID,
    NAMESPACES,
    PROFILE_ID,
    UNIT_CODE,
    InvoiceTypeCode,
    PartyRole,
    PaymentMeansCode,
    TaxSchemeId,
)
from .dto import (
    Address,
    Contact,
    Invoice,
    LineItem,
    Party,
    PaymentAccount,
    Tax,
    Totals,
    build_invoice,
    quantize_money,
)
from .errors import (
    BuilderStateError,
    DocumentConstructionError,
    FormatError,
    InvalidArgument,
    InvoiceBuilderError,
)
from .samples import (
    BUYER_PARTY,
    SCENARIOS,
    SELLER_ACCOUNT,
    SELLER_PARTY,
    SampleScenario,
    build_sample_invoice,
    iter_sample_scenarios,
)
from .xrechnung import (
    InvoiceBuilder,
    build_xrechnung_document,
    build_xrechnung_xml,
    version as xrechnung_version,
)

version = xrechnung_version

__all__ = [
    "CURRENCY_CODE",
    "CUSTOMIZATION_ID",
    "NAMESPACES",
    "PROFILE_ID",
    "UNIT_CODE",
    "InvoiceTypeCode",
    "PartyRole",
    "PaymentMeansCode",
    "TaxSchemeId",
    "Address",
    "Contact",
    "Invoice",
    "LineItem",
    "Party",
    "PaymentAccount",
    "Tax",
    "Totals",
    "build_invoice",
    "quantize_money",
    "BuilderStateError",
    "DocumentConstructionError",
    "FormatError",
    "InvalidArgument",
    "InvoiceBuilderError",
    "BUYER_PARTY",
    "SCENARIOS",
    "SELLER_ACCOUNT",
    "SELLER_PARTY",
    "SampleScenario",
    "build_sample_invoice",
    "iter_sample_scenarios",
    "InvoiceBuilder",
    "build_xrechnung_document",
    "build_xrechnung_xml",
    "xrechnung_version",
    "version",
]
