"""XRechnung (UBL) Generator: baut ein Dokument aus einem ``Invoice``-DTO."""

from __future__ import annotations

from typing import Optional

from einvoice.core.config import Settings
from einvoice.core.logging import get_logger
from einvoice.dto import Invoice, Party

from .builder import InvoiceBuilder

GENERATOR_VERSION = "xrechnung-ubl-3.0-1"

logger = get_logger(__name__)


def version() -> str:
    return GENERATOR_VERSION


def _add_party(builder: InvoiceBuilder, party: Party, *, seller: bool) -> None:
    add = builder.add_seller_party if seller else builder.add_buyer_party
    add(
        party.endpoint_id,
        party.endpoint_scheme_id,
        party.name,
        party.address.street,
        party.address.city,
        party.address.postal_code,
        party.address.country_code,
        party.tax_number or "",
        party.vat_id or "",
        party.contact.name,
        party.contact.telephone,
        party.contact.email,
    )


def build_xrechnung_builder(invoice: Invoice, *, settings: Optional[Settings] = None) -> InvoiceBuilder:
    """Fill a fresh :class:`InvoiceBuilder` from ``invoice`` in document order."""

    if not invoice.invoice_no:
        raise ValueError("Invoice number must be set before generating XRechnung")

    totals = invoice.compute_totals()
    builder = InvoiceBuilder(invoice.type_code, settings=settings)

    builder.set_basic_information(
        invoice.invoice_no,
        invoice.issue_date,
        invoice.due_date,
        invoice.currency,
        invoice.buyer_reference,
    )
    _add_party(builder, invoice.seller, seller=True)
    _add_party(builder, invoice.buyer, seller=False)

    if invoice.delivery_date is not None:
        builder.add_delivery(invoice.delivery_date)

    if invoice.payment is not None:
        payment = invoice.payment
        builder.add_payment_means(
            payment.payment_means_code,
            payment.payment_id or invoice.invoice_no,
            payment.account_name,
            payment.iban,
            payment.bic,
        )

    for bucket in totals.buckets:
        builder.add_tax_total(
            bucket.amount,
            bucket.net,
            bucket.tax.category_code,
            bucket.tax.rate,
            bucket.tax.scheme_id,
        )

    builder.add_legal_monetary_total(totals.total_net, totals.total_gross, invoice.prepaid_amount)

    for index, item in enumerate(invoice.line_items, start=1):
        builder.add_invoice_line(
            index,
            item.quantity,
            item.net_amount(),
            item.description,
            item.item_name,
            item.item_id,
            item.tax.category_code,
            item.tax.rate,
            item.tax.scheme_id,
            item.unit_price,
            item.base_quantity,
        )

    logger.debug(
        "Built XRechnung tree with %d line(s) and %d tax bucket(s)",
        len(invoice.line_items),
        len(totals.buckets),
    )
    return builder


def build_xrechnung_xml(
    invoice: Invoice,
    *,
    remove_empty_nodes: Optional[bool] = None,
    settings: Optional[Settings] = None,
) -> bytes:
    builder = build_xrechnung_builder(invoice, settings=settings)
    return builder.create_xml_document(remove_empty_nodes).encode("utf-8")


def build_xrechnung_document(invoice: Invoice, *, settings: Optional[Settings] = None) -> bytes:
    return build_xrechnung_xml(invoice, settings=settings)


__all__ = [
    "GENERATOR_VERSION",
    "version",
    "build_xrechnung_builder",
    "build_xrechnung_xml",
    "build_xrechnung_document",
]
