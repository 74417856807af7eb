"""Tests for building XRechnung documents from invoice DTOs."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from lxml import etree

from einvoice import (
    BUYER_PARTY,
    SELLER_PARTY,
    LineItem,
    PaymentAccount,
    Tax,
    build_invoice,
    build_sample_invoice,
    iter_sample_scenarios,
    xrechnung_version,
)
from einvoice.codes import NAMESPACES
from einvoice.core.config import Settings
from einvoice.xrechnung import build_xrechnung_builder, build_xrechnung_document, build_xrechnung_xml


NS = {"cbc": NAMESPACES["cbc"], "cac": NAMESPACES["cac"]}

ISSUE = date(2025, 1, 1)
DUE = date(2025, 1, 15)

SCENARIOS = list(iter_sample_scenarios())


def _sample(scenario, **kwargs):
    kwargs.setdefault("invoice_no", f"RE-2025-{scenario.code}")
    return build_sample_invoice(scenario, issue_date=ISSUE, due_date=DUE, **kwargs)


def _doc(xml_bytes: bytes) -> etree._Element:
    return etree.fromstring(xml_bytes)


def _amount(doc: etree._Element, path: str) -> Decimal:
    return Decimal(doc.findtext(path, namespaces=NS))


def _paper_line(base_quantity: str) -> LineItem:
    return LineItem("Paper", Decimal("5"), Decimal("4.99"), Tax(rate=Decimal("19")), base_quantity=Decimal(base_quantity))


@pytest.mark.parametrize("scenario", SCENARIOS, ids=[s.description for s in SCENARIOS])
def test_sample_scenarios_produce_consistent_documents(scenario) -> None:
    invoice = _sample(scenario)
    totals = invoice.compute_totals()
    doc = _doc(build_xrechnung_document(invoice))

    assert doc.findtext("cbc:ID", namespaces=NS) == invoice.invoice_no
    assert doc.findtext("cbc:IssueDate", namespaces=NS) == "2025-01-01"
    assert doc.findtext("cbc:DueDate", namespaces=NS) == "2025-01-15"
    assert doc.findtext("cbc:BuyerReference", namespaces=NS) == "04011000-12345-34"

    lines = doc.findall("cac:InvoiceLine", namespaces=NS)
    assert len(lines) == len(scenario.line_specs)
    assert [line.findtext("cbc:ID", namespaces=NS) for line in lines] == [
        str(i) for i in range(1, len(lines) + 1)
    ]
    line_sum = sum(
        (Decimal(line.findtext("cbc:LineExtensionAmount", namespaces=NS)) for line in lines),
        Decimal("0"),
    )
    assert line_sum == totals.total_net

    tax_totals = doc.findall("cac:TaxTotal", namespaces=NS)
    assert len(tax_totals) == len(totals.buckets)
    tax_sum = sum(
        (Decimal(t.findtext("cbc:TaxAmount", namespaces=NS)) for t in tax_totals),
        Decimal("0"),
    )
    assert tax_sum == totals.total_tax

    assert _amount(doc, "cac:LegalMonetaryTotal/cbc:LineExtensionAmount") == totals.total_net
    assert _amount(doc, "cac:LegalMonetaryTotal/cbc:TaxExclusiveAmount") == totals.total_net
    assert _amount(doc, "cac:LegalMonetaryTotal/cbc:TaxInclusiveAmount") == totals.total_gross
    assert _amount(doc, "cac:LegalMonetaryTotal/cbc:PayableAmount") == totals.total_gross


@pytest.mark.parametrize(
    "code, net, tax, gross",
    [
        ("01", "100.00", "19.00", "119.00"),
        ("03", "160.00", "23.20", "183.20"),
        ("04", "50.00", "0.00", "50.00"),
        ("06", "157.50", "23.03", "180.53"),
        ("07", "3562.76", "345.04", "3907.80"),
    ],
)
def test_sample_totals(code: str, net: str, tax: str, gross: str) -> None:
    scenario = next(s for s in SCENARIOS if s.code == code)
    totals = _sample(scenario).compute_totals()

    assert totals.total_net == Decimal(net)
    assert totals.total_tax == Decimal(tax)
    assert totals.total_gross == Decimal(gross)


def test_tax_totals_are_ordered_by_rate() -> None:
    doc = _doc(build_xrechnung_xml(_sample(SCENARIOS[6])))
    percents = [
        t.findtext("cac:TaxSubtotal/cac:TaxCategory/cbc:Percent", namespaces=NS)
        for t in doc.findall("cac:TaxTotal", namespaces=NS)
    ]
    categories = [
        t.findtext("cac:TaxSubtotal/cac:TaxCategory/cbc:ID", namespaces=NS)
        for t in doc.findall("cac:TaxTotal", namespaces=NS)
    ]

    assert percents == ["0.00", "7.00", "19.00"]
    assert categories == ["Z", "S", "S"]


def test_generation_is_deterministic() -> None:
    first = build_xrechnung_xml(_sample(SCENARIOS[2]))
    second = build_xrechnung_xml(_sample(SCENARIOS[2]))
    assert first == second
    assert first.startswith(b'<?xml version="1.0" encoding="UTF-8"?>\n<Invoice ')


def test_seller_carries_vat_and_tax_number_buyer_has_no_contact() -> None:
    doc = _doc(build_xrechnung_xml(_sample(SCENARIOS[0])))

    seller = doc.find("cac:AccountingSupplierParty/cac:Party", namespaces=NS)
    schemes = [
        (s.findtext("cbc:CompanyID", namespaces=NS), s.findtext("cac:TaxScheme/cbc:ID", namespaces=NS))
        for s in seller.findall("cac:PartyTaxScheme", namespaces=NS)
    ]
    assert schemes == [(SELLER_PARTY.vat_id, "VAT"), (SELLER_PARTY.tax_number, "FC")]
    assert seller.findtext("cac:Contact/cbc:ElectronicMail", namespaces=NS) == SELLER_PARTY.contact.email

    buyer = doc.find("cac:AccountingCustomerParty/cac:Party", namespaces=NS)
    assert buyer.findtext("cac:PartyName/cbc:Name", namespaces=NS) == BUYER_PARTY.name
    assert buyer.find("cac:PartyTaxScheme", namespaces=NS) is None
    assert buyer.find("cac:Contact", namespaces=NS) is None


def test_payment_id_defaults_to_invoice_number_and_bic_is_not_written() -> None:
    xml = build_xrechnung_xml(_sample(SCENARIOS[0], invoice_no="RE-42"))
    doc = _doc(xml)

    assert doc.findtext("cac:PaymentMeans/cbc:PaymentMeansCode", namespaces=NS) == "58"
    assert doc.findtext("cac:PaymentMeans/cbc:PaymentID", namespaces=NS) == "RE-42"
    assert b"BYLADEM1001" not in xml


def test_explicit_payment_id_is_kept() -> None:
    account = PaymentAccount(iban="DE02120300000000202051", account_name="Tenant Seller", payment_id="PAY-7")
    doc = _doc(build_xrechnung_xml(_sample(SCENARIOS[0], payment=account)))
    assert doc.findtext("cac:PaymentMeans/cbc:PaymentID", namespaces=NS) == "PAY-7"


def test_without_payment_account_no_payment_means() -> None:
    doc = _doc(build_xrechnung_xml(_sample(SCENARIOS[0], payment=None)))
    assert doc.find("cac:PaymentMeans", namespaces=NS) is None


def test_delivery_date_is_emitted_when_set() -> None:
    doc = _doc(build_xrechnung_xml(_sample(SCENARIOS[0], delivery_date=date(2024, 12, 20))))
    names = [etree.QName(child).localname for child in doc]

    assert doc.findtext("cac:Delivery/cbc:ActualDeliveryDate", namespaces=NS) == "2024-12-20"
    assert names.index("AccountingCustomerParty") < names.index("Delivery") < names.index("PaymentMeans")


def test_credit_note_type_code() -> None:
    doc = _doc(build_xrechnung_xml(_sample(SCENARIOS[0], type_code=381)))
    assert doc.findtext("cbc:InvoiceTypeCode", namespaces=NS) == "381"


def test_missing_invoice_number_is_rejected() -> None:
    invoice = _sample(SCENARIOS[0], invoice_no="")
    with pytest.raises(ValueError):
        build_xrechnung_xml(invoice)


def test_prepaid_amount_and_base_quantity() -> None:
    line = LineItem(
        description="Paper",
        quantity=Decimal("250"),
        unit_price=Decimal("4.99"),
        tax=Tax(rate=Decimal("19")),
        name="A4 paper",
        item_id="P-500",
        base_quantity=Decimal("100"),
    )
    invoice = build_invoice(
        invoice_no="RE-9",
        seller=SELLER_PARTY,
        buyer=BUYER_PARTY,
        line_items=[line],
        issue_date=ISSUE,
        due_date=DUE,
        prepaid_amount="5",
    )
    doc = _doc(build_xrechnung_xml(invoice))
    invoice_line = doc.find("cac:InvoiceLine", namespaces=NS)

    assert invoice_line.findtext("cbc:InvoicedQuantity", namespaces=NS) == "250"
    assert invoice_line.findtext("cbc:LineExtensionAmount", namespaces=NS) == "12.48"
    assert invoice_line.findtext("cac:Item/cbc:Name", namespaces=NS) == "A4 paper"
    assert invoice_line.findtext("cac:Item/cac:SellersItemIdentification/cbc:ID", namespaces=NS) == "P-500"
    assert invoice_line.findtext("cac:Price/cbc:BaseQuantity", namespaces=NS) == "100"
    assert doc.findtext("cac:LegalMonetaryTotal/cbc:PrepaidAmount", namespaces=NS) == "5.00"


def test_keep_empty_nodes_on_request() -> None:
    invoice = _sample(SCENARIOS[0], buyer_reference="")
    pruned = _doc(build_xrechnung_xml(invoice))
    kept = _doc(build_xrechnung_xml(invoice, remove_empty_nodes=False))

    assert pruned.find("cbc:BuyerReference", namespaces=NS) is None
    assert kept.find("cbc:BuyerReference", namespaces=NS) is not None
    assert kept.find("cac:AccountingCustomerParty/cac:Party/cac:Contact", namespaces=NS) is not None


def test_builder_settings_are_passed_through() -> None:
    builder = build_xrechnung_builder(
        _sample(SCENARIOS[0]), settings=Settings(pretty_print=False)
    )
    xml = builder.create_xml_document()
    assert xml.count("\n") == 1


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"due_date": date(2024, 12, 31)}, "Due date"),
        ({"currency": "EURO"}, "Currency"),
        ({"type_code": 999}, "invoice type code"),
        ({"line_items": []}, "line item"),
        ({"line_items": [_paper_line("0")]}, "Base quantity"),
        ({"line_items": [_paper_line("-1")]}, "Base quantity"),
    ],
)
def test_build_invoice_validation(overrides: dict, message: str) -> None:
    kwargs = dict(
        invoice_no="RE-1",
        seller=SELLER_PARTY,
        buyer=BUYER_PARTY,
        line_items=[LineItem("Consulting", Decimal("1"), Decimal("100"), Tax(rate=Decimal("19")))],
        issue_date=ISSUE,
        due_date=DUE,
    )
    kwargs.update(overrides)
    with pytest.raises(ValueError, match=message):
        build_invoice(**kwargs)


def test_version() -> None:
    assert xrechnung_version() == "xrechnung-ubl-3.0-1"
