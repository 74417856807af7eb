"""Deterministische Beispielrechnungen für XRechnung-Tests."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from .codes import InvoiceTypeCode, PaymentMeansCode
from .dto import Address, Contact, Invoice, LineItem, Party, PaymentAccount, Tax, build_invoice


@dataclass(frozen=True)
class SampleScenario:
    code: str
    description: str
    line_specs: tuple[tuple[str, str, str, str], ...]


SELLER_PARTY = Party(
    name="Tenant Seller",
    address=Address(
        street="Sample Street 1",
        postal_code="10115",
        city="Berlin",
        country_code="DE",
    ),
    endpoint_id="billing@tenant-seller.example",
    endpoint_scheme_id="EM",
    vat_id="DE123456789",
    tax_number="30/123/45678",
    contact=Contact(
        name="Erika Mustermann",
        telephone="+49 30 1234567",
        email="erika@tenant-seller.example",
    ),
)

BUYER_PARTY = Party(
    name="Customer GmbH",
    address=Address(
        street="Customer Way 5",
        postal_code="20095",
        city="Hamburg",
        country_code="DE",
    ),
    endpoint_id="invoices@customer.example",
    endpoint_scheme_id="EM",
)

SELLER_ACCOUNT = PaymentAccount(
    iban="DE02120300000000202051",
    account_name="Tenant Seller",
    payment_means_code=PaymentMeansCode.SEPA_CREDIT_TRANSFER,
    bic="BYLADEM1001",
)


def _make_line(spec: tuple[str, str, str, str]) -> LineItem:
    description, quantity, unit_price, rate = spec
    return LineItem(
        description=description,
        quantity=Decimal(quantity),
        unit_price=Decimal(unit_price),
        tax=Tax(rate=Decimal(rate), category_code="Z" if Decimal(rate) == 0 else "S"),
    )


SCENARIOS: List[SampleScenario] = [
    SampleScenario("01", "single_19", (("Consulting", "1", "100.00", "19"),)),
    SampleScenario(
        "02",
        "dual_19",
        (
            ("Service A", "1", "80.00", "19"),
            ("Service B", "3", "20.00", "19"),
        ),
    ),
    SampleScenario(
        "03",
        "mixed_7_19",
        (
            ("Consulting", "1", "100.00", "19"),
            ("Books", "2", "30.00", "7"),
        ),
    ),
    SampleScenario("04", "zero_rate", (("Export", "5", "10.00", "0"),)),
    SampleScenario(
        "05",
        "fractional_quantities",
        (
            ("Half-day consulting", "0.5", "199.99", "19"),
            ("Workshop", "1.25", "80.40", "7"),
        ),
    ),
    SampleScenario(
        "06",
        "rounding_edge",
        (
            ("Edge A", "3", "33.333", "19"),
            ("Edge B", "4", "14.375", "7"),
        ),
    ),
    SampleScenario(
        "07",
        "large_values",
        (
            ("Big 19", "1", "1234.56", "19"),
            ("Big 7", "2", "789.10", "7"),
            ("Big 0", "3", "250.00", "0"),
        ),
    ),
]


def iter_sample_scenarios() -> Iterable[SampleScenario]:
    return list(SCENARIOS)


def build_sample_invoice(
    scenario: SampleScenario,
    *,
    invoice_no: str,
    issue_date: date,
    due_date: date,
    buyer_reference: str = "04011000-12345-34",
    type_code: int = InvoiceTypeCode.INVOICE,
    delivery_date: Optional[date] = None,
    payment: Optional[PaymentAccount] = SELLER_ACCOUNT,
) -> Invoice:
    line_items = [_make_line(spec) for spec in scenario.line_specs]
    return build_invoice(
        invoice_no=invoice_no,
        seller=SELLER_PARTY,
        buyer=BUYER_PARTY,
        line_items=line_items,
        issue_date=issue_date,
        due_date=due_date,
        buyer_reference=buyer_reference,
        type_code=type_code,
        delivery_date=delivery_date,
        payment=payment,
    )
