"""Datentransferobjekte für XRechnung-Rechnungen.

Die Datenstrukturen sind vollständig in-memory, deterministisch und nutzen
`Decimal` mit `ROUND_HALF_UP`, um Beträge auf zwei Nachkommastellen zu
quantisieren. `ROUND_HALF_UP` rundet bei `Decimal` betragsmäßig auf, also
kaufmännisch weg von Null (``2.675`` → ``2.68``, ``-1.005`` → ``-1.01``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Dict, Iterable, List, Optional, Tuple

from .codes import CURRENCY_CODE, InvoiceTypeCode, PaymentMeansCode, TaxSchemeId


DecimalLike = Decimal | str | int | float

TWO_PLACES = Decimal("0.01")


def _to_decimal(value: DecimalLike) -> Decimal:
    """Konvertiere Eingaben deterministisch in ``Decimal``.

    Floats werden zunächst in Strings umgewandelt, um binäre Rundungsfehler zu
    vermeiden. ``10.555`` wird so als ``Decimal("10.555")`` gerundet und nicht
    als ``10.55499999…``.
    """

    if isinstance(value, bool):
        raise TypeError(f"Unsupported decimal input: {type(value)!r}")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, str)):
        return Decimal(str(value))
    if isinstance(value, float):
        return Decimal(str(value))
    raise TypeError(f"Unsupported decimal input: {type(value)!r}")


def quantize_money(amount: DecimalLike) -> Decimal:
    """Rundet Beträge auf zwei Nachkommastellen (ROUND_HALF_UP).

    Die Genauigkeit wird an den Betrag angepasst: alle Vorkommastellen plus
    zwei Nachkommastellen, mindestens aber die Standardgenauigkeit von 28.
    """

    value = _to_decimal(amount)
    with localcontext() as ctx:
        if value.is_finite():
            ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def format_amount(amount: DecimalLike) -> str:
    return f"{quantize_money(amount):.2f}"


def format_quantity(value: DecimalLike) -> str:
    normalized = _to_decimal(value).normalize()
    return format(normalized, "f")


@dataclass(frozen=True, slots=True)
class Address:
    street: str
    postal_code: str
    city: str
    country_code: str


@dataclass(frozen=True, slots=True)
class Contact:
    name: str = ""
    telephone: str = ""
    email: str = ""


@dataclass(frozen=True, slots=True)
class Party:
    name: str
    address: Address
    endpoint_id: str = ""
    endpoint_scheme_id: str = "EM"  # EM: Endpoint ist eine E-Mail-Adresse
    vat_id: Optional[str] = None
    tax_number: Optional[str] = None
    contact: Contact = field(default_factory=Contact)


@dataclass(frozen=True, slots=True)
class PaymentAccount:
    iban: str
    account_name: str
    payment_id: str = ""
    payment_means_code: int = PaymentMeansCode.SEPA_CREDIT_TRANSFER
    bic: str = ""


@dataclass(frozen=True, slots=True)
class Tax:
    rate: Decimal
    category_code: str = "S"  # Standard rate per EN16931 (S = Standard rate)
    scheme_id: str = TaxSchemeId.VAT.value

    def __post_init__(self) -> None:
        object.__setattr__(self, "rate", quantize_money(self.rate))

    @property
    def key(self) -> Tuple[str, Decimal, str]:
        return (self.category_code, self.rate, self.scheme_id)


@dataclass(slots=True)
class LineItem:
    description: str
    quantity: Decimal
    unit_price: Decimal
    tax: Tax
    name: Optional[str] = None
    item_id: str = ""
    base_quantity: Decimal = Decimal("1")

    def __post_init__(self) -> None:
        object.__setattr__(self, "quantity", _to_decimal(self.quantity))
        object.__setattr__(self, "unit_price", _to_decimal(self.unit_price))
        object.__setattr__(self, "base_quantity", _to_decimal(self.base_quantity))

    @property
    def item_name(self) -> str:
        return self.name if self.name is not None else self.description

    def net_amount(self) -> Decimal:
        return quantize_money(self.quantity * self.unit_price / self.base_quantity)

    def tax_amount(self) -> Decimal:
        basis = self.net_amount()
        rate_factor = self.tax.rate / Decimal("100")
        return quantize_money(basis * rate_factor)


@dataclass(slots=True)
class TaxBucket:
    tax: Tax
    net: Decimal
    amount: Decimal


@dataclass(slots=True)
class Totals:
    buckets: List[TaxBucket]
    total_net: Decimal
    total_tax: Decimal
    total_gross: Decimal


@dataclass(slots=True)
class Invoice:
    invoice_no: str
    seller: Party
    buyer: Party
    line_items: List[LineItem]
    issue_date: date
    due_date: date
    buyer_reference: str = ""
    currency: str = CURRENCY_CODE
    type_code: int = InvoiceTypeCode.INVOICE
    delivery_date: Optional[date] = None
    payment: Optional[PaymentAccount] = None
    prepaid_amount: Decimal = Decimal("0.00")

    _cached_totals: Optional[Totals] = field(default=None, init=False, repr=False)

    def compute_totals(self, *, force: bool = False) -> Totals:
        if self._cached_totals is not None and not force:
            return self._cached_totals

        if not self.line_items:
            raise ValueError("Invoice requires at least one line item")

        buckets: Dict[Tuple[str, Decimal, str], TaxBucket] = {}

        for item in self.line_items:
            bucket = buckets.get(item.tax.key)
            if bucket is None:
                bucket = buckets[item.tax.key] = TaxBucket(
                    tax=item.tax, net=Decimal("0.00"), amount=Decimal("0.00")
                )
            bucket.net = quantize_money(bucket.net + item.net_amount())
            bucket.amount = quantize_money(bucket.amount + item.tax_amount())

        ordered = [buckets[key] for key in sorted(buckets, key=lambda k: (k[1], k[0], k[2]))]
        total_net = quantize_money(sum((b.net for b in ordered), Decimal("0.00")))
        total_tax = quantize_money(sum((b.amount for b in ordered), Decimal("0.00")))
        total_gross = quantize_money(total_net + total_tax)

        totals = Totals(
            buckets=ordered,
            total_net=total_net,
            total_tax=total_tax,
            total_gross=total_gross,
        )
        self._cached_totals = totals
        return totals

    def validate(self) -> None:
        if not self.currency or len(self.currency) != 3:
            raise ValueError("Currency must be a 3-letter ISO code")
        if self.issue_date > self.due_date:
            raise ValueError("Due date must not be before issue date")
        if self.type_code not in tuple(InvoiceTypeCode):
            raise ValueError(f"Unsupported invoice type code: {self.type_code!r}")
        for item in self.line_items:
            if item.base_quantity <= 0:
                raise ValueError(f"Base quantity must be positive: {item.description!r}")
        self.compute_totals()


def build_invoice(
    *,
    invoice_no: str,
    seller: Party,
    buyer: Party,
    line_items: Iterable[LineItem],
    issue_date: date,
    due_date: date,
    buyer_reference: str = "",
    currency: str = CURRENCY_CODE,
    type_code: int = InvoiceTypeCode.INVOICE,
    delivery_date: Optional[date] = None,
    payment: Optional[PaymentAccount] = None,
    prepaid_amount: DecimalLike = Decimal("0.00"),
) -> Invoice:
    invoice = Invoice(
        invoice_no=invoice_no,
        seller=seller,
        buyer=buyer,
        line_items=list(line_items),
        issue_date=issue_date,
        due_date=due_date,
        buyer_reference=buyer_reference,
        currency=currency,
        type_code=type_code,
        delivery_date=delivery_date,
        payment=payment,
        prepaid_amount=quantize_money(prepaid_amount),
    )
    invoice.validate()
    return invoice
