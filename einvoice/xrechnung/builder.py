"""
XRechnung 3.0 invoice builder on top of an lxml document tree.

The builder owns exactly one UBL Invoice-2 tree. Every public ``set_*``/``add_*``
method appends one sub-tree to the root in the order the standard declares;
nothing that was appended is edited afterwards. ``create_xml_document()``
removes elements without text and serializes the tree.

Usage:
    builder = InvoiceBuilder(InvoiceTypeCode.INVOICE)
    builder.set_basic_information("INV-1", "2024-01-01", "2024-01-15", "EUR", "REF-1")
    builder.add_seller_party(...)
    builder.add_invoice_line(...)
    builder.add_legal_monetary_total(100, 119)
    xml_string = builder.create_xml_document()
"""

from __future__ import annotations

import functools
import re
from datetime import date, datetime
from typing import Optional

from lxml import etree

from einvoice.codes import (
    CURRENCY_CODE,
    CUSTOMIZATION_ID,
    PROFILE_ID,
    UNIT_CODE,
    InvoiceTypeCode,
    PartyRole,
    TaxSchemeId,
)
from einvoice.core.config import Settings, settings as default_settings
from einvoice.core.logging import get_logger
from einvoice.dto import DecimalLike, format_amount, format_quantity
from einvoice.errors import BuilderStateError, FormatError, InvalidArgument

from .tree import add_element, create_root, prune_empty_elements, serialize

logger = get_logger(__name__)

DELIVERY_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

_MONEY = {"currencyID": CURRENCY_CODE}
_UNIT = {"unitCode": UNIT_CODE}


def _coerce_type_code(invoice_type_code: object) -> InvoiceTypeCode:
    if isinstance(invoice_type_code, bool):
        raise InvalidArgument("Invalid invoiceTypeCode")
    if isinstance(invoice_type_code, str) and invoice_type_code.strip().isdigit():
        invoice_type_code = int(invoice_type_code.strip())
    try:
        return InvoiceTypeCode(invoice_type_code)
    except ValueError as err:
        raise InvalidArgument(f"Invalid invoiceTypeCode: {invoice_type_code!r}") from err


def _format_date(value: date | str) -> str:
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.isoformat()
    return value


def _code_text(value: object) -> object:
    # IntEnum members render as "Class.MEMBER" on older interpreters
    if isinstance(value, int) and not isinstance(value, bool):
        return int(value)
    return value


def _rolls_back(method):
    """Hängt bei einem Fehler alle Kinder wieder ab, die der Aufruf an die Wurzel angefügt hat."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        self._ensure_mutable()
        mark = len(self._root)
        try:
            return method(self, *args, **kwargs)
        except Exception:
            del self._root[mark:]
            raise

    return wrapper


class InvoiceBuilder:
    """Baut ein XRechnung-3.0-Dokument (UBL Invoice-2) schrittweise auf.

    Der Builder ist für genau ein Dokument gedacht: nach
    :meth:`create_xml_document` lösen weitere ``add_*``-Aufrufe einen
    :class:`BuilderStateError` aus.
    """

    def __init__(self, invoice_type_code: int, *, settings: Optional[Settings] = None) -> None:
        self._invoice_type_code = _coerce_type_code(invoice_type_code)
        self._settings = settings or default_settings
        self._serialized = False
        self._root = create_root()
        logger.debug("Created invoice builder for type code %s", int(self._invoice_type_code))

    @property
    def root(self) -> etree._Element:
        return self._root

    @property
    def invoice_type_code(self) -> InvoiceTypeCode:
        return self._invoice_type_code

    # ------------------------------------------------------------------
    # Header

    @_rolls_back
    def set_basic_information(
        self,
        invoice_id: str,
        issue_date: date | str,
        due_date: date | str,
        document_currency_code: str,
        buyer_reference: str,
    ) -> None:
        root = self._root
        add_element(root, "cbc:CustomizationID", CUSTOMIZATION_ID)
        add_element(root, "cbc:ProfileID", PROFILE_ID)
        add_element(root, "cbc:ID", invoice_id)
        add_element(root, "cbc:IssueDate", _format_date(issue_date))
        add_element(root, "cbc:DueDate", _format_date(due_date))
        add_element(root, "cbc:InvoiceTypeCode", int(self._invoice_type_code))
        add_element(root, "cbc:DocumentCurrencyCode", document_currency_code)
        add_element(root, "cbc:BuyerReference", buyer_reference)

    # ------------------------------------------------------------------
    # Parties

    def add_seller_party(
        self,
        endpoint_id: str,
        scheme_id: str,
        company_name: str,
        street: str,
        city: str,
        postal_code: str,
        country_code: str,
        tax_number: str,
        vat_identification_number: str,
        contact_name: str,
        telephone: str,
        email: str,
    ) -> etree._Element:
        """Add AccountingSupplierParty (seller)."""
        return self._add_party(
            PartyRole.SELLER,
            endpoint_id,
            scheme_id,
            company_name,
            street,
            city,
            postal_code,
            country_code,
            tax_number,
            vat_identification_number,
            contact_name,
            telephone,
            email,
        )

    def add_buyer_party(
        self,
        endpoint_id: str,
        scheme_id: str,
        company_name: str,
        street: str,
        city: str,
        postal_code: str,
        country_code: str,
        tax_number: str,
        vat_identification_number: str,
        contact_name: str,
        telephone: str,
        email: str,
    ) -> etree._Element:
        """Add AccountingCustomerParty (buyer)."""
        return self._add_party(
            PartyRole.BUYER,
            endpoint_id,
            scheme_id,
            company_name,
            street,
            city,
            postal_code,
            country_code,
            tax_number,
            vat_identification_number,
            contact_name,
            telephone,
            email,
        )

    @_rolls_back
    def _add_party(
        self,
        role: PartyRole,
        endpoint_id: str,
        scheme_id: str,
        company_name: str,
        street: str,
        city: str,
        postal_code: str,
        country_code: str,
        tax_number: str,
        vat_identification_number: str,
        contact_name: str,
        telephone: str,
        email: str,
    ) -> etree._Element:
        party_element = add_element(self._root, f"cac:{PartyRole(role).value}")
        party = add_element(party_element, "cac:Party")
        add_element(party, "cbc:EndpointID", endpoint_id, {"schemeID": scheme_id})

        party_name = add_element(party, "cac:PartyName")
        add_element(party_name, "cbc:Name", company_name)

        address = add_element(party, "cac:PostalAddress")
        add_element(address, "cbc:StreetName", street)
        add_element(address, "cbc:CityName", city)
        add_element(address, "cbc:PostalZone", postal_code)

        country = add_element(address, "cac:Country")
        add_element(country, "cbc:IdentificationCode", country_code)

        if vat_identification_number:
            self._add_party_tax_scheme(party, vat_identification_number, TaxSchemeId.VAT)

        if tax_number:
            self._add_party_tax_scheme(party, tax_number, TaxSchemeId.FC)

        legal_entity = add_element(party, "cac:PartyLegalEntity")
        add_element(legal_entity, "cbc:RegistrationName", company_name)

        # Contact is always emitted; blank fields disappear when pruning
        contact = add_element(party, "cac:Contact")
        add_element(contact, "cbc:Name", contact_name)
        add_element(contact, "cbc:Telephone", telephone)
        add_element(contact, "cbc:ElectronicMail", email)

        logger.debug(
            "Added %s (vat=%s, tax_number=%s)",
            role.name.lower(),
            bool(vat_identification_number),
            bool(tax_number),
        )
        return party

    @staticmethod
    def _add_party_tax_scheme(party: etree._Element, company_id: str, scheme: TaxSchemeId) -> etree._Element:
        party_tax_scheme = add_element(party, "cac:PartyTaxScheme")
        add_element(party_tax_scheme, "cbc:CompanyID", company_id)
        tax_scheme = add_element(party_tax_scheme, "cac:TaxScheme")
        add_element(tax_scheme, "cbc:ID", scheme.value)
        return party_tax_scheme

    # ------------------------------------------------------------------
    # Delivery & payment

    @_rolls_back
    def add_delivery(self, actual_delivery_date: date | str) -> etree._Element:
        value = _format_date(actual_delivery_date)
        if not isinstance(value, str) or not DELIVERY_DATE_PATTERN.fullmatch(value):
            logger.warning("Rejected delivery date: expected YYYY-MM-DD")
            raise FormatError("Invalid date format. Must be YYYY-MM-DD")

        delivery = add_element(self._root, "cac:Delivery")
        add_element(delivery, "cbc:ActualDeliveryDate", value)
        return delivery

    @_rolls_back
    def add_payment_means(
        self,
        payment_means_code: int | str,
        payment_id: str,
        account_name: str,
        iban: str,
        bic: str = "",
    ) -> etree._Element:
        """Add PaymentMeans with the payee's financial account.

        ``payment_means_code`` should be a :class:`PaymentMeansCode`; it is
        written as given. ``bic`` is accepted but not written to the document.
        """
        payment_means = add_element(self._root, "cac:PaymentMeans")
        add_element(payment_means, "cbc:PaymentMeansCode", _code_text(payment_means_code))
        add_element(payment_means, "cbc:PaymentID", payment_id)

        account = add_element(payment_means, "cac:PayeeFinancialAccount")
        add_element(account, "cbc:ID", iban)
        add_element(account, "cbc:Name", account_name)

        if bic:
            logger.debug("BIC supplied for payment means but not emitted")
        return payment_means

    # ------------------------------------------------------------------
    # Tax and totals

    @_rolls_back
    def add_tax_total(
        self,
        tax_amount: DecimalLike,
        taxable_amount: DecimalLike,
        tax_category_id: str,
        tax_percent: DecimalLike,
        tax_scheme_id: str,
    ) -> etree._Element:
        tax_total = add_element(self._root, "cac:TaxTotal")
        add_element(tax_total, "cbc:TaxAmount", format_amount(tax_amount), _MONEY)

        # The subtotal repeats the aggregate tax amount
        tax_subtotal = add_element(tax_total, "cac:TaxSubtotal")
        add_element(tax_subtotal, "cbc:TaxableAmount", format_amount(taxable_amount), _MONEY)
        add_element(tax_subtotal, "cbc:TaxAmount", format_amount(tax_amount), _MONEY)

        tax_category = add_element(tax_subtotal, "cac:TaxCategory")
        add_element(tax_category, "cbc:ID", tax_category_id)
        add_element(tax_category, "cbc:Percent", format_amount(tax_percent))

        tax_scheme = add_element(tax_category, "cac:TaxScheme")
        add_element(tax_scheme, "cbc:ID", tax_scheme_id)
        return tax_total

    @_rolls_back
    def add_legal_monetary_total(
        self,
        line_total_net_amount: DecimalLike,
        line_total_gross_amount: DecimalLike,
        prepaid_amount: DecimalLike = 0,
    ) -> etree._Element:
        monetary_total = add_element(self._root, "cac:LegalMonetaryTotal")
        add_element(monetary_total, "cbc:LineExtensionAmount", format_amount(line_total_net_amount), _MONEY)
        add_element(monetary_total, "cbc:TaxExclusiveAmount", format_amount(line_total_net_amount), _MONEY)
        add_element(monetary_total, "cbc:TaxInclusiveAmount", format_amount(line_total_gross_amount), _MONEY)
        add_element(monetary_total, "cbc:PrepaidAmount", format_amount(prepaid_amount), _MONEY)
        add_element(monetary_total, "cbc:PayableAmount", format_amount(line_total_gross_amount), _MONEY)
        return monetary_total

    # ------------------------------------------------------------------
    # Lines

    @_rolls_back
    def add_invoice_line(
        self,
        line_id: int | str,
        invoiced_quantity: DecimalLike,
        line_net_amount: DecimalLike,
        item_description: str,
        item_name: str,
        item_id: str,
        tax_category_id: str,
        tax_percent: DecimalLike,
        tax_scheme_id: str,
        price_amount: DecimalLike,
        base_quantity: DecimalLike,
    ) -> etree._Element:
        """Add one InvoiceLine; line ids are not checked for uniqueness."""
        invoice_line = add_element(self._root, "cac:InvoiceLine")
        add_element(invoice_line, "cbc:ID", _code_text(line_id))
        add_element(invoice_line, "cbc:InvoicedQuantity", format_quantity(invoiced_quantity), _UNIT)
        add_element(invoice_line, "cbc:LineExtensionAmount", format_amount(line_net_amount), _MONEY)

        item = add_element(invoice_line, "cac:Item")
        add_element(item, "cbc:Description", item_description)
        add_element(item, "cbc:Name", item_name)

        sellers_item_identification = add_element(item, "cac:SellersItemIdentification")
        add_element(sellers_item_identification, "cbc:ID", item_id)

        classified_tax_category = add_element(item, "cac:ClassifiedTaxCategory")
        add_element(classified_tax_category, "cbc:ID", tax_category_id)
        add_element(classified_tax_category, "cbc:Percent", format_amount(tax_percent))

        tax_scheme = add_element(classified_tax_category, "cac:TaxScheme")
        add_element(tax_scheme, "cbc:ID", tax_scheme_id)

        price = add_element(invoice_line, "cac:Price")
        add_element(price, "cbc:PriceAmount", format_amount(price_amount), _MONEY)
        add_element(price, "cbc:BaseQuantity", format_quantity(base_quantity), _UNIT)
        return invoice_line

    # ------------------------------------------------------------------
    # Output

    def remove_empty_elements(self) -> None:
        self._ensure_mutable()
        prune_empty_elements(self._root)

    def create_xml_document(self, remove_empty_nodes: Optional[bool] = None) -> str:
        """
        Serialize the document, removing empty elements first by default.

        Args:
            remove_empty_nodes: ``False`` keeps blank elements; ``None`` uses
                ``Settings.remove_empty_nodes``.

        Returns:
            XML string with an UTF-8 declaration
        """
        if remove_empty_nodes is None:
            remove_empty_nodes = self._settings.remove_empty_nodes

        if remove_empty_nodes:
            prune_empty_elements(self._root)

        self._serialized = True
        xml = serialize(self._root, pretty_print=self._settings.pretty_print)
        logger.debug("Serialized invoice document (%d bytes)", len(xml.encode("utf-8")))
        return xml

    def _ensure_mutable(self) -> None:
        if self._serialized:
            raise BuilderStateError("Invoice document was already created; use a new builder")


__all__ = ["InvoiceBuilder", "DELIVERY_DATE_PATTERN"]
