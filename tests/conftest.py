from __future__ import annotations

import pytest

from einvoice.core.config import Settings
from einvoice.xrechnung import InvoiceBuilder


SELLER_ARGS = dict(
    endpoint_id="billing@seller.example",
    scheme_id="EM",
    company_name="Seller GmbH",
    street="Sample Street 1",
    city="Berlin",
    postal_code="10115",
    country_code="DE",
    tax_number="",
    vat_identification_number="",
    contact_name="Erika Mustermann",
    telephone="+49 30 1234567",
    email="erika@seller.example",
)


@pytest.fixture
def settings() -> Settings:
    return Settings(remove_empty_nodes=True, pretty_print=True)


@pytest.fixture
def builder(settings: Settings) -> InvoiceBuilder:
    return InvoiceBuilder(380, settings=settings)


@pytest.fixture
def seller_args() -> dict:
    return dict(SELLER_ARGS)
