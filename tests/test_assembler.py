"""Unit tests for finalized invoice assembly."""

from datetime import datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from schemas.invoice import CustomerDetails, InvoiceHeader, LineItem, ValidationReason
from services.assembler import InvoiceNotValidError, assemble


@pytest.fixture
def draft():
    header = InvoiceHeader(invoice_number="INV-1")
    customer = CustomerDetails(name="Acme", email="a@acme.com")
    items = [
        LineItem(
            id=1,
            description="Widget",
            quantity=Decimal("2"),
            unit_price=Decimal("100"),
            tax_rate=Decimal("18"),
        )
    ]
    return header, customer, items


def test_assemble_formats_totals(draft) -> None:
    """Test that totals are stored with two decimals."""
    invoice = assemble(*draft)

    assert invoice.totals.subtotal == "200.00"
    assert invoice.totals.tax_total == "36.00"
    assert invoice.totals.grand_total == "236.00"


def test_assemble_stamps_creation_time(draft) -> None:
    """Test that the record carries a timezone-aware timestamp."""
    invoice = assemble(*draft)

    assert isinstance(invoice.created_at, datetime)
    assert invoice.created_at.tzinfo is not None
    assert "T" in invoice.model_dump(mode="json")["created_at"]


def test_assembled_invoice_is_decoupled_from_draft(draft) -> None:
    """Test that later edits to the draft do not reach the record."""
    header, customer, items = draft
    invoice = assemble(header, customer, items)

    header.invoice_number = "CHANGED"
    customer.email = ""
    items[0].quantity = Decimal("99")
    items.append(LineItem(id=2))

    assert invoice.header.invoice_number == "INV-1"
    assert invoice.customer.email == "a@acme.com"
    assert invoice.items[0].quantity == Decimal("2")
    assert len(invoice.items) == 1


def test_assembled_invoice_is_frozen(draft) -> None:
    """Test that no part of the record can be reassigned or extended."""
    invoice = assemble(*draft)

    with pytest.raises(ValidationError):
        invoice.totals = None
    with pytest.raises(ValidationError):
        invoice.header.invoice_number = "CHANGED"
    with pytest.raises(ValidationError):
        invoice.customer.email = "other@acme.com"
    with pytest.raises(ValidationError):
        invoice.items[0].quantity = Decimal("99")
    with pytest.raises(ValidationError):
        invoice.totals.grand_total = "0.00"
    with pytest.raises(AttributeError):
        invoice.items.append(LineItem(id=2))

    assert invoice.header.invoice_number == "INV-1"
    assert invoice.customer.email == "a@acme.com"
    assert invoice.items[0].quantity == Decimal("2")
    assert len(invoice.items) == 1
    assert invoice.totals.grand_total == "236.00"


def test_assemble_rejects_invalid_draft(draft) -> None:
    """Test that assembly cannot bypass validation."""
    header, _, items = draft

    with pytest.raises(InvoiceNotValidError) as exc_info:
        assemble(header, CustomerDetails(name="Acme"), items)

    assert exc_info.value.reasons == [ValidationReason.missing_email]
    assert "missing email" in str(exc_info.value)
