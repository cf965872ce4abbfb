"""Unit tests for draft invoice validation."""

from decimal import Decimal

import pytest

from schemas.invoice import (
    CustomerDetails,
    InvoiceHeader,
    LineItem,
    ValidationReason,
)
from services.validator import is_line_item_complete, validate


@pytest.fixture
def header() -> InvoiceHeader:
    return InvoiceHeader(invoice_number="INV-1")


@pytest.fixture
def customer() -> CustomerDetails:
    return CustomerDetails(name="Acme", email="a@acme.com")


@pytest.fixture
def widget() -> LineItem:
    return LineItem(
        id=1,
        description="Widget",
        quantity=Decimal("2"),
        unit_price=Decimal("100"),
        tax_rate=Decimal("18"),
    )


def test_complete_draft_is_valid(header, customer, widget) -> None:
    """Test the happy path."""
    result = validate(header, customer, [widget])

    assert result.is_valid
    assert result.reasons == []


def test_all_defaults_report_every_reason() -> None:
    """Test that every check runs and reasons keep their order."""
    result = validate(InvoiceHeader(), CustomerDetails(), [LineItem(id=1)])

    assert not result.is_valid
    assert result.reasons == [
        ValidationReason.missing_customer_name,
        ValidationReason.missing_email,
        ValidationReason.missing_invoice_number,
        ValidationReason.incomplete_line_item,
    ]


def test_missing_email_only(header, widget) -> None:
    """Test that only presence of the email matters."""
    result = validate(header, CustomerDetails(name="Acme"), [widget])

    assert result.reasons == [ValidationReason.missing_email]


def test_email_format_not_checked(header, widget) -> None:
    """Test that a malformed but present email passes."""
    result = validate(header, CustomerDetails(name="Acme", email="not-an-email"), [widget])

    assert result.is_valid


def test_several_incomplete_lines_reported_once(header, customer, widget) -> None:
    """Test that incomplete lines produce a single aggregate reason."""
    items = [widget, LineItem(id=2), LineItem(id=3, description="Bolt")]

    result = validate(header, customer, items)

    assert result.reasons == [ValidationReason.incomplete_line_item]


@pytest.mark.parametrize(
    "changes",
    [
        {"description": ""},
        {"quantity": Decimal("0")},
        {"quantity": Decimal("-1")},
        {"unit_price": Decimal("0")},
        {"unit_price": Decimal("-5")},
    ],
)
def test_incomplete_line_item(widget, changes) -> None:
    """Test each way a line item can be incomplete."""
    assert not is_line_item_complete(widget.model_copy(update=changes))


def test_reason_values_are_readable() -> None:
    """Test the human-readable reason codes."""
    assert ValidationReason.missing_email.value == "missing email"
    assert ValidationReason.incomplete_line_item.value == "incomplete line item"
