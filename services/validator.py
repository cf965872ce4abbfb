from typing import Iterable

from schemas.invoice import (
    CustomerDetails,
    InvoiceHeader,
    LineItem,
    ValidationReason,
    ValidationResult,
)


def is_line_item_complete(item: LineItem) -> bool:
    return bool(item.description) and item.quantity > 0 and item.unit_price > 0


def validate(
    header: InvoiceHeader, customer: CustomerDetails, items: Iterable[LineItem]
) -> ValidationResult:
    """
    Checks whether a draft invoice may be finalized.

    Every check runs; all failing reasons are returned in a fixed order
    (customer name, email, invoice number, line items). Line items are checked
    as a whole, so several incomplete rows still produce a single reason.
    Email format is not checked, only presence.
    """
    reasons = []

    if not customer.name:
        reasons.append(ValidationReason.missing_customer_name)
    if not customer.email:
        reasons.append(ValidationReason.missing_email)
    if not header.invoice_number:
        reasons.append(ValidationReason.missing_invoice_number)
    if not all(is_line_item_complete(item) for item in items):
        reasons.append(ValidationReason.incomplete_line_item)

    return ValidationResult(reasons=reasons)
