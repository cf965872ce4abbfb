import logging
from datetime import datetime, timezone
from typing import Iterable

from schemas.invoice import (
    CustomerDetails,
    FinalizedCustomer,
    FinalizedHeader,
    FinalizedInvoice,
    FinalizedLineItem,
    InvoiceHeader,
    LineItem,
)
from services.calculator import calculate_totals, format_totals
from services.validator import validate

logger = logging.getLogger(__name__)


class InvoiceNotValidError(ValueError):
    """Raised when assembly is attempted on a draft that fails validation."""

    def __init__(self, reasons):
        self.reasons = list(reasons)
        super().__init__(
            "Cannot finalize invoice: " + ", ".join(reason.value for reason in self.reasons)
        )


def assemble(
    header: InvoiceHeader, customer: CustomerDetails, items: Iterable[LineItem]
) -> FinalizedInvoice:
    """
    Builds the immutable, finalized invoice record.

    Header, customer and line items are copied into frozen models, so later
    edits to the draft cannot reach the produced record and the record
    itself cannot be edited. Totals are stored as 2-decimal
    strings and the record is stamped with the current UTC time.

    Raises:
        InvoiceNotValidError: If the draft does not pass validation.
    """
    items = list(items)
    result = validate(header, customer, items)
    if not result.is_valid:
        raise InvoiceNotValidError(result.reasons)

    invoice = FinalizedInvoice(
        header=FinalizedHeader(**header.model_dump()),
        customer=FinalizedCustomer(**customer.model_dump()),
        items=tuple(FinalizedLineItem(**item.model_dump()) for item in items),
        totals=format_totals(calculate_totals(items)),
        created_at=datetime.now(timezone.utc),
    )
    logger.info(
        "Assembled invoice %s with %d line(s), grand total %s",
        invoice.header.invoice_number,
        len(invoice.items),
        invoice.totals.grand_total,
    )
    return invoice
