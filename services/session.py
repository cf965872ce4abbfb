import logging
from datetime import date
from typing import Optional

from schemas.invoice import (
    CustomerDetails,
    CustomerField,
    DraftState,
    FinalizedInvoice,
    HeaderField,
    InvoiceHeader,
    LineField,
    LineView,
    SubmitResult,
)
from services.assembler import assemble
from services.calculator import calculate_totals, format_amount, format_totals, line_amount, line_tax
from services.line_items import LineItemStore
from services.validator import validate

logger = logging.getLogger(__name__)


def _parse_date(value) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip())


class InvoiceSession:
    """
    A single editor's draft invoice and the commands that change it.

    Every command runs to completion before returning, and the presentation
    layer re-reads :meth:`snapshot` after each one. Nothing here raises on
    user input: bad numbers are zeroed, unknown fields are ignored and failed
    submissions come back as reasons.
    """

    def __init__(self):
        self.last_invoice: Optional[FinalizedInvoice] = None
        self.reset()

    def reset(self) -> None:
        """Back to a blank draft. The last finalized invoice is kept."""
        self.header = InvoiceHeader()
        self.customer = CustomerDetails()
        self.store = LineItemStore()
        logger.debug("Invoice draft reset")

    # --- Line items ---

    def add_line(self):
        return self.store.add_line()

    def update_field(self, line_id: int, field: LineField, raw_value) -> None:
        self.store.update_field(line_id, field, raw_value)

    def remove_line(self, line_id: int) -> None:
        self.store.remove_line(line_id)

    # --- Header & customer ---

    def set_header_field(self, name: HeaderField, value) -> None:
        if name == "invoice_number":
            self.header.invoice_number = "" if value is None else str(value)
            return

        if name not in ("invoice_date", "due_date"):
            logger.warning("Ignoring unknown header field %r", name)
            return

        if name == "due_date" and value in (None, ""):
            self.header.due_date = None
            return

        try:
            setattr(self.header, name, _parse_date(value))
        except ValueError:
            logger.warning("Ignoring unparseable %s %r", name, value)

    def set_customer_field(self, name: CustomerField, value) -> None:
        if name not in CustomerDetails.model_fields:
            logger.warning("Ignoring unknown customer field %r", name)
            return
        setattr(self.customer, name, "" if value is None else str(value))

    # --- Reads ---

    def snapshot(self) -> DraftState:
        items = self.store.items
        return DraftState(
            header=self.header.model_copy(deep=True),
            customer=self.customer.model_copy(deep=True),
            lines=[
                LineView(
                    item=item.model_copy(deep=True),
                    line_amount=format_amount(line_amount(item)),
                    line_tax=format_amount(line_tax(item)),
                )
                for item in items
            ],
            totals=format_totals(calculate_totals(items)),
        )

    # --- Submission ---

    def submit(self) -> SubmitResult:
        items = self.store.items
        result = validate(self.header, self.customer, items)
        if not result.is_valid:
            logger.info(
                "Invoice submission rejected: %s",
                ", ".join(reason.value for reason in result.reasons),
            )
            return SubmitResult(success=False, reasons=result.reasons)

        invoice = assemble(self.header, self.customer, items)
        self.last_invoice = invoice
        return SubmitResult(success=True, invoice=invoice)
