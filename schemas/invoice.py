from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

# --- Tax Rates ---
# Flat GST slabs offered on every line item. Anything else is coerced to 0.
TAX_RATES = (Decimal("0"), Decimal("5"), Decimal("12"), Decimal("18"), Decimal("28"))
DEFAULT_TAX_RATE = Decimal("18")

# Quantities and prices at or above this are treated like unreadable input.
MAX_MAGNITUDE = Decimal("1e15")


# --- Draft Models (mutable, owned by the editing session) ---


class LineItem(BaseModel):
    id: int
    description: str = ""
    quantity: Decimal = Decimal("1")
    unit_price: Decimal = Decimal("0")
    tax_rate: Decimal = DEFAULT_TAX_RATE


class InvoiceHeader(BaseModel):
    invoice_number: str = ""
    invoice_date: date = Field(default_factory=date.today)
    due_date: Optional[date] = None


class CustomerDetails(BaseModel):
    # Required for finalization
    name: str = ""
    email: str = ""

    # Optional
    phone: str = ""
    tax_id: str = ""
    address: str = ""
    city: str = ""
    region: str = ""
    postal_code: str = ""


LineField = Literal["description", "quantity", "unit_price", "tax_rate"]
HeaderField = Literal["invoice_number", "invoice_date", "due_date"]
CustomerField = Literal[
    "name", "email", "phone", "tax_id", "address", "city", "region", "postal_code"
]


# --- Derived Values ---


class Totals(BaseModel):
    """Unrounded invoice totals, straight from the line items."""

    subtotal: Decimal
    tax_total: Decimal
    grand_total: Decimal


class FormattedTotals(BaseModel):
    """Totals as presented: always exactly two decimal places."""

    model_config = ConfigDict(frozen=True)

    subtotal: str
    tax_total: str
    grand_total: str


class LineView(BaseModel):
    item: LineItem
    line_amount: str
    line_tax: str


class DraftState(BaseModel):
    """Everything the presentation layer needs to redraw the form."""

    header: InvoiceHeader
    customer: CustomerDetails
    lines: List[LineView]
    totals: FormattedTotals


# --- Validation ---


class ValidationReason(str, Enum):
    missing_customer_name = "missing customer name"
    missing_email = "missing email"
    missing_invoice_number = "missing invoice number"
    incomplete_line_item = "incomplete line item"


class ValidationResult(BaseModel):
    reasons: List[ValidationReason] = []

    @property
    def is_valid(self) -> bool:
        return not self.reasons


# --- Finalized Record ---
# Frozen twins of the draft models, so no part of a finalized invoice can change.


class FinalizedLineItem(LineItem):
    model_config = ConfigDict(frozen=True)


class FinalizedHeader(InvoiceHeader):
    model_config = ConfigDict(frozen=True)


class FinalizedCustomer(CustomerDetails):
    model_config = ConfigDict(frozen=True)


class FinalizedInvoice(BaseModel):
    model_config = ConfigDict(frozen=True)

    header: FinalizedHeader
    customer: FinalizedCustomer
    items: Tuple[FinalizedLineItem, ...]
    totals: FormattedTotals
    created_at: datetime


class SubmitResult(BaseModel):
    success: bool
    invoice: Optional[FinalizedInvoice] = None
    reasons: List[ValidationReason] = []


# --- Request Bodies ---
# Raw values come straight from form inputs, so numbers may arrive as text.


class LineFieldUpdate(BaseModel):
    field: LineField
    value: Union[str, float, int, None] = ""


class HeaderFieldUpdate(BaseModel):
    field: HeaderField
    value: Optional[str] = ""


class CustomerFieldUpdate(BaseModel):
    field: CustomerField
    value: str = ""
