import decimal
from decimal import Decimal
from typing import Iterable

from schemas.invoice import FormattedTotals, LineItem, Totals

# Use the Decimal type for financial calculations to avoid floating-point inaccuracies.
# Sums stay unrounded; rounding happens only when a value is presented.
# Wide enough to quantize any total built from inputs below MAX_MAGNITUDE.
Context = decimal.Context(prec=64)

CENT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def line_amount(item: LineItem) -> Decimal:
    return Context.multiply(item.quantity, item.unit_price)


def line_tax(item: LineItem) -> Decimal:
    return Context.divide(Context.multiply(line_amount(item), item.tax_rate), HUNDRED)


def subtotal(items: Iterable[LineItem]) -> Decimal:
    total = ZERO
    for item in items:
        total = Context.add(total, line_amount(item))
    return total


def tax_total(items: Iterable[LineItem]) -> Decimal:
    total = ZERO
    for item in items:
        total = Context.add(total, line_tax(item))
    return total


def calculate_totals(items: Iterable[LineItem]) -> Totals:
    """Compute subtotal, tax and grand total."""
    items = list(items)
    sub = subtotal(items)
    tax = tax_total(items)
    return Totals(subtotal=sub, tax_total=tax, grand_total=Context.add(sub, tax))


def format_amount(amount: Decimal) -> str:
    """Round half up to the cent and render with exactly two decimals."""
    rounded = Context.create_decimal(amount).quantize(
        CENT, rounding=decimal.ROUND_HALF_UP, context=Context
    )
    if rounded.is_zero():
        # no "-0.00"
        rounded = rounded.copy_abs()
    return str(rounded)


def format_totals(totals: Totals) -> FormattedTotals:
    return FormattedTotals(
        subtotal=format_amount(totals.subtotal),
        tax_total=format_amount(totals.tax_total),
        grand_total=format_amount(totals.grand_total),
    )
