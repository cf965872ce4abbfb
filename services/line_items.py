import logging
import re
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from schemas.invoice import MAX_MAGNITUDE, TAX_RATES, LineField, LineItem

logger = logging.getLogger(__name__)

# Leading decimal literal, the same prefix a browser's parseFloat() would accept.
_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

ZERO = Decimal("0")


def parse_numeric_field(raw_value) -> Decimal:
    """
    Parses raw form input into a Decimal, never failing.

    Malformed input is silently corrected to 0 rather than rejected: "abc",
    "", None, NaN and infinities all become Decimal("0"). So do numbers
    of MAX_MAGNITUDE or more. Text with trailing garbage keeps its numeric
    prefix, so "12kg" parses as 12.

    Args:
        raw_value (str, int, float or Decimal): The value typed by the user.

    Returns:
        Decimal: A finite number.
    """
    if raw_value is None or isinstance(raw_value, bool):
        return ZERO

    if isinstance(raw_value, (int, float, Decimal)):
        text = str(raw_value)
    else:
        match = _LEADING_NUMBER.match(str(raw_value))
        if not match:
            return ZERO
        text = match.group(1)

    try:
        number = Decimal(text)
    except InvalidOperation:
        return ZERO

    if not number.is_finite():
        return ZERO
    if number.copy_abs() >= MAX_MAGNITUDE:
        logger.warning("Numeric input %s is out of range, using 0", number)
        return ZERO
    return number


class LineItemStore:
    """Ordered line items with stable ids and a floor of one item."""

    def __init__(self):
        self._items: List[LineItem] = []
        self.add_line()

    @property
    def items(self) -> List[LineItem]:
        return list(self._items)

    def __len__(self):
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def get(self, line_id: int) -> Optional[LineItem]:
        for item in self._items:
            if item.id == line_id:
                return item
        return None

    def add_line(self) -> LineItem:
        new_id = max([item.id for item in self._items] + [0]) + 1
        item = LineItem(id=new_id)
        self._items.append(item)
        logger.debug("Added line item %s", new_id)
        return item

    def update_field(self, line_id: int, field: LineField, raw_value) -> None:
        item = self.get(line_id)
        if item is None:
            logger.warning("Ignoring update of %s on unknown line item %s", field, line_id)
            return

        if field == "description":
            item.description = "" if raw_value is None else str(raw_value)
        elif field in ("quantity", "unit_price"):
            setattr(item, field, parse_numeric_field(raw_value))
        elif field == "tax_rate":
            rate = parse_numeric_field(raw_value)
            if rate not in TAX_RATES:
                logger.warning("Tax rate %s is not an offered slab, using 0", rate)
                rate = ZERO
            item.tax_rate = rate
        else:
            logger.warning("Ignoring update of unknown line field %r", field)

    def remove_line(self, line_id: int) -> None:
        if len(self._items) <= 1:
            logger.debug("Keeping line item %s, it is the last one", line_id)
            return
        self._items = [item for item in self._items if item.id != line_id]
