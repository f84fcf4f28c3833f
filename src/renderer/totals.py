"""
Totals Computation Module.

Line totals and the grand total are derived from the items on every
render. A total supplied with the invoice is never read here.

Arithmetic runs in a local decimal context sized to the operands, so
amounts of any magnitude stay exact instead of being rounded to the
default 28 significant digits.

Author: ML Engineering Team
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Iterable, Sequence, Tuple

from src.invoice_model import LineItem

# Never run with less precision than the default context
MIN_PRECISION = 28


def _integer_digits(value: Decimal) -> int:
    return max(value.adjusted(), 0) + 1


def _fraction_digits(value: Decimal) -> int:
    return max(-value.as_tuple().exponent, 0)


def line_total(item: LineItem) -> Decimal:
    """Unit price times quantity, exact."""
    price, qty = item.price, item.qty
    with localcontext() as ctx:
        ctx.prec = max(
            MIN_PRECISION,
            _integer_digits(price) + _fraction_digits(price)
            + _integer_digits(qty) + _fraction_digits(qty)
        )
        return price * qty


def _exact_sum(amounts: Sequence[Decimal]) -> Decimal:
    if not amounts:
        return Decimal(0)
    with localcontext() as ctx:
        ctx.prec = max(
            MIN_PRECISION,
            max(_integer_digits(a) for a in amounts)
            + max(_fraction_digits(a) for a in amounts)
            + len(str(len(amounts)))
        )
        return sum(amounts, Decimal(0))


def grand_total(items: Iterable[LineItem]) -> Decimal:
    """Sum of all line totals; ``Decimal(0)`` for no items."""
    return _exact_sum([line_total(item) for item in items])


def format_currency(amount: Decimal, prefix: str = "Rs.", decimals: int = 2) -> str:
    """
    Render an amount with a fixed prefix and fraction digits.

    No thousands separator. Negative amounts keep their sign after the
    prefix; negative zero is shown as zero.

    Example:
        >>> format_currency(Decimal("1234.5"))
        'Rs.1234.50'
        >>> format_currency(Decimal("-5"))
        'Rs.-5.00'
    """
    amount = Decimal(amount)
    quantum = Decimal(1).scaleb(-decimals)
    with localcontext() as ctx:
        ctx.prec = max(MIN_PRECISION, _integer_digits(amount) + decimals + 1)
        rounded = amount.quantize(quantum, rounding=ROUND_HALF_UP)
    if rounded.is_zero():
        rounded = abs(rounded)
    return f"{prefix}{rounded:f}"


def format_quantity(qty: Decimal) -> str:
    """
    Render a quantity as entered: integers without a fraction,
    other values as plain decimals.

    Example:
        >>> format_quantity(Decimal("3.0"))
        '3'
        >>> format_quantity(Decimal("2.50"))
        '2.5'
    """
    if qty == qty.to_integral_value():
        return str(int(qty))
    with localcontext() as ctx:
        ctx.prec = max(MIN_PRECISION, _integer_digits(qty) + _fraction_digits(qty))
        return format(qty.normalize(), "f")


@dataclass(frozen=True)
class InvoiceTotals:
    """
    Derived amounts for one render.

    Attributes:
        line_totals: One total per item, in item order
        grand_total: Sum of line_totals
    """
    line_totals: Tuple[Decimal, ...]
    grand_total: Decimal


def compute_totals(items: Iterable[LineItem]) -> InvoiceTotals:
    """Compute all line totals and the grand total in one pass."""
    line_totals = tuple(line_total(item) for item in items)
    return InvoiceTotals(line_totals=line_totals, grand_total=_exact_sum(line_totals))
