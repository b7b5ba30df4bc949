# gifty/domain/pricing.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    if value is None:
        return ZERO
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def order_total(lines: Iterable[Tuple[Decimal, int]], box_price=None) -> Decimal:
    """Sum of unit price x quantity over all lines plus the box base price."""
    total = sum((to_money(price) * qty for price, qty in lines), ZERO)
    return to_money(total + to_money(box_price))
