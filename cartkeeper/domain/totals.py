# cartkeeper/domain/totals.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    # float -> str -> Decimal, zeby nie ciagnac bledow binarnych
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_total(lines: Iterable) -> Decimal:
    """Sum of quantity * unit_price over the given cart lines."""
    return to_money(sum((line.unit_price * line.quantity for line in lines), Decimal("0.00")))
