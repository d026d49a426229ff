"""Percentage, VAT and simple statistics helpers built on DecimalOps.

    percent("19.99", "21.00")                 -> Decimal("4.20")
    add_percent("19.99", "21.00")             -> Decimal("24.19")
    before_percent_addition("24.19", "21.00") -> Decimal("19.99")
"""

from collections.abc import Sequence
from decimal import Decimal

from finmath.engine.decimal_ops import DecimalOps, default_ops

HUNDRED = Decimal("100")


def percent(amount, percentage, round: bool = True, ops: DecimalOps = default_ops) -> Decimal:
    """`percentage` percent of `amount`."""
    share = ops.div(percentage, HUNDRED, round=False)
    return ops.mul(amount, share, round=round)


def add_percent(amount, percentage, round: bool = True, ops: DecimalOps = default_ops) -> Decimal:
    """Amount increased by `percentage` percent (the increment is rounded first)."""
    return ops.add(amount, percent(amount, percentage, ops=ops), round=round)


def before_percent_addition(
    result, percentage, round: bool = True, ops: DecimalOps = default_ops
) -> Decimal | None:
    """Invert add_percent: the amount that grew into `result`.

    None when percentage is -100 (nothing could have grown into result).
    """
    base = ops.div(result, ops.add(percentage, HUNDRED, round=False), round=False)
    if base is None:
        return None
    return ops.mul(base, HUNDRED, round=round)


def add_vat(value, percentage, ops: DecimalOps = default_ops) -> Decimal:
    return add_percent(value, percentage, ops=ops)


def remove_vat(total, percentage, ops: DecimalOps = default_ops) -> Decimal | None:
    return before_percent_addition(total, percentage, ops=ops)


def vat_amount(total, percentage, ops: DecimalOps = default_ops) -> Decimal | None:
    """VAT contained in a gross `total`."""
    net = before_percent_addition(total, percentage, round=False, ops=ops)
    if net is None:
        return None
    return percent(net, percentage, ops=ops)


def percentage_between(total, partial, ops: DecimalOps = default_ops) -> Decimal | None:
    """What percent `partial` is of `total`, to two places. Zero partial -> 0."""
    if ops.is_zero(partial):
        return Decimal("0")
    ratio = ops.div(partial, total, round=False)
    if ratio is None:
        return None
    return ops.mul(ratio, HUNDRED)


def median(values: Sequence, round: bool = True, ops: DecimalOps = default_ops) -> Decimal | None:
    """Middle value (mean of the two middle values for even counts). None if empty."""
    if not values:
        return None
    ordered = sorted(ops.context.normalise(v) for v in values)
    middle = (len(ordered) - 1) // 2
    if len(ordered) % 2:
        result = ordered[middle]
    else:
        pair_sum = ops.add(ordered[middle], ordered[middle + 1], round=False)
        result = ops.div(pair_sum, 2, round=False)
    return ops.round(result) if round else result


def average(values: Sequence, round: bool = True, ops: DecimalOps = default_ops) -> Decimal | None:
    """Arithmetic mean. None if empty."""
    if not values:
        return None
    total = Decimal("0")
    for value in values:
        total = ops.add(total, value, round=False)
    return ops.div(total, len(values), round=round)
