"""Rounding and display rules shared by every engine.

Pure functions: Decimal in, Decimal (or display string) out.
Ties are always rounded half away from zero (decimal.ROUND_HALF_UP).
"""

from decimal import Context, Decimal, ROUND_DOWN, ROUND_HALF_UP

from finmath.config import settings

TWO_PLACES = 2


def _context() -> Context:
    return Context(prec=settings.working_digits)


def _as_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(str(value).strip())


def _check_precision(precision: int) -> None:
    if precision < 0:
        raise ValueError(f"precision must be non-negative, got {precision}")


def _unsigned_zero(value: Decimal) -> Decimal:
    return value.copy_abs() if value.is_zero() else value


def quantum(precision: int) -> Decimal:
    """Smallest step at `precision` fractional digits, e.g. 2 -> 0.01."""
    _check_precision(precision)
    return Decimal(1).scaleb(-precision)


def round_half_away(value, precision: int = TWO_PLACES) -> Decimal:
    """Round to `precision` places, ties away from zero. 208.125 -> 208.13, -0.005 -> -0.01."""
    rounded = _as_decimal(value).quantize(
        quantum(precision), rounding=ROUND_HALF_UP, context=_context()
    )
    return _unsigned_zero(rounded)


def truncate(value, precision: int) -> Decimal:
    """Drop digits beyond `precision` without rounding. 1.9999 -> 1.99.

    Never pads: a value already shorter than `precision` is returned as is.
    With precision 0 the integer part is returned.
    """
    _check_precision(precision)
    number = _as_decimal(value)
    if precision == 0:
        return _unsigned_zero(number.to_integral_value(rounding=ROUND_DOWN, context=_context()))
    if number.as_tuple().exponent >= -precision:
        return number
    return _unsigned_zero(
        number.quantize(quantum(precision), rounding=ROUND_DOWN, context=_context())
    )


def floor(value) -> Decimal:
    """Integer part of a value (rounds toward zero, so -2.7 -> -2)."""
    return truncate(value, 0)


def round_down(value, precision: int = TWO_PLACES) -> Decimal:
    """Round after shifting down by half a unit, so 2.03717 -> 2.03.

    Zero (as judged by a float cast) is rounded unchanged.
    """
    number = _as_decimal(value)
    if float(number) == 0.0:
        return round_half_away(number, precision)
    half = Decimal(5).scaleb(-(precision + 1))
    return round_half_away(number - half, precision)


def format_fixed(value, precision: int | None = None) -> str:
    """Fixed-point display string; never scientific notation.

    With a precision the value is rounded half away from zero first.
    """
    number = _as_decimal(value)
    if precision is not None:
        number = round_half_away(number, precision)
    return format(_unsigned_zero(number), "f")


def split_rounding(value, precision: int = TWO_PLACES) -> tuple[Decimal, Decimal]:
    """Truncated value and the remainder that truncation discarded.

    split_rounding("10.129") -> (Decimal("10.12"), Decimal("0.009"))
    """
    number = _as_decimal(value)
    rounded = truncate(number, precision)
    return rounded, number - rounded
