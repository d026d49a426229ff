"""Fixed-scale decimal arithmetic.

Every operand is normalised to the context scale (10 fractional digits by
default) before use, results are truncated to that scale and, unless
round=False, rounded half away from zero to the display precision.

    add("2.71", "3.18")      -> Decimal("5.89")
    div("208.12", "16.69")   -> Decimal("12.47")
    div("1", "0")            -> None
"""

import logging
from decimal import Decimal, DivisionByZero, InvalidOperation

from finmath.config import settings
from finmath.engine import rounding
from finmath.engine.context import PrecisionContext, float_power

logger = logging.getLogger(__name__)


class DecimalOps:
    def __init__(
        self,
        context: PrecisionContext | None = None,
        display_precision: int = settings.display_precision,
    ):
        self.context = context or PrecisionContext.general()
        self.display_precision = display_precision

    def _finish(self, result: Decimal, round: bool) -> Decimal:
        if round:
            return rounding.round_half_away(result, self.display_precision)
        return result

    # ---- Arithmetic ----

    def add(self, op1, op2, round: bool = True) -> Decimal:
        ctx = self.context
        return self._finish(ctx.add(ctx.normalise(op1), ctx.normalise(op2)), round)

    def sub(self, op1, op2, round: bool = True) -> Decimal:
        ctx = self.context
        return self._finish(ctx.subtract(ctx.normalise(op1), ctx.normalise(op2)), round)

    def mul(self, op1, op2, round: bool = True) -> Decimal:
        ctx = self.context
        return self._finish(ctx.multiply(ctx.normalise(op1), ctx.normalise(op2)), round)

    def div(self, op1, op2, round: bool = True) -> Decimal | None:
        """Quotient, or None when the divisor is zero at the configured scale."""
        ctx = self.context
        try:
            quotient = ctx.divide(ctx.normalise(op1), ctx.normalise(op2))
        except (DivisionByZero, InvalidOperation):
            logger.debug("Undefined division %r / %r", op1, op2)
            return None
        return self._finish(quotient, round)

    def pow(self, left, right, round: bool = True) -> Decimal | None:
        """left ** right evaluated in floating point; None if not a finite real."""
        ctx = self.context
        result = float_power(float(ctx.normalise(left)), float(ctx.normalise(right)))
        if result is None:
            return None
        return self._finish(ctx.significant(result), round)

    def add_all(self, *values) -> Decimal:
        """Running sum from 0.00, rounded at every step like a till receipt."""
        total = Decimal("0.00")
        for value in values:
            total = self.add(total, value)
        return total

    # ---- Comparison ----

    def compare(self, left, right) -> int:
        a = self.context.normalise(left)
        b = self.context.normalise(right)
        return (a > b) - (a < b)

    def gt(self, left, right) -> bool:
        return self.compare(left, right) == 1

    def gte(self, left, right) -> bool:
        return self.compare(left, right) >= 0

    def lt(self, left, right) -> bool:
        return self.compare(left, right) == -1

    def lte(self, left, right) -> bool:
        return self.compare(left, right) <= 0

    def eq(self, left, right) -> bool:
        return self.compare(left, right) == 0

    def is_zero(self, value) -> bool:
        # Float cast: magnitudes below float resolution count as zero.
        return float(value) == 0.0

    def is_null_or_zero(self, value) -> bool:
        return value is None or self.is_zero(value)

    # ---- Rounding / display ----

    def abs(self, value) -> Decimal:
        return self.context.normalise(value).copy_abs()

    def truncate(self, value, precision: int) -> Decimal:
        return rounding.truncate(value, precision)

    def round(self, value, precision: int = 2) -> Decimal:
        return rounding.round_half_away(value, precision)

    def format(self, value, precision: int = 2) -> str:
        return rounding.format_fixed(value, precision)

    def floor(self, value) -> Decimal:
        return rounding.floor(value)

    def round_down(self, value, precision: int = 2) -> Decimal:
        return rounding.round_down(value, precision)


default_ops = DecimalOps()

add = default_ops.add
sub = default_ops.sub
mul = default_ops.mul
div = default_ops.div
pow = default_ops.pow
add_all = default_ops.add_all
compare = default_ops.compare
gt = default_ops.gt
gte = default_ops.gte
lt = default_ops.lt
lte = default_ops.lte
eq = default_ops.eq
is_zero = default_ops.is_zero
is_null_or_zero = default_ops.is_null_or_zero
abs_value = default_ops.abs
truncate = default_ops.truncate
round_value = default_ops.round
format_value = default_ops.format
floor = default_ops.floor
round_down = default_ops.round_down
