"""Loan and annuity formulas: PVIF, FVIFA, PMT, IPMT, PPMT.

Power terms are evaluated in floating point and immediately re-expressed
as fixed 14-digit decimals; every product and quotient after that is
decimal arithmetic truncated to the financial scale. Results that cannot
be produced (overflow, zero divisor, period outside the loan) are None.

Sign convention follows spreadsheet PMT: money received is positive,
money paid out is negative, so a loan (positive pv) has negative payments.
"""

import logging
import math
from decimal import Decimal, DivisionByZero, InvalidOperation

from finmath.engine.context import PrecisionContext, float_power
from finmath.engine.rounding import round_half_away

logger = logging.getLogger(__name__)

PAYMENT_AT_END = 0
PAYMENT_AT_START = 1


class AmortizationMath:
    def __init__(self, context: PrecisionContext | None = None):
        self.context = context or PrecisionContext.financial()

    def pvif(self, rate: float, nper: int) -> Decimal | None:
        """Present value interest factor: (1 + rate) ** nper."""
        growth = float_power(1 + float(rate), nper)
        if growth is None:
            return None
        return self.context.fixed(growth)

    def fvifa(self, rate: float, nper: int) -> Decimal | None:
        """Future value interest factor of an annuity: ((1 + rate) ** nper - 1) / rate.

        A zero rate, or one too small to move the growth term at the
        financial scale, yields nper exactly.
        """
        rate = float(rate)
        if rate == 0:
            return Decimal(nper)
        ctx = self.context
        growth = float_power(1 + rate, nper)
        if growth is None:
            return None
        accrued = ctx.fixed(growth - 1)
        if accrued.is_zero():
            return Decimal(nper)
        try:
            quotient = ctx.divide(accrued, ctx.significant(rate))
        except (DivisionByZero, InvalidOperation):
            return None
        return ctx.fixed(float(quotient))

    def pmt(self, rate: float, nper: int, pv, fv: float = 0.0, type: int = PAYMENT_AT_END) -> Decimal | None:
        """Constant periodic payment that amortizes pv down to fv over nper periods.

        PMT = (-pv * PVIF - fv) / ((1 + rate * type) * FVIFA)

        Args:
            rate: Interest rate per period (e.g. 0.07 / 12)
            nper: Number of periods
            pv: Present value (loan amount), taken as an exact decimal
            fv: Future value left after the last payment
            type: 0 = payments at period end, 1 = payments at period start
        """
        if type not in (PAYMENT_AT_END, PAYMENT_AT_START):
            raise ValueError(f"type must be 0 or 1, got {type}")
        rate = float(rate)
        ctx = self.context

        pvif = self.pvif(rate, nper)
        fvifa = self.fvifa(rate, nper)
        fv_amount = ctx.significant(float(fv))
        if pvif is None or fvifa is None or fv_amount is None:
            logger.debug("PMT power term overflowed (rate=%s, nper=%s)", rate, nper)
            return None

        try:
            pvif_part = ctx.subtract(ctx.multiply(ctx.exact(pv).copy_negate(), pvif), fv_amount)
            timing = ctx.add(Decimal(1), ctx.multiply(ctx.significant(rate), Decimal(type)))
            fvifa_part = ctx.multiply(timing, fvifa)
            return ctx.divide(pvif_part, fvifa_part)
        except (DivisionByZero, InvalidOperation):
            logger.debug("PMT undefined (rate=%s, nper=%s)", rate, nper)
            return None

    def _interest_part(self, pv: Decimal, payment: float, rate: float, period: int) -> float | None:
        """Negated pv * (1+rate)**period * rate + payment * ((1+rate)**period - 1)."""
        ctx = self.context
        growth = float_power(1 + rate, period)
        if growth is None:
            return None
        pow_part = ctx.fixed(growth)
        accrued = ctx.multiply(pv, ctx.multiply(pow_part, ctx.significant(rate)))
        paid = ctx.multiply(ctx.significant(payment), ctx.significant(float(pow_part) - 1))
        return -float(ctx.add(accrued, paid))

    def _split(self, rate, per: int, nper: int, pv, fv: float, type: int) -> tuple[float, float] | None:
        """(payment, interest) for period `per`, or None when not applicable."""
        if per < 1 or per > nper:
            logger.debug("Period %s outside 1..%s", per, nper)
            return None
        rate = float(rate)
        payment = self.pmt(rate, nper, pv, fv, type)
        if payment is None:
            return None
        try:
            interest = self._interest_part(self.context.exact(pv), float(payment), rate, per - 1)
        except InvalidOperation:
            return None
        if interest is None or not math.isfinite(interest):
            return None
        return float(payment), interest

    def ipmt(self, rate, per: int, nper: int, pv, fv: float = 0.0, type: int = PAYMENT_AT_END) -> Decimal | None:
        """Interest portion of the payment for period `per` (1-based).

        None when per is outside [1, nper] or the result is not finite.
        """
        split = self._split(rate, per, nper, pv, fv, type)
        if split is None:
            return None
        return self.context.significant(split[1])

    def ppmt(self, rate, per: int, nper: int, pv, fv: float = 0.0, type: int = PAYMENT_AT_END) -> Decimal | None:
        """Principal portion of the payment for period `per`: PMT - IPMT."""
        split = self._split(rate, per, nper, pv, fv, type)
        if split is None:
            return None
        payment, interest = split
        return self.context.significant(payment - interest)

    def apr_payment(self, apr, term_months: int, loan, precision: int = 2) -> Decimal | None:
        """Monthly payment for an annual percentage rate, as a positive amount.

        apr_payment(6, 360, 100000) -> Decimal("599.55")
        """
        payment = self.pmt(float(apr) / 1200, term_months, loan)
        if payment is None:
            return None
        return round_half_away(payment.copy_negate(), precision)


default_amortization = AmortizationMath()

pvif = default_amortization.pvif
fvifa = default_amortization.fvifa
pmt = default_amortization.pmt
ipmt = default_amortization.ipmt
ppmt = default_amortization.ppmt
apr_payment = default_amortization.apr_payment
