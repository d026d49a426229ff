"""NPV, IRR and XIRR.

IRR: bracket expansion from (0, guess) until NPV changes sign, then
bisection. XIRR: Newton's method on the dated NPV with a days/365
exponent. Both searches are bounded by max_iterations and report failure
through SolverResult instead of raising or guessing.

Pure functions. No I/O.
"""

import logging
import math
from collections.abc import Sequence
from datetime import date, datetime, timedelta, timezone
from decimal import DivisionByZero, InvalidOperation

from finmath.engine.context import PrecisionContext, float_power
from finmath.models.results import SolverResult, SolverStatus

logger = logging.getLogger(__name__)

DEFAULT_GUESS = 0.1
BRACKET_GROWTH = 1.6
DAYS_PER_YEAR = 365
SECONDS_PER_DAY = 86400
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _as_seconds(moment) -> int:
    """Unix seconds, date or datetime -> whole seconds since the epoch (UTC).

    Plain integers are used as given, whatever their magnitude.
    """
    if isinstance(moment, datetime):
        aware = moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)
        return (aware - EPOCH) // timedelta(seconds=1)
    if isinstance(moment, date):
        return (moment - EPOCH.date()).days * SECONDS_PER_DAY
    return int(moment)


class CashFlowSolver:
    def __init__(self, context: PrecisionContext | None = None):
        self.context = context or PrecisionContext.financial()

    # ---- Net present value ----

    def npv(self, rate: float, values: Sequence) -> float | None:
        """Net present value with the first flow discounted one full period.

        NPV = sum(values[i] / (1 + rate) ** (i + 1))

        None if a discount factor overflows or rounds to zero at the
        financial scale, if an amount is not a finite number, or if the total
        is not finite.
        """
        ctx = self.context
        total = 0.0
        for i, value in enumerate(values):
            factor = float_power(1 + rate, i + 1)
            if factor is None:
                return None
            try:
                amount = ctx.exact(value)
            except ValueError:
                logger.debug("NPV got a non-finite or unparsable amount %r", value)
                return None
            try:
                total += float(ctx.divide(amount, ctx.fixed(factor)))
            except (DivisionByZero, InvalidOperation):
                return None
        return total if math.isfinite(total) else None

    # ---- IRR ----

    def solve_irr(self, values: Sequence, guess: float = DEFAULT_GUESS) -> SolverResult:
        """Internal rate of return for evenly spaced cash flows."""
        limit = self.context.max_iterations
        accuracy = self.context.accuracy
        iterations = 0

        # Phase 1: widen (x1, x2) until NPV has opposite signs at the ends
        x1, x2 = 0.0, float(guess)
        f1, f2 = self.npv(x1, values), self.npv(x2, values)
        for _ in range(limit):
            if f1 is None or f2 is None or f1 * f2 < 0.0:
                break
            iterations += 1
            if abs(f1) < abs(f2):
                x1 += BRACKET_GROWTH * (x1 - x2)
                f1 = self.npv(x1, values)
            else:
                x2 += BRACKET_GROWTH * (x2 - x1)
                f2 = self.npv(x2, values)

        if f1 is None or f2 is None:
            logger.debug("IRR bracket search hit a non-finite NPV after %d steps", iterations)
            return SolverResult(SolverStatus.NON_FINITE, iterations=iterations)
        if not f1 * f2 < 0.0:
            logger.debug("IRR found no sign change after %d steps", iterations)
            return SolverResult(SolverStatus.NO_SIGN_CHANGE, iterations=iterations)

        # Phase 2: bisection, rtb always on the side where NPV <= 0
        if f1 < 0.0:
            rtb, dx = x1, x2 - x1
        else:
            rtb, dx = x2, x1 - x2

        for _ in range(limit):
            iterations += 1
            dx *= 0.5
            x_mid = rtb + dx
            f_mid = self.npv(x_mid, values)
            if f_mid is None:
                return SolverResult(SolverStatus.NON_FINITE, iterations=iterations)
            if f_mid <= 0.0:
                rtb = x_mid
            if abs(f_mid) < accuracy or abs(dx) < accuracy:
                return SolverResult(SolverStatus.CONVERGED, rate=x_mid, iterations=iterations)

        logger.info("IRR bisection did not converge in %d iterations", limit)
        return SolverResult(SolverStatus.NOT_CONVERGED, iterations=iterations)

    def irr(self, values: Sequence, guess: float = DEFAULT_GUESS) -> float | None:
        return self.solve_irr(values, guess).rate

    # ---- XIRR ----

    @staticmethod
    def _dated_npv(amounts: list[float], days: list[int], rate: float) -> float | None:
        base = rate + 1
        if not base > 0:
            return None
        result = amounts[0]
        for amount, day in zip(amounts[1:], days[1:]):
            factor = float_power(base, (day - days[0]) / DAYS_PER_YEAR)
            if not factor:
                return None
            result += amount / factor
        return result if math.isfinite(result) else None

    @staticmethod
    def _dated_npv_derivative(amounts: list[float], days: list[int], rate: float) -> float | None:
        base = rate + 1
        if not base > 0:
            return None
        result = 0.0
        for amount, day in zip(amounts[1:], days[1:]):
            years = (day - days[0]) / DAYS_PER_YEAR
            factor = float_power(base, years + 1)
            if not factor:
                return None
            result -= years * amount / factor
        return result if math.isfinite(result) else None

    def solve_xirr(
        self, values: Sequence, timestamps: Sequence, guess: float = DEFAULT_GUESS
    ) -> SolverResult:
        """Internal rate of return for cash flows on arbitrary dates.

        Args:
            values: Cash flow amounts (negative = outflow, positive = inflow)
            timestamps: Unix seconds, dates or datetimes, one per value, any order
            guess: Starting rate for Newton's method
        """
        if len(values) != len(timestamps):
            logger.debug("XIRR got %d values for %d timestamps", len(values), len(timestamps))
            return SolverResult(SolverStatus.INPUT_MISMATCH)

        moments = [_as_seconds(ts) for ts in timestamps]
        order = sorted(range(len(values)), key=lambda i: (moments[i], float(values[i])))
        amounts = [float(values[i]) for i in order]

        if not (any(a > 0 for a in amounts) and any(a < 0 for a in amounts)):
            return SolverResult(SolverStatus.NO_SIGN_CHANGE)

        first = moments[order[0]]
        days = [(moments[i] - first) // SECONDS_PER_DAY for i in order]

        accuracy = self.context.accuracy
        rate = float(guess)
        for iteration in range(1, self.context.max_iterations + 1):
            value = self._dated_npv(amounts, days, rate)
            slope = self._dated_npv_derivative(amounts, days, rate)
            if value is None or slope is None:
                logger.debug("XIRR left the real domain at rate=%s", rate)
                return SolverResult(SolverStatus.NON_FINITE, iterations=iteration)
            if slope == 0.0:
                logger.debug("XIRR derivative vanished at rate=%s", rate)
                return SolverResult(SolverStatus.DEGENERATE_DERIVATIVE, iterations=iteration)

            new_rate = rate - value / slope
            if not math.isfinite(new_rate):
                return SolverResult(SolverStatus.NON_FINITE, iterations=iteration)
            step = abs(new_rate - rate)
            rate = new_rate
            if step <= accuracy and abs(value) <= accuracy:
                return SolverResult(SolverStatus.CONVERGED, rate=rate, iterations=iteration)

        logger.info("XIRR did not converge in %d iterations", self.context.max_iterations)
        return SolverResult(SolverStatus.NOT_CONVERGED, iterations=self.context.max_iterations)

    def xirr(
        self, values: Sequence, timestamps: Sequence, guess: float = DEFAULT_GUESS
    ) -> float | None:
        return self.solve_xirr(values, timestamps, guess).rate


default_solver = CashFlowSolver()

npv = default_solver.npv
irr = default_solver.irr
xirr = default_solver.xirr
solve_irr = default_solver.solve_irr
solve_xirr = default_solver.solve_xirr
