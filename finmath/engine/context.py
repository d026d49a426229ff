"""Precision context shared by the decimal, amortization and cash flow engines.

A PrecisionContext is built once at startup (normally from settings) and
handed to each component at construction. Arithmetic runs on a private
decimal.Context created per call, so the process-wide decimal context is
never read or modified.

Two conversions from float exist on purpose:
    fixed()        -- fixed-point text at `scale` fractional digits
    significant()  -- shortest text with `float_digits` significant digits
Power terms are the only place floats are produced (see float_power).
"""

import math
from dataclasses import dataclass
from decimal import Context, Decimal, InvalidOperation, ROUND_DOWN, ROUND_HALF_UP

from finmath.config import Settings, settings


def float_power(base: float, exponent: float) -> float | None:
    """base ** exponent in floating point, or None when the result is not a finite real."""
    try:
        result = base ** exponent
    except (OverflowError, ZeroDivisionError):
        return None
    if isinstance(result, complex) or not math.isfinite(result):
        return None
    return result


@dataclass(frozen=True)
class PrecisionContext:
    scale: int
    float_digits: int = 14
    working_digits: int = 400
    max_iterations: int = 100
    accuracy: float = 1e-6

    def __post_init__(self):
        if self.scale < 0:
            raise ValueError(f"scale must be non-negative, got {self.scale}")
        if self.float_digits < 1:
            raise ValueError(f"float_digits must be positive, got {self.float_digits}")
        if self.working_digits <= self.scale:
            raise ValueError("working_digits must exceed scale")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be positive, got {self.max_iterations}")
        if not self.accuracy > 0:
            raise ValueError(f"accuracy must be positive, got {self.accuracy}")

    @classmethod
    def general(cls, config: Settings = settings) -> "PrecisionContext":
        """Context for everyday decimal arithmetic (10 fractional digits by default)."""
        return cls(
            scale=config.decimal_scale,
            float_digits=config.float_digits,
            working_digits=config.working_digits,
            max_iterations=config.max_iterations,
            accuracy=config.accuracy,
        )

    @classmethod
    def financial(cls, config: Settings = settings) -> "PrecisionContext":
        """Context for amortization and cash flow formulas (14 fractional digits by default)."""
        return cls(
            scale=config.financial_scale,
            float_digits=config.float_digits,
            working_digits=config.working_digits,
            max_iterations=config.max_iterations,
            accuracy=config.accuracy,
        )

    @property
    def quantum(self) -> Decimal:
        return Decimal(1).scaleb(-self.scale)

    def arithmetic(self) -> Context:
        # Default traps stay on: DivisionByZero, InvalidOperation and Overflow raise.
        return Context(prec=self.working_digits, rounding=ROUND_DOWN)

    # ---- Conversions ----

    def normalise(self, value) -> Decimal:
        """Bring an operand to `scale` fractional digits.

        Floats go through fixed-point formatting, everything else is parsed
        exactly from its text form. Both are then rounded half away from zero
        to the scale, the way a fixed-format conversion does.
        """
        if isinstance(value, float):
            if not math.isfinite(value):
                raise ValueError(f"Cannot represent non-finite value {value!r} as a decimal")
            exact = Decimal(format(value, f".{self.scale}f"))
        else:
            exact = self.exact(value)
        return self._zero_sign(
            exact.quantize(self.quantum, rounding=ROUND_HALF_UP, context=self.arithmetic())
        )

    def exact(self, value) -> Decimal:
        """Parse a value without touching its digits (floats keep `float_digits` significant digits)."""
        if isinstance(value, Decimal):
            if not value.is_finite():
                raise ValueError(f"Cannot use non-finite decimal {value!r}")
            return value
        if isinstance(value, float):
            converted = self.significant(value)
            if converted is None:
                raise ValueError(f"Cannot represent non-finite value {value!r} as a decimal")
            return converted
        try:
            parsed = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Not a decimal number: {value!r}") from None
        if not parsed.is_finite():
            raise ValueError(f"Cannot use non-finite decimal {value!r}")
        return parsed

    def fixed(self, value: float) -> Decimal | None:
        """Fixed-point rendering of a float at `scale` digits; None if not finite."""
        if not math.isfinite(value):
            return None
        return self._zero_sign(Decimal(format(value, f".{self.scale}f")))

    def significant(self, value: float) -> Decimal | None:
        """Float rendered with `float_digits` significant digits; None if not finite."""
        if not math.isfinite(value):
            return None
        return self._zero_sign(Decimal(format(value, f".{self.float_digits}g")))

    # ---- Fixed-scale operations (results truncated to `scale`) ----

    def to_scale(self, value: Decimal) -> Decimal:
        return self._zero_sign(
            value.quantize(self.quantum, rounding=ROUND_DOWN, context=self.arithmetic())
        )

    def add(self, left: Decimal, right: Decimal) -> Decimal:
        return self.to_scale(self.arithmetic().add(left, right))

    def subtract(self, left: Decimal, right: Decimal) -> Decimal:
        return self.to_scale(self.arithmetic().subtract(left, right))

    def multiply(self, left: Decimal, right: Decimal) -> Decimal:
        return self.to_scale(self.arithmetic().multiply(left, right))

    def divide(self, left: Decimal, right: Decimal) -> Decimal:
        """Raises decimal.DivisionByZero / InvalidOperation when right is zero."""
        return self.to_scale(self.arithmetic().divide(left, right))

    @staticmethod
    def _zero_sign(value: Decimal) -> Decimal:
        # -0.00 and 0.00 must render and compare identically
        return value.copy_abs() if value.is_zero() else value
