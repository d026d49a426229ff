from decimal import Decimal, DivisionByZero, InvalidOperation

import pytest

from finmath.config import Settings
from finmath.engine.context import PrecisionContext, float_power


class TestFloatPower:
    def test_finite(self):
        assert float_power(1.1, 2) == pytest.approx(1.21)

    def test_overflow_is_none(self):
        assert float_power(10.0, 400) is None

    def test_zero_to_negative_power_is_none(self):
        assert float_power(0.0, -1) is None

    def test_complex_result_is_none(self):
        assert float_power(-8.0, 0.5) is None


class TestValidation:
    def test_negative_scale(self):
        with pytest.raises(ValueError, match="scale"):
            PrecisionContext(scale=-1)

    def test_working_digits_must_exceed_scale(self):
        with pytest.raises(ValueError, match="working_digits"):
            PrecisionContext(scale=20, working_digits=20)

    def test_non_positive_accuracy(self):
        with pytest.raises(ValueError, match="accuracy"):
            PrecisionContext(scale=10, accuracy=0)

    def test_max_iterations(self):
        with pytest.raises(ValueError, match="max_iterations"):
            PrecisionContext(scale=10, max_iterations=0)


class TestFromSettings:
    def test_defaults(self):
        assert PrecisionContext.general().scale == 10
        assert PrecisionContext.financial().scale == 14

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("FINMATH_DECIMAL_SCALE", "4")
        monkeypatch.setenv("FINMATH_MAX_ITERATIONS", "50")
        config = Settings()
        ctx = PrecisionContext.general(config)
        assert ctx.scale == 4
        assert ctx.max_iterations == 50


class TestConversions:
    def test_normalise_rounds_half_away(self):
        ctx = PrecisionContext(scale=2)
        assert ctx.normalise("0.125") == Decimal("0.13")
        assert ctx.normalise("-0.125") == Decimal("-0.13")

    def test_normalise_pads_to_scale(self):
        assert str(PrecisionContext(scale=4).normalise("1.5")) == "1.5000"

    def test_normalise_negative_zero(self):
        assert str(PrecisionContext(scale=2).normalise("-0.001")) == "0.00"

    def test_exact_keeps_digits(self, financial_context):
        assert str(financial_context.exact("123.456789")) == "123.456789"
        assert str(financial_context.exact(" 12 ")) == "12"

    def test_exact_rejects_garbage(self, financial_context):
        with pytest.raises(ValueError, match="Not a decimal"):
            financial_context.exact("12abc")

    def test_exact_rejects_infinity(self, financial_context):
        with pytest.raises(ValueError, match="non-finite"):
            financial_context.exact("Infinity")

    def test_fixed(self, financial_context):
        assert format(financial_context.fixed(1.1), "f") == "1.10000000000000"
        assert format(financial_context.fixed(-0.0), "f") == "0.00000000000000"
        assert financial_context.fixed(float("inf")) is None

    def test_significant(self, financial_context):
        assert financial_context.significant(0.1 + 0.2) == Decimal("0.3")
        assert financial_context.significant(1e20) == Decimal("1E+20")
        assert financial_context.significant(float("nan")) is None


class TestArithmetic:
    def test_results_truncate(self, general_context):
        third = general_context.divide(Decimal(2), Decimal(3))
        assert str(third) == "0.6666666666"

    def test_negative_results_truncate_toward_zero(self, general_context):
        assert str(general_context.divide(Decimal(-2), Decimal(3))) == "-0.6666666666"

    def test_divide_by_zero_raises(self, general_context):
        with pytest.raises(DivisionByZero):
            general_context.divide(Decimal(1), Decimal(0))
        with pytest.raises(InvalidOperation):
            general_context.divide(Decimal(0), Decimal(0))

    def test_quantum(self):
        assert PrecisionContext(scale=3).quantum == Decimal("0.001")
