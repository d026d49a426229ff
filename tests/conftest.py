"""Canonical test fixtures used across all engine tests.

Fixture: $100K loan at 6% APR over 360 months.
Dated series: the classic five-flow XIRR example (Jan 2008 - Apr 2009, ~37.34%).
"""

import pytest
from datetime import date

from finmath.engine.amortization import AmortizationMath
from finmath.engine.cashflow import CashFlowSolver
from finmath.engine.context import PrecisionContext
from finmath.engine.decimal_ops import DecimalOps


@pytest.fixture
def general_context() -> PrecisionContext:
    return PrecisionContext(scale=10)


@pytest.fixture
def financial_context() -> PrecisionContext:
    return PrecisionContext(scale=14)


@pytest.fixture
def ops(general_context) -> DecimalOps:
    return DecimalOps(general_context)


@pytest.fixture
def amortization(financial_context) -> AmortizationMath:
    return AmortizationMath(financial_context)


@pytest.fixture
def solver(financial_context) -> CashFlowSolver:
    return CashFlowSolver(financial_context)


@pytest.fixture
def dated_flows() -> tuple[list[float], list[date]]:
    """Five flows whose XIRR is 0.373362535."""
    values = [-10000.0, 2750.0, 4250.0, 3250.0, 2750.0]
    dates = [
        date(2008, 1, 1),
        date(2008, 3, 1),
        date(2008, 10, 30),
        date(2009, 2, 15),
        date(2009, 4, 1),
    ]
    return values, dates
