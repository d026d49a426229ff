"""FastAPI dependency injection."""

from finmath.engine.amortization import AmortizationMath, default_amortization
from finmath.engine.cashflow import CashFlowSolver, default_solver


def get_amortization() -> AmortizationMath:
    return default_amortization


def get_solver() -> CashFlowSolver:
    return default_solver
