"""Calculation routes: payments, NPV and rate-of-return solvers."""

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException

from finmath.api.schemas import (
    AmountResponse,
    IRRRequest,
    NPVRequest,
    NPVResponse,
    PaymentRequest,
    PeriodPaymentRequest,
    RateResponse,
    XIRRRequest,
)
from finmath.api.deps import get_amortization, get_solver
from finmath.engine.amortization import AmortizationMath
from finmath.engine.cashflow import CashFlowSolver
from finmath.engine.rounding import format_fixed
from finmath.models.results import SolverResult

router = APIRouter(prefix="/api/v1/calc", tags=["calculations"])

OK = "ok"
NOT_APPLICABLE = "not_applicable"
UNDEFINED = "undefined"


def _amount(value: Decimal | None, failure: str = UNDEFINED) -> AmountResponse:
    if value is None:
        return AmountResponse(value=None, status=failure)
    return AmountResponse(value=format_fixed(value), status=OK)


def _rate(result: SolverResult) -> RateResponse:
    return RateResponse(value=result.rate, status=result.status.value, iterations=result.iterations)


def _period_failure(req: PeriodPaymentRequest) -> str:
    return NOT_APPLICABLE if req.per < 1 or req.per > req.nper else UNDEFINED


@router.post("/pmt", response_model=AmountResponse)
async def payment(
    req: PaymentRequest,
    amortization: AmortizationMath = Depends(get_amortization),
):
    """Constant payment per period (spreadsheet PMT)."""
    try:
        value = amortization.pmt(req.rate, req.nper, req.pv, req.fv, req.type)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _amount(value)


@router.post("/ipmt", response_model=AmountResponse)
async def interest_payment(
    req: PeriodPaymentRequest,
    amortization: AmortizationMath = Depends(get_amortization),
):
    """Interest portion of the payment for one period."""
    try:
        value = amortization.ipmt(req.rate, req.per, req.nper, req.pv, req.fv, req.type)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _amount(value, _period_failure(req))


@router.post("/ppmt", response_model=AmountResponse)
async def principal_payment(
    req: PeriodPaymentRequest,
    amortization: AmortizationMath = Depends(get_amortization),
):
    """Principal portion of the payment for one period."""
    try:
        value = amortization.ppmt(req.rate, req.per, req.nper, req.pv, req.fv, req.type)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _amount(value, _period_failure(req))


@router.post("/npv", response_model=NPVResponse)
async def net_present_value(
    req: NPVRequest,
    solver: CashFlowSolver = Depends(get_solver),
):
    """Net present value, first flow discounted one period."""
    value = solver.npv(req.rate, req.values)
    return NPVResponse(value=value, status=OK if value is not None else UNDEFINED)


@router.post("/irr", response_model=RateResponse)
async def internal_rate_of_return(
    req: IRRRequest,
    solver: CashFlowSolver = Depends(get_solver),
):
    return _rate(solver.solve_irr(req.values, req.guess))


@router.post("/xirr", response_model=RateResponse)
async def dated_internal_rate_of_return(
    req: XIRRRequest,
    solver: CashFlowSolver = Depends(get_solver),
):
    """IRR for irregularly dated cash flows. Mismatched lengths report input_mismatch."""
    return _rate(solver.solve_xirr(req.values, req.timestamps, req.guess))
