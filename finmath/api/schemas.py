"""Pydantic schemas for API request/response models."""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field

# NaN and +/-Infinity are rejected at validation time (422)
FiniteFloat = Annotated[float, Field(allow_inf_nan=False)]


# ---- Request schemas ----

class PaymentRequest(BaseModel):
    rate: FiniteFloat = Field(..., description="Interest rate per period, e.g. 0.07 / 12")
    nper: int = Field(..., ge=0, description="Total number of periods")
    pv: Decimal = Field(..., description="Present value (loan amount)")
    fv: FiniteFloat = 0.0
    type: int = Field(0, ge=0, le=1, description="0 = end of period, 1 = start of period")


class PeriodPaymentRequest(PaymentRequest):
    per: int = Field(..., description="Payment period, 1-based")


class NPVRequest(BaseModel):
    rate: FiniteFloat
    values: list[FiniteFloat] = Field(..., min_length=1)


class IRRRequest(BaseModel):
    values: list[FiniteFloat] = Field(..., min_length=1)
    guess: FiniteFloat = 0.1


class XIRRRequest(BaseModel):
    values: list[FiniteFloat] = Field(..., min_length=1)
    timestamps: list[int] = Field(..., min_length=1, description="Unix seconds, one per value")
    guess: FiniteFloat = 0.1


# ---- Response schemas ----

class AmountResponse(BaseModel):
    value: str | None  # Fixed-point text, null when there is no result
    status: str


class NPVResponse(BaseModel):
    value: float | None
    status: str


class RateResponse(BaseModel):
    value: float | None
    status: str
    iterations: int = 0
