from dataclasses import dataclass
from enum import Enum


class SolverStatus(Enum):
    CONVERGED = "converged"
    NOT_CONVERGED = "not_converged"  # Iteration budget exhausted
    NO_SIGN_CHANGE = "no_sign_change"  # No bracket / no positive and negative flows
    INPUT_MISMATCH = "input_mismatch"  # values and timestamps differ in length
    DEGENERATE_DERIVATIVE = "degenerate_derivative"  # Newton step divides by f'(rate) == 0
    NON_FINITE = "non_finite"  # Overflow, NaN or a vanishing discount factor


@dataclass(frozen=True)
class SolverResult:
    """Outcome of an IRR / XIRR search.

    `rate` is populated only for CONVERGED. Every other status means
    "no result"; it is never reported as a rate of 0.
    """
    status: SolverStatus
    rate: float | None = None
    iterations: int = 0

    def __post_init__(self):
        if (self.status is SolverStatus.CONVERGED) != (self.rate is not None):
            raise ValueError(f"rate must be set exactly when converged (status={self.status.value})")

    @property
    def converged(self) -> bool:
        return self.status is SolverStatus.CONVERGED
