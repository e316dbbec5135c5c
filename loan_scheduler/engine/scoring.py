"""Priority scoring for the adaptive loan scheduler.

Implements the loan-level math the scheduler ranks by:
- Urgency from days until due (logarithmic decay, saturating when overdue)
- Interest impact per thousand units of principal
- Late-fee penalty relative to principal, scaled by urgency
- Credit-score sensitivity
- Inflation relief for variable-rate loans
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass

SETTLED_EPSILON = 1e-6      # Principal at or below this is treated as repaid
SETTLED_SCORE = -1e15       # Sentinel so settled loans always sort last

PENALTY_RATIO_CAP = 5e3
PENALTY_SCALE = 10000.0
CREDIT_SCALE = 100.0
PER_THOUSAND = 1000.0

INTEREST_WEIGHT = 1.5
PENALTY_WEIGHT = 0.8
CREDIT_WEIGHT = 0.8
URGENCY_WEIGHT = 5000.0

SHORT_TERM_DAYS = 5
SHORT_TERM_BOOST = 1.25


def _check_unit_interval(field_name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{field_name} must be in [0, 1], got {value!r}")


@dataclass(frozen=True)
class Loan:
    """A single loan tracked by the scheduler.

    Frozen: the scheduler swaps in an updated copy (via ``dataclasses.replace``)
    when ``principal`` or ``days_until_due`` change. Every other field is fixed
    at creation.
    """

    id: int
    name: str
    principal: float                    # Current outstanding amount
    annual_rate: float                  # Percent, e.g. 12.0 for 12%
    days_until_due: int                 # Negative once overdue
    late_fee: float                     # Flat fee charged when late
    credit_factor: float = 0.0          # 0–1 credit-score sensitivity
    variable_rate: bool = False
    inflation_sensitivity: float = 0.0  # 0–1, only used for variable-rate loans

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("Loan name must not be empty")
        for field_name in ("principal", "annual_rate", "late_fee",
                           "credit_factor", "inflation_sensitivity"):
            if not math.isfinite(getattr(self, field_name)):
                raise ValueError(f"{field_name} must be finite")
        if isinstance(self.days_until_due, bool) or not isinstance(self.days_until_due, numbers.Integral):
            raise ValueError(f"days_until_due must be a whole number, got {self.days_until_due!r}")
        if self.principal < 0:
            raise ValueError(f"principal must be >= 0, got {self.principal!r}")
        if self.late_fee < 0:
            raise ValueError(f"late_fee must be >= 0, got {self.late_fee!r}")
        _check_unit_interval("credit_factor", self.credit_factor)
        _check_unit_interval("inflation_sensitivity", self.inflation_sensitivity)

    @property
    def is_settled(self) -> bool:
        """True once principal has been paid down to the settlement epsilon."""
        return self.principal <= SETTLED_EPSILON

    @property
    def is_overdue(self) -> bool:
        return self.days_until_due <= 0


def compute_urgency(days_until_due: int) -> float:
    """Urgency in (0, 1]: closer due date means higher urgency.

    Formula: U = 1 / (1 + ln(1 + d)) for d > 0, and exactly 1.0 when overdue.
    """
    if days_until_due <= 0:
        return 1.0
    return 1.0 / (1.0 + math.log1p(days_until_due))


def compute_interest_impact(loan: Loan) -> float:
    """Rate-weighted principal, normalized per thousand units."""
    return (loan.annual_rate / 100.0) * (loan.principal / PER_THOUSAND)


def compute_penalty_weight(loan: Loan, urgency: float) -> float:
    """Late fee per unit of principal, scaled by urgency.

    The per-principal ratio is clamped to [0, 5000] so near-zero balances
    don't blow up the score.
    """
    ratio = loan.late_fee / max(1.0, loan.principal)
    ratio = max(0.0, min(ratio, PENALTY_RATIO_CAP))
    return ratio * PENALTY_SCALE * urgency


def compute_credit_impact(loan: Loan) -> float:
    return loan.credit_factor * CREDIT_SCALE


def compute_inflation_adjustment(loan: Loan, inflation_rate: float) -> float:
    """Inflation erodes the real burden of variable-rate debt.

    Returns a non-positive adjustment for variable-rate loans, 0 otherwise.
    """
    if not loan.variable_rate:
        return 0.0
    return -inflation_rate * loan.inflation_sensitivity * (loan.principal / PER_THOUSAND)


def compute_priority(loan: Loan, inflation_rate: float) -> float:
    """Combine all components into the scalar priority score.

    priority = 1.5·interest + 0.8·penalty + 0.8·credit + 5000·urgency + inflation_adj,
    then ×1.25 on the whole sum when the loan is due within 5 days.

    Args:
        loan: Loan to score.
        inflation_rate: Session-wide inflation scalar (e.g. 0.05).

    Returns:
        Priority score; ``SETTLED_SCORE`` for settled loans.
    """
    if loan.is_settled:
        return SETTLED_SCORE

    urgency = compute_urgency(loan.days_until_due)

    priority = (
        INTEREST_WEIGHT * compute_interest_impact(loan)
        + PENALTY_WEIGHT * compute_penalty_weight(loan, urgency)
        + CREDIT_WEIGHT * compute_credit_impact(loan)
        + URGENCY_WEIGHT * urgency
        + compute_inflation_adjustment(loan, inflation_rate)
    )

    if loan.days_until_due <= SHORT_TERM_DAYS:
        priority *= SHORT_TERM_BOOST

    return priority
