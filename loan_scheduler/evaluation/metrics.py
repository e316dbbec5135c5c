"""Portfolio health metrics for the loan scheduler.

Aggregates over the scheduler's master collection; settled loans count toward
the settled total but are excluded from balances and rates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from loan_scheduler.engine.scoring import Loan


@dataclass(frozen=True)
class PortfolioSummary:
    active_count: int
    settled_count: int
    overdue_count: int
    total_outstanding: float
    weighted_avg_rate: float    # Percent, weighted by outstanding principal


def compute_total_outstanding(loans: Iterable[Loan]) -> float:
    """Sum of principal across loans that are not yet settled."""
    return sum(loan.principal for loan in loans if not loan.is_settled)


def compute_weighted_avg_rate(loans: Iterable[Loan]) -> float:
    """Principal-weighted average annual rate.

    Returns 0 if nothing is outstanding (all settled or empty).
    """
    active = [loan for loan in loans if not loan.is_settled]
    total = sum(loan.principal for loan in active)
    if total <= 0:
        return 0.0
    return sum(loan.annual_rate * loan.principal for loan in active) / total


def count_overdue(loans: Iterable[Loan]) -> int:
    return sum(1 for loan in loans if not loan.is_settled and loan.is_overdue)


def summarize_portfolio(loans: Iterable[Loan]) -> PortfolioSummary:
    loans = list(loans)
    settled = sum(1 for loan in loans if loan.is_settled)
    return PortfolioSummary(
        active_count=len(loans) - settled,
        settled_count=settled,
        overdue_count=count_overdue(loans),
        total_outstanding=compute_total_outstanding(loans),
        weighted_avg_rate=compute_weighted_avg_rate(loans),
    )
