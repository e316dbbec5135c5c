"""Scoring and ranking engine for the adaptive loan scheduler."""

from loan_scheduler.engine.scoring import (
    SETTLED_EPSILON,
    SETTLED_SCORE,
    Loan,
    compute_priority,
    compute_urgency,
)
from loan_scheduler.engine.results import (
    AllocationResult,
    PaymentTraceEntry,
    RankedLoan,
    RankingResult,
    SchedulerCondition,
)
from loan_scheduler.engine.scheduler import AdaptiveScheduler

__all__ = [
    "SETTLED_EPSILON",
    "SETTLED_SCORE",
    "Loan",
    "compute_priority",
    "compute_urgency",
    "AllocationResult",
    "PaymentTraceEntry",
    "RankedLoan",
    "RankingResult",
    "SchedulerCondition",
    "AdaptiveScheduler",
]
