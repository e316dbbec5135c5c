"""Result types returned by the scheduler.

Recoverable outcomes (nothing to show, bad amount, zero days) are reported as a
``SchedulerCondition`` on the result rather than raised, so the caller decides
how to phrase them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from loan_scheduler.engine.scoring import Loan


class SchedulerCondition(Enum):
    OK = "ok"
    NO_LOANS = "no_loans"              # Nothing has been added yet
    INVALID_AMOUNT = "invalid_amount"  # Payment amount <= 0
    NO_OP = "no_op"                    # Zero days simulated
    ALL_SETTLED = "all_settled"        # Every loan is fully repaid


@dataclass(frozen=True)
class RankedLoan:
    """One (score, loan) pair from a ranking rebuild."""

    loan: Loan
    score: float

    @property
    def name(self) -> str:
        return self.loan.name

    @property
    def principal(self) -> float:
        return self.loan.principal

    @property
    def days_until_due(self) -> int:
        return self.loan.days_until_due


@dataclass(frozen=True)
class RankingResult:
    """Active loans in descending priority order, or the reason there are none."""

    condition: SchedulerCondition
    entries: tuple[RankedLoan, ...] = ()
    days_elapsed: int = 0

    @property
    def ok(self) -> bool:
        return self.condition is SchedulerCondition.OK

    @property
    def top(self) -> RankedLoan | None:
        return self.entries[0] if self.entries else None

    def __iter__(self) -> Iterator[RankedLoan]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class PaymentTraceEntry:
    """A single sub-payment made during allocation."""

    loan_id: int
    loan_name: str
    amount_paid: float
    remaining_principal: float


@dataclass(frozen=True)
class AllocationResult:
    """Outcome of distributing a payment across loans in priority order."""

    condition: SchedulerCondition
    amount: float
    payments: tuple[PaymentTraceEntry, ...] = ()
    leftover: float = 0.0
    ranking: RankingResult = field(
        default_factory=lambda: RankingResult(SchedulerCondition.NO_LOANS)
    )

    @property
    def ok(self) -> bool:
        return self.condition is SchedulerCondition.OK

    @property
    def total_paid(self) -> float:
        return sum(p.amount_paid for p in self.payments)
