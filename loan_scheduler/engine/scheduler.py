"""AdaptiveScheduler — ranks loans by priority and reallocates cash across them.

The scheduler owns the master loan list. Every query rebuilds the ranking from
scratch; nothing is updated incrementally:

  - display_priorities: rebuild → active loans in descending score order
  - allocate_payment:   rebuild → pay the top loan → write back → rebuild → ...
  - simulate_days:      shift every due date → rebuild
"""

from __future__ import annotations

import dataclasses
import logging
import math

import numpy as np

from loan_scheduler.engine.results import (
    AllocationResult,
    PaymentTraceEntry,
    RankedLoan,
    RankingResult,
    SchedulerCondition,
)
from loan_scheduler.engine.scoring import Loan, compute_priority

logger = logging.getLogger(__name__)

DEFAULT_INFLATION_RATE = 0.05


class AdaptiveScheduler:
    """Single-session loan ranking engine.

    Holds loans in insertion order plus one inflation scalar fixed at
    construction. Rankings are derived on demand and never stored.
    """

    def __init__(self, inflation_rate: float = DEFAULT_INFLATION_RATE):
        if not math.isfinite(inflation_rate):
            raise ValueError(f"inflation_rate must be finite, got {inflation_rate!r}")
        self.inflation_rate = inflation_rate
        self._loans: list[Loan] = []

    # ──────────────────────────────────────────────────────────────────────
    # Loan collection
    # ──────────────────────────────────────────────────────────────────────

    @property
    def loans(self) -> tuple[Loan, ...]:
        """Read-only view of the master collection, in insertion order."""
        return tuple(self._loans)

    def __len__(self) -> int:
        return len(self._loans)

    def add_loan(self, loan: Loan) -> None:
        """Append a loan. Ids must be unique for the lifetime of the scheduler."""
        if any(existing.id == loan.id for existing in self._loans):
            raise ValueError(f"Loan id {loan.id} is already in use")
        self._loans.append(loan)
        logger.debug(f"Added loan {loan.id} ({loan.name!r}), principal {loan.principal:.2f}")

    def get_loan(self, loan_id: int) -> Loan:
        return self._loans[self._index_of(loan_id)]

    # ──────────────────────────────────────────────────────────────────────
    # Ranking
    # ──────────────────────────────────────────────────────────────────────

    def rank(self) -> list[RankedLoan]:
        """Rebuild the full ranking, settled loans included.

        Sorted by descending score; equal scores fall back to lowest id first.
        """
        if not self._loans:
            return []

        scores = np.array(
            [compute_priority(loan, self.inflation_rate) for loan in self._loans],
            dtype=np.float64,
        )
        ids = np.array([loan.id for loan in self._loans], dtype=np.int64)
        # lexsort uses the last key as primary
        order = np.lexsort((ids, -scores))

        return [RankedLoan(loan=self._loans[i], score=float(scores[i])) for i in order]

    def display_priorities(self) -> RankingResult:
        """Active loans in priority order, or the condition explaining why none."""
        return self._ranking_result()

    # ──────────────────────────────────────────────────────────────────────
    # Mutations
    # ──────────────────────────────────────────────────────────────────────

    def allocate_payment(self, amount: float) -> AllocationResult:
        """Greedily spend ``amount`` on the highest-priority loan, re-ranking after each step.

        Pipeline:
            1. Rebuild ranking, take the top loan
            2. Pay min(remaining, principal) and write the new principal back
            3. Repeat until the cash runs out or every loan is settled

        Paying down a loan shrinks its principal-driven terms, so the order can
        change between steps; hence the full rebuild every iteration.

        Args:
            amount: Cash to distribute.

        Returns:
            AllocationResult with the per-loan trace, leftover cash, and the
            ranking after allocation.
        """
        if not self._loans:
            return AllocationResult(SchedulerCondition.NO_LOANS, amount=amount, leftover=amount)

        if not math.isfinite(amount) or amount <= 0:
            return AllocationResult(
                SchedulerCondition.INVALID_AMOUNT,
                amount=amount,
                leftover=amount,
                ranking=self._ranking_result(),
            )

        if all(loan.is_settled for loan in self._loans):
            return AllocationResult(
                SchedulerCondition.ALL_SETTLED,
                amount=amount,
                leftover=amount,
                ranking=self._ranking_result(),
            )

        remaining = amount
        payments: list[PaymentTraceEntry] = []

        while remaining > 0.0:
            top = self.rank()[0]
            if top.loan.is_settled:
                break

            pay = min(remaining, top.loan.principal)
            remaining -= pay
            updated = self._replace_loan(top.loan.id, principal=max(0.0, top.loan.principal - pay))

            payments.append(
                PaymentTraceEntry(
                    loan_id=updated.id,
                    loan_name=updated.name,
                    amount_paid=pay,
                    remaining_principal=updated.principal,
                )
            )
            logger.debug(
                f"Paid {pay:.2f} to {updated.name!r} (score {top.score:.2f}), "
                f"remaining principal {updated.principal:.2f}"
            )

        logger.info(
            f"Allocated {amount - remaining:.2f} of {amount:.2f} across "
            f"{len(payments)} payment(s), leftover {remaining:.2f}"
        )

        return AllocationResult(
            SchedulerCondition.OK,
            amount=amount,
            payments=tuple(payments),
            leftover=remaining,
            ranking=self._ranking_result(),
        )

    def simulate_days(self, days: int) -> RankingResult:
        """Advance (or, for negative ``days``, rewind) every due date and re-rank."""
        if days == 0:
            return RankingResult(SchedulerCondition.NO_OP)

        self._loans = [
            dataclasses.replace(loan, days_until_due=loan.days_until_due - days)
            for loan in self._loans
        ]
        logger.info(f"Simulated {days} day(s) across {len(self._loans)} loan(s)")

        return self._ranking_result(days_elapsed=days)

    # ──────────────────────────────────────────────────────────────────────
    # Internal helpers
    # ──────────────────────────────────────────────────────────────────────

    def _ranking_result(self, days_elapsed: int = 0) -> RankingResult:
        if not self._loans:
            return RankingResult(SchedulerCondition.NO_LOANS, days_elapsed=days_elapsed)

        active = tuple(entry for entry in self.rank() if not entry.loan.is_settled)
        if not active:
            return RankingResult(SchedulerCondition.ALL_SETTLED, days_elapsed=days_elapsed)

        return RankingResult(SchedulerCondition.OK, entries=active, days_elapsed=days_elapsed)

    def _index_of(self, loan_id: int) -> int:
        for i, loan in enumerate(self._loans):
            if loan.id == loan_id:
                return i
        raise KeyError(loan_id)

    def _replace_loan(self, loan_id: int, **changes) -> Loan:
        """Swap the master-list entry for an updated copy and return it."""
        i = self._index_of(loan_id)
        self._loans[i] = dataclasses.replace(self._loans[i], **changes)
        return self._loans[i]
