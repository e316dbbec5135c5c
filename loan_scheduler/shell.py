"""Interactive text menu around AdaptiveScheduler.

Prompts for input, hands typed requests to the scheduler, and renders results.
All scheduling decisions live in ``loan_scheduler.engine``.
"""

from __future__ import annotations

import logging
from typing import Callable

import pandas as pd

from loan_scheduler.engine.results import (
    AllocationResult,
    RankingResult,
    SchedulerCondition,
)
from loan_scheduler.engine.scheduler import AdaptiveScheduler
from loan_scheduler.engine.scoring import Loan
from loan_scheduler.evaluation.metrics import summarize_portfolio

logger = logging.getLogger(__name__)

MENU = (
    "\n========= MENU =========\n"
    "1. Add a Loan\n"
    "2. View Loan Priorities\n"
    "3. Allocate Payment\n"
    "4. Simulate Passing Days\n"
    "5. Portfolio Summary\n"
    "6. Exit\n"
    "========================"
)

CONDITION_MESSAGES = {
    SchedulerCondition.NO_LOANS: "⚠️  No loans added yet.",
    SchedulerCondition.INVALID_AMOUNT: "⚠️  Invalid payment amount.",
    SchedulerCondition.NO_OP: "⚠️  No days simulated.",
    SchedulerCondition.ALL_SETTLED: "✅ All loans repaid or inactive.",
}


class SchedulerShell:
    """Blocking request/response loop over a single scheduler session.

    Loan ids are assigned here, starting at 1 and never reused.
    """

    def __init__(
        self,
        scheduler: AdaptiveScheduler,
        input_fn: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
        currency_symbol: str = "₹",
    ):
        self.scheduler = scheduler
        self._input = input_fn
        self._output = output
        self.currency = currency_symbol
        self._next_id = max((loan.id for loan in scheduler.loans), default=0) + 1

    # ──────────────────────────────────────────────────────────────────────
    # Main loop
    # ──────────────────────────────────────────────────────────────────────

    def run(self) -> None:
        """Serve menu choices until Exit or end of input."""
        self._output("=== Adaptive Loan Repayment Scheduler ===")
        actions = {
            "1": self.add_loan,
            "2": self.view_priorities,
            "3": self.allocate_payment,
            "4": self.simulate_days,
            "5": self.portfolio_summary,
        }
        try:
            while True:
                self._output(MENU)
                choice = self._input("Enter choice: ").strip()
                if choice == "6":
                    break
                action = actions.get(choice)
                if action is None:
                    self._output("❌ Invalid choice. Try again.")
                    continue
                action()
        except EOFError:
            logger.debug("Input closed, leaving shell")
        self._output("\n=== ✅ Exiting Adaptive Scheduler ===")

    # ──────────────────────────────────────────────────────────────────────
    # Menu actions
    # ──────────────────────────────────────────────────────────────────────

    def add_loan(self) -> None:
        name = self._input("Enter Loan Name: ").strip()
        principal = self._prompt_float(f"Enter Principal Amount: {self.currency}", minimum=0.0)
        rate = self._prompt_float("Enter Annual Interest Rate (%): ")
        days = self._prompt_int("Enter Days Until Due: ")
        fee = self._prompt_float(f"Enter Late Fee ({self.currency}): ", minimum=0.0)
        credit = self._prompt_float("Enter Credit Impact Factor (0–1): ", minimum=0.0, maximum=1.0)
        variable = self._prompt_yes_no("Variable Rate (y/n)? ")
        sensitivity = 0.0
        if variable:
            sensitivity = self._prompt_float(
                "Enter Inflation Sensitivity (0–1): ", minimum=0.0, maximum=1.0
            )

        try:
            loan = Loan(
                id=self._next_id,
                name=name,
                principal=principal,
                annual_rate=rate,
                days_until_due=days,
                late_fee=fee,
                credit_factor=credit,
                variable_rate=variable,
                inflation_sensitivity=sensitivity,
            )
            self.scheduler.add_loan(loan)
        except ValueError as exc:
            self._output(f"❌ Loan not added: {exc}")
            return

        self._next_id += 1
        self._output("✅ Loan added successfully!")

    def view_priorities(self) -> None:
        self._output(self.render_ranking(self.scheduler.display_priorities()))

    def allocate_payment(self) -> None:
        amount = self._prompt_float(f"Enter total payment amount: {self.currency}")
        self._output(self.render_allocation(self.scheduler.allocate_payment(amount)))

    def simulate_days(self) -> None:
        days = self._prompt_int("Enter number of days to simulate: ")
        result = self.scheduler.simulate_days(days)
        if result.condition is not SchedulerCondition.NO_OP:
            self._output(f"\n⏳ Simulated {days} days. Deadlines updated.")
        self._output(self.render_ranking(result))

    def portfolio_summary(self) -> None:
        summary = summarize_portfolio(self.scheduler.loans)
        self._output(
            "\n--- 📋 Portfolio Summary ---\n"
            f"  Active loans:       {summary.active_count}\n"
            f"  Settled loans:      {summary.settled_count}\n"
            f"  Overdue loans:      {summary.overdue_count}\n"
            f"  Total outstanding:  {self.currency}{summary.total_outstanding:,.2f}\n"
            f"  Weighted avg rate:  {summary.weighted_avg_rate:.2f}%"
        )

    # ──────────────────────────────────────────────────────────────────────
    # Rendering
    # ──────────────────────────────────────────────────────────────────────

    def render_ranking(self, result: RankingResult) -> str:
        if not result.ok:
            return f"\n{CONDITION_MESSAGES[result.condition]}"

        table = pd.DataFrame(
            {
                "Loan Name": [e.name for e in result],
                "Priority Score": [e.score for e in result],
                "Principal": [e.principal for e in result],
                "Days Left": [e.days_until_due for e in result],
            }
        )
        return "\n--- 📊 Current Loan Priorities ---\n" + table.to_string(
            index=False, float_format=lambda v: f"{v:,.2f}"
        )

    def render_allocation(self, result: AllocationResult) -> str:
        if result.condition in (SchedulerCondition.NO_LOANS, SchedulerCondition.INVALID_AMOUNT):
            return f"\n{CONDITION_MESSAGES[result.condition]}"

        lines = [f"\n💸 Allocating Payment of {self.currency}{result.amount:,.2f} ---"]
        if result.payments:
            trace = pd.DataFrame(
                {
                    "Loan Name": [p.loan_name for p in result.payments],
                    "Paid": [p.amount_paid for p in result.payments],
                    "Remaining Principal": [p.remaining_principal for p in result.payments],
                }
            )
            lines.append(trace.to_string(index=False, float_format=lambda v: f"{v:,.2f}"))
        if result.leftover > 0.0:
            lines.append(f"💰 Leftover cash: {self.currency}{result.leftover:,.2f}")
        lines.append(self.render_ranking(result.ranking))
        return "\n".join(lines)

    # ──────────────────────────────────────────────────────────────────────
    # Prompt helpers
    # ──────────────────────────────────────────────────────────────────────

    def _prompt_float(
        self,
        prompt: str,
        minimum: float | None = None,
        maximum: float | None = None,
    ) -> float:
        while True:
            raw = self._input(prompt).strip()
            try:
                value = float(raw)
            except ValueError:
                self._output(f"❌ Not a number: {raw!r}")
                continue
            if minimum is not None and value < minimum:
                self._output(f"❌ Must be at least {minimum}")
                continue
            if maximum is not None and value > maximum:
                self._output(f"❌ Must be at most {maximum}")
                continue
            return value

    def _prompt_int(self, prompt: str) -> int:
        while True:
            raw = self._input(prompt).strip()
            try:
                return int(raw)
            except ValueError:
                self._output(f"❌ Not a whole number: {raw!r}")

    def _prompt_yes_no(self, prompt: str) -> bool:
        return self._input(prompt).strip().lower().startswith("y")
