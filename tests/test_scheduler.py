"""Unit tests for AdaptiveScheduler — ranking, allocation and simulated time."""

import dataclasses

import numpy as np
import pytest

from loan_scheduler.engine.results import SchedulerCondition
from loan_scheduler.engine.scenario_sampler import ScenarioSampler
from loan_scheduler.engine.scheduler import DEFAULT_INFLATION_RATE, AdaptiveScheduler
from loan_scheduler.engine.scoring import SETTLED_SCORE, Loan, compute_urgency
from loan_scheduler.utils.config import build_scheduler


# ── Fixtures ──────────────────────────────────────────────────────────────

@pytest.fixture
def loan_a() -> Loan:
    return Loan(1, "Loan A", principal=10000, annual_rate=12, days_until_due=3,
                late_fee=500, credit_factor=0.5)


@pytest.fixture
def loan_b() -> Loan:
    return Loan(2, "Loan B", principal=5000, annual_rate=8, days_until_due=60,
                late_fee=100, credit_factor=0.2)


@pytest.fixture
def scheduler(loan_a, loan_b) -> AdaptiveScheduler:
    s = AdaptiveScheduler(inflation_rate=0.05)
    s.add_loan(loan_a)
    s.add_loan(loan_b)
    return s


@pytest.fixture
def empty_scheduler() -> AdaptiveScheduler:
    return AdaptiveScheduler()


# ── Loan collection ───────────────────────────────────────────────────────

class TestCollection:

    def test_insertion_order(self, scheduler):
        assert [loan.id for loan in scheduler.loans] == [1, 2]
        assert len(scheduler) == 2

    def test_duplicate_id_rejected(self, scheduler, loan_b):
        with pytest.raises(ValueError, match="already in use"):
            scheduler.add_loan(dataclasses.replace(loan_b, name="Other"))
        assert len(scheduler) == 2

    def test_loans_view_is_read_only(self, scheduler):
        assert isinstance(scheduler.loans, tuple)

    def test_get_loan(self, scheduler, loan_b):
        assert scheduler.get_loan(2) == loan_b
        with pytest.raises(KeyError):
            scheduler.get_loan(99)

    def test_inflation_must_be_finite(self):
        with pytest.raises(ValueError):
            AdaptiveScheduler(inflation_rate=float("nan"))

    def test_default_inflation_rate(self, empty_scheduler):
        assert empty_scheduler.inflation_rate == DEFAULT_INFLATION_RATE == 0.05


# ── Display ───────────────────────────────────────────────────────────────

class TestDisplay:

    def test_empty_reports_no_loans(self, empty_scheduler):
        result = empty_scheduler.display_priorities()
        assert result.condition is SchedulerCondition.NO_LOANS
        assert not result.ok
        assert len(result) == 0

    def test_near_due_loan_ranks_first(self, scheduler):
        result = scheduler.display_priorities()
        assert result.ok
        assert [e.name for e in result] == ["Loan A", "Loan B"]
        assert result.entries[0].score > result.entries[1].score

    def test_entry_fields(self, scheduler):
        top = scheduler.display_priorities().top
        assert top.principal == 10000
        assert top.days_until_due == 3

    def test_iterates_entries_in_rank_order(self, scheduler):
        result = scheduler.display_priorities()
        assert list(result) == list(result.entries)
        assert [e.score for e in result] == sorted((e.score for e in result), reverse=True)

    def test_idempotent(self, scheduler):
        assert scheduler.display_priorities() == scheduler.display_priorities()

    def test_settled_loans_hidden(self, scheduler):
        scheduler.allocate_payment(10000)
        result = scheduler.display_priorities()
        assert [e.name for e in result] == ["Loan B"]

    def test_all_settled(self, scheduler):
        scheduler.allocate_payment(15000)
        result = scheduler.display_priorities()
        assert result.condition is SchedulerCondition.ALL_SETTLED
        assert len(result) == 0

    def test_rank_keeps_settled_at_bottom(self, scheduler):
        scheduler.allocate_payment(10000)
        ranking = scheduler.rank()
        assert [r.loan.id for r in ranking] == [2, 1]
        assert ranking[-1].score == SETTLED_SCORE

    def test_ties_break_on_lowest_id(self):
        s = AdaptiveScheduler()
        twin = Loan(7, "Twin", principal=1000, annual_rate=10, days_until_due=10, late_fee=50)
        s.add_loan(twin)
        s.add_loan(dataclasses.replace(twin, id=3))
        s.add_loan(dataclasses.replace(twin, id=5))
        assert [r.loan.id for r in s.rank()] == [3, 5, 7]


# ── Allocation ────────────────────────────────────────────────────────────

class TestAllocation:

    def test_no_loans(self, empty_scheduler):
        result = empty_scheduler.allocate_payment(1000)
        assert result.condition is SchedulerCondition.NO_LOANS
        assert result.payments == ()

    @pytest.mark.parametrize("amount", [0.0, -50.0, float("nan"), float("inf")])
    def test_invalid_amount_leaves_state(self, scheduler, amount):
        before = scheduler.loans
        result = scheduler.allocate_payment(amount)
        assert result.condition is SchedulerCondition.INVALID_AMOUNT
        assert result.payments == ()
        assert scheduler.loans == before

    def test_partial_payment_to_top_loan(self, scheduler):
        result = scheduler.allocate_payment(3000)
        assert result.ok
        assert len(result.payments) == 1
        entry = result.payments[0]
        assert entry.loan_name == "Loan A"
        assert entry.amount_paid == pytest.approx(3000)
        assert entry.remaining_principal == pytest.approx(7000)
        assert result.leftover == pytest.approx(0.0)
        assert scheduler.get_loan(1).principal == pytest.approx(7000)
        assert scheduler.get_loan(2).principal == pytest.approx(5000)

    def test_overpayment_settles_all_with_leftover(self, scheduler):
        result = scheduler.allocate_payment(20000)
        assert result.ok
        assert [p.loan_name for p in result.payments] == ["Loan A", "Loan B"]
        assert [p.amount_paid for p in result.payments] == [10000, 5000]
        assert result.leftover == pytest.approx(5000)
        assert result.ranking.condition is SchedulerCondition.ALL_SETTLED
        assert all(loan.principal == 0.0 for loan in scheduler.loans)

    def test_all_settled_returns_whole_amount(self, scheduler):
        scheduler.allocate_payment(15000)
        result = scheduler.allocate_payment(500)
        assert result.condition is SchedulerCondition.ALL_SETTLED
        assert result.payments == ()
        assert result.leftover == 500

    def test_ranking_after_allocation_reflects_payment(self, scheduler):
        result = scheduler.allocate_payment(3000)
        assert result.ranking == scheduler.display_priorities()

    def test_partial_payment_flips_ranking(self):
        """Paying down an interest-heavy loan drops it below a credit-sensitive one."""
        s = build_scheduler(ScenarioSampler.preset("ranking_flip"))
        assert s.display_priorities().top.name == "Home Loan"

        first = s.allocate_payment(400000)
        assert [p.loan_name for p in first.payments] == ["Home Loan"]
        assert first.ranking.top.name == "Store Card"

        second = s.allocate_payment(500)
        assert [p.loan_name for p in second.payments] == ["Store Card"]
        assert s.get_loan(1).principal == pytest.approx(100000)
        assert s.get_loan(2).principal == pytest.approx(500)

    def test_moves_to_next_loan_after_settling(self):
        s = build_scheduler(ScenarioSampler.preset("ranking_flip"))
        result = s.allocate_payment(600000)
        assert [(p.loan_name, p.amount_paid) for p in result.payments] == [
            ("Home Loan", 500000),
            ("Store Card", 1000),
        ]
        assert result.leftover == pytest.approx(99000)

    @pytest.mark.parametrize("seed", [0, 1, 2, 3, 4, 5, 6, 7])
    def test_conserves_cash_and_never_negative(self, seed):
        rng = np.random.default_rng(seed)
        s = build_scheduler(ScenarioSampler().sample(rng))
        for amount in rng.uniform(1.0, 600000.0, size=6):
            before = sum(loan.principal for loan in s.loans)
            result = s.allocate_payment(float(amount))
            after = sum(loan.principal for loan in s.loans)

            paid = sum(p.amount_paid for p in result.payments)
            assert paid + result.leftover == pytest.approx(amount)
            assert before - after == pytest.approx(paid)
            assert all(loan.principal >= 0.0 for loan in s.loans)
            assert all(p.remaining_principal >= 0.0 for p in result.payments)

    def test_fixed_fields_untouched_by_payment(self, scheduler, loan_a):
        scheduler.allocate_payment(2500)
        paid = scheduler.get_loan(1)
        assert dataclasses.replace(paid, principal=loan_a.principal) == loan_a


# ── Simulated time ────────────────────────────────────────────────────────

class TestSimulateDays:

    def test_zero_days_is_noop(self, scheduler):
        before = scheduler.loans
        result = scheduler.simulate_days(0)
        assert result.condition is SchedulerCondition.NO_OP
        assert scheduler.loans == before

    def test_advances_all_due_dates(self, scheduler):
        result = scheduler.simulate_days(10)
        assert [loan.days_until_due for loan in scheduler.loans] == [-7, 50]
        assert result.ok
        assert result.days_elapsed == 10

    def test_negative_days_pushes_due_date_out(self):
        s = AdaptiveScheduler()
        s.add_loan(Loan(1, "Soon", principal=8000, annual_rate=10, days_until_due=2, late_fee=200))
        before = s.display_priorities().top.score

        result = s.simulate_days(-10)

        assert s.get_loan(1).days_until_due == 12
        assert compute_urgency(12) < compute_urgency(2)
        assert result.top.score < before

    def test_returns_new_ranking(self, scheduler):
        result = scheduler.simulate_days(10)
        assert result.entries == scheduler.display_priorities().entries

    def test_empty_scheduler(self, empty_scheduler):
        assert empty_scheduler.simulate_days(5).condition is SchedulerCondition.NO_LOANS
        assert empty_scheduler.simulate_days(0).condition is SchedulerCondition.NO_OP

    def test_principal_unchanged(self, scheduler):
        scheduler.simulate_days(30)
        assert [loan.principal for loan in scheduler.loans] == [10000, 5000]
