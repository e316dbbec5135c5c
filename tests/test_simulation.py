"""Tests for the batch repayment simulation."""

import pytest

from loan_scheduler.engine.scenario_sampler import ScenarioSampler
from loan_scheduler.evaluation.simulation import (
    PERIOD_COLUMNS,
    SUMMARY_COLUMNS,
    run_benchmark,
    run_repayment_simulation,
    summarize_benchmark,
)


class TestRepaymentSimulation:

    def test_two_loan_payoff(self):
        """5000 per period: A takes two periods, then B clears in the third."""
        df = run_repayment_simulation(
            ScenarioSampler.preset("two_loan_example"),
            payment_amount=5000,
            days_per_period=10,
            num_periods=12,
        )
        assert len(df) == 3
        assert df["paid"].tolist() == pytest.approx([5000, 5000, 5000])
        assert df["leftover"].tolist() == pytest.approx([0, 0, 0])
        assert df["top_after_payment"].tolist()[:2] == ["Loan A", "Loan B"]
        assert df["active"].iloc[-1] == 0
        assert df["outstanding"].iloc[-1] == pytest.approx(0.0)

    def test_respects_period_limit(self):
        df = run_repayment_simulation(
            ScenarioSampler.preset("variable_rate_mix"),
            payment_amount=1000,
            num_periods=4,
        )
        assert df["period"].tolist() == [1, 2, 3, 4]
        assert (df["active"] > 0).all()

    def test_outstanding_never_increases(self):
        df = run_repayment_simulation(
            ScenarioSampler.preset("variable_rate_mix"),
            payment_amount=250000,
            num_periods=20,
        )
        outstanding = df["outstanding"].tolist()
        assert all(a >= b for a, b in zip(outstanding, outstanding[1:]))

    def test_zero_periods_keeps_columns(self):
        df = run_repayment_simulation(
            ScenarioSampler.preset("two_loan_example"),
            payment_amount=1000,
            num_periods=0,
        )
        assert df.empty
        assert list(df.columns) == PERIOD_COLUMNS


class TestBenchmark:

    def test_writes_csv(self, tmp_path):
        df = run_benchmark(
            num_scenarios=3,
            seeds=[1, 2],
            payment_amount=50000,
            num_periods=5,
            output_dir=tmp_path,
        )
        assert (tmp_path / "simulation_per_period.csv").exists()
        assert set(df["seed"]) == {1, 2}

        summary = summarize_benchmark(df)
        assert len(summary) == 6
        assert (summary["total_paid"] <= summary["initial_principal"] + 1e-6).all()

    def test_seed_reproducibility(self):
        a = run_benchmark(num_scenarios=2, seeds=[9], num_periods=3, output_dir=None)
        b = run_benchmark(num_scenarios=2, seeds=[9], num_periods=3, output_dir=None)
        assert a.equals(b)

    def test_no_scenarios_summarizes_to_empty(self):
        df = run_benchmark(num_scenarios=0, seeds=[1], output_dir=None)
        assert df.empty
        assert "period" in df.columns

        summary = summarize_benchmark(df)
        assert summary.empty
        assert list(summary.columns) == SUMMARY_COLUMNS

    def test_zero_periods_summarizes_to_empty(self):
        df = run_benchmark(num_scenarios=2, seeds=[1], num_periods=0, output_dir=None)
        assert df.empty
        assert {"seed", "scenario", "period"} <= set(df.columns)

        summary = summarize_benchmark(df)
        assert summary.empty
        assert list(summary.columns) == SUMMARY_COLUMNS
