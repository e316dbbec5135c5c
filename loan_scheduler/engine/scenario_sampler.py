"""ScenarioSampler — generates loan portfolios for simulation and testing.

Produces random SchedulerConfig instances with varied numbers of loans (1–6),
rates (6%–24%), principals, due dates (some already overdue), late fees and
credit sensitivity. Also provides named presets for reproducible runs.
"""

from __future__ import annotations

import numpy as np

from loan_scheduler.engine.scheduler import DEFAULT_INFLATION_RATE
from loan_scheduler.utils.config import LoanConfig, SchedulerConfig


# Loan name pools for variety
_LOAN_NAMES = [
    "Home Loan", "Car Loan", "Education Loan", "Personal Loan",
    "Credit Card", "Gold Loan", "Business Loan", "Consumer Durable",
    "Two-Wheeler Loan", "Medical Loan", "Travel Loan", "Overdraft",
]


class ScenarioSampler:
    """Generate randomized or preset loan portfolios."""

    def __init__(
        self,
        num_loans_range: tuple[int, int] = (1, 6),
        principal_range: tuple[float, float] = (5000.0, 500000.0),
        rate_range: tuple[float, float] = (6.0, 24.0),
        days_range: tuple[int, int] = (-10, 90),
        late_fee_range: tuple[float, float] = (0.0, 2000.0),
        variable_rate_share: float = 0.3,
        inflation_rate: float = DEFAULT_INFLATION_RATE,
    ):
        if not 0.0 <= variable_rate_share <= 1.0:
            raise ValueError(f"variable_rate_share must be in [0, 1], got {variable_rate_share!r}")
        self.num_loans_range = num_loans_range
        self.principal_range = principal_range
        self.rate_range = rate_range
        self.days_range = days_range
        self.late_fee_range = late_fee_range
        self.variable_rate_share = variable_rate_share
        self.inflation_rate = inflation_rate

    def sample(self, rng: np.random.Generator | None = None) -> SchedulerConfig:
        """Sample a random loan portfolio.

        Args:
            rng: Numpy random Generator for reproducibility.

        Returns:
            A randomized SchedulerConfig.
        """
        if rng is None:
            rng = np.random.default_rng()

        num_loans = int(rng.integers(self.num_loans_range[0], self.num_loans_range[1] + 1))

        # Pick unique loan names
        name_indices = rng.choice(len(_LOAN_NAMES), size=num_loans, replace=False)
        names = [_LOAN_NAMES[i] for i in name_indices]

        loans = []
        for name in names:
            variable = bool(rng.random() < self.variable_rate_share)
            loans.append(
                LoanConfig(
                    name=name,
                    principal=round(float(rng.uniform(*self.principal_range)), 2),
                    annual_rate=round(float(rng.uniform(*self.rate_range)), 2),
                    days_until_due=int(rng.integers(self.days_range[0], self.days_range[1] + 1)),
                    late_fee=round(float(rng.uniform(*self.late_fee_range)), 2),
                    credit_factor=round(float(rng.uniform(0.0, 1.0)), 2),
                    variable_rate=variable,
                    inflation_sensitivity=round(float(rng.uniform(0.0, 1.0)), 2) if variable else 0.0,
                )
            )

        return SchedulerConfig(loans=loans, inflation_rate=self.inflation_rate)

    @staticmethod
    def preset(name: str) -> SchedulerConfig:
        """Return a named preset portfolio for reproducible experiments.

        Available presets:
            - "two_loan_example": near-due high-fee loan vs. far-out low-fee loan
            - "ranking_flip": a large interest-driven loan that drops below a
              credit-sensitive loan once it is partly paid down
            - "variable_rate_mix": fixed and variable-rate loans side by side

        Args:
            name: Preset name.

        Returns:
            SchedulerConfig for the named scenario.

        Raises:
            ValueError: If preset name is unknown.
        """
        presets = {
            "two_loan_example": SchedulerConfig(
                loans=[
                    LoanConfig("Loan A", principal=10000, annual_rate=12, days_until_due=3,
                               late_fee=500, credit_factor=0.5),
                    LoanConfig("Loan B", principal=5000, annual_rate=8, days_until_due=60,
                               late_fee=100, credit_factor=0.2),
                ],
                inflation_rate=0.05,
            ),
            "ranking_flip": SchedulerConfig(
                loans=[
                    LoanConfig("Home Loan", principal=500000, annual_rate=18, days_until_due=30),
                    LoanConfig("Store Card", principal=1000, annual_rate=0, days_until_due=30,
                               credit_factor=1.0),
                ],
                inflation_rate=0.05,
            ),
            "variable_rate_mix": SchedulerConfig(
                loans=[
                    LoanConfig("Home Loan", principal=2500000, annual_rate=8.5, days_until_due=20,
                               late_fee=1000, credit_factor=0.6, variable_rate=True,
                               inflation_sensitivity=0.8),
                    LoanConfig("Car Loan", principal=450000, annual_rate=9.5, days_until_due=12,
                               late_fee=750, credit_factor=0.4),
                    LoanConfig("Credit Card", principal=60000, annual_rate=36, days_until_due=4,
                               late_fee=1200, credit_factor=0.9),
                    LoanConfig("Education Loan", principal=800000, annual_rate=10.5,
                               days_until_due=45, late_fee=500, credit_factor=0.3,
                               variable_rate=True, inflation_sensitivity=0.5),
                ],
                inflation_rate=0.06,
            ),
        }

        if name not in presets:
            valid = ", ".join(sorted(presets.keys()))
            raise ValueError(f"Unknown preset {name!r}. Valid: {valid}")

        return presets[name]
