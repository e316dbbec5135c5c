"""YAML configuration loader and dataclasses for scheduler setup."""

from __future__ import annotations

import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loan_scheduler.engine.scheduler import DEFAULT_INFLATION_RATE, AdaptiveScheduler
from loan_scheduler.engine.scoring import Loan


def _resolve_config_path(path: str | Path) -> Path:
    """Resolve a config path, anchoring relative paths to the project root.

    The project root is identified as the nearest ancestor directory that
    contains ``pyproject.toml``.  If the file exists as-is (e.g. an absolute
    path or the CWD happens to be the project root already), it is returned
    unchanged.
    """
    p = Path(path)
    if p.is_absolute() or p.exists():
        return p

    here = Path(__file__).resolve()
    for parent in here.parents:
        if (parent / "pyproject.toml").exists():
            # Returned even if missing so open() raises a descriptive FileNotFoundError
            return parent / p

    return p


def _read_yaml(path: str | Path) -> dict[str, Any]:
    path = _resolve_config_path(path)
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"Expected a mapping at the top of {path}, got {type(raw).__name__}")
    return raw


@dataclass
class LoanConfig:
    """Configuration for a single loan (ids are assigned when the scheduler is built)."""

    name: str = "Loan"
    principal: float = 10000.0
    annual_rate: float = 10.0
    days_until_due: int = 30
    late_fee: float = 0.0
    credit_factor: float = 0.0
    variable_rate: bool = False
    inflation_sensitivity: float = 0.0

    def to_loan(self, loan_id: int) -> Loan:
        return Loan(
            id=loan_id,
            name=self.name,
            principal=self.principal,
            annual_rate=self.annual_rate,
            days_until_due=self.days_until_due,
            late_fee=self.late_fee,
            credit_factor=self.credit_factor,
            variable_rate=self.variable_rate,
            inflation_sensitivity=self.inflation_sensitivity,
        )


@dataclass
class SchedulerConfig:
    """Full session configuration."""

    loans: list[LoanConfig] = field(default_factory=list)
    inflation_rate: float = DEFAULT_INFLATION_RATE
    currency_symbol: str = "₹"

    @property
    def num_loans(self) -> int:
        return len(self.loans)

    @property
    def total_initial_principal(self) -> float:
        return sum(lc.principal for lc in self.loans)


def _parse_loan(entry: dict[str, Any]) -> LoanConfig:
    if not isinstance(entry, dict) or "name" not in entry:
        raise ValueError(f"Each loan entry needs at least a name, got {entry!r}")
    return LoanConfig(
        name=str(entry["name"]),
        principal=float(entry.get("principal", 10000.0)),
        annual_rate=float(entry.get("annual_rate", 10.0)),
        days_until_due=int(entry.get("days_until_due", 30)),
        late_fee=float(entry.get("late_fee", 0.0)),
        credit_factor=float(entry.get("credit_factor", 0.0)),
        variable_rate=bool(entry.get("variable_rate", False)),
        inflation_sensitivity=float(entry.get("inflation_sensitivity", 0.0)),
    )


def load_scheduler_config(path: str | Path) -> SchedulerConfig:
    """Load a SchedulerConfig from a YAML file.

    Args:
        path: Path to a YAML config file (e.g., configs/default.yaml).

    Returns:
        Populated SchedulerConfig instance.
    """
    raw = _read_yaml(path)

    return SchedulerConfig(
        loans=[_parse_loan(entry) for entry in raw.get("loans", []) or []],
        inflation_rate=float(raw.get("inflation_rate", DEFAULT_INFLATION_RATE)),
        currency_symbol=str(raw.get("currency_symbol", "₹")),
    )


def load_simulation_config(path: str | Path) -> dict[str, Any]:
    """Load the batch simulation protocol from a YAML file.

    Returns a plain dict since the protocol is only read by the simulation script.
    """
    return _read_yaml(path)


def build_scheduler(config: SchedulerConfig) -> AdaptiveScheduler:
    """Create a scheduler preloaded with the configured loans (ids 1..n)."""
    scheduler = AdaptiveScheduler(inflation_rate=config.inflation_rate)
    for loan_id, loan_cfg in enumerate(config.loans, start=1):
        scheduler.add_loan(loan_cfg.to_loan(loan_id))
    return scheduler
