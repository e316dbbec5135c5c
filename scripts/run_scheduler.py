"""Interactive loan scheduler session.

Usage:
    python scripts/run_scheduler.py                              # Empty session, 5% inflation
    python scripts/run_scheduler.py --config configs/default.yaml
    python scripts/run_scheduler.py --inflation 0.06 --log-level DEBUG
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from loan_scheduler.engine.scheduler import AdaptiveScheduler
from loan_scheduler.shell import SchedulerShell
from loan_scheduler.utils.config import build_scheduler, load_scheduler_config


def main():
    parser = argparse.ArgumentParser(description="Adaptive loan repayment scheduler")
    parser.add_argument("--config", type=str, default=None, help="YAML file with loans to preload")
    parser.add_argument("--inflation", type=float, default=None, help="Override inflation rate")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level")
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    currency = "₹"
    if args.config:
        config = load_scheduler_config(args.config)
        if args.inflation is not None:
            config.inflation_rate = args.inflation
        scheduler = build_scheduler(config)
        currency = config.currency_symbol
        print(f"Loaded {config.num_loans} loan(s) from {args.config}")
    else:
        if args.inflation is not None:
            scheduler = AdaptiveScheduler(inflation_rate=args.inflation)
        else:
            scheduler = AdaptiveScheduler()

    SchedulerShell(scheduler, currency_symbol=currency).run()


if __name__ == "__main__":
    main()
