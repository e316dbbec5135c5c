"""Adaptive loan repayment scheduler."""

__version__ = "0.1.0"
