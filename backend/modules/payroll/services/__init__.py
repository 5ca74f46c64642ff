"""Payroll services module."""

from .payroll_engine import compute_salary
from .rate_resolver import resolve_rates

__all__ = [
    'compute_salary',
    'resolve_rates',
]
