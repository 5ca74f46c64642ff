# backend/modules/payroll/__init__.py

"""
Payroll Module

Monthly salary processing for salon staff with:
- Pro-rated base salary from attendance hours and position target hours
- Position overtime and extra-day rates with tenant defaults
- Cash advance ledger deducted from salary
- Sales incentives and payout claims
"""

__version__ = "1.0.0"
