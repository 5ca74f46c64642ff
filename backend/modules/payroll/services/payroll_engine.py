"""
Salary computation for one staff member and month.

Base pay is pro-rated on regular (non-overtime) hours against the
position's monthly target hours; overtime, extra days and manual
adjustments are added on top; the month's approved advances are deducted.

This module is pure: no database access, no clock.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from .rate_resolver import RateSet
from ..exceptions import PayrollConfigurationError, PayrollValidationError

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_money(value: Decimal) -> Decimal:
    """Round to cents, half up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class StaffContract:
    """Contract terms the computation needs."""
    staff_id: int
    position: str
    fixed_salary: Decimal


@dataclass(frozen=True)
class AttendanceHours:
    """Worked and overtime hours for the month."""
    total_working_hours: Decimal
    total_overtime_hours: Decimal


@dataclass(frozen=True)
class ManualInputs:
    """
    Operator supplied values.

    ``ot_hours`` left as None or zero falls back to the overtime hours
    recorded by attendance.
    """
    ot_hours: Optional[Decimal] = None
    extra_days: int = 0
    addition: Decimal = ZERO
    deduction: Decimal = ZERO


@dataclass(frozen=True)
class SalaryBreakdown:
    """Every quantity of one salary computation."""
    fixed_salary: Decimal
    target_hours: int
    total_working_hours: Decimal
    regular_hours: Decimal
    hourly_rate: Decimal
    base_salary: Decimal
    ot_hours: Decimal
    ot_rate: Decimal
    ot_amount: Decimal
    extra_days: int
    extra_day_rate: Decimal
    extra_day_pay: Decimal
    addition: Decimal
    deduction: Decimal
    advance_deducted: Decimal

    @property
    def total_earnings(self) -> Decimal:
        return self.base_salary + self.ot_amount + self.extra_day_pay + self.addition

    @property
    def total_deductions(self) -> Decimal:
        return self.deduction + self.advance_deducted

    @property
    def net_salary(self) -> Decimal:
        return self.total_earnings - self.total_deductions

    def as_record_values(self) -> dict:
        """Column values for a SalaryRecord."""
        return {
            "fixed_salary": self.fixed_salary,
            "target_hours": self.target_hours,
            "total_working_hours": self.total_working_hours,
            "regular_hours": self.regular_hours,
            "hourly_rate": self.hourly_rate,
            "base_salary": self.base_salary,
            "ot_hours": self.ot_hours,
            "ot_rate": self.ot_rate,
            "ot_amount": self.ot_amount,
            "extra_days": self.extra_days,
            "extra_day_rate": self.extra_day_rate,
            "extra_day_pay": self.extra_day_pay,
            "addition": self.addition,
            "deduction": self.deduction,
            "advance_deducted": self.advance_deducted,
            "total_earnings": self.total_earnings,
            "total_deductions": self.total_deductions,
            "net_salary": self.net_salary,
        }


def _require_non_negative(name: str, value) -> None:
    if value is None or value < 0:
        raise PayrollValidationError(f"{name} must be non-negative", field=name)


def compute_salary(
    contract: StaffContract,
    target_hours: Optional[int],
    attendance: AttendanceHours,
    approved_advance_total: Decimal,
    manual_inputs: ManualInputs,
    rates: RateSet,
    previous_advance_deducted: Optional[Decimal] = None,
) -> SalaryBreakdown:
    """
    Compute the salary breakdown for one staff member and month.

    Args:
        contract: Staff contract terms
        target_hours: Monthly required hours for the contract's position
        attendance: Month's worked and overtime hours
        approved_advance_total: Approved advances attributable to the month
        manual_inputs: Operator overrides and adjustments
        rates: Resolved overtime and extra-day rates
        previous_advance_deducted: Advance stored on an existing record;
            when given it replaces ``approved_advance_total``

    Returns:
        SalaryBreakdown

    Raises:
        PayrollConfigurationError: target hours missing or zero
        PayrollValidationError: a negative input
    """
    if not target_hours or target_hours <= 0:
        raise PayrollConfigurationError(contract.position)

    _require_non_negative("fixed_salary", contract.fixed_salary)
    _require_non_negative("total_working_hours", attendance.total_working_hours)
    _require_non_negative("total_overtime_hours", attendance.total_overtime_hours)
    _require_non_negative("approved_advance_total", approved_advance_total)
    _require_non_negative("extra_days", manual_inputs.extra_days)
    _require_non_negative("addition", manual_inputs.addition)
    _require_non_negative("deduction", manual_inputs.deduction)
    _require_non_negative("ot_rate", rates.ot_rate)
    _require_non_negative("extra_day_rate", rates.extra_day_rate)
    if manual_inputs.ot_hours is not None:
        _require_non_negative("ot_hours", manual_inputs.ot_hours)
    if previous_advance_deducted is not None:
        _require_non_negative("previous_advance_deducted", previous_advance_deducted)

    fixed_salary = Decimal(contract.fixed_salary)
    regular_hours = max(
        ZERO, Decimal(attendance.total_working_hours) - Decimal(attendance.total_overtime_hours)
    )
    hourly_rate = fixed_salary / Decimal(target_hours)
    base_salary = to_money(hourly_rate * regular_hours)

    ot_hours = manual_inputs.ot_hours or Decimal(attendance.total_overtime_hours)
    ot_amount = to_money(Decimal(ot_hours) * Decimal(rates.ot_rate))
    extra_day_pay = to_money(Decimal(manual_inputs.extra_days) * Decimal(rates.extra_day_rate))

    if previous_advance_deducted is not None:
        advance_deducted = Decimal(previous_advance_deducted)
    else:
        advance_deducted = Decimal(approved_advance_total)

    return SalaryBreakdown(
        fixed_salary=fixed_salary,
        target_hours=int(target_hours),
        total_working_hours=Decimal(attendance.total_working_hours),
        regular_hours=regular_hours,
        hourly_rate=hourly_rate,
        base_salary=base_salary,
        ot_hours=Decimal(ot_hours),
        ot_rate=Decimal(rates.ot_rate),
        ot_amount=ot_amount,
        extra_days=int(manual_inputs.extra_days),
        extra_day_rate=Decimal(rates.extra_day_rate),
        extra_day_pay=extra_day_pay,
        addition=to_money(Decimal(manual_inputs.addition)),
        deduction=to_money(Decimal(manual_inputs.deduction)),
        advance_deducted=to_money(advance_deducted),
    )
